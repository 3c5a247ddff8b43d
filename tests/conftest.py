"""
Shared test fixtures and configuration.
"""

import logging
import textwrap
from pathlib import Path

import pytest

from metagen.adapters.mock import MockRunner


@pytest.fixture
def mock_runner() -> MockRunner:
    """Return a fresh scripted runner."""
    return MockRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Create a metagen.yml with two shell plugins."""
    content = textwrap.dedent("""\
        state_dir: state
        metadata_plugins:
          hostinfo:
            command: printf '%s' '{"hostname":"web-1","roles":["app","db"]}'
            execution_interval: 30
          version:
            command: printf '"1.2.3"'
    """)
    path = tmp_path / "metagen.yml"
    path.write_text(content)
    return path


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """setup_logging() replaces root handlers; put pytest's back afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    raise_exceptions = logging.raiseExceptions
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.raiseExceptions = raise_exceptions
