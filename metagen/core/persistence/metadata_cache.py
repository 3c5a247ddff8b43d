"""
Metadata cache — atomic read/write of the last committed metadata.

Each plugin's baseline is stored as JSON in <state_dir>/<name>.json so
an agent restart does not treat unchanged metadata as new. Writes are
atomic (write to temp file, then rename).
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


def cache_path(state_dir: Path, name: str) -> Path:
    """Get the cache file path for a plugin."""
    return state_dir / f"{name}.json"


def load_cache(path: Path) -> tuple[bool, Any]:
    """Load a cached metadata value.

    Returns:
        (found, value). A missing or unreadable file yields (False, None);
        a cached JSON null yields (True, None).
    """
    if not path.is_file():
        logger.debug("No metadata cache at %s", path)
        return False, None

    try:
        raw = path.read_text(encoding="utf-8")
        return True, json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("Corrupt metadata cache %s: %s — ignoring", path, e)
        return False, None
    except OSError as e:
        logger.warning("Cannot read metadata cache %s: %s — ignoring", path, e)
        return False, None


def save_cache(path: Path, value: Any) -> None:
    """Write a metadata value to the cache (atomic write).

    Raises:
        OSError: If the directory or file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(value, ensure_ascii=False, sort_keys=True, allow_nan=False) + "\n"

    fd, tmp_path = tempfile.mkstemp(
        dir=path.parent,
        prefix=".metadata_",
        suffix=".tmp",
    )
    tmp = Path(tmp_path)
    try:
        with open(fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        tmp.replace(path)
        logger.debug("Metadata cache saved to %s", path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise
