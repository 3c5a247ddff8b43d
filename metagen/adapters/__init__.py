"""Adapters — process runners for external metadata commands.

Public re-exports for convenient access.
"""

from metagen.adapters.base import ProcessRunner, RunResult
from metagen.adapters.mock import MockRunner
from metagen.adapters.shell.command import ShellCommandRunner

__all__ = [
    "MockRunner",
    "ProcessRunner",
    "RunResult",
    "ShellCommandRunner",
]
