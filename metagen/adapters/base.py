"""
Runner base — the protocol contract between generators and processes.

Generators never spawn processes themselves. They hand a command line
to a ProcessRunner and get back a RunResult: the captured stdout bytes,
the exit status, and any runner-level error (spawn failure, timeout).
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from pydantic import BaseModel


class RunResult(BaseModel):
    """Outcome of a single command execution.

    stdout is kept as raw bytes. Decoding it is the caller's concern.
    stderr is captured separately and never mixed into stdout.
    """

    command: str
    stdout: bytes = b""
    stderr: str = ""
    exit_code: int = 0
    error: str | None = None   # runner-level failure, exit_code is meaningless
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        """Whether the command ran and exited with status 0."""
        return self.error is None and self.exit_code == 0


class ProcessRunner(ABC):
    """Abstract base class for command runners.

    Runners NEVER raise for command failures. Every outcome, including
    "could not start at all", is captured in the RunResult.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def run(self, command: str) -> RunResult:
        """Execute the command line and return its result."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
