"""
Shell command runner — execute a command line through /bin/sh.

The whole command line is handed to the shell as-is, so quoting,
pipes and redirections behave exactly as the operator wrote them.
"""

from __future__ import annotations

import logging
import os
import subprocess
import time

from metagen.adapters.base import ProcessRunner, RunResult

logger = logging.getLogger(__name__)


class ShellCommandRunner(ProcessRunner):
    """Run commands through the shell and capture stdout as bytes.

    Args:
        timeout: Seconds before the child is killed (default: no limit).
        env: Extra environment variables layered over the current ones.
        cwd: Working directory for the child (default: inherited).
    """

    def __init__(
        self,
        timeout: float | None = None,
        env: dict[str, str] | None = None,
        cwd: str | None = None,
    ):
        self._timeout = timeout
        self._env = dict(env or {})
        self._cwd = cwd

    @property
    def name(self) -> str:
        return "shell"

    def _child_env(self) -> dict[str, str] | None:
        if not self._env:
            return None
        merged = dict(os.environ)
        merged.update(self._env)
        return merged

    def run(self, command: str) -> RunResult:
        logger.debug("Executing: %s (timeout=%s)", command, self._timeout)
        start = time.monotonic()

        try:
            result = subprocess.run(
                command,
                shell=True,
                cwd=self._cwd,
                env=self._child_env(),
                stdin=subprocess.DEVNULL,
                capture_output=True,
                timeout=self._timeout,
            )
        except subprocess.TimeoutExpired:
            return RunResult(
                command=command,
                error=f"Command timed out after {self._timeout}s",
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        except (OSError, ValueError) as e:
            return RunResult(
                command=command,
                error=f"Command execution error: {e}",
                duration_ms=int((time.monotonic() - start) * 1000),
            )

        return RunResult(
            command=command,
            stdout=result.stdout,
            stderr=result.stderr.decode("utf-8", errors="replace").strip(),
            exit_code=result.returncode,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
