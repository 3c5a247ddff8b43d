"""
Mock runner — scripted test double for command execution.

Returns canned stdout / exit codes per command line without spawning
anything. Used by the test suite.
"""

from __future__ import annotations

from metagen.adapters.base import ProcessRunner, RunResult


class MockRunner(ProcessRunner):
    """Scripted runner for testing.

    By default every command exits 0 with ``default_stdout``. Individual
    commands can be scripted with set_output / set_failure / set_error.
    """

    def __init__(self, default_stdout: bytes = b"{}"):
        self._default_stdout = default_stdout
        self._responses: dict[str, RunResult] = {}
        self._call_log: list[str] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[str]:
        """All command lines this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_output(self, command: str, stdout: bytes | str, exit_code: int = 0) -> None:
        """Script the stdout and exit status for a command."""
        if isinstance(stdout, str):
            stdout = stdout.encode("utf-8")
        self._responses[command] = RunResult(
            command=command, stdout=stdout, exit_code=exit_code
        )

    def set_failure(self, command: str, exit_code: int = 1, stderr: str = "") -> None:
        """Configure a command to exit non-zero."""
        self._responses[command] = RunResult(
            command=command, exit_code=exit_code, stderr=stderr
        )

    def set_error(self, command: str, error: str = "Mock runner error") -> None:
        """Configure a command to fail before it even runs."""
        self._responses[command] = RunResult(command=command, error=error)

    def run(self, command: str) -> RunResult:
        self._call_log.append(command)

        if command in self._responses:
            return self._responses[command]

        return RunResult(command=command, stdout=self._default_stdout)

    def reset(self) -> None:
        """Clear call log and scripted responses."""
        self._call_log.clear()
        self._responses.clear()
