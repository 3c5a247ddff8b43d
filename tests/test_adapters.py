"""
Tests for the runner protocol, mock runner, and shell runner.
"""

from pathlib import Path

from metagen.adapters.base import RunResult
from metagen.adapters.mock import MockRunner
from metagen.adapters.shell.command import ShellCommandRunner

# ── RunResult ───────────────────────────────────────────────────────


class TestRunResult:
    def test_ok(self):
        assert RunResult(command="x").ok

    def test_non_zero_not_ok(self):
        assert not RunResult(command="x", exit_code=2).ok

    def test_error_not_ok(self):
        assert not RunResult(command="x", error="spawn failed").ok


# ── Mock Runner ─────────────────────────────────────────────────────


class TestMockRunner:
    def test_default_output(self):
        mock = MockRunner()
        result = mock.run("anything")
        assert result.ok
        assert result.stdout == b"{}"
        assert mock.call_count == 1

    def test_set_output_str(self):
        mock = MockRunner()
        mock.set_output("cmd", '{"a": 1}')
        assert mock.run("cmd").stdout == b'{"a": 1}'

    def test_set_failure(self):
        mock = MockRunner()
        mock.set_failure("cmd", exit_code=4, stderr="nope")
        result = mock.run("cmd")
        assert result.exit_code == 4
        assert result.stderr == "nope"

    def test_set_error(self):
        mock = MockRunner()
        mock.set_error("cmd", "no shell")
        assert mock.run("cmd").error == "no shell"

    def test_reset(self):
        mock = MockRunner()
        mock.set_failure("cmd")
        mock.run("cmd")
        mock.reset()
        assert mock.call_count == 0
        assert mock.run("cmd").ok

    def test_repr(self):
        assert "mock" in repr(MockRunner())


# ── Shell Runner ────────────────────────────────────────────────────


class TestShellCommandRunner:
    def test_captures_stdout_bytes(self):
        result = ShellCommandRunner().run("printf 'hello'")
        assert result.ok
        assert result.stdout == b"hello"

    def test_exit_code(self):
        result = ShellCommandRunner().run("exit 7")
        assert result.exit_code == 7
        assert result.error is None

    def test_stderr_separate(self):
        result = ShellCommandRunner().run("echo out; echo err >&2")
        assert result.stdout == b"out\n"
        assert result.stderr == "err"

    def test_shell_features(self):
        result = ShellCommandRunner().run("echo a b | tr ' ' ','")
        assert result.stdout == b"a,b\n"

    def test_timeout(self):
        result = ShellCommandRunner(timeout=0.2).run("sleep 5")
        assert not result.ok
        assert "timed out" in result.error

    def test_env(self):
        result = ShellCommandRunner(env={"METAGEN_TEST_VAR": "xyz"}).run(
            'printf "$METAGEN_TEST_VAR"'
        )
        assert result.stdout == b"xyz"

    def test_cwd(self, tmp_path: Path):
        result = ShellCommandRunner(cwd=str(tmp_path)).run("pwd")
        assert Path(result.stdout.decode().strip()).resolve() == tmp_path.resolve()

    def test_bad_cwd_is_runner_error(self, tmp_path: Path):
        result = ShellCommandRunner(cwd=str(tmp_path / "missing")).run("true")
        assert result.error is not None
        assert "execution error" in result.error
