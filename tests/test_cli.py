"""
Tests for CLI commands — config check, plugins, fetch, run, global options.
"""

import json
from pathlib import Path

from click.testing import CliRunner

from metagen.main import cli


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "metagen" in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestConfigCheckCommand:
    def test_valid(self, config_file: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "config", "check"])
        assert result.exit_code == 0
        assert "valid" in result.output

    def test_json(self, config_file: Path):
        result = CliRunner().invoke(
            cli, ["--config", str(config_file), "config", "check", "--json"]
        )
        assert result.exit_code == 0
        assert json.loads(result.output)["plugin_count"] == 2

    def test_missing_config(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = CliRunner().invoke(cli, ["config", "check"])
        assert result.exit_code == 1
        assert "No metagen.yml found" in result.output


class TestPluginsCommand:
    def test_lists_intervals(self, config_file: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "plugins", "--json"])
        assert result.exit_code == 0
        rows = {r["name"]: r["interval_minutes"] for r in json.loads(result.output)}
        assert rows == {"hostinfo": 30, "version": 10}

    def test_text(self, config_file: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "plugins"])
        assert result.exit_code == 0
        assert "every 30m" in result.output


class TestFetchCommand:
    def test_fetch_json(self, config_file: Path):
        result = CliRunner().invoke(
            cli, ["--config", str(config_file), "fetch", "version", "--json"]
        )
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["plugins"][0]["value"] == "1.2.3"

    def test_fetch_text(self, config_file: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "fetch"])
        assert result.exit_code == 0
        assert "hostinfo" in result.output
        assert "web-1" in result.output

    def test_fetch_failure_exit_code(self, tmp_path: Path):
        config = tmp_path / "metagen.yml"
        config.write_text("metadata_plugins:\n  bad:\n    command: echo foobar\n")
        result = CliRunner().invoke(cli, ["--config", str(config), "fetch"])
        assert result.exit_code == 1
        assert "ParseError" in result.output

    def test_unknown_plugin(self, config_file: Path):
        result = CliRunner().invoke(cli, ["--config", str(config_file), "fetch", "nope"])
        assert result.exit_code == 1
        assert "Unknown metadata plugins" in result.output


class TestRunCommand:
    def test_changed_then_unchanged(self, config_file: Path):
        runner = CliRunner()
        first = runner.invoke(cli, ["--config", str(config_file), "run", "--json"])
        assert first.exit_code == 0
        assert {p["status"] for p in json.loads(first.output)["plugins"]} == {"changed"}

        second = runner.invoke(cli, ["--config", str(config_file), "run"])
        assert second.exit_code == 0
        assert "unchanged" in second.output
        assert (config_file.parent / "state" / "hostinfo.json").is_file()

    def test_no_save(self, config_file: Path, tmp_path: Path):
        state = tmp_path / "elsewhere"
        result = CliRunner().invoke(
            cli,
            ["--config", str(config_file), "run", "--no-save", "--state-dir", str(state)],
        )
        assert result.exit_code == 0
        assert not state.exists()
