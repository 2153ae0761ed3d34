#
# tests/unit/test_cli.py
#
"""
Tests for the treescout command line interface.
"""

import json
import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

from treescout.cli.main import cli
from treescout.cli.utils import LoggingSettings
from treescout.config import GlobalConfig, TreescoutConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ("TREESCOUT_CONF", "TREESCOUT_LOG_LEVEL", "TREESCOUT_LOG_FILE", "TREESCOUT_JSON_LOGS", "TREESCOUT_ENGINE_ID"):
        monkeypatch.delenv(name, raising=False)
    yield
    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        handler.close()
        root_logger.removeHandler(handler)


class TestMainCLI:
    """Test main CLI entry point."""

    def test_cli_help(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "treescout" in result.output.lower()
        assert "discover" in result.output
        assert "config" in result.output

    def test_cli_version(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert "version" in result.output.lower()

    def test_invalid_log_level_rejected(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["--log-level", "INVALID", "discover", "--help"])

        assert result.exit_code != 0

    def test_log_file_option(self, tmp_path: Path, sample_root: Path) -> None:
        log_file = tmp_path / "treescout.log"
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--log-file", str(log_file), "--log-level", "INFO", "discover", "-k", "acme.b.TestCalculator"]
        )

        assert result.exit_code == 0
        assert "Discovery finished" in log_file.read_text()

    def test_default_level_keeps_info_out_of_log_file(self, tmp_path: Path, sample_root: Path) -> None:
        log_file = tmp_path / "treescout.log"
        runner = CliRunner()
        result = runner.invoke(cli, ["--log-file", str(log_file), "discover", "-k", "acme.b.TestCalculator"])

        assert result.exit_code == 0
        assert "Discovery finished" not in log_file.read_text()

    def test_config_file_sets_log_level(self, tmp_path: Path, sample_root: Path) -> None:
        log_file = tmp_path / "treescout.log"
        config_path = tmp_path / "treescout.toml"
        config_path.write_text('[global]\nlog_level = "INFO"\n', encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(
            cli, ["--log-file", str(log_file), "discover", "-c", str(config_path), "-k", "acme.b.TestCalculator"]
        )

        assert result.exit_code == 0
        assert "Discovery finished" in log_file.read_text()


class TestLoggingSettings:
    def test_flag_wins_over_config(self) -> None:
        config = TreescoutConfig(global_config=GlobalConfig(log_level="debug"))

        assert LoggingSettings(level="error").effective_level(config) == "ERROR"

    def test_config_level_used_without_flag(self) -> None:
        config = TreescoutConfig(global_config=GlobalConfig(log_level="debug"))

        assert LoggingSettings().effective_level(config) == "DEBUG"

    def test_default_without_flag_or_config(self) -> None:
        assert LoggingSettings().effective_level() == "WARNING"


class TestDiscoverCommand:
    def test_tree_output(self, sample_root: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["discover", "-k", "acme.b.TestCalculator"])

        assert result.exit_code == 0
        assert "[engine:treescout/package:acme/package:acme.b/class:TestCalculator]" in result.stdout
        assert "test_add" in result.stdout
        assert "test_sub" in result.stdout
        assert "2 test(s) discovered." in result.stdout

    def test_json_output(self, sample_root: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            ["discover", "--package", "shop", "--exclude-class", "TestLegacy", "--json"],
        )

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["root"]["unique_id"] == "engine:treescout"
        assert payload["counts"]["MethodTestDescriptor"] == 3
        assert "NestedClassTestDescriptor" not in payload["counts"]
        assert payload["unresolved_selectors"] == []

    def test_method_and_unique_id_selectors(self, sample_root: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(
            cli,
            [
                "discover",
                "-m",
                "acme.nesting.TestOuter#test_outer",
                "-u",
                "engine:treescout/package:acme/package:acme.sub",
                "--json",
            ],
        )

        assert result.exit_code == 0
        counts = json.loads(result.stdout)["counts"]
        assert counts["MethodTestDescriptor"] == 2

    def test_path_selector(self, sample_root: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["discover", "--path", str(sample_root), "--include-package", "acme.sub"])

        assert result.exit_code == 0
        assert "1 test(s) discovered." in result.stdout

    def test_unresolved_selector_warns(self, sample_root: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["discover", "-p", "acme.nothing_here"])

        assert result.exit_code == 0
        assert "Warning: selector 'package:acme.nothing_here' matched nothing" in result.output
        assert "0 test(s) discovered." in result.stdout

    def test_fail_if_empty(self, sample_root: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["discover", "-p", "acme.notests", "--fail-if-empty"])

        assert result.exit_code == 1

    def test_invalid_selector_is_an_error(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["discover", "-u", "engine:treescout//class:X"])

        assert result.exit_code == 2
        assert "Error: " in result.output
        assert "Malformed unique id" in result.output

    def test_invalid_class_pattern_is_an_error(self, sample_root: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["discover", "-p", "acme", "--include-class", "Test["])

        assert result.exit_code == 2
        assert "Invalid class name pattern" in result.output

    def test_no_selectors_is_a_usage_error(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["discover"])

        assert result.exit_code == 2
        assert "No selectors given" in result.output

    def test_selection_from_config_file(self, sample_root: Path, tmp_path: Path) -> None:
        config_path = tmp_path / "treescout.toml"
        config_path.write_text(
            '[discovery]\nengine_id = "py"\n\n[selection]\nclasses = ["acme.sub.deep.TestDeep"]\n',
            encoding="utf-8",
        )
        runner = CliRunner()
        result = runner.invoke(cli, ["discover", "-c", str(config_path), "--json"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["root"]["unique_id"] == "engine:py"
        assert payload["counts"]["MethodTestDescriptor"] == 1


class TestConfigCommands:
    def test_config_show_help(self) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show", "--help"])

        assert result.exit_code == 0
        assert "load, validate, and display the configuration" in result.output.lower()

    def test_config_show(self, tmp_path: Path) -> None:
        config_path = tmp_path / "treescout.toml"
        config_path.write_text('[discovery]\nengine_id = "shown"\n', encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show", "-c", str(config_path)])

        assert result.exit_code == 0
        assert "TreescoutConfig" in result.stdout
        assert "'shown'" in result.stdout

    def test_config_show_invalid(self, tmp_path: Path) -> None:
        config_path = tmp_path / "treescout.toml"
        config_path.write_text("[discovery]\nunknown_key = 1\n", encoding="utf-8")
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show", "-c", str(config_path)])

        assert result.exit_code == 1
        assert "Configuration problem" in result.output

    def test_config_show_missing_file(self, tmp_path: Path) -> None:
        runner = CliRunner()
        result = runner.invoke(cli, ["config", "show", "-c", str(tmp_path / "missing.toml")])

        assert result.exit_code != 0
