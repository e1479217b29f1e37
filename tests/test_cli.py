from __future__ import annotations

import os
import logging
from pathlib import Path
from unittest.mock import patch

import click
import pytest
from click.testing import CliRunner

from modkeeper.cli import cli, main
from modkeeper.__version__ import __version__
from modkeeper.exceptions import ModKeeperError


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.mark.unit
class TestCliGroup:
    """Tests for the top-level click group."""

    def test_help_lists_check(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])

        assert result.exit_code == 0
        assert "check" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])

        assert result.exit_code == 0
        assert result.output.strip() == f"modkeeper {__version__}"

    def test_invalid_config_file_exits_one(self, runner: CliRunner, tmp_path: Path) -> None:
        config_file = tmp_path / "modkeeper.toml"
        config_file.write_text("[modkeeper]\nmax_versions = 0\n", encoding="utf-8")

        result = runner.invoke(cli, ["--config", str(config_file), "check", "--help"])

        assert result.exit_code == 1
        assert "max_versions must be between 1 and 1000" in result.output

    def test_missing_config_file_is_usage_error(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["--config", str(tmp_path / "nope.toml"), "check"])

        assert result.exit_code == 2

    def test_config_from_environment(
        self, runner: CliRunner, tmp_path: Path
    ) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("[modkeeper]\nunknown_key = 1\n", encoding="utf-8")

        result = runner.invoke(
            cli, ["check", "--help"], env={"MODKEEPER_CONFIG": str(config_file)}
        )

        assert result.exit_code == 1
        assert "Unknown configuration keys" in result.output

    @pytest.mark.parametrize(
        "flags, level",
        [([], logging.WARNING), (["-v"], logging.INFO), (["-vv"], logging.DEBUG)],
    )
    def test_verbosity_sets_log_level(
        self, runner: CliRunner, tmp_path: Path, flags, level: int
    ) -> None:
        with patch("modkeeper.config.Path.cwd", return_value=tmp_path):
            runner.invoke(cli, [*flags, "check", "--help"])

        assert logging.getLogger("modkeeper").level == level

    def test_no_color_sets_environment(self, runner: CliRunner, tmp_path: Path) -> None:
        with patch("modkeeper.config.Path.cwd", return_value=tmp_path):
            runner.invoke(cli, ["--no-color", "check", "--help"])

        assert os.environ.get("NO_COLOR") == "1"


@pytest.mark.unit
class TestMainExitCodes:
    """Tests for main() translating outcomes into exit codes."""

    def test_returns_command_exit_code(self) -> None:
        with patch("modkeeper.cli.cli", return_value=1):
            assert main() == 1

    def test_none_result_is_success(self) -> None:
        with patch("modkeeper.cli.cli", return_value=None):
            assert main() == 0

    def test_usage_error(self) -> None:
        with patch("modkeeper.cli.cli", side_effect=click.UsageError("bad option")):
            assert main() == 2

    def test_abort(self) -> None:
        with patch("modkeeper.cli.cli", side_effect=click.exceptions.Abort()):
            assert main() == 130

    def test_keyboard_interrupt(self) -> None:
        with patch("modkeeper.cli.cli", side_effect=KeyboardInterrupt()):
            assert main() == 130

    def test_system_exit(self) -> None:
        with patch("modkeeper.cli.cli", side_effect=SystemExit(1)):
            assert main() == 1

    def test_modkeeper_error(self) -> None:
        with patch("modkeeper.cli.cli", side_effect=ModKeeperError("broken")):
            assert main() == 1

    def test_unexpected_error(self) -> None:
        with patch("modkeeper.cli.cli", side_effect=RuntimeError("bug")):
            assert main() == 1
