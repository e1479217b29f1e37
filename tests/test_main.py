from __future__ import annotations

import sys
from unittest.mock import MagicMock, patch

import pytest

from modkeeper.__main__ import _print_startup_error, main


@pytest.mark.unit
class TestMain:
    """Tests for main() entry point function."""

    @pytest.mark.parametrize(
        "exit_code",
        [0, 1, 130],
        ids=["current", "outdated-or-error", "interrupted"],
    )
    def test_main_returns_cli_exit_code(self, exit_code: int) -> None:
        """Test main returns exit code from cli_main when import succeeds."""
        mock_cli_module = MagicMock()
        mock_cli_module.main = MagicMock(return_value=exit_code)

        with patch.dict("sys.modules", {"modkeeper.cli": mock_cli_module}):
            result = main()

        assert result == exit_code
        mock_cli_module.main.assert_called_once_with()

    def test_main_import_error_returns_one(self, capsys: pytest.CaptureFixture) -> None:
        """Test main returns 1 and explains itself when the CLI cannot be imported."""
        with patch.dict("sys.modules", {"modkeeper.cli": None}):
            result = main()

        assert result == 1
        captured = capsys.readouterr()
        assert "modkeeper could not start." in captured.err
        assert "ImportError:" in captured.err


@pytest.mark.unit
class TestPrintStartupError:
    """Tests for _print_startup_error helper function."""

    def test_print_startup_error_with_version(self, capsys: pytest.CaptureFixture) -> None:
        """Test _print_startup_error prints version when available."""
        mock_version_module = MagicMock(__version__="1.2.3")

        with patch.dict(sys.modules, {"modkeeper.__version__": mock_version_module}):
            _print_startup_error(ImportError("No module named 'semver'"))

        captured = capsys.readouterr()
        assert "modkeeper version: 1.2.3" in captured.err
        assert "ImportError: No module named 'semver'" in captured.err
        assert "Python version" in captured.err

    def test_print_startup_error_without_version(self, capsys: pytest.CaptureFixture) -> None:
        """Test _print_startup_error falls back when the version is unavailable."""
        with patch.dict(sys.modules, {"modkeeper.__version__": None}):
            _print_startup_error(ImportError("broken"))

        assert "modkeeper version: <unknown>" in capsys.readouterr().err
