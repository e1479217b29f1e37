"""Tests for the ``modkeeper check`` command.

The module proxy is replaced with a mock so every test runs offline.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Generator, Iterable
from unittest.mock import AsyncMock, patch

import pytest
from click.testing import CliRunner

from modkeeper.cli import cli
from modkeeper.commands.check import chunk_versions, versions_per_row
from modkeeper.core.version_source import FetchResult
from modkeeper.exceptions import NetworkError

GOMOD = """module example.com/app

go 1.22

require (
\tgithub.com/a/b v1.2.0
\tgithub.com/c/d v1.0.0
\tgithub.com/e/f v1.0.0
\tgolang.org/x/sys v0.1.0 // indirect
)
"""

PUBLISHED = {
    "github.com/a/b": frozenset({"v1.1.0", "v1.2.0", "v1.2.1", "v1.3.0", "v2.0.0"}),
    "github.com/c/d": frozenset({"v1.0.0", "v1.0.1"}),
    "github.com/e/f": frozenset({"v0.9.0", "v1.0.0"}),
}


def _fetch_result(
    versions: Dict[str, Iterable[str]],
    failures: Dict[str, Exception] = None,
) -> FetchResult:
    return FetchResult(
        versions={path: frozenset(found) for path, found in versions.items()},
        failures=dict(failures or {}),
    )


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def project(tmp_path: Path) -> Generator[Path, None, None]:
    """A project directory with a go.mod and no modkeeper configuration."""
    (tmp_path / "go.mod").write_text(GOMOD, encoding="utf-8")
    with patch("modkeeper.config.Path.cwd", return_value=tmp_path):
        yield tmp_path


@pytest.fixture
def proxy_source():
    """Patch ModuleProxySource; ``fetch_all`` returns :data:`PUBLISHED`."""
    with patch("modkeeper.commands.check.ModuleProxySource") as source_cls:
        source_cls.return_value.fetch_all = AsyncMock(
            return_value=_fetch_result(PUBLISHED)
        )
        yield source_cls


def _invoke(runner: CliRunner, project: Path, *args: str):
    # Wide enough that Rich never wraps a row
    return runner.invoke(
        cli,
        ["--no-color", "check", str(project / "go.mod"), *args],
        env={"COLUMNS": "200"},
    )


@pytest.mark.unit
class TestCheckCommand:
    """End-to-end tests of the check command with a mocked proxy."""

    def test_outdated_modules_listed_worst_first(
        self, runner: CliRunner, project: Path, proxy_source
    ) -> None:
        result = _invoke(runner, project)

        assert result.exit_code == 1
        output = result.output
        assert "Available Versions" in output
        assert "github.com/a/b" in output
        assert "github.com/c/d" in output
        assert "github.com/e/f" not in output
        assert "golang.org/x/sys" not in output
        assert output.index("github.com/a/b") < output.index("github.com/c/d")
        assert "v2.0.0" in output
        assert "2 module(s) have newer versions available" in output

    def test_only_direct_requirements_are_fetched(
        self, runner: CliRunner, project: Path, proxy_source
    ) -> None:
        _invoke(runner, project)

        requested = list(proxy_source.return_value.fetch_all.call_args.args[0])
        assert requested == ["github.com/a/b", "github.com/c/d", "github.com/e/f"]

    def test_everything_current(
        self, runner: CliRunner, project: Path, proxy_source
    ) -> None:
        proxy_source.return_value.fetch_all.return_value = _fetch_result(
            {"github.com/a/b": ["v1.2.0"], "github.com/c/d": [], "github.com/e/f": []}
        )

        result = _invoke(runner, project)

        assert result.exit_code == 0
        assert "There are no newer versions that fulfill provided requirements." in result.output
        assert "Filter: major,minor,patch" in result.output

    def test_filter_limits_displayed_tiers(
        self, runner: CliRunner, project: Path, proxy_source
    ) -> None:
        result = _invoke(runner, project, "--filter", "patch", "--format", "simple")

        assert result.exit_code == 1
        assert "v1.2.1" in result.output
        assert "v1.0.1" in result.output
        assert "v1.3.0" not in result.output
        assert "v2.0.0" not in result.output

    def test_filter_that_hides_everything_reports_current(
        self, runner: CliRunner, project: Path, proxy_source
    ) -> None:
        proxy_source.return_value.fetch_all.return_value = _fetch_result(
            {"github.com/a/b": ["v2.0.0"]}
        )

        result = _invoke(runner, project, "--filter", "minor")

        assert result.exit_code == 0
        assert "Filter: minor" in result.output

    def test_incompatible_hidden_unless_requested(
        self, runner: CliRunner, project: Path, proxy_source
    ) -> None:
        proxy_source.return_value.fetch_all.return_value = _fetch_result(
            {"github.com/a/b": ["v3.0.0+incompatible"]}
        )

        hidden = _invoke(runner, project, "--format", "simple")
        shown = _invoke(runner, project, "--format", "simple", "--show-incompatible")

        assert hidden.exit_code == 0
        assert "v3.0.0+incompatible" not in hidden.output
        assert shown.exit_code == 1
        assert "v3.0.0+incompatible" in shown.output
        assert "[incompatible]" in shown.output

    def test_simple_format(
        self, runner: CliRunner, project: Path, proxy_source
    ) -> None:
        result = _invoke(runner, project, "--format", "simple")

        lines = [line for line in result.output.splitlines() if line[:2] in ("1.", "2.")]
        assert lines[0].startswith("1. github.com/a/b")
        assert "v1.2.1, v1.3.0, v2.0.0 [major]" in lines[0]
        assert lines[1].startswith("2. github.com/c/d")
        assert lines[1].endswith("[patch]")

    def test_json_format(
        self, runner: CliRunner, project: Path, proxy_source
    ) -> None:
        result = _invoke(runner, project, "--format", "json")

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert [entry["name"] for entry in data["outdated"]] == [
            "github.com/a/b",
            "github.com/c/d",
        ]
        first = data["outdated"][0]
        assert first["rank"] == 1
        assert first["current_version"] == "v1.2.0"
        assert first["worst_tier"] == "major"
        assert [v["tier"] for v in first["versions"]] == ["patch", "minor", "major"]
        assert first["tier_counts"] == {"patch": 1, "minor": 1, "major": 1}
        assert data["excluded"] == []
        assert data["fetch_failures"] == {}

    def test_json_format_with_no_direct_requirements(
        self, runner: CliRunner, tmp_path: Path, proxy_source
    ) -> None:
        gomod = tmp_path / "go.mod"
        gomod.write_text("module m\n\nrequire a.b/c v1.0.0 // indirect\n", encoding="utf-8")

        with patch("modkeeper.config.Path.cwd", return_value=tmp_path):
            result = runner.invoke(cli, ["check", str(gomod), "--format", "json"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "outdated": [],
            "excluded": [],
            "fetch_failures": {},
        }
        proxy_source.return_value.fetch_all.assert_not_called()

    def test_no_direct_requirements_warns(
        self, runner: CliRunner, tmp_path: Path, proxy_source
    ) -> None:
        gomod = tmp_path / "go.mod"
        gomod.write_text("module m\n", encoding="utf-8")

        with patch("modkeeper.config.Path.cwd", return_value=tmp_path):
            result = _invoke(runner, tmp_path)

        assert result.exit_code == 0
        assert "No direct requirements found" in result.output

    def test_unparseable_declared_version_is_skipped(
        self, runner: CliRunner, tmp_path: Path, proxy_source
    ) -> None:
        gomod = tmp_path / "go.mod"
        gomod.write_text(
            "module m\nrequire (\n\tgithub.com/a/b v1.2.0\n\tgithub.com/x/y latest\n)\n",
            encoding="utf-8",
        )

        with patch("modkeeper.config.Path.cwd", return_value=tmp_path):
            result = _invoke(runner, tmp_path)

        assert result.exit_code == 1
        assert "Skipped 1 module(s) with unparseable versions: github.com/x/y" in result.output
        assert "1 module(s) have newer versions available" in result.output

    def test_fetch_failure_is_reported_and_run_continues(
        self, runner: CliRunner, project: Path, proxy_source
    ) -> None:
        proxy_source.return_value.fetch_all.return_value = _fetch_result(
            {"github.com/c/d": ["v1.0.1"], "github.com/e/f": []},
            failures={"github.com/a/b": NetworkError("Request failed")},
        )

        result = _invoke(runner, project)

        assert result.exit_code == 1
        assert "Could not fetch versions for 1 module(s): github.com/a/b" in result.output
        assert "1 module(s) have newer versions available" in result.output

    def test_explicit_proxy(
        self, runner: CliRunner, project: Path, proxy_source
    ) -> None:
        _invoke(runner, project, "--proxy", "https://goproxy.example/")

        assert proxy_source.call_args.kwargs["proxy_url"] == "https://goproxy.example"

    def test_proxy_from_config_file(
        self, runner: CliRunner, project: Path, proxy_source
    ) -> None:
        (project / "modkeeper.toml").write_text(
            "[modkeeper]\nproxy = 'https://config.example'\n", encoding="utf-8"
        )

        _invoke(runner, project)

        assert proxy_source.call_args.kwargs["proxy_url"] == "https://config.example"

    @pytest.mark.parametrize("value", ["0", "1001"])
    def test_max_versions_out_of_range(
        self, runner: CliRunner, project: Path, proxy_source, value: str
    ) -> None:
        result = _invoke(runner, project, "--max-versions", value)

        assert result.exit_code == 1
        assert "max_versions must be between 1 and 1000" in result.output
        proxy_source.return_value.fetch_all.assert_not_called()

    def test_unknown_filter_value(
        self, runner: CliRunner, project: Path, proxy_source
    ) -> None:
        result = _invoke(runner, project, "--filter", "major,huge")

        assert result.exit_code == 1
        assert "filter can be made up only from major, minor and patch" in result.output

    def test_missing_go_mod_is_usage_error(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["check", str(tmp_path / "go.mod")])

        assert result.exit_code == 2

    def test_malformed_go_mod(
        self, runner: CliRunner, tmp_path: Path, proxy_source
    ) -> None:
        gomod = tmp_path / "go.mod"
        gomod.write_text("module m\nrequire (\n\tgithub.com/a/b\n)\n", encoding="utf-8")

        with patch("modkeeper.config.Path.cwd", return_value=tmp_path):
            result = _invoke(runner, tmp_path)

        assert result.exit_code == 1
        assert "Requirement must be" in result.output


@pytest.mark.unit
class TestLayoutHelpers:
    """Tests for versions_per_row and chunk_versions."""

    @pytest.mark.parametrize(
        "width, max_versions, expected",
        [
            (160, 10, 10),
            (160, 3, 3),
            (100, 10, 4),
            (80, 10, 2),
            (60, 10, 1),
            (20, 10, 1),
        ],
    )
    def test_versions_per_row(self, width: int, max_versions: int, expected: int) -> None:
        assert versions_per_row(width, max_versions) == expected

    def test_chunk_versions(self) -> None:
        assert chunk_versions(["a", "b", "c", "d", "e"], 2) == [["a", "b"], ["c", "d"], ["e"]]

    def test_chunk_versions_exact_fit(self) -> None:
        assert chunk_versions(["a", "b"], 2) == [["a", "b"]]

    def test_chunk_versions_empty(self) -> None:
        assert chunk_versions([], 3) == []

    def test_chunk_versions_rejects_zero(self) -> None:
        with pytest.raises(ValueError):
            chunk_versions(["a"], 0)
