"""Tests for tagbump.cli."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from tagbump.cli import cli
from tagbump.conventional import conventional
from tagbump.errors import ConfigError, VersionError
from tagbump.git import Commit
from tagbump.models import Config, Package, Release, Update
from tagbump.versions import UpdateType
from tagbump.workspace import PackageResult


def _package(
    directory: Path,
    *,
    declared: str | None = "1.0.0",
    released: str | None = "1.0.0",
    update: Update | None = None,
) -> Package:
    release = Release(version=released) if released is not None else None
    if update is not None:
        version = update.version
    else:
        version = released if released is not None else declared
    return Package(
        directory=directory,
        module=directory.name,
        config=Config(name=directory.name, version=declared),
        version=version,
        release=release,
        update=update,
    )


class TestList:
    """Tests for the list command."""

    @patch("tagbump.cli.workspace")
    def test_lists_packages(self, mock_workspace: MagicMock, tmp_path: Path) -> None:
        """Each package is printed with its directory, module and version."""
        mock_workspace.return_value = [
            PackageResult(tmp_path / "alpha", package=_package(tmp_path / "alpha")),
            PackageResult(
                tmp_path / "beta",
                package=_package(tmp_path / "beta", declared=None, released=None),
            ),
        ]

        result = CliRunner().invoke(cli, ["list", "-C", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "📦 alpha  alpha  1.0.0" in result.output
        assert "📦 beta  beta  -" in result.output
        mock_workspace.assert_called_once_with(tmp_path, filters=(), concurrency=None)

    @patch("tagbump.cli.workspace")
    def test_passes_filters_and_concurrency(
        self, mock_workspace: MagicMock, tmp_path: Path
    ) -> None:
        mock_workspace.return_value = []

        result = CliRunner().invoke(
            cli, ["list", "-C", str(tmp_path), "--concurrency", "4", "core/*", "cli"]
        )

        assert result.exit_code == 0, result.output
        mock_workspace.assert_called_once_with(
            tmp_path, filters=("core/*", "cli"), concurrency=4
        )

    def test_rejects_zero_concurrency(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(
            cli, ["list", "-C", str(tmp_path), "--concurrency", "0"]
        )

        assert result.exit_code == 2

    @patch("tagbump.cli.workspace")
    def test_marks_forced_versions(
        self, mock_workspace: MagicMock, tmp_path: Path
    ) -> None:
        """A declared version that differs from the release is flagged."""
        update = Update(type=UpdateType.MAJOR, version="2.0.0")
        pkg = _package(tmp_path / "mod", declared="2.0.0", released="1.2.3", update=update)
        mock_workspace.return_value = [PackageResult(pkg.directory, package=pkg)]

        result = CliRunner().invoke(cli, ["list", "-C", str(tmp_path)])

        assert result.exit_code == 0, result.output
        assert "📦 mod  mod  2.0.0  🚨 1.2.3 → 2.0.0" in result.output

    @patch("tagbump.cli.workspace")
    def test_changelog(
        self,
        mock_workspace: MagicMock,
        tmp_path: Path,
        make_commit: Callable[..., Commit],
    ) -> None:
        """--changelog prints the commits of each update."""
        commit = conventional(make_commit(short="abc1234", summary="fix(mod): x"))
        update = Update(
            type=UpdateType.PATCH, version="1.0.1-pre.1+abc1234", changelog=[commit]
        )
        pkg = _package(tmp_path / "mod", update=update)
        mock_workspace.return_value = [PackageResult(pkg.directory, package=pkg)]

        without = CliRunner().invoke(cli, ["list", "-C", str(tmp_path)])
        with_changelog = CliRunner().invoke(
            cli, ["list", "-C", str(tmp_path), "--changelog"]
        )

        assert "abc1234 fix(mod): x" not in without.output
        assert "     abc1234 fix(mod): x" in with_changelog.output

    @patch("tagbump.cli.workspace")
    def test_reports_failures(self, mock_workspace: MagicMock, tmp_path: Path) -> None:
        """Failed packages are reported and the command exits non-zero."""
        error = VersionError("Cannot parse semantic version from tag: beta@x")
        mock_workspace.return_value = [
            PackageResult(tmp_path / "alpha", package=_package(tmp_path / "alpha")),
            PackageResult(tmp_path / "beta", error=error),
        ]

        result = CliRunner().invoke(cli, ["list", "-C", str(tmp_path)])

        assert result.exit_code == 1
        assert "📦 alpha" in result.output
        assert "❌ beta  Cannot parse semantic version from tag: beta@x" in result.output
        assert "1 package(s) could not be resolved" in result.output

    @patch("tagbump.cli.workspace")
    def test_config_error(self, mock_workspace: MagicMock, tmp_path: Path) -> None:
        mock_workspace.side_effect = ConfigError("Cannot read package config: x")

        result = CliRunner().invoke(cli, ["list", "-C", str(tmp_path)])

        assert result.exit_code == 1
        assert "Error: Cannot read package config: x" in result.output


class TestVersion:
    """Tests for the version command."""

    @patch("tagbump.cli.package_info")
    def test_prints_version(self, mock_info: MagicMock, tmp_path: Path) -> None:
        mock_info.return_value = _package(tmp_path / "mod")

        result = CliRunner().invoke(cli, ["version", str(tmp_path / "mod")])

        assert result.exit_code == 0, result.output
        assert result.output.strip() == "1.0.0"
        mock_info.assert_called_once_with(tmp_path / "mod")

    @patch("tagbump.cli.package_info")
    def test_unversioned(self, mock_info: MagicMock, tmp_path: Path) -> None:
        mock_info.return_value = _package(tmp_path / "mod", declared=None, released=None)

        result = CliRunner().invoke(cli, ["version", str(tmp_path / "mod")])

        assert result.exit_code == 1
        assert "Package mod has no version." in result.output
