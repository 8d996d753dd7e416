"""CLI entry point for tagbump."""

from __future__ import annotations

import os
from pathlib import Path

import click

from tagbump.errors import TagbumpError
from tagbump.models import Package
from tagbump.package import package_info
from tagbump.shell import step
from tagbump.workspace import workspace


def _package_line(pkg: Package, root: Path) -> str:
    directory = os.path.relpath(pkg.directory, root)
    line = f"📦 {directory}  {pkg.module}  {pkg.version or '-'}"
    if pkg.release is not None and pkg.release.version != pkg.config.version:
        line += f"  🚨 {pkg.release.version} → {pkg.config.version}"
    return line


@click.group()
@click.version_option(package_name="tagbump")
def cli() -> None:
    """Calculate package versions from release tags and conventional commits."""


@cli.command("list")
@click.argument("filters", nargs=-1)
@click.option(
    "-C",
    "--directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    show_default=True,
    help="Workspace root.",
)
@click.option("--changelog", is_flag=True, help="Print commits in each update.")
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum packages resolved at once.",
)
def list_packages(
    filters: tuple[str, ...],
    directory: Path,
    changelog: bool,
    concurrency: int | None,
) -> None:
    """List packages and their calculated versions."""
    step("Resolving packages")
    try:
        results = workspace(directory, filters=filters, concurrency=concurrency)
    except TagbumpError as e:
        raise click.ClickException(str(e)) from e

    failed = 0
    for result in results:
        if result.package is None:
            failed += 1
            relative = os.path.relpath(result.directory, directory)
            click.echo(f"❌ {relative}  {result.error}", err=True)
            continue
        click.echo(_package_line(result.package, directory))
        if changelog and result.package.update is not None:
            for commit in result.package.update.changelog:
                click.echo(f"     {commit.short} {commit.summary}")

    if failed:
        raise click.ClickException(f"{failed} package(s) could not be resolved")


@cli.command()
@click.argument(
    "directory",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
)
def version(directory: Path) -> None:
    """Print the calculated version of the package in DIRECTORY."""
    try:
        pkg = package_info(directory)
    except TagbumpError as e:
        raise click.ClickException(str(e)) from e
    if pkg.version is None:
        raise click.ClickException(f"Package {pkg.module} has no version.")
    click.echo(pkg.version)
