"""Workspace discovery and resolution.

A workspace root lists member packages in its manifest, either in
[tool.tagbump].workspace or [tool.uv.workspace].members. Each member is
resolved independently, in parallel, and a failure in one member does not
stop the others.
"""

from __future__ import annotations

import fnmatch
import glob
import os
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from .errors import TagbumpError
from .models import Package
from .package import package_info, resolve_package
from .toml import MANIFEST, load_config


@dataclass(frozen=True)
class PackageResult:
    """Outcome of resolving one workspace member.

    Exactly one of ``package`` and ``error`` is set.
    """

    directory: Path
    package: Package | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def member_directories(root: Path, patterns: Sequence[str]) -> list[Path]:
    """Expand member patterns into package directories.

    Only directories containing a manifest are returned, in pattern order
    and without duplicates.
    """
    directories: list[Path] = []
    for pattern in patterns:
        for match in sorted(glob.glob(str(root / pattern))):
            path = Path(match)
            if (path / MANIFEST).is_file() and path not in directories:
                directories.append(path)
    return directories


def _resolve(directory: Path) -> PackageResult:
    # Any failure stays with its member; the other workers keep running.
    try:
        return PackageResult(directory=directory, package=package_info(directory))
    except Exception as e:
        return PackageResult(directory=directory, error=e)


def _matches(result: PackageResult, root: Path, filters: Sequence[str]) -> bool:
    if not filters:
        return True
    names = [os.path.relpath(result.directory, root)]
    if result.package is not None:
        names.append(result.package.module)
    return any(fnmatch.fnmatch(name, f) for name in names for f in filters)


def workspace(
    directory: Path | str = ".",
    *,
    filters: Sequence[str] = (),
    concurrency: int | None = None,
) -> list[PackageResult]:
    """Resolve all packages of a workspace.

    If the manifest in ``directory`` declares workspace members, every
    member package is returned, excluding the root itself. Otherwise the
    package in ``directory`` is returned alone.

    Args:
        directory: Workspace root.
        filters: Glob patterns matched against module names and member
                 directories relative to the root. Any match includes the
                 package; no filters include all packages.
        concurrency: Maximum number of packages resolved at once.

    Raises:
        ConfigError: If the root manifest cannot be read.
    """
    root = Path(directory)
    config = load_config(root)
    if config.workspace is None:
        try:
            package = resolve_package(root, config)
            results = [PackageResult(directory=root, package=package)]
        except TagbumpError as e:
            results = [PackageResult(directory=root, error=e)]
    else:
        members = member_directories(root, config.workspace)
        with ThreadPoolExecutor(max_workers=concurrency) as pool:
            results = list(pool.map(_resolve, members))
    return [r for r in results if _matches(r, root, filters)]
