"""Package version resolution.

Computes the release state of a package from git history:

1. Find the latest release from "<module>@<version>" tags.
2. Collect commits since that release that are scoped to the package, using
   Conventional Commits (e.g. "fix(mod): ..." or "feat(*): ...").
3. Compute the next version. If the declared version differs from the
   release version, the update is forced to the declared version. Otherwise
   the bump is derived from the commits:
   - breaking changes bump major (minor before 1.0.0)
   - features bump minor
   - anything else bumps patch
   and the version gets a "pre.<count>" pre-release and the short hash of
   the newest commit as build metadata (e.g. "1.3.0-pre.2+abc1234").

Every resolution reads live repository state and caches nothing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Literal, Union

from packaging.utils import canonicalize_name
from pydantic import BaseModel, ConfigDict, Field

from .conventional import ConventionalCommit, conventional
from .errors import NotARepositoryError, VersionError
from .git import Commit, Repository, Tag
from .models import Config, Package, Release, Update
from .toml import load_config
from .versions import (
    INITIAL_VERSION,
    UpdateType,
    compare,
    difference,
    increment,
    is_version,
    parse_version,
)


class Unversioned(BaseModel):
    """The package declares no version."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["unversioned"] = "unversioned"


class Untracked(BaseModel):
    """The package is not in a git repository."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["untracked"] = "untracked"


class Unchanged(BaseModel):
    """Nothing to release since the latest release."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["unchanged"] = "unchanged"
    release: Release


class Forced(BaseModel):
    """The declared version differs from the release version."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["forced"] = "forced"
    release: Release
    update: Update


class Calculated(BaseModel):
    """The next version is calculated from qualifying commits."""

    model_config = ConfigDict(frozen=True)
    kind: Literal["calculated"] = "calculated"
    release: Release
    update: Update


Resolution = Annotated[
    Union[Unversioned, Untracked, Unchanged, Forced, Calculated],
    Field(discriminator="kind"),
]


def module_name(directory: Path, config: Config) -> str:
    """Short package name used in tags and commit scopes.

    The last path segment of the declared name (so "org/tool" gives "tool"),
    or the directory name for packages without a name. Normalized per
    PEP 503 to match lowercase commit scopes.
    """
    if config.name:
        return canonicalize_name(config.name.rstrip("/").rsplit("/", 1)[-1])
    return canonicalize_name(directory.resolve().name)


def tag_version(tag: Tag, module: str) -> str:
    """Extract the version from a "<module>@<version>" tag.

    Raises:
        VersionError: If the tag does not carry a semantic version.
    """
    version = tag.name[len(module) + 1 :] if tag.name.startswith(f"{module}@") else ""
    if not is_version(version):
        raise VersionError(f"Cannot parse semantic version from tag: {tag.name}")
    return version


def _highest(tags: list[Tag], module: str) -> Tag | None:
    versions = [(parse_version(tag_version(t, module)), t) for t in tags]
    if not versions:
        return None
    return max(versions, key=lambda v: v[0])[1]


def find_release(repo: Repository, module: str, head: Commit | None) -> Release:
    """Find the latest release of a module.

    Prefers the highest version tagged on HEAD itself, then the highest
    version tagged on a commit not reachable from HEAD. Packages without
    any such tag get a "0.0.0" release with no tag.

    Raises:
        VersionError: If a matching tag has a malformed version.
    """
    if head is None:
        return Release(version=INITIAL_VERSION)
    pattern = f"{module}@*"
    on_head = _highest(
        repo.list_tags(pattern, sort_by_version=True, points_at=head.hash), module
    )
    elsewhere = _highest(
        repo.list_tags(pattern, sort_by_version=True, no_contains=head.hash), module
    )
    tag = on_head if on_head is not None else elsewhere
    if tag is None:
        return Release(version=INITIAL_VERSION)
    return Release(version=tag_version(tag, module), tag=tag)


def find_changelog(
    repo: Repository, module: str, release: Release, head: Commit | None
) -> list[ConventionalCommit]:
    """Return commits since the release that are scoped to the module.

    Commits are newest first. Without a release tag, the whole history of
    the package directory is considered.
    """
    if head is None:
        return []
    if release.tag is not None:
        log = repo.log(range_from=release.tag.name, range_to=head.hash)
    else:
        log = repo.log(range_to=head.hash, paths=["."])
    return [c for c in map(conventional, log) if c.touches(module)]


def forced_update(
    release: Release, declared: str, changelog: list[ConventionalCommit]
) -> Update:
    """Update to a declared version that differs from the release.

    Raises:
        VersionError: If the declared version is older than the release.
    """
    if compare(declared, release.version) < 0:
        raise VersionError(
            f"Cannot force update to an older version: {release.version} -> {declared}"
        )
    return Update(
        type=difference(release.version, declared),
        version=declared,
        changelog=changelog,
    )


def calculated_update(
    release: Release, changelog: list[ConventionalCommit]
) -> Update | None:
    """Calculate the next version from qualifying commits, if there are any."""
    if not changelog:
        return None
    breaking = any(c.breaking for c in changelog)
    if breaking and parse_version(release.version).major > 0:
        update_type = UpdateType.MAJOR
    elif breaking or any(c.type == "feat" for c in changelog):
        update_type = UpdateType.MINOR
    else:
        update_type = UpdateType.PATCH
    version = increment(
        release.version,
        update_type,
        prerelease=f"pre.{len(changelog)}",
        build=changelog[0].short,
    )
    return Update(type=update_type, version=version, changelog=changelog)


def resolve(directory: Path, config: Config, module: str) -> Resolution:
    """Resolve the release state of a package.

    All queries are anchored at the HEAD commit read at the start, so the
    release and the update come from the same view of the repository.

    Raises:
        VersionError: For malformed versions or forced downgrades.
        GitError: For git failures other than a missing repository.
    """
    if config.version is None:
        return Unversioned()
    repo = Repository(directory)
    try:
        head = repo.get_commit("HEAD")
        release = find_release(repo, module, head)
        changelog = find_changelog(repo, module, release, head)
    except NotARepositoryError:
        return Untracked()
    if release.version != config.version:
        return Forced(
            release=release, update=forced_update(release, config.version, changelog)
        )
    update = calculated_update(release, changelog)
    if update is None:
        return Unchanged(release=release)
    return Calculated(release=release, update=update)


def resolve_package(directory: Path, config: Config) -> Package:
    """Build a package from its manifest data and git history."""
    module = module_name(directory, config)
    resolution = resolve(directory, config, module)
    release = (
        resolution.release
        if isinstance(resolution, (Unchanged, Forced, Calculated))
        else None
    )
    update = resolution.update if isinstance(resolution, (Forced, Calculated)) else None
    if update is not None:
        version = update.version
    elif release is not None:
        version = release.version
    else:
        version = config.version
    return Package(
        directory=directory,
        module=module,
        config=config,
        version=version,
        release=release,
        update=update,
    )


def package_info(directory: Path | str = ".") -> Package:
    """Return a package and its release state.

    Raises:
        ConfigError: If the package manifest cannot be read.
    """
    directory = Path(directory)
    return resolve_package(directory, load_config(directory))
