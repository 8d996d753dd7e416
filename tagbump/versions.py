"""Version parsing and bumping utilities.

Thin helpers over the ``semver`` library. Unlike manifest loaders that pad
incomplete versions, release versions must be full semantic versions
(e.g. "1.2.3", "2.0.0-rc.1+build"); anything else is a ``VersionError``.
"""

from __future__ import annotations

from enum import Enum

import semver

from .errors import VersionError

INITIAL_VERSION = "0.0.0"


class UpdateType(str, Enum):
    """Semantic version component to increment."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"

    def __str__(self) -> str:
        return self.value


def is_version(version_str: str) -> bool:
    """Whether a string is a valid semantic version."""
    return semver.Version.is_valid(version_str)


def parse_version(version_str: str) -> semver.Version:
    """Parse a semantic version string.

    Raises:
        VersionError: If the string is not a valid semantic version.
    """
    try:
        return semver.Version.parse(version_str)
    except (TypeError, ValueError) as e:
        raise VersionError(f"Cannot parse semantic version: {version_str!r}") from e


def increment(
    version_str: str,
    update: UpdateType,
    *,
    prerelease: str | None = None,
    build: str | None = None,
) -> str:
    """Increment a version component, optionally adding pre-release/build.

    A pre-release of the version the update would produce is not bumped
    again; its pre-release and build are replaced instead.

    Examples:
        increment("1.2.3", UpdateType.PATCH) → "1.2.4"
        increment("1.2.3", UpdateType.MAJOR, prerelease="pre.1", build="abc")
            → "2.0.0-pre.1+abc"
        increment("2.0.0-rc.1", UpdateType.PATCH, prerelease="pre.1")
            → "2.0.0-pre.1"
    """
    version = parse_version(version_str)
    if update is UpdateType.MAJOR:
        if not version.prerelease or version.minor or version.patch:
            version = version.bump_major()
    elif update is UpdateType.MINOR:
        if not version.prerelease or version.patch:
            version = version.bump_minor()
    elif not version.prerelease:
        version = version.bump_patch()
    return str(version.replace(prerelease=prerelease, build=build))


def difference(old_str: str, new_str: str) -> UpdateType:
    """Return the most significant component that differs between versions.

    Components are checked in major, minor, patch order; versions that only
    differ in pre-release or build count as a patch update.
    """
    old, new = parse_version(old_str), parse_version(new_str)
    if new.major != old.major:
        return UpdateType.MAJOR
    if new.minor != old.minor:
        return UpdateType.MINOR
    return UpdateType.PATCH


def compare(left: str, right: str) -> int:
    """Compare two versions; negative, zero or positive like ``cmp``."""
    return parse_version(left).compare(parse_version(right))
