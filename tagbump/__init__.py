"""Calculate package versions from release tags and conventional commits."""

from __future__ import annotations

from tagbump.conventional import ConventionalCommit, conventional
from tagbump.errors import (
    ConfigError,
    DecodeError,
    GitError,
    NotARepositoryError,
    TagbumpError,
    VersionError,
)
from tagbump.git import Commit, Repository, Tag, User
from tagbump.models import Config, Package, Release, Update
from tagbump.package import package_info, resolve_package
from tagbump.versions import UpdateType
from tagbump.workspace import PackageResult, workspace

__all__ = [
    "Commit",
    "Config",
    "ConfigError",
    "ConventionalCommit",
    "DecodeError",
    "GitError",
    "NotARepositoryError",
    "Package",
    "PackageResult",
    "Release",
    "Repository",
    "Tag",
    "TagbumpError",
    "Update",
    "UpdateType",
    "User",
    "conventional",
    "package_info",
    "resolve_package",
    "workspace",
]
