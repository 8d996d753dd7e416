"""Data models for tagbump.

These Pydantic models represent a package, its declared configuration and
the release state computed from git history.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .conventional import ConventionalCommit
from .git import Tag
from .versions import UpdateType


class Config(BaseModel):
    """Package manifest data.

    Attributes:
        name: Declared package name, if any.
        version: Declared package version. Packages without one are not
                 versioned and get no release information.
        workspace: Member directories (or globs) for a workspace root.
    """

    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    version: str | None = None
    workspace: list[str] | None = None


class Release(BaseModel):
    """Latest release of a package.

    Attributes:
        version: Released version, or "0.0.0" if the package was never tagged.
        tag: Release tag, absent when the package was never tagged.
    """

    model_config = ConfigDict(frozen=True)

    version: str
    tag: Tag | None = None


class Update(BaseModel):
    """Changes since the latest release.

    Attributes:
        type: Component incremented by this update.
        version: Version the package would have if released in this state.
        changelog: Qualifying commits, newest first.
    """

    model_config = ConfigDict(frozen=True)

    type: UpdateType | None = None
    version: str
    changelog: list[ConventionalCommit] = Field(default_factory=list)


class Package(BaseModel):
    """A package with its resolved release state.

    Attributes:
        directory: Package directory.
        module: Short package name used in release tags ("<module>@<version>").
        config: Declared manifest data.
        version: Effective version: the update version, else the release
                 version, else the declared version.
        release: Latest release, if the package is versioned and tracked.
        update: Pending update, if there is one.
    """

    directory: Path
    module: str
    config: Config
    version: str | None = None
    release: Release | None = None
    update: Update | None = None
