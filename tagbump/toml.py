"""TOML reading utilities.

Uses tomlkit to read package manifests (pyproject.toml), the same parser the
rest of the release tooling uses to rewrite them.
"""

from __future__ import annotations

from pathlib import Path

import tomlkit
from tomlkit.exceptions import TOMLKitError

from .errors import ConfigError
from .models import Config

MANIFEST = "pyproject.toml"


def load_pyproject(path: Path) -> tomlkit.TOMLDocument:
    """Load and parse a pyproject.toml file.

    Raises:
        ConfigError: If the file is missing or is not valid TOML.
    """
    try:
        return tomlkit.parse(path.read_text())
    except (OSError, TOMLKitError) as e:
        raise ConfigError(f"Cannot read package config: {path}") from e


def get_project_name(doc: tomlkit.TOMLDocument) -> str | None:
    """Extract [project].name, if declared."""
    name = doc.get("project", {}).get("name")
    return str(name) if name is not None else None


def get_project_version(doc: tomlkit.TOMLDocument) -> str | None:
    """Extract [project].version, if declared."""
    version = doc.get("project", {}).get("version")
    return str(version) if version is not None else None


def get_workspace_members(doc: tomlkit.TOMLDocument) -> list[str] | None:
    """Extract workspace member patterns.

    [tool.tagbump].workspace takes precedence over [tool.uv.workspace].members.
    Patterns are directories relative to the manifest, and may be globs
    (e.g., "packages/*").

    Returns:
        Member patterns, or None if the manifest is not a workspace root.
    """
    tool = doc.get("tool", {})
    members = tool.get("tagbump", {}).get("workspace")
    if members is None:
        members = tool.get("uv", {}).get("workspace", {}).get("members")
    if members is None:
        return None
    return [str(m) for m in members]


def load_config(directory: Path) -> Config:
    """Read the package manifest in a directory."""
    doc = load_pyproject(directory / MANIFEST)
    return Config(
        name=get_project_name(doc),
        version=get_project_version(doc),
        workspace=get_workspace_members(doc),
    )
