"""Shared test fixtures."""

from __future__ import annotations

import shutil
import subprocess
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from tagbump.git import Commit


@pytest.fixture
def make_commit() -> Callable[..., Commit]:
    """Factory for commits with fake data."""

    def factory(**data: Any) -> Commit:
        fields: dict[str, Any] = {
            "hash": "a" * 40,
            "short": "aaaaaaa",
            "summary": "summary",
            "body": None,
            "trailers": {},
            "author": {"name": "author-name", "email": "author@example.com"},
            "committer": {"name": "committer-name", "email": "committer@example.com"},
        }
        fields.update(data)
        return Commit.model_validate(fields)

    return factory


@pytest.fixture
def sample_pyproject(tmp_path: Path) -> Path:
    """Create a temporary pyproject.toml for a versioned package."""
    content = """\
[project]
name = "test-package"
version = "1.0.0"
dependencies = ["requests>=2.0"]
"""
    pyproject = tmp_path / "pyproject.toml"
    pyproject.write_text(content)
    return pyproject


@pytest.fixture
def git_repo(tmp_path: Path) -> Callable[..., str]:
    """Create an empty git repository in tmp_path.

    Returns a function that runs git in the repository and returns stdout.
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    def run_git(*args: str) -> str:
        result = subprocess.run(
            ["git", "-C", str(tmp_path), *args],
            capture_output=True,
            text=True,
            check=True,
        )
        return result.stdout.strip()

    run_git("init", "--quiet")
    run_git("config", "user.name", "A U Thor")
    run_git("config", "user.email", "author@example.com")
    run_git("config", "commit.gpgsign", "false")
    run_git("config", "tag.gpgsign", "false")
    return run_git
