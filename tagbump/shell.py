"""Shell and git utilities.

Provides a thin wrapper around subprocess calls to git, plus output
formatting helpers for the command line.
"""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

import click

from .errors import GitError, NotARepositoryError

NOT_A_REPOSITORY = "not a git repository"


def git(*args: str, cwd: Path | str | None = None) -> str:
    """Run a git command and return its raw stdout.

    Output is returned unstripped so that formatted records survive intact.

    Args:
        *args: Arguments to pass to git (e.g., "log", "--no-color").
        cwd: Repository directory. Defaults to the current directory.

    Raises:
        NotARepositoryError: If cwd is not inside a git repository.
        GitError: If git exits with any other non-zero status.
    """
    full_args = [
        *(["-C", os.path.normpath(cwd)] if cwd is not None else []),
        "--no-pager",
        *args,
    ]
    result = subprocess.run(
        ["git", *full_args],
        stdin=subprocess.DEVNULL,
        capture_output=True,
        text=True,
        env={**os.environ, "GIT_EDITOR": "true"},
        check=False,
    )
    if result.returncode != 0:
        output = result.stderr or result.stdout
        error = NotARepositoryError if NOT_A_REPOSITORY in output else GitError
        raise error(
            f"Error running git command: {args[0] if args else ''}\n\n{output}",
            command="git",
            arguments=full_args,
            code=result.returncode,
            output=output,
        )
    return result.stdout


def step(msg: str) -> None:
    """Print a visually distinct step header.

    Used to separate phases of a command in terminal output.
    """
    click.echo(f"\n{'─' * 60}\n{msg}\n{'─' * 60}", err=True)
