"""Exceptions raised by tagbump.

Library code raises these and never exits the process; the CLI turns them
into user-facing messages.
"""

from __future__ import annotations

from collections.abc import Sequence


class TagbumpError(Exception):
    """Base class for all tagbump errors."""


class ConfigError(TagbumpError):
    """A package manifest is missing or cannot be read."""


class DecodeError(TagbumpError):
    """Output from git did not match the expected format.

    This indicates a mismatch between the format we asked for and what the
    installed git version produced. It is never retried.
    """


class GitError(TagbumpError):
    """A git command exited with a non-zero status.

    Attributes:
        command: Executable that was run (always "git").
        arguments: Full argument list passed to the executable.
        code: Exit status, or None when no command was run.
        output: Captured stderr, or stdout when stderr was empty.
    """

    def __init__(
        self,
        message: str,
        *,
        command: str = "git",
        arguments: Sequence[str] = (),
        code: int | None = None,
        output: str = "",
    ) -> None:
        super().__init__(message)
        self.command = command
        self.arguments = list(arguments)
        self.code = code
        self.output = output


class NotARepositoryError(GitError):
    """The working directory is not inside a git repository."""


class VersionError(TagbumpError):
    """A version contract was violated.

    Raised for unparseable versions, malformed release tags and attempts to
    force a package to an older version. Messages always include the
    offending version strings.
    """
