"""Read-only access to git commits and tags.

Each ``Repository`` method builds the git arguments, runs a single git
command and decodes its output with the fixed ``COMMIT_FORMAT`` and
``TAG_FORMAT`` descriptors. No state is shared between calls.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .errors import DecodeError, GitError, NotARepositoryError
from .format import SENTINEL, Descriptor, Group, Skip, Text, format_arg, parse_output
from .shell import git


class User(BaseModel):
    """Author, committer or tagger identity."""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str


class CommitRef(BaseModel):
    """Hash of a commit that is not fetched in full."""

    model_config = ConfigDict(frozen=True)

    hash: str
    short: str


class Commit(BaseModel):
    """A single commit.

    Attributes:
        hash: Full object hash; the only stable identity of a commit.
        short: Abbreviated hash.
        parent: First parent, or None for a root commit.
        summary: First line of the commit message.
        body: Rest of the message without the trailer block, if any.
        trailers: Trailer key/value pairs (e.g. "Signed-off-by").
    """

    model_config = ConfigDict(frozen=True)

    hash: str
    short: str
    parent: CommitRef | None = None
    author: User
    committer: User
    summary: str
    body: str | None = None
    trailers: dict[str, str] = Field(default_factory=dict)


class Tag(BaseModel):
    """A tag and the commit it resolves to.

    Lightweight tags have no tagger, subject, body or trailers.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    commit: Commit
    tagger: User | None = None
    subject: str | None = None
    body: str | None = None
    trailers: dict[str, str] = Field(default_factory=dict)


def _first_parent(value: str, siblings: Mapping[str, Any]) -> str | None:
    return value.split()[0] if value.strip() else None


def _strip_trailers(body: str, trailers: str) -> str | None:
    if trailers and body.endswith(trailers):
        body = body[: -len(trailers)]
    return body.rstrip() or None


def _commit_body(value: str, siblings: Mapping[str, Any]) -> str | None:
    # The commit hash separates the raw body from its trailer block.
    body, _, trailers = value.partition(siblings["hash"])
    return _strip_trailers(body, trailers)


def _tag_body(value: str, siblings: Mapping[str, Any]) -> str | None:
    body, _, trailers = value.partition(SENTINEL)
    return _strip_trailers(body, trailers)


def _parse_trailers(value: str, siblings: Mapping[str, Any]) -> dict[str, str]:
    trailers: dict[str, str] = {}
    for line in value.splitlines():
        key, _, val = line.partition(": ")
        if key.strip():
            trailers[key.strip()] = val.strip()
    return trailers


COMMIT_FORMAT = Descriptor(
    delimiter="<%H>",
    root=Group(
        {
            "hash": Text("%H"),
            "short": Text("%h"),
            "parent": Group(
                {
                    "hash": Text("%P", transform=_first_parent),
                    "short": Text("%p", transform=_first_parent),
                },
                optional=True,
            ),
            "author": Group({"name": Text("%an"), "email": Text("%ae")}),
            "committer": Group({"name": Text("%cn"), "email": Text("%ce")}),
            "summary": Text("%s"),
            "body": Text("%b%H%(trailers)", transform=_commit_body),
            "trailers": Text(
                "%(trailers:only=true,unfold=true,key_value_separator=: )",
                transform=_parse_trailers,
            ),
        }
    ),
)

TAG_FORMAT = Descriptor(
    delimiter="<%(objectname)>",
    root=Group(
        {
            "name": Text("%(refname:short)"),
            "commit": Group(
                {
                    "hash": Text(
                        "%(if)%(object)%(then)%(object)%(else)%(objectname)%(end)"
                    ),
                    "short": Skip(),
                    "parent": Skip(),
                    "author": Skip(),
                    "committer": Skip(),
                    "summary": Skip(),
                    "body": Skip(),
                    "trailers": Skip(),
                }
            ),
            "tagger": Group(
                {
                    "name": Text(
                        "%(if)%(object)%(then)%(taggername)%(else)%00%(end)",
                        optional=True,
                    ),
                    "email": Text(
                        "%(if)%(object)%(then)%(taggeremail:trim)%(else)%00%(end)",
                        optional=True,
                    ),
                },
                optional=True,
            ),
            "subject": Text(
                "%(if)%(object)%(then)%(subject)%(else)%00%(end)", optional=True
            ),
            "body": Text(
                "%(if)%(object)%(then)%(body)%00%(trailers)%(else)%00%(end)",
                optional=True,
                transform=_tag_body,
            ),
            "trailers": Text(
                "%(if)%(object)%(then)"
                "%(trailers:only=true,unfold=true,key_value_separator=: )%(end)",
                transform=_parse_trailers,
            ),
        }
    ),
)


def _range_arg(range_from: str | None, range_to: str | None) -> str | None:
    if range_from is None:
        return range_to
    return f"{range_from}..{range_to or 'HEAD'}"


class Repository:
    """A local git repository rooted at (or containing) ``directory``."""

    def __init__(self, directory: Path | str = ".") -> None:
        self.directory = Path(directory)

    def _git(self, *args: str) -> str:
        return git(*args, cwd=self.directory)

    def _has_head(self) -> bool:
        try:
            self._git("rev-parse", "--verify", "--quiet", "HEAD")
        except NotARepositoryError:
            raise
        except GitError:
            return False
        return True

    def log(
        self,
        *,
        range_from: str | None = None,
        range_to: str | None = None,
        paths: Sequence[str] | None = None,
        max_count: int | None = None,
    ) -> list[Commit]:
        """Return commits, newest first.

        Args:
            range_from: Exclusive lower bound (e.g. a tag name).
            range_to: Inclusive upper bound. Defaults to HEAD.
            paths: Only commits touching these paths.
            max_count: Limit the number of commits returned.

        Returns:
            Commits in the range, or an empty list if the repository has no
            commits yet.
        """
        args = ["log", "--no-color", f"--format={format_arg(COMMIT_FORMAT)}"]
        if max_count is not None:
            args.append(f"--max-count={max_count}")
        revision = _range_arg(range_from, range_to)
        if revision is not None:
            args.append(revision)
        args.extend(["--", *(paths or [])])
        try:
            output = self._git(*args)
        except NotARepositoryError:
            raise
        except GitError:
            if not self._has_head():
                return []
            raise
        return [Commit.model_validate(r) for r in parse_output(COMMIT_FORMAT, output)]

    def get_commit(self, ref: str) -> Commit | None:
        """Return the commit a ref points to, or None if there is none."""
        commits = self.log(range_to=ref, max_count=1)
        return commits[0] if commits else None

    def head_commit(self) -> Commit:
        """Return the commit at HEAD.

        Raises:
            GitError: If the current branch has no commits.
        """
        commit = self.get_commit("HEAD")
        if commit is None:
            raise GitError("Current branch does not have any commits")
        return commit

    def list_tags(
        self,
        name: str | None = None,
        *,
        sort_by_version: bool = False,
        points_at: str | None = None,
        contains: str | None = None,
        no_contains: str | None = None,
    ) -> list[Tag]:
        """Return tags, each resolved to its commit.

        Args:
            name: Glob pattern for tag names (e.g. "mod@*").
            sort_by_version: Sort by version, highest first.
            points_at: Only tags pointing at this commit.
            contains: Only tags whose commit contains this commit.
            no_contains: Only tags whose commit does not contain this commit.

        Raises:
            DecodeError: If a tag's commit cannot be found.
        """
        args = ["tag", "--list", f"--format={format_arg(TAG_FORMAT)}"]
        if contains is not None:
            args.append(f"--contains={contains}")
        if no_contains is not None:
            args.append(f"--no-contains={no_contains}")
        if points_at is not None:
            args.append(f"--points-at={points_at}")
        if sort_by_version:
            args.append("--sort=-version:refname")
        if name is not None:
            args.append(name)
        tags: list[Tag] = []
        for record in parse_output(TAG_FORMAT, self._git(*args)):
            commit = self.get_commit(record["commit"]["hash"])
            if commit is None:
                raise DecodeError(f"Cannot find commit for tag: {record['name']}")
            tags.append(Tag.model_validate({**record, "commit": commit}))
        return tags
