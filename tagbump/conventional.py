"""Conventional Commits classification.

Converts a ``Commit`` into a ``ConventionalCommit`` exposing the commit type,
scopes, breaking change description and footers.

See https://www.conventionalcommits.org/en/v1.0.0/
"""

from __future__ import annotations

import re

from packaging.utils import canonicalize_name
from pydantic import Field

from .git import Commit

SUMMARY_PATTERN = re.compile(
    r"^\s*(?:(?P<type>[A-Za-z]+)(?:\((?P<scopes>[^()]*)\))?(?P<breaking>!?):\s*)?"
    r"(?P<description>\S.*?)\s*$"
)
FOOTER_PATTERN = re.compile(
    r"^(?:(?P<key>BREAKING CHANGE|[\w-]+): (?P<value>.*)"
    r"|(?P<ref_key>[\w-]+) #(?P<ref_value>.*))$"
)

BREAKING_CHANGE = "BREAKING-CHANGE"
WILDCARD_SCOPE = "*"


class ConventionalCommit(Commit):
    """A commit with Conventional Commits details.

    Attributes:
        description: Summary without the type/scope prefix. Falls back to the
            whole summary for commits that do not follow the convention.
        type: Lowercase commit type (e.g. "feat"), if any.
        scopes: Lowercase scopes; empty when the commit has none.
        breaking: Description of the breaking change, or None.
        footers: Trailers merged with the footer block of the body.
    """

    description: str
    type: str | None = None
    scopes: list[str] = Field(default_factory=list)
    breaking: str | None = None
    footers: dict[str, str] = Field(default_factory=dict)

    def touches(self, module: str) -> bool:
        """Whether the commit is scoped to a module, directly or by wildcard.

        Scopes and module are compared as normalized package names, so
        "my_pkg" and "my-pkg" name the same module.
        """
        if WILDCARD_SCOPE in self.scopes:
            return True
        return canonicalize_name(module) in {canonicalize_name(s) for s in self.scopes}


def parse_footers(body: str | None) -> dict[str, str] | None:
    """Parse the footer block at the end of a commit body.

    The last paragraph of the body is a footer block only if every
    non-empty line in it is a ``key: value`` or ``key #value`` line.

    Returns:
        Footer key/value pairs, or None if the body has no footer block.
    """
    if not body:
        return None
    paragraph = body.strip().split("\n\n")[-1]
    footers: dict[str, str] = {}
    for line in paragraph.splitlines():
        if not line.strip():
            continue
        match = FOOTER_PATTERN.match(line.strip())
        if match is None:
            return None
        if match["key"] is not None:
            key = BREAKING_CHANGE if match["key"] == "BREAKING CHANGE" else match["key"]
            footers[key] = match["value"].strip()
        else:
            footers[match["ref_key"].lower()] = match["ref_value"].strip()
    return footers or None


def conventional(commit: Commit) -> ConventionalCommit:
    """Classify a commit under the Conventional Commits convention.

    Never raises: commits that do not follow the convention get their whole
    summary as the description and no type or scopes.
    """
    footers = {**commit.trailers, **(parse_footers(commit.body) or {})}
    match = SUMMARY_PATTERN.match(commit.summary)
    if match is None:
        description, type_, scopes, bang = commit.summary.strip(), None, [], False
    else:
        description = match["description"]
        type_ = match["type"].strip().lower() if match["type"] else None
        scopes = [
            s.strip().lower() for s in (match["scopes"] or "").split(",") if s.strip()
        ]
        bang = bool(match["breaking"])
    breaking = footers.get(BREAKING_CHANGE) or (description if bang else None)
    return ConventionalCommit(
        **commit.model_dump(include=set(Commit.model_fields)),
        description=description,
        type=type_,
        scopes=scopes,
        breaking=breaking,
        footers=footers,
    )
