"""Declarative decoding of git's templated output.

git can print objects through a format string made of placeholders
(``%H``, ``%(refname:short)``, ...). A ``Descriptor`` describes the shape of
the record we want as a tree of fields; ``format_arg`` renders the matching
format string and ``parse_output`` turns git's output back into nested dicts.

Each record is written as::

    <delimiter>!<field 1><delimiter><field 2><delimiter>...<field N><delimiter>

The delimiter is the object hash of the record (e.g. ``<%H>``). No field of
a record can contain its own hash wrapped in angle brackets, so splitting on
the delimiter is unambiguous.

Field kinds:
    Skip:  declared for documentation, never requested from git.
    Text:  a leaf placeholder, optionally post-processed by a transform.
    Group: an ordered mapping of named child fields.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass
from typing import Any, Union

from .errors import DecodeError

# Emitted by git for ``%x00`` / ``%00``; marks an optional value as absent.
SENTINEL = "\x00"

Transform = Callable[[str, Mapping[str, Any]], Any]


@dataclass(frozen=True)
class Skip:
    """A field that is not requested from git and never decoded."""


@dataclass(frozen=True)
class Text:
    """A leaf value rendered from a single git placeholder.

    Attributes:
        format: git placeholder text, e.g. ``"%H"``.
        optional: If True, a value equal to ``SENTINEL`` decodes to None.
        transform: Called as ``transform(value, siblings)`` where ``siblings``
            holds the values already decoded in the enclosing group.
    """

    format: str
    optional: bool = False
    transform: Transform | None = None


@dataclass(frozen=True)
class Group:
    """A nested record; collapses to None if optional and all children are."""

    fields: Mapping[str, FieldDescriptor]
    optional: bool = False


FieldDescriptor = Union[Skip, Text, Group]


@dataclass(frozen=True)
class Descriptor:
    """A root group together with its record delimiter placeholder."""

    delimiter: str
    root: Group


_SKIPPED = object()


def leaves(field: FieldDescriptor) -> list[str]:
    """Return the placeholders of all non-skip leaves, depth first."""
    if isinstance(field, Skip):
        return []
    if isinstance(field, Group):
        return [fmt for child in field.fields.values() for fmt in leaves(child)]
    return [field.format]


def format_arg(descriptor: Descriptor) -> str:
    """Render the ``--format`` value for a descriptor."""
    delimiter = descriptor.delimiter
    return f"{delimiter}!{delimiter.join(leaves(descriptor.root))}{delimiter}"


def parse_output(descriptor: Descriptor, output: str) -> list[dict[str, Any]]:
    """Decode git output produced with ``format_arg(descriptor)``.

    Raises:
        DecodeError: If the output does not have the expected record layout.
    """
    count = len(leaves(descriptor.root))
    records: list[dict[str, Any]] = []
    rest = output.lstrip()
    while rest:
        end = rest.find("!")
        if end <= 0:
            raise DecodeError("Cannot parse git output: missing record delimiter")
        delimiter = rest[:end]
        parts = rest[end + 1 :].split(delimiter, count)
        if len(parts) != count + 1:
            raise DecodeError(
                f"Cannot parse git output: expected {count} fields, "
                f"found {len(parts) - 1}"
            )
        record = _decode(descriptor.root, iter(parts[:count]), {})
        if not isinstance(record, dict):
            raise DecodeError("Cannot parse git output: empty record")
        records.append(record)
        rest = parts[count].lstrip()
    return records


def _decode(
    field: FieldDescriptor, parts: Iterator[str], siblings: Mapping[str, Any]
) -> Any:
    if isinstance(field, Skip):
        return _SKIPPED
    if isinstance(field, Group):
        result: dict[str, Any] = {}
        for name, child in field.fields.items():
            value = _decode(child, parts, result)
            if value is not _SKIPPED:
                result[name] = value
        if field.optional and all(v is None for v in result.values()):
            return None
        return result
    value = next(parts, None)
    if value is None:
        raise DecodeError(f"Cannot parse git output: missing value for {field.format}")
    if field.optional and value == SENTINEL:
        return None
    if field.transform is not None:
        return field.transform(value, dict(siblings))
    return value
