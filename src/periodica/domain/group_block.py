"""Parsing of periodic-table group/block classification strings.

Stored elements carry a free-text classification such as
``"group 18 (noble gases), s-block"``. This module turns that text into a
`GroupBlock` value object, which is used both to validate patch input and to
filter the catalog by group or block.

Grammar (case-insensitive)::

    group <1..18 | n/a>[ (free text)], <s|p|d|f|g>-block
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal, TypeAlias

from .errors import (
    InvalidBlockError,
    InvalidGroupNumberError,
    MalformedGroupBlockError,
    UnknownGroupSelectorError,
)

NOT_APPLICABLE = "n/a"
MIN_GROUP = 1
MAX_GROUP = 18
BLOCK_LETTERS = frozenset("spdfg")

_GROUP_CLAUSE_RE = re.compile(
    r"^group\s+(n/a|[0-9]{1,2})(?:\s*\([^)]*\))?$", re.IGNORECASE
)
_BLOCK_CLAUSE_RE = re.compile(r"^([a-z])-block$", re.IGNORECASE)

Group: TypeAlias = int | Literal["n/a"]


@dataclass(frozen=True, slots=True)
class GroupBlock:
    """Parsed group/block classification.

    Attributes:
        group: Group number in 1..18, or ``"n/a"`` for elements outside the
            numbered groups (lanthanides, actinides).
        block: Lowercase block letter, one of ``s``, ``p``, ``d``, ``f``, ``g``.
    """

    group: Group
    block: str

    @property
    def group_label(self) -> str:
        """The group as a string, e.g. ``"1"`` or ``"n/a"``."""
        return str(self.group)

    @property
    def block_label(self) -> str:
        """The block as it appears in the source text, e.g. ``"s-block"``."""
        return f"{self.block}-block"

    def matches(self, selector: str) -> bool:
        """Return True if `selector` names this group or this block."""
        return selector in (self.group_label, self.block_label)

    def __str__(self) -> str:
        return f"group {self.group_label}, {self.block_label}"


def _parse_group_token(raw: str, token: str) -> Group:
    if token.lower() == NOT_APPLICABLE:
        return NOT_APPLICABLE
    number = int(token)
    if not MIN_GROUP <= number <= MAX_GROUP:
        raise InvalidGroupNumberError(
            raw, f"group must be {MIN_GROUP}..{MAX_GROUP} or 'n/a', got {token}"
        )
    return number


def parse_group_block(raw: str) -> GroupBlock:
    """Parse a ``"group <N|n/a>[ (text)], <x>-block"`` string.

    Args:
        raw: The classification string as stored or supplied in a patch.

    Returns:
        GroupBlock: The parsed classification.

    Raises:
        MalformedGroupBlockError: If the string is not split into exactly a
            group clause and a block clause, or the group clause does not
            match the expected shape.
        InvalidGroupNumberError: If the group is numeric but outside 1..18.
        InvalidBlockError: If the block clause is not one of s/p/d/f/g-block.
    """
    if not isinstance(raw, str):
        raise MalformedGroupBlockError(raw, "expected a string")

    parts = raw.split(",")
    if len(parts) != 2:  # pylint: disable=magic-value-comparison
        raise MalformedGroupBlockError(
            raw, "expected '<group clause>, <block clause>'"
        )
    group_clause, block_clause = (part.strip() for part in parts)

    if not (match := _GROUP_CLAUSE_RE.match(group_clause)):
        raise MalformedGroupBlockError(raw, f"unrecognized group clause {group_clause!r}")
    group = _parse_group_token(raw, match.group(1))

    block_match = _BLOCK_CLAUSE_RE.match(block_clause)
    if not block_match or block_match.group(1).lower() not in BLOCK_LETTERS:
        raise InvalidBlockError(
            raw, f"block must be one of s/p/d/f/g-block, got {block_clause!r}"
        )

    return GroupBlock(group=group, block=block_match.group(1).lower())


def validate_group_selector(selector: str) -> str:
    """Validate and normalize a listing filter.

    A selector is either a group label (``"1"`` .. ``"18"`` or ``"n/a"``) or a
    block label (``"s-block"`` .. ``"g-block"``).

    Returns:
        str: The normalized selector (lowercase, no leading zeros).

    Raises:
        UnknownGroupSelectorError: If the selector is neither.
    """
    if not isinstance(selector, str):
        raise UnknownGroupSelectorError(selector)
    candidate = selector.strip().lower()
    if candidate == NOT_APPLICABLE:
        return candidate
    is_number = candidate.isascii() and candidate.isdigit()
    if is_number and MIN_GROUP <= int(candidate) <= MAX_GROUP:
        return str(int(candidate))
    if (match := _BLOCK_CLAUSE_RE.match(candidate)) and match.group(1) in BLOCK_LETTERS:
        return candidate
    raise UnknownGroupSelectorError(selector)
