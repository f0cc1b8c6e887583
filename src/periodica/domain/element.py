"""Element read model and element patch write model."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from .errors import InvalidPatchError, MalformedRecordError
from .group_block import GroupBlock, parse_group_block

#: A stored element row. Kept loosely typed so unknown fields round-trip.
Record: TypeAlias = dict[str, Any]

NAME_KEY = "name"
ATOMIC_NUMBER_KEY = "atomic_number"
ALTERNATIVE_NAME_KEY = "alternative_name"
GROUP_BLOCK_KEY = "group_block"

#: Sentinel stored in `alternative_name` when an element has none.
NO_ALTERNATIVE_NAME = "n/a"


def _is_int(value: object) -> bool:
    # bool is an int subclass; JSON `true` is not an atomic number
    return isinstance(value, int) and not isinstance(value, bool)


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def record_atomic_number(record: Mapping[str, Any]) -> int:
    """Return the atomic number of a stored record.

    Raises:
        MalformedRecordError: If the key is missing or not an integer.
    """
    if not isinstance(record, Mapping):
        raise MalformedRecordError("record is not an object", record)
    value = record.get(ATOMIC_NUMBER_KEY)
    if not _is_int(value):
        raise MalformedRecordError(f"{ATOMIC_NUMBER_KEY} must be an integer", record)
    return value


# --- Read Model ---


@dataclass(frozen=True, slots=True)
class Element:
    """Immutable read model of a single catalog row.

    Only the four known fields are kept; anything else in the stored record
    is ignored here (it still round-trips through the document itself).
    """

    name: str
    atomic_number: int
    alternative_name: str
    group_block: str

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> Element:
        """Build an element from a snake-case record, ignoring unknown keys.

        Raises:
            MalformedRecordError: If a required key is missing or mistyped.
        """
        atomic_number = record_atomic_number(record)
        values: dict[str, str] = {}
        for key in (NAME_KEY, ALTERNATIVE_NAME_KEY, GROUP_BLOCK_KEY):
            value = record.get(key)
            if not isinstance(value, str):
                raise MalformedRecordError(
                    f"{key} must be a string (element {atomic_number})", record
                )
            values[key] = value
        return cls(atomic_number=atomic_number, **values)

    @property
    def display_alternative_name(self) -> str:
        """Alternative name for display, with the ``n/a`` sentinel shown as ``none``."""
        if self.alternative_name == NO_ALTERNATIVE_NAME:
            return "none"
        return self.alternative_name

    def parse_group_block(self) -> GroupBlock:
        """Parse this element's `group_block` text."""
        return parse_group_block(self.group_block)


# --- Write Model ---


@dataclass(frozen=True, slots=True)
class ElementPatch:
    """Partial update for one element, identified by its atomic number.

    `None` and blank strings both mean "leave the field as it is". There is
    no way to clear a field.
    """

    atomic_number: int
    name: str | None = None
    alternative_name: str | None = None
    group_block: str | None = None

    def __post_init__(self) -> None:
        if not _is_int(self.atomic_number) or self.atomic_number < 1:
            raise InvalidPatchError(
                self.atomic_number, "atomic_number must be a positive integer"
            )
        for field in ("name", "alternative_name", "group_block"):
            value = getattr(self, field)
            if value is not None and not isinstance(value, str):
                raise InvalidPatchError(self.atomic_number, f"{field} must be a string")
        if not _is_blank(self.group_block):
            parse_group_block(self.group_block)  # type: ignore[arg-type]

    @property
    def is_empty(self) -> bool:
        """True if the patch would not change any field."""
        return not self.changes

    @property
    def changes(self) -> dict[str, str]:
        """Record keys mapped to their new values, for non-blank fields only."""
        candidates = {
            NAME_KEY: self.name,
            ALTERNATIVE_NAME_KEY: self.alternative_name,
            GROUP_BLOCK_KEY: self.group_block,
        }
        return {
            key: value
            for key, value in candidates.items()
            if value is not None and not _is_blank(value)
        }
