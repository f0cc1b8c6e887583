"""Module defining Commands."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""


@dataclass(frozen=True)
class ElementPatchRequest:
    """One requested change to an element, as received from a caller.

    Values are not validated here; the handler turns each request into a
    domain `ElementPatch` and reports anything invalid.
    """

    atomic_number: Any
    name: str | None = None
    alternative_name: str | None = None
    group_block: str | None = None


@dataclass(frozen=True)
class PatchElements(Command):
    """Command to apply a batch of element patches to the catalog."""

    patches: tuple[ElementPatchRequest, ...]


@dataclass(frozen=True)
class ImportCatalog(Command):
    """Command to seed a new catalog from a list of element records."""

    records: tuple[dict[str, Any], ...] = field(default_factory=tuple)
