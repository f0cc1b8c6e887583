"""The catalog document and the merge engine that patches it.

The whole catalog lives in one blob. A `CatalogDocument` is the decoded
content of that blob (an ordered tuple of loosely-typed records) together with
the etag it was read at. `merge_patches` computes the next document from a
batch of `ElementPatch` objects; it never touches the etag, which only the
repository's conditional write consumes.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, replace

from .element import ElementPatch, Record, record_atomic_number


@dataclass(frozen=True, slots=True)
class CatalogDocument:
    """Catalog content plus the version token it was observed at.

    Attributes:
        records: Element rows in stored order. Each row is the decoded JSON
            object, unknown keys included.
        etag: Opaque version token of the blob these records came from.
    """

    records: tuple[Record, ...]
    etag: str

    @classmethod
    def from_records(cls, records: Iterable[Record], etag: str) -> CatalogDocument:
        """Build a document from any iterable of records."""
        return cls(records=tuple(records), etag=etag)

    def with_etag(self, etag: str) -> CatalogDocument:
        """Return a copy of this document carrying a new etag."""
        return replace(self, etag=etag)


def merge_patches(
    document: CatalogDocument, patches: Sequence[ElementPatch]
) -> CatalogDocument:
    """Apply a batch of patches to a document, in memory.

    Rules:
        - Each record is matched against the *first* patch in `patches` with
          the same atomic number; later duplicates are ignored.
        - Unmatched records are passed through as the same object.
        - Matched records are shallow-copied and only the non-blank patch
          fields are overwritten. The atomic number is never changed.
        - Patches that match no record are dropped; nothing is inserted.
        - The etag is carried over unchanged.

    Args:
        document: The document as loaded from the repository.
        patches: The patches to apply.

    Returns:
        CatalogDocument: The merged document with the original etag.

    Raises:
        MalformedRecordError: If a record has no integer atomic number.
    """
    lookup: dict[int, ElementPatch] = {}
    for patch in patches:
        lookup.setdefault(patch.atomic_number, patch)

    merged: list[Record] = []
    for record in document.records:
        patch = lookup.get(record_atomic_number(record))
        if patch is None:
            merged.append(record)
            continue
        updated = dict(record)
        updated.update(patch.changes)
        merged.append(updated)

    return CatalogDocument(records=tuple(merged), etag=document.etag)
