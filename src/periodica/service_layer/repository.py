"""Catalog repository backed by a single JSON blob.

The whole periodic table lives in one object: a JSON array of element
records. `CatalogRepository` reads and writes that object through an
`AbstractBlobStore`, converting between bytes and `CatalogDocument`, and
translating blob-store and domain errors into the service-layer taxonomy.

Writes are always conditional. `save` hands the etag captured by `load`
back to the store, so a document changed by someone else in between is
never overwritten; the caller gets a `ConflictError` instead.

Typical usage:
    ```py
    repo = CatalogRepository(store, bucket="periodic-table", key="periodic_table.json")
    doc = repo.load()
    new_etag = repo.save(merge_patches(doc, patches))
    ```
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from periodica.domain.catalog import CatalogDocument
from periodica.domain.element import Element, Record
from periodica.domain.errors import GroupBlockError, MalformedRecordError
from periodica.interfaces.blobstore import (
    BlobNotFoundError,
    BlobStoreError,
    PreconditionFailedError,
)

from .errors import (
    CatalogNotFoundError,
    ConflictError,
    DeserializationError,
    ElementNotFoundError,
    InvalidGroupBlockError,
    StorageUnavailableError,
)

if TYPE_CHECKING:
    from periodica.interfaces.blobstore import AbstractBlobStore

logger = logging.getLogger(__name__)


def decode_records(data: bytes) -> list[Record]:
    """Decode blob bytes into a list of element records.

    Raises:
        DeserializationError: If the bytes are not JSON, or not a JSON array
            of objects.
    """
    try:
        payload = json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DeserializationError(f"Catalog is not valid JSON: {e}") from e

    if not isinstance(payload, list):
        raise DeserializationError(
            f"Catalog must be a JSON array, got {type(payload).__name__}"
        )
    for index, record in enumerate(payload):
        if not isinstance(record, dict):
            raise DeserializationError(
                f"Catalog entry {index} must be a JSON object, "
                f"got {type(record).__name__}"
            )
    return payload


def encode_records(records: Iterable[Record]) -> bytes:
    """Encode records as a pretty-printed JSON array (UTF-8)."""
    return json.dumps(list(records), indent=2, ensure_ascii=False).encode("utf-8")


class CatalogRepository:
    """Read and conditionally write the catalog document.

    Args:
        blob_store: Store holding the catalog blob.
        bucket: Bucket (namespace) of the catalog blob.
        key: Key of the catalog blob.
    """

    def __init__(self, blob_store: AbstractBlobStore, bucket: str, key: str) -> None:
        self.blob_store = blob_store
        self.bucket = bucket
        self.key = key

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({type(self.blob_store).__name__}, "
            f"bucket={self.bucket!r}, key={self.key!r})"
        )

    # --- Document access ---

    def load(self) -> CatalogDocument:
        """Read the catalog and the etag it was read at.

        Raises:
            CatalogNotFoundError: If the blob does not exist.
            DeserializationError: If the content is not a JSON array of objects.
            StorageUnavailableError: On blob store failures.
        """
        try:
            blob = self.blob_store.get(self.bucket, self.key)
        except BlobNotFoundError as e:
            raise CatalogNotFoundError(self.bucket, self.key) from e
        except BlobStoreError as e:
            raise StorageUnavailableError(str(e)) from e

        records = decode_records(blob.data)
        logger.debug(
            "Loaded %d records from %s/%s (etag %s)",
            len(records),
            self.bucket,
            self.key,
            blob.etag,
        )
        return CatalogDocument.from_records(records, etag=blob.etag)

    def exists(self) -> bool:
        """Whether a catalog blob is stored at this location.

        Raises:
            StorageUnavailableError: On blob store failures.
        """
        try:
            return self.blob_store.exists(self.bucket, self.key)
        except BlobStoreError as e:
            raise StorageUnavailableError(str(e)) from e

    def save(self, document: CatalogDocument) -> str:
        """Write `document` back if the stored etag is still `document.etag`.

        Returns:
            str: The etag of the new revision.

        Raises:
            ConflictError: If the catalog changed since `document` was loaded.
            CatalogNotFoundError: If the catalog was deleted in the meantime.
            StorageUnavailableError: On blob store failures.
        """
        return self._put(document.records, expected_etag=document.etag)

    def create(self, records: Iterable[Record]) -> str:
        """Write a brand new catalog. Fails if one already exists.

        Returns:
            str: The etag of the first revision.

        Raises:
            ConflictError: If a catalog blob already exists at this key.
            StorageUnavailableError: On blob store failures.
        """
        return self._put(records, expected_etag=None)

    def _put(self, records: Iterable[Record], expected_etag: str | None) -> str:
        data = encode_records(records)
        try:
            etag = self.blob_store.put(self.bucket, self.key, data, expected_etag)
        except PreconditionFailedError as e:
            raise ConflictError(str(e)) from e
        except BlobNotFoundError as e:
            raise CatalogNotFoundError(self.bucket, self.key) from e
        except BlobStoreError as e:
            raise StorageUnavailableError(str(e)) from e

        logger.debug(
            "Wrote %s/%s (etag %s -> %s)", self.bucket, self.key, expected_etag, etag
        )
        return etag

    # --- Element queries ---

    def find_all(self) -> list[Element]:
        """All elements, in stored order.

        Raises:
            DeserializationError: If a record lacks a required field.
        """
        try:
            return [Element.from_record(record) for record in self.load().records]
        except MalformedRecordError as e:
            raise DeserializationError(str(e)) from e

    def find_by_group(self, selector: str) -> list[Element]:
        """Elements whose group label or block label equals `selector`.

        The selector is compared as given (``"1"``, ``"n/a"``, ``"s-block"``);
        normalize it with `validate_group_selector` first.

        Raises:
            InvalidGroupBlockError: If any stored `group_block` fails to parse.
                Nothing is returned in that case.
        """
        matching: list[Element] = []
        for element in self.find_all():
            try:
                group_block = element.parse_group_block()
            except GroupBlockError as e:
                raise InvalidGroupBlockError(
                    f"Element ({element.atomic_number}): {e}"
                ) from e
            if group_block.matches(selector):
                matching.append(element)
        return matching

    def find_by_atomic_number(self, atomic_number: int) -> Element:
        """The element with this atomic number.

        Raises:
            ElementNotFoundError: If there is none.
        """
        for element in self.find_all():
            if element.atomic_number == atomic_number:
                return element
        raise ElementNotFoundError(atomic_number)
