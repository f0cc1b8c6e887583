"""Versioned blob store interface.

This module defines the minimal, backend-agnostic contract PERIODICA needs
from an object store: named blobs addressed by ``(bucket, key)``, each with an
opaque version token ("etag") that changes on every successful write.

Key concepts:
    - **Opaque etags**: Callers never interpret an etag; they only hand back
      the one they read.
    - **Conditional writes**: `put` succeeds only if the caller's expected etag
      matches the store's current etag for that key. ``expected_etag=None``
      means "create only if absent". A mismatch is always reported as
      `PreconditionFailedError`; a store must never silently overwrite.
    - **Fresh tokens**: every successful `put` yields a new etag, even if the
      bytes are unchanged.

Public API:
    - Exceptions: `BlobStoreError`, `BlobNotFoundError`,
      `PreconditionFailedError`, `BlobStoreUnavailableError`
    - Data types: `VersionedBlob`
    - Abstract interface: `AbstractBlobStore`

Typical usage:
    ```py
    blob = store.get("periodic-table", "periodic_table.json")
    new_etag = store.put("periodic-table", "periodic_table.json", data, blob.etag)
    ```
"""

import abc
from dataclasses import dataclass


class BlobStoreError(Exception):
    """Base class for all blob-store errors."""


class BlobNotFoundError(BlobStoreError):
    """Requested blob is absent from the store."""

    def __init__(self, bucket: str, key: str) -> None:
        super().__init__(f"Blob {bucket}/{key} not found")
        self.bucket = bucket
        self.key = key


class PreconditionFailedError(BlobStoreError):
    """The expected etag did not match the store's current etag."""

    def __init__(
        self, bucket: str, key: str, expected: str | None, message: str | None = None
    ) -> None:
        if message is None:
            message = (
                f"Blob {bucket}/{key} already exists"
                if expected is None
                else f"Blob {bucket}/{key} changed since etag {expected!r} was read"
            )
        super().__init__(message)
        self.bucket = bucket
        self.key = key
        self.expected = expected


class BlobStoreUnavailableError(BlobStoreError):
    """The backend could not be reached or failed unexpectedly."""


@dataclass(frozen=True)
class VersionedBlob:
    """Blob content together with the etag it was read at.

    Attributes:
        data: Raw blob bytes.
        etag: Opaque version token of this revision.
    """

    data: bytes
    etag: str


class AbstractBlobStore(abc.ABC):
    """Named blobs with etag-guarded writes."""

    @abc.abstractmethod
    def get(self, bucket: str, key: str) -> VersionedBlob:
        """Read a blob and its current etag.

        Args:
            bucket: Bucket (namespace) name.
            key: Object key inside the bucket.

        Returns:
            VersionedBlob: The bytes and etag.

        Raises:
            BlobNotFoundError: If the blob does not exist.
            BlobStoreUnavailableError: On transport/backend failures.
        """

    @abc.abstractmethod
    def put(
        self, bucket: str, key: str, data: bytes, expected_etag: str | None
    ) -> str:
        """Write a blob if, and only if, its etag is still `expected_etag`.

        Args:
            bucket: Bucket (namespace) name.
            key: Object key inside the bucket.
            data: New blob content.
            expected_etag: The etag observed at read time, or ``None`` to
                create a blob that must not exist yet.

        Returns:
            str: The new etag.

        Raises:
            PreconditionFailedError: If the current etag differs from
                `expected_etag` (or the blob exists and `expected_etag` is None).
            BlobNotFoundError: If `expected_etag` is set but the blob is absent.
            BlobStoreUnavailableError: On transport/backend failures.
        """

    @abc.abstractmethod
    def delete(self, bucket: str, key: str) -> None:
        """Delete a blob. Deleting an absent blob is a no-op.

        Raises:
            BlobStoreUnavailableError: On transport/backend failures.
        """

    # --- Convenience methods (non-abstract) ---

    def exists(self, bucket: str, key: str) -> bool:
        """Return ``True`` if the blob is present."""
        try:
            self.get(bucket, key)
        except BlobNotFoundError:
            return False
        return True
