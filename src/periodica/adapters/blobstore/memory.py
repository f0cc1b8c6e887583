"""In-memory versioned blob store backend.

This module provides a tiny, dependency-free blob store meant for **tests**,
examples, and local development. Blobs are kept entirely in RAM, keyed by
``(bucket, key)``. There is no persistence across process restarts.

Key behaviors
-------------
- **Conditional writes**: `put` compares the caller's expected etag with the
  current one and raises `PreconditionFailedError` on mismatch. The compare
  and the install happen under one lock, so two writers holding the same etag
  cannot both succeed.
- **Fresh etags**: each successful `put` asks the injected `EtagGenerator` for a
  new token, so rewriting identical bytes still bumps the version.
- **Thread-safety**: all reads/writes happen under an `RLock`.

Typical usage
-------------
    store = MemoryBlobStore()
    etag = store.put("bucket", "key", b"[]", expected_etag=None)
    blob = store.get("bucket", "key")  # VersionedBlob(data=b"[]", etag=etag)
"""

from __future__ import annotations

import threading

from periodica.adapters.etags import UlidEtagGenerator
from periodica.interfaces.blobstore import (
    AbstractBlobStore,
    BlobNotFoundError,
    PreconditionFailedError,
    VersionedBlob,
)
from periodica.interfaces.etags import EtagGenerator

__all__ = ["MemoryBlobStore"]


class MemoryBlobStore(AbstractBlobStore):
    """In-memory `AbstractBlobStore` backed by a dict.

    Args:
        etags: Source of new etags. Defaults to a `UlidEtagGenerator`.
    """

    def __init__(self, etags: EtagGenerator | None = None) -> None:
        self._etags = etags or UlidEtagGenerator()
        self._blobs: dict[tuple[str, str], VersionedBlob] = {}
        self._lock = threading.RLock()

    def get(self, bucket: str, key: str) -> VersionedBlob:
        with self._lock:
            try:
                return self._blobs[(bucket, key)]
            except KeyError:
                raise BlobNotFoundError(bucket, key) from None

    def put(
        self, bucket: str, key: str, data: bytes, expected_etag: str | None
    ) -> str:
        with self._lock:
            current = self._blobs.get((bucket, key))
            if expected_etag is None:
                if current is not None:
                    raise PreconditionFailedError(bucket, key, expected_etag)
            elif current is None:
                raise BlobNotFoundError(bucket, key)
            elif current.etag != expected_etag:
                raise PreconditionFailedError(bucket, key, expected_etag)

            etag = self._etags.new_etag()
            self._blobs[(bucket, key)] = VersionedBlob(data=bytes(data), etag=etag)
            return etag

    def delete(self, bucket: str, key: str) -> None:
        with self._lock:
            self._blobs.pop((bucket, key), None)
