"""SQLAlchemy-backed blob store adapter for PERIODICA.

Stores blobs in the ``blob_store`` table (see `adapters.blobstore.schema`)
and implements the conditional write as a compare-and-swap UPDATE, so two
writers holding the same etag can never both succeed. SQLAlchemy errors are
mapped to blob-store exceptions:

- ``IntegrityError`` on a create-only insert → `PreconditionFailedError`
- any other ``DBAPIError`` (OperationalError, InterfaceError, ...) →
  `BlobStoreUnavailableError`
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import TYPE_CHECKING

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import DBAPIError, IntegrityError

from periodica.adapters.etags import UlidEtagGenerator
from periodica.interfaces.blobstore import (
    AbstractBlobStore,
    BlobNotFoundError,
    BlobStoreUnavailableError,
    PreconditionFailedError,
    VersionedBlob,
)

from .schema import blob_store

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

    from periodica.interfaces.etags import EtagGenerator

__all__ = ["SqlAlchemyBlobStore"]


class SqlAlchemyBlobStore(AbstractBlobStore):
    """SQLAlchemy-backed `AbstractBlobStore`.

    Each call runs in its own short transaction on a fresh connection; no
    state is held between calls.

    Args:
        engine: Engine bound to a database migrated to head.
        etags: Source of new etags. Defaults to a `UlidEtagGenerator`.
    """

    def __init__(self, engine: Engine, etags: EtagGenerator | None = None):
        self.engine = engine
        self._etags = etags or UlidEtagGenerator()

    # --------------------------------------------------------------------- #
    # Interface implementation
    # --------------------------------------------------------------------- #

    def get(self, bucket: str, key: str) -> VersionedBlob:
        stmt = select(blob_store.c.data, blob_store.c.etag).where(
            blob_store.c.bucket == bucket, blob_store.c.key == key
        )
        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).first()
        except DBAPIError as e:
            raise BlobStoreUnavailableError(str(e)) from e

        if row is None:
            raise BlobNotFoundError(bucket, key)
        return VersionedBlob(data=bytes(row.data), etag=row.etag)

    def put(
        self, bucket: str, key: str, data: bytes, expected_etag: str | None
    ) -> str:
        etag = self._etags.new_etag()
        values = {
            "data": bytes(data),
            "etag": etag,
            "updated_at": datetime.now(timezone.utc),
        }
        try:
            with self.engine.begin() as conn:
                if expected_etag is None:
                    conn.execute(
                        insert(blob_store).values(bucket=bucket, key=key, **values)
                    )
                else:
                    self._compare_and_swap(conn, bucket, key, expected_etag, values)
        except IntegrityError as e:
            raise PreconditionFailedError(bucket, key, expected_etag) from e
        except DBAPIError as e:
            raise BlobStoreUnavailableError(str(e)) from e
        return etag

    def delete(self, bucket: str, key: str) -> None:
        stmt = delete(blob_store).where(
            blob_store.c.bucket == bucket, blob_store.c.key == key
        )
        try:
            with self.engine.begin() as conn:
                conn.execute(stmt)
        except DBAPIError as e:
            raise BlobStoreUnavailableError(str(e)) from e

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    @staticmethod
    def _compare_and_swap(
        conn: Connection,
        bucket: str,
        key: str,
        expected_etag: str,
        values: dict[str, object],
    ) -> None:
        """Replace the row only if its etag is still `expected_etag`.

        On zero affected rows, a follow-up read distinguishes a missing blob
        from a stale etag.
        """
        stmt = (
            update(blob_store)
            .where(
                blob_store.c.bucket == bucket,
                blob_store.c.key == key,
                blob_store.c.etag == expected_etag,
            )
            .values(**values)
        )
        if conn.execute(stmt).rowcount == 1:
            return

        current = conn.execute(
            select(blob_store.c.etag).where(
                blob_store.c.bucket == bucket, blob_store.c.key == key
            )
        ).first()
        if current is None:
            raise BlobNotFoundError(bucket, key)
        raise PreconditionFailedError(bucket, key, expected_etag)
