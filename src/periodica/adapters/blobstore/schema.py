"""Blob store schema.

Defines the ``blob_store`` table used by `SqlAlchemyBlobStore`. Each row is
one named blob with its current etag.

Constraints (enforced here):

| Constraint                     | Purpose                                   |
|--------------------------------|-------------------------------------------|
| PRIMARY KEY(bucket, key)       | one current revision per blob              |
| CHECK(length(etag) >= 1)       | an etag is never empty                     |

Conditional writes are a single ``UPDATE ... WHERE etag = :expected``; the
row's etag column is the optimistic-concurrency token.

``updated_at`` is informational only. The adapter always writes UTC; SQLite
has no zone support and hands the value back naive.
"""

from __future__ import annotations

from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    LargeBinary,
    PrimaryKeyConstraint,
    String,
    Table,
    text,
)

from periodica.adapters.db.metadata import metadata

__all__ = ["blob_store"]

blob_store = Table(
    "blob_store",
    metadata,
    Column(
        "bucket",
        String(255),
        nullable=False,
        comment="Bucket (namespace) the blob belongs to.",
    ),
    Column(
        "key",
        String(1024),
        nullable=False,
        comment="Object key inside the bucket.",
    ),
    Column(
        "data",
        LargeBinary,
        nullable=False,
        comment="Blob content.",
    ),
    Column(
        "etag",
        String(64),
        nullable=False,
        comment="Opaque version token, replaced on every write.",
    ),
    Column(
        "updated_at",
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        comment="UTC timestamp of the last successful write.",
    ),
    PrimaryKeyConstraint("bucket", "key"),
    CheckConstraint("length(etag) >= 1", name="etag_not_empty"),
    comment="Named blobs with etag-guarded writes.",
)
