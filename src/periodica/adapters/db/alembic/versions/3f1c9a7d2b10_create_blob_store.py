"""Create blob_store table

Revision ID: 3f1c9a7d2b10
Revises:
Create Date: 2026-10-19

"""

# pylint: disable=invalid-name

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f1c9a7d2b10"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "blob_store",
        sa.Column(
            "bucket",
            sa.String(length=255),
            nullable=False,
            comment="Bucket (namespace) the blob belongs to.",
        ),
        sa.Column(
            "key",
            sa.String(length=1024),
            nullable=False,
            comment="Object key inside the bucket.",
        ),
        sa.Column(
            "data",
            sa.LargeBinary(),
            nullable=False,
            comment="Blob content.",
        ),
        sa.Column(
            "etag",
            sa.String(length=64),
            nullable=False,
            comment="Opaque version token, replaced on every write.",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
            comment="UTC timestamp of the last successful write.",
        ),
        sa.PrimaryKeyConstraint("bucket", "key", name=op.f("pk_blob_store")),
        sa.CheckConstraint(
            "length(etag) >= 1", name=op.f("ck_blob_store_etag_not_empty")
        ),
        comment="Named blobs with etag-guarded writes.",
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("blob_store")
