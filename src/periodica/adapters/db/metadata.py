"""The one `MetaData` every PERIODICA table is declared on.

Constraint names come from `NAMING_CONVENTION` rather than from the
database, so Alembic autogenerate sees the same names on every backend. The
``blob_store`` table, for instance, gets ``pk_blob_store`` and
``ck_blob_store_etag_not_empty``.
"""

from sqlalchemy import MetaData

NAMING_CONVENTION = {
    "pk": "pk_%(table_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "ix": "ix_%(table_name)s_%(column_0_N_label)s",
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)
