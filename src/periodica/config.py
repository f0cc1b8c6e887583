"""Configuration utilities for PERIODICA.

Settings come from the environment and are read lazily, at call time, so
tests can monkeypatch variables without reloading modules.

| Variable                    | Meaning                                | Default               |
|-----------------------------|----------------------------------------|-----------------------|
| `PERIODICA_BLOBSTORE`       | backend: `sql`, `s3` or `memory`       | `sql`                 |
| `PERIODICA_DB_URL`          | SQLAlchemy URL for the `sql` backend   | (required for `sql`)  |
| `PERIODICA_BUCKET`          | bucket holding the catalog document    | `periodic-table`      |
| `PERIODICA_KEY`             | key of the catalog document            | `periodic_table.json` |
| `PERIODICA_S3_REGION`       | region for the `s3` backend            | `us-east-1`           |
| `PERIODICA_S3_ENDPOINT_URL` | endpoint override (MinIO, LocalStack)  | unset                 |
"""

import os
import sys
from importlib.resources import files
from typing import TextIO

from alembic.config import Config

ALEMBIC_URL_KEY = "sqlalchemy.url"  # pragma: no mutate
ALEMBIC_SCRIPT_LOCATION_KEY = "script_location"  # pragma: no mutate

DB_URL_ENV = "PERIODICA_DB_URL"
BLOBSTORE_ENV = "PERIODICA_BLOBSTORE"
BUCKET_ENV = "PERIODICA_BUCKET"
KEY_ENV = "PERIODICA_KEY"
S3_REGION_ENV = "PERIODICA_S3_REGION"
S3_ENDPOINT_URL_ENV = "PERIODICA_S3_ENDPOINT_URL"

DEFAULT_BLOBSTORE = "sql"
DEFAULT_BUCKET = "periodic-table"
DEFAULT_KEY = "periodic_table.json"
DEFAULT_S3_REGION = "us-east-1"

BLOBSTORE_BACKENDS = ("sql", "s3", "memory")


class DatabaseUrlNotSetError(Exception):
    """Raised when the PERIODICA_DB_URL environment variable is not set."""


class UnknownBlobStoreBackendError(ValueError):
    """Raised when PERIODICA_BLOBSTORE names a backend that does not exist."""

    def __init__(self, backend: str) -> None:
        super().__init__(
            f"Unknown blob store backend {backend!r}; "
            f"expected one of {', '.join(BLOBSTORE_BACKENDS)}"
        )
        self.backend = backend


def get_db_url() -> str:
    """Get the database URL from the environment.

    Returns:
        The value of the `PERIODICA_DB_URL` environment variable.

    Raises:
        DatabaseUrlNotSetError: If `PERIODICA_DB_URL` is not set.
    """
    if not (url := os.environ.get(DB_URL_ENV)):
        raise DatabaseUrlNotSetError
    return url


def get_blobstore_backend() -> str:
    """Get the configured blob store backend name (lowercased).

    Raises:
        UnknownBlobStoreBackendError: If the value is not a known backend.
    """
    backend = (os.environ.get(BLOBSTORE_ENV) or DEFAULT_BLOBSTORE).strip().lower()
    if backend not in BLOBSTORE_BACKENDS:
        raise UnknownBlobStoreBackendError(backend)
    return backend


def get_bucket() -> str:
    """Bucket that holds the catalog document."""
    return os.environ.get(BUCKET_ENV) or DEFAULT_BUCKET


def get_key() -> str:
    """Key of the catalog document inside the bucket."""
    return os.environ.get(KEY_ENV) or DEFAULT_KEY


def get_s3_region() -> str:
    return os.environ.get(S3_REGION_ENV) or DEFAULT_S3_REGION


def get_s3_endpoint_url() -> str | None:
    return os.environ.get(S3_ENDPOINT_URL_ENV) or None


def build_alembic_config(
    db_url: str | None = None, stdout: TextIO = sys.stdout
) -> Config:
    """Build an Alembic `Config` object for PERIODICA's migrations.

    Sets only Alembic "main" options:
    - `sqlalchemy.url` → the database URL you pass
    - `script_location` → PERIODICA's packaged Alembic scripts

    Args:
        db_url: SQLAlchemy database URL (e.g., `sqlite:///periodica.db`). Can be
            `None` (default) only in contexts where Alembic won't need to
            connect to the DB.
        stdout: Text stream Alembic will write status lines to. Defaults to
            `sys.stdout`; override in tests to capture output.

    Returns:
        An `alembic.config.Config` pointing to PERIODICA's migration scripts.
    """
    cfg = Config(stdout=stdout)
    if db_url is not None:
        cfg.set_main_option(ALEMBIC_URL_KEY, db_url)
    cfg.set_main_option(
        ALEMBIC_SCRIPT_LOCATION_KEY,
        str(files("periodica.adapters.db.alembic")),
    )
    return cfg
