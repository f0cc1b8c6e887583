"""Pytest fixtures for blob store contract tests.

Provided fixtures
-----------------
- **store**: Parametrized backend factory returning a fresh, empty
  `AbstractBlobStore` per test. ``"memory"`` is `MemoryBlobStore`; ``"sql"``
  is `SqlAlchemyBlobStore` on a file-backed SQLite database migrated with
  Alembic (file-backed so that threads get real, separate connections).

The S3 adapter is covered by stubbed unit tests instead; it has no local
backend to run this suite against.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from periodica.adapters.blobstore.memory import MemoryBlobStore
from periodica.adapters.blobstore.sql import SqlAlchemyBlobStore

if TYPE_CHECKING:
    from periodica.interfaces.blobstore import AbstractBlobStore


@pytest.fixture(params=["memory", "sql"])
def store(request: pytest.FixtureRequest) -> AbstractBlobStore:
    """Return a fresh blob store for the requested backend."""
    match request.param:
        case "memory":
            return MemoryBlobStore()
        case "sql":
            return SqlAlchemyBlobStore(request.getfixturevalue("sqlite_engine_file"))
        case _:
            raise ValueError(f"unknown store type: {request.param}")


@pytest.fixture
def payload() -> bytes:
    """Small JSON payload."""
    return b'[{"name": "Hydrogen", "atomic_number": 1}]'
