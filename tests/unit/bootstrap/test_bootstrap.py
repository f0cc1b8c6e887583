"""Unit tests for the composition root."""

import pytest

from periodica import config
from periodica.adapters.blobstore.memory import MemoryBlobStore
from periodica.adapters.blobstore.s3 import S3BlobStore
from periodica.adapters.blobstore.sql import SqlAlchemyBlobStore
from periodica.bootstrap import (
    AppContainer,
    bootstrap,
    build_blob_store,
    build_message_bus,
    build_repository,
    inject_dependencies,
)
from periodica.service_layer import commands

# pylint: disable=unused-argument


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without PERIODICA_* variables."""
    for name in (
        config.DB_URL_ENV,
        config.BLOBSTORE_ENV,
        config.BUCKET_ENV,
        config.KEY_ENV,
        config.S3_ENDPOINT_URL_ENV,
    ):
        monkeypatch.delenv(name, raising=False)


def test_inject_dependencies_binds_by_name():
    """Only the dependencies a handler declares are bound."""

    def handler(cmd, repository):
        return (cmd, repository)

    bound = inject_dependencies(handler, {"repository": "repo", "other": "unused"})
    assert bound("cmd") == ("cmd", "repo")


def test_inject_dependencies_without_params():
    """Handlers that need nothing are called with just the command."""
    bound = inject_dependencies(lambda cmd: cmd, {"repository": "repo"})
    assert bound("cmd") == "cmd"


def test_build_blob_store_memory():
    """The memory backend needs no configuration."""
    assert isinstance(build_blob_store("memory"), MemoryBlobStore)


def test_build_blob_store_sql(monkeypatch, tmp_path):
    """The sql backend uses PERIODICA_DB_URL."""
    monkeypatch.setenv(config.DB_URL_ENV, f"sqlite:///{tmp_path / 'p.db'}")
    store = build_blob_store("sql")
    assert isinstance(store, SqlAlchemyBlobStore)
    assert store.engine.url.database.endswith("p.db")


def test_build_blob_store_sql_requires_url():
    """The sql backend without a URL is a configuration error."""
    with pytest.raises(config.DatabaseUrlNotSetError):
        build_blob_store("sql")


def test_build_blob_store_s3(monkeypatch):
    """The s3 backend builds a boto3 client for the configured region."""
    monkeypatch.setenv(config.S3_REGION_ENV, "eu-central-1")
    store = build_blob_store("s3")
    assert isinstance(store, S3BlobStore)


def test_build_blob_store_from_env(monkeypatch):
    """Without an explicit backend, PERIODICA_BLOBSTORE decides."""
    monkeypatch.setenv(config.BLOBSTORE_ENV, "memory")
    assert isinstance(build_blob_store(), MemoryBlobStore)


def test_build_blob_store_unknown():
    """Unknown names are rejected."""
    with pytest.raises(config.UnknownBlobStoreBackendError):
        build_blob_store("ftp")


def test_build_repository_uses_configured_location(monkeypatch):
    """Bucket and key come from the environment unless given."""
    monkeypatch.setenv(config.BUCKET_ENV, "b")
    monkeypatch.setenv(config.KEY_ENV, "k.json")
    store = MemoryBlobStore()

    repo = build_repository(store)
    assert (repo.blob_store, repo.bucket, repo.key) == (store, "b", "k.json")

    explicit = build_repository(store, bucket="x", key="y")
    assert (explicit.bucket, explicit.key) == ("x", "y")


def test_build_message_bus_injects_repository(repository):
    """Handlers registered on the bus receive the repository."""
    seen = []

    def handler(cmd, repository):
        seen.append(repository)
        return "ok"

    bus = build_message_bus(repository, {commands.PatchElements: handler})
    assert bus.handle(commands.PatchElements(patches=())) == "ok"
    assert seen == [repository]
    assert bus.repository is repository


def test_bootstrap_with_explicit_store(blob_store):
    """`bootstrap` wires one repository into both the container and the bus."""
    container = bootstrap(blob_store=blob_store)
    assert isinstance(container, AppContainer)
    assert container.repository.blob_store is blob_store
    assert container.message_bus.repository is container.repository


def test_bootstrap_from_env(monkeypatch):
    """Without a store, the configured backend is built."""
    monkeypatch.setenv(config.BLOBSTORE_ENV, "memory")
    container = bootstrap()
    assert isinstance(container.repository.blob_store, MemoryBlobStore)
