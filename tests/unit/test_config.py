"""Unit tests for environment-driven configuration."""

from importlib.resources import files

import pytest

from periodica import config

ALL_VARS = [
    config.DB_URL_ENV,
    config.BLOBSTORE_ENV,
    config.BUCKET_ENV,
    config.KEY_ENV,
    config.S3_REGION_ENV,
    config.S3_ENDPOINT_URL_ENV,
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Start every test without PERIODICA_* variables."""
    for name in ALL_VARS:
        monkeypatch.delenv(name, raising=False)


def test_db_url_from_env(monkeypatch):
    """PERIODICA_DB_URL is returned as is."""
    monkeypatch.setenv(config.DB_URL_ENV, "sqlite:///periodica.db")
    assert config.get_db_url() == "sqlite:///periodica.db"


@pytest.mark.parametrize("value", [None, ""])
def test_db_url_missing(monkeypatch, value):
    """Unset and empty URLs both count as missing."""
    if value is not None:
        monkeypatch.setenv(config.DB_URL_ENV, value)
    with pytest.raises(config.DatabaseUrlNotSetError):
        config.get_db_url()


def test_defaults():
    """Without configuration, the documented defaults apply."""
    assert config.get_blobstore_backend() == "sql"
    assert config.get_bucket() == "periodic-table"
    assert config.get_key() == "periodic_table.json"
    assert config.get_s3_region() == "us-east-1"
    assert config.get_s3_endpoint_url() is None


def test_overrides(monkeypatch):
    """Every setting can be overridden from the environment."""
    monkeypatch.setenv(config.BLOBSTORE_ENV, " S3 ")
    monkeypatch.setenv(config.BUCKET_ENV, "elements")
    monkeypatch.setenv(config.KEY_ENV, "table.json")
    monkeypatch.setenv(config.S3_REGION_ENV, "eu-west-1")
    monkeypatch.setenv(config.S3_ENDPOINT_URL_ENV, "http://localhost:4566")

    assert config.get_blobstore_backend() == "s3"
    assert config.get_bucket() == "elements"
    assert config.get_key() == "table.json"
    assert config.get_s3_region() == "eu-west-1"
    assert config.get_s3_endpoint_url() == "http://localhost:4566"


def test_unknown_backend(monkeypatch):
    """Backends other than sql/s3/memory are rejected."""
    monkeypatch.setenv(config.BLOBSTORE_ENV, "redis")
    with pytest.raises(config.UnknownBlobStoreBackendError, match="redis") as excinfo:
        config.get_blobstore_backend()
    assert excinfo.value.backend == "redis"


def test_build_alembic_config_points_at_packaged_scripts():
    """The Alembic config uses the packaged migrations and the given URL."""
    cfg = config.build_alembic_config("sqlite:///x.db")
    assert cfg.get_main_option(config.ALEMBIC_URL_KEY) == "sqlite:///x.db"
    assert cfg.get_main_option(config.ALEMBIC_SCRIPT_LOCATION_KEY) == str(
        files("periodica.adapters.db.alembic")
    )


def test_build_alembic_config_without_url():
    """The URL is optional for offline commands."""
    cfg = config.build_alembic_config()
    assert cfg.get_main_option(config.ALEMBIC_URL_KEY) is None
