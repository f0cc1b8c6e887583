"""Wire a blob store, the catalog repository and the message bus together."""

from __future__ import annotations

import functools
import inspect
import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from periodica import config
from periodica.adapters.blobstore.memory import MemoryBlobStore
from periodica.service_layer.handlers import COMMAND_HANDLERS
from periodica.service_layer.messagebus import MessageBus
from periodica.service_layer.repository import CatalogRepository

if TYPE_CHECKING:
    from periodica.interfaces.blobstore import AbstractBlobStore
    from periodica.service_layer.commands import Command

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppContainer:
    """Everything an entrypoint needs: the bus for writes, the repository for reads."""

    message_bus: MessageBus
    repository: CatalogRepository


def build_blob_store(backend: str | None = None) -> AbstractBlobStore:
    """Build the blob store for `backend` (defaults to `PERIODICA_BLOBSTORE`).

    Backend adapters are imported lazily so that, for example, the memory
    backend does not need a database driver.

    Raises:
        UnknownBlobStoreBackendError: If the backend name is not known.
        DatabaseUrlNotSetError: If the ``sql`` backend is chosen without
            `PERIODICA_DB_URL`.
    """
    backend = backend or config.get_blobstore_backend()
    logger.debug("Building %s blob store", backend)

    match backend:
        case "memory":
            return MemoryBlobStore()
        case "sql":
            # pylint: disable=import-outside-toplevel
            from periodica.adapters.blobstore.sql import SqlAlchemyBlobStore
            from periodica.adapters.db.engine import make_engine

            return SqlAlchemyBlobStore(make_engine(config.get_db_url()))
        case "s3":
            # pylint: disable=import-outside-toplevel
            from periodica.adapters.blobstore.s3 import S3BlobStore, make_s3_client

            client = make_s3_client(
                region=config.get_s3_region(),
                endpoint_url=config.get_s3_endpoint_url(),
            )
            return S3BlobStore(client)
        case _:
            raise config.UnknownBlobStoreBackendError(backend)


def build_repository(
    blob_store: AbstractBlobStore,
    bucket: str | None = None,
    key: str | None = None,
) -> CatalogRepository:
    """Build a repository for the configured (or given) bucket and key."""
    return CatalogRepository(
        blob_store,
        bucket=bucket or config.get_bucket(),
        key=key or config.get_key(),
    )


def build_message_bus(
    repository: CatalogRepository,
    command_handlers: Mapping[type[Command], Callable[..., Any]],
) -> MessageBus:
    """Build a message bus with injected dependencies."""
    dependencies = {"repository": repository}
    injected_command_handlers = {
        command_type: inject_dependencies(handler, dependencies)
        for command_type, handler in command_handlers.items()
    }
    return MessageBus(repository, command_handlers=injected_command_handlers)


def bootstrap(blob_store: AbstractBlobStore | None = None) -> AppContainer:
    """Assemble the application from configuration.

    Args:
        blob_store: Use this store instead of the configured backend (tests).
    """
    repository = build_repository(blob_store or build_blob_store())
    message_bus = build_message_bus(repository, COMMAND_HANDLERS)
    return AppContainer(message_bus=message_bus, repository=repository)


def inject_dependencies(
    handler: Callable, dependencies: Mapping[str, object]
) -> Callable:
    """Bind the dependencies a handler asks for, by parameter name."""
    params = inspect.signature(handler).parameters
    deps = {
        name: dependency for name, dependency in dependencies.items() if name in params
    }
    return functools.partial(handler, **deps)
