"""Bootstrap (composition root) for PERIODICA.

Assembles the application at runtime: picks a blob store backend from
configuration, builds the catalog repository on top of it, and binds that
repository into the command handlers behind a `MessageBus`.

Import rules:
- Entry points import *this* package (not adapters/service_layer/domain).
- This package may import: `periodica.adapters`, `periodica.service_layer`,
  `periodica.interfaces`, `periodica.domain`, and `periodica.config`.
- Inner layers must not import `periodica.bootstrap`.
"""

from .bootstrap import (
    AppContainer,
    bootstrap,
    build_blob_store,
    build_message_bus,
    build_repository,
    inject_dependencies,
)

__all__ = [
    "AppContainer",
    "bootstrap",
    "build_blob_store",
    "build_message_bus",
    "build_repository",
    "inject_dependencies",
]
