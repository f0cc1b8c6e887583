"""Errors surfaced by the PERIODICA service layer.

Adapter and domain exceptions are translated into this taxonomy at the
service-layer boundary (with the original exception chained as
``__cause__``), so callers only need to handle `CatalogServiceError`.

    CatalogServiceError
    ├── NotFoundError
    │   ├── CatalogNotFoundError
    │   └── ElementNotFoundError
    ├── ValidationError
    │   ├── EmptyPatchBatchError
    │   ├── InvalidPatchError
    │   ├── InvalidGroupBlockError
    │   ├── InvalidGroupSelectorError
    │   └── InvalidCatalogError
    ├── ConflictError
    ├── DeserializationError
    └── StorageUnavailableError
"""


class CatalogServiceError(Exception):
    """Base class for all errors raised by the catalog service."""


# ============================================================================
#                               Not found
# ============================================================================


class NotFoundError(CatalogServiceError):
    """Base class for lookups that found nothing."""


class CatalogNotFoundError(NotFoundError):
    """Raised when the catalog document does not exist in the blob store."""

    def __init__(self, bucket: str, key: str) -> None:
        super().__init__(f"Catalog {bucket}/{key} not found")
        self.bucket = bucket
        self.key = key


class ElementNotFoundError(NotFoundError):
    """Raised when no element has the requested atomic number."""

    def __init__(self, atomic_number: int) -> None:
        super().__init__(f"Element ({atomic_number}) not found in catalog")
        self.atomic_number = atomic_number


# ============================================================================
#                               Validation
# ============================================================================


class ValidationError(CatalogServiceError):
    """Base class for rejected input."""


class EmptyPatchBatchError(ValidationError):
    """Raised when a patch batch contains no patch that changes anything."""

    def __init__(self) -> None:
        super().__init__("Patch batch contains no changes")


class InvalidPatchError(ValidationError):
    """Raised when a patch in a batch is malformed."""


class InvalidGroupBlockError(ValidationError):
    """Raised when a `group_block` string cannot be parsed."""


class InvalidGroupSelectorError(ValidationError):
    """Raised when a listing filter is not a group or block label."""


class InvalidCatalogError(ValidationError):
    """Raised when records offered for import do not form a valid catalog."""


# ============================================================================
#                           Storage and encoding
# ============================================================================


class ConflictError(CatalogServiceError):
    """Raised when the catalog changed between read and write.

    The write was not applied. Reload and retry if appropriate.
    """


class DeserializationError(CatalogServiceError):
    """Raised when stored catalog content cannot be decoded or interpreted."""


class StorageUnavailableError(CatalogServiceError):
    """Raised when the blob store cannot be reached or fails unexpectedly."""
