"""Service layer command handlers.

Handlers take a command plus their injected dependencies (see
`periodica.bootstrap`) and return a result to the caller through the
message bus. Domain exceptions are translated into
`periodica.service_layer.errors` here, before any write happens.
"""

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from periodica.domain import errors as domain_errors
from periodica.domain.catalog import CatalogDocument, merge_patches
from periodica.domain.element import Element, ElementPatch, Record

from . import commands
from .errors import (
    CatalogServiceError,
    ConflictError,
    DeserializationError,
    EmptyPatchBatchError,
    InvalidCatalogError,
    InvalidGroupBlockError,
    InvalidPatchError,
)
from .repository import CatalogRepository

logger = logging.getLogger(__name__)


class PatchState(Enum):
    """Steps of a patch cycle, as reported in DEBUG logs."""

    LOADING = "loading"
    MERGING = "merging"
    SAVING = "saving"
    DONE = "done"
    FAILED = "failed"


def _log_state(state: PatchState, detail: str = "") -> None:
    logger.debug("PatchElements: %s%s", state.name, f" ({detail})" if detail else "")


def _build_patch(request: commands.ElementPatchRequest) -> ElementPatch:
    try:
        return ElementPatch(
            atomic_number=request.atomic_number,
            name=request.name,
            alternative_name=request.alternative_name,
            group_block=request.group_block,
        )
    except domain_errors.InvalidPatchError as e:
        raise InvalidPatchError(str(e)) from e
    except domain_errors.GroupBlockError as e:
        raise InvalidGroupBlockError(
            f"Invalid patch for element ({request.atomic_number}): {e}"
        ) from e


def build_patches(
    requests: Iterable[commands.ElementPatchRequest],
) -> list[ElementPatch]:
    """Validate patch requests and drop the ones that change nothing.

    Every request is validated, including ones that turn out to be empty, so
    a malformed entry rejects the whole batch.

    Raises:
        InvalidPatchError: If an atomic number or field type is invalid.
        InvalidGroupBlockError: If a non-blank `group_block` does not parse.
        EmptyPatchBatchError: If no request would change anything.
    """
    patches = [_build_patch(request) for request in requests]
    if not (non_empty := [patch for patch in patches if not patch.is_empty]):
        raise EmptyPatchBatchError
    return non_empty


# ============================================================================
#                           Catalog write handlers
# ============================================================================


def patch_elements(
    cmd: commands.PatchElements, repository: CatalogRepository
) -> CatalogDocument:
    """Apply a batch of element patches with one read-merge-write cycle.

    The write is conditional on the etag observed by the read. On a
    concurrent change the cycle fails with `ConflictError` and nothing is
    retried.

    Returns:
        CatalogDocument: The merged document, carrying the etag of the new
        revision.
    """
    patches = build_patches(cmd.patches)

    state = PatchState.LOADING
    try:
        _log_state(state, f"{len(patches)} patch(es)")
        document = repository.load()

        state = PatchState.MERGING
        _log_state(state, f"etag {document.etag}")
        try:
            merged = merge_patches(document, patches)
        except domain_errors.MalformedRecordError as e:
            raise DeserializationError(str(e)) from e

        state = PatchState.SAVING
        _log_state(state)
        etag = repository.save(merged)
    except CatalogServiceError as e:
        _log_state(PatchState.FAILED, f"during {state.name}: {type(e).__name__}")
        raise

    _log_state(PatchState.DONE, f"etag {document.etag} -> {etag}")
    return merged.with_etag(etag)


def _check_record(record: Any) -> Element:
    if not isinstance(record, dict):
        raise InvalidCatalogError(
            f"Catalog records must be objects, got {type(record).__name__}"
        )
    try:
        element = Element.from_record(record)
    except domain_errors.MalformedRecordError as e:
        raise InvalidCatalogError(str(e)) from e
    if element.atomic_number < 1:
        raise InvalidCatalogError(
            f"Element ({element.atomic_number}): atomic_number must be positive"
        )
    try:
        element.parse_group_block()
    except domain_errors.GroupBlockError as e:
        raise InvalidGroupBlockError(f"Element ({element.atomic_number}): {e}") from e
    return element


def import_catalog(cmd: commands.ImportCatalog, repository: CatalogRepository) -> str:
    """Seed a new catalog from `cmd.records`. Never overwrites an existing one.

    Returns:
        str: The etag of the first revision.

    Raises:
        InvalidCatalogError: If the batch is empty, a record is malformed, or
            two records share an atomic number.
        InvalidGroupBlockError: If a record's `group_block` does not parse.
        ConflictError: If a catalog already exists.
    """
    if repository.exists():
        raise ConflictError(
            f"A catalog already exists at {repository.bucket}/{repository.key}; "
            "import never overwrites it"
        )
    if not cmd.records:
        raise InvalidCatalogError("Refusing to import an empty catalog")

    seen: set[int] = set()
    records: list[Record] = []
    for record in cmd.records:
        element = _check_record(record)
        if element.atomic_number in seen:
            raise InvalidCatalogError(
                f"Duplicate atomic_number {element.atomic_number} in import"
            )
        seen.add(element.atomic_number)
        records.append(dict(record))

    etag = repository.create(records)
    logger.info("Imported %d elements (etag %s)", len(records), etag)
    return etag


COMMAND_HANDLERS: dict[type, Callable[..., Any]] = {
    commands.PatchElements: patch_elements,
    commands.ImportCatalog: import_catalog,
}
