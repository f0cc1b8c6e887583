"""``periodica elements``: read and patch the element catalog.

Reads go straight to the service-layer queries; writes are sent as commands
through the message bus. Service errors are shown as a one-line
``Error: ...`` and exit with status 1.

Data (tables, JSON) is written to stdout; status lines go to stderr.
"""

from __future__ import annotations

import contextlib
import json
import logging
from collections.abc import Iterator
from dataclasses import asdict
from typing import IO, TYPE_CHECKING, Any

import click
import click_extra as clickx
from rich.console import Console
from rich.table import Table

from periodica import config
from periodica.bootstrap import AppContainer, bootstrap
from periodica.service_layer import queries
from periodica.service_layer.commands import (
    ElementPatchRequest,
    ImportCatalog,
    PatchElements,
)
from periodica.service_layer.errors import CatalogServiceError

from .helpers import success

if TYPE_CHECKING:
    from periodica.domain.element import Element

logger = logging.getLogger(__name__)

PATCH_FIELDS = ("atomic_number", "name", "alternative_name", "group_block")


@contextlib.contextmanager
def service_errors() -> Iterator[None]:
    """Turn service-layer and configuration errors into `click.ClickException`."""
    try:
        yield
    except CatalogServiceError as e:
        logger.debug("Service error: %s", type(e).__name__, exc_info=True)
        raise click.ClickException(str(e)) from e
    except config.DatabaseUrlNotSetError as e:
        raise click.ClickException(
            "PERIODICA_DB_URL is not set (required by the sql blob store)."
        ) from e
    except config.UnknownBlobStoreBackendError as e:
        raise click.ClickException(str(e)) from e


def get_container(ctx: click.Context) -> AppContainer:
    """Return the `AppContainer` on the context, bootstrapping it on first use."""
    if (container := ctx.find_object(AppContainer)) is None:
        with service_errors():
            container = bootstrap()
        ctx.find_root().obj = container
    return container


def _load_json(stream: IO[str]) -> Any:
    try:
        return json.load(stream)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{stream.name}: not valid JSON ({e})") from e


def _require_list(payload: Any, what: str) -> list[Any]:
    if not isinstance(payload, list):
        raise click.ClickException(f"Expected a JSON array of {what}")
    return payload


def _patch_request(item: Any) -> ElementPatchRequest:
    if not isinstance(item, dict):
        raise click.ClickException(f"Each patch must be a JSON object, got {item!r}")
    if unknown := sorted(set(item) - set(PATCH_FIELDS)):
        raise click.ClickException(f"Unknown patch field(s): {', '.join(unknown)}")
    if "atomic_number" not in item:
        raise click.ClickException(f"Patch is missing atomic_number: {item!r}")
    return ElementPatchRequest(**item)


def _echo_json(payload: Any) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False))


def _render_table(elements: list[Element]) -> None:
    table = Table(title="Elements")
    table.add_column("#", justify="right")
    table.add_column("Name")
    table.add_column("Alternative name")
    table.add_column("Group / block")
    for element in elements:
        table.add_row(
            str(element.atomic_number),
            element.name,
            element.display_alternative_name,
            element.group_block,
        )
    Console().print(table)


@click.group(cls=clickx.ExtraGroup)
def elements() -> None:
    """Inspect and update the element catalog."""


@elements.command(name="list")
@click.option(
    "--group",
    "-g",
    "group",
    default=None,
    help="Only elements in this group (1..18, n/a) or block (s-block .. g-block).",
)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table.")
@click.pass_context
def list_(ctx: click.Context, group: str | None, as_json: bool) -> None:
    """List elements in catalog order."""
    container = get_container(ctx)
    with service_errors():
        found = queries.list_elements(container.repository, group=group)

    if as_json:
        _echo_json([asdict(element) for element in found])
    elif found:
        _render_table(found)
    else:
        click.echo("No elements found.", err=True)


@elements.command()
@click.argument("atomic_number", type=click.IntRange(min=1))
@click.option("--json", "as_json", is_flag=True, help="Print JSON.")
@click.pass_context
def show(ctx: click.Context, atomic_number: int, as_json: bool) -> None:
    """Show one element."""
    container = get_container(ctx)
    with service_errors():
        element = queries.get_element(container.repository, atomic_number)

    if as_json:
        _echo_json(asdict(element))
        return
    click.echo(f"Name             : {element.name}")
    click.echo(f"Atomic number    : {element.atomic_number}")
    click.echo(f"Alternative name : {element.display_alternative_name}")
    click.echo(f"Group / block    : {element.group_block}")


@elements.command()
@click.argument("atomic_number", type=click.IntRange(min=1))
@click.option("--name", default=None, help="New element name.")
@click.option("--alternative-name", default=None, help="New alternative name.")
@click.option(
    "--group-block",
    default=None,
    help="New classification, e.g. 'group 1, s-block'.",
)
@click.pass_context
def patch(
    ctx: click.Context,
    atomic_number: int,
    name: str | None,
    alternative_name: str | None,
    group_block: str | None,
) -> None:
    """Change one element's fields. Omitted or blank fields are kept."""
    container = get_container(ctx)
    request = ElementPatchRequest(
        atomic_number=atomic_number,
        name=name,
        alternative_name=alternative_name,
        group_block=group_block,
    )
    with service_errors():
        document = container.message_bus.handle(PatchElements(patches=(request,)))
    success(f"Patched element {atomic_number} (etag {document.etag})")


@elements.command(name="patch-batch")
@click.argument("file", type=click.File("r", encoding="utf-8"))
@click.pass_context
def patch_batch(ctx: click.Context, file: IO[str]) -> None:
    """Apply a JSON array of patches in one conditional write.

    Each patch is an object with ``atomic_number`` and any of ``name``,
    ``alternative_name`` and ``group_block``. Use ``-`` to read stdin.
    """
    container = get_container(ctx)
    requests = tuple(
        _patch_request(item)
        for item in _require_list(_load_json(file), "patch objects")
    )
    with service_errors():
        document = container.message_bus.handle(PatchElements(patches=requests))
    success(f"Applied {len(requests)} patch(es) (etag {document.etag})")


@elements.command(name="import")
@click.argument("file", type=click.File("r", encoding="utf-8"))
@click.pass_context
def import_(ctx: click.Context, file: IO[str]) -> None:
    """Create the catalog from a JSON array of element records.

    Fails if a catalog already exists.
    """
    container = get_container(ctx)
    records = tuple(_require_list(_load_json(file), "element records"))
    with service_errors():
        etag = container.message_bus.handle(ImportCatalog(records=records))
    success(f"Imported {len(records)} elements (etag {etag})")


@elements.command()
@click.argument("file", type=click.File("w", encoding="utf-8"), default="-")
@click.pass_context
def export(ctx: click.Context, file: IO[str]) -> None:
    """Write the raw catalog document as JSON (stdout by default)."""
    container = get_container(ctx)
    with service_errors():
        document = container.repository.load()
    file.write(json.dumps(list(document.records), indent=2, ensure_ascii=False))
    file.write("\n")
    logger.info("Exported %d records at etag %s", len(document.records), document.etag)
