"""Read-side queries over the catalog.

Queries do not go through the message bus; entrypoints call them directly
with a repository.
"""

from periodica.domain import errors as domain_errors
from periodica.domain.element import Element
from periodica.domain.group_block import validate_group_selector

from .errors import InvalidGroupSelectorError
from .repository import CatalogRepository


def get_element(repository: CatalogRepository, atomic_number: int) -> Element:
    """Look up one element by atomic number.

    Raises:
        ElementNotFoundError: If no element has that atomic number.
    """
    return repository.find_by_atomic_number(atomic_number)


def list_elements(
    repository: CatalogRepository, group: str | None = None
) -> list[Element]:
    """List elements, optionally only those in one group or block.

    Args:
        repository: Catalog to read.
        group: ``"1"`` .. ``"18"``, ``"n/a"``, or ``"s-block"`` .. ``"g-block"``.
            ``None`` lists everything.

    Raises:
        InvalidGroupSelectorError: If `group` is not a valid selector.
        InvalidGroupBlockError: If a stored `group_block` fails to parse
            while filtering.
    """
    if group is None:
        return repository.find_all()
    try:
        selector = validate_group_selector(group)
    except domain_errors.UnknownGroupSelectorError as e:
        raise InvalidGroupSelectorError(str(e)) from e
    return repository.find_by_group(selector)
