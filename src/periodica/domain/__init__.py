"""Domain layer: elements, group/block classification, and the merge engine."""

from .catalog import CatalogDocument, merge_patches
from .element import Element, ElementPatch
from .group_block import GroupBlock, parse_group_block, validate_group_selector

__all__ = [
    "CatalogDocument",
    "Element",
    "ElementPatch",
    "GroupBlock",
    "merge_patches",
    "parse_group_block",
    "validate_group_selector",
]
