"""Interface for etag minting.

A blob store never derives an etag from the content: every successful write
asks an `EtagGenerator` for a token nobody has seen before, so rewriting
identical bytes still invalidates readers holding the previous etag.
"""

import abc

# pylint: disable=too-few-public-methods


class EtagGenerator(abc.ABC):
    """Source of fresh, opaque etags."""

    @abc.abstractmethod
    def new_etag(self) -> str:
        """Return an etag that differs from every etag returned before."""
