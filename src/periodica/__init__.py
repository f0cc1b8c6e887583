"""PERIODICA

A small catalog of chemical elements kept as a single JSON document in a
blob store. Elements are patched in batches through an optimistic-concurrency
read-merge-write cycle guarded by the document's version token (etag).
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
