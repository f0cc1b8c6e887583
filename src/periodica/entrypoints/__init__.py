"""Entrypoints (outer adapters) for PERIODICA."""
