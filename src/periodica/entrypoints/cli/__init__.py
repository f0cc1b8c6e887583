"""Command-line interface for PERIODICA (``periodica``)."""
