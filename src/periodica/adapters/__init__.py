"""Concrete adapters for PERIODICA's interfaces."""
