"""Interfaces (ports) implemented by adapters."""
