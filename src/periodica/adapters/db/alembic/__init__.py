"""Packaged Alembic migration scripts for PERIODICA."""
