"""Database plumbing shared by SQL-backed adapters."""
