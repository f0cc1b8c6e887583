"""Service layer for PERIODICA: repository, commands, handlers and queries."""
