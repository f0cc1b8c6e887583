"""Render database URLs safely for display."""

from sqlalchemy.engine import make_url


def sanitize_url(url: str) -> str:
    """Return `url` with its password (if any) replaced by ``***``.

    Parsing is delegated to SQLAlchemy; nothing is connected to. Secrets
    passed as query parameters are left untouched.

    Example:
        >>> sanitize_url("postgresql+psycopg://app:s3cr3t@db:5432/periodica")
        'postgresql+psycopg://app:***@db:5432/periodica'
    """
    return make_url(url).render_as_string(hide_password=True)
