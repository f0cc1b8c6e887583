"""CLI helpers for PERIODICA.

Utilities used by the command-line interface: password redaction for
database URLs, stderr message emitters with emoji→ASCII fallbacks, and the
``-L NAME=LEVEL`` option parser.
"""

from .db_url import sanitize_url
from .messages import error, success, warn

__all__ = ["error", "sanitize_url", "success", "warn"]
