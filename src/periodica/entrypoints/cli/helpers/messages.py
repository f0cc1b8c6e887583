"""User-facing status lines for the PERIODICA CLI.

All helpers write to **stderr**, so stdout stays reserved for data (element
listings, ``--json`` output, exported catalogs). Each line starts with a
glyph; when stderr cannot encode the emoji, an ASCII marker is used instead.
"""

import click

CAUTION = ("⚠️", "[!]")  # pragma: no mutate
SUCCESS = ("✅", "[OK]")  # pragma: no mutate
ERROR = ("❌", "[X]")  # pragma: no mutate


def _supports_character(character: str) -> bool:
    """Return True if stderr's encoding can represent `character`."""
    stream = click.get_text_stream("stderr")  # pragma: no mutate
    encoding = getattr(stream, "encoding", None) or "ascii"
    try:
        character.encode(encoding)
    except UnicodeEncodeError:
        return False
    return True


def _glyph(pair: tuple[str, str]) -> str:
    emoji, fallback = pair
    return emoji if _supports_character(emoji) else fallback


def caution_glyph() -> str:
    """Return "⚠️" or "[!]"."""
    return _glyph(CAUTION)


def success_glyph() -> str:
    """Return "✅" or "[OK]"."""
    return _glyph(SUCCESS)


def error_glyph() -> str:
    """Return "❌" or "[X]"."""
    return _glyph(ERROR)


def warn(msg: str) -> None:
    """Print a bold yellow warning line, e.g. ``⚠️  This will modify your database.``"""
    click.secho(f"{caution_glyph()}  {msg}", fg="yellow", bold=True, err=True)


def success(msg: str) -> None:
    """Print a bold green success line, e.g. ``✅  Patched 2 elements.``"""
    click.secho(f"{success_glyph()}  {msg}", fg="green", bold=True, err=True)


def error(msg: str) -> None:
    """Print a bold red error line, e.g. ``❌  Cannot connect to database.``"""
    click.secho(f"{error_glyph()}  {msg}", fg="red", bold=True, err=True)
