"""
URL normalization.

A bookmark is keyed by the string obtained from parsing a URL and
serializing it again, so two spellings that parse to the same components
deduplicate to one entry. Surrounding whitespace is rejected rather than
stripped, and an empty query ("?") is kept as written.
"""

import re
from urllib.parse import urlsplit, urlunsplit

from .error_handler import URLParseError

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def normalize_url(raw: str) -> str:
    """
    Parse a URL and return its canonical string form.

    Args:
        raw: URL as typed by the user

    Returns:
        Re-serialized URL

    Raises:
        URLParseError: If the URL cannot be parsed
    """
    if not raw:
        raise URLParseError(f"parsing URL: {raw!r}")

    if raw != raw.strip() or _CONTROL_CHARS.search(raw) or _BAD_ESCAPE.search(raw):
        raise URLParseError(f"parsing URL: {raw}")

    try:
        parts = urlsplit(raw)
        # .port validates the port lazily
        parts.port
    except ValueError:
        raise URLParseError(f"parsing URL: {raw}") from None

    normalized = urlunsplit(parts._replace(fragment=""))
    # urlunsplit drops a bare "?"; "/?" and "/" are different bookmarks
    if not parts.query and "?" in raw.split("#", 1)[0]:
        normalized += "?"
    if parts.fragment:
        normalized += "#" + parts.fragment
    return normalized
