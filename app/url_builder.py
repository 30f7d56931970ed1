"""URL helpers shared by the catalog and image resolver.

Every path segment is escaped exactly once; absolute URLs are never
re-based.
"""
import re
from typing import Optional
from urllib.parse import quote, unquote

ABSOLUTE_URL_RE = re.compile(r'^https?://', re.IGNORECASE)
GAME_PLACEHOLDER = '{game}'
NUMBER_PLACEHOLDER = '{n}'

# Characters encodeURIComponent leaves alone besides [A-Za-z0-9_.-~]
_COMPONENT_SAFE = "!*'()"


def is_absolute_url(value) -> bool:
    return isinstance(value, str) and bool(ABSOLUTE_URL_RE.match(value))


def encode_component(value: str) -> str:
    """Escape a single URL component (slashes included)."""
    return quote(str(value), safe=_COMPONENT_SAFE)


def decode_component(value: str) -> str:
    return unquote(value)


def encode_path(path: str) -> str:
    """Escape each ``/``-separated segment of *path* independently."""
    return '/'.join(encode_component(seg) for seg in str(path).split('/'))


def build_image_url(base: Optional[str], game_name: str, filename) -> str:
    """Join *filename* onto *base* for the given game.

    ``{game}`` inside *base* is replaced with the escaped game name.  With
    no base the result is a site-relative path.
    """
    if is_absolute_url(filename):
        return filename

    f = str(filename or '').lstrip('/')
    parts = [encode_component(seg) for seg in f.split('/') if seg]
    if not base:
        return '/' + '/'.join(parts)

    resolved_base = str(base)
    if GAME_PLACEHOLDER in resolved_base:
        resolved_base = resolved_base.replace(GAME_PLACEHOLDER, encode_component(game_name))
    resolved_base = resolved_base.rstrip('/')
    return f"{resolved_base}/{'/'.join(parts)}"


def resolve_entry(entry, base: Optional[str], game_name: str) -> Optional[str]:
    """Resolve one image-list entry; absolute URLs pass straight through."""
    if not isinstance(entry, str) or not entry.strip():
        return None
    entry = entry.strip()
    if is_absolute_url(entry):
        return entry
    if base:
        return build_image_url(base, game_name, entry)
    return entry


def expand_pattern(pattern: str, game_name: str, number: int, padding: int = 0) -> str:
    """Fill ``{game}`` and ``{n}`` in a filename template.

    The name is inserted raw; escaping happens later in
    :func:`build_image_url`.
    """
    n = str(number)
    if padding > 0:
        n = n.zfill(padding)
    return pattern.replace(GAME_PLACEHOLDER, game_name).replace(NUMBER_PLACEHOLDER, n)
