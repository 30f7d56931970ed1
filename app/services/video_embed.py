"""Turn YouTube links from front-matter into embeddable player URLs."""
import re
from typing import Any, Dict, List, Optional

EMBED_BASE = 'https://www.youtube.com/embed/'
VIDEO_KEYS = ('videos', 'video', 'youtube')

_EMBED_RE = re.compile(r'^https?://(?:www\.)?youtube\.com/embed/([A-Za-z0-9_\-]+)')
_SHORT_RE = re.compile(r'youtu\.be/([A-Za-z0-9_\-]+)')
_WATCH_RE = re.compile(r'[?&]v=([A-Za-z0-9_\-]+)')
_BARE_ID_RE = re.compile(r'^[A-Za-z0-9_\-]{6,}$')


def youtube_embed_url(url: Optional[str]) -> Optional[str]:
    """Return an embed URL for *url*, or ``None`` if it is not recognised.

    Accepts embed URLs (returned unchanged), ``youtu.be`` short links,
    ``watch?v=`` links and bare video IDs.
    """
    if not url:
        return None
    url = str(url).strip()
    if _EMBED_RE.match(url):
        return url
    m = _SHORT_RE.search(url)
    if m:
        return EMBED_BASE + m.group(1)
    m = _WATCH_RE.search(url)
    if m:
        return EMBED_BASE + m.group(1)
    if _BARE_ID_RE.match(url):
        return EMBED_BASE + url
    return None


def video_embeds(metadata: Optional[Dict[str, Any]]) -> List[str]:
    """Embed URLs from the first of ``videos``/``video``/``youtube`` present."""
    if not metadata:
        return []
    raw = None
    for key in VIDEO_KEYS:
        if metadata.get(key):
            raw = metadata[key]
            break
    if raw is None:
        return []
    values = raw if isinstance(raw, list) else [raw]
    embeds = []
    for value in values:
        embed = youtube_embed_url(str(value or '').strip())
        if embed:
            embeds.append(embed)
    return embeds
