"""Read and write the ``#game=<name>`` fragment used for direct links."""
import re
from typing import Optional

from app.url_builder import decode_component, encode_component

_FRAGMENT_RE = re.compile(r'^game=(.*)$')


def parse_fragment(fragment: Optional[str]) -> Optional[str]:
    """``"#game=Foo%20Bar"`` -> ``"Foo Bar"``; anything else -> ``None``."""
    if not fragment:
        return None
    m = _FRAGMENT_RE.match(fragment.lstrip('#'))
    if not m or not m.group(1):
        return None
    return decode_component(m.group(1))


def build_fragment(name: str) -> str:
    return 'game=' + encode_component(name)
