"""Owned UI state for one viewer: catalog, current view, lightbox, thumbnails.

The viewer moves between three views::

    grid  --open_game-->  detail  --open_lightbox-->  lightbox
    grid  <--back_to_grid--  detail  <--close_lightbox--  lightbox

Each transition also updates :attr:`ViewerState.fragment`, the deep-link
fragment the page mirrors into the address bar.
"""
import logging
from typing import Dict, List, Optional

from app.models import CardData, CatalogEntry, GameDetail, ViewerConfig
from app.services.deep_link import build_fragment, parse_fragment

logger = logging.getLogger('ginfo.state')

VIEW_GRID = 'grid'
VIEW_DETAIL = 'detail'
VIEW_LIGHTBOX = 'lightbox'

KEY_PREV = 'ArrowLeft'
KEY_NEXT = 'ArrowRight'
KEY_CLOSE = 'Escape'


class LightboxState:
    """Image list plus the index currently shown."""

    def __init__(self) -> None:
        self.urls: List[str] = []
        self.index: int = 0
        self.is_open: bool = False

    def open(self, urls: List[str], index: int = 0) -> Optional[str]:
        self.urls = list(urls)
        if not self.urls:
            self.index = 0
            self.is_open = False
            return None
        self.index = index % len(self.urls)
        self.is_open = True
        return self.current_url

    def close(self) -> None:
        self.is_open = False

    @property
    def current_url(self) -> Optional[str]:
        if not self.urls:
            return None
        return self.urls[self.index]

    def next(self) -> Optional[str]:
        if not self.urls:
            return None
        self.index = (self.index + 1) % len(self.urls)
        return self.current_url

    def prev(self) -> Optional[str]:
        if not self.urls:
            return None
        self.index = (self.index - 1 + len(self.urls)) % len(self.urls)
        return self.current_url

    def to_dict(self) -> Dict:
        return {
            'open': self.is_open,
            'index': self.index,
            'count': len(self.urls),
            'url': self.current_url if self.is_open else None,
        }


class DetailRequest:
    """Ticket handed out by :meth:`ViewerState.open_game`."""

    def __init__(self, name: str, generation: int) -> None:
        self.name = name
        self.generation = generation

    def __repr__(self) -> str:
        return f"DetailRequest({self.name!r}, {self.generation})"


class ViewerState:
    """Single owner of everything the page would otherwise keep globally."""

    def __init__(self, config: Optional[ViewerConfig] = None,
                 entries: Optional[List[CatalogEntry]] = None) -> None:
        self.reset(config, entries)

    def reset(self, config: Optional[ViewerConfig] = None,
              entries: Optional[List[CatalogEntry]] = None) -> None:
        """Start over with a fresh catalog; thumbnails are forgotten."""
        self.config: ViewerConfig = config or ViewerConfig()
        self.entries: List[CatalogEntry] = list(entries or [])
        self._by_name: Dict[str, CatalogEntry] = {e.name: e for e in self.entries}
        self.thumbnails: Dict[str, CardData] = {}
        self.lightbox = LightboxState()
        self.view: str = VIEW_GRID
        self.current_name: Optional[str] = None
        self.detail: Optional[GameDetail] = None
        self.fragment: str = ''
        self._generation = 0

    # ------------------------------------------------------------------
    # Catalog lookups
    # ------------------------------------------------------------------

    def entry(self, name: str) -> Optional[CatalogEntry]:
        return self._by_name.get(name)

    def entry_for_fragment(self, fragment: Optional[str]) -> Optional[CatalogEntry]:
        name = parse_fragment(fragment)
        if name is None:
            return None
        return self.entry(name)

    def search(self, query: Optional[str]) -> List[CatalogEntry]:
        """Case-insensitive substring filter over entry names."""
        q = (query or '').strip().casefold()
        if not q:
            return list(self.entries)
        return [e for e in self.entries if q in e.name.casefold()]

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def open_game(self, name: str) -> DetailRequest:
        """Switch to the detail view for *name*.

        Raises:
            KeyError: *name* is not in the catalog.
        """
        if name not in self._by_name:
            raise KeyError(name)
        self._generation += 1
        self.lightbox.close()
        self.view = VIEW_DETAIL
        self.current_name = name
        self.detail = None
        self.fragment = build_fragment(name)
        return DetailRequest(name, self._generation)

    def apply_detail(self, request: DetailRequest, detail: GameDetail) -> bool:
        """Store *detail* unless a newer request has superseded *request*."""
        if request.generation != self._generation or request.name != self.current_name:
            logger.debug("Dropping stale detail for %r", request.name)
            return False
        if self.view == VIEW_GRID:
            return False
        self.detail = detail
        return True

    def back_to_grid(self) -> None:
        self._generation += 1
        self.lightbox.close()
        self.view = VIEW_GRID
        self.current_name = None
        self.detail = None
        self.fragment = ''

    def open_lightbox(self, index: int = 0) -> Optional[str]:
        if self.view == VIEW_GRID or self.detail is None or not self.detail.images:
            return None
        url = self.lightbox.open(self.detail.images, index)
        self.view = VIEW_LIGHTBOX
        return url

    def close_lightbox(self) -> None:
        self.lightbox.close()
        if self.view == VIEW_LIGHTBOX:
            self.view = VIEW_DETAIL

    def handle_key(self, key: str) -> Optional[str]:
        """Keyboard bindings; ignored unless the lightbox is open."""
        if self.view != VIEW_LIGHTBOX:
            return None
        if key == KEY_PREV:
            return self.lightbox.prev()
        if key == KEY_NEXT:
            return self.lightbox.next()
        if key == KEY_CLOSE:
            self.close_lightbox()
        return None

    def to_dict(self) -> Dict:
        return {
            'view': self.view,
            'current': self.current_name,
            'fragment': self.fragment,
            'lightbox': self.lightbox.to_dict(),
        }
