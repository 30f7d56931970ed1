"""Business logic for grid cards (thumbnail + summary per game)."""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional

from app.models import CardData, CatalogEntry
from frontmatter import parse_front_matter

logger = logging.getLogger('ginfo.cards')

MAX_WORKERS = 8


class CardService:
    """Resolves and memoizes card data for catalog entries.

    Cards start as placeholders and are filled in independently, either all
    at once (:meth:`load_cards`) or one at a time as they become visible
    (:meth:`load_card`).  A failing card stays a placeholder.
    """

    def __init__(self, fetcher, resolver, memo: Optional[Dict[str, CardData]] = None,
                 lock: Optional[threading.Lock] = None, authenticated: bool = True) -> None:
        """
        Args:
            fetcher:       Object exposing ``read_text(locator, authenticated=...)``.
            resolver:      :class:`~app.services.image_resolver.ImageResolver`.
            memo:          Thumbnail map shared with the viewer state.
            lock:          Guards *memo* when cards load on several threads.
            authenticated: Send the bearer token with text fetches.
        """
        self.fetcher = fetcher
        self.resolver = resolver
        self.memo: Dict[str, CardData] = memo if memo is not None else {}
        self._lock = lock or threading.Lock()
        self.authenticated = authenticated

    @staticmethod
    def placeholders(entries: List[CatalogEntry]) -> List[CardData]:
        return [CardData(e.name) for e in entries]

    def cached(self, name: str) -> Optional[CardData]:
        with self._lock:
            return self.memo.get(name)

    def load_card(self, entry: CatalogEntry) -> CardData:
        """Return the card for *entry*, fetching it on first use.

        The memo is captured up front: if the catalog is reloaded while this
        card is loading, the result lands in the old map, not the new one.
        """
        with self._lock:
            memo = self.memo
            hit = memo.get(entry.name)
        if hit is not None:
            return hit

        try:
            text = self.fetcher.read_text(entry.source_locator, authenticated=self.authenticated)
        except Exception as exc:
            logger.debug("Card text fetch failed for %r: %s", entry.name, exc)
            return CardData(entry.name)

        doc = parse_front_matter(text)
        try:
            thumb = self.resolver.thumbnail(doc.metadata, entry.name)
        except Exception as exc:
            logger.debug("Thumbnail lookup failed for %r: %s", entry.name, exc)
            thumb = None
        card = CardData(entry.name, thumb, doc.summary, loaded=True)

        if thumb:
            with self._lock:
                memo[entry.name] = card
        return card

    def load_cards(self, entries: List[CatalogEntry]) -> List[CardData]:
        """Resolve every card concurrently; output keeps catalog order."""
        if not entries:
            return []
        results: Dict[int, CardData] = {}
        max_workers = min(len(entries), MAX_WORKERS)
        with ThreadPoolExecutor(max_workers=max_workers,
                                thread_name_prefix='ginfo_cards') as executor:
            future_map = {executor.submit(self.load_card, entry): idx
                          for idx, entry in enumerate(entries)}
            for future in as_completed(future_map):
                idx = future_map[future]
                try:
                    results[idx] = future.result()
                except Exception as exc:
                    logger.debug("Card load error: %s", exc)
                    results[idx] = CardData(entries[idx].name)
        return [results.get(i, CardData(e.name)) for i, e in enumerate(entries)]
