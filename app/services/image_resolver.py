"""Decide which images belong to a game.

Strategies are tried in a fixed order and the first one that yields at least
one URL wins:

1. ``explicit``  - an ``images`` list in the game's front-matter
2. ``pattern``   - base URL + numbered filename template
3. ``index``     - a remote JSON index keyed by game name
4. ``listing``   - the game's folder in the images repository

A strategy that is not configured, or that fails, simply falls through.
"""
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

from app.models import ViewerConfig
from app.url_builder import (
    build_image_url,
    encode_component,
    expand_pattern,
    resolve_entry,
)

logger = logging.getLogger('ginfo.resolver')

IMAGE_EXT_RE = re.compile(r'\.(png|jpe?g|gif|webp|bmp)$', re.IGNORECASE)

DEFAULT_START = 1
DEFAULT_END = 10
DEFAULT_PADDING = 0
MAX_PATTERN_IMAGES = 1000
MAX_NUMBER_PADDING = 12


def coerce_int(*candidates, default: int) -> int:
    """Return the first candidate that is a whole number, else *default*.

    ``None`` and empty strings are skipped; a present but non-numeric value
    resolves to *default* rather than to a later candidate.
    """
    for value in candidates:
        if value is None or value == '':
            continue
        if isinstance(value, bool):
            return default
        try:
            number = float(value)
        except (TypeError, ValueError):
            return default
        if number != number or number in (float('inf'), float('-inf')):
            return default
        if not number.is_integer():
            return default
        return int(number)
    return default


def name_variants(game_name: str) -> List[str]:
    """Keys tried against a remote image index, in order."""
    variants: List[str] = []
    for candidate in (game_name, encode_component(game_name), game_name.replace('%20', ' ')):
        if candidate not in variants:
            variants.append(candidate)
    return variants


class ImageResolver:
    """Resolve the ordered image URL list for one game.

    Args:
        config:  Site configuration.
        fetcher: Object with ``read_json(locator)`` (a
                 :class:`content_clients.ContentFetcher`).
        github:  Object with ``list_directory(owner, repo, path, branch)``
                 (a :class:`content_clients.GitHubContentsClient`).
    """

    def __init__(self, config: ViewerConfig, fetcher, github) -> None:
        self.config = config
        self.fetcher = fetcher
        self.github = github
        self.strategies: List[Tuple[str, Callable[[Dict[str, Any], str], List[str]]]] = [
            ('explicit', self.from_explicit_list),
            ('pattern', self.from_pattern),
            ('index', self.from_index),
            ('listing', self.from_listing),
        ]

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def resolve_with_source(self, metadata: Optional[Dict[str, Any]],
                            game_name: str) -> Tuple[Optional[str], List[str]]:
        """Return ``(strategy_name, urls)``; ``(None, [])`` when all fail."""
        meta = metadata or {}
        for label, strategy in self.strategies:
            try:
                urls = strategy(meta, game_name)
            except Exception as exc:
                logger.debug("Image strategy %s failed for %r: %s", label, game_name, exc)
                continue
            if urls:
                logger.debug("Resolved %d image(s) for %r via %s", len(urls), game_name, label)
                return label, urls
        logger.info("No images found for %r", game_name)
        return None, []

    def resolve(self, metadata: Optional[Dict[str, Any]], game_name: str) -> List[str]:
        return self.resolve_with_source(metadata, game_name)[1]

    def thumbnail(self, metadata: Optional[Dict[str, Any]], game_name: str) -> Optional[str]:
        urls = self.resolve(metadata, game_name)
        return urls[0] if urls else None

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def _base_url(self, meta: Dict[str, Any]) -> Optional[str]:
        return meta.get('imagesRawBaseUrl') or self.config.images_raw_base_url

    def from_explicit_list(self, meta: Dict[str, Any], game_name: str) -> List[str]:
        images = meta.get('images')
        if isinstance(images, str):
            images = [images]
        if not isinstance(images, list) or not images:
            return []
        base = self._base_url(meta)
        urls = [resolve_entry(x, base, game_name) for x in images]
        return [u for u in urls if u]

    def from_pattern(self, meta: Dict[str, Any], game_name: str) -> List[str]:
        base = self._base_url(meta)
        pattern = meta.get('imagesFilenamePattern') or self.config.images_filename_pattern
        if not base or not pattern:
            return []

        start = coerce_int(meta.get('imagesStart'), meta.get('start'),
                           self.config.images_start, default=DEFAULT_START)
        end = coerce_int(meta.get('imagesEnd'), meta.get('end'),
                         self.config.images_end, default=DEFAULT_END)
        pad = coerce_int(meta.get('imagesNumberPadding'), meta.get('numberPadding'),
                         self.config.images_number_padding, default=DEFAULT_PADDING)
        if pad > MAX_NUMBER_PADDING:
            logger.warning("Number padding %d for %r clamped to %d",
                           pad, game_name, MAX_NUMBER_PADDING)
            pad = MAX_NUMBER_PADDING
        if end - start + 1 > MAX_PATTERN_IMAGES:
            logger.warning("Image range %d..%d for %r truncated to %d entries",
                           start, end, game_name, MAX_PATTERN_IMAGES)
            end = start + MAX_PATTERN_IMAGES - 1

        return [
            build_image_url(base, game_name, expand_pattern(str(pattern), game_name, n, pad))
            for n in range(start, end + 1)
        ]

    def from_index(self, meta: Dict[str, Any], game_name: str) -> List[str]:
        index_url = meta.get('imagesIndexUrl') or self.config.images_index_url
        if not index_url:
            return []
        index = self.fetcher.read_json(str(index_url))
        if not isinstance(index, dict):
            return []

        entries = None
        for key in name_variants(game_name):
            if index.get(key):
                entries = index[key]
                break
        if not isinstance(entries, list):
            return []

        base = self._base_url(meta)
        urls = [resolve_entry(x, base, game_name) for x in entries]
        return [u for u in urls if u]

    def from_listing(self, meta: Dict[str, Any], game_name: str) -> List[str]:
        cfg = self.config
        if not cfg.images_repo_owner or not cfg.images_repo_name:
            return []
        path = f"{cfg.images_folder_prefix}/{game_name}".lstrip('/')
        items = self.github.list_directory(cfg.images_repo_owner, cfg.images_repo_name,
                                           path, cfg.images_repo_branch)
        if not items:
            return []
        return [
            item['download_url'] for item in items
            if isinstance(item, dict)
            and item.get('type') == 'file'
            and IMAGE_EXT_RE.search(str(item.get('name', '')))
            and item.get('download_url')
        ]
