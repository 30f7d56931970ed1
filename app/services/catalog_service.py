"""Build the ordered list of games for the active configuration."""
import logging
import posixpath
import re
from typing import Any, Dict, List, Optional

from app.models import CatalogEntry, CatalogResult, ViewerConfig
from app.url_builder import encode_component
from content_clients import ContentFetchError

logger = logging.getLogger('ginfo.catalog')

TEXT_EXT_RE = re.compile(r'\.txt$', re.IGNORECASE)

MSG_INDEX_MISSING = "Info index not found. Create a JSON file at `{path}`."
MSG_INDEX_EMPTY = "Info index is empty."
MSG_FOLDER_MISSING = "Info folder not found."
MSG_NO_TEXT_FILES = "No .txt files in the Info folder."
MSG_REMOTE_ERROR = "Could not load the game list: {error}"
MSG_NOT_CONFIGURED = "No site repository configured."


def strip_name(value: str) -> str:
    """``"/Celeste.txt/"`` -> ``"Celeste"``."""
    return TEXT_EXT_RE.sub('', str(value).strip().strip('/')).strip('/')


def sort_entries(entries: List[CatalogEntry]) -> List[CatalogEntry]:
    return sorted(entries, key=lambda e: (e.name.casefold(), e.name))


def dedupe_entries(entries: List[CatalogEntry]) -> List[CatalogEntry]:
    """Keep the first entry for each name."""
    seen = set()
    unique: List[CatalogEntry] = []
    for entry in entries:
        if entry.name in seen:
            logger.warning("Duplicate catalog entry %r ignored (%s)", entry.name, entry.source_locator)
            continue
        seen.add(entry.name)
        unique.append(entry)
    return unique


class CatalogService:
    """Enumerates catalog entries from a local index or the site repository.

    Never raises: every failure is turned into an empty
    :class:`CatalogResult` carrying a message for the page.
    """

    def __init__(self, config: ViewerConfig, fetcher, github) -> None:
        self.config = config
        self.fetcher = fetcher
        self.github = github

    def load(self) -> CatalogResult:
        if self.config.local_info:
            result = self.load_local()
        else:
            result = self.load_remote()
        logger.info("Catalog loaded: %d game(s)%s", len(result.entries),
                    f" ({result.message})" if result.message else '')
        return result

    # ------------------------------------------------------------------
    # Local index
    # ------------------------------------------------------------------

    def entry_from_index_item(self, item: Any) -> Optional[CatalogEntry]:
        base = self.config.info_base_path.rstrip('/')
        if isinstance(item, str):
            name = strip_name(item)
            if not name:
                return None
            if item.lower().endswith('.txt'):
                locator = f"{base}/{item.lstrip('/')}"
            else:
                locator = f"{base}/{encode_component(name)}.txt"
            return CatalogEntry(name, locator)

        if isinstance(item, dict):
            path = item.get('path')
            raw_name = item.get('name') or (posixpath.basename(str(path)) if path else '')
            name = strip_name(raw_name) if raw_name else ''
            if not name:
                return None
            locator = str(path) if path else f"{base}/{encode_component(name)}.txt"
            return CatalogEntry(name, locator)

        logger.debug("Ignoring unsupported index item: %r", item)
        return None

    def load_local(self) -> CatalogResult:
        index_path = self.config.index_path
        try:
            items = self.fetcher.read_json(index_path, authenticated=False)
        except ContentFetchError as exc:
            logger.warning("Local catalog index unavailable (%s): %s", index_path, exc)
            return CatalogResult([], MSG_INDEX_MISSING.format(path=index_path))

        if not isinstance(items, list) or not items:
            return CatalogResult([], MSG_INDEX_EMPTY)

        entries = [e for e in (self.entry_from_index_item(i) for i in items) if e]
        entries = dedupe_entries(sort_entries(entries))
        if not entries:
            return CatalogResult([], MSG_INDEX_EMPTY)
        return CatalogResult(entries)

    # ------------------------------------------------------------------
    # Site repository
    # ------------------------------------------------------------------

    def load_remote(self) -> CatalogResult:
        cfg = self.config
        if not cfg.site_repo_owner or not cfg.site_repo_name:
            return CatalogResult([], MSG_NOT_CONFIGURED)
        try:
            items = self.github.list_directory(cfg.site_repo_owner, cfg.site_repo_name,
                                               cfg.info_folder, cfg.site_branch)
        except ContentFetchError as exc:
            logger.error("Error listing %s/%s: %s", cfg.site_repo_owner, cfg.site_repo_name, exc)
            return CatalogResult([], MSG_REMOTE_ERROR.format(error=exc))

        if items is None:
            return CatalogResult([], MSG_FOLDER_MISSING)

        entries = []
        for item in items:
            if not isinstance(item, dict) or item.get('type') != 'file':
                continue
            file_name = str(item.get('name', ''))
            if not file_name.lower().endswith('.txt') or not item.get('download_url'):
                continue
            entries.append(CatalogEntry(TEXT_EXT_RE.sub('', file_name), item['download_url']))

        if not entries:
            return CatalogResult([], MSG_NO_TEXT_FILES)
        return CatalogResult(dedupe_entries(sort_entries(entries)))
