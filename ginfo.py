#!/usr/bin/env python3
"""
GINFO - Game Info Catalog Viewer
Lists games described by text files (with optional front-matter) stored in a
local site folder or a GitHub repository, and shows their text, screenshots
and videos.
"""

import argparse
import json
import logging
import os
import sys
import threading
from typing import Any, Dict, List, Optional, Tuple

from colorama import init, Fore, Style

from app.models import CardData, CatalogEntry, CatalogResult, GameDetail, ViewerConfig
from app.services import (
    CardService,
    CatalogService,
    DetailService,
    ImageResolver,
    ViewerState,
)
from content_clients import ContentFetcher, GitHubContentsClient

# Initialize colorama for cross-platform colored terminal output
init(autoreset=True)

# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

def setup_logging(level: str = 'WARNING') -> logging.Logger:
    """Configure the root GINFO logger.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               Defaults to WARNING so normal use is quiet.

    Returns:
        Configured logger instance.
    """
    numeric = getattr(logging, str(level).upper(), logging.WARNING)
    logger = logging.getLogger('ginfo')
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('[%(levelname)s] %(name)s: %(message)s'))
        logger.addHandler(handler)
    logger.setLevel(numeric)
    return logger


# Module-level logger used throughout ginfo.py
logger = setup_logging(os.getenv('GINFO_LOG_LEVEL', 'WARNING'))

CONFIG_FILE = 'config.json'
CONFIG_FALLBACK_FILE = 'config.example.json'


class ConfigError(Exception):
    """Raised when neither the primary nor the fallback config can be read."""


def _read_config_file(path: str) -> Dict[str, Any]:
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level JSON value must be an object")
    return data


def load_config(site_root: str = '.', config_path: str = CONFIG_FILE,
                fallback_path: str = CONFIG_FALLBACK_FILE,
                token: Optional[str] = None) -> ViewerConfig:
    """Load the site configuration, falling back to the bundled example.

    Relative paths are taken from *site_root*.  ``GINFO_GITHUB_TOKEN``
    supplies the bearer token when *token* is not given.

    Raises:
        ConfigError: Neither file exists or parses.
    """
    _log = logging.getLogger('ginfo.config')
    errors: List[str] = []
    data: Optional[Dict[str, Any]] = None

    for candidate in (config_path, fallback_path):
        if not candidate:
            continue
        path = candidate if os.path.isabs(candidate) else os.path.join(site_root, candidate)
        try:
            data = _read_config_file(path)
            _log.info("Loaded configuration from %s", path)
            break
        except (OSError, ValueError) as e:
            _log.warning("Config %s unavailable: %s", path, e)
            errors.append(f"{path}: {e}")

    if data is None:
        raise ConfigError("No usable configuration (" + "; ".join(errors) + ")")

    return ViewerConfig(data, token=token or os.getenv('GINFO_GITHUB_TOKEN'))


class GameViewer:
    """Main viewer application: one catalog, one set of clients, one state."""

    DEFAULT_API_TIMEOUT = 10

    def __init__(self, site_root: str = '.', config_path: str = CONFIG_FILE,
                 fallback_path: str = CONFIG_FALLBACK_FILE,
                 token: Optional[str] = None,
                 config: Optional[ViewerConfig] = None):
        self._log = logging.getLogger('ginfo.viewer')
        self.site_root = os.path.abspath(site_root)
        self.config_path = config_path
        self.fallback_path = fallback_path
        self.config = config or load_config(self.site_root, config_path, fallback_path, token=token)
        if token:
            self.config.token = token

        # Re-apply log level from config (allows "logLevel": "DEBUG" in config.json)
        if self.config.raw.get('logLevel'):
            setup_logging(self.config.raw['logLevel'])

        self.API_TIMEOUT = self.config.raw.get('apiTimeoutSeconds', self.DEFAULT_API_TIMEOUT)
        self.lock = threading.RLock()
        self.state = ViewerState(self.config)
        self.catalog_message: Optional[str] = None
        self._build_services()

    def _build_services(self) -> None:
        token = self.config.token
        self.fetcher = ContentFetcher(self.site_root, token=token, timeout=self.API_TIMEOUT)
        self.github = GitHubContentsClient(token=token, timeout=self.API_TIMEOUT)
        self.resolver = ImageResolver(self.config, self.fetcher, self.github)
        self.catalog = CatalogService(self.config, self.fetcher, self.github)
        remote_text = not self.config.local_info
        self.cards = CardService(self.fetcher, self.resolver, memo=self.state.thumbnails,
                                 lock=self.lock, authenticated=remote_text)
        self.details = DetailService(self.fetcher, self.resolver, authenticated=remote_text)

    # ------------------------------------------------------------------
    # Catalog lifecycle
    # ------------------------------------------------------------------

    @property
    def entries(self) -> List[CatalogEntry]:
        return self.state.entries

    def load_catalog(self) -> CatalogResult:
        """(Re)load the catalog; resets view state and the thumbnail map."""
        result = self.catalog.load()
        with self.lock:
            self.state.reset(self.config, result.entries)
            self.catalog_message = result.message
            self.cards.memo = self.state.thumbnails
        return result

    def reload_config(self) -> CatalogResult:
        """Re-read the config files (keeping the current token) and the catalog."""
        token = self.config.token
        config = load_config(self.site_root, self.config_path, self.fallback_path, token=token)
        with self.lock:
            self.config = config
            self.state.reset(config)
            self._build_services()
        return self.load_catalog()

    def set_token(self, token: Optional[str]) -> CatalogResult:
        """Apply (or clear) the bearer token and reload the catalog."""
        token = (token or '').strip() or None
        with self.lock:
            self.config.token = token
            self.fetcher.set_token(token)
            self.github.set_token(token)
        self._log.info("Bearer token %s", 'applied' if token else 'cleared')
        return self.load_catalog()

    # ------------------------------------------------------------------
    # Cards and details
    # ------------------------------------------------------------------

    def search(self, query: Optional[str] = None) -> List[CatalogEntry]:
        with self.lock:
            return self.state.search(query)

    def card(self, name: str) -> Optional[CardData]:
        entry = self.state.entry(name)
        if entry is None:
            return None
        return self.cards.load_card(entry)

    def all_cards(self) -> List[CardData]:
        return self.cards.load_cards(self.entries)

    def open_game(self, name: str) -> Tuple[GameDetail, bool]:
        """Open *name* in the detail view.

        Returns:
            ``(detail, applied)``; *applied* is False when another game was
            opened while this one was loading.

        Raises:
            KeyError: Unknown game name.
        """
        with self.lock:
            request = self.state.open_game(name)
            entry = self.state.entry(name)
        detail = self.details.load_detail(entry)
        with self.lock:
            applied = self.state.apply_detail(request, detail)
        return detail, applied

    def entry_for_fragment(self, fragment: Optional[str]) -> Optional[CatalogEntry]:
        with self.lock:
            return self.state.entry_for_fragment(fragment)

    def open_fragment(self, fragment: Optional[str]) -> Optional[GameDetail]:
        """Open the game named by a ``#game=...`` fragment, if it exists."""
        entry = self.entry_for_fragment(fragment)
        if entry is None:
            return None
        detail, _ = self.open_game(entry.name)
        return detail

    def back_to_grid(self) -> None:
        with self.lock:
            self.state.back_to_grid()

    # ------------------------------------------------------------------
    # Terminal output
    # ------------------------------------------------------------------

    def display_catalog(self, entries: Optional[List[CatalogEntry]] = None):
        """Print the catalog list, or the empty-state message."""
        entries = self.entries if entries is None else entries
        print(f"\n{Fore.GREEN}{'='*60}")
        print(f"{Fore.CYAN}{Style.BRIGHT}📚 {self.config.repo_info_line() or 'Game catalog'}")
        print(f"{Fore.GREEN}{'='*60}")
        if not entries:
            print(f"{Fore.YELLOW}{self.catalog_message or 'No games found.'}")
            return
        for entry in entries:
            print(f"{Fore.WHITE}  • {entry.name}")
        print(f"\n{Fore.YELLOW}{len(entries)} game(s)")

    def display_detail(self, detail: GameDetail):
        """Print one game's text, images and videos."""
        print(f"\n{Fore.GREEN}{'='*60}")
        print(f"{Fore.CYAN}{Style.BRIGHT}🎮 {detail.name}")
        print(f"{Fore.GREEN}{'='*60}")
        print(f"{Fore.WHITE}{detail.body}")
        print(f"\n{Fore.YELLOW}Images:")
        if detail.images:
            for url in detail.images:
                print(f"{Fore.WHITE}  {url}")
        else:
            print(f"{Fore.WHITE}  {detail.images_message or 'None'}")
        if detail.videos:
            print(f"\n{Fore.YELLOW}Videos:")
            for url in detail.videos:
                print(f"{Fore.WHITE}  {url}")
        print(f"{Fore.GREEN}{'='*60}\n")


def main():
    """Main entry point"""
    parser = argparse.ArgumentParser(
        description='GINFO - Game Info Catalog Viewer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python3 ginfo.py --list                  # List all games
  python3 ginfo.py --search zelda          # List games whose name contains "zelda"
  python3 ginfo.py --show "Hollow Knight"  # Show text, images and videos
  python3 ginfo.py --images Celeste --json # Print the resolved image URLs as JSON
        """
    )
    parser.add_argument('--site-root', default='.',
                        help='Folder holding config.json and the local Info folder (default: .)')
    parser.add_argument('--config', '-c', default=CONFIG_FILE,
                        help=f'Path to config file (default: {CONFIG_FILE})')
    parser.add_argument('--token', help='GitHub token sent as a bearer token')
    parser.add_argument('--log-level', default=None, help='Log level (default: WARNING)')
    parser.add_argument('--list', '-l', action='store_true', help='List all games and exit')
    parser.add_argument('--search', '-s', metavar='TEXT', help='List games whose name contains TEXT')
    parser.add_argument('--show', metavar='NAME', help='Show one game')
    parser.add_argument('--images', metavar='NAME', help='Print the image URLs for one game')
    parser.add_argument('--json', action='store_true', help='Print machine-readable JSON')

    args = parser.parse_args()
    if args.log_level:
        setup_logging(args.log_level)

    try:
        viewer = GameViewer(site_root=args.site_root, config_path=args.config, token=args.token)
    except ConfigError as e:
        print(f"{Fore.RED}Error: {e}")
        print(f"{Fore.YELLOW}Copy 'config.example.json' to 'config.json' in the site root.")
        sys.exit(1)

    try:
        result = viewer.load_catalog()

        name = args.show or args.images
        if name:
            if viewer.state.entry(name) is None:
                print(f"{Fore.RED}Game not found: {name}")
                sys.exit(1)
            detail, _ = viewer.open_game(name)
            if args.images:
                if args.json:
                    print(json.dumps(detail.images, indent=2))
                else:
                    for url in detail.images:
                        print(url)
                    if not detail.images:
                        print(f"{Fore.YELLOW}{detail.images_message}")
            elif args.json:
                print(json.dumps(detail.to_dict(), indent=2, ensure_ascii=False))
            else:
                viewer.display_detail(detail)
            return

        entries = viewer.search(args.search)
        if args.json:
            print(json.dumps({'entries': [e.to_dict() for e in entries],
                              'message': result.message}, indent=2, ensure_ascii=False))
        else:
            viewer.display_catalog(entries)
    except KeyboardInterrupt:
        print(f"\n\n{Fore.YELLOW}Interrupted by user. Goodbye!")
    except Exception as e:
        logger.exception("Unexpected error")
        print(f"\n{Fore.RED}An unexpected error occurred: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
