"""
content_clients.py
==================
Where GINFO gets its bytes from.

* :class:`GitHubContentsClient`: the GitHub *contents* API, used to list
  the ``Info`` folder of the site repository and the per-game folders of
  the images repository.
* :class:`ContentFetcher`: reads text/JSON either from ``http(s)://`` URLs
  or from files below the local site root.

Both attach the optional bearer token (set by the user in the GUI or via
``GINFO_GITHUB_TOKEN``) to remote requests.

Usage
-----
::

    from content_clients import ContentFetcher, GitHubContentsClient

    github = GitHubContentsClient(token="ghp_...")
    items = github.list_directory("owner", "repo", "Info", "main")
    # [{"type": "file", "name": "Celeste.txt", "download_url": "https://..."}, ...]

    fetcher = ContentFetcher(site_root="/srv/site", token="ghp_...")
    text = fetcher.read_text("Info/Celeste.txt")
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Optional
from urllib.parse import quote, unquote

import requests

from app.url_builder import is_absolute_url

logger = logging.getLogger('ginfo.content')

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------
_API_BASE = "https://api.github.com"
_ACCEPT = "application/vnd.github.v3+json"
_DEFAULT_TIMEOUT = 10  # seconds


class ContentFetchError(Exception):
    """Raised when a document cannot be fetched or decoded."""


class _TokenMixin:
    """Adds the optional bearer token to outgoing request headers."""

    def __init__(self, token: Optional[str] = None) -> None:
        self._token: Optional[str] = token or None

    @property
    def token(self) -> Optional[str]:
        return self._token

    def set_token(self, token: Optional[str]) -> None:
        self._token = (token or '').strip() or None

    def _headers(self) -> Dict[str, str]:
        headers = {'Accept': _ACCEPT}
        if self._token:
            headers['Authorization'] = f'Bearer {self._token}'
        return headers


class GitHubContentsClient(_TokenMixin):
    """Minimal client for ``GET /repos/{owner}/{repo}/contents/{path}``."""

    def __init__(self, token: Optional[str] = None, timeout: int = _DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None) -> None:
        _TokenMixin.__init__(self, token)
        self._timeout = timeout
        self._session = session or requests.Session()

    @staticmethod
    def contents_url(owner: str, repo: str, path: str, branch: str) -> str:
        return (f"{_API_BASE}/repos/{owner}/{repo}/contents/"
                f"{quote(path, safe='/')}?ref={quote(branch, safe='')}")

    def list_directory(self, owner: str, repo: str, path: str,
                       branch: str = 'main') -> Optional[List[Dict[str, Any]]]:
        """Return the directory listing at *path*.

        Returns:
            List of entry dicts (``type``, ``name``, ``download_url``...),
            or ``None`` when the path does not exist.

        Raises:
            ContentFetchError: Any other HTTP, network or decode failure.
        """
        url = self.contents_url(owner, repo, path, branch)
        try:
            resp = self._session.get(url, headers=self._headers(), timeout=self._timeout)
        except requests.RequestException as exc:
            raise ContentFetchError(f"GitHub API request failed: {exc}") from exc

        if resp.status_code == 404:
            logger.info("GitHub path not found: %s/%s/%s@%s", owner, repo, path, branch)
            return None
        if resp.status_code != 200:
            raise ContentFetchError(f"GitHub API {resp.status_code}")
        try:
            data = resp.json()
        except ValueError as exc:
            raise ContentFetchError("GitHub API returned invalid JSON") from exc
        if not isinstance(data, list):
            # A file path returns a single object; callers want a listing
            return [data] if isinstance(data, dict) else []
        return data


class ContentFetcher(_TokenMixin):
    """Reads documents from URLs or from the local site root.

    Local locators may be URL-escaped (``Info/My%20Game.txt``) because the
    same strings are also handed to the browser.  They are unescaped and
    must stay inside *site_root*.
    """

    def __init__(self, site_root: str = '.', token: Optional[str] = None,
                 timeout: int = _DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None) -> None:
        _TokenMixin.__init__(self, token)
        self.site_root = os.path.abspath(site_root)
        self._timeout = timeout
        self._session = session or requests.Session()

    def local_path(self, locator: str) -> str:
        """Map a site-relative locator onto the filesystem.

        Raises:
            ContentFetchError: The locator escapes the site root.
        """
        relative = unquote(locator.split('?', 1)[0].split('#', 1)[0])
        return self.contained_path(relative)

    def contained_path(self, relative: str) -> str:
        """Join an already-decoded *relative* path onto the site root.

        Raises:
            ContentFetchError: The path escapes the site root.
        """
        full = os.path.abspath(os.path.join(self.site_root, relative.lstrip('/')))
        if full != self.site_root and not full.startswith(self.site_root + os.sep):
            raise ContentFetchError(f"Path escapes site root: {relative}")
        return full

    def read_text(self, locator: str, authenticated: bool = True) -> str:
        """Return the UTF-8 text at *locator*.

        Raises:
            ContentFetchError: Missing file, HTTP error or network failure.
        """
        if not locator:
            raise ContentFetchError("Empty locator")
        if is_absolute_url(locator):
            headers = self._headers() if authenticated else {}
            try:
                resp = self._session.get(locator, headers=headers, timeout=self._timeout)
                resp.raise_for_status()
            except requests.RequestException as exc:
                raise ContentFetchError(f"Failed to fetch {locator}: {exc}") from exc
            resp.encoding = resp.encoding or 'utf-8'
            return resp.text.lstrip('\ufeff')

        path = self.local_path(locator)
        try:
            with open(path, 'r', encoding='utf-8-sig') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise ContentFetchError(f"Failed to read {locator}: {exc}") from exc

    def read_json(self, locator: str, authenticated: bool = True) -> Any:
        """Return the decoded JSON document at *locator*.

        Raises:
            ContentFetchError: Fetch failure or invalid JSON.
        """
        text = self.read_text(locator, authenticated=authenticated)
        try:
            return json.loads(text)
        except ValueError as exc:
            raise ContentFetchError(f"Invalid JSON in {locator}: {exc}") from exc
