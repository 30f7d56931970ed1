"""Plain data holders shared by the GINFO services.

Everything here is a small value object with a ``to_dict`` helper so the
Flask routes can hand it straight to ``jsonify``.
"""
from typing import Any, Dict, List, Optional

TRUE_STRINGS = ('true', '1', 'yes', 'on')


def coerce_bool(value: Any) -> bool:
    """Read a config flag; the string "false" counts as False."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    if isinstance(value, (int, float)):
        return value != 0
    return False


class ViewerConfig:
    """Site configuration, normally read from ``config.json``.

    Unknown keys are kept in :attr:`raw` so callers can still reach them.
    """

    DEFAULT_INFO_BASE = 'Info'

    def __init__(self, data: Optional[Dict[str, Any]] = None,
                 token: Optional[str] = None) -> None:
        data = dict(data or {})
        self.raw: Dict[str, Any] = data
        self.local_info: bool = coerce_bool(data.get('localInfo', False))
        self.info_base_path: str = data.get('infoBasePath') or self.DEFAULT_INFO_BASE
        self.info_index_path: Optional[str] = data.get('infoIndexPath') or None
        self.info_folder: str = data.get('infoFolder') or self.DEFAULT_INFO_BASE

        self.images_index_url: Optional[str] = data.get('imagesIndexUrl') or None
        self.images_raw_base_url: Optional[str] = data.get('imagesRawBaseUrl') or None
        self.images_filename_pattern: Optional[str] = data.get('imagesFilenamePattern') or None
        self.images_start = data.get('imagesStart')
        self.images_end = data.get('imagesEnd')
        self.images_number_padding = data.get('imagesNumberPadding')

        self.site_repo_owner: Optional[str] = data.get('siteRepoOwner') or None
        self.site_repo_name: Optional[str] = data.get('siteRepoName') or None
        self.site_branch: str = data.get('siteBranch') or 'main'
        self.images_repo_owner: Optional[str] = data.get('imagesRepoOwner') or None
        self.images_repo_name: Optional[str] = data.get('imagesRepoName') or None
        self.images_repo_branch: str = data.get('imagesRepoBranch') or 'main'
        self.images_folder_prefix: str = data.get('imagesFolderPrefix') or ''

        self.token: Optional[str] = token or None

    @property
    def index_path(self) -> str:
        """Location of the local catalog index."""
        return self.info_index_path or f"{self.info_base_path}/index.json"

    def repo_info_line(self) -> str:
        """Short description of where the catalog comes from."""
        if self.local_info:
            return f"{self.info_base_path} (local)"
        if self.site_repo_owner and self.site_repo_name:
            return f"{self.site_repo_owner}/{self.site_repo_name}"
        return ''

    def to_dict(self) -> Dict[str, Any]:
        data = dict(self.raw)
        data['hasToken'] = bool(self.token)
        return data


class CatalogEntry:
    """One listed game: display name plus where to fetch its text."""

    __slots__ = ('_name', '_source_locator')

    def __init__(self, name: str, source_locator: str) -> None:
        object.__setattr__(self, '_name', name)
        object.__setattr__(self, '_source_locator', source_locator)

    def __setattr__(self, key, value):
        raise AttributeError('CatalogEntry is immutable')

    @property
    def name(self) -> str:
        return self._name

    @property
    def source_locator(self) -> str:
        return self._source_locator

    def __eq__(self, other) -> bool:
        if not isinstance(other, CatalogEntry):
            return NotImplemented
        return (self.name, self.source_locator) == (other.name, other.source_locator)

    def __hash__(self) -> int:
        return hash((self.name, self.source_locator))

    def __repr__(self) -> str:
        return f"CatalogEntry(name={self.name!r}, source_locator={self.source_locator!r})"

    def to_dict(self) -> Dict[str, str]:
        return {'name': self.name, 'source_locator': self.source_locator}


class CatalogResult:
    """Outcome of one catalog load.

    ``message`` is set whenever the list is empty so the page can show an
    explicit empty/not-found state instead of a blank grid.
    """

    def __init__(self, entries: Optional[List[CatalogEntry]] = None,
                 message: Optional[str] = None) -> None:
        self.entries: List[CatalogEntry] = list(entries or [])
        self.message: Optional[str] = message

    @property
    def ok(self) -> bool:
        return bool(self.entries)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'entries': [e.to_dict() for e in self.entries],
            'count': len(self.entries),
            'message': self.message,
        }


class CardData:
    """Thumbnail and summary for one grid card."""

    def __init__(self, name: str, thumbnail_url: Optional[str] = None,
                 summary: Optional[str] = None, loaded: bool = False) -> None:
        self.name = name
        self.thumbnail_url = thumbnail_url
        self.summary = summary
        self.loaded = loaded

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'thumbnail_url': self.thumbnail_url,
            'summary': self.summary,
            'loaded': self.loaded,
        }


class GameDetail:
    """Everything the single-game panel shows."""

    def __init__(self, name: str, body: str = '',
                 metadata: Optional[Dict[str, Any]] = None,
                 images: Optional[List[str]] = None,
                 videos: Optional[List[str]] = None,
                 error: Optional[str] = None,
                 images_message: Optional[str] = None) -> None:
        self.name = name
        self.body = body
        self.metadata: Dict[str, Any] = metadata or {}
        self.images: List[str] = images or []
        self.videos: List[str] = videos or []
        self.error = error
        self.images_message = images_message

    def to_dict(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'body': self.body,
            'metadata': self.metadata,
            'images': self.images,
            'videos': self.videos,
            'error': self.error,
            'images_message': self.images_message,
        }
