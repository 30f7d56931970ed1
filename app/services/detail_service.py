"""Business logic for the single-game panel."""
import logging

from app.models import CatalogEntry, GameDetail
from app.services.video_embed import video_embeds
from frontmatter import parse_front_matter

logger = logging.getLogger('ginfo.detail')

MSG_CONTENT_ERROR = "Could not load content."
MSG_NO_IMAGES = "No images for this game."


class DetailService:
    """Loads text, images and videos for one catalog entry.

    Failures never propagate: a missing text file gives an error body and
    no media, an empty image list gives :data:`MSG_NO_IMAGES`.
    """

    def __init__(self, fetcher, resolver, authenticated: bool = True) -> None:
        self.fetcher = fetcher
        self.resolver = resolver
        self.authenticated = authenticated

    def load_detail(self, entry: CatalogEntry) -> GameDetail:
        try:
            text = self.fetcher.read_text(entry.source_locator, authenticated=self.authenticated)
        except Exception as exc:
            logger.warning("Could not load %r from %s: %s", entry.name, entry.source_locator, exc)
            return GameDetail(entry.name, body=MSG_CONTENT_ERROR, error=str(exc))

        doc = parse_front_matter(text)
        try:
            images = self.resolver.resolve(doc.metadata, entry.name)
        except Exception as exc:
            logger.warning("Image resolution failed for %r: %s", entry.name, exc)
            images = []

        return GameDetail(
            entry.name,
            body=doc.body,
            metadata=doc.metadata,
            images=images,
            videos=video_embeds(doc.metadata),
            images_message=None if images else MSG_NO_IMAGES,
        )
