"""Services package: expose all concrete services from one import."""
from .catalog_service import CatalogService
from .image_resolver import ImageResolver
from .card_service import CardService
from .detail_service import DetailService
from .viewer_state import LightboxState, ViewerState
from .deep_link import build_fragment, parse_fragment
from .video_embed import video_embeds, youtube_embed_url

__all__ = [
    'CatalogService',
    'ImageResolver',
    'CardService',
    'DetailService',
    'LightboxState',
    'ViewerState',
    'build_fragment',
    'parse_fragment',
    'video_embeds',
    'youtube_embed_url',
]
