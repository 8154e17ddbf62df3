from .index_lookup import IndexLookupUseCase
from .video_resolve import VideoResolveUseCase, parse_video_request

__all__ = ["IndexLookupUseCase", "VideoResolveUseCase", "parse_video_request"]
