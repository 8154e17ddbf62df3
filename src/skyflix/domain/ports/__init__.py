from .cache import CachePort
from .video_index import HostPageFetcherPort, VideoIndexReader, VideoIndexSnapshot

__all__ = [
    "CachePort",
    "HostPageFetcherPort",
    "VideoIndexReader",
    "VideoIndexSnapshot",
]
