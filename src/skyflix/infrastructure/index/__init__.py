"""Pre-built in-memory video index."""

from .builder import IndexBuilder
from .scheduler import IndexRefreshScheduler
from .store import IndexStore, VideoIndex

__all__ = ["IndexBuilder", "IndexRefreshScheduler", "IndexStore", "VideoIndex"]
