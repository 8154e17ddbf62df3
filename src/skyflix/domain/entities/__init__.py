from .video import (
    AggregateSource,
    ContentType,
    HostBuildCount,
    HostFetchError,
    HostResult,
    IndexStats,
    InvalidVideoRequest,
    KeyKind,
    ParsedFilename,
    ResultSource,
    VideoAggregate,
    VideoEntry,
    VideoHostingError,
    VideoRequest,
)

__all__ = [
    "AggregateSource",
    "ContentType",
    "HostBuildCount",
    "HostFetchError",
    "HostResult",
    "IndexStats",
    "InvalidVideoRequest",
    "KeyKind",
    "ParsedFilename",
    "ResultSource",
    "VideoAggregate",
    "VideoEntry",
    "VideoHostingError",
    "VideoRequest",
]
