from .errors import (
    DownloadFailed,
    ExtractionFailed,
    InvalidUrl,
    MissingParameter,
    RelayError,
    StreamingFailed,
    UnsupportedPlatform,
)
from .platform import Platform, detect_platform, match_platform
from .validation import MediaSource, validate_source, validate_url

__all__ = [
    "DownloadFailed",
    "ExtractionFailed",
    "InvalidUrl",
    "MediaSource",
    "MissingParameter",
    "Platform",
    "RelayError",
    "StreamingFailed",
    "UnsupportedPlatform",
    "detect_platform",
    "match_platform",
    "validate_source",
    "validate_url",
]
