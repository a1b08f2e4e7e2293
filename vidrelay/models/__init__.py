from .internal import DownloadIntent, FetchedMedia
from .request import AnalyzeRequest, DownloadRequest
from .response import AnalyzeResponse, ErrorResponse, FormatOption, MediaMetadata

__all__ = [
    "AnalyzeRequest",
    "AnalyzeResponse",
    "DownloadIntent",
    "DownloadRequest",
    "ErrorResponse",
    "FetchedMedia",
    "FormatOption",
    "MediaMetadata",
]
