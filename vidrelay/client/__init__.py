from .api import DownloadedFile, RelayClient, RelayRequestError
from .history import DownloadHistory, DownloadRecord
from .session import DownloaderSession

__all__ = [
    "DownloadHistory",
    "DownloadRecord",
    "DownloadedFile",
    "DownloaderSession",
    "RelayClient",
    "RelayRequestError",
]
