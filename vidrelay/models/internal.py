from typing import NamedTuple

from pydantic import BaseModel


class DownloadIntent(BaseModel):
    """Internal download intent (separated from HTTP concerns)"""
    url: str
    format_id: str
    filename: str
    audio_only: bool
    ext: str


class FetchedMedia(NamedTuple):
    """A finished download waiting to be streamed; the caller deletes file_path"""
    file_path: str
    filename: str
    media_type: str
    size: int
