from typing import List, Optional

from pydantic import BaseModel


class FormatOption(BaseModel):
    """One selectable quality/format"""
    quality: str
    format: str
    size: str
    format_id: str


class MediaMetadata(BaseModel):
    """Media information shown before download"""
    title: str
    thumbnail: str = ""
    duration: str = "0:00"
    platform: str
    views: Optional[str] = None
    formats: List[FormatOption] = []


class AnalyzeResponse(BaseModel):
    videoInfo: MediaMetadata


class ErrorResponse(BaseModel):
    error: str
