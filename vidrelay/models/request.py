from typing import Any, Optional

from pydantic import BaseModel, Field

from vidrelay.core.errors import MissingParameter


def _require_text(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value
    return None


class AnalyzeRequest(BaseModel):
    url: Optional[Any] = Field(None, description="Video URL")

    def require_url(self) -> str:
        url = _require_text(self.url)
        if url is None:
            raise MissingParameter("url", message_key="error.url_required")
        return url


class DownloadRequest(BaseModel):
    url: Optional[Any] = Field(None, description="Video URL")
    format: Optional[Any] = Field(None, description="Format identifier returned by analyze")
    title: Optional[Any] = Field(None, description="Media title, used for the filename")

    def require_fields(self) -> tuple[str, str, str]:
        """Return (url, format, title) or raise MissingParameter naming the gaps"""
        values = {
            "url": _require_text(self.url),
            "format": _require_text(self.format),
            "title": _require_text(self.title),
        }
        missing = [name for name, value in values.items() if value is None]
        if missing:
            raise MissingParameter(", ".join(missing))
        return values["url"], values["format"], values["title"]
