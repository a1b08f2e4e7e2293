import os
import re
from dataclasses import dataclass
from typing import Optional

import aiofiles
import httpx

from vidrelay.config.settings import config
from vidrelay.models.response import AnalyzeResponse, MediaMetadata
from vidrelay.utils.filename import build_filename

_FILENAME_RE = re.compile(r'filename="(.+)"')


class RelayRequestError(Exception):
    """Non-2xx answer from the relay"""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


@dataclass
class DownloadedFile:
    filename: str
    path: str
    size: int


def filename_from_disposition(header: Optional[str], fallback: str) -> str:
    if header:
        match = _FILENAME_RE.search(header)
        if match:
            # Never let the server pick a directory
            name = os.path.basename(match.group(1).replace('\\"', '"'))
            if name and name not in (".", ".."):
                return name
    return os.path.basename(fallback)


def _inside(dest_dir: str, path: str) -> bool:
    root = os.path.realpath(dest_dir)
    return os.path.commonpath([root, os.path.realpath(path)]) == root


class RelayClient:
    """HTTP client for the relay's analyze and download routes"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ):
        self.base_url = (base_url or config.client.backend_url).rstrip("/")
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            timeout=timeout or config.client.timeout_seconds
        )

    async def __aenter__(self) -> "RelayClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def analyze(self, url: str) -> MediaMetadata:
        resp = await self.client.post(f"{self.base_url}/api/analyze", json={"url": url})
        if resp.status_code >= 400:
            raise RelayRequestError(resp.status_code, self._error_message(resp, "Failed to analyze video"))
        return AnalyzeResponse.model_validate(resp.json()).videoInfo

    async def download(self, url: str, format_id: str, title: str, dest_dir: str) -> DownloadedFile:
        """Stream the relay's attachment into dest_dir"""
        payload = {"url": url, "format": format_id, "title": title}
        async with self.client.stream("POST", f"{self.base_url}/api/download", json=payload) as resp:
            if resp.status_code >= 400:
                await resp.aread()
                raise RelayRequestError(resp.status_code, self._error_message(resp, "Download failed"))

            ext = "mp3" if resp.headers.get("content-type", "").startswith("audio/") else "mp4"
            filename = filename_from_disposition(
                resp.headers.get("content-disposition"),
                build_filename(title, ext, fallback_seed=url),
            )
            os.makedirs(dest_dir, exist_ok=True)
            path = os.path.join(dest_dir, filename)
            if not _inside(dest_dir, path):
                raise ValueError(f"refusing to write outside {dest_dir}: {filename}")

            # Partial bodies never reach the final name
            part_path = f"{path}.part"
            size = 0
            try:
                async with aiofiles.open(part_path, "wb") as f:
                    async for chunk in resp.aiter_bytes():
                        size += len(chunk)
                        await f.write(chunk)
                os.replace(part_path, path)
            except BaseException:
                if os.path.exists(part_path):
                    os.remove(part_path)
                raise

        return DownloadedFile(filename=filename, path=path, size=size)

    @staticmethod
    def _error_message(resp: httpx.Response, default: str) -> str:
        try:
            body = resp.json()
        except ValueError:
            return default
        if isinstance(body, dict) and isinstance(body.get("error"), str):
            return body["error"]
        return default
