"""Shared fixtures: a fake extraction tool and an in-process relay client."""

import copy
import os
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from vidrelay.api.deps import get_tool
from vidrelay.core.errors import DownloadFailed, ExtractionFailed
from vidrelay.core.state import state
from vidrelay.main import app
from vidrelay.services.ytdlp import ExternalTool

SAMPLE_INFO: Dict[str, Any] = {
    "id": "xyz",
    "title": "Cool Video! #1",
    "thumbnail": "https://i.ytimg.com/vi/xyz/hqdefault.jpg",
    "duration": 213,
    "view_count": 1234567,
    "formats": [
        {"format_id": "sb0", "ext": "mhtml", "vcodec": "none", "acodec": "none"},
        {"format_id": "140", "ext": "m4a", "vcodec": "none", "acodec": "mp4a.40.2", "filesize": 3_400_000},
        {"format_id": "18", "ext": "mp4", "height": 360, "vcodec": "avc1.42001E",
         "acodec": "mp4a.40.2", "filesize": 9_000_000, "tbr": 500},
        {"format_id": "134", "ext": "mp4", "height": 360, "vcodec": "avc1.4d401e",
         "acodec": "none", "filesize": 4_000_000, "tbr": 300},
        {"format_id": "137", "ext": "mp4", "height": 1080, "vcodec": "avc1.640028",
         "acodec": "none", "filesize": 52_428_800, "tbr": 4000},
        {"format_id": "248", "ext": "webm", "height": 1080, "vcodec": "vp9",
         "acodec": "none", "filesize_approx": 40_000_000, "tbr": 3000},
    ],
}

FAKE_PAYLOAD = b"\x00\x00\x00\x18ftypmp42" + b"x" * 4096


class FakeTool(ExternalTool):
    """ExternalTool that never spawns a process"""

    def __init__(self, info: Optional[Dict[str, Any]] = None, payload: bytes = FAKE_PAYLOAD):
        self.info = copy.deepcopy(SAMPLE_INFO) if info is None else info
        self.payload = payload
        self.fail_metadata = False
        self.fail_fetch = False
        self.metadata_calls: List[str] = []
        self.fetch_calls: List[Dict[str, Any]] = []
        self.written: List[str] = []

    async def dump_metadata(self, url: str) -> Dict[str, Any]:
        self.metadata_calls.append(url)
        if self.fail_metadata:
            raise ExtractionFailed("yt-dlp exited 1: ERROR: Private video")
        return self.info

    async def fetch_file(self, url: str, format_id: str, output_template: str, audio_only: bool) -> None:
        self.fetch_calls.append({
            "url": url,
            "format_id": format_id,
            "output_template": output_template,
            "audio_only": audio_only,
        })
        if self.fail_fetch:
            raise DownloadFailed("yt-dlp exited 1: ERROR: Requested format is not available")
        path = output_template.replace("%(ext)s", "mp3" if audio_only else "mp4")
        with open(path, "wb") as f:
            f.write(self.payload)
        self.written.append(path)

    async def version(self) -> str:
        return "2024.01.01"


@pytest.fixture
def scratch(tmp_path):
    directory = tmp_path / "scratch"
    directory.mkdir()
    original = state.scratch_dir
    state.scratch_dir = str(directory)
    yield directory
    state.scratch_dir = original


@pytest.fixture
def fake_tool():
    return FakeTool()


@pytest_asyncio.fixture
async def client(fake_tool, scratch):
    app.dependency_overrides[get_tool] = lambda: fake_tool
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.pop(get_tool, None)


def scratch_files(directory) -> List[str]:
    return sorted(os.listdir(directory))
