"""Metadata parsing, download staging and scoped streaming with a fake tool."""

import os

import pytest

from vidrelay.core.errors import DownloadFailed, ExtractionFailed
from vidrelay.services.download import DownloadService
from vidrelay.services.info import VideoInfoService
from vidrelay.services.stream import StreamService

from conftest import FakeTool, scratch_files


class TestVideoInfoService:
    @pytest.mark.asyncio
    async def test_parses_metadata(self, fake_tool):
        info = await VideoInfoService.fetch("https://youtu.be/xyz", fake_tool)

        assert info.title == "Cool Video! #1"
        assert info.platform == "YouTube"
        assert info.duration == "3:33"
        assert info.views == "1,234,567"
        assert info.thumbnail.endswith("hqdefault.jpg")
        assert [f.quality for f in info.formats] == ["1080p", "360p", "Audio only"]
        assert fake_tool.metadata_calls == ["https://youtu.be/xyz"]

    @pytest.mark.asyncio
    async def test_minimal_document(self):
        info = await VideoInfoService.fetch("https://www.tiktok.com/@a/video/1", FakeTool(info={}))
        assert info.title == "Untitled"
        assert info.platform == "TikTok"
        assert info.views is None
        assert [f.format_id for f in info.formats] == ["best", "bestaudio/best"]

    @pytest.mark.asyncio
    async def test_single_format_extractor(self):
        doc = {"title": "clip", "format_id": "hd", "ext": "mp4", "height": 720, "vcodec": "h264", "acodec": "aac"}
        info = await VideoInfoService.fetch("https://www.linkedin.com/posts/x", FakeTool(info=doc))
        assert info.formats[0].format_id == "hd"
        assert info.formats[0].quality == "720p"

    @pytest.mark.asyncio
    async def test_thumbnail_from_thumbnail_list(self):
        doc = {"title": "t", "thumbnails": [{"url": "a.jpg"}, {"url": "b.jpg"}]}
        info = await VideoInfoService.fetch("https://x.com/a/status/1", FakeTool(info=doc))
        assert info.thumbnail == "b.jpg"

    @pytest.mark.asyncio
    async def test_bad_formats_field(self):
        with pytest.raises(ExtractionFailed):
            await VideoInfoService.fetch("https://youtu.be/xyz", FakeTool(info={"title": "t", "formats": "nope"}))

    @pytest.mark.asyncio
    async def test_tool_failure_propagates(self, fake_tool):
        fake_tool.fail_metadata = True
        with pytest.raises(ExtractionFailed):
            await VideoInfoService.fetch("https://youtu.be/xyz", fake_tool)


class TestDownloadService:
    def test_plan_video(self):
        intent = DownloadService.plan("https://youtu.be/xyz", "137+ba", "Cool Video! #1")
        assert intent.filename == "Cool_Video_1.mp4"
        assert not intent.audio_only

    def test_plan_audio(self):
        intent = DownloadService.plan("https://youtu.be/xyz", "bestaudio/best", "Cool Video! #1")
        assert intent.filename == "Cool_Video_1.mp3"
        assert intent.audio_only

    def test_plan_audio_from_label(self):
        assert DownloadService.plan("https://youtu.be/xyz", "251", "t", label="MP3").audio_only

    @pytest.mark.asyncio
    async def test_fetch_video(self, fake_tool, scratch):
        media = await DownloadService.fetch("https://youtu.be/xyz", "18", "Cool Video! #1", fake_tool)

        assert media.filename == "Cool_Video_1.mp4"
        assert media.media_type == "video/mp4"
        assert media.size > 0
        assert os.path.dirname(media.file_path) == str(scratch)
        call = fake_tool.fetch_calls[0]
        assert call["format_id"] == "18"
        assert call["audio_only"] is False
        assert call["output_template"].endswith(".%(ext)s")

    @pytest.mark.asyncio
    async def test_fetch_audio(self, fake_tool, scratch):
        media = await DownloadService.fetch("https://youtu.be/xyz", "bestaudio/best", "Song", fake_tool)
        assert media.filename == "Song.mp3"
        assert media.media_type == "audio/mpeg"
        assert media.file_path.endswith(".mp3")
        assert fake_tool.fetch_calls[0]["audio_only"] is True

    @pytest.mark.asyncio
    async def test_same_title_gets_distinct_scratch_files(self, fake_tool, scratch):
        first = await DownloadService.fetch("https://youtu.be/xyz", "18", "Same", fake_tool)
        second = await DownloadService.fetch("https://youtu.be/xyz", "18", "Same", fake_tool)
        assert first.filename == second.filename
        assert first.file_path != second.file_path
        assert len(scratch_files(scratch)) == 2

    @pytest.mark.asyncio
    async def test_tool_failure(self, fake_tool, scratch):
        fake_tool.fail_fetch = True
        with pytest.raises(DownloadFailed):
            await DownloadService.fetch("https://youtu.be/xyz", "18", "t", fake_tool)
        assert scratch_files(scratch) == []

    @pytest.mark.asyncio
    async def test_empty_output_is_a_failure(self, scratch):
        with pytest.raises(DownloadFailed):
            await DownloadService.fetch("https://youtu.be/xyz", "18", "t", FakeTool(payload=b""))
        assert scratch_files(scratch) == []

    @pytest.mark.asyncio
    async def test_missing_output_is_a_failure(self, scratch):
        class SilentTool(FakeTool):
            async def fetch_file(self, url, format_id, output_template, audio_only):
                return None

        with pytest.raises(DownloadFailed):
            await DownloadService.fetch("https://youtu.be/xyz", "18", "t", SilentTool())

    def test_locate_prefers_expected_extension(self, tmp_path):
        for name in ("abc.webm", "abc.mp4", "abc.mp4.part", "other.mp4"):
            (tmp_path / name).write_bytes(b"x")
        assert DownloadService.locate(str(tmp_path), "abc", "mp4") == str(tmp_path / "abc.mp4")
        # Falls back to whatever the tool produced
        assert DownloadService.locate(str(tmp_path), "abc", "mp3") in (str(tmp_path / "abc.mp4"), str(tmp_path / "abc.webm"))
        assert DownloadService.locate(str(tmp_path), "zzz", "mp4") is None


class TestStreamService:
    @pytest.mark.asyncio
    async def test_streams_and_deletes(self, tmp_path):
        path = tmp_path / "f.mp4"
        path.write_bytes(b"a" * 5000)

        chunks = [chunk async for chunk in StreamService.iter_file(str(path), chunk_size=2048)]

        assert b"".join(chunks) == b"a" * 5000
        assert len(chunks) == 3
        assert not path.exists()

    @pytest.mark.asyncio
    async def test_abandoned_stream_still_deletes(self, tmp_path):
        path = tmp_path / "f.mp4"
        path.write_bytes(b"a" * 5000)

        gen = StreamService.iter_file(str(path), chunk_size=1024)
        await gen.__anext__()
        await gen.aclose()

        assert not path.exists()

    def test_release_is_idempotent(self, tmp_path):
        path = tmp_path / "gone.mp4"
        StreamService.release(str(path))
        StreamService.release(str(path))
