import logging
import os
import uuid
from contextlib import suppress
from typing import Optional

from vidrelay.config.settings import config
from vidrelay.core.errors import DownloadFailed
from vidrelay.core.state import state
from vidrelay.models.internal import DownloadIntent, FetchedMedia
from vidrelay.services.format import FormatDecision
from vidrelay.services.ytdlp import ExternalTool
from vidrelay.utils.filename import build_filename
from vidrelay.utils.locale import safe_url_for_log

logger = logging.getLogger("vidrelay.download")


def scratch_dir() -> str:
    path = state.scratch_dir or config.download.scratch_dir
    os.makedirs(path, exist_ok=True)
    return path


class DownloadService:
    """Video download service"""

    @staticmethod
    def plan(url: str, format_id: str, title: str, label: Optional[str] = None) -> DownloadIntent:
        """Decide extension and audio handling for a request"""
        audio_only = FormatDecision.is_audio_only(format_id, label)
        ext = FormatDecision.extension(audio_only)
        return DownloadIntent(
            url=url,
            format_id=format_id,
            filename=build_filename(title, ext, fallback_seed=url),
            audio_only=audio_only,
            ext=ext,
        )

    @staticmethod
    async def fetch(
        url: str,
        format_id: str,
        title: str,
        tool: ExternalTool,
        label: Optional[str] = None
    ) -> FetchedMedia:
        """
        Download to a scratch file owned by the caller.
        Each call writes under its own unique stem, so concurrent
        downloads of the same title never touch each other's files.
        """
        intent = DownloadService.plan(url, format_id, title, label)
        directory = scratch_dir()
        stem = uuid.uuid4().hex
        # yt-dlp picks the final extension after merge/convert
        output_template = os.path.join(directory, f"{stem}.%(ext)s")

        logger.info(
            f"Fetching {safe_url_for_log(url)} format={format_id} "
            f"audio_only={intent.audio_only} -> {stem}"
        )

        try:
            await tool.fetch_file(url, format_id, output_template, intent.audio_only)
        except DownloadFailed:
            DownloadService.discard(directory, stem)
            raise

        file_path = DownloadService.locate(directory, stem, intent.ext)
        if file_path is None:
            DownloadService.discard(directory, stem)
            raise DownloadFailed(f"no output file for {stem}")

        size = os.path.getsize(file_path)
        if size == 0:
            DownloadService.discard(directory, stem)
            raise DownloadFailed(f"empty output file {file_path}")

        return FetchedMedia(
            file_path=file_path,
            filename=intent.filename,
            media_type=FormatDecision.media_type(intent.audio_only),
            size=size,
        )

    @staticmethod
    def locate(directory: str, stem: str, ext: str) -> Optional[str]:
        """Find the finished file for stem, preferring the expected extension"""
        candidates = sorted(
            name for name in os.listdir(directory)
            if name.startswith(f"{stem}.") and not name.endswith((".part", ".ytdl"))
        )
        if not candidates:
            return None

        preferred = f"{stem}.{ext}"
        name = preferred if preferred in candidates else candidates[0]
        return os.path.join(directory, name)

    @staticmethod
    def discard(directory: str, stem: str) -> None:
        """Remove every leftover belonging to stem"""
        with suppress(FileNotFoundError):
            for name in os.listdir(directory):
                if name.startswith(f"{stem}."):
                    with suppress(OSError):
                        os.remove(os.path.join(directory, name))
