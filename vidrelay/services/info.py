import logging

from vidrelay.core.errors import ExtractionFailed
from vidrelay.core.platform import detect_platform
from vidrelay.models.response import MediaMetadata
from vidrelay.services.format import FormatDecision
from vidrelay.services.ytdlp import ExternalTool
from vidrelay.utils.display import format_duration, format_views
from vidrelay.utils.locale import safe_url_for_log

logger = logging.getLogger("vidrelay.info")


class VideoInfoService:
    """Video info fetching service"""

    @staticmethod
    async def fetch(url: str, tool: ExternalTool) -> MediaMetadata:
        """
        Fetch metadata for url with a single tool invocation.
        Any tool failure or unexpected document surfaces as ExtractionFailed.
        """
        info = await tool.dump_metadata(url)

        formats = info.get("formats")
        if formats is not None and not isinstance(formats, list):
            raise ExtractionFailed(f"formats is {type(formats).__name__}, expected list")

        # Single-format extractors report the format at top level
        if not formats and info.get("format_id"):
            formats = [info]

        thumbnail = info.get("thumbnail")
        if not thumbnail and isinstance(info.get("thumbnails"), list) and info["thumbnails"]:
            last = info["thumbnails"][-1]
            thumbnail = last.get("url") if isinstance(last, dict) else None

        metadata = MediaMetadata(
            title=str(info.get("title") or "Untitled"),
            thumbnail=thumbnail or "",
            duration=format_duration(info.get("duration")),
            platform=detect_platform(url),
            views=format_views(info.get("view_count")),
            formats=FormatDecision.build_options(formats or []),
        )

        logger.debug(
            f"Parsed {len(metadata.formats)} options for {safe_url_for_log(url)}"
        )
        return metadata
