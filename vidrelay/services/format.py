from typing import Any, Dict, List, Optional

from vidrelay.config.settings import config
from vidrelay.models.response import FormatOption
from vidrelay.utils.display import format_size

AUDIO_MARKERS = ("audio", "mp3")

AUDIO_OPTION = FormatOption(
    quality="Audio only",
    format="MP3",
    size="Unknown",
    format_id="bestaudio/best",
)

BEST_OPTION = FormatOption(
    quality="Best available",
    format="MP4",
    size="Unknown",
    format_id="best",
)


def _codec_missing(codec: Optional[str]) -> bool:
    return codec == "none"


class FormatDecision:
    """Make format decisions"""

    @staticmethod
    def is_audio_only(format_id: str, label: Optional[str] = None) -> bool:
        """Audio-only when the identifier or label mentions audio or mp3"""
        haystack = f"{format_id} {label or ''}".lower()
        return any(marker in haystack for marker in AUDIO_MARKERS)

    @staticmethod
    def extension(audio_only: bool) -> str:
        return config.ytdlp.audio_format if audio_only else config.ytdlp.merge_format

    @staticmethod
    def media_type(audio_only: bool) -> str:
        return "audio/mpeg" if audio_only else "video/mp4"

    @staticmethod
    def build_options(raw_formats: List[Dict[str, Any]], max_video: Optional[int] = None) -> List[FormatOption]:
        """
        Turn the tool's format list into selectable options.
        One video option per quality label, tallest first, then a
        synthetic audio option. Never returns an empty list.
        """
        max_video = max_video or config.download.max_video_formats

        best_by_quality: Dict[str, Dict[str, Any]] = {}
        for f in raw_formats or []:
            if not isinstance(f, dict) or not f.get("format_id"):
                continue
            # Storyboards and audio-only streams
            if _codec_missing(f.get("vcodec")):
                continue

            quality = FormatDecision.quality_label(f)
            current = best_by_quality.get(quality)
            if current is None or FormatDecision._rank(f) > FormatDecision._rank(current):
                best_by_quality[quality] = f

        ordered = sorted(
            best_by_quality.items(),
            key=lambda item: (item[1].get("height") or 0, FormatDecision._rank(item[1])),
            reverse=True
        )

        options = [
            FormatOption(
                quality=quality,
                format=FormatDecision.container_label(f),
                size=format_size(f.get("filesize") or f.get("filesize_approx")),
                format_id=FormatDecision.request_id(f),
            )
            for quality, f in ordered[:max_video]
        ]

        if not options:
            options.append(BEST_OPTION)
        options.append(AUDIO_OPTION)
        return options

    @staticmethod
    def quality_label(f: Dict[str, Any]) -> str:
        height = f.get("height")
        if isinstance(height, int) and height > 0:
            return f"{height}p"
        return str(f.get("format_note") or f.get("resolution") or f.get("format_id"))

    @staticmethod
    def container_label(f: Dict[str, Any]) -> str:
        ext = str(f.get("ext") or "mp4").upper()
        vcodec = f.get("vcodec")
        if vcodec and not _codec_missing(vcodec):
            return f"{ext} ({str(vcodec).split('.')[0]})"
        return ext

    @staticmethod
    def request_id(f: Dict[str, Any]) -> str:
        """Identifier to hand back to the tool; video-only streams get audio merged in"""
        format_id = str(f["format_id"])
        if _codec_missing(f.get("acodec")):
            return f"{format_id}+ba"
        return format_id

    @staticmethod
    def _rank(f: Dict[str, Any]) -> tuple:
        return (f.get("filesize") or f.get("filesize_approx") or 0, f.get("tbr") or 0)
