from typing import Any, Optional


def format_duration(seconds: Any) -> str:
    """Seconds as M:SS, or H:MM:SS past the hour"""
    try:
        total = int(float(seconds))
    except (TypeError, ValueError):
        return "0:00"
    if total < 0:
        total = 0

    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_size(num_bytes: Any) -> str:
    if not isinstance(num_bytes, (int, float)) or num_bytes <= 0:
        return "Unknown"

    size = float(num_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            break
        size /= 1024

    if unit == "B":
        return f"{int(size)} B"
    return f"{size:.1f} {unit}"


def format_views(count: Any) -> Optional[str]:
    if not isinstance(count, int) or isinstance(count, bool) or count < 0:
        return None
    return f"{count:,}"
