from .display import format_duration, format_size, format_views
from .filename import build_filename, content_disposition, sanitize_title
from .hash import hash_stable

__all__ = [
    "build_filename",
    "content_disposition",
    "format_duration",
    "format_size",
    "format_views",
    "hash_stable",
    "sanitize_title",
]
