import re

from vidrelay.utils.hash import hash_stable

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


def sanitize_title(title: str) -> str:
    """
    Filesystem-safe base name from a media title.
    Drops everything but ASCII letters, digits and whitespace,
    then joins the remaining words with underscores.
    """
    stripped = _UNSAFE_CHARS.sub("", title)
    return _WHITESPACE.sub("_", stripped.strip())


def build_filename(title: str, ext: str, fallback_seed: str = "") -> str:
    """Sanitized title plus extension, falling back to a hashed name"""
    base = sanitize_title(title)
    if not base:
        base = f"media_{hash_stable(fallback_seed or title)[:8]}"
    return f"{base}.{ext}"


def content_disposition(filename: str) -> str:
    # Sanitized names carry no quotes, escape anyway for fallback names
    safe_filename = filename.replace("\\", "").replace('"', '\\"')
    return f'attachment; filename="{safe_filename}"'
