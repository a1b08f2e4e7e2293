from dataclasses import dataclass
from urllib.parse import urlsplit

from vidrelay.core.errors import InvalidUrl, UnsupportedPlatform
from vidrelay.core.platform import Platform, match_platform


@dataclass(frozen=True)
class MediaSource:
    """URL plus the platform inferred from it"""
    url: str
    platform: Platform


def validate_source(url: str) -> MediaSource:
    """
    Validate a URL and classify it.
    Raises InvalidUrl for anything without a scheme and host,
    UnsupportedPlatform when no known platform matches.
    """
    if not isinstance(url, str) or not url.strip():
        raise InvalidUrl("empty url")
    if url != url.strip():
        raise InvalidUrl("surrounding whitespace")

    try:
        parsed = urlsplit(url)
        hostname = parsed.hostname
    except ValueError as e:
        raise InvalidUrl(str(e))

    if not parsed.scheme or not hostname:
        raise InvalidUrl(f"missing scheme or host: {url[:100]}")

    platform = match_platform(url)
    if platform is None:
        raise UnsupportedPlatform(hostname)

    return MediaSource(url=url, platform=platform)


def validate_url(url: str) -> str:
    """Validate and return the URL unchanged"""
    return validate_source(url).url
