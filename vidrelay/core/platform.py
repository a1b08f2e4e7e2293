from enum import Enum
from typing import Optional, Tuple


class Platform(str, Enum):
    YOUTUBE = "YouTube"
    INSTAGRAM = "Instagram"
    FACEBOOK = "Facebook"
    LINKEDIN = "LinkedIn"
    TIKTOK = "TikTok"
    TWITTER = "Twitter/X"
    UNKNOWN = "Unknown"


# Checked in order, first hit wins
PLATFORM_DOMAINS: Tuple[Tuple[Platform, Tuple[str, ...]], ...] = (
    (Platform.YOUTUBE, ("youtube.com", "youtu.be")),
    (Platform.INSTAGRAM, ("instagram.com",)),
    (Platform.FACEBOOK, ("facebook.com", "fb.com")),
    (Platform.LINKEDIN, ("linkedin.com",)),
    (Platform.TIKTOK, ("tiktok.com",)),
    (Platform.TWITTER, ("twitter.com", "x.com")),
)


def match_platform(url: str) -> Optional[Platform]:
    """Classify a URL by plain substring containment. None when unmatched."""
    lowered = url.lower()
    for platform, domains in PLATFORM_DOMAINS:
        if any(domain in lowered for domain in domains):
            return platform
    return None


def detect_platform(url: str) -> str:
    """Display label for a URL"""
    return (match_platform(url) or Platform.UNKNOWN).value


def supported_platforms() -> list:
    return [platform.value for platform, _ in PLATFORM_DOMAINS]
