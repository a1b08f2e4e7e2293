"""Platform matching and URL validation (pure, no app needed)."""

import pytest

from vidrelay.core.errors import InvalidUrl, UnsupportedPlatform
from vidrelay.core.platform import Platform, detect_platform, match_platform, supported_platforms
from vidrelay.core.validation import validate_source, validate_url


class TestMatchPlatform:
    @pytest.mark.parametrize("url, expected", [
        ("https://www.youtube.com/watch?v=abc123", Platform.YOUTUBE),
        ("https://youtu.be/xyz", Platform.YOUTUBE),
        ("https://www.youtube.com/shorts/abc", Platform.YOUTUBE),
        ("https://www.instagram.com/reel/C1/", Platform.INSTAGRAM),
        ("https://www.facebook.com/watch/?v=1", Platform.FACEBOOK),
        ("https://fb.com/video/1", Platform.FACEBOOK),
        ("https://www.linkedin.com/posts/someone", Platform.LINKEDIN),
        ("https://www.tiktok.com/@user/video/1", Platform.TIKTOK),
        ("https://twitter.com/user/status/1", Platform.TWITTER),
        ("https://x.com/user/status/1", Platform.TWITTER),
    ])
    def test_known_domains(self, url, expected):
        assert match_platform(url) == expected

    def test_case_insensitive(self):
        assert match_platform("HTTPS://WWW.YOUTUBE.COM/watch?v=1") == Platform.YOUTUBE

    def test_unmatched(self):
        assert match_platform("https://vimeo.com/123") is None
        assert match_platform("") is None

    def test_first_match_wins(self):
        # Instagram is checked before Twitter/X
        assert match_platform("https://instagram.com/p/1?ref=x.com") == Platform.INSTAGRAM

    def test_detect_platform_labels(self):
        assert detect_platform("https://x.com/a/status/1") == "Twitter/X"
        assert detect_platform("https://example.com") == "Unknown"

    def test_supported_platforms_order(self):
        assert supported_platforms() == [
            "YouTube", "Instagram", "Facebook", "LinkedIn", "TikTok", "Twitter/X",
        ]


class TestValidateUrl:
    @pytest.mark.parametrize("url", ["", "   ", "not a url", "www.youtube.com/watch?v=1", "https://"])
    def test_rejects_malformed(self, url):
        with pytest.raises(InvalidUrl):
            validate_url(url)

    @pytest.mark.parametrize("url", [" https://youtu.be/x", "https://youtu.be/x\n", "\thttps://youtu.be/x"])
    def test_rejects_surrounding_whitespace(self, url):
        with pytest.raises(InvalidUrl):
            validate_url(url)

    def test_rejects_unsupported_domain(self):
        with pytest.raises(UnsupportedPlatform):
            validate_url("https://example.com")

    def test_accepts_supported_url_unchanged(self):
        url = "https://www.youtube.com/watch?v=abc123"
        assert validate_url(url) == url

    def test_validate_source_carries_platform(self):
        source = validate_source("https://www.tiktok.com/@user/video/1")
        assert source.platform == Platform.TIKTOK
        assert source.url == "https://www.tiktok.com/@user/video/1"

    def test_non_string_is_invalid(self):
        with pytest.raises(InvalidUrl):
            validate_url(None)
