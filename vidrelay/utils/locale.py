from typing import Optional
from urllib.parse import urlsplit

from vidrelay.config.settings import config


def get_locale(accept_language: Optional[str] = None) -> str:
    """Pick the first supported locale from an Accept-Language header"""
    if not accept_language:
        return config.i18n.default_locale

    for lang in accept_language.split(","):
        locale = lang.strip().split(";")[0].split("-")[0].lower()
        if locale in config.i18n.supported_locales:
            return locale

    return config.i18n.default_locale


def safe_url_for_log(url: str) -> str:
    """URL without credentials or query string, fit for logs"""
    try:
        parsed = urlsplit(url)
        host = parsed.hostname or ""
        if parsed.port:
            host = f"{host}:{parsed.port}"
    except ValueError:
        return "invalid_url"

    base_url = f"{parsed.scheme}://{host}{parsed.path}"
    if config.logging.level == "DEBUG" and parsed.query:
        return f"{base_url}?..."
    return base_url
