from functools import lru_cache

from vidrelay.services.ytdlp import ExternalTool, YtDlpTool


@lru_cache(maxsize=1)
def get_tool() -> ExternalTool:
    """Extraction tool used by the handlers; overridden in tests"""
    return YtDlpTool()
