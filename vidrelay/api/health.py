from fastapi import APIRouter

from vidrelay.config.settings import config
from vidrelay.core.platform import supported_platforms
from vidrelay.core.state import state
from vidrelay.i18n import i18n

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint"""
    return {
        "status": i18n.get("response.status_running"),
        "service": config.api.title,
        "version": config.api.version,
        "ytdlp_version": state.ytdlp_version,
        "platforms": supported_platforms(),
    }


@router.get("/health")
async def health_check():
    """Lightweight health check"""
    return {
        "status": "ok",
        "ytdlp_version": state.ytdlp_version,
    }
