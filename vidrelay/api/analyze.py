from fastapi import APIRouter, Depends, Request

from vidrelay.core.logging import log_info
from vidrelay.core.validation import validate_url
from vidrelay.api.deps import get_tool
from vidrelay.models.request import AnalyzeRequest
from vidrelay.models.response import AnalyzeResponse, ErrorResponse
from vidrelay.services.info import VideoInfoService
from vidrelay.services.ytdlp import ExternalTool
from vidrelay.utils.locale import safe_url_for_log
from vidrelay.i18n import i18n

router = APIRouter()


@router.post(
    "/api/analyze",
    response_model=AnalyzeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze(
    request: Request,
    analyze_request: AnalyzeRequest,
    tool: ExternalTool = Depends(get_tool)
):
    """Fetch metadata and selectable formats for a URL"""
    url = validate_url(analyze_request.require_url())

    log_info(request, i18n.get("log.analyzing", url=safe_url_for_log(url)))
    video_info = await VideoInfoService.fetch(url, tool)
    log_info(request, i18n.get("log.analyzed", title=video_info.title, count=len(video_info.formats)))

    return AnalyzeResponse(videoInfo=video_info)
