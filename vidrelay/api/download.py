from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from vidrelay.core.logging import log_info
from vidrelay.core.validation import validate_url
from vidrelay.api.deps import get_tool
from vidrelay.models.request import DownloadRequest
from vidrelay.models.response import ErrorResponse
from vidrelay.services.download import DownloadService
from vidrelay.services.stream import StreamService
from vidrelay.services.ytdlp import ExternalTool
from vidrelay.utils.locale import safe_url_for_log
from vidrelay.i18n import i18n

router = APIRouter()


@router.post(
    "/api/download",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def download(
    request: Request,
    download_request: DownloadRequest,
    tool: ExternalTool = Depends(get_tool)
):
    """Download one format and stream the file back as an attachment"""
    url, format_id, title = download_request.require_fields()
    validate_url(url)

    log_info(request, i18n.get("log.downloading", url=safe_url_for_log(url), format=format_id))
    media = await DownloadService.fetch(url, format_id, title, tool)
    StreamService.ensure_readable(media)

    log_info(request, i18n.get("log.streaming", filename=media.filename, size_mb=media.size / 1024 / 1024))

    return StreamingResponse(
        StreamService.iter_file(media.file_path),
        media_type=media.media_type,
        headers=StreamService.headers(media),
        # Covers responses whose body iterator never starts
        background=BackgroundTask(StreamService.release, media.file_path),
    )
