import logging
import os
from contextlib import suppress
from typing import AsyncIterator, Optional

import aiofiles

from vidrelay.config.settings import config
from vidrelay.core.errors import StreamingFailed
from vidrelay.models.internal import FetchedMedia
from vidrelay.utils.filename import content_disposition

logger = logging.getLogger("vidrelay.stream")


class StreamService:
    """Streams a finished download and releases it afterwards"""

    @staticmethod
    def headers(media: FetchedMedia) -> dict:
        return {
            'Content-Disposition': content_disposition(media.filename),
            'Content-Length': str(media.size),
            'X-Content-Type-Options': 'nosniff',
            'Cache-Control': 'no-cache',
        }

    @staticmethod
    def ensure_readable(media: FetchedMedia) -> None:
        """Fail before any byte is sent if the file is gone"""
        if not os.path.isfile(media.file_path) or not os.access(media.file_path, os.R_OK):
            StreamService.release(media.file_path)
            raise StreamingFailed(f"{media.file_path} is not readable")

    @staticmethod
    async def iter_file(path: str, chunk_size: Optional[int] = None) -> AsyncIterator[bytes]:
        """
        Yield the file in chunks. The file is deleted when iteration
        ends, fails or is abandoned by a disconnected client.
        """
        chunk_size = chunk_size or config.download.chunk_size
        try:
            async with aiofiles.open(path, 'rb') as f:
                while True:
                    chunk = await f.read(chunk_size)
                    if not chunk:
                        break
                    yield chunk
        except OSError as e:
            logger.error(f"Streaming error for {path}: {e}")
            raise StreamingFailed(str(e))
        finally:
            StreamService.release(path)

    @staticmethod
    def release(path: str) -> None:
        with suppress(FileNotFoundError):
            os.remove(path)
            logger.debug(f"Cleaned up {path}")
