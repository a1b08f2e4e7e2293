import logging
import os
from typing import List, Optional

import httpx

from vidrelay.client.api import DownloadedFile, RelayClient, RelayRequestError
from vidrelay.client.history import DownloadHistory, DownloadRecord
from vidrelay.core.errors import RelayError
from vidrelay.core.platform import supported_platforms
from vidrelay.core.validation import validate_url
from vidrelay.i18n import i18n
from vidrelay.models.response import FormatOption, MediaMetadata

logger = logging.getLogger("vidrelay.client")


class DownloaderSession:
    """
    View state of one downloader page: the URL being worked on, the
    analyzed metadata, the chosen format and a short download history.
    Nothing here outlives the object.
    """

    def __init__(self, client: RelayClient, locale: Optional[str] = None):
        self.client = client
        self.locale = locale
        self.url = ""
        self.video_info: Optional[MediaMetadata] = None
        self.selected_format = ""
        self.error = ""
        self.is_loading = False
        self.is_downloading = False
        self.history = DownloadHistory()

    def _(self, key: str) -> str:
        return i18n.get(key, locale=self.locale)

    @staticmethod
    def supported_platforms() -> List[str]:
        return supported_platforms()

    async def analyze(self, url: Optional[str] = None) -> Optional[MediaMetadata]:
        """Validate locally, then ask the relay; errors land in self.error"""
        if url is not None:
            self.url = url

        if not self.url.strip():
            self.error = self._("client.empty_url")
            return None

        try:
            validate_url(self.url)
        except RelayError:
            self.error = self._("client.unsupported_url")
            return None

        self.is_loading = True
        self.error = ""
        self.video_info = None
        self.selected_format = ""

        try:
            self.video_info = await self.client.analyze(self.url)
            if self.video_info.formats:
                self.selected_format = self.video_info.formats[0].quality
        except RelayRequestError as e:
            self.error = e.message
        except httpx.HTTPError as e:
            logger.error(f"Analyze request failed: {e}")
            self.error = self._("client.analyze_failed")
        finally:
            self.is_loading = False

        return self.video_info

    def select_format(self, quality: str) -> FormatOption:
        option = self._find_format(quality)
        if option is None:
            raise ValueError(f"unknown format: {quality}")
        self.selected_format = quality
        return option

    def _find_format(self, quality: str) -> Optional[FormatOption]:
        if not self.video_info:
            return None
        for option in self.video_info.formats:
            if option.quality == quality:
                return option
        return None

    async def download(self, dest_dir: str) -> Optional[DownloadedFile]:
        """
        Download the selected format into dest_dir.
        History only grows when the relay delivered a non-empty file.
        """
        if not self.video_info or not self.selected_format:
            return None

        option = self._find_format(self.selected_format)
        format_id = option.format_id if option else self.selected_format

        self.is_downloading = True
        self.error = ""
        try:
            downloaded = await self.client.download(
                self.url, format_id, self.video_info.title, dest_dir
            )
        except RelayRequestError as e:
            self.error = e.message
            return None
        except httpx.HTTPError as e:
            logger.error(f"Download request failed: {e}")
            self.error = self._("client.download_failed")
            return None
        finally:
            self.is_downloading = False

        if downloaded.size == 0:
            os.remove(downloaded.path)
            self.error = self._("client.empty_download")
            return None

        self.history.push(DownloadRecord.create(
            title=self.video_info.title,
            platform=self.video_info.platform,
            format=self.selected_format,
        ))
        return downloaded
