import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, NamedTuple, Optional

from vidrelay.config.settings import config
from vidrelay.core.errors import DownloadFailed, ExtractionFailed

logger = logging.getLogger("vidrelay.ytdlp")

STDERR_TAIL_CHARS = 500


class CompletedProcess(NamedTuple):
    """Subprocess result"""
    returncode: int
    stdout: bytes
    stderr: bytes

    def stderr_tail(self) -> str:
        return self.stderr.decode(errors="ignore").strip()[-STDERR_TAIL_CHARS:]


class SubprocessExecutor:
    """Execute subprocess with consistent error handling"""

    @staticmethod
    async def run(
        cmd: List[str],
        timeout: Optional[float],
        capture_stderr: bool = True
    ) -> CompletedProcess:
        """
        Run subprocess with timeout and proper cleanup.
        Prevents process leaks and ensures consistent error handling.
        """
        process = await asyncio.create_subprocess_exec(
            *cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE if capture_stderr else asyncio.subprocess.DEVNULL,
            stdin=asyncio.subprocess.DEVNULL
        )

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(),
                timeout=timeout
            )

            return CompletedProcess(
                returncode=process.returncode,
                stdout=stdout,
                stderr=stderr if capture_stderr else b""
            )

        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise
        except BaseException:
            # Includes cancellation of the awaiting request
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise


class YTDLPCommandBuilder:
    """Build yt-dlp commands"""

    @staticmethod
    def build_info_command(url: str) -> List[str]:
        """Build command for dumping metadata as JSON"""
        return [
            config.ytdlp.binary,
            '--dump-json',
            '--no-playlist',
            '--socket-timeout', str(config.ytdlp.socket_timeout),
            url,
        ]

    @staticmethod
    def build_fetch_command(
        url: str,
        format_id: str,
        output_template: str,
        audio_only: bool
    ) -> List[str]:
        """Build command for saving one format to output_template"""
        cmd = [
            config.ytdlp.binary,
            url,
            '-f', format_id,
            '-o', output_template,
            '--no-playlist',
            '--no-progress',
            '--quiet',
            '--socket-timeout', str(config.ytdlp.socket_timeout),
        ]

        if audio_only:
            cmd.extend(['--extract-audio', '--audio-format', config.ytdlp.audio_format])
        else:
            cmd.extend([
                '--merge-output-format', config.ytdlp.merge_format,
                '--remux-video', config.ytdlp.merge_format,
            ])

        return cmd

    @staticmethod
    def build_version_command() -> List[str]:
        return [config.ytdlp.binary, '--version']


class ExternalTool(ABC):
    """The extraction tool, as seen by the relay"""

    @abstractmethod
    async def dump_metadata(self, url: str) -> Dict[str, Any]:
        """Return the tool's metadata document for url or raise ExtractionFailed"""

    @abstractmethod
    async def fetch_file(
        self,
        url: str,
        format_id: str,
        output_template: str,
        audio_only: bool
    ) -> None:
        """Save the requested format under output_template or raise DownloadFailed"""

    async def version(self) -> str:
        return "unknown"


class YtDlpTool(ExternalTool):
    """ExternalTool backed by the yt-dlp executable"""

    def __init__(
        self,
        metadata_timeout: Optional[float] = None,
        fetch_timeout: Optional[float] = None
    ):
        self.metadata_timeout = metadata_timeout or config.download.metadata_timeout_seconds
        self.fetch_timeout = fetch_timeout or config.download.fetch_timeout_seconds

    async def dump_metadata(self, url: str) -> Dict[str, Any]:
        cmd = YTDLPCommandBuilder.build_info_command(url)

        try:
            result = await SubprocessExecutor.run(cmd, timeout=self.metadata_timeout)
        except asyncio.TimeoutError:
            raise ExtractionFailed(f"metadata dump timed out after {self.metadata_timeout}s")
        except OSError as e:
            raise ExtractionFailed(f"could not start {cmd[0]}: {e}")

        if result.returncode != 0:
            raise ExtractionFailed(f"{cmd[0]} exited {result.returncode}: {result.stderr_tail()}")

        try:
            info = json.loads(result.stdout.decode(errors="ignore"))
        except json.JSONDecodeError as e:
            raise ExtractionFailed(f"unparseable metadata: {e}")

        if not isinstance(info, dict):
            raise ExtractionFailed(f"unexpected metadata type: {type(info).__name__}")

        return info

    async def fetch_file(
        self,
        url: str,
        format_id: str,
        output_template: str,
        audio_only: bool
    ) -> None:
        cmd = YTDLPCommandBuilder.build_fetch_command(url, format_id, output_template, audio_only)

        try:
            result = await SubprocessExecutor.run(cmd, timeout=self.fetch_timeout)
        except asyncio.TimeoutError:
            raise DownloadFailed(f"download timed out after {self.fetch_timeout}s")
        except OSError as e:
            raise DownloadFailed(f"could not start {cmd[0]}: {e}")

        if result.returncode != 0:
            raise DownloadFailed(f"{cmd[0]} exited {result.returncode}: {result.stderr_tail()}")

    async def version(self) -> str:
        try:
            result = await SubprocessExecutor.run(
                YTDLPCommandBuilder.build_version_command(),
                timeout=10.0
            )
        except (asyncio.TimeoutError, OSError) as e:
            logger.warning(f"yt-dlp version check failed: {e}")
            return "unknown"

        if result.returncode != 0:
            return "unknown"
        return result.stdout.decode(errors="ignore").strip() or "unknown"
