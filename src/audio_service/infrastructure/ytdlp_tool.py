"""yt-dlp command line implementation of the ExtractionTool interface."""

import logging
import subprocess
from pathlib import Path

from audio_service.config import ExtractionConfig
from audio_service.domain.models import ExtractionStrategy

from .interfaces import ExtractionTool, ToolResult

logger = logging.getLogger(__name__)

# Prefer an AAC/m4a stream; anything else is converted to m4a after download.
AUDIO_FORMAT_SELECTOR = "bestaudio[ext=m4a]/bestaudio[acodec^=mp4a]/bestaudio"
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"
REFERER = "https://www.youtube.com/"

EXIT_TIMEOUT = 124
EXIT_NOT_FOUND = 127


class YtDlpTool(ExtractionTool):
    """Runs the yt-dlp binary as a subprocess, one invocation per strategy."""

    def __init__(self, config: ExtractionConfig):
        self._config = config

    @staticmethod
    def output_template(output_path: Path) -> str:
        """Lets yt-dlp pick the download extension; conversion lands on ``output_path``."""
        return str(output_path.with_name(f"{output_path.stem}.%(ext)s"))

    def build_argv(
        self,
        video_id: str,
        strategy: ExtractionStrategy,
        output_path: Path,
        cookie_file: Path | None,
    ) -> list[str]:
        """Returns the argv list for ``subprocess.run(shell=False)``."""
        argv = [
            self._config.binary,
            WATCH_URL.format(video_id=video_id),
            "-f",
            AUDIO_FORMAT_SELECTOR,
            "-x",
            "--audio-format",
            "m4a",
            "-o",
            self.output_template(output_path),
            "--write-info-json",
            "--force-overwrites",
            "--no-playlist",
            "--no-part",
            "--no-progress",
            "--no-warnings",
            "--referer",
            REFERER,
            "--extractor-args",
            f"youtube:player_client={strategy.client.value}",
        ]
        if strategy.use_credentials and cookie_file is not None:
            argv.extend(["--cookies", str(cookie_file)])
        if self._config.proxy_url:
            argv.extend(["--proxy", self._config.proxy_url])
        return argv

    def run(
        self,
        video_id: str,
        strategy: ExtractionStrategy,
        output_path: Path,
        cookie_file: Path | None,
    ) -> ToolResult:
        argv = self.build_argv(video_id, strategy, output_path, cookie_file)
        logger.info(
            "Running yt-dlp",
            extra={"video_id": video_id, "strategy": strategy.label},
        )
        try:
            completed = subprocess.run(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.PIPE,
                text=True,
                timeout=self._config.timeout_seconds,
                check=False,
            )
        except FileNotFoundError as e:
            logger.error(
                "yt-dlp binary not found", extra={"binary": self._config.binary}
            )
            return ToolResult(exit_code=EXIT_NOT_FOUND, diagnostics=str(e))
        except subprocess.TimeoutExpired as e:
            stderr = e.stderr or ""
            if isinstance(stderr, bytes):
                stderr = stderr.decode("utf-8", errors="replace")
            return ToolResult(
                exit_code=EXIT_TIMEOUT,
                diagnostics=f"timed out after {self._config.timeout_seconds}s\n{stderr}".strip(),
            )

        return ToolResult(
            exit_code=completed.returncode,
            diagnostics=(completed.stderr or "").strip(),
        )
