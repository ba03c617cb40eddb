"""Abstract interface for the external extraction tool."""

from abc import ABC, abstractmethod
from pathlib import Path

from pydantic import BaseModel

from audio_service.domain.models import ExtractionStrategy


class ToolResult(BaseModel, frozen=True):
    """Outcome of a single tool invocation."""

    exit_code: int
    diagnostics: str = ""


class ExtractionTool(ABC):
    """Abstract base class for audio extraction backends."""

    @abstractmethod
    def run(
        self,
        video_id: str,
        strategy: ExtractionStrategy,
        output_path: Path,
        cookie_file: Path | None,
    ) -> ToolResult:
        """
        Downloads the audio of one video with one strategy.

        Writes the audio to ``output_path`` and the tool's info JSON next to
        it (same stem, ``.info.json`` suffix). Never raises for tool
        failures: they are reported through the exit code.

        Args:
            video_id: The video to extract.
            strategy: Credential use and client identity to present.
            output_path: Where the audio file must be written.
            cookie_file: Netscape cookie file, only passed for credentialed
                strategies.

        Returns:
            ToolResult with the exit code and captured diagnostics.
        """
