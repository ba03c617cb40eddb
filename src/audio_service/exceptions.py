"""Custom exceptions for the audio service."""


class AuthError(Exception):
    """Raised when a request carries a missing or wrong shared secret."""

    def __init__(self):
        super().__init__("Unauthorized")


class InvalidVideoId(Exception):
    """Raised when a video identifier is missing or malformed."""

    def __init__(self, video_id: str | None):
        self.video_id = video_id
        if video_id:
            super().__init__(f"Invalid videoId '{video_id}'")
        else:
            super().__init__("Missing videoId parameter")


class CredentialFormatError(Exception):
    """Raised when the stored cookie export cannot be parsed."""

    def __init__(self, object_name: str, cause: Exception | None = None):
        self.object_name = object_name
        self.cause = cause
        super().__init__(f"Cookie export '{object_name}' is malformed")


class StrategyFailed(Exception):
    """Raised when a single extraction strategy does not produce audio."""

    def __init__(self, video_id: str, strategy: str, diagnostics: str):
        self.video_id = video_id
        self.strategy = strategy
        self.diagnostics = diagnostics
        super().__init__(f"Strategy {strategy} failed for '{video_id}'")


class UpstreamForbidden(StrategyFailed):
    """Raised when the upstream answered 403 to a single strategy."""


class ExtractionExhausted(Exception):
    """Raised when every strategy of a plan failed."""

    def __init__(self, video_id: str, attempts: int, diagnostics: str):
        self.video_id = video_id
        self.attempts = attempts
        self.diagnostics = diagnostics
        super().__init__(
            f"Extraction failed for '{video_id}' after {attempts} attempts: "
            f"{diagnostics or 'no diagnostics'}"
        )


class PartialUploadFailure(Exception):
    """Raised when metadata upload failed after the audio was stored."""

    def __init__(self, video_id: str, cause: Exception | None = None):
        self.video_id = video_id
        self.cause = cause
        super().__init__(f"Metadata upload failed for '{video_id}'")


class FeedUnavailable(Exception):
    """Raised when a channel feed cannot be fetched or parsed."""

    def __init__(self, channel_id: str, cause: Exception | None = None):
        self.channel_id = channel_id
        self.cause = cause
        super().__init__(f"Feed for channel '{channel_id}' is unavailable")
