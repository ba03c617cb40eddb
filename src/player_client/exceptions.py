"""Custom exceptions for the player client."""


class BindFailed(Exception):
    """Raised when the relay cannot listen on its loopback port."""

    def __init__(self, host: str, port: int, cause: Exception | None = None):
        self.host = host
        self.port = port
        self.cause = cause
        super().__init__(f"Failed to bind relay to {host}:{port}")


class RelayUpstreamError(Exception):
    """Raised when the remote origin fails or answers with an error status."""

    def __init__(self, status_code: int, cause: Exception | None = None):
        self.status_code = status_code
        self.cause = cause
        super().__init__(f"Upstream error: {status_code}")
