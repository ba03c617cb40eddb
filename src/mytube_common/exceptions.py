"""Storage exceptions shared by every service."""


class StorageUnavailable(Exception):
    """Raised when the object store cannot be reached or rejects a request."""

    def __init__(
        self, object_name: str, operation: str, cause: Exception | None = None
    ):
        self.object_name = object_name
        self.operation = operation
        self.cause = cause
        super().__init__(f"Storage {operation} failed for '{object_name}'")


class ObjectNotFound(Exception):
    """Raised when a requested object does not exist."""

    def __init__(self, object_name: str):
        self.object_name = object_name
        super().__init__(f"Object '{object_name}' not found")
