"""Shared configuration models for infrastructure components."""

from pydantic import BaseModel


class StorageConfig(BaseModel, frozen=True):
    """S3-compatible object store connection configuration."""

    endpoint: str
    access_key: str
    secret_key: str
    bucket_name: str = "mytube-audio"
    region: str = "auto"
    secure: bool = True
    public_domain: str = "https://r2.mytube.app"

    def public_url(self, key: str) -> str:
        """Returns the public URL an object is served from."""
        return f"{self.public_domain.rstrip('/')}/{key}"
