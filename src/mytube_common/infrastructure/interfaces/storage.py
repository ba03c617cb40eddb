"""Abstract interface for artifact storage operations."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from mytube_common.models import ObjectStat, StoredObject


class ArtifactStore(ABC):
    """Abstract base class for object storage backends bound to one bucket."""

    @abstractmethod
    def exists(self, key: str) -> ObjectStat:
        """
        Checks whether an object exists.

        Args:
            key: The object key.

        Returns:
            ObjectStat with ``present=False`` when the key is missing.

        Raises:
            StorageUnavailable: If the store cannot be reached.
        """

    @abstractmethod
    def get(self, key: str) -> bytes:
        """
        Downloads an object.

        Args:
            key: The object key.

        Returns:
            The object contents as bytes.

        Raises:
            ObjectNotFound: If the key does not exist.
            StorageUnavailable: If the download fails.
        """

    @abstractmethod
    def put(self, key: str, data: bytes, content_type: str) -> None:
        """
        Uploads an object, overwriting any existing one.

        Args:
            key: The destination key.
            data: Object contents.
            content_type: MIME type of the object.

        Raises:
            StorageUnavailable: If the upload fails.
        """

    @abstractmethod
    def list_prefix(self, prefix: str) -> list[StoredObject]:
        """
        Lists every object whose key starts with ``prefix``.

        Raises:
            StorageUnavailable: If the listing fails.
        """

    @abstractmethod
    def delete_batch(self, keys: Iterable[str]) -> int:
        """
        Deletes a batch of objects.

        Returns:
            The number of keys submitted for deletion.

        Raises:
            StorageUnavailable: If any deletion fails.
        """
