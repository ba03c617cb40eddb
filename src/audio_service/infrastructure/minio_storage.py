"""MinIO implementation of the ArtifactStore interface."""

import io
import logging
from collections.abc import Iterable

from minio import Minio
from minio.deleteobjects import DeleteObject
from minio.error import S3Error
from mytube_common import ObjectNotFound, ObjectStat, StorageUnavailable, StoredObject
from mytube_common.infrastructure import ArtifactStore

logger = logging.getLogger(__name__)

_MISSING_CODES = frozenset({"NoSuchKey", "NoSuchObject", "NotFound", "ResourceNotFound"})


def _is_missing(error: S3Error) -> bool:
    return error.code in _MISSING_CODES


class MinioArtifactStore(ArtifactStore):
    """Handles artifact storage on any S3-compatible endpoint through MinIO."""

    def __init__(self, client: Minio, bucket_name: str):
        self._client = client
        self._bucket_name = bucket_name

    def exists(self, key: str) -> ObjectStat:
        try:
            stat = self._client.stat_object(
                bucket_name=self._bucket_name, object_name=key
            )
        except S3Error as e:
            if _is_missing(e):
                return ObjectStat(present=False)
            logger.exception("MinIO stat failed", extra={"object_name": key})
            raise StorageUnavailable(key, "stat", e) from e
        except Exception as e:
            logger.exception("MinIO stat failed", extra={"object_name": key})
            raise StorageUnavailable(key, "stat", e) from e

        return ObjectStat(
            present=True,
            byte_length=stat.size or 0,
            content_type=stat.content_type,
            last_modified=stat.last_modified,
        )

    def get(self, key: str) -> bytes:
        try:
            response = self._client.get_object(
                bucket_name=self._bucket_name, object_name=key
            )
            try:
                data = response.data
            finally:
                response.close()
                response.release_conn()
        except S3Error as e:
            if _is_missing(e):
                raise ObjectNotFound(key) from e
            logger.exception("MinIO download failed", extra={"object_name": key})
            raise StorageUnavailable(key, "get", e) from e
        except Exception as e:
            logger.exception("MinIO download failed", extra={"object_name": key})
            raise StorageUnavailable(key, "get", e) from e

        logger.info(
            "File downloaded from MinIO",
            extra={"bucket_name": self._bucket_name, "object_name": key},
        )
        return data

    def put(self, key: str, data: bytes, content_type: str) -> None:
        try:
            self._client.put_object(
                bucket_name=self._bucket_name,
                object_name=key,
                data=io.BytesIO(data),
                length=len(data),
                content_type=content_type,
            )
        except Exception as e:
            logger.exception("MinIO upload failed", extra={"object_name": key})
            raise StorageUnavailable(key, "put", e) from e

        logger.info(
            "File uploaded to MinIO",
            extra={
                "bucket_name": self._bucket_name,
                "object_name": key,
                "size": len(data),
            },
        )

    def list_prefix(self, prefix: str) -> list[StoredObject]:
        try:
            objects = [
                StoredObject(
                    key=obj.object_name,
                    byte_length=obj.size or 0,
                    last_modified=obj.last_modified,
                )
                for obj in self._client.list_objects(
                    bucket_name=self._bucket_name, prefix=prefix, recursive=True
                )
                if not obj.is_dir
            ]
        except Exception as e:
            logger.exception("MinIO listing failed", extra={"prefix": prefix})
            raise StorageUnavailable(prefix, "list", e) from e

        return objects

    def delete_batch(self, keys: Iterable[str]) -> int:
        keys = list(keys)
        if not keys:
            return 0
        try:
            # remove_objects is lazy: errors surface only while iterating.
            errors = list(
                self._client.remove_objects(
                    bucket_name=self._bucket_name,
                    delete_object_list=[DeleteObject(key) for key in keys],
                )
            )
        except Exception as e:
            logger.exception("MinIO batch delete failed", extra={"count": len(keys)})
            raise StorageUnavailable(keys[0], "delete", e) from e

        if errors:
            logger.error(
                "MinIO batch delete reported errors",
                extra={"failed": [error.name for error in errors]},
            )
            raise StorageUnavailable(errors[0].name, "delete")

        logger.info(
            "Objects deleted from MinIO",
            extra={"bucket_name": self._bucket_name, "count": len(keys)},
        )
        return len(keys)
