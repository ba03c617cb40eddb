from __future__ import annotations

from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from minio.error import S3Error

from audio_service.infrastructure import MinioArtifactStore
from mytube_common import ObjectNotFound, StorageUnavailable

MODIFIED = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _s3_error(code: str) -> S3Error:
    return S3Error(
        code=code,
        message=code,
        resource="/mytube-audio/key",
        request_id="req",
        host_id="host",
        response=None,
    )


class FakeMinio:
    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.stat_error: Exception | None = None
        self.removed: list[str] = []
        self.remove_errors: list = []

    def stat_object(self, bucket_name, object_name):
        if self.stat_error is not None:
            raise self.stat_error
        if object_name not in self.objects:
            raise _s3_error("NoSuchKey")
        return SimpleNamespace(
            size=len(self.objects[object_name]),
            content_type="audio/mp4",
            last_modified=MODIFIED,
        )

    def get_object(self, bucket_name, object_name):
        if object_name not in self.objects:
            raise _s3_error("NoSuchKey")
        return SimpleNamespace(
            data=self.objects[object_name],
            close=lambda: None,
            release_conn=lambda: None,
        )

    def put_object(self, bucket_name, object_name, data, length, content_type):
        self.objects[object_name] = data.read(length)

    def list_objects(self, bucket_name, prefix, recursive):
        for key, data in sorted(self.objects.items()):
            if key.startswith(prefix):
                yield SimpleNamespace(
                    object_name=key, size=len(data), last_modified=MODIFIED, is_dir=False
                )

    def remove_objects(self, bucket_name, delete_object_list):
        for item in delete_object_list:
            self.removed.append(item._name if hasattr(item, "_name") else item.name)
        yield from self.remove_errors


@pytest.fixture
def client() -> FakeMinio:
    return FakeMinio()


@pytest.fixture
def store(client: FakeMinio) -> MinioArtifactStore:
    return MinioArtifactStore(client, "mytube-audio")


def test_put_then_stat_and_get(store: MinioArtifactStore) -> None:
    store.put("dQw4w9WgXcQ_v2.m4a", b"audio", "audio/mp4")

    stat = store.exists("dQw4w9WgXcQ_v2.m4a")

    assert stat.present and stat.byte_length == 5 and stat.is_usable
    assert stat.last_modified == MODIFIED
    assert store.get("dQw4w9WgXcQ_v2.m4a") == b"audio"


def test_missing_key_is_absent_not_an_error(store: MinioArtifactStore) -> None:
    assert store.exists("nope").present is False
    with pytest.raises(ObjectNotFound):
        store.get("nope")


def test_other_failures_are_storage_unavailable(
    client: FakeMinio, store: MinioArtifactStore
) -> None:
    client.stat_error = _s3_error("AccessDenied")
    with pytest.raises(StorageUnavailable):
        store.exists("key")

    client.stat_error = ConnectionError("refused")
    with pytest.raises(StorageUnavailable):
        store.exists("key")


def test_list_and_delete(client: FakeMinio, store: MinioArtifactStore) -> None:
    store.put("a_v2.m4a", b"1", "audio/mp4")
    store.put("logs/2024-06-01/x.json", b"{}", "application/json")

    assert [obj.key for obj in store.list_prefix("logs/")] == ["logs/2024-06-01/x.json"]
    assert store.delete_batch(["a_v2.m4a"]) == 1
    assert client.removed == ["a_v2.m4a"]
    assert store.delete_batch([]) == 0


def test_delete_errors_are_reported(client: FakeMinio, store: MinioArtifactStore) -> None:
    client.remove_errors = [SimpleNamespace(name="a_v2.m4a")]

    with pytest.raises(StorageUnavailable):
        store.delete_batch(["a_v2.m4a"])


def test_missing_bucket_is_reported_not_created(
    monkeypatch: pytest.MonkeyPatch, client: FakeMinio, store: MinioArtifactStore
) -> None:
    created = []
    client.make_bucket = lambda bucket_name: created.append(bucket_name)

    def no_bucket(**kwargs):
        raise _s3_error("NoSuchBucket")

    monkeypatch.setattr(client, "put_object", no_bucket)

    with pytest.raises(StorageUnavailable):
        store.put("dQw4w9WgXcQ_v2.m4a", b"audio", "audio/mp4")
    assert created == []
