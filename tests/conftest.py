from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from audio_service.config import ExtractionConfig
from audio_service.infrastructure import CredentialProvider
from audio_service.infrastructure.interfaces import ExtractionTool, ToolResult
from mytube_common import ObjectNotFound, ObjectStat, StorageUnavailable, StoredObject
from mytube_common.infrastructure import ArtifactStore


class InMemoryArtifactStore(ArtifactStore):
    """Dict-backed store; keys listed in ``failing`` raise StorageUnavailable."""

    def __init__(self) -> None:
        self.objects: dict[str, tuple[bytes, str, datetime]] = {}
        self.failing: set[str] = set()
        self.calls: list[tuple[str, str]] = []
        self.deleted_batches: list[list[str]] = []

    def add(
        self,
        key: str,
        data: bytes,
        content_type: str = "application/octet-stream",
        last_modified: datetime | None = None,
    ) -> None:
        self.objects[key] = (
            data,
            content_type,
            last_modified or datetime.now(timezone.utc),
        )

    def _check(self, operation: str, key: str) -> None:
        self.calls.append((operation, key))
        if key in self.failing:
            raise StorageUnavailable(key, operation)

    def exists(self, key: str) -> ObjectStat:
        self._check("stat", key)
        if key not in self.objects:
            return ObjectStat(present=False)
        data, content_type, last_modified = self.objects[key]
        return ObjectStat(
            present=True,
            byte_length=len(data),
            content_type=content_type,
            last_modified=last_modified,
        )

    def get(self, key: str) -> bytes:
        self._check("get", key)
        if key not in self.objects:
            raise ObjectNotFound(key)
        return self.objects[key][0]

    def put(self, key: str, data: bytes, content_type: str) -> None:
        self._check("put", key)
        self.add(key, data, content_type)

    def list_prefix(self, prefix: str) -> list[StoredObject]:
        self._check("list", prefix)
        return [
            StoredObject(key=key, byte_length=len(data), last_modified=modified)
            for key, (data, _, modified) in sorted(self.objects.items())
            if key.startswith(prefix)
        ]

    def delete_batch(self, keys) -> int:
        keys = list(keys)
        self.deleted_batches.append(keys)
        for key in keys:
            self._check("delete", key)
            self.objects.pop(key, None)
        return len(keys)


class FakeExtractionTool(ExtractionTool):
    """
    Replays scripted outcomes, one per call.

    ``bytes`` outcomes write that audio (and an info JSON) and exit 0; a
    ToolResult outcome is returned as is. Calls past the script fail.
    """

    def __init__(self, outcomes: list[bytes | ToolResult] | None = None) -> None:
        self.outcomes = list(outcomes or [])
        self.calls: list[tuple[str, str, Path | None]] = []

    def run(self, video_id, strategy, output_path, cookie_file) -> ToolResult:
        self.calls.append((video_id, strategy.label, cookie_file))
        if not self.outcomes:
            return ToolResult(exit_code=1, diagnostics="ERROR: no scripted outcome")
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, ToolResult):
            return outcome
        output_path.write_bytes(outcome)
        output_path.with_suffix(".info.json").write_text(
            json.dumps({"id": video_id, "title": f"Title of {video_id}", "ext": "m4a"})
        )
        return ToolResult(exit_code=0)


COOKIE_EXPORT = [
    {
        "domain": ".youtube.com",
        "path": "/",
        "secure": True,
        "expirationDate": 4102444800.5,
        "name": "__Secure-1PSID",
        "value": "secret-value",
    },
    {
        "domain": "www.youtube.com",
        "path": "/",
        "secure": False,
        "name": "PREF",
        "value": "f6=40000000&hl=en",
    },
]


@pytest.fixture
def storage() -> InMemoryArtifactStore:
    return InMemoryArtifactStore()


@pytest.fixture
def stored_cookies(storage: InMemoryArtifactStore) -> InMemoryArtifactStore:
    storage.add("system/_cookies.json", json.dumps(COOKIE_EXPORT).encode())
    return storage


@pytest.fixture
def extraction_config(tmp_path: Path) -> ExtractionConfig:
    return ExtractionConfig(scratch_dir=tmp_path / "scratch", max_attempts=6)


@pytest.fixture
def credential_provider(storage: InMemoryArtifactStore) -> CredentialProvider:
    return CredentialProvider(storage)
