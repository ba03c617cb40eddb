from __future__ import annotations

import logging
import re

from audio_service.infrastructure import RunLogReader, RunLogRecorder
from conftest import InMemoryArtifactStore
from mytube_common import StorageUnavailable

KEY_PATTERN = re.compile(r"^logs/\d{4}-\d{2}-\d{2}/prefetch_\d+_[0-9a-f]{8}\.json$")


def test_recorder_stores_records_emitted_during_the_job(
    storage: InMemoryArtifactStore, caplog
) -> None:
    caplog.set_level(logging.INFO)
    job_logger = logging.getLogger("tests.job")

    with RunLogRecorder(storage, "prefetch") as recorder:
        job_logger.info("Scanning channel")
        job_logger.error("Error processing channel")
    job_logger.info("after the job")

    assert recorder.key is not None
    assert KEY_PATTERN.match(recorder.key)

    date, filename = recorder.key.split("/")[1:]
    run_log = RunLogReader(storage).read(date, filename)
    messages = [entry.message for entry in run_log.logs]
    assert messages[:2] == ["Scanning channel", "Error processing channel"]
    assert "Finished execution" in messages
    assert "after the job" not in messages
    assert run_log.job_name == "prefetch"
    assert run_log.logs[1].level == "ERROR"


def test_save_failure_is_not_raised(caplog) -> None:
    class FailingStore(InMemoryArtifactStore):
        def put(self, key, data, content_type):
            raise StorageUnavailable(key, "put")

    with RunLogRecorder(FailingStore(), "cleanup") as recorder:
        logging.getLogger("tests.job").warning("working")

    assert recorder.key is None


def test_reader_lists_dates_and_files_newest_first(storage: InMemoryArtifactStore) -> None:
    storage.add("logs/2024-06-01/prefetch_1717200000000_aaaaaaaa.json", b"{}")
    storage.add("logs/2024-06-02/prefetch_1717286400000_bbbbbbbb.json", b"{}")
    storage.add("logs/2024-06-02/daily_cleanup_1717300000000_cccccccc.json", b"{}")

    reader = RunLogReader(storage)

    assert reader.list_dates() == ["2024-06-02", "2024-06-01"]
    files = reader.list_files("2024-06-02")
    assert [f.job_name for f in files] == ["daily_cleanup", "prefetch"]
    assert files[0].timestamp == 1717300000000
    assert files[0].size == 2
