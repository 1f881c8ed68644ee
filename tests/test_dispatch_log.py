from datetime import timezone

import pytest

from trigger_proxy.infrastructure.dispatch_log import (
    FAILED,
    TRIGGERED,
    DispatchLog,
    DispatchRecord,
)


class TestDispatchLogRecord:
    def test_record_should_store_outcome(self) -> None:
        log = DispatchLog()

        log.record(DispatchRecord(job="buildA", outcome=TRIGGERED, status_code=201))

        records = log.get_recent()
        assert len(records) == 1
        assert records[0].job == "buildA"
        assert records[0].status_code == 201

    def test_record_should_auto_set_utc_timestamp(self) -> None:
        log = DispatchLog()

        log.record(DispatchRecord(job="buildA", outcome=FAILED))

        assert log.get_recent()[0].timestamp.tzinfo == timezone.utc


class TestDispatchLogGetRecent:
    def test_get_recent_should_return_newest_first(self) -> None:
        log = DispatchLog()
        for job in ("first", "second", "third"):
            log.record(DispatchRecord(job=job, outcome=TRIGGERED))

        assert [r.job for r in log.get_recent()] == ["third", "second", "first"]

    def test_get_recent_should_respect_limit(self) -> None:
        log = DispatchLog()
        for i in range(10):
            log.record(DispatchRecord(job=f"job{i}", outcome=TRIGGERED))

        records = log.get_recent(limit=3)

        assert len(records) == 3
        assert records[0].job == "job9"

    def test_ring_buffer_should_evict_oldest_when_full(self) -> None:
        log = DispatchLog(maxlen=3)
        for i in range(5):
            log.record(DispatchRecord(job=f"job{i}", outcome=TRIGGERED))

        jobs = [r.job for r in log.get_recent(limit=10)]

        assert jobs == ["job4", "job3", "job2"]


def test_dispatch_record_should_be_frozen() -> None:
    record = DispatchRecord(job="buildA", outcome=TRIGGERED)
    with pytest.raises(AttributeError):
        record.job = "other"  # type: ignore[misc]
