"""Unit tests for the metrics store."""

from __future__ import annotations

import threading

import pytest

from core.types import AggregatedSnapshot, FetchFailure, FetchSuccess
from store.metrics_store import MetricsStore


def _snapshot(count: int) -> AggregatedSnapshot:
    return AggregatedSnapshot(
        totals_by_band_mode={("20M", "FT8"): count},
        confirmed_by_band_mode={("20M", "FT8"): count},
        record_count=count,
    )


def test_store_starts_empty_and_unsuccessful() -> None:
    """A new store should expose an empty snapshot and no success yet."""
    view = MetricsStore().read()

    assert view.snapshot == AggregatedSnapshot()
    assert view.status.success is False
    assert view.status.last_success_timestamp is None


def test_publish_replaces_snapshot_and_status() -> None:
    """Publish should swap in the new snapshot and success status."""
    store = MetricsStore()
    snapshot = _snapshot(3)

    store.publish(snapshot, duration_seconds=1.5, published_at=100.0)

    view = store.read()
    assert view.snapshot is snapshot
    assert view.status.success is True
    assert view.status.duration_seconds == 1.5
    assert view.status.last_success_timestamp == 100.0


def test_record_failure_keeps_snapshot_and_last_success() -> None:
    """Failures should keep stale data while exposing the failure."""
    store = MetricsStore()
    snapshot = _snapshot(3)
    store.publish(snapshot, duration_seconds=1.0, published_at=100.0)

    store.record_failure("fetch", duration_seconds=0.2)

    view = store.read()
    assert view.snapshot is snapshot
    assert view.status.success is False
    assert view.status.duration_seconds == 0.2
    assert view.status.last_success_timestamp == 100.0
    assert view.status.last_error_kind == "fetch"


def test_record_outcome_dispatches_by_type() -> None:
    """Outcomes should map onto publish and failure updates."""
    store = MetricsStore()
    snapshot = _snapshot(1)

    store.record_outcome(FetchSuccess(snapshot=snapshot, duration_seconds=1.0, completed_at=5.0))
    store.record_outcome(FetchFailure(error_kind="stream_too_large", duration_seconds=2.0))

    view = store.read()
    assert view.snapshot is snapshot
    assert view.status.last_error_kind == "stream_too_large"


def test_record_outcome_rejects_unknown_types() -> None:
    """Unknown outcome objects should be rejected."""
    with pytest.raises(TypeError):
        MetricsStore().record_outcome(object())  # type: ignore[arg-type]


def test_concurrent_reads_never_see_torn_views() -> None:
    """Readers should always see a snapshot and status from the same publish."""
    store = MetricsStore()
    stop = threading.Event()
    torn_reads: list[tuple[int, float | None]] = []

    def writer() -> None:
        for count in range(1, 500):
            store.publish(_snapshot(count), duration_seconds=0.0, published_at=float(count))
        stop.set()

    def reader() -> None:
        while not stop.is_set():
            view = store.read()
            count = view.snapshot.record_count
            if count and view.status.last_success_timestamp != float(count):
                torn_reads.append((count, view.status.last_success_timestamp))

    readers = [threading.Thread(target=reader) for _ in range(4)]
    for thread in readers:
        thread.start()
    writer()
    for thread in readers:
        thread.join(timeout=5.0)

    assert torn_reads == []
