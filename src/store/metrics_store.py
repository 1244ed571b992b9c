"""Thread-safe holder of the published aggregation snapshot.

This module owns the only shared mutable state in the exporter. Writers
replace the snapshot and status wholesale under a lock; readers receive
one consistent ``MetricsView`` and never see a mix of two cycles.
"""

from __future__ import annotations

import threading

from core.types import (
    AggregatedSnapshot,
    FetchFailure,
    FetchOutcome,
    FetchStatus,
    FetchSuccess,
    MetricsView,
)


class MetricsStore:
    """Single-owner store with swap-on-publish semantics.

    Starts with an empty snapshot and a not-yet-successful status. A failed
    cycle keeps the last published snapshot and only updates the status.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._view = MetricsView(snapshot=AggregatedSnapshot(), status=FetchStatus())

    def publish(
        self,
        snapshot: AggregatedSnapshot,
        duration_seconds: float,
        published_at: float,
    ) -> None:
        """Swap in a fully built snapshot and mark the cycle successful.

        Args:
            snapshot: Snapshot from one complete parse pass.
            duration_seconds: Cycle duration.
            published_at: Epoch seconds of the publish.
        """
        status = FetchStatus(
            success=True,
            duration_seconds=duration_seconds,
            last_success_timestamp=published_at,
            last_error_kind=None,
        )
        with self._lock:
            self._view = MetricsView(snapshot=snapshot, status=status)

    def record_failure(self, error_kind: str, duration_seconds: float) -> None:
        """Mark the cycle failed while keeping the previous snapshot."""
        with self._lock:
            previous = self._view
            status = FetchStatus(
                success=False,
                duration_seconds=duration_seconds,
                last_success_timestamp=previous.status.last_success_timestamp,
                last_error_kind=error_kind,
            )
            self._view = MetricsView(snapshot=previous.snapshot, status=status)

    def record_outcome(self, outcome: FetchOutcome) -> None:
        """Apply a cycle outcome to the store."""
        if isinstance(outcome, FetchSuccess):
            self.publish(outcome.snapshot, outcome.duration_seconds, outcome.completed_at)
        elif isinstance(outcome, FetchFailure):
            self.record_failure(outcome.error_kind, outcome.duration_seconds)
        else:
            raise TypeError(f"Unsupported fetch outcome: {type(outcome).__name__}")

    def read(self) -> MetricsView:
        """Return the current snapshot and status as one consistent view."""
        with self._lock:
            return self._view
