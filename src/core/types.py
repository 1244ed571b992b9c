"""Shared typed models.

This module defines the immutable data models passed between the
ingest, aggregation, store, and scheduling layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union

Record = Mapping[str, str]
"""One decoded report entry: uppercase field name to raw string value."""

BandModeKey = tuple[str, str]
DateBandKey = tuple[str, str]


def _frozen_counts(counts: Mapping[tuple[str, str], int]) -> Mapping[tuple[str, str], int]:
    """Return a read-only, key-sorted copy of a counter mapping."""
    return MappingProxyType({key: counts[key] for key in sorted(counts)})


@dataclass(frozen=True)
class AggregatedSnapshot:
    """Immutable aggregation result of one full report parse.

    Attributes:
        totals_by_band_mode: QSO count per (band, mode).
        confirmed_by_band_mode: Confirmed QSL count per (band, mode).
        confirmed_entities: Distinct DXCC entities with a confirmed QSL.
        daily_counts_by_date_band: QSO count per (YYYY-MM-DD, band).
        record_count: Number of non-empty records aggregated.
    """

    totals_by_band_mode: Mapping[BandModeKey, int] = field(default_factory=dict)
    confirmed_by_band_mode: Mapping[BandModeKey, int] = field(default_factory=dict)
    confirmed_entities: frozenset[str] = frozenset()
    daily_counts_by_date_band: Mapping[DateBandKey, int] = field(default_factory=dict)
    record_count: int = 0

    def __post_init__(self) -> None:
        object.__setattr__(self, "totals_by_band_mode", _frozen_counts(self.totals_by_band_mode))
        object.__setattr__(
            self, "confirmed_by_band_mode", _frozen_counts(self.confirmed_by_band_mode)
        )
        object.__setattr__(self, "confirmed_entities", frozenset(self.confirmed_entities))
        object.__setattr__(
            self, "daily_counts_by_date_band", _frozen_counts(self.daily_counts_by_date_band)
        )

    @property
    def confirmed_entity_count(self) -> int:
        """Number of distinct confirmed DXCC entities."""
        return len(self.confirmed_entities)


@dataclass(frozen=True)
class FetchSuccess:
    """Outcome of a cycle that published a new snapshot."""

    snapshot: AggregatedSnapshot
    duration_seconds: float
    completed_at: float


@dataclass(frozen=True)
class FetchFailure:
    """Outcome of a cycle that failed before publishing.

    Attributes:
        error_kind: Error category, e.g. ``fetch`` or ``stream_too_large``.
        duration_seconds: Time spent before the failure.
        message: Human-readable failure description.
    """

    error_kind: str
    duration_seconds: float
    message: str = ""


FetchOutcome = Union[FetchSuccess, FetchFailure]


@dataclass(frozen=True)
class FetchStatus:
    """Operational status of the most recent fetch cycle.

    Attributes:
        success: Whether the last cycle published a snapshot.
        duration_seconds: Duration of the last cycle.
        last_success_timestamp: Epoch seconds of the last publish, if any.
        last_error_kind: Error category of the last failure, if the last cycle failed.
    """

    success: bool = False
    duration_seconds: float = 0.0
    last_success_timestamp: float | None = None
    last_error_kind: str | None = None


@dataclass(frozen=True)
class MetricsView:
    """Consistent read of the published snapshot and its status."""

    snapshot: AggregatedSnapshot
    status: FetchStatus
