"""QSO aggregation transform.

This module folds decoded report records into one immutable
``AggregatedSnapshot``: totals and confirmations per band and mode,
distinct confirmed DXCC entities, and daily counts per band.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable

from core.constants import (
    FIELD_BAND,
    FIELD_DXCC,
    FIELD_LOTW_QSO_TIMESTAMP,
    FIELD_MODE,
    FIELD_QSL_RCVD,
    FIELD_QSO_DATE,
    QSL_CONFIRMED_VALUE,
)
from core.types import AggregatedSnapshot, BandModeKey, DateBandKey, Record


class QsoAggregator:
    """Accumulates records for one full report pass.

    The aggregator is single-use per pass; ``build`` returns a snapshot
    that shares no mutable state with the aggregator.
    """

    def __init__(self) -> None:
        self._totals: Counter[BandModeKey] = Counter()
        self._confirmed: Counter[BandModeKey] = Counter()
        self._entities: set[str] = set()
        self._daily: Counter[DateBandKey] = Counter()
        self._record_count = 0

    def add(self, record: Record) -> None:
        """Fold one decoded record into the running counts.

        Empty records are skipped rather than counted.
        """
        if not record:
            return
        self._record_count += 1
        band = record.get(FIELD_BAND, "")
        mode = record.get(FIELD_MODE, "")
        self._totals[(band, mode)] += 1
        if is_confirmed(record):
            self._confirmed[(band, mode)] += 1
            entity = record.get(FIELD_DXCC, "")
            if entity:
                self._entities.add(entity)
        qso_date = qso_date_bucket(record)
        if qso_date is not None:
            self._daily[(qso_date, band)] += 1

    def build(self) -> AggregatedSnapshot:
        """Return the immutable snapshot for everything added so far."""
        return AggregatedSnapshot(
            totals_by_band_mode=dict(self._totals),
            confirmed_by_band_mode=dict(self._confirmed),
            confirmed_entities=frozenset(self._entities),
            daily_counts_by_date_band=dict(self._daily),
            record_count=self._record_count,
        )


def aggregate_records(records: Iterable[Record]) -> AggregatedSnapshot:
    """Aggregate a complete record sequence into a snapshot.

    Args:
        records: Decoded records from one full report parse.

    Returns:
        Snapshot built only after the whole sequence is consumed.
    """
    aggregator = QsoAggregator()
    for record in records:
        aggregator.add(record)
    return aggregator.build()


def is_confirmed(record: Record) -> bool:
    """Return whether ``QSL_RCVD`` is ``Y`` in any letter case."""
    return record.get(FIELD_QSL_RCVD, "").upper() == QSL_CONFIRMED_VALUE


def qso_date_bucket(record: Record) -> str | None:
    """Return the ``YYYY-MM-DD`` day bucket of a record, if any.

    Prefers the LoTW QSO timestamp, falling back to an 8-digit ``QSO_DATE``.
    """
    timestamp = record.get(FIELD_LOTW_QSO_TIMESTAMP, "")
    if len(timestamp) >= 10:
        return timestamp[:10]
    qso_date = record.get(FIELD_QSO_DATE, "")
    if len(qso_date) == 8 and qso_date.isascii() and qso_date.isdigit():
        return f"{qso_date[0:4]}-{qso_date[4:6]}-{qso_date[6:8]}"
    return None
