"""Fetch cycle orchestration.

This module runs one fetch, decode, aggregate, publish cycle. Any stage
failure short-circuits the rest of the cycle, records a failure outcome,
and leaves the previously published snapshot in place.
"""

from __future__ import annotations

import io
import time
from typing import Callable

from core.constants import DEFAULT_MAX_RECORD_CHARS
from core.errors import LotwExporterError
from core.logging_config import get_logger
from core.types import AggregatedSnapshot, FetchFailure, FetchOutcome, FetchSuccess
from ingest.report_client import ReportFetcher
from ingest.report_reader import iter_report_records
from store.metrics_store import MetricsStore
from transforms.qso_aggregation import aggregate_records

_LOGGER = get_logger(__name__)


class FetchCycleRunner:
    """Runs complete fetch cycles against one store."""

    def __init__(
        self,
        fetcher: ReportFetcher,
        store: MetricsStore,
        max_record_chars: int = DEFAULT_MAX_RECORD_CHARS,
        clock: Callable[[], float] = time.time,
        timer: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetcher = fetcher
        self._store = store
        self._max_record_chars = max_record_chars
        self._clock = clock
        self._timer = timer

    def run_cycle(self) -> FetchOutcome:
        """Execute one cycle and record its outcome in the store.

        Returns:
            Success with the published snapshot, or failure with its kind.
        """
        started_at = self._timer()
        _LOGGER.info("fetch_cycle_started")
        try:
            snapshot = self._fetch_and_aggregate()
        except LotwExporterError as error:
            outcome: FetchOutcome = FetchFailure(
                error_kind=error.error_kind,
                duration_seconds=self._timer() - started_at,
                message=str(error),
            )
            _LOGGER.error(
                "fetch_cycle_failed",
                error_kind=outcome.error_kind,
                error=outcome.message,
                duration_seconds=round(outcome.duration_seconds, 3),
            )
        except Exception as error:
            outcome = FetchFailure(
                error_kind=LotwExporterError.error_kind,
                duration_seconds=self._timer() - started_at,
                message=f"{type(error).__name__}: {error}",
            )
            _LOGGER.exception(
                "fetch_cycle_failed",
                error_kind=outcome.error_kind,
                duration_seconds=round(outcome.duration_seconds, 3),
            )
        else:
            outcome = FetchSuccess(
                snapshot=snapshot,
                duration_seconds=self._timer() - started_at,
                completed_at=self._clock(),
            )
            _LOGGER.info(
                "fetch_cycle_completed",
                record_count=snapshot.record_count,
                dxcc_entities=snapshot.confirmed_entity_count,
                duration_seconds=round(outcome.duration_seconds, 3),
            )
        self._store.record_outcome(outcome)
        return outcome

    def _fetch_and_aggregate(self) -> AggregatedSnapshot:
        report_text = self._fetcher.fetch_report()
        records = iter_report_records(io.StringIO(report_text), self._max_record_chars)
        return aggregate_records(records)
