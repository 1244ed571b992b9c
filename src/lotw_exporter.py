"""Public SDK surface for the LoTW exporter.

This module provides a stable import path for embedding the exporter.
It re-exports the pipeline stages, store, scheduler, and typed models.
"""

from __future__ import annotations

from core.config import ExporterConfig
from core.errors import (
    LotwConfigError,
    LotwExporterError,
    LotwFetchError,
    LotwStreamTooLargeError,
)
from core.types import (
    AggregatedSnapshot,
    FetchFailure,
    FetchOutcome,
    FetchStatus,
    FetchSuccess,
    MetricsView,
    Record,
)
from ingest.field_decoder import decode_record
from ingest.pipeline import FetchCycleRunner
from ingest.record_tokenizer import iter_raw_records
from ingest.report_client import LotwReportClient
from ingest.report_reader import read_report_file, read_report_text
from scheduler.fetch_scheduler import FetchScheduler
from store.metrics_exposition import build_registry, render_metrics, start_metrics_server
from store.metrics_store import MetricsStore
from transforms.qso_aggregation import aggregate_records

__all__ = [
    "AggregatedSnapshot",
    "ExporterConfig",
    "FetchCycleRunner",
    "FetchFailure",
    "FetchOutcome",
    "FetchScheduler",
    "FetchStatus",
    "FetchSuccess",
    "LotwConfigError",
    "LotwExporterError",
    "LotwFetchError",
    "LotwReportClient",
    "LotwStreamTooLargeError",
    "MetricsStore",
    "MetricsView",
    "Record",
    "aggregate_records",
    "build_registry",
    "decode_record",
    "iter_raw_records",
    "read_report_file",
    "read_report_text",
    "render_metrics",
    "start_metrics_server",
]
