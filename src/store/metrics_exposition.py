"""Prometheus exposition of the published metrics view.

This module renders one ``MetricsStore.read()`` per scrape into gauge
families, so a scrape never mixes two snapshots. It also owns the
registry and the HTTP scrape endpoint.
"""

from __future__ import annotations

from typing import Iterator

from prometheus_client import CollectorRegistry, generate_latest, start_http_server
from prometheus_client.core import GaugeMetricFamily
from prometheus_client.registry import Collector

from core.constants import (
    METRIC_DXCC_ENTITIES_COUNT,
    METRIC_LAST_FETCH_TIMESTAMP_SECONDS,
    METRIC_QSL_CONFIRMED_TOTAL,
    METRIC_QSO_HISTORY_COUNT,
    METRIC_QSO_TOTAL,
    METRIC_SCRAPE_DURATION_SECONDS,
    METRIC_SCRAPE_SUCCESS,
)
from core.logging_config import get_logger
from core.types import MetricsView
from store.metrics_store import MetricsStore

_LOGGER = get_logger(__name__)


class LotwMetricsCollector(Collector):
    """Custom collector backed by a ``MetricsStore``."""

    def __init__(self, store: MetricsStore) -> None:
        self._store = store

    def collect(self) -> Iterator[GaugeMetricFamily]:
        """Yield gauge families built from one consistent store view."""
        return iter(build_metric_families(self._store.read()))

    def describe(self) -> Iterator[GaugeMetricFamily]:
        """Describe families without reading the store."""
        return iter(build_metric_families(None))


def build_metric_families(view: MetricsView | None) -> list[GaugeMetricFamily]:
    """Build gauge families for a view; ``None`` yields sample-free families.

    Args:
        view: Consistent store view, or None for description only.

    Returns:
        Gauge families in a stable order.
    """
    qso_total = GaugeMetricFamily(
        METRIC_QSO_TOTAL,
        "Total number of QSOs logged in LoTW",
        labels=["band", "mode"],
    )
    qsl_total = GaugeMetricFamily(
        METRIC_QSL_CONFIRMED_TOTAL,
        "Total number of confirmed QSLs",
        labels=["band", "mode"],
    )
    dxcc_count = GaugeMetricFamily(
        METRIC_DXCC_ENTITIES_COUNT,
        "Number of unique DXCC entities confirmed",
    )
    qso_history = GaugeMetricFamily(
        METRIC_QSO_HISTORY_COUNT,
        "Number of QSOs per day and band",
        labels=["date", "band"],
    )
    scrape_duration = GaugeMetricFamily(
        METRIC_SCRAPE_DURATION_SECONDS,
        "Time taken to fetch and parse LoTW data",
    )
    scrape_success = GaugeMetricFamily(
        METRIC_SCRAPE_SUCCESS,
        "1 if last scrape was successful, 0 otherwise",
    )
    last_fetch = GaugeMetricFamily(
        METRIC_LAST_FETCH_TIMESTAMP_SECONDS,
        "Timestamp of the last successful LoTW fetch",
    )
    families = [
        qso_total,
        qsl_total,
        dxcc_count,
        qso_history,
        scrape_duration,
        scrape_success,
        last_fetch,
    ]
    if view is None:
        return families
    snapshot = view.snapshot
    status = view.status
    for (band, mode), count in snapshot.totals_by_band_mode.items():
        qso_total.add_metric([band, mode], float(count))
    for (band, mode), count in snapshot.confirmed_by_band_mode.items():
        qsl_total.add_metric([band, mode], float(count))
    dxcc_count.add_metric([], float(snapshot.confirmed_entity_count))
    for (qso_date, band), count in snapshot.daily_counts_by_date_band.items():
        qso_history.add_metric([qso_date, band], float(count))
    scrape_duration.add_metric([], status.duration_seconds)
    scrape_success.add_metric([], 1.0 if status.success else 0.0)
    last_fetch.add_metric([], status.last_success_timestamp or 0.0)
    return families


def build_registry(store: MetricsStore) -> CollectorRegistry:
    """Create a dedicated registry exposing the store."""
    registry = CollectorRegistry()
    registry.register(LotwMetricsCollector(store))
    return registry


def render_metrics(registry: CollectorRegistry) -> str:
    """Render the registry in Prometheus text exposition format."""
    return generate_latest(registry).decode("utf-8")


def start_metrics_server(registry: CollectorRegistry, address: str, port: int) -> None:
    """Serve ``/metrics`` for the registry from a background thread.

    Args:
        registry: Registry to expose.
        address: Bind address.
        port: Bind port.
    """
    start_http_server(port, addr=address, registry=registry)
    _LOGGER.info("metrics_server_started", address=address, port=port)
