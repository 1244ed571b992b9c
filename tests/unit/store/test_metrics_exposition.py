"""Unit tests for Prometheus exposition of the metrics store."""

from __future__ import annotations

from core.types import AggregatedSnapshot
from store.metrics_exposition import build_metric_families, build_registry, render_metrics
from store.metrics_store import MetricsStore


def _published_store() -> MetricsStore:
    store = MetricsStore()
    snapshot = AggregatedSnapshot(
        totals_by_band_mode={("20M", "FT8"): 4, ("40M", "CW"): 1},
        confirmed_by_band_mode={("20M", "FT8"): 3},
        confirmed_entities=frozenset({"339", "150"}),
        daily_counts_by_date_band={("2025-12-10", "20M"): 3},
        record_count=5,
    )
    store.publish(snapshot, duration_seconds=1.25, published_at=1_700_000_000.0)
    return store


def test_render_metrics_exposes_labelled_gauges() -> None:
    """Rendered text should carry every gauge with its labels."""
    output = render_metrics(build_registry(_published_store()))

    assert 'lotw_qso_total{band="20M",mode="FT8"} 4.0' in output
    assert 'lotw_qso_total{band="40M",mode="CW"} 1.0' in output
    assert 'lotw_qsl_confirmed_total{band="20M",mode="FT8"} 3.0' in output
    assert "lotw_dxcc_entities_count 2.0" in output
    assert 'lotw_qso_history_count{band="20M",date="2025-12-10"} 3.0' in output
    assert "lotw_scrape_duration_seconds 1.25" in output
    assert "lotw_scrape_success 1.0" in output
    assert "# TYPE lotw_last_fetch_timestamp_seconds gauge" in output


def test_render_metrics_keeps_snapshot_after_failure() -> None:
    """A failed cycle should flip success to zero and keep the old counts."""
    store = _published_store()
    store.record_failure("fetch", duration_seconds=0.5)

    output = render_metrics(build_registry(store))

    assert "lotw_scrape_success 0.0" in output
    assert "lotw_scrape_duration_seconds 0.5" in output
    assert 'lotw_qso_total{band="20M",mode="FT8"} 4.0' in output


def test_render_metrics_before_first_fetch() -> None:
    """A fresh store should expose zeroed scalar gauges and no labelled samples."""
    output = render_metrics(build_registry(MetricsStore()))

    assert "lotw_scrape_success 0.0" in output
    assert "lotw_dxcc_entities_count 0.0" in output
    assert "lotw_last_fetch_timestamp_seconds 0.0" in output
    assert "lotw_qso_total{" not in output


def test_build_metric_families_without_view_has_no_samples() -> None:
    """Description-only families should be empty but named."""
    families = build_metric_families(None)

    assert [family.name for family in families] == [
        "lotw_qso_total",
        "lotw_qsl_confirmed_total",
        "lotw_dxcc_entities_count",
        "lotw_qso_history_count",
        "lotw_scrape_duration_seconds",
        "lotw_scrape_success",
        "lotw_last_fetch_timestamp_seconds",
    ]
    assert all(not family.samples for family in families)
