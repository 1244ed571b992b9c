"""Integration tests for a full fetch, aggregate, publish, scrape cycle."""

from __future__ import annotations

from dataclasses import replace

import httpx

from core.config import ExporterConfig
from ingest.pipeline import FetchCycleRunner
from ingest.report_client import LotwReportClient
from store.metrics_exposition import build_registry, render_metrics
from store.metrics_store import MetricsStore
from tests.fixture_paths import read_fixture_text


def _runner(handler, store: MetricsStore) -> FetchCycleRunner:
    config = replace(ExporterConfig.from_env(), username="k1abc", password="s3cret")
    client = LotwReportClient(config, transport=httpx.MockTransport(handler))
    return FetchCycleRunner(
        client,
        store,
        max_record_chars=config.max_record_chars,
        clock=lambda: 1_700_000_000.0,
    )


def test_cycle_publishes_report_metrics() -> None:
    """A served report should end up in the scrape output."""
    report_text = read_fixture_text("reports/lotw_report.adi")
    store = MetricsStore()
    runner = _runner(lambda request: httpx.Response(200, text=report_text), store)

    runner.run_cycle()
    output = render_metrics(build_registry(store))

    assert 'lotw_qso_total{band="20M",mode="FT8"} 4.0' in output
    assert 'lotw_qsl_confirmed_total{band="40M",mode="CW"} 1.0' in output
    assert "lotw_dxcc_entities_count 3.0" in output
    assert 'lotw_qso_history_count{band="40M",date="2025-12-09"} 1.0' in output
    assert "lotw_scrape_success 1.0" in output


def test_failed_cycle_keeps_previous_metrics() -> None:
    """An outage after a good cycle should keep the old counts visible."""
    report_text = read_fixture_text("reports/lotw_report.adi")
    responses = [
        httpx.Response(200, text=report_text),
        httpx.Response(503, text="maintenance"),
    ]
    store = MetricsStore()
    runner = _runner(lambda request: responses.pop(0), store)

    runner.run_cycle()
    runner.run_cycle()
    view = store.read()
    output = render_metrics(build_registry(store))

    assert view.status.success is False
    assert view.status.last_error_kind == "fetch"
    assert view.status.last_success_timestamp == 1_700_000_000.0
    assert view.snapshot.record_count == 5
    assert "lotw_scrape_success 0.0" in output
    assert 'lotw_qso_total{band="20M",mode="FT8"} 4.0' in output
