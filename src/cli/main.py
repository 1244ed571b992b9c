"""LoTW exporter CLI entry points.
This module exposes the serve, fetch-once, and summarize commands.
It maps argparse commands onto the exporter SDK.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import signal
from typing import Any, Sequence

from core.config import ExporterConfig, parse_duration
from core.errors import LotwConfigError, LotwExporterError
from core.logging_config import configure_logging
from core.types import AggregatedSnapshot, FetchSuccess
from ingest.pipeline import FetchCycleRunner
from ingest.report_client import LotwReportClient
from ingest.report_reader import read_report_file
from scheduler.fetch_scheduler import FetchScheduler
from store.metrics_exposition import build_registry, render_metrics, start_metrics_server
from store.metrics_store import MetricsStore
from transforms.qso_aggregation import aggregate_records


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="lotw-exporter",
        description="Prometheus exporter for ARRL Logbook of the World QSO reports",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_serve_command(subparsers)
    _add_fetch_once_command(subparsers)
    _add_summarize_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the exporter CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
    except LotwConfigError as error:
        print(f"config_error={error}")
        return 2
    configure_logging(config.log_level)
    try:
        if args.command == "serve":
            return _run_serve_command(config)
        if args.command == "fetch-once":
            return _run_fetch_once_command(config)
        if args.command == "summarize":
            return _run_summarize_command(config, args)
    except LotwConfigError as error:
        print(f"config_error={error}")
        return 2
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(args: argparse.Namespace) -> ExporterConfig:
    """Build config from environment with per-command overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Validated config.

    Raises:
        LotwConfigError: If environment or override values are invalid.
    """
    config = ExporterConfig.from_env()
    interval = getattr(args, "interval", None)
    if interval:
        config = replace(
            config, fetch_interval_seconds=parse_duration(interval, "--interval")
        )
    port = getattr(args, "port", None)
    if port is not None:
        config = replace(config, listen_port=port)
    listen_address = getattr(args, "listen_address", None)
    if listen_address:
        config = replace(config, listen_address=listen_address)
    return config


def _build_runner(config: ExporterConfig, store: MetricsStore) -> FetchCycleRunner:
    """Wire the LoTW client and store into a cycle runner."""
    client = LotwReportClient(config)
    return FetchCycleRunner(client, store, max_record_chars=config.max_record_chars)


def _run_serve_command(config: ExporterConfig) -> int:
    """Handle serve command.

    Serves the scrape endpoint and runs the scheduler until SIGINT/SIGTERM.

    Args:
        config: Runtime config.

    Returns:
        Exit code.
    """
    store = MetricsStore()
    runner = _build_runner(config, store)
    scheduler = FetchScheduler(runner, config.fetch_interval_seconds)
    start_metrics_server(build_registry(store), config.listen_address, config.listen_port)
    signal.signal(signal.SIGTERM, lambda _signum, _frame: scheduler.stop(timeout=0))
    scheduler.start()
    try:
        scheduler.wait()
    except KeyboardInterrupt:
        pass
    scheduler.stop()
    return 0


def _run_fetch_once_command(config: ExporterConfig) -> int:
    """Handle fetch-once command.

    Args:
        config: Runtime config.

    Returns:
        Exit code, 0 when the cycle published a snapshot.
    """
    store = MetricsStore()
    outcome = _build_runner(config, store).run_cycle()
    print(render_metrics(build_registry(store)), end="")
    return 0 if isinstance(outcome, FetchSuccess) else 1


def _run_summarize_command(config: ExporterConfig, args: argparse.Namespace) -> int:
    """Handle summarize command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    try:
        records = read_report_file(Path(args.report).expanduser(), config.max_record_chars)
    except LotwExporterError as error:
        print(f"error={error}")
        return 1
    for line in _render_summary(aggregate_records(records)):
        print(line)
    return 0


def _render_summary(snapshot: AggregatedSnapshot) -> list[str]:
    """Render tab-separated band/mode rows plus totals."""
    lines = ["band\tmode\tqsos\tconfirmed"]
    for (band, mode), count in snapshot.totals_by_band_mode.items():
        confirmed = snapshot.confirmed_by_band_mode.get((band, mode), 0)
        lines.append(f"{band or '-'}\t{mode or '-'}\t{count}\t{confirmed}")
    lines.append(f"records={snapshot.record_count}")
    lines.append(f"dxcc_entities={snapshot.confirmed_entity_count}")
    return lines


def _add_serve_command(subparsers: Any) -> None:
    """Register serve subcommand."""
    parser = subparsers.add_parser("serve", help="Serve metrics and fetch LoTW periodically")
    parser.add_argument("--interval", help="Fetch interval, e.g. 30m or 1h")
    parser.add_argument("--port", type=int, help="Scrape endpoint port")
    parser.add_argument("--listen-address", help="Scrape endpoint bind address")


def _add_fetch_once_command(subparsers: Any) -> None:
    """Register fetch-once subcommand."""
    subparsers.add_parser(
        "fetch-once",
        help="Run one fetch cycle and print the metrics exposition",
    )


def _add_summarize_command(subparsers: Any) -> None:
    """Register summarize subcommand."""
    parser = subparsers.add_parser("summarize", help="Aggregate a local ADIF report file")
    parser.add_argument("report", help="Path to an ADIF (.adi) report")
