"""Core constants used across exporter modules.

This module centralizes markers, defaults, and metric names.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

END_OF_RECORD_MARKER = "<eor>"
END_OF_HEADER_MARKER = "<eoh>"
DEFAULT_READ_CHUNK_SIZE = 64 * 1024
DEFAULT_MAX_RECORD_CHARS = 50 * 1024 * 1024

DEFAULT_REPORT_URL = "https://lotw.arrl.org/lotwuser/lotwreport.adi"
DEFAULT_FETCH_INTERVAL = "1h"
DEFAULT_FETCH_TIMEOUT = "60s"
DEFAULT_QSO_START_DATE = "1900-01-01"
DEFAULT_LISTEN_ADDRESS = "0.0.0.0"
DEFAULT_LISTEN_PORT = 8000
DEFAULT_LOG_LEVEL = "INFO"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

FIELD_BAND = "BAND"
FIELD_MODE = "MODE"
FIELD_QSL_RCVD = "QSL_RCVD"
FIELD_DXCC = "DXCC"
FIELD_LOTW_QSO_TIMESTAMP = "APP_LOTW_QSO_TIMESTAMP"
FIELD_QSO_DATE = "QSO_DATE"
QSL_CONFIRMED_VALUE = "Y"

METRIC_QSO_TOTAL = "lotw_qso_total"
METRIC_QSL_CONFIRMED_TOTAL = "lotw_qsl_confirmed_total"
METRIC_DXCC_ENTITIES_COUNT = "lotw_dxcc_entities_count"
METRIC_QSO_HISTORY_COUNT = "lotw_qso_history_count"
METRIC_SCRAPE_DURATION_SECONDS = "lotw_scrape_duration_seconds"
METRIC_SCRAPE_SUCCESS = "lotw_scrape_success"
METRIC_LAST_FETCH_TIMESTAMP_SECONDS = "lotw_last_fetch_timestamp_seconds"
