"""Runtime configuration model for the LoTW exporter.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
import math
import os
import re

from core.constants import (
    DEFAULT_FETCH_INTERVAL,
    DEFAULT_FETCH_TIMEOUT,
    DEFAULT_LISTEN_ADDRESS,
    DEFAULT_LISTEN_PORT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_RECORD_CHARS,
    DEFAULT_QSO_START_DATE,
    DEFAULT_REPORT_URL,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import LotwConfigError

_DURATION_PART_PATTERN = re.compile(r"(\d+(?:\.\d+)?)(h|m|s)")
_DURATION_UNIT_SECONDS = {"h": 3600.0, "m": 60.0, "s": 1.0}


@dataclass(frozen=True)
class ExporterConfig:
    """Validated runtime configuration.

    Attributes:
        username: LoTW login, required only for fetching.
        password: LoTW password, required only for fetching.
        report_url: LoTW report endpoint URL.
        fetch_interval_seconds: Period between fetch cycles.
        fetch_timeout_seconds: HTTP timeout for one report download.
        qso_start_date: ISO date sent as ``qso_startdate``.
        max_record_chars: Tokenizer buffer budget for one record.
        listen_address: Bind address of the scrape endpoint.
        listen_port: Port of the scrape endpoint.
        log_level: structlog filtering level name.
    """

    username: str | None
    password: str | None = field(repr=False)
    report_url: str
    fetch_interval_seconds: float
    fetch_timeout_seconds: float
    qso_start_date: str
    max_record_chars: int
    listen_address: str
    listen_port: int
    log_level: str

    @classmethod
    def from_env(cls) -> "ExporterConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            LotwConfigError: If environment values are invalid.
        """
        return cls(
            username=os.getenv("LOTW_USERNAME") or None,
            password=os.getenv("LOTW_PASSWORD") or None,
            report_url=os.getenv("LOTW_REPORT_URL", DEFAULT_REPORT_URL),
            fetch_interval_seconds=parse_duration(
                os.getenv("LOTW_FETCH_INTERVAL", DEFAULT_FETCH_INTERVAL),
                "LOTW_FETCH_INTERVAL",
            ),
            fetch_timeout_seconds=parse_duration(
                os.getenv("LOTW_FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT),
                "LOTW_FETCH_TIMEOUT",
            ),
            qso_start_date=_parse_start_date(
                os.getenv("LOTW_QSO_START_DATE", DEFAULT_QSO_START_DATE)
            ),
            max_record_chars=_parse_positive_int(
                os.getenv("LOTW_MAX_RECORD_CHARS", str(DEFAULT_MAX_RECORD_CHARS)),
                "LOTW_MAX_RECORD_CHARS",
            ),
            listen_address=os.getenv("LOTW_EXPORTER_LISTEN_ADDRESS", DEFAULT_LISTEN_ADDRESS),
            listen_port=_parse_port(
                os.getenv("LOTW_EXPORTER_PORT", str(DEFAULT_LISTEN_PORT)),
                "LOTW_EXPORTER_PORT",
            ),
            log_level=_parse_log_level(os.getenv("LOTW_LOG_LEVEL", DEFAULT_LOG_LEVEL)),
        )


def parse_duration(raw_value: str, setting_name: str) -> float:
    """Parse a positive duration such as ``90``, ``90s``, ``15m``, or ``1h30m``.

    Args:
        raw_value: Raw duration text; a bare number means seconds.
        setting_name: Setting name used in error messages.

    Returns:
        Duration in seconds.

    Raises:
        LotwConfigError: If value is malformed or not positive.
    """
    text = raw_value.strip().lower()
    seconds = _parse_duration_seconds(text)
    if seconds is None or not math.isfinite(seconds):
        raise LotwConfigError(
            f"Invalid {setting_name} value: expected a duration like '90s', '15m' "
            f"or '1h', got '{raw_value}'."
        )
    if seconds <= 0:
        raise LotwConfigError(
            f"Invalid {setting_name} value: duration must be positive, got '{raw_value}'."
        )
    return seconds


def _parse_duration_seconds(text: str) -> float | None:
    """Return seconds for duration text, or None when it does not parse."""
    try:
        return float(text)
    except ValueError:
        pass
    if not text or _DURATION_PART_PATTERN.sub("", text):
        return None
    return sum(
        float(amount) * _DURATION_UNIT_SECONDS[unit]
        for amount, unit in _DURATION_PART_PATTERN.findall(text)
    )


def _parse_start_date(raw_value: str) -> str:
    """Validate an ISO ``YYYY-MM-DD`` start date.

    Raises:
        LotwConfigError: If value is not an ISO calendar date.
    """
    try:
        return date.fromisoformat(raw_value.strip()).isoformat()
    except ValueError as error:
        raise LotwConfigError(
            "Invalid LOTW_QSO_START_DATE value: "
            f"expected YYYY-MM-DD, got '{raw_value}'."
        ) from error


def _parse_positive_int(raw_value: str, setting_name: str) -> int:
    """Parse a strictly positive integer environment value.

    Raises:
        LotwConfigError: If value cannot be parsed or is not positive.
    """
    try:
        value = int(raw_value)
    except ValueError as error:
        raise LotwConfigError(
            f"Invalid {setting_name} value: expected integer, got '{raw_value}'. "
            f"Set {setting_name} to a numeric value."
        ) from error
    if value <= 0:
        raise LotwConfigError(
            f"Invalid {setting_name} value: expected a positive integer, got '{raw_value}'."
        )
    return value


def _parse_port(raw_value: str, setting_name: str) -> int:
    """Parse a TCP port number.

    Raises:
        LotwConfigError: If value is outside 1..65535.
    """
    port = _parse_positive_int(raw_value, setting_name)
    if port > 65535:
        raise LotwConfigError(
            f"Invalid {setting_name} value: port must be at most 65535, got '{raw_value}'."
        )
    return port


def _parse_log_level(raw_value: str) -> str:
    """Normalize and validate a log level name.

    Raises:
        LotwConfigError: If level name is unknown.
    """
    level = raw_value.strip().upper()
    if level not in SUPPORTED_LOG_LEVELS:
        raise LotwConfigError(
            f"Invalid LOTW_LOG_LEVEL value '{raw_value}'. "
            f"Supported levels: {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return level
