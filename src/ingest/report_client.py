"""LoTW report download client.

This module retrieves the full ADIF QSO report from Logbook of the World
with one authenticated GET. Every call requests the complete history so
each fetch cycle is a full re-sync.
"""

from __future__ import annotations

from typing import Protocol

import httpx

from core.config import ExporterConfig
from core.errors import LotwConfigError, LotwFetchError
from core.logging_config import get_logger

_LOGGER = get_logger(__name__)


class ReportFetcher(Protocol):
    """Anything that can return the raw report text."""

    def fetch_report(self) -> str:
        """Return the full report body."""
        ...


class LotwReportClient:
    """HTTP client for the LoTW ``lotwreport.adi`` endpoint."""

    def __init__(
        self,
        config: ExporterConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize client from config.

        Args:
            config: Runtime configuration with credentials and URL.
            transport: Optional httpx transport, used by tests.

        Raises:
            LotwConfigError: If credentials are missing.
        """
        if not config.username or not config.password:
            raise LotwConfigError(
                "LoTW credentials are missing. "
                "Set LOTW_USERNAME and LOTW_PASSWORD to fetch reports."
            )
        self._config = config
        self._transport = transport

    def fetch_report(self) -> str:
        """Download the report body.

        Returns:
            Decoded ADIF report text.

        Raises:
            LotwFetchError: On transport errors, timeouts, or non-200 status.
        """
        try:
            with httpx.Client(
                timeout=self._config.fetch_timeout_seconds,
                transport=self._transport,
            ) as client:
                response = client.get(self._config.report_url, params=self._build_query())
        except httpx.TimeoutException as error:
            raise LotwFetchError(
                "LoTW report request timed out after "
                f"{self._config.fetch_timeout_seconds:g}s. "
                "Raise LOTW_FETCH_TIMEOUT if reports are large."
            ) from error
        except httpx.HTTPError as error:
            raise LotwFetchError(
                f"LoTW report request failed: {type(error).__name__}. "
                "Check network access to the report URL."
            ) from error
        if response.status_code != httpx.codes.OK:
            raise LotwFetchError(
                f"LoTW report request returned status {response.status_code}. "
                "Check credentials and the report URL."
            )
        _LOGGER.info("report_downloaded", byte_count=len(response.content))
        return response.text

    def _build_query(self) -> dict[str, str]:
        """Build report query parameters."""
        return {
            "login": self._config.username or "",
            "password": self._config.password or "",
            "qso_query": "1",
            "qso_qsl": "no",
            "qso_startdate": self._config.qso_start_date,
        }
