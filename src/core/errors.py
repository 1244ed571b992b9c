"""LoTW exporter exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type, and every type carries
the ``error_kind`` label reported in fetch outcomes and logs.
"""

from __future__ import annotations


class LotwExporterError(Exception):
    """Base exception for all exporter failures."""

    error_kind = "internal"


class LotwConfigError(LotwExporterError):
    """Raised for invalid runtime configuration."""

    error_kind = "config"


class LotwFetchError(LotwExporterError):
    """Raised when the report cannot be retrieved from LoTW."""

    error_kind = "fetch"


class LotwStreamTooLargeError(LotwExporterError):
    """Raised when a single record exceeds the tokenizer buffer budget."""

    error_kind = "stream_too_large"
