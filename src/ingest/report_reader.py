"""Report readers composing the tokenizer and field decoder.

This module turns a whole ADIF report (text, stream, or local file)
into decoded records for the aggregation layer.
"""

from __future__ import annotations

import io
from pathlib import Path
from typing import Iterator, TextIO

from core.constants import DEFAULT_MAX_RECORD_CHARS
from core.errors import LotwExporterError
from core.types import Record
from ingest.field_decoder import decode_record
from ingest.record_tokenizer import iter_raw_records, iter_text_chunks


def iter_report_records(
    stream: TextIO,
    max_record_chars: int = DEFAULT_MAX_RECORD_CHARS,
) -> Iterator[Record]:
    """Yield decoded records from a report stream.

    Empty decodes are yielded as-is; the aggregator skips them.

    Raises:
        LotwStreamTooLargeError: If one record exceeds the buffer budget.
    """
    for raw_record in iter_raw_records(iter_text_chunks(stream), max_record_chars):
        yield decode_record(raw_record)


def read_report_text(
    report_text: str,
    max_record_chars: int = DEFAULT_MAX_RECORD_CHARS,
) -> list[Record]:
    """Decode all non-empty records from in-memory report text.

    Args:
        report_text: Full ADIF report body.
        max_record_chars: Tokenizer buffer budget.

    Returns:
        Decoded records in report order.
    """
    records = iter_report_records(io.StringIO(report_text), max_record_chars)
    return [record for record in records if record]


def read_report_file(
    report_path: Path,
    max_record_chars: int = DEFAULT_MAX_RECORD_CHARS,
) -> list[Record]:
    """Decode all non-empty records from a local ADIF file.

    Raises:
        LotwExporterError: If the file cannot be read.
        LotwStreamTooLargeError: If one record exceeds the buffer budget.
    """
    try:
        with report_path.open("r", encoding="utf-8", errors="replace") as stream:
            return [record for record in iter_report_records(stream, max_record_chars) if record]
    except OSError as error:
        raise LotwExporterError(
            f"Failed to read report at {report_path}: {error.strerror or error}. "
            "Provide an existing, readable ADIF file."
        ) from error
