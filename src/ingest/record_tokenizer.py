"""Streaming record tokenizer for ADIF reports.

This module splits a chunked text stream into raw record strings on the
case-insensitive ``<eor>`` marker, independent of line breaks. A leading
header terminated by ``<eoh>`` is stripped from the first fragment that
contains it.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, TextIO

from core.constants import (
    DEFAULT_MAX_RECORD_CHARS,
    DEFAULT_READ_CHUNK_SIZE,
    END_OF_HEADER_MARKER,
    END_OF_RECORD_MARKER,
)
from core.errors import LotwStreamTooLargeError

_END_OF_RECORD_PATTERN = re.compile(re.escape(END_OF_RECORD_MARKER), re.IGNORECASE)
_END_OF_HEADER_PATTERN = re.compile(re.escape(END_OF_HEADER_MARKER), re.IGNORECASE)


def iter_text_chunks(stream: TextIO, chunk_size: int = DEFAULT_READ_CHUNK_SIZE) -> Iterator[str]:
    """Yield fixed-size chunks from a text stream until EOF."""
    while True:
        chunk = stream.read(chunk_size)
        if not chunk:
            return
        yield chunk


def iter_raw_records(
    chunks: Iterable[str],
    max_record_chars: int = DEFAULT_MAX_RECORD_CHARS,
) -> Iterator[str]:
    """Lazily split chunked report text into raw record strings.

    Every ``<eor>`` marker closes one record, so N markers yield N records,
    none of which contains the marker. Records are whitespace-trimmed. A
    non-blank trailing fragment without a marker is yielded last and may be
    malformed.

    Args:
        chunks: Report text in arbitrary-sized pieces.
        max_record_chars: Largest buffered record accepted.

    Returns:
        Iterator over raw record strings.

    Raises:
        LotwStreamTooLargeError: If one record outgrows ``max_record_chars``.
    """
    buffer = ""
    scan_from = 0
    header_pending = True
    for chunk in chunks:
        buffer += chunk
        while True:
            match = _END_OF_RECORD_PATTERN.search(buffer, scan_from)
            if match is None:
                break
            _check_record_size(match.start(), max_record_chars)
            fragment = buffer[: match.start()]
            buffer = buffer[match.end() :]
            scan_from = 0
            if header_pending:
                fragment, header_pending = _strip_header(fragment)
            yield fragment.strip()
        # A marker may straddle the chunk boundary.
        scan_from = max(0, len(buffer) - len(END_OF_RECORD_MARKER) + 1)
        _check_record_size(len(buffer), max_record_chars)
    if header_pending:
        buffer, _ = _strip_header(buffer)
    trailing_fragment = buffer.strip()
    if trailing_fragment:
        yield trailing_fragment


def _check_record_size(record_chars: int, max_record_chars: int) -> None:
    """Raise when one buffered record is larger than the budget."""
    if record_chars > max_record_chars:
        raise LotwStreamTooLargeError(
            f"Record of at least {record_chars} characters exceeds the budget of "
            f"{max_record_chars} characters. Raise LOTW_MAX_RECORD_CHARS or check "
            "that the report is ADIF."
        )


def _strip_header(fragment: str) -> tuple[str, bool]:
    """Remove everything up to and including ``<eoh>``.

    Returns:
        The remaining fragment and whether the header is still pending.
    """
    match = _END_OF_HEADER_PATTERN.search(fragment)
    if match is None:
        return fragment, True
    return fragment[match.end() :], False
