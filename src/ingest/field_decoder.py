"""Best-effort decoder for ADIF tagged fields.

A record is a run of ``<NAME:LENGTH[:TYPE]>VALUE`` fields. Decoding never
raises: tags without a usable length are skipped, declared lengths that
overrun the record are clipped, and a record with no valid tags decodes
to an empty mapping. Callers detect anomalies only through missing fields.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.types import Record


@dataclass(frozen=True)
class FieldTag:
    """Parsed tag header.

    Attributes:
        name: Uppercased field name.
        length: Declared value length in characters.
        type_hint: Optional ADIF data type indicator, not interpreted.
    """

    name: str
    length: int
    type_hint: str | None = None


def decode_record(raw_record: str) -> Record:
    """Decode one raw record string into a field mapping.

    Args:
        raw_record: Record text without the end-of-record marker.

    Returns:
        Mapping of uppercase field name to value; later duplicates win.
    """
    fields: dict[str, str] = {}
    position = 0
    record_length = len(raw_record)
    while position < record_length:
        tag_start = raw_record.find("<", position)
        if tag_start == -1:
            break
        tag_end = raw_record.find(">", tag_start + 1)
        if tag_end == -1:
            break
        tag = parse_field_tag(raw_record[tag_start + 1 : tag_end])
        value_start = tag_end + 1
        if tag is None:
            position = value_start
            continue
        value_end = min(value_start + tag.length, record_length)
        fields[tag.name] = raw_record[value_start:value_end]
        position = value_end
    return fields


def parse_field_tag(tag_content: str) -> FieldTag | None:
    """Parse the text between ``<`` and ``>``.

    Args:
        tag_content: Tag body such as ``CALL:5`` or ``QSO_DATE:8:D``.

    Returns:
        Parsed tag, or None for non-data tags (no length, bad length,
        or empty name).
    """
    parts = tag_content.split(":")
    if len(parts) < 2:
        return None
    name = parts[0].strip().upper()
    length = _parse_length(parts[1])
    if not name or length is None:
        return None
    type_hint = parts[2] if len(parts) > 2 and parts[2] else None
    return FieldTag(name=name, length=length, type_hint=type_hint)


def _parse_length(raw_length: str) -> int | None:
    """Return a non-negative ASCII integer length, or None."""
    text = raw_length.strip()
    if not text.isascii() or not text.isdigit():
        return None
    return int(text)
