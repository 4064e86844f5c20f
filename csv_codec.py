"""Flat CSV reading and writing.

Reading is deliberately simple: lines are split on commas and cells are
trimmed, so quoted fields that contain commas or newlines are not supported.
Writing applies standard quoting. Rows whose field count differs from the
header are dropped without raising.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from logging_setup import get_logger

log = get_logger("gcr_pricing.csv_codec")

_NEEDS_QUOTING = (",", '"', "\n", "\r")


def parse(text: str) -> list[dict[str, str]]:
    lines = text.strip().split("\n")
    if len(lines) < 2:
        return []

    headers = [h.strip() for h in lines[0].split(",")]
    rows: list[dict[str, str]] = []
    for lineno, raw in enumerate(lines[1:], start=2):
        line = raw.strip()
        if not line:
            continue
        values = [v.strip() for v in line.split(",")]
        if len(values) != len(headers):
            log.debug(
                "Skipping CSV line %d: %d fields, header has %d",
                lineno,
                len(values),
                len(headers),
            )
            continue
        rows.append(dict(zip(headers, values)))
    return rows


def escape_field(value: Any) -> str:
    """Quote *value* for CSV output when it contains a comma, quote or newline."""

    if value is None:
        return ""
    s = str(value)
    if any(ch in s for ch in _NEEDS_QUOTING):
        return '"' + s.replace('"', '""') + '"'
    return s


def format_row(values: Iterable[Any]) -> str:
    return ",".join(escape_field(v) for v in values)


def serialize(rows: Iterable[Mapping[str, Any]], headers: Sequence[str]) -> str:
    lines = [format_row(headers)]
    for row in rows:
        lines.append(format_row(row.get(h) for h in headers))
    return "\n".join(lines)


__all__ = ["escape_field", "format_row", "parse", "serialize"]
