"""Catalog store: reference lists and the rate table.

The catalog is built from a required JSON document and an optional rate CSV.
When the CSV yields at least one row, its rows replace the JSON rate list
wholesale. Sources are filesystem paths or http(s) URLs.
"""

from __future__ import annotations

import json
import math
import os
import re
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any, Mapping, Union

import requests

import csv_codec
from errors import DataLoadError, RateLoadWarning
from logging_setup import get_logger

log = get_logger("gcr_pricing.catalog")

DEFAULT_FETCH_TIMEOUT = 10.0

ENTRY_KINDS: tuple[str, ...] = (
    "services",
    "instruments",
    "methods",
    "customer_types",
    "unit_types",
)

# catalog attribute -> key in the JSON document
_JSON_KEYS = {
    "services": "services",
    "instruments": "instruments",
    "methods": "methods",
    "customer_types": "customerTypes",
    "unit_types": "unitTypes",
}

Source = Union[str, PathLike]

# numeric prefix of a rate cell, e.g. "12.5" in "12.5USD"
_LEADING_FLOAT = re.compile(r"\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    name: str


@dataclass(frozen=True)
class RateEntry:
    service: str
    instrument: str
    method: str
    customer_type: str
    unit_type: str
    rate: float

    @property
    def key(self) -> tuple[str, str, str, str, str]:
        return (self.service, self.instrument, self.method, self.customer_type, self.unit_type)


@dataclass(frozen=True)
class Catalog:
    services: tuple[CatalogEntry, ...] = ()
    instruments: tuple[CatalogEntry, ...] = ()
    methods: tuple[CatalogEntry, ...] = ()
    customer_types: tuple[CatalogEntry, ...] = ()
    unit_types: tuple[CatalogEntry, ...] = ()
    rates: tuple[RateEntry, ...] = ()
    rates_source: str = field(default="json", compare=False)

    def entries(self, kind: str) -> tuple[CatalogEntry, ...]:
        if kind not in ENTRY_KINDS:
            raise KeyError(f"Unknown catalog list: {kind!r}")
        return getattr(self, kind)

    def display_name(self, kind: str, entry_id: str) -> str:
        """Name of the first entry of *kind* with *entry_id*, else the id itself."""

        for entry in self.entries(kind):
            if entry.id == entry_id:
                return entry.name
        return entry_id


# ---------------------------------------------------------------------------
# Source reading
# ---------------------------------------------------------------------------


def _is_url(source: Source) -> bool:
    return isinstance(source, str) and source.lower().startswith(("http://", "https://"))


def _fetch_timeout() -> float:
    raw = os.environ.get("FETCH_TIMEOUT")
    if not raw:
        return DEFAULT_FETCH_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        return DEFAULT_FETCH_TIMEOUT


def read_source(source: Source) -> str:
    """Return the text behind *source*; raises ``OSError`` or ``requests`` errors."""

    if _is_url(source):
        resp = requests.get(source, timeout=_fetch_timeout(), headers={"Cache-Control": "no-store"})
        resp.raise_for_status()
        return resp.text
    return Path(source).read_text(encoding="utf-8")


# ---------------------------------------------------------------------------
# Row conversion
# ---------------------------------------------------------------------------


def _to_rate(value: Any) -> float:
    """Read a rate the way a leading-number parse would; anything else is 0."""

    if isinstance(value, str):
        match = _LEADING_FLOAT.match(value)
        if match is None:
            return 0.0
        value = match.group(0)
    try:
        rate = float(value)
    except (TypeError, ValueError):
        return 0.0
    return rate if math.isfinite(rate) else 0.0


def _rate_from_csv_row(row: Mapping[str, str]) -> RateEntry:
    return RateEntry(
        service=row.get("service", ""),
        instrument=row.get("instrument", ""),
        method=row.get("method", ""),
        customer_type=row.get("customerType", ""),
        unit_type=row.get("unitType", ""),
        rate=_to_rate(row.get("rate")),
    )


def _rate_from_json(item: Any, index: int) -> RateEntry:
    if not isinstance(item, dict):
        raise DataLoadError(f"rates[{index}] is not an object")
    try:
        return RateEntry(
            service=str(item["service"]),
            instrument=str(item["instrument"]),
            method=str(item["method"]),
            customer_type=str(item["customerType"]),
            unit_type=str(item["unitType"]),
            rate=_to_rate(item["rate"]),
        )
    except KeyError as exc:
        raise DataLoadError(f"rates[{index}] is missing {exc.args[0]!r}") from exc


def _entries_from_json(doc: Mapping[str, Any], key: str) -> tuple[CatalogEntry, ...]:
    raw = doc.get(key, [])
    if not isinstance(raw, list):
        raise DataLoadError(f"{key!r} must be a list")
    entries: list[CatalogEntry] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict) or "id" not in item or "name" not in item:
            raise DataLoadError(f"{key}[{index}] must have 'id' and 'name'")
        entries.append(CatalogEntry(id=str(item["id"]), name=str(item["name"])))
    return tuple(entries)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------


def load_rate_rows(csv_source: Source) -> list[RateEntry]:
    """Read the rate override CSV; any failure is reported as ``RateLoadWarning``."""

    try:
        text = read_source(csv_source)
    except (OSError, UnicodeDecodeError, requests.RequestException) as exc:
        raise RateLoadWarning(f"Could not read rate CSV {csv_source}: {exc}") from exc
    return [_rate_from_csv_row(row) for row in csv_codec.parse(text)]


def parse_catalog_document(doc: Any, rates: list[RateEntry] | None = None) -> Catalog:
    """Build a ``Catalog`` from a decoded JSON document.

    Non-empty *rates* replace the document's own rate list.
    """

    if not isinstance(doc, dict):
        raise DataLoadError("Catalog JSON must be an object")

    lists = {attr: _entries_from_json(doc, key) for attr, key in _JSON_KEYS.items()}

    if rates:
        return Catalog(**lists, rates=tuple(rates), rates_source="csv")

    raw_rates = doc.get("rates", [])
    if not isinstance(raw_rates, list):
        raise DataLoadError("'rates' must be a list")
    embedded = tuple(_rate_from_json(item, i) for i, item in enumerate(raw_rates))
    return Catalog(**lists, rates=embedded, rates_source="json")


def load_catalog(json_source: Source, csv_source: Source | None = None) -> Catalog:
    """Load the catalog, reading the CSV override first and the JSON second."""

    rates: list[RateEntry] = []
    if csv_source:
        try:
            rates = load_rate_rows(csv_source)
            log.info("Loaded %d rates from %s", len(rates), csv_source)
        except RateLoadWarning as warn:
            log.warning("%s; falling back to rates from the catalog JSON", warn)

    try:
        text = read_source(json_source)
    except (OSError, UnicodeDecodeError, requests.RequestException) as exc:
        raise DataLoadError(f"Failed to load {json_source}: {exc}") from exc

    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DataLoadError(f"Invalid JSON in {json_source}: {exc}") from exc

    catalog = parse_catalog_document(doc, rates)
    if catalog.rates_source == "csv":
        log.info("Replaced catalog rates with %d rows from the rate CSV", len(catalog.rates))
    return catalog


__all__ = [
    "Catalog",
    "CatalogEntry",
    "ENTRY_KINDS",
    "RateEntry",
    "load_catalog",
    "load_rate_rows",
    "parse_catalog_document",
    "read_source",
]
