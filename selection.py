"""Cascading choice narrowing for the service → instrument → method dropdowns."""

from __future__ import annotations

from dataclasses import dataclass, replace

from catalog import Catalog, CatalogEntry

SELECTION_FIELDS: tuple[str, ...] = (
    "service",
    "instrument",
    "method",
    "customer_type",
    "unit_type",
)


@dataclass(frozen=True)
class Selection:
    """The five keys of a rate lookup; ``""`` means not chosen yet."""

    service: str = ""
    instrument: str = ""
    method: str = ""
    customer_type: str = ""
    unit_type: str = ""

    def as_tuple(self) -> tuple[str, str, str, str, str]:
        return (self.service, self.instrument, self.method, self.customer_type, self.unit_type)

    def is_complete(self) -> bool:
        return all(self.as_tuple())

    def with_service(self, service_id: str) -> Selection:
        if service_id == self.service:
            return self
        return replace(self, service=service_id, instrument="", method="")

    def with_instrument(self, instrument_id: str) -> Selection:
        if instrument_id == self.instrument:
            return self
        return replace(self, instrument=instrument_id, method="")

    def with_method(self, method_id: str) -> Selection:
        return replace(self, method=method_id)

    def with_customer_type(self, customer_type_id: str) -> Selection:
        return replace(self, customer_type=customer_type_id)

    def with_unit_type(self, unit_type_id: str) -> Selection:
        return replace(self, unit_type=unit_type_id)


def _filter_entries(entries: tuple[CatalogEntry, ...], wanted: set[str]) -> list[CatalogEntry]:
    return [entry for entry in entries if entry.id in wanted]


def instruments_for(catalog: Catalog, service_id: str) -> list[CatalogEntry]:
    """Instruments that have at least one rate for *service_id*, in catalog order."""

    if not service_id:
        return []
    wanted = {r.instrument for r in catalog.rates if r.service == service_id}
    return _filter_entries(catalog.instruments, wanted)


def methods_for(catalog: Catalog, service_id: str, instrument_id: str) -> list[CatalogEntry]:
    """Methods priced for the service/instrument pair, in catalog order."""

    if not service_id or not instrument_id:
        return []
    wanted = {
        r.method
        for r in catalog.rates
        if r.service == service_id and r.instrument == instrument_id
    }
    return _filter_entries(catalog.methods, wanted)


def apply_change(previous: Selection, submitted: Selection) -> Selection:
    """Merge a submitted form state onto *previous*, resetting stale downstream keys.

    A UI posts all five dropdowns at once, so the instrument and method it
    sends may belong to the old service. Upstream changes win.
    """

    if submitted.service != previous.service:
        current = previous.with_service(submitted.service)
    elif submitted.instrument != previous.instrument:
        current = previous.with_instrument(submitted.instrument)
    else:
        current = previous.with_method(submitted.method)
    return current.with_customer_type(submitted.customer_type).with_unit_type(submitted.unit_type)


__all__ = ["SELECTION_FIELDS", "Selection", "apply_change", "instruments_for", "methods_for"]
