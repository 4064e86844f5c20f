from __future__ import annotations

from catalog import Catalog
from selection import Selection


def resolve_rate(
    catalog: Catalog,
    service: str,
    instrument: str,
    method: str,
    customer_type: str,
    unit_type: str,
) -> float | None:
    """Return the rate of the first entry matching all five keys, or ``None``.

    Matching is exact and case-sensitive. Later duplicates of a key are never
    reached. Any empty key yields ``None``.
    """

    key = (service, instrument, method, customer_type, unit_type)
    if not all(key):
        return None
    for entry in catalog.rates:
        if entry.key == key:
            return entry.rate
    return None


def resolve_selection(catalog: Catalog, selection: Selection) -> float | None:
    return resolve_rate(catalog, *selection.as_tuple())


def format_money(value: float) -> str:
    return f"{value:.2f}"


def rate_display(catalog: Catalog, selection: Selection) -> str:
    if not selection.is_complete():
        return "--"
    rate = resolve_selection(catalog, selection)
    if rate is None:
        return "N/A"
    return f"${format_money(rate)}"
