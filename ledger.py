"""Quote ledger: priced line items, running total and CSV export."""

from __future__ import annotations

import math
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

from catalog import Catalog
from csv_codec import format_row
from errors import RateNotFoundError, ValidationError
from logging_setup import get_logger
from pricing import format_money, resolve_selection
from selection import Selection

log = get_logger("gcr_pricing.ledger")

EXPORT_HEADERS: tuple[str, ...] = (
    "Laboratory",
    "Instrument",
    "Method",
    "Customer Type",
    "Unit Type",
    "Quantity",
    "Rate ($)",
    "Price ($)",
)


@dataclass(frozen=True)
class LineItem:
    id: int
    service: str
    instrument: str
    method: str
    customer_type: str
    unit_type: str
    quantity: float
    rate: float
    price: float

    @property
    def selection(self) -> Selection:
        return Selection(self.service, self.instrument, self.method, self.customer_type, self.unit_type)


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def parse_quantity(value: Any) -> float:
    """Coerce *value* to a finite quantity greater than zero."""

    if isinstance(value, bool) or value is None:
        raise ValidationError("Please fill in all fields with valid values.")
    try:
        quantity = float(value)
    except (TypeError, ValueError):
        raise ValidationError("Please fill in all fields with valid values.") from None
    if not math.isfinite(quantity) or quantity <= 0:
        raise ValidationError("Please fill in all fields with valid values.")
    return quantity


def format_quantity(quantity: float) -> str:
    if float(quantity).is_integer():
        return str(int(quantity))
    return repr(float(quantity))


class Ledger:
    """Ordered line items of the current quote.

    Items are only appended or removed by id; the total is recomputed from
    the items on each call.
    """

    def __init__(self, clock: Callable[[], int] = _now_ms):
        self._items: list[LineItem] = []
        self._clock = clock
        self._last_id = 0

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[LineItem]:
        return iter(tuple(self._items))

    @property
    def items(self) -> tuple[LineItem, ...]:
        return tuple(self._items)

    def _next_id(self) -> int:
        item_id = max(int(self._clock()), self._last_id + 1)
        self._last_id = item_id
        return item_id

    def add_item(self, catalog: Catalog, selection: Selection, quantity: Any) -> LineItem:
        if not selection.is_complete():
            raise ValidationError("Please fill in all fields with valid values.")
        qty = parse_quantity(quantity)

        rate = resolve_selection(catalog, selection)
        if rate is None:
            raise RateNotFoundError(selection.as_tuple())

        item = LineItem(
            self._next_id(),
            *selection.as_tuple(),
            quantity=qty,
            rate=rate,
            price=rate * qty,
        )
        self._items.append(item)
        log.debug("Added item %d: %s x %s @ %s", item.id, selection.as_tuple(), qty, rate)
        return item

    def remove_item(self, item_id: int) -> bool:
        for index, item in enumerate(self._items):
            if item.id == item_id:
                del self._items[index]
                log.debug("Removed item %d", item_id)
                return True
        return False

    def clear(self) -> None:
        self._items.clear()

    def total(self) -> float:
        return sum(item.price for item in self._items)

    def to_csv(self, catalog: Catalog) -> str:
        lines = [format_row(EXPORT_HEADERS)]
        for item in self._items:
            lines.append(
                format_row(
                    [
                        catalog.display_name("services", item.service),
                        catalog.display_name("instruments", item.instrument),
                        catalog.display_name("methods", item.method),
                        catalog.display_name("customer_types", item.customer_type),
                        catalog.display_name("unit_types", item.unit_type),
                        format_quantity(item.quantity),
                        format_money(item.rate),
                        format_money(item.price),
                    ]
                )
            )
        lines.append(format_row(["", "", "", "", "", "Total", "", format_money(self.total())]))
        return "\n".join(lines)


def export_filename(today: date | None = None) -> str:
    day = today or datetime.now(timezone.utc).date()
    return f"gcr_pricing_{day.isoformat()}.csv"


__all__ = [
    "EXPORT_HEADERS",
    "LineItem",
    "Ledger",
    "export_filename",
    "format_quantity",
    "parse_quantity",
]
