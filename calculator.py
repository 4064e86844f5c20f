"""The operations a UI may call, bundled around one catalog and one quote."""

from __future__ import annotations

from datetime import date
from typing import Any

from catalog import Catalog, CatalogEntry, Source, load_catalog
from errors import DataLoadError, ValidationError
from ledger import Ledger, LineItem, export_filename
from pricing import resolve_rate
from selection import Selection, instruments_for, methods_for


class PricingCalculator:
    def __init__(
        self,
        json_source: Source,
        csv_source: Source | None = None,
        *,
        ledger: Ledger | None = None,
    ):
        self.json_source = json_source
        self.csv_source = csv_source
        self.ledger = ledger if ledger is not None else Ledger()
        self._catalog: Catalog | None = None

    @property
    def loaded(self) -> bool:
        return self._catalog is not None

    @property
    def catalog(self) -> Catalog:
        if self._catalog is None:
            raise DataLoadError("Catalog not loaded.")
        return self._catalog

    def load_catalog(self) -> Catalog:
        self._catalog = load_catalog(self.json_source, self.csv_source)
        return self._catalog

    def filter_instruments(self, service_id: str) -> list[CatalogEntry]:
        return instruments_for(self.catalog, service_id)

    def filter_methods(self, service_id: str, instrument_id: str) -> list[CatalogEntry]:
        return methods_for(self.catalog, service_id, instrument_id)

    def resolve_rate(self, selection: Selection) -> float | None:
        return resolve_rate(self.catalog, *selection.as_tuple())

    def add_item(self, selection: Selection, quantity: Any) -> LineItem:
        return self.ledger.add_item(self.catalog, selection, quantity)

    def remove_item(self, item_id: int) -> bool:
        return self.ledger.remove_item(item_id)

    def total(self) -> float:
        return self.ledger.total()

    def export_csv(self, today: date | None = None) -> tuple[str, str]:
        """Return ``(filename, csv_text)`` for the current quote."""

        catalog = self.catalog
        if not len(self.ledger):
            raise ValidationError("No items to export.")
        return export_filename(today), self.ledger.to_csv(catalog)
