from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from calculator import PricingCalculator
from errors import DataLoadError, RateNotFoundError, ValidationError
from ledger import Ledger
from selection import Selection

SEL = Selection("S1", "I1", "M1", "C1", "U1")


@pytest.fixture
def calc(json_path: Path) -> PricingCalculator:
    c = PricingCalculator(json_path, ledger=Ledger(clock=lambda: 1))
    c.load_catalog()
    return c


def test_operations_require_a_loaded_catalog(json_path: Path):
    c = PricingCalculator(json_path)
    assert not c.loaded
    with pytest.raises(DataLoadError):
        c.filter_instruments("S1")
    with pytest.raises(DataLoadError):
        c.add_item(SEL, 1)


def test_failed_load_leaves_calculator_unloaded(tmp_path: Path):
    c = PricingCalculator(tmp_path / "missing.json", tmp_path / "missing.csv")
    with pytest.raises(DataLoadError):
        c.load_catalog()
    assert not c.loaded


def test_quote_flow(calc: PricingCalculator):
    assert [e.id for e in calc.filter_instruments("S1")] == ["I1", "I3"]
    assert [e.id for e in calc.filter_methods("S1", "I1")] == ["M2", "M1"]
    assert calc.resolve_rate(SEL) == 10

    item = calc.add_item(SEL, 3)
    assert calc.total() == 30

    filename, text = calc.export_csv(today=date(2025, 1, 31))
    assert filename == "gcr_pricing_2025-01-31.csv"
    lines = text.split("\n")
    assert lines[1].endswith(",3,10.00,30.00")
    assert lines[-1].endswith(",Total,,30.00")

    assert calc.remove_item(item.id) is True
    assert calc.remove_item(item.id) is False
    assert calc.total() == 0


def test_errors_do_not_touch_the_quote(calc: PricingCalculator):
    calc.add_item(SEL, 1)
    with pytest.raises(ValidationError):
        calc.add_item(SEL, 0)
    with pytest.raises(RateNotFoundError):
        calc.add_item(Selection("S2", "I2", "M2", "C2", "U2"), 1)
    assert len(calc.ledger) == 1


def test_export_empty_quote_is_rejected(calc: PricingCalculator):
    with pytest.raises(ValidationError, match="No items to export"):
        calc.export_csv()


def test_csv_override_applies(json_path: Path, csv_path: Path):
    c = PricingCalculator(json_path, csv_path)
    c.load_catalog()
    assert c.resolve_rate(SEL) == 12.5
