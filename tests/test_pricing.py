import pytest

from pricing import format_money, rate_display, resolve_rate
from selection import Selection


def test_first_matching_entry_wins(catalog):
    assert resolve_rate(catalog, "S1", "I1", "M1", "C1", "U1") == 10


def test_exact_case_sensitive_match(catalog):
    assert resolve_rate(catalog, "S1", "I3", "M2", "C2", "U1") == 42.5
    assert resolve_rate(catalog, "s1", "I3", "M2", "C2", "U1") is None
    assert resolve_rate(catalog, "S1 ", "I3", "M2", "C2", "U1") is None


@pytest.mark.parametrize("blank", range(5))
def test_any_empty_key_is_not_found(catalog, blank):
    key = ["S1", "I1", "M1", "C1", "U1"]
    key[blank] = ""
    assert resolve_rate(catalog, *key) is None


def test_unpriced_combination_is_not_found(catalog):
    assert resolve_rate(catalog, "S2", "I2", "M1", "C2", "U2") is None


def test_resolution_is_repeatable(catalog):
    key = ("S1", "I1", "M2", "C2", "U2")
    assert resolve_rate(catalog, *key) == resolve_rate(catalog, *key) == 7.25


def test_rate_display(catalog):
    assert rate_display(catalog, Selection("S1", "I1", "M1", "C1", "")) == "--"
    assert rate_display(catalog, Selection("S1", "I1", "M1", "C1", "U2")) == "N/A"
    assert rate_display(catalog, Selection("S1", "I1", "M2", "C2", "U2")) == "$7.25"


def test_format_money():
    assert format_money(30) == "30.00"
    assert format_money(1234.5) == "1234.50"
