"""Shared fixtures: a small catalog written to ``tmp_path`` and built in memory."""

from __future__ import annotations

import json
from itertools import count
from pathlib import Path
from typing import Any

import pytest

from catalog import Catalog, parse_catalog_document
from ledger import Ledger

CATALOG_DOC: dict[str, Any] = {
    "services": [
        {"id": "S1", "name": "Proteomics Lab"},
        {"id": "S2", "name": "Imaging, Light & Electron"},
    ],
    "instruments": [
        {"id": "I2", "name": "Confocal"},
        {"id": "I1", "name": "Orbitrap"},
        {"id": "I3", "name": "Q-TOF"},
    ],
    "methods": [
        {"id": "M2", "name": "Targeted"},
        {"id": "M1", "name": "Label-free"},
    ],
    "customerTypes": [
        {"id": "C1", "name": "Internal"},
        {"id": "C2", "name": "Industry"},
    ],
    "unitTypes": [
        {"id": "U1", "name": "Sample"},
        {"id": "U2", "name": "Hour"},
    ],
    "rates": [
        {"service": "S1", "instrument": "I1", "method": "M1", "customerType": "C1", "unitType": "U1", "rate": 10},
        {"service": "S1", "instrument": "I1", "method": "M1", "customerType": "C1", "unitType": "U1", "rate": 99},
        {"service": "S1", "instrument": "I3", "method": "M2", "customerType": "C2", "unitType": "U1", "rate": 42.5},
        {"service": "S1", "instrument": "I1", "method": "M2", "customerType": "C2", "unitType": "U2", "rate": 7.25},
        {"service": "S2", "instrument": "I2", "method": "M1", "customerType": "C1", "unitType": "U2", "rate": 60},
    ],
}

RATES_CSV = (
    "service,instrument,method,customerType,unitType,rate\n"
    "S1,I1,M1,C1,U1,12.5\n"
    "S2,I2,M2,C2,U2,80\n"
)


@pytest.fixture
def catalog_doc() -> dict[str, Any]:
    return json.loads(json.dumps(CATALOG_DOC))


@pytest.fixture
def catalog(catalog_doc: dict[str, Any]) -> Catalog:
    return parse_catalog_document(catalog_doc)


@pytest.fixture
def json_path(tmp_path: Path, catalog_doc: dict[str, Any]) -> Path:
    path = tmp_path / "data.json"
    path.write_text(json.dumps(catalog_doc), encoding="utf-8")
    return path


@pytest.fixture
def csv_path(tmp_path: Path) -> Path:
    path = tmp_path / "rates.csv"
    path.write_text(RATES_CSV, encoding="utf-8")
    return path


@pytest.fixture
def ledger() -> Ledger:
    # Every item is created in the same "millisecond".
    return Ledger(clock=lambda: 1_700_000_000_000)


@pytest.fixture
def ticking_ledger() -> Ledger:
    ticks = count(1_700_000_000_000, 5)
    return Ledger(clock=lambda: next(ticks))
