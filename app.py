from __future__ import annotations

import os
from typing import Any, NamedTuple

from flask import Flask, Response, jsonify, render_template_string, request

from calculator import PricingCalculator
from catalog import CatalogEntry
from errors import DataLoadError, PricingError
from ledger import format_quantity
from logging_setup import configure_logging, get_logger
from pricing import format_money, rate_display
from selection import Selection, apply_change
from template import HTML_TEMPLATE

log = get_logger("gcr_pricing.app")


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
CATALOG_JSON = os.environ.get("CATALOG_JSON", os.path.join(DATA_DIR, "data.json"))
RATES_CSV = os.environ.get("RATES_CSV", os.path.join(DATA_DIR, "rates.csv"))

LOAD_FAILED_MESSAGE = (
    "Failed to load pricing data. Please ensure the catalog JSON exists "
    "and is reachable from the server."
)


class SelectField(NamedTuple):
    name: str
    label: str
    attr: str
    catalog_kind: str


SELECT_FIELDS: tuple[SelectField, ...] = (
    SelectField("service", "Laboratory", "service", "services"),
    SelectField("instrument", "Instrument", "instrument", "instruments"),
    SelectField("method", "Method", "method", "methods"),
    SelectField("customerType", "Customer Type", "customer_type", "customer_types"),
    SelectField("unitType", "Unit Type", "unit_type", "unit_types"),
)


# ---------------------------------------------------------------------------
# Request parsing
# ---------------------------------------------------------------------------


def _selection_from(args: Any) -> Selection:
    return Selection(**{f.attr: (args.get(f.name) or "").strip() for f in SELECT_FIELDS})


def _previous_selection(args: Any, submitted: Selection) -> Selection:
    return Selection(
        service=(args.get("prev_service") or "").strip(),
        instrument=(args.get("prev_instrument") or "").strip(),
        method=submitted.method,
        customer_type=submitted.customer_type,
        unit_type=submitted.unit_type,
    )


def _to_item_id(raw: str | None) -> int:
    try:
        return int(raw or "")
    except ValueError:
        raise ValueError("item_id must be an integer") from None


def _entry_dicts(entries: list[CatalogEntry]) -> list[dict[str, str]]:
    return [{"id": e.id, "name": e.name} for e in entries]


# ---------------------------------------------------------------------------
# View helpers
# ---------------------------------------------------------------------------


def _field_options(calc: PricingCalculator, selection: Selection) -> list[dict[str, Any]]:
    catalog = calc.catalog
    options = {
        "services": list(catalog.services),
        "instruments": calc.filter_instruments(selection.service),
        "methods": calc.filter_methods(selection.service, selection.instrument),
        "customer_types": list(catalog.customer_types),
        "unit_types": list(catalog.unit_types),
    }
    return [
        {
            "name": f.name,
            "label": f.label,
            "value": getattr(selection, f.attr),
            "options": options[f.catalog_kind],
        }
        for f in SELECT_FIELDS
    ]


def _item_rows(calc: PricingCalculator) -> list[dict[str, Any]]:
    catalog = calc.catalog
    return [
        {
            "id": item.id,
            "service": catalog.display_name("services", item.service),
            "instrument": catalog.display_name("instruments", item.instrument),
            "method": catalog.display_name("methods", item.method),
            "customer_type": catalog.display_name("customer_types", item.customer_type),
            "unit_type": catalog.display_name("unit_types", item.unit_type),
            "quantity": format_quantity(item.quantity),
            "rate": format_money(item.rate),
            "price": format_money(item.price),
        }
        for item in calc.ledger
    ]


def _render_index(
    calc: PricingCalculator,
    selection: Selection,
    quantity: str,
    error_msgs: list[str],
    status: int = 200,
) -> tuple[str, int]:
    page = render_template_string(
        HTML_TEMPLATE,
        fatal_error=None,
        fields=_field_options(calc, selection),
        selection=selection,
        quantity=quantity,
        rate_display=rate_display(calc.catalog, selection),
        rates_source="rates CSV" if calc.catalog.rates_source == "csv" else "catalog JSON",
        items=_item_rows(calc),
        total=format_money(calc.total()),
        error_msgs=error_msgs,
    )
    return page, status


def _render_unavailable() -> tuple[str, int]:
    return render_template_string(HTML_TEMPLATE, fatal_error=LOAD_FAILED_MESSAGE), 503


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------


def create_app(calculator: PricingCalculator | None = None) -> Flask:
    app = Flask(__name__)

    calc = calculator if calculator is not None else PricingCalculator(CATALOG_JSON, RATES_CSV or None)
    if not calc.loaded:
        try:
            calc.load_catalog()
        except DataLoadError:
            log.exception("Error loading catalog from %s", calc.json_source)
    app.config["CALCULATOR"] = calc

    def _calc() -> PricingCalculator:
        return app.config["CALCULATOR"]

    @app.route("/", methods=["GET", "POST"])
    def index():
        calc = _calc()
        if not calc.loaded:
            return _render_unavailable()

        error_msgs: list[str] = []
        submitted = _selection_from(request.values)
        quantity = request.form.get("quantity", "")
        status = 200

        if request.method == "POST":
            op = request.form.get("op", "add")
            selection = apply_change(_previous_selection(request.form, submitted), submitted)
            try:
                if op == "add":
                    calc.add_item(selection, quantity)
                    selection, quantity = Selection(), ""
                elif op == "remove":
                    calc.remove_item(_to_item_id(request.form.get("item_id")))
                elif op == "clear":
                    calc.ledger.clear()
                elif op != "select":
                    raise ValueError(f"Unknown action: {op}")
            except (PricingError, ValueError) as exc:
                error_msgs = [str(exc)]
                status = 400
        else:
            selection = submitted

        return _render_index(calc, selection, quantity, error_msgs, status)

    @app.route("/export.csv")
    def export_csv():
        calc = _calc()
        try:
            filename, text = calc.export_csv()
        except DataLoadError as exc:
            return Response(str(exc), status=503, mimetype="text/plain")
        except PricingError as exc:
            return Response(str(exc), status=400, mimetype="text/plain")
        return Response(
            text,
            mimetype="text/csv",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    # -----------------------------------------------------------------------
    # JSON endpoints
    # -----------------------------------------------------------------------

    @app.route("/api/instruments")
    def api_instruments():
        calc = _calc()
        try:
            entries = calc.filter_instruments(request.args.get("service", ""))
        except DataLoadError as exc:
            return jsonify({"error": str(exc)}), 503
        return jsonify(_entry_dicts(entries))

    @app.route("/api/methods")
    def api_methods():
        calc = _calc()
        try:
            entries = calc.filter_methods(
                request.args.get("service", ""), request.args.get("instrument", "")
            )
        except DataLoadError as exc:
            return jsonify({"error": str(exc)}), 503
        return jsonify(_entry_dicts(entries))

    @app.route("/api/rate")
    def api_rate():
        calc = _calc()
        selection = _selection_from(request.args)
        try:
            rate = calc.resolve_rate(selection)
            display = rate_display(calc.catalog, selection)
        except DataLoadError as exc:
            return jsonify({"error": str(exc)}), 503
        return jsonify({"rate": rate, "display": display})

    @app.route("/api/items")
    def api_items():
        calc = _calc()
        if not calc.loaded:
            return jsonify({"error": "Catalog not loaded."}), 503
        return jsonify({"items": _item_rows(calc), "total": format_money(calc.total())})

    return app


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


if __name__ == "__main__":
    configure_logging()
    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "5000"))
    debug = os.environ.get("DEBUG", "0") in ["1", "true", "True"]
    create_app().run(host=host, port=port, debug=debug, threaded=False)
