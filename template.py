HTML_TEMPLATE = """<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>GCR Pricing Calculator</title>
<meta name="viewport" content="width=device-width, initial-scale=1">
<style>
  :root{--bg:#fff;--ink:#0b0f17;--muted:#6b7280;--line:#e5e7eb;--bad:#b91c1c;--sticky:#0b0f17;--sticky-ink:#fff}
  html,body{margin:0;padding:0;background:var(--bg);color:var(--ink);font:14px/1.4 system-ui,-apple-system,Segoe UI,Roboto,Arial,sans-serif}
  .container{max-width:1100px;margin:0 auto;padding:16px}
  header{display:flex;align-items:flex-end;justify-content:space-between;gap:12px;margin-bottom:12px}
  h1{font-size:20px;margin:0}
  .desc{color:var(--muted);font-size:12px}
  .btn{border:1px solid var(--line);background:#f8fafc;color:#111827;border-radius:6px;padding:6px 10px;cursor:pointer;text-decoration:none}
  .btn[disabled],.btn.disabled{opacity:.5;pointer-events:none}
  form.pick{display:grid;grid-template-columns:repeat(auto-fill,minmax(200px,1fr));gap:10px;margin-bottom:12px}
  form.pick label{display:flex;flex-direction:column;font-size:12px;color:#374151;gap:4px}
  select,input{font:inherit;padding:6px;border:1px solid var(--line);border-radius:6px}
  table{width:100%;border-collapse:collapse}
  thead th{background:#fafafa;border-bottom:1px solid var(--line);padding:8px;text-align:left;font-size:12px;color:#374151}
  tbody td{border-bottom:1px solid var(--line);padding:8px}
  .align-right{text-align:right}
  .err-msg{color:var(--bad);background:#fff1f2;border:1px solid #fecdd3;border-radius:6px;padding:8px;margin-bottom:12px}
  .totals{margin-top:10px;border:1px solid var(--line);border-radius:8px;overflow:hidden}
  .totals .row{display:flex;justify-content:space-between;padding:8px 12px}
  .strong{font-weight:600}
  .empty-message{color:var(--muted)}
  .sticky-total{position:sticky;top:0;z-index:10;background:var(--sticky);color:var(--sticky-ink);display:flex;justify-content:center;align-items:center;height:44px;letter-spacing:.2px}
</style>
</head>
<body>
{% if fatal_error %}
<div class="container">
  <h1>Pricing data unavailable</h1>
  <div class="err-msg">{{ fatal_error }}</div>
  <p class="desc">The calculator needs the catalog JSON to start. Check the CATALOG_JSON setting and restart the server.</p>
</div>
{% else %}
{% macro keep_selection() -%}
  <input type="hidden" name="prev_service" value="{{ selection.service }}">
  <input type="hidden" name="prev_instrument" value="{{ selection.instrument }}">
  {% for fld in fields %}<input type="hidden" name="{{ fld.name }}" value="{{ fld.value }}">{% endfor %}
  <input type="hidden" name="quantity" value="{{ quantity }}">
{%- endmacro %}
<div class="sticky-total">Total: ${{ total }}</div>
<div class="container">
  <header>
    <div>
      <h1>GCR Pricing Calculator</h1>
      <div class="desc">Rates from {{ rates_source }}. Pick a combination, add it to the quote, export as CSV.</div>
    </div>
    <div class="controls">
      <a class="btn{% if not items %} disabled{% endif %}" id="exportButton" href="{{ url_for('export_csv') }}">Export CSV</a>
    </div>
  </header>

  {% for msg in error_msgs %}<div class="err-msg">{{ msg }}</div>{% endfor %}

  <form class="pick" method="post" id="pricingForm">
    <input type="hidden" name="prev_service" value="{{ selection.service }}">
    <input type="hidden" name="prev_instrument" value="{{ selection.instrument }}">
    {% for fld in fields %}
    <label>{{ fld.label }}
      <select name="{{ fld.name }}" onchange="this.form.op.value='select';this.form.submit()">
        <option value="">Select {{ fld.label|lower }}</option>
        {% for opt in fld.options %}
        <option value="{{ opt.id }}"{% if opt.id == fld.value %} selected{% endif %}>{{ opt.name }}</option>
        {% endfor %}
      </select>
    </label>
    {% endfor %}
    <label>Quantity
      <input type="number" name="quantity" min="0" step="any" value="{{ quantity }}">
    </label>
    <label>Rate
      <input type="text" id="rateDisplay" value="{{ rate_display }}" readonly>
    </label>
    <input type="hidden" name="op" value="add">
    <label>&nbsp;<button class="btn" type="submit">Add item</button></label>
  </form>

  <section id="itemsList">
  {% if not items %}
    <p class="empty-message">No items added yet.</p>
  {% else %}
    <table>
      <thead><tr>
        <th>Laboratory</th><th>Instrument</th><th>Method</th><th>Customer Type</th><th>Unit Type</th>
        <th class="align-right">Quantity</th><th class="align-right">Rate</th><th class="align-right">Price</th><th></th>
      </tr></thead>
      <tbody>
      {% for row in items %}
        <tr>
          <td>{{ row.service }}</td><td>{{ row.instrument }}</td><td>{{ row.method }}</td>
          <td>{{ row.customer_type }}</td><td>{{ row.unit_type }}</td>
          <td class="align-right">{{ row.quantity }}</td>
          <td class="align-right">${{ row.rate }} per {{ row.unit_type|lower }}</td>
          <td class="align-right">${{ row.price }}</td>
          <td>
            <form method="post">
              <input type="hidden" name="op" value="remove">
              <input type="hidden" name="item_id" value="{{ row.id }}">
              {{ keep_selection() }}
              <button class="btn remove-button" type="submit">Remove</button>
            </form>
          </td>
        </tr>
      {% endfor %}
      </tbody>
    </table>
    <form method="post" style="margin-top:8px">
      <input type="hidden" name="op" value="clear">
      {{ keep_selection() }}
      <button class="btn" type="submit">New quote</button>
    </form>
  {% endif %}
  </section>

  <section class="totals" aria-live="polite">
    <div class="row strong"><div>Total</div><div id="totalCost">${{ total }}</div></div>
  </section>
</div>
{% endif %}
</body>
</html>
"""
