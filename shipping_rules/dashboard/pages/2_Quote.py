"""
Page 2: Quote a Cart
====================

Run the calculator on a hand-built cart and compare every active method.
"""

import pandas as pd
import polars as pl
import streamlit as st

from shipping_rules.calculate_shipping import quote_methods
from shipping_rules.dashboard.data import format_amount, init_page
from shipping_rules.data.reference.defaults import SHIPMENT_PREFERENCES
from shipping_rules.models import NO_ZONE, CartLineItem, SelectedOptions, ShippingCalcRequest

st.set_page_config(page_title="Quote | Shipping", layout="wide")
st.title("Quote a Cart")

# ---------------------------------------------------------------------------
context = init_page()

size_classes = context.size_classes.filter(pl.col("active")).sort("sort_order")["code"].to_list()

col1, col2 = st.columns(2)
country_code = col1.text_input("Destination country", value="FR")
preference = col2.radio("Shipment", SHIPMENT_PREFERENCES, horizontal=True)

col1, col2, col3 = st.columns(3)
options = SelectedOptions(
    insurance=col1.checkbox("Insurance"),
    signature=col2.checkbox("Signature"),
    gift_wrap=col3.checkbox("Gift wrap"),
)

st.subheader("Cart")
cart = st.data_editor(
    pl.DataFrame({
        "product_id": ["P1"],
        "quantity": [1],
        "unit_price": [4500],
        "made_to_order": [False],
        "lead_time_days": [None],
        "size_class_code": [size_classes[0] if size_classes else None],
    }, schema_overrides={"lead_time_days": pl.Int64}).to_pandas(),
    num_rows="dynamic",
    use_container_width=True,
)

try:
    items = [
        CartLineItem(
            product_id=str(row["product_id"]),
            quantity=int(row["quantity"]),
            unit_price=int(row["unit_price"]),
            made_to_order=False if pd.isna(row["made_to_order"]) else bool(row["made_to_order"]),
            lead_time_days=None if pd.isna(row["lead_time_days"]) else int(row["lead_time_days"]),
            size_class_code=None if pd.isna(row["size_class_code"]) else row["size_class_code"],
        )
        for row in cart.to_dict("records")
        if not pd.isna(row["product_id"]) and row["product_id"]
    ]
except (TypeError, ValueError) as e:
    st.error(f"Invalid cart line: {e}")
    st.stop()

request = ShippingCalcRequest(
    items=items,
    country_code=country_code,
    method_id="",
    options=options,
    shipment_preference=preference,
)

# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
st.subheader("Methods")
rows = []
quotes = quote_methods(request, context)
for method, result in quotes:
    split = result.split_details
    rows.append({
        "method": method.code,
        "shipping": format_amount(result.shipping_price),
        "options": format_amount(result.options_price),
        "free": result.is_free_shipping,
        "eta": f"{result.eta_min_days}-{result.eta_max_days} d",
        "lead_time_days": result.lead_time_days,
        "ready_leg": format_amount(split.ready_shipment.shipping_price) if split else "",
        "made_to_order_leg": format_amount(split.made_to_order_shipment.shipping_price) if split else "",
        "error": result.error or "",
    })

if not rows:
    st.warning("Snapshot has no active methods.")
    st.stop()

st.dataframe(pl.DataFrame(rows).to_pandas(), hide_index=True, use_container_width=True)

first = quotes[0][1]
if first.error == NO_ZONE:
    st.error(f"No active shipping zone for country {country_code!r}.")
elif first.customs_notice:
    st.info("Customs duties may apply for this destination.")
