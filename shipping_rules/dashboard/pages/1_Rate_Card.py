"""
Page 1: Rate Card
=================

Base shipping price across subtotals for one zone, method and weight.
"""

import plotly.graph_objects as go
import polars as pl
import streamlit as st

from shipping_rules.dashboard.data import (
    apply_chart_layout,
    format_amount,
    init_page,
    method_labels,
    zone_labels,
)
from shipping_rules.rate_card import build_rate_card, rate_rule_table, subtotal_breakpoints

st.set_page_config(page_title="Rate Card | Shipping", layout="wide")
st.title("Rate Card")

# ---------------------------------------------------------------------------
context = init_page()

zones = zone_labels(context)
methods = method_labels(context)
if not zones or not methods:
    st.warning("Snapshot has no active zones or methods.")
    st.stop()

col1, col2, col3 = st.columns(3)
zone_id = col1.selectbox("Zone", list(zones), format_func=zones.get)
method_id = col2.selectbox("Method", list(methods), format_func=methods.get)
weight_points = col3.number_input("Weight points", min_value=0, value=2, step=1)

breakpoints = subtotal_breakpoints(context, zone_id, method_id)
upper = max(breakpoints) + 5000
subtotals = sorted(set(breakpoints) | set(range(0, upper + 1, 500)))

card = build_rate_card(context, zone_id, method_id, int(weight_points), subtotals)

# ---------------------------------------------------------------------------
# Chart
# ---------------------------------------------------------------------------
plot_df = card.with_columns((pl.col("subtotal") / 100).alias("subtotal_major")).to_pandas()

fig = go.Figure()
fig.add_trace(go.Scatter(
    x=plot_df["subtotal_major"],
    y=plot_df["base_price"] / 100,
    mode="lines",
    line_shape="hv",
    name="Base price",
))
free = plot_df[plot_df["is_free_shipping"]]
if len(free) > 0:
    fig.add_vline(
        x=free["subtotal_major"].min(),
        line_dash="dash",
        annotation_text="Free shipping",
    )
apply_chart_layout(fig, "Base price by subtotal", "Subtotal", "Base price")
st.plotly_chart(fig, use_container_width=True)

unmatched = card.filter(pl.col("base_price").is_null() & ~pl.col("is_free_shipping"))
if unmatched.height > 0:
    st.warning(
        f"No rate rule applies for {unmatched.height} of {card.height} sampled subtotals "
        f"(from {format_amount(unmatched['subtotal'].min())})."
    )

# ---------------------------------------------------------------------------
# Rules
# ---------------------------------------------------------------------------
st.subheader("Rules")
rules = rate_rule_table(context).filter(
    (pl.col("zone_id") == zone_id) & (pl.col("method_id") == method_id)
)
st.dataframe(rules.to_pandas(), hide_index=True, use_container_width=True)
