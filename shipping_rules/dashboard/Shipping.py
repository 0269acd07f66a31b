"""
Shipping Rules Dashboard
========================

Multi-page Streamlit app for reviewing a reference snapshot before it goes
live.

Run with:
    streamlit run shipping_rules/dashboard/Shipping.py
"""

import polars as pl
import streamlit as st

from shipping_rules.dashboard.data import init_page
from shipping_rules.version import VERSION

# =============================================================================
# PAGE CONFIG
# =============================================================================

st.set_page_config(
    page_title="Shipping Rules",
    page_icon="📦",
    layout="wide",
    initial_sidebar_state="expanded",
)

context = init_page()

# =============================================================================
# LANDING PAGE
# =============================================================================

st.title("Shipping Rules")
st.markdown(
    "Review zones, rate rules, free-shipping thresholds and option prices of a "
    "reference snapshot. Use the **sidebar** to pick a snapshot directory."
)
st.caption(f"Calculator version {VERSION}")

st.markdown("---")

col1, col2, col3, col4 = st.columns(4)
col1.metric("Active zones", context.zones.filter(pl.col("active")).height)
col2.metric("Mapped countries", context.zone_countries["country_code"].n_unique())
col3.metric("Active methods", context.methods.filter(pl.col("active")).height)
col4.metric("Active rate rules", context.rate_rules.filter(pl.col("active")).height)

st.markdown("---")

col1, col2 = st.columns(2)

with col1:
    st.page_link("pages/1_Rate_Card.py", label="Rate Card", icon="📈")
    st.caption("Base price by subtotal for a zone, method and weight")

with col2:
    st.page_link("pages/2_Quote.py", label="Quote a Cart", icon="🧮")
    st.caption("Run the calculator on a hand-built cart across all methods")
