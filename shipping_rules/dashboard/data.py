"""
Dashboard Data Layer
====================

  1. load_snapshot()  - reads the reference CSVs (cached per directory, 10 min)
  2. init_page()      - sidebar snapshot picker shared by every page

Convention: Polars for all transforms. Convert to pandas only at plot time
via df.to_pandas() in page code.
"""

from pathlib import Path

import plotly.graph_objects as go
import polars as pl
import streamlit as st

from shipping_rules.context import ShippingContext
from shipping_rules.data.loaders import REFERENCE_DIR, load_context
from shipping_rules.data.reference.defaults import CONTEXT_TTL_SECONDS


# =============================================================================
# LOADING
# =============================================================================

@st.cache_data(ttl=CONTEXT_TTL_SECONDS)
def load_snapshot(reference_dir: str) -> ShippingContext:
    """Load and validate a reference snapshot. Cached per directory."""
    path = Path(reference_dir)
    if not path.is_dir():
        st.error(f"Reference directory not found: {path}")
        st.stop()
    try:
        return load_context(path)
    except (FileNotFoundError, ValueError) as e:
        st.error(f"Snapshot could not be loaded:\n\n{e}")
        st.stop()


def init_page() -> ShippingContext:
    """Render the sidebar snapshot picker and return the loaded context."""
    with st.sidebar:
        st.header("Snapshot")
        reference_dir = st.text_input(
            "Reference directory",
            value=st.session_state.get("reference_dir", str(REFERENCE_DIR)),
        )
        st.session_state["reference_dir"] = reference_dir
        if st.button("Reload"):
            load_snapshot.clear()

    context = load_snapshot(reference_dir)

    with st.sidebar:
        st.caption("Rows per table")
        st.dataframe(
            pl.DataFrame(
                {"table": list(context.summary()), "rows": list(context.summary().values())}
            ).to_pandas(),
            hide_index=True,
        )
    return context


# =============================================================================
# FORMATTING
# =============================================================================

def format_amount(minor_units: int | None) -> str:
    """Minor units as a two-decimal amount."""
    if minor_units is None:
        return "-"
    return f"{minor_units / 100:,.2f}"


def zone_labels(context: ShippingContext) -> dict[str, str]:
    """Active zone id -> display label, in sort order."""
    zones = context.zones.filter(pl.col("active")).sort(["sort_order", "id"])
    return {row["id"]: f"{row['name_en'] or row['id']} ({row['id']})" for row in zones.iter_rows(named=True)}


def method_labels(context: ShippingContext) -> dict[str, str]:
    """Active method id -> display label, in sort order."""
    methods = context.methods.filter(pl.col("active")).sort(["sort_order", "id"])
    return {row["id"]: f"{row['name_en'] or row['code']} ({row['code']})" for row in methods.iter_rows(named=True)}


def apply_chart_layout(fig: go.Figure, title: str, x_title: str, y_title: str) -> go.Figure:
    fig.update_layout(
        title=title,
        xaxis_title=x_title,
        yaxis_title=y_title,
        hovermode="x unified",
        margin=dict(l=40, r=20, t=50, b=40),
        height=420,
    )
    return fig
