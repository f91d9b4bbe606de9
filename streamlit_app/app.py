from __future__ import annotations

from functools import partial

import altair as alt
import pandas as pd
import streamlit as st

from invoice_pipeline.aggregate.cards import build_card_summary, server_card_summary
from invoice_pipeline.aggregate.periods import aggregate
from invoice_pipeline.config import get_settings
from invoice_pipeline.download.coordinator import DownloadCoordinator
from invoice_pipeline.errors import InvoiceFetchError
from invoice_pipeline.frames import aggregates_to_frame, month_columns
from invoice_pipeline.ingest.documents import retrieve_and_save_document
from invoice_pipeline.ingest.fetch_invoices import (
    fetch_all_records,
    fetch_records_by_search,
    fetch_summary_for_year,
)
from invoice_pipeline.logging_config import configure_logging
from invoice_pipeline.models import CardSummary, SearchFilter
from invoice_pipeline.pivot.units import document_name, filter_records, group_by_unit
from invoice_pipeline.view_state import ViewState

# =====================================================
# Page config
# =====================================================
st.set_page_config(page_title="Energy Invoices Dashboard", layout="wide")
st.title("⚡ Energy Invoices Dashboard")

configure_logging()

try:
    settings = get_settings()
except RuntimeError as exc:
    st.error(str(exc))
    st.stop()


# =====================================================
# Shared state
# =====================================================
@st.cache_resource
def download_coordinator() -> DownloadCoordinator:
    """One coordinator for every session: a single download at a time."""
    return DownloadCoordinator()


def view_state(name: str) -> ViewState:
    """Return the per-session `ViewState` stored under `name`."""
    if name not in st.session_state:
        st.session_state[name] = ViewState()
    return st.session_state[name]


# =====================================================
# Helpers
# =====================================================
def render_cards(cards: CardSummary) -> None:
    """Display the card metrics with their month-over-month comparison.

    Args:
        cards: Card summary from local aggregates or the server payload.
    """
    cols = st.columns(len(cards.metrics))
    for col, m in zip(cols, cards.metrics):
        with col:
            delta = None if m.comparison.percentage is None else m.comparison.percentage_text
            st.metric(f"{m.title} ({m.unit})" if m.unit else m.title, f"{m.current:,.2f}", delta)
            st.caption(f"{m.comparison.percentage_text} vs previous month")


def render_charts(series: pd.DataFrame) -> None:
    """Draw the energy bar chart and the financial line chart."""
    month_order = list(series["label"])

    energy = series.melt(
        id_vars="label",
        value_vars=["total_consumption_kwh", "total_compensated_kwh"],
        var_name="metric",
        value_name="kwh",
    )
    chart_energy = (
        alt.Chart(energy)
        .mark_bar()
        .encode(
            x=alt.X("label:N", sort=month_order, title="Month"),
            xOffset="metric:N",
            y=alt.Y("kwh:Q", title="kWh"),
            color=alt.Color("metric:N", title="Series"),
            tooltip=["label:N", "metric:N", "kwh:Q"],
        )
        .properties(height=300, title="Consumption vs compensated energy (kWh)")
    )

    finance = series.melt(
        id_vars="label",
        value_vars=["total_financial_value", "total_savings_value"],
        var_name="metric",
        value_name="value",
    )
    chart_finance = (
        alt.Chart(finance)
        .mark_line(point=True)
        .encode(
            x=alt.X("label:N", sort=month_order, title="Month"),
            y=alt.Y("value:Q", title="R$"),
            color=alt.Color("metric:N", title="Series"),
            tooltip=["label:N", "metric:N", alt.Tooltip("value:Q", format=".2f")],
        )
        .properties(height=300, title="Financial result (R$)")
    )

    c1, c2 = st.columns(2)
    with c1:
        st.altair_chart(chart_energy, width="stretch")
    with c2:
        st.altair_chart(chart_finance, width="stretch")


# =====================================================
# Sidebar
# =====================================================
year = st.sidebar.text_input("Year", value=settings.default_year).strip()
server_mode = st.sidebar.toggle("Use server summary", value=False)
page = st.sidebar.radio("View", ["Dashboard", "Invoices"])

# =====================================================
# SECTION 1: DASHBOARD
# =====================================================
if page == "Dashboard":
    st.header("📈 Energy dashboard")

    if server_mode:
        try:
            summary = fetch_summary_for_year(year, settings)
        except InvoiceFetchError as exc:
            st.error(f"Could not load the dashboard summary: {exc}")
            st.stop()
        cards = server_card_summary(summary)
        series = aggregates_to_frame(summary.period_series)
    else:
        state = view_state("dashboard_records")
        token = state.begin_fetch()
        try:
            state.apply_records(token, fetch_all_records(settings))
        except InvoiceFetchError as exc:
            state.apply_error(token, f"Could not load invoices: {exc}")
        if state.error:
            st.error(state.error)
            st.stop()
        aggregates = aggregate(state.records, year)
        cards = build_card_summary(aggregates)
        series = aggregates_to_frame(aggregates)

    render_cards(cards)
    st.divider()

    if series.empty:
        st.warning(f"No invoices for {year}.")
    else:
        render_charts(series)
        flagged = series.loc[series["spend_exceeds_savings"], "label"].tolist()
        if flagged:
            st.caption("Spend exceeded savings in: " + ", ".join(flagged))

# =====================================================
# SECTION 2: INVOICE LIBRARY
# =====================================================
else:
    st.header("🧾 Invoice library")

    c1, c2 = st.columns(2)
    with c1:
        unit_query = st.text_input("Consumer unit")
    with c2:
        distributor_query = st.text_input("Distributor")

    state = view_state("library_records")
    token = state.begin_fetch()
    try:
        search = SearchFilter(
            year=year,
            consumer_unit_name=unit_query or None,
            distributor_name=distributor_query or None,
        )
        state.apply_records(token, fetch_records_by_search(search, settings))
    except InvoiceFetchError as exc:
        state.apply_error(token, f"Could not load invoices: {exc}")
    except ValueError as exc:
        state.apply_error(token, f"Invalid search: {exc}")
    if state.error:
        st.error(state.error)
        st.stop()

    rows = group_by_unit(filter_records(state.records, unit_query, distributor_query))
    if not rows:
        st.info("No invoices match the filters.")
        st.stop()

    coordinator = download_coordinator()
    saver = partial(
        retrieve_and_save_document,
        out_dir=settings.download_dir,
        timeout=settings.request_timeout,
    )
    busy = coordinator.is_any_pending()
    months = month_columns(rows)

    header = st.columns([3, 2, 2] + [1] * len(months))
    for col, title in zip(header, ["Unit", "Number", "Distributor"] + months):
        col.markdown(f"**{title}**")

    for row in rows:
        cols = st.columns([3, 2, 2] + [1] * len(months))
        cols[0].write(row.consumer_unit_name)
        cols[1].write(row.consumer_unit_number)
        cols[2].write(row.distributor_name)
        for col, month in zip(cols[3:], months):
            locator = row.months_index.get(month)
            if not locator:
                col.write("-")
                continue
            key = f"{row.consumer_unit_name}:{month}"
            label = "⏳" if coordinator.is_pending(key) else "⬇"
            if col.button(label, key=f"dl-{key}", disabled=busy):
                outcome = coordinator.retrieve(key, locator, document_name(row, month), saver)
                if not outcome.accepted:
                    st.warning("Another download is in progress.")
                elif outcome.succeeded and outcome.path is not None:
                    st.download_button(
                        f"Save {outcome.path.name}",
                        data=outcome.path.read_bytes(),
                        file_name=outcome.path.name,
                        mime="application/pdf",
                    )
                else:
                    st.error(f"Download failed: {outcome.error}")

# =====================================================
# Footer
# =====================================================
st.caption("Energy invoices • Period aggregates • Consumer-unit invoice matrix")
