import pandas as pd
import streamlit as st
from contextlib import contextmanager
from typing import List, Tuple

from pricetrends import data as dc
from pricetrends import state as ps
from pricetrends.charts import price_chart
from pricetrends.config import configure_logging
from pricetrends.data import LoadStatus
from pricetrends.inflation import load_price_index
from pricetrends.presidencies import PRESIDENCIES

configure_logging()

STATE_KEY = "app_state"
NO_DATA_MESSAGES = {
    LoadStatus.NO_RESOURCES: "Error: no spreadsheet sources are configured.",
    LoadStatus.ALL_FAILED: "Error: no data was loaded from Excel files. Every file failed to load; see the source details below.",
    LoadStatus.NO_VALID_ROWS: "Error: no valid data after filtering. The Excel files contain no usable Year/Average rows.",
}


# ---------- UI / layout helpers ----------
def inject_base_styles():
    if st.session_state.get("_base_css_injected"):
        return
    st.markdown(
        """
        <style>
        .card {border: 1px solid #e5e7eb;border-radius: 12px;padding: 16px;background: #ffffff;
               box-shadow: 0 1px 2px rgba(0,0,0,0.04); margin-bottom: 12px;}
        .card-header {display: flex;justify-content: space-between;align-items: center;margin-bottom: 8px;}
        .card-title {font-weight: 600;font-size: 1.0rem;color: #111827;}
        .chip-row {display: flex;flex-wrap: wrap;gap: 6px;margin-top: 6px;}
        .chip {background: #f3f4f6;border: 1px solid #e5e7eb;border-radius: 14px;padding: 4px 10px;font-size: 0.85rem;color: #374151;}
        </style>
        """,
        unsafe_allow_html=True,
    )
    st.session_state["_base_css_injected"] = True


@contextmanager
def card(title: str):
    container = st.container()
    container.markdown(
        f"""
        <div class="card">
          <div class="card-header">
            <div class="card-title">{title}</div>
          </div>
        """,
        unsafe_allow_html=True,
    )
    body = container.container()
    with body:
        yield body
    container.markdown("</div>", unsafe_allow_html=True)


def format_filter_summary(state: ps.AppState) -> str:
    applied = state.applied
    if applied.year_start or applied.year_end:
        year_chip = f"Years: {applied.year_start or '…'}–{applied.year_end or '…'}"
    else:
        year_chip = "Years: All"
    item_chip = f"Items: {len(applied.selected_items)} selected" if applied.selected_items else "Items: All"
    pres_chip = f"Presidency: {', '.join(applied.selected_presidencies)}" if applied.selected_presidencies else "Presidency: All"
    price_chip = "Prices: inflation-adjusted" if state.applied_inflation else "Prices: nominal"
    return "".join([f"<span class='chip'>{txt}</span>" for txt in [year_chip, item_chip, pres_chip, price_chip]])


# ---------- State <-> widget sync ----------
def _push_to_widgets(state: ps.AppState):
    st.session_state["item_search"] = state.search_term
    st.session_state["item_select"] = list(state.selected_items)
    st.session_state["president_select"] = list(state.selected_presidencies)
    st.session_state["year_start"] = state.year_start
    st.session_state["year_end"] = state.year_end
    st.session_state["adjust_inflation"] = state.inflation_adjusted


def _state_from_widgets(all_items: List[str]) -> ps.AppState:
    state: ps.AppState = st.session_state[STATE_KEY]
    state = ps.search(state, st.session_state.get("item_search", ""), all_items)
    state = ps.select_items(state, [i for i in st.session_state.get("item_select", []) if i in set(ps.visible_items(state, all_items))])
    state = ps.select_presidencies(state, st.session_state.get("president_select", []))
    state = ps.set_year_range(state, st.session_state.get("year_start"), st.session_state.get("year_end"))
    return ps.set_inflation(state, st.session_state.get("adjust_inflation", False))


def _sync(all_items: List[str]):
    new_state = _state_from_widgets(all_items)
    st.session_state[STATE_KEY] = new_state
    _push_to_widgets(new_state)


def _dispatch(all_items: List[str], action, *args):
    new_state = action(_state_from_widgets(all_items), *args)
    st.session_state[STATE_KEY] = new_state
    _push_to_widgets(new_state)


def _reset(years: Tuple[int, int]):
    new_state = ps.reset(years)
    st.session_state[STATE_KEY] = new_state
    _push_to_widgets(new_state)


def render_source_details(sources: List[dict]):
    if not sources:
        return
    with st.expander("Source details", expanded=False):
        st.dataframe(pd.DataFrame(sources), hide_index=True, width="stretch")


# ---------- UI setup ----------
st.set_page_config(page_title="Household Item Prices", layout="wide")
inject_base_styles()
st.title("Household Item Prices Over Time")
st.caption("Historical average prices by item, shaded by presidential term.")

data_ctx = dc.load_dashboard_data()
status: LoadStatus = data_ctx["status"]
if status is not LoadStatus.OK:
    st.error(NO_DATA_MESSAGES.get(status, "Error: no data was loaded."))
    render_source_details(data_ctx.get("sources", []))
    st.stop()

records: pd.DataFrame = data_ctx["records"]
all_items: List[str] = data_ctx["items"]
all_presidencies: List[str] = data_ctx["presidencies"]
years: Tuple[int, int] = data_ctx["year_range"]
price_index = load_price_index()

if STATE_KEY not in st.session_state:
    st.session_state[STATE_KEY] = ps.initial_state(years)
    _push_to_widgets(st.session_state[STATE_KEY])

# ----- Sidebar: filters -----
with st.sidebar:
    st.markdown("### Items")
    st.text_input("Search items", key="item_search", on_change=_sync, args=(all_items,))
    current: ps.AppState = st.session_state[STATE_KEY]
    st.multiselect("Items", options=ps.visible_items(current, all_items), key="item_select")
    item_cols = st.columns(2)
    item_cols[0].button("Select all", key="select_all", on_click=_dispatch, args=(all_items, ps.select_all_items, all_items))
    item_cols[1].button("Clear", key="clear_selection", on_click=_dispatch, args=(all_items, ps.clear_items))

    st.markdown("### Years")
    year_cols = st.columns(2)
    year_cols[0].number_input("From", min_value=years[0], max_value=years[1], step=1, format="%d", key="year_start")
    year_cols[1].number_input("To", min_value=years[0], max_value=years[1], step=1, format="%d", key="year_end")

    st.markdown("### Presidency")
    st.multiselect("Presidency", options=all_presidencies, key="president_select")
    pres_cols = st.columns(2)
    pres_cols[0].button("Select all", key="select_all_presidents", on_click=_dispatch, args=(all_items, ps.select_all_presidencies, all_presidencies))
    pres_cols[1].button("Clear", key="clear_presidents", on_click=_dispatch, args=(all_items, ps.clear_presidencies))

    st.markdown("---")
    st.checkbox("Adjust for inflation (CPI-U)", key="adjust_inflation", on_change=_dispatch, args=(all_items, ps.apply))
    action_cols = st.columns(2)
    action_cols[0].button("Apply filters", key="apply_filters", type="primary", on_click=_dispatch, args=(all_items, ps.apply))
    action_cols[1].button("Reset", key="reset_filters", on_click=_reset, args=(years,))

# ----- Chart -----
state: ps.AppState = st.session_state[STATE_KEY]
st.markdown(f"<div class='chip-row'>{format_filter_summary(state)}</div>", unsafe_allow_html=True)

chart_series = ps.render_pipeline(records, state.applied, inflation_adjusted=state.applied_inflation, index=price_index)
with card("Prices"):
    if chart_series.is_empty:
        st.warning("No data to display for the selected filters.")
    else:
        chart = price_chart(chart_series, PRESIDENCIES, inflation_adjusted=state.applied_inflation)
        st.altair_chart(chart, width="stretch")

render_source_details(data_ctx.get("sources", []))
