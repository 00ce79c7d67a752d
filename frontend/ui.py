"""
Streamlit frontend for Host Finder.

Posts the topic, platform selection and per-platform thresholds to the
scoring service, then shows the ranked hosts as cards or a table. Each host
can be kept or removed; kept hosts export to CSV.

Run:
    streamlit run frontend/ui.py

Each card is its own fragment, so Keep/Remove reruns only that card and the
rest of the page (scroll position included) is left alone.
"""

import logging

import streamlit as st

from hostfinder.client import build_request, find_hosts
from hostfinder.errors import ExportError, SearchError, SearchValidationError
from hostfinder.export import export_csv
from hostfinder.logging_setup import setup_logging
from hostfinder.models import PLATFORMS, default_filters
from hostfinder.render import (
    EMPTY_PLACEHOLDER,
    STYLES,
    ResultsView,
    apply_table_edits,
    platform_icon,
    table_rows,
)
from hostfinder.store import ResultStore

st.set_page_config(page_title="Host Finder", layout="centered")
setup_logging()
log = logging.getLogger("ui")

PLATFORM_LABELS = {
    "reddit":    "Reddit",
    "twitter":   "Twitter / X",
    "instagram": "Instagram",
    "tiktok":    "TikTok",
    "linkedin":  "LinkedIn",
}


# ---------------------------------------------------------------------------
# Session state
# ---------------------------------------------------------------------------

def _init_state() -> None:
    if "store" not in st.session_state:
        store = ResultStore()
        st.session_state.store = store
        st.session_state.view = ResultsView(store)
    st.session_state.setdefault("pending", None)
    st.session_state.setdefault("show_results", False)
    st.session_state.setdefault("message", None)


def _filter_fields(platform: str) -> list[str]:
    return [name for name in type(default_filters(platform)).model_fields if name != "platform"]


def _selected_platforms() -> list[str]:
    return [p for p in PLATFORMS if st.session_state.get(f"platform.{p}")]


def _collected_filters() -> dict[str, dict]:
    filters = {}
    for p in _selected_platforms():
        filters[p] = {
            name: st.session_state[f"{p}.{name}"]
            for name in _filter_fields(p)
            if f"{p}.{name}" in st.session_state
        }
    return filters


def _start_search() -> None:
    st.session_state.message = None
    try:
        st.session_state.pending = build_request(
            st.session_state.get("topic", ""),
            int(st.session_state.get("num_leads", 20)),
            _selected_platforms(),
            _collected_filters(),
        )
    except SearchValidationError as exc:
        st.session_state.message = ("warning", str(exc))


# ---------------------------------------------------------------------------
# Search form
# ---------------------------------------------------------------------------

def _filter_controls(disabled: bool) -> None:
    with st.expander("Advanced filters"):
        tabs = st.tabs([f"{platform_icon(p)} {PLATFORM_LABELS[p]}" for p in PLATFORMS])
        for p, tab in zip(PLATFORMS, tabs):
            defaults = default_filters(p)
            with tab:
                for name in _filter_fields(p):
                    label = name.replace("_", " ").capitalize()
                    value = getattr(defaults, name)
                    key = f"{p}.{name}"
                    if isinstance(value, bool):
                        st.checkbox(label, value=value, key=key, disabled=disabled)
                    elif isinstance(value, float):
                        st.number_input(label, min_value=0.0, value=value, step=0.1, key=key, disabled=disabled)
                    else:
                        st.number_input(label, min_value=0, value=value, step=100, key=key, disabled=disabled)


def _search_form(searching: bool) -> None:
    st.text_input(
        "Topic or community",
        placeholder="e.g. indie game development",
        key="topic",
        disabled=searching,
    )
    st.number_input("Number of leads", min_value=1, max_value=100, value=20, step=1, key="num_leads", disabled=searching)

    st.caption("Platforms")
    for p, col in zip(PLATFORMS, st.columns(len(PLATFORMS))):
        col.checkbox(PLATFORM_LABELS[p], value=(p == "reddit"), key=f"platform.{p}", disabled=searching)

    _filter_controls(searching)
    st.button("Find Hosts", key="search", type="primary", disabled=searching, on_click=_start_search)


def _run_pending_search() -> None:
    request = st.session_state.pending
    st.session_state.show_results = False
    try:
        with st.spinner("Finding hosts…"):
            candidates = find_hosts(request)
    except SearchError as exc:
        log.info("Search failed: %s", exc)
        st.session_state.message = ("error", f"Search failed: {exc}")
    else:
        st.session_state.store.replace_all(candidates)
        st.session_state.view.render_all()
        st.session_state.show_results = True
    finally:
        st.session_state.pending = None
    st.rerun()


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@st.fragment
def _card(position: int) -> None:
    store = st.session_state.store
    kept = store[position].included

    st.markdown(st.session_state.view.card(position), unsafe_allow_html=True)
    keep_col, remove_col, _ = st.columns([1, 1, 3])
    keep_col.button(
        "✓ Keep",
        key=f"keep-{position}",
        type="primary" if kept else "secondary",
        on_click=store.set_included,
        args=(position, True),
    )
    remove_col.button(
        "✕ Remove",
        key=f"remove-{position}",
        type="primary" if not kept else "secondary",
        on_click=store.set_included,
        args=(position, False),
    )


def _apply_table_edits() -> None:
    apply_table_edits(st.session_state.store, st.session_state["results_table"]["edited_rows"])


def _table() -> None:
    rows = table_rows(st.session_state.store)
    st.data_editor(
        rows,
        key="results_table",
        hide_index=True,
        use_container_width=True,
        disabled=[col for col in rows[0] if col != "Keep"],
        column_config={
            "Keep":        st.column_config.CheckboxColumn("Keep"),
            "Profile URL": st.column_config.LinkColumn("Profile URL"),
        },
        on_change=_apply_table_edits,
    )


def _export_controls() -> None:
    if not st.button("Export CSV", key="export"):
        return
    try:
        filename, text = export_csv(st.session_state.store)
    except ExportError as exc:
        st.warning(str(exc))
        return
    st.download_button(f"Download {filename}", data=text, file_name=filename, mime="text/csv", key="download")


def _results() -> None:
    store = st.session_state.store
    st.subheader(f"Results ({len(store)})")

    if not len(store):
        st.markdown(EMPTY_PLACEHOLDER, unsafe_allow_html=True)
        return

    _export_controls()
    layout = st.radio("Layout", ["Cards", "Table"], horizontal=True, key="layout")
    if layout == "Table":
        _table()
        return
    for position in range(len(store)):
        _card(position)


# ---------------------------------------------------------------------------
# Page
# ---------------------------------------------------------------------------

_init_state()
st.markdown(STYLES, unsafe_allow_html=True)
st.title("Host Finder")
st.markdown("Find podcast guests, AMA hosts and collaborators across social platforms.")

searching = st.session_state.pending is not None
_search_form(searching)

if st.session_state.message:
    level, text = st.session_state.message
    getattr(st, level)(text)

if searching:
    _run_pending_search()

if st.session_state.show_results:
    _results()
