from typing import Any, Dict, List, Optional

import streamlit as st
import pandas as pd

from data_integrator import insert_row
from services.auth_service import SessionContext, current_session, init_session
from services.collection_service import CollectionReader, parse_snapshot

READER_KEY = "collection_reader"


@st.dialog("Confirm")
def confirmation_dialog_single_submission(name: str, value: Dict[str, Any], state_name: str,
                                          labels: Optional[Dict[str, str]] = None):
    """
    Show `value` as a Key/Value table and write it to collection `name` on "Yes".
    `labels` replaces ids with display names in the table only.
    """
    shown = {**value, **(labels or {})}
    df = pd.DataFrame(
        [(k, "" if v is None else str(v)) for k, v in shown.items()],
        columns=["Key", "Value"],
    )
    st.dataframe(df, hide_index=True)

    col_yes, col_no = st.columns(2)

    with col_yes:
        if st.button("Yes", type="primary", key="confirm_yes"):
            status, msg, data = insert_row(name, value)
            st.session_state[state_name] = status

            if not status:
                st.error(msg)
            else:
                st.rerun()
    with col_no:
        if st.button("No"):
            st.rerun()


def load_collections(*names: str) -> Dict[str, List[Any]]:
    """
    Subscribe to `names` for this render, take one fresh snapshot of each and
    tear the subscriptions down again, so nothing from an old page run can
    write into the new one.
    """
    reader = st.session_state.setdefault(READER_KEY, CollectionReader())
    snapshots: Dict[str, List[Any]] = {name: [] for name in names}

    unsubscribes = [
        reader.subscribe(name, lambda snapshot, name=name: snapshots.__setitem__(name, snapshot))
        for name in names
    ]
    try:
        results = reader.refresh()
    finally:
        for unsubscribe in unsubscribes:
            unsubscribe()

    for name in names:
        if not results.get(name):
            st.error(f"Could not load {name}")

    return {name: parse_snapshot(name, snapshot) for name, snapshot in snapshots.items()}


def require_session() -> SessionContext:
    """Stop the page when nobody is signed in."""
    init_session(st.session_state)
    context = current_session(st.session_state)
    if context is None:
        st.warning("Please log in to continue.")
        st.stop()
    return context


def require_admin(context: SessionContext) -> None:
    if not context.is_admin:
        st.error("This page is only available to administrators.")
        st.stop()
