"""Shared sidebar components for multi-page app.

This module provides the session guard and the sidebar that every
authenticated page renders: the signed-in user, the transaction filters and
the sign-out button.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd
import streamlit as st

try:
    from . import auth
    from . import db
    from .config import DEFAULT_CURRENCY
    from .errors import FinanceTrackerError
    from .filters import ALL, DATE_RANGE_LABELS, DATE_RANGES, apply_filters
    from .models import EXPENSE, INCOME, Category, UserProfile, merge_categories, transactions_to_frame
except ImportError:
    # Fallback for when running as script
    import sys
    from pathlib import Path
    parent_dir = Path(__file__).parent
    if str(parent_dir) not in sys.path:
        sys.path.insert(0, str(parent_dir))
    import auth
    import db
    from config import DEFAULT_CURRENCY
    from errors import FinanceTrackerError
    from filters import ALL, DATE_RANGE_LABELS, DATE_RANGES, apply_filters
    from models import EXPENSE, INCOME, Category, UserProfile, merge_categories, transactions_to_frame

logger = logging.getLogger(__name__)

SESSION_KEY = 'session'
FILTERS_KEY = 'filters'
DEFAULT_FILTERS = {'category': ALL, 'date_range': ALL, 'custom_start': None, 'custom_end': None}


def get_session() -> Optional[auth.Session]:
    return st.session_state.get(SESSION_KEY)


def set_session(session: Optional[auth.Session]) -> None:
    if session is None:
        st.session_state.pop(SESSION_KEY, None)
        st.session_state.pop(FILTERS_KEY, None)
    else:
        st.session_state[SESSION_KEY] = session


def require_session() -> auth.Session:
    """Return the signed-in session or stop the page with a login prompt."""
    session = get_session()
    if session is None:
        st.warning("🔒 Please sign in on the Home page to continue.")
        if hasattr(st, 'page_link'):
            st.page_link("Home.py", label="Go to sign in", icon="🏠")
        st.stop()
    return session


def category_options(frame: pd.DataFrame, custom: Iterable[Category] = ()) -> List[str]:
    """``all`` followed by every built-in, custom and in-use category name."""
    custom = list(custom)
    names = merge_categories(INCOME, [c for c in custom if c.type == INCOME])
    for name in merge_categories(EXPENSE, [c for c in custom if c.type == EXPENSE]):
        if name not in names:
            names.append(name)
    if not frame.empty:
        for name in frame['category'].dropna().unique():
            if name and name not in names:
                names.append(str(name))
    return [ALL] + names


def render_shared_sidebar(session: auth.Session) -> Dict[str, Any]:
    """Render shared sidebar elements available on all pages.

    Returns:
        Dict with keys: 'profile', 'currency', 'base_df', 'filters', 'filtered_df'
    """
    profile = _load_profile(session)
    currency = profile.currency if profile else DEFAULT_CURRENCY

    st.sidebar.title("💰 Finance Tracker")
    if profile is not None:
        label = profile.full_name or profile.email
        st.sidebar.caption(f"Signed in as **{label}** · {currency}")

    try:
        base_df = db.fetch_transactions_frame(session.user_id)
        custom = db.list_categories(session.user_id)
    except FinanceTrackerError as exc:
        st.sidebar.error(f"Error loading transactions: {exc}")
        base_df = transactions_to_frame(None)
        custom = []

    filters = _render_filters(base_df, custom)
    try:
        filtered_df = apply_filters(base_df, **filters)
    except ValueError as exc:
        st.sidebar.error(str(exc))
        filtered_df = base_df

    st.sidebar.divider()
    if st.sidebar.button("🚪 Sign out", use_container_width=True):
        auth.sign_out(session)
        set_session(None)
        _rerun()

    return {
        'profile': profile,
        'currency': currency,
        'base_df': base_df,
        'filters': filters,
        'filtered_df': filtered_df,
    }


def _load_profile(session: auth.Session) -> Optional[UserProfile]:
    try:
        return auth.get_profile(session)
    except FinanceTrackerError as exc:
        logger.warning("Could not load profile for %s: %s", session.user_id, exc)
        st.sidebar.warning(f"Could not load profile: {exc}")
        return None


def _render_filters(base_df: pd.DataFrame, custom: Iterable[Category]) -> Dict[str, Any]:
    st.sidebar.subheader("🔍 Filters")
    saved = dict(DEFAULT_FILTERS)
    saved.update(st.session_state.get(FILTERS_KEY) or {})

    options = category_options(base_df, custom)
    if saved['category'] not in options:
        saved['category'] = ALL
    category = st.sidebar.selectbox(
        "Category",
        options=options,
        index=options.index(saved['category']),
        format_func=lambda value: "All Categories" if value == ALL else value,
    )
    date_range = st.sidebar.selectbox(
        "Date Range",
        options=DATE_RANGES,
        index=DATE_RANGES.index(saved['date_range']) if saved['date_range'] in DATE_RANGES else 0,
        format_func=DATE_RANGE_LABELS.get,
    )

    custom_start: Optional[date] = None
    custom_end: Optional[date] = None
    if date_range == 'custom':
        col1, col2 = st.sidebar.columns(2)
        with col1:
            custom_start = st.date_input("Start", value=saved['custom_start'])
        with col2:
            custom_end = st.date_input("End", value=saved['custom_end'])

    filters = {
        'category': category,
        'date_range': date_range,
        'custom_start': custom_start,
        'custom_end': custom_end,
    }
    st.session_state[FILTERS_KEY] = filters
    return filters


def _rerun() -> None:
    rerun_fn = getattr(st, 'rerun', None) or getattr(st, 'experimental_rerun', None)
    if rerun_fn:
        rerun_fn()
