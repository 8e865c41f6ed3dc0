"""Main entry point for Streamlit multi-page app.

Unauthenticated visitors get the sign-in / sign-up tabs.  Once a session
exists the page shows a short overview and links to the other pages, which
Streamlit discovers automatically in the pages/ directory.
"""

from __future__ import annotations

import sys
from pathlib import Path

import streamlit as st

# Add package directory to path for imports
package_dir = Path(__file__).parent.resolve()
if str(package_dir) not in sys.path:
    sys.path.insert(0, str(package_dir))

import auth
import db
from analytics import TransactionAnalytics
from config import configure_logging
from currency import format_currency, format_currency_with_sign
from errors import FinanceTrackerError
from shared_sidebar import get_session, render_shared_sidebar, set_session, _rerun


def main():
    """Render the Home page."""
    st.set_page_config(page_title="Finance Tracker", page_icon="💰", layout="wide")
    configure_logging()
    db.init_db()

    session = get_session()
    if session is None:
        _render_auth_tabs()
        return

    sidebar_data = render_shared_sidebar(session)
    _render_welcome(sidebar_data)


def _render_auth_tabs():
    st.title("💰 Finance Tracker")
    st.markdown("Track income and expenses, see where your money goes.")

    sign_in_tab, sign_up_tab = st.tabs(["🔑 Sign in", "📝 Sign up"])

    with sign_in_tab:
        with st.form("sign_in_form"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password")
            submitted = st.form_submit_button("Sign in", use_container_width=True)
        if submitted:
            try:
                set_session(auth.sign_in(email, password))
            except FinanceTrackerError as exc:
                st.error(str(exc))
            else:
                _rerun()

    with sign_up_tab:
        with st.form("sign_up_form"):
            full_name = st.text_input("Full name")
            email = st.text_input("Email", key="sign_up_email")
            password = st.text_input("Password", type="password", key="sign_up_password")
            confirm = st.text_input("Confirm password", type="password")
            submitted = st.form_submit_button("Create account", use_container_width=True)
        if submitted:
            if password != confirm:
                st.error("Passwords do not match")
                return
            try:
                set_session(auth.sign_up(email, password, full_name=full_name))
            except FinanceTrackerError as exc:
                st.error(str(exc))
            else:
                st.success("Account created!")
                _rerun()


def _render_welcome(sidebar_data):
    profile = sidebar_data['profile']
    currency = sidebar_data['currency']
    name = profile.full_name if profile and profile.full_name else "there"

    st.title(f"👋 Welcome back, {name}")
    totals = TransactionAnalytics(sidebar_data['base_df']).current_month_totals()

    col1, col2, col3 = st.columns(3)
    col1.metric("Income this month", format_currency(totals['income'], currency))
    col2.metric("Expenses this month", format_currency(totals['expenses'], currency))
    col3.metric("Balance this month", format_currency_with_sign(totals['balance'], currency))

    st.markdown("Use the pages in the sidebar to manage your finances:")
    if hasattr(st, 'page_link'):
        st.page_link("pages/1_📊_Dashboard.py", label="Dashboard", icon="📊")
        st.page_link("pages/2_➕_Add_Transaction.py", label="Add a transaction", icon="➕")
        st.page_link("pages/4_📈_Insights.py", label="Insights", icon="📈")
        st.page_link("pages/5_📅_Calendar.py", label="Calendar", icon="📅")
        st.page_link("pages/6_👤_Profile.py", label="Profile", icon="👤")


if __name__ == "__main__":
    main()
