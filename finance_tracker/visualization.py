"""Plotly visualisation helpers for the finance tracker.

Each function accepts the output of a :class:`analytics.TransactionAnalytics`
method and returns a ``plotly.graph_objects.Figure`` that Streamlit renders
via ``st.plotly_chart``.  Empty input produces an empty figure titled
"No data to display" instead of raising.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

try:
    from .currency import currency_symbol
except ImportError:
    from currency import currency_symbol

INCOME_COLOR = "rgb(34, 197, 94)"
EXPENSE_COLOR = "rgb(239, 68, 68)"
BALANCE_COLOR = "rgb(59, 130, 246)"


def _empty_figure(title: str = "No data to display") -> go.Figure:
    fig = go.Figure()
    fig.update_layout(title=title)
    return fig


def create_monthly_trend_chart(series: pd.DataFrame, currency: str = "USD", title: str | None = None) -> go.Figure:
    """Income and expense lines per month.

    Parameters
    ----------
    series : pandas.DataFrame
        Output of ``monthly_series`` with ``label``, ``income`` and
        ``expenses`` columns.
    currency : str
        Currency code used for the y-axis label.
    title : str, optional
        Chart title.

    Returns
    -------
    plotly.graph_objects.Figure
        Line chart with one trace per direction.
    """
    if series.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=series["label"], y=series["income"], name="Income",
        mode="lines+markers", line=dict(color=INCOME_COLOR, shape="spline"),
    ))
    fig.add_trace(go.Scatter(
        x=series["label"], y=series["expenses"], name="Expenses",
        mode="lines+markers", line=dict(color=EXPENSE_COLOR, shape="spline"),
    ))
    fig.update_layout(
        title=title or "Monthly income vs expenses",
        xaxis_title="Month",
        yaxis_title=f"Amount ({currency_symbol(currency)})",
        hovermode="x unified",
    )
    return fig


def create_category_doughnut(breakdown: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Doughnut chart of expense totals per category.

    ``breakdown`` is the output of ``category_breakdown``.
    """
    if breakdown.empty:
        return _empty_figure()
    fig = px.pie(breakdown, names="category", values="total", hole=0.5)
    fig.update_traces(textinfo="percent+label")
    fig.update_layout(title=title or "Expenses by category")
    return fig


def create_category_bar_chart(breakdown: pd.DataFrame, currency: str = "USD", title: str | None = None) -> go.Figure:
    if breakdown.empty:
        return _empty_figure()
    fig = px.bar(breakdown, x="category", y="total")
    fig.update_layout(
        title=title or "Spending by category",
        xaxis_title="Category",
        yaxis_title=f"Amount ({currency_symbol(currency)})",
    )
    return fig


def create_savings_rate_chart(series: pd.DataFrame, title: str | None = None) -> go.Figure:
    """Bar chart of the savings rate (%) per month."""
    if series.empty:
        return _empty_figure()
    fig = px.bar(series, x="label", y="savings_rate")
    fig.update_traces(marker_color=BALANCE_COLOR)
    fig.update_layout(
        title=title or "Savings rate",
        xaxis_title="Month",
        yaxis_title="Savings rate (%)",
    )
    return fig


def create_running_balance_chart(series: pd.DataFrame, currency: str = "USD", title: str | None = None) -> go.Figure:
    """Cumulative balance line; ``series`` is the output of ``running_balance``."""
    if series.empty or "balance" not in series.columns:
        return _empty_figure()
    fig = px.line(series, x="label", y="balance", markers=True)
    fig.update_traces(line_color=BALANCE_COLOR)
    fig.update_layout(
        title=title or "Running balance",
        xaxis_title="Month",
        yaxis_title=f"Balance ({currency_symbol(currency)})",
    )
    return fig


def create_daily_flow_chart(daily: pd.DataFrame, month: Optional[date] = None, title: str | None = None) -> go.Figure:
    """Income and expense bars per day, e.g. for the calendar page."""
    if daily.empty:
        return _empty_figure()
    fig = go.Figure()
    fig.add_trace(go.Bar(x=daily["date"], y=daily["income"], name="Income", marker_color=INCOME_COLOR))
    fig.add_trace(go.Bar(x=daily["date"], y=-daily["expense"], name="Expenses", marker_color=EXPENSE_COLOR))
    label = f" – {month:%B %Y}" if month else ""
    fig.update_layout(
        title=title or f"Daily cash flow{label}",
        barmode="relative",
        xaxis_title="Day",
        yaxis_title="Amount",
    )
    return fig
