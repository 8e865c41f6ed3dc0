"""Category and date-range filtering of transaction frames.

All date comparisons happen on calendar dates.  Transaction dates are
normalized to midnight without a timezone (see
:func:`models.transactions_to_frame`) and "today" is the viewer's local
calendar date, so a transaction dated the last day of the month stays in
that month whatever the viewer's UTC offset is.
"""

from __future__ import annotations

import calendar
from datetime import date, timedelta
from typing import Dict, Iterable, Optional, Tuple, Union

import pandas as pd

try:
    from .models import Transaction, parse_date, transactions_to_frame
except ImportError:
    from models import Transaction, parse_date, transactions_to_frame

ALL = 'all'

DATE_RANGE_LABELS: Dict[str, str] = {
    'all': 'All Time',
    'today': 'Today',
    'thisWeek': 'This Week',
    'thisMonth': 'This Month',
    'last30Days': 'Last 30 Days',
    'last6Months': 'Last 6 Months',
    'thisYear': 'This Year',
    'custom': 'Custom Range',
}
DATE_RANGES = list(DATE_RANGE_LABELS)

Bounds = Tuple[Optional[date], Optional[date]]


def week_bounds(today: date) -> Bounds:
    """Sunday through Saturday of the week containing ``today``."""
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def month_bounds(today: date) -> Bounds:
    last_day = calendar.monthrange(today.year, today.month)[1]
    return today.replace(day=1), today.replace(day=last_day)


def months_before(today: date, months: int) -> date:
    """``today`` shifted back by whole calendar months, clamped to month end."""
    return (pd.Timestamp(today) - pd.DateOffset(months=months)).date()


def date_range_bounds(
    mode: str,
    today: Optional[date] = None,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
) -> Bounds:
    """Inclusive ``(start, end)`` calendar window for a date-range mode.

    ``None`` on either side means the window is open on that side.
    """
    today = today or date.today()
    if mode == 'all':
        return None, None
    if mode == 'today':
        return today, today
    if mode == 'thisWeek':
        return week_bounds(today)
    if mode == 'thisMonth':
        return month_bounds(today)
    if mode == 'thisYear':
        return date(today.year, 1, 1), None
    if mode == 'last30Days':
        return months_before(today, 1), None
    if mode == 'last6Months':
        return months_before(today, 6), None
    if mode == 'custom':
        return parse_date(custom_start), parse_date(custom_end)
    raise ValueError(f"Unknown date range '{mode}'")


def apply_filters(
    data: Union[pd.DataFrame, Iterable[Transaction]],
    category: str = ALL,
    date_range: str = ALL,
    custom_start: Optional[date] = None,
    custom_end: Optional[date] = None,
    today: Optional[date] = None,
) -> pd.DataFrame:
    """Return the rows matching both the category and the date-range predicate.

    Row order is preserved.
    """
    frame = transactions_to_frame(data)
    start, end = date_range_bounds(date_range, today, custom_start, custom_end)

    mask = pd.Series(True, index=frame.index)
    if category and category != ALL:
        mask &= frame['category'] == category
    if start is not None:
        mask &= frame['date'] >= pd.Timestamp(start)
    if end is not None:
        # Dates are midnight-normalized, so ``<= end`` covers the whole end day.
        mask &= frame['date'] <= pd.Timestamp(end)
    return frame[mask]


def filter_current_month(data: Union[pd.DataFrame, Iterable[Transaction]], today: Optional[date] = None) -> pd.DataFrame:
    return apply_filters(data, date_range='thisMonth', today=today)


def remove_transaction(data: Union[pd.DataFrame, Iterable[Transaction]], transaction_id) -> pd.DataFrame:
    """Drop ``transaction_id`` from an in-memory list; unknown ids change nothing."""
    frame = transactions_to_frame(data)
    return frame[~frame['id'].isin([transaction_id])]
