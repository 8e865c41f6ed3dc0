"""Transaction aggregation for dashboards, insights and the calendar view.

Every calculation is pure: the input is copied on construction and methods
return new DataFrames or dictionaries.  Empty input yields zero totals and
empty (or zero-filled) frames rather than errors.
"""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, List, Optional, Tuple, Union

import pandas as pd

try:
    from .currency import format_currency
    from .filters import filter_current_month
    from .models import Transaction, transactions_to_frame
except ImportError:
    from currency import format_currency
    from filters import filter_current_month
    from models import Transaction, transactions_to_frame

CATEGORY_COLUMNS = ['category', 'total', 'count', 'percentage']
SERIES_COLUMNS = ['month', 'label', 'income', 'expenses', 'net', 'savings_rate']
DAILY_COLUMNS = ['date', 'income', 'expense', 'net']


def savings_rate(income: float, expenses: float) -> float:
    """Share of income kept, in percent; 0 when there is no income."""
    if income <= 0:
        return 0.0
    return float((income - expenses) / income * 100)


def format_display_date(value) -> str:
    """Long-form calendar label such as ``Friday, March 15, 2024``."""
    day = pd.Timestamp(value)
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"


class TransactionAnalytics:
    """Aggregations over an in-memory transaction list."""

    def __init__(self, data: Union[pd.DataFrame, Iterable[Transaction], None]):
        self.data = transactions_to_frame(data)

    def _income_rows(self, df: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        source = self.data if df is None else df
        return source[source['amount'] > 0]

    def _expense_rows(self, df: Optional[pd.DataFrame] = None) -> pd.DataFrame:
        source = self.data if df is None else df
        expenses = source[source['amount'] < 0].copy()
        expenses['abs_amount'] = expenses['amount'].abs()
        return expenses

    def _dated_rows(self) -> pd.DataFrame:
        return self.data.dropna(subset=['date'])

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------

    def period_totals(self, df: Optional[pd.DataFrame] = None) -> Dict[str, float]:
        """Income, expenses, balance and savings rate of the given rows."""
        source = self.data if df is None else df
        income = float(self._income_rows(source)['amount'].sum())
        expenses = float(self._expense_rows(source)['abs_amount'].sum())
        return {
            'income': income,
            'expenses': expenses,
            'balance': income - expenses,
            'savings_rate': savings_rate(income, expenses),
            'transaction_count': int(len(source)),
        }

    def current_month_totals(self, today: Optional[date] = None) -> Dict[str, float]:
        return self.period_totals(filter_current_month(self.data, today=today))

    def savings_rate(self) -> float:
        return self.period_totals()['savings_rate']

    # ------------------------------------------------------------------
    # Groupings
    # ------------------------------------------------------------------

    def group_by_date(self) -> List[Tuple[str, pd.DataFrame]]:
        """Transactions grouped by calendar day, most recent day first.

        Rows keep their original order inside each group.
        """
        dated = self._dated_rows()
        if dated.empty:
            return []
        groups = [(day, frame) for day, frame in dated.groupby('date', sort=False)]
        groups.sort(key=lambda item: item[0], reverse=True)
        return [(format_display_date(day), frame) for day, frame in groups]

    def category_breakdown(self) -> pd.DataFrame:
        """Expense totals per category with their percentage share."""
        expenses = self._expense_rows()
        if expenses.empty:
            return pd.DataFrame(columns=CATEGORY_COLUMNS)

        grouped = expenses.groupby('category', sort=False)['abs_amount'].agg(['sum', 'count'])
        grouped = grouped.rename(columns={'sum': 'total'}).reset_index()
        total_expenses = grouped['total'].sum()
        if total_expenses > 0:
            grouped['percentage'] = grouped['total'] / total_expenses * 100
        else:
            grouped['percentage'] = 0.0
        grouped = grouped.sort_values('total', ascending=False, kind='stable').reset_index(drop=True)
        return grouped[CATEGORY_COLUMNS]

    def top_expense_category(self) -> Optional[Tuple[str, float]]:
        breakdown = self.category_breakdown()
        if breakdown.empty:
            return None
        first = breakdown.iloc[0]
        return str(first['category']), float(first['total'])

    # ------------------------------------------------------------------
    # Time series
    # ------------------------------------------------------------------

    def monthly_series(self, months: int = 6, today: Optional[date] = None) -> pd.DataFrame:
        """Dense per-month income/expense sums for the trailing window.

        The window ends with the current month and contains exactly
        ``months`` rows in chronological order, zero-filled where a month
        has no transactions.
        """
        today = today or date.today()
        periods = pd.period_range(end=pd.Timestamp(today).to_period('M'), periods=max(months, 0), freq='M')

        dated = self._dated_rows()
        month_key = dated['date'].dt.to_period('M')
        amounts = dated['amount']
        income = amounts.where(amounts > 0, 0.0).groupby(month_key).sum()
        expenses = (-amounts.where(amounts < 0, 0.0)).groupby(month_key).sum()

        series = pd.DataFrame({
            'month': periods,
            'label': periods.strftime('%b %Y'),
            'income': income.reindex(periods, fill_value=0.0).to_numpy(dtype=float),
            'expenses': expenses.reindex(periods, fill_value=0.0).to_numpy(dtype=float),
        })
        series['net'] = series['income'] - series['expenses']
        series['savings_rate'] = [
            savings_rate(inc, exp) for inc, exp in zip(series['income'], series['expenses'])
        ]
        return series[SERIES_COLUMNS]

    def running_balance(self, months: int = 6, today: Optional[date] = None) -> pd.DataFrame:
        """Monthly series with ``balance``, the cumulative sum of each month's net."""
        series = self.monthly_series(months=months, today=today)
        series['balance'] = series['net'].cumsum()
        return series

    def daily_summaries(self) -> pd.DataFrame:
        """Per-day income, absolute expense and net, oldest day first."""
        dated = self._dated_rows()
        if dated.empty:
            return pd.DataFrame(columns=DAILY_COLUMNS)
        amounts = dated['amount']
        daily = pd.DataFrame({
            'income': amounts.where(amounts > 0, 0.0),
            'expense': (-amounts).where(amounts < 0, 0.0),
            'date': dated['date'].dt.date,
        }).groupby('date', sort=True).sum().reset_index()
        daily['net'] = daily['income'] - daily['expense']
        return daily[DAILY_COLUMNS]

    def summary_for_day(self, day: date) -> Dict[str, float]:
        daily = self.daily_summaries()
        match = daily[daily['date'] == day]
        if match.empty:
            return {'income': 0.0, 'expense': 0.0, 'net': 0.0}
        row = match.iloc[0]
        return {'income': float(row['income']), 'expense': float(row['expense']), 'net': float(row['net'])}

    # ------------------------------------------------------------------
    # Lists
    # ------------------------------------------------------------------

    def top_expenses(self, n: int = 5) -> pd.DataFrame:
        expenses = self._expense_rows()
        return expenses.sort_values('abs_amount', ascending=False, kind='stable').head(n)

    def recent_transactions(self, n: int = 5) -> pd.DataFrame:
        return self.data.sort_values('date', ascending=False, kind='stable', na_position='last').head(n)

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    def generate_insights(self, currency: str = 'USD', today: Optional[date] = None) -> List[str]:
        """Short, actionable observations about spending."""
        insights: List[str] = []

        breakdown = self.category_breakdown()
        if not breakdown.empty:
            top = breakdown.iloc[0]
            insights.append(
                f"Your biggest expense category is {top['category']} "
                f"({format_currency(top['total'], currency)}, {top['percentage']:.1f}% of spending)"
            )
        if len(breakdown) > 1:
            runner_up = breakdown.iloc[1]
            insights.append(
                f"Consider reducing spending in {runner_up['category']} "
                f"({format_currency(runner_up['total'], currency)})"
            )

        totals = self.period_totals()
        if totals['income'] > 0:
            rate = totals['savings_rate']
            if rate < 10:
                insights.append("Your savings rate is below 10%. Consider increasing your savings goal.")
            elif rate > 20:
                insights.append(f"Great job! Your savings rate is {rate:.1f}%.")

        monthly = self.current_month_totals(today=today)
        if monthly['transaction_count'] and monthly['expenses'] > monthly['income']:
            insights.append("You have spent more than you earned this month.")

        return insights
