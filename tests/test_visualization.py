from datetime import date

import pandas as pd

from finance_tracker import visualization as viz
from finance_tracker.analytics import TransactionAnalytics


def test_empty_inputs_give_placeholder_figures():
    empty = TransactionAnalytics(None)
    fig = viz.create_category_doughnut(empty.category_breakdown())
    assert fig.layout.title.text == "No data to display"
    assert viz.create_daily_flow_chart(empty.daily_summaries()).layout.title.text == "No data to display"


def test_monthly_trend_chart_has_income_and_expense_traces(sample_df):
    series = TransactionAnalytics(sample_df).running_balance(months=3, today=date(2024, 3, 31))
    fig = viz.create_monthly_trend_chart(series, 'GBP')
    assert [trace.name for trace in fig.data] == ['Income', 'Expenses']
    assert '£' in fig.layout.yaxis.title.text
    assert len(viz.create_running_balance_chart(series).data) == 1
    assert len(viz.create_savings_rate_chart(series).data) == 1


def test_category_doughnut_is_a_hole_pie(sample_df):
    fig = viz.create_category_doughnut(TransactionAnalytics(sample_df).category_breakdown())
    assert fig.data[0].hole == 0.5
    assert set(fig.data[0].labels) == {'Housing', 'Food & Dining'}


def test_running_balance_chart_requires_balance_column():
    series = pd.DataFrame({'label': ['Mar 2024'], 'net': [1.0]})
    assert viz.create_running_balance_chart(series).layout.title.text == "No data to display"
