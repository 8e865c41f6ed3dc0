from finance_tracker.currency import (
    SUPPORTED_CURRENCIES,
    currency_symbol,
    escape_dollar_for_markdown,
    format_currency,
    format_currency_with_sign,
)


def test_format_currency_drops_sign():
    assert format_currency(-42.5, 'EUR') == '€42.50'
    assert format_currency(1234.567, 'GBP') == '£1234.57'


def test_format_currency_with_sign():
    assert format_currency_with_sign(-42.5, 'EUR') == '-€42.50'
    assert format_currency_with_sign(0, 'USD') == '+$0.00'
    assert format_currency_with_sign(10, 'INR') == '+₹10.00'


def test_unknown_currency_falls_back_to_dollar():
    assert format_currency(10, 'XYZ') == '$10.00'
    assert currency_symbol(None) == '$'
    assert currency_symbol('chf') == 'Fr'


def test_supported_currencies_order():
    assert SUPPORTED_CURRENCIES == ['USD', 'EUR', 'GBP', 'JPY', 'AUD', 'CAD', 'CHF', 'CNY', 'INR', 'SGD']


def test_escape_dollar_for_markdown():
    assert escape_dollar_for_markdown('$5 and $6') == '\\$5 and \\$6'
