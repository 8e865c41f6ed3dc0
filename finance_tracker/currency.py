"""Formatting utilities for currency display."""

from __future__ import annotations

from typing import Dict, Union

CURRENCY_SYMBOLS: Dict[str, str] = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'JPY': '¥',
    'AUD': '$',
    'CAD': '$',
    'CHF': 'Fr',
    'CNY': '¥',
    'INR': '₹',
    'SGD': '$',
}

SUPPORTED_CURRENCIES = list(CURRENCY_SYMBOLS)
FALLBACK_SYMBOL = '$'


def currency_symbol(currency_code: str | None) -> str:
    """Return the display symbol for ``currency_code``, ``$`` when unknown."""
    if not currency_code:
        return FALLBACK_SYMBOL
    return CURRENCY_SYMBOLS.get(str(currency_code).upper(), FALLBACK_SYMBOL)


def format_currency(amount: Union[float, int], currency_code: str = 'USD') -> str:
    """Format the magnitude of an amount with its currency symbol.

    Args:
        amount: The amount to format; the sign is dropped
        currency_code: ISO-like currency code (e.g. ``"EUR"``)

    Returns:
        Formatted currency string (e.g. ``"€42.50"``)

    Example:
        >>> format_currency(-42.5, 'EUR')
        '€42.50'
        >>> format_currency(10, 'XYZ')
        '$10.00'
    """
    return f"{currency_symbol(currency_code)}{abs(float(amount)):.2f}"


def format_currency_with_sign(amount: Union[float, int], currency_code: str = 'USD') -> str:
    """Format an amount with an explicit ``+``/``-`` prefix.

    Zero is treated as non-negative.

    Example:
        >>> format_currency_with_sign(-42.5, 'EUR')
        '-€42.50'
        >>> format_currency_with_sign(0)
        '+$0.00'
    """
    sign = '+' if float(amount) >= 0 else '-'
    return f"{sign}{format_currency(amount, currency_code)}"


def escape_dollar_for_markdown(text: str) -> str:
    """Escape dollar signs so Streamlit markdown does not treat them as LaTeX."""
    return text.replace("$", "\\$")
