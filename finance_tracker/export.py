"""CSV export of transaction lists."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Iterable, Optional, Union

import numpy as np
import pandas as pd

try:
    from .config import EXPORTS_DIR
    from .models import Transaction, transactions_to_frame
except ImportError:
    from config import EXPORTS_DIR
    from models import Transaction, transactions_to_frame

logger = logging.getLogger(__name__)

EXPORT_COLUMNS = ['Date', 'Description', 'Category', 'Amount', 'Type']


def export_frame(data: Union[pd.DataFrame, Iterable[Transaction]], currency: str = 'USD') -> pd.DataFrame:
    """Shape transactions into the export columns.

    ``Amount`` is the absolute value with two decimals followed by the
    currency code; ``Type`` is derived from the sign.
    """
    frame = transactions_to_frame(data)
    return pd.DataFrame({
        'Date': frame['date'].dt.strftime('%Y-%m-%d'),
        'Description': frame['description'],
        'Category': frame['category'],
        'Amount': frame['amount'].abs().map(lambda value: f"{value:.2f} {currency}"),
        'Type': np.where(frame['amount'] > 0, 'Income', 'Expense'),
    }, columns=EXPORT_COLUMNS)


def transactions_to_csv(data: Union[pd.DataFrame, Iterable[Transaction]], currency: str = 'USD') -> str:
    return export_frame(data, currency).to_csv(index=False, lineterminator='\n')


def export_filename(today: Optional[date] = None) -> str:
    return f"transactions_{(today or date.today()).isoformat()}.csv"


def write_csv(
    data: Union[pd.DataFrame, Iterable[Transaction]],
    currency: str = 'USD',
    directory: Optional[Path] = None,
    today: Optional[date] = None,
) -> Path:
    """Write the export to ``directory`` (default: the exports folder)."""
    target_dir = Path(directory) if directory is not None else EXPORTS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / export_filename(today)
    target.write_text(transactions_to_csv(data, currency), encoding='utf-8')
    logger.info("Exported transactions to %s", target)
    return target
