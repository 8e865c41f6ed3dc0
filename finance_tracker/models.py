"""Domain records exchanged with the backend.

Field names on the records (``user_id``, ``amount``, ``type``, ``category``,
``description``, ``date``, ``notes``, ``created_at``, ``updated_at``) are the
wire contract with the store and are used verbatim as DataFrame columns.

The sign of ``amount`` is the single source of truth for direction.  ``type``
is derived from it and only persisted for compatibility; a stored ``type``
that disagrees with the sign is rejected when a record is read or written.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import numpy as np
import pandas as pd

try:
    from .errors import FieldError, ValidationError
except ImportError:
    from errors import FieldError, ValidationError

INCOME = 'income'
EXPENSE = 'expense'
TRANSACTION_TYPES = (INCOME, EXPENSE)

DEFAULT_CATEGORIES: Dict[str, List[str]] = {
    INCOME: ['Salary', 'Freelance', 'Investment', 'Business', 'Other Income'],
    EXPENSE: [
        'Food & Dining', 'Housing', 'Transportation', 'Utilities', 'Health & Fitness',
        'Entertainment', 'Shopping', 'Education', 'Other Expense',
    ],
}

WIRE_COLUMNS = [
    'id', 'user_id', 'amount', 'type', 'category', 'description',
    'date', 'notes', 'created_at', 'updated_at',
]
EDITABLE_FIELDS = {'amount', 'category', 'description', 'date', 'notes'}


def transaction_type(amount: float) -> str:
    """Direction of a signed amount: positive is income, everything else expense."""
    return INCOME if float(amount) > 0 else EXPENSE


def signed_amount(magnitude: float, txn_type: str) -> float:
    """Apply the sign implied by ``txn_type`` to a positive form amount."""
    value = abs(float(magnitude))
    return -value if txn_type == EXPENSE else value


def parse_date(value: Any) -> Optional[date]:
    """Coerce wire and UI date values to a calendar date.

    Strings are cut to their ``YYYY-MM-DD`` prefix before parsing so that a
    timestamp such as ``2024-03-01T00:00:00Z`` never shifts a day through a
    timezone conversion.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if hasattr(value, 'to_pydatetime'):
        if pd.isna(value):
            return None
        return value.to_pydatetime().date()
    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        parsed = pd.to_datetime(text, errors='coerce')
        if pd.isna(parsed):
            return None
        return parsed.date()


@dataclass
class Transaction:
    """A single signed monetary event."""

    amount: float
    category: str
    description: str
    date: date
    notes: Optional[str] = None
    id: Optional[int] = None
    user_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def type(self) -> str:
        return transaction_type(self.amount)

    @property
    def is_income(self) -> bool:
        return self.amount > 0

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        if self.amount is None or float(self.amount) == 0:
            errors.append(FieldError('amount', 'Amount must be non-zero'))
        if not (self.category or '').strip():
            errors.append(FieldError('category', 'Category is required'))
        if self.date is None:
            errors.append(FieldError('date', 'Date is required'))
        return errors

    def to_record(self) -> Dict[str, Any]:
        """Serialize to the wire shape, rejecting invalid transactions."""
        errors = self.validate()
        if errors:
            raise ValidationError(errors)
        return {
            'id': self.id,
            'user_id': self.user_id,
            'amount': float(self.amount),
            'type': self.type,
            'category': self.category.strip(),
            'description': self.description,
            'date': self.date.isoformat(),
            'notes': self.notes or None,
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> 'Transaction':
        """Build a transaction from a backend row.

        Raises ``ValidationError`` when the stored ``type`` contradicts the
        sign of ``amount``.
        """
        amount = float(record['amount'])
        stored_type = record.get('type')
        if stored_type and stored_type != transaction_type(amount):
            raise ValidationError([
                FieldError('type', f"Stored type '{stored_type}' does not match amount {amount:.2f}")
            ])
        return cls(
            amount=amount,
            category=record.get('category') or '',
            description=record.get('description') or '',
            date=parse_date(record.get('date')),
            notes=record.get('notes'),
            id=record.get('id'),
            user_id=record.get('user_id'),
            created_at=record.get('created_at'),
            updated_at=record.get('updated_at'),
        )

    def with_changes(self, **changes: Any) -> 'Transaction':
        return replace(self, **changes)


@dataclass
class Category:
    """A user-defined category scoped to one user and one direction."""

    name: str
    type: str
    user_id: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[str] = None


@dataclass
class UserProfile:
    id: str
    email: str
    full_name: str = ''
    phone: str = ''
    currency: str = 'USD'
    theme: str = 'light'
    created_at: Optional[str] = None

    @property
    def initials(self) -> str:
        return ''.join(part[0] for part in self.full_name.split() if part).upper()


def merge_categories(txn_type: str, custom: Iterable[Union[str, Category]] = ()) -> List[str]:
    """Built-in categories for ``txn_type`` followed by unseen custom names."""
    merged = list(DEFAULT_CATEGORIES.get(txn_type, []))
    for entry in custom:
        name = entry.name if isinstance(entry, Category) else str(entry)
        if name and name not in merged:
            merged.append(name)
    return merged


def transactions_to_frame(data: Union[pd.DataFrame, Iterable[Transaction], None]) -> pd.DataFrame:
    """Normalize a transaction list or DataFrame for filtering and aggregation.

    The result always has the wire columns, a numeric ``amount``, a
    ``type`` recomputed from the sign and a midnight-normalized ``date``
    (``datetime64``) with no timezone.
    """
    if data is None:
        frame = pd.DataFrame(columns=WIRE_COLUMNS)
    elif isinstance(data, pd.DataFrame):
        frame = data.copy()
    else:
        rows = [txn.to_record() if isinstance(txn, Transaction) else dict(txn) for txn in data]
        frame = pd.DataFrame(rows, columns=WIRE_COLUMNS) if rows else pd.DataFrame(columns=WIRE_COLUMNS)

    for column in WIRE_COLUMNS:
        if column not in frame.columns:
            frame[column] = pd.NA

    frame['amount'] = pd.to_numeric(frame['amount'], errors='coerce').fillna(0.0).astype(float)
    frame['type'] = np.where(frame['amount'] > 0, INCOME, EXPENSE)
    frame['category'] = frame['category'].fillna('').astype(str)
    frame['description'] = frame['description'].fillna('').astype(str)
    frame['date'] = _normalize_dates(frame['date'])
    return frame


def _normalize_dates(series: pd.Series) -> pd.Series:
    if series.empty:
        return pd.to_datetime(series, errors='coerce')
    as_text = series.map(lambda value: value.isoformat() if hasattr(value, 'isoformat') else value)
    as_text = as_text.astype('string').str.slice(0, 10)
    return pd.to_datetime(as_text, format='%Y-%m-%d', errors='coerce')
