"""Typed form records for the add/edit, profile, password and category flows.

Each form has a single ``validate()`` that returns a list of
:class:`~errors.FieldError`; an empty list means the form may be submitted.
Validation never touches the backend.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

try:
    from .currency import SUPPORTED_CURRENCIES
    from .errors import FieldError, ValidationError
    from .models import EXPENSE, TRANSACTION_TYPES, Transaction, parse_date, signed_amount
except ImportError:
    from currency import SUPPORTED_CURRENCIES
    from errors import FieldError, ValidationError
    from models import EXPENSE, TRANSACTION_TYPES, Transaction, parse_date, signed_amount

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")
PHONE_PATTERN = re.compile(r"^\+?[\d\s-]{10,}$")
MIN_PASSWORD_LENGTH = 6
THEMES = ('light', 'dark')


def raise_for_errors(errors: Sequence[FieldError]) -> None:
    if errors:
        raise ValidationError(errors)


def _parse_amount(value: Any) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


@dataclass
class TransactionForm:
    """Add or edit a transaction.  ``amount`` is the positive magnitude."""

    amount: Any = None
    txn_type: str = EXPENSE
    category: str = ''
    description: str = ''
    date: Any = field(default_factory=date.today)
    notes: str = ''
    mode: str = 'add'

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        amount = _parse_amount(self.amount)
        if amount is None:
            if self.amount is None or str(self.amount).strip() == '':
                errors.append(FieldError('amount', 'Amount is required'))
            else:
                errors.append(FieldError('amount', 'Please enter a valid amount'))
        elif amount <= 0:
            errors.append(FieldError('amount', 'Please enter a valid amount greater than 0'))
        if self.txn_type not in TRANSACTION_TYPES:
            errors.append(FieldError('txn_type', 'Type must be income or expense'))
        if not (self.category or '').strip():
            errors.append(FieldError('category', 'Category is required'))
        if not (self.description or '').strip():
            errors.append(FieldError('description', 'Description is required'))
        if parse_date(self.date) is None:
            errors.append(FieldError('date', 'Date is required'))
        return errors

    def to_fields(self) -> Dict[str, Any]:
        """Editable wire fields with the sign applied from ``txn_type``."""
        raise_for_errors(self.validate())
        return {
            'amount': signed_amount(_parse_amount(self.amount), self.txn_type),
            'category': self.category.strip(),
            'description': self.description.strip(),
            'date': parse_date(self.date),
            'notes': (self.notes or '').strip() or None,
        }

    def to_transaction(self) -> Transaction:
        return Transaction(**self.to_fields())

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> 'TransactionForm':
        return cls(
            amount=abs(transaction.amount),
            txn_type=transaction.type,
            category=transaction.category,
            description=transaction.description,
            date=transaction.date,
            notes=transaction.notes or '',
            mode='edit',
        )


@dataclass
class ProfileForm:
    full_name: str = ''
    email: str = ''
    phone: str = ''
    currency: str = 'USD'
    theme: str = 'light'

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        if not (self.full_name or '').strip():
            errors.append(FieldError('full_name', 'Name is required'))
        email = (self.email or '').strip()
        if not email:
            errors.append(FieldError('email', 'Email is required'))
        elif not EMAIL_PATTERN.search(email):
            errors.append(FieldError('email', 'Please enter a valid email'))
        if self.phone and not PHONE_PATTERN.match(self.phone):
            errors.append(FieldError('phone', 'Please enter a valid phone number'))
        if self.currency not in SUPPORTED_CURRENCIES:
            errors.append(FieldError('currency', 'Please choose a supported currency'))
        if self.theme not in THEMES:
            errors.append(FieldError('theme', 'Theme must be light or dark'))
        return errors

    def to_fields(self) -> Dict[str, Any]:
        raise_for_errors(self.validate())
        return {
            'full_name': self.full_name.strip(),
            'email': self.email.strip(),
            'phone': (self.phone or '').strip(),
            'currency': self.currency,
            'theme': self.theme,
        }

    @classmethod
    def from_profile(cls, profile) -> 'ProfileForm':
        return cls(
            full_name=profile.full_name,
            email=profile.email,
            phone=profile.phone,
            currency=profile.currency,
            theme=profile.theme,
        )


@dataclass
class PasswordForm:
    current_password: str = ''
    new_password: str = ''
    confirm_password: str = ''

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        if not self.current_password:
            errors.append(FieldError('current_password', 'Current password is required'))
        if len(self.new_password or '') < MIN_PASSWORD_LENGTH:
            errors.append(FieldError(
                'new_password', f'Password must be at least {MIN_PASSWORD_LENGTH} characters',
            ))
        if self.new_password != self.confirm_password:
            errors.append(FieldError('confirm_password', 'Passwords do not match'))
        return errors


@dataclass
class CategoryForm:
    name: str = ''
    txn_type: str = EXPENSE

    def validate(self) -> List[FieldError]:
        errors: List[FieldError] = []
        if not (self.name or '').strip():
            errors.append(FieldError('name', 'Category name is required'))
        if self.txn_type not in TRANSACTION_TYPES:
            errors.append(FieldError('txn_type', 'Type must be income or expense'))
        return errors
