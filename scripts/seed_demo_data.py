#!/usr/bin/env python3
"""Load a month of demo transactions for an existing (or new) user."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import List

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from finance_tracker import auth, db
from finance_tracker.config import configure_logging
from finance_tracker.errors import AuthError, FinanceTrackerError
from finance_tracker.models import Transaction

DEMO_TRANSACTIONS = [
    (5000.00, 'Salary', 'Monthly Salary', '2024-03-15'),
    (-150.75, 'Food & Dining', 'Grocery Shopping', '2024-03-14'),
    (800.00, 'Freelance', 'Freelance Project', '2024-03-13'),
    (-1200.00, 'Housing', 'Rent Payment', '2024-03-01'),
    (-85.50, 'Utilities', 'Electricity Bill', '2024-03-10'),
    (245.30, 'Investment', 'Stock Dividend', '2024-03-12'),
    (-45.00, 'Health & Fitness', 'Gym Membership', '2024-03-05'),
    (1200.00, 'Freelance', 'Consulting Fee', '2024-03-08'),
    (-65.99, 'Utilities', 'Internet Bill', '2024-03-07'),
    (-78.45, 'Food & Dining', 'Restaurant Dinner', '2024-03-13'),
    (350.00, 'Education', 'Online Course Sale', '2024-03-11'),
    (-120.00, 'Transportation', 'Car Insurance', '2024-03-03'),
    (125.50, 'Sales', 'Book Sales', '2024-03-09'),
    (-89.99, 'Utilities', 'Phone Bill', '2024-03-06'),
    (-4.50, 'Food & Dining', 'Coffee Shop', '2024-03-14'),
]


def demo_transactions() -> List[Transaction]:
    return [
        Transaction(amount=amount, category=category, description=description,
                    date=date.fromisoformat(day))
        for amount, category, description, day in DEMO_TRANSACTIONS
    ]


def main(email: str, password: str, create: bool = False) -> int:
    db.init_db()
    try:
        session = auth.sign_up(email, password, full_name="Demo User") if create else auth.sign_in(email, password)
    except AuthError as exc:
        print(f"Could not {'create' if create else 'sign in'} {email}: {exc}")
        return 1

    inserted = 0
    for transaction in demo_transactions():
        try:
            db.insert_transaction(transaction, session.user_id)
        except FinanceTrackerError as exc:
            print(f"Inserted {inserted} of {len(DEMO_TRANSACTIONS)} demo transactions "
                  f"for {session.email} before failing: {exc}")
            return 1
        inserted += 1
    print(f"Inserted {inserted} demo transactions for {session.email}")
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Seed demo transactions for a user.')
    parser.add_argument('email', help='Account email')
    parser.add_argument('password', help='Account password')
    parser.add_argument('--create', action='store_true', help='Create the account first')
    args = parser.parse_args()
    configure_logging()
    sys.exit(main(args.email, args.password, create=args.create))
