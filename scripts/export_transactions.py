#!/usr/bin/env python3
"""Write a user's transactions to CSV, optionally filtered."""

from __future__ import annotations

import argparse
import sys
from datetime import date
from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from finance_tracker import auth, db
from finance_tracker.config import configure_logging
from finance_tracker.errors import FinanceTrackerError
from finance_tracker.export import write_csv
from finance_tracker.filters import ALL, DATE_RANGES, apply_filters


def main(
    email: str,
    password: str,
    category: str = ALL,
    date_range: str = ALL,
    start: Optional[date] = None,
    end: Optional[date] = None,
    output_dir: Optional[Path] = None,
) -> int:
    db.init_db()
    try:
        session = auth.sign_in(email, password)
        profile = auth.get_profile(session)
        frame = db.fetch_transactions_frame(session.user_id)
    except FinanceTrackerError as exc:
        print(f"Export failed: {exc}")
        return 1

    filtered = apply_filters(frame, category=category, date_range=date_range,
                             custom_start=start, custom_end=end)
    if filtered.empty:
        print("No transactions match the selected filters.")
        return 0

    target = write_csv(filtered, profile.currency, directory=output_dir)
    print(f"Wrote {len(filtered)} transactions to {target}")
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Export transactions to CSV.')
    parser.add_argument('email', help='Account email')
    parser.add_argument('password', help='Account password')
    parser.add_argument('--category', default=ALL, help='Only export this category')
    parser.add_argument('--range', dest='date_range', default=ALL, choices=DATE_RANGES,
                        help='Date range to export')
    parser.add_argument('--start', type=date.fromisoformat, help='Custom range start (YYYY-MM-DD)')
    parser.add_argument('--end', type=date.fromisoformat, help='Custom range end (YYYY-MM-DD)')
    parser.add_argument('--output-dir', type=Path, help='Directory for the CSV file')
    args = parser.parse_args()
    configure_logging()
    sys.exit(main(args.email, args.password, args.category, args.date_range,
                  args.start, args.end, args.output_dir))
