"""SQLite-backed store for users, transactions and custom categories.

Every query that touches user data is scoped by ``user_id``; that scoping is
the authorization boundary.  Each public function is one round trip: it
opens a connection, runs its statement(s) and closes the connection again.
Backend failures are logged and re-raised as the matching error from
:mod:`errors` carrying the backend's message.
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterator, List, Mapping, Optional

import pandas as pd

try:
    from .config import DB_PATH, ensure_data_directories
    from .errors import (
        DeleteError, FetchError, InsertError, UnauthorizedError, UpdateError, ValidationError,
    )
    from .models import (
        EDITABLE_FIELDS, TRANSACTION_TYPES, Category, Transaction, parse_date,
        transaction_type, transactions_to_frame,
    )
except ImportError:
    from config import DB_PATH, ensure_data_directories
    from errors import (
        DeleteError, FetchError, InsertError, UnauthorizedError, UpdateError, ValidationError,
    )
    from models import (
        EDITABLE_FIELDS, TRANSACTION_TYPES, Category, Transaction, parse_date,
        transaction_type, transactions_to_frame,
    )

logger = logging.getLogger(__name__)

SCHEMA_SQL = """
PRAGMA journal_mode=WAL;
PRAGMA synchronous=NORMAL;

CREATE TABLE IF NOT EXISTS users (
    id TEXT PRIMARY KEY,
    email TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    full_name TEXT,
    phone TEXT,
    currency TEXT DEFAULT 'USD',
    theme TEXT DEFAULT 'light',
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS transactions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL,
    amount REAL NOT NULL CHECK (amount != 0),
    type TEXT NOT NULL CHECK (type IN ('income', 'expense')),
    category TEXT NOT NULL,
    description TEXT,
    date TEXT NOT NULL,
    notes TEXT,
    created_at TEXT,
    updated_at TEXT
);

CREATE TABLE IF NOT EXISTS categories (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL,
    type TEXT NOT NULL CHECK (type IN ('income', 'expense')),
    user_id TEXT NOT NULL,
    created_at TEXT,
    UNIQUE (user_id, type, name)
);

CREATE INDEX IF NOT EXISTS ix_txn_user_date ON transactions (user_id, date);
CREATE INDEX IF NOT EXISTS ix_txn_category ON transactions (category);
CREATE INDEX IF NOT EXISTS ix_category_user ON categories (user_id, type);
"""

TRANSACTION_COLUMNS = (
    "id, user_id, amount, type, category, description, date, notes, created_at, updated_at"
)


def _ensure_dirs() -> None:
    ensure_data_directories()
    DB_PATH.parent.mkdir(parents=True, exist_ok=True)


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@contextmanager
def connect() -> Iterator[sqlite3.Connection]:
    _ensure_dirs()
    conn = sqlite3.connect(str(DB_PATH))
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db() -> None:
    with connect() as conn:
        conn.executescript(SCHEMA_SQL)
        conn.commit()


# ---------------------------------------------------------------------------
# Transactions
# ---------------------------------------------------------------------------


def list_transactions(user_id: str) -> List[Transaction]:
    """All transactions of ``user_id``, most recent date first."""
    try:
        with connect() as conn:
            rows = conn.execute(
                f"SELECT {TRANSACTION_COLUMNS} FROM transactions WHERE user_id = ? "
                "ORDER BY date DESC, id DESC",
                (user_id,),
            ).fetchall()
    except sqlite3.Error as exc:
        logger.exception("Error fetching transactions for user %s", user_id)
        raise FetchError(str(exc)) from exc
    return [Transaction.from_record(dict(row)) for row in rows]


def fetch_transactions_frame(user_id: str) -> pd.DataFrame:
    """:func:`list_transactions` as a DataFrame ready for filtering."""
    return transactions_to_frame(list_transactions(user_id))


def list_transactions_between(user_id: str, start: date, end: date) -> List[Transaction]:
    """Transactions of ``user_id`` dated within ``[start, end]``, oldest first."""
    try:
        with connect() as conn:
            rows = conn.execute(
                f"SELECT {TRANSACTION_COLUMNS} FROM transactions "
                "WHERE user_id = ? AND date >= ? AND date <= ? ORDER BY date ASC, id ASC",
                (user_id, start.isoformat(), end.isoformat()),
            ).fetchall()
    except sqlite3.Error as exc:
        logger.exception("Error fetching transactions between %s and %s", start, end)
        raise FetchError(str(exc)) from exc
    return [Transaction.from_record(dict(row)) for row in rows]


def get_transaction(transaction_id: int, user_id: Optional[str] = None) -> Transaction:
    """Fetch one transaction by id.

    Without ``user_id`` the lookup is unscoped and callers must check the
    owner themselves (see :func:`ensure_owner`).  With ``user_id`` rows of
    other users are invisible, matching the backend's row-level policy.
    """
    sql = f"SELECT {TRANSACTION_COLUMNS} FROM transactions WHERE id = ?"
    params: List[Any] = [transaction_id]
    if user_id is not None:
        sql += " AND user_id = ?"
        params.append(user_id)
    try:
        with connect() as conn:
            row = conn.execute(sql, params).fetchone()
    except sqlite3.Error as exc:
        logger.exception("Error fetching transaction %s", transaction_id)
        raise FetchError(str(exc)) from exc
    if row is None:
        raise FetchError(f"Transaction {transaction_id} not found")
    return Transaction.from_record(dict(row))


def ensure_owner(transaction: Transaction, session) -> Transaction:
    """Raise ``UnauthorizedError`` unless ``session`` owns ``transaction``.

    This is a defence-in-depth assertion.  The user-scoped queries in this
    module are what actually keep users apart; passing this check alone
    proves nothing about an unscoped read.
    """
    if session is None or transaction.user_id != session.user_id:
        logger.warning(
            "Ownership check failed for transaction %s", transaction.id,
        )
        raise UnauthorizedError("You do not have permission to access this transaction")
    return transaction


def get_owned_transaction(transaction_id: int, session) -> Transaction:
    """Scoped fetch followed by the client-side ownership assertion."""
    transaction = get_transaction(transaction_id, user_id=session.user_id)
    return ensure_owner(transaction, session)


def insert_transaction(transaction: Transaction, user_id: str) -> Transaction:
    """Persist a new transaction for ``user_id`` and return the stored row."""
    try:
        record = transaction.to_record()
    except ValidationError as exc:
        raise InsertError(str(exc)) from exc

    stamp = _now_iso()
    try:
        with connect() as conn:
            cursor = conn.execute(
                "INSERT INTO transactions (user_id, amount, type, category, description, date, notes, "
                "created_at, updated_at) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    user_id,
                    record['amount'],
                    record['type'],
                    record['category'],
                    record['description'],
                    record['date'],
                    record['notes'],
                    stamp,
                    stamp,
                ),
            )
            conn.commit()
            new_id = cursor.lastrowid
    except sqlite3.Error as exc:
        logger.exception("Error inserting transaction")
        raise InsertError(str(exc)) from exc

    logger.info("Inserted transaction %s for user %s", new_id, user_id)
    return transaction.with_changes(id=new_id, user_id=user_id, created_at=stamp, updated_at=stamp)


def update_transaction(transaction_id: int, fields: Mapping[str, Any], user_id: str) -> Transaction:
    """Replace the editable fields of one of ``user_id``'s transactions.

    ``fields`` may also carry ``type``; it must agree with the resulting
    amount and is otherwise recomputed from the sign.
    """
    unknown = set(fields) - EDITABLE_FIELDS - {'type'}
    if unknown:
        raise UpdateError(f"Fields cannot be updated: {', '.join(sorted(unknown))}")

    try:
        current = get_transaction(transaction_id, user_id=user_id)
    except FetchError as exc:
        raise UpdateError(str(exc)) from exc

    changes = {key: value for key, value in fields.items() if key != 'type'}
    if 'date' in changes:
        parsed = parse_date(changes['date'])
        if parsed is None:
            raise UpdateError(f"Invalid date '{changes['date']}'")
        changes['date'] = parsed
    if 'amount' in changes:
        try:
            changes['amount'] = float(changes['amount'])
        except (TypeError, ValueError) as exc:
            raise UpdateError(f"Invalid amount '{changes['amount']}'") from exc
    updated = current.with_changes(**changes)

    requested_type = fields.get('type')
    if requested_type is not None and requested_type != transaction_type(updated.amount):
        raise UpdateError(f"Type '{requested_type}' does not match amount {updated.amount:.2f}")

    try:
        record = updated.to_record()
    except ValidationError as exc:
        raise UpdateError(str(exc)) from exc

    stamp = _now_iso()
    try:
        with connect() as conn:
            cursor = conn.execute(
                "UPDATE transactions SET amount = ?, type = ?, category = ?, description = ?, "
                "date = ?, notes = ?, updated_at = ? WHERE id = ? AND user_id = ?",
                (
                    record['amount'],
                    record['type'],
                    record['category'],
                    record['description'],
                    record['date'],
                    record['notes'],
                    stamp,
                    transaction_id,
                    user_id,
                ),
            )
            conn.commit()
            changed = cursor.rowcount
    except sqlite3.Error as exc:
        logger.exception("Error updating transaction %s", transaction_id)
        raise UpdateError(str(exc)) from exc

    if changed == 0:
        raise UpdateError(f"Transaction {transaction_id} not found")
    return updated.with_changes(updated_at=stamp)


def delete_transaction(transaction_id: int, user_id: str) -> None:
    """Delete one of ``user_id``'s transactions; a missing id is a no-op."""
    try:
        with connect() as conn:
            cursor = conn.execute(
                "DELETE FROM transactions WHERE id = ? AND user_id = ?",
                (transaction_id, user_id),
            )
            conn.commit()
            deleted = cursor.rowcount
    except sqlite3.Error as exc:
        logger.exception("Error deleting transaction %s", transaction_id)
        raise DeleteError(str(exc)) from exc
    if deleted == 0:
        logger.info("Transaction %s already absent; delete treated as success", transaction_id)


def count_transactions(user_id: str) -> int:
    try:
        with connect() as conn:
            row = conn.execute(
                "SELECT COUNT(*) FROM transactions WHERE user_id = ?", (user_id,)
            ).fetchone()
    except sqlite3.Error as exc:
        logger.exception("Error counting transactions")
        raise FetchError(str(exc)) from exc
    return int(row[0])


# ---------------------------------------------------------------------------
# Custom categories
# ---------------------------------------------------------------------------


def list_categories(user_id: str, txn_type: Optional[str] = None) -> List[Category]:
    sql = "SELECT id, name, type, user_id, created_at FROM categories WHERE user_id = ?"
    params: List[Any] = [user_id]
    if txn_type is not None:
        sql += " AND type = ?"
        params.append(txn_type)
    sql += " ORDER BY name"
    try:
        with connect() as conn:
            rows = conn.execute(sql, params).fetchall()
    except sqlite3.Error as exc:
        logger.exception("Error fetching categories")
        raise FetchError(str(exc)) from exc
    return [Category(**dict(row)) for row in rows]


def insert_category(name: str, txn_type: str, user_id: str) -> Category:
    cleaned = (name or '').strip()
    if not cleaned:
        raise InsertError("Category name is required")
    if txn_type not in TRANSACTION_TYPES:
        raise InsertError(f"Unknown category type '{txn_type}'")

    stamp = _now_iso()
    try:
        with connect() as conn:
            cursor = conn.execute(
                "INSERT INTO categories (name, type, user_id, created_at) VALUES (?, ?, ?, ?)",
                (cleaned, txn_type, user_id, stamp),
            )
            conn.commit()
            new_id = cursor.lastrowid
    except sqlite3.IntegrityError as exc:
        raise InsertError(f"Category '{cleaned}' already exists") from exc
    except sqlite3.Error as exc:
        logger.exception("Error adding category")
        raise InsertError(str(exc)) from exc
    return Category(name=cleaned, type=txn_type, user_id=user_id, id=new_id, created_at=stamp)


# ---------------------------------------------------------------------------
# Account-wide helpers
# ---------------------------------------------------------------------------


def clear_user_rows(conn: sqlite3.Connection, user_id: str) -> Dict[str, int]:
    """Delete ``user_id``'s transactions and categories on ``conn`` without committing."""
    txns = conn.execute("DELETE FROM transactions WHERE user_id = ?", (user_id,)).rowcount
    cats = conn.execute("DELETE FROM categories WHERE user_id = ?", (user_id,)).rowcount
    return {'transactions': txns, 'categories': cats}
