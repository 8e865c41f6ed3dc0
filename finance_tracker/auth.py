"""Local identity provider: accounts, sessions and profile metadata.

A :class:`Session` is created by :func:`sign_in` / :func:`sign_up` and is
passed explicitly to every service call that needs the current user.  It is
immutable; the view layer keeps it in ``st.session_state`` and drops it on
sign-out.  Every failure surfaces as :class:`AuthError` with a message meant
to be shown verbatim.
"""

from __future__ import annotations

import logging
import sqlite3
import uuid
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from werkzeug.security import check_password_hash, generate_password_hash

try:
    from . import db
    from .currency import SUPPORTED_CURRENCIES
    from .errors import AuthError
    from .forms import EMAIL_PATTERN, MIN_PASSWORD_LENGTH, THEMES
    from .models import UserProfile
except ImportError:
    import db
    from currency import SUPPORTED_CURRENCIES
    from errors import AuthError
    from forms import EMAIL_PATTERN, MIN_PASSWORD_LENGTH, THEMES
    from models import UserProfile

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ('full_name', 'phone', 'currency', 'theme', 'email')


@dataclass(frozen=True)
class Session:
    """The authenticated user for the lifetime of one sign-in."""

    user_id: str
    email: str


def _normalize_email(email: str) -> str:
    return (email or '').strip().lower()


def _check_credentials_shape(email: str, password: str) -> None:
    if not EMAIL_PATTERN.fullmatch(email):
        raise AuthError("Unable to validate email address: invalid format")
    if len(password or '') < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password should be at least {MIN_PASSWORD_LENGTH} characters")


def _load_user_row(conn: sqlite3.Connection, column: str, value: Any) -> Optional[sqlite3.Row]:
    return conn.execute(f"SELECT * FROM users WHERE {column} = ?", (value,)).fetchone()


def sign_up(email: str, password: str, full_name: Optional[str] = '') -> Session:
    email = _normalize_email(email)
    _check_credentials_shape(email, password)

    user_id = str(uuid.uuid4())
    stamp = db._now_iso()
    try:
        with db.connect() as conn:
            conn.execute(
                "INSERT INTO users (id, email, password_hash, full_name, phone, currency, theme, "
                "created_at, updated_at) VALUES (?, ?, ?, ?, '', 'USD', 'light', ?, ?)",
                (user_id, email, generate_password_hash(password), (full_name or '').strip(), stamp, stamp),
            )
            conn.commit()
    except sqlite3.IntegrityError as exc:
        raise AuthError("User already registered") from exc
    except sqlite3.Error as exc:
        logger.exception("Sign-up failed")
        raise AuthError(str(exc)) from exc

    logger.info("Registered user %s", user_id)
    return Session(user_id=user_id, email=email)


def sign_in(email: str, password: str) -> Session:
    email = _normalize_email(email)
    try:
        with db.connect() as conn:
            row = _load_user_row(conn, "email", email)
    except sqlite3.Error as exc:
        logger.exception("Sign-in failed")
        raise AuthError(str(exc)) from exc

    if row is None or not check_password_hash(row['password_hash'], password or ''):
        raise AuthError("Invalid login credentials")
    return Session(user_id=row['id'], email=row['email'])


def sign_out(session: Optional[Session]) -> None:
    """Nothing is held server-side; the caller discards its ``Session``."""
    if session is not None:
        logger.info("User %s signed out", session.user_id)


def _verify_password(conn: sqlite3.Connection, session: Session, password: str) -> sqlite3.Row:
    row = _load_user_row(conn, "id", session.user_id)
    if row is None:
        raise AuthError("User not found")
    if not check_password_hash(row['password_hash'], password or ''):
        raise AuthError("Current password is incorrect")
    return row


def change_password(session: Session, current_password: str, new_password: str) -> None:
    if len(new_password or '') < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password should be at least {MIN_PASSWORD_LENGTH} characters")
    try:
        with db.connect() as conn:
            _verify_password(conn, session, current_password)
            conn.execute(
                "UPDATE users SET password_hash = ?, updated_at = ? WHERE id = ?",
                (generate_password_hash(new_password), db._now_iso(), session.user_id),
            )
            conn.commit()
    except sqlite3.Error as exc:
        logger.exception("Password change failed")
        raise AuthError(str(exc)) from exc


def delete_account(session: Session, password: str) -> None:
    """Remove the user together with all of their transactions and categories."""
    with db.connect() as conn:
        try:
            _verify_password(conn, session, password)
            removed = db.clear_user_rows(conn, session.user_id)
            conn.execute("DELETE FROM users WHERE id = ?", (session.user_id,))
            conn.commit()
        except sqlite3.Error as exc:
            conn.rollback()
            logger.exception("Account deletion failed")
            raise AuthError(str(exc)) from exc
    logger.info(
        "Deleted user %s (%d transactions, %d categories)",
        session.user_id, removed['transactions'], removed['categories'],
    )


def get_profile(session: Session) -> UserProfile:
    try:
        with db.connect() as conn:
            row = _load_user_row(conn, "id", session.user_id)
    except sqlite3.Error as exc:
        logger.exception("Loading profile failed")
        raise AuthError(str(exc)) from exc
    if row is None:
        raise AuthError("User not found")
    return UserProfile(
        id=row['id'],
        email=row['email'],
        full_name=row['full_name'] or '',
        phone=row['phone'] or '',
        currency=row['currency'] or 'USD',
        theme=row['theme'] or 'light',
        created_at=row['created_at'],
    )


def update_profile(session: Session, fields: Mapping[str, Any]) -> UserProfile:
    """Update profile metadata; unknown keys are rejected."""
    unknown = set(fields) - set(PROFILE_FIELDS)
    if unknown:
        raise AuthError(f"Unknown profile fields: {', '.join(sorted(unknown))}")

    updates: Dict[str, Any] = dict(fields)
    if 'email' in updates:
        updates['email'] = _normalize_email(updates['email'])
        if not EMAIL_PATTERN.fullmatch(updates['email']):
            raise AuthError("Unable to validate email address: invalid format")
    if 'currency' in updates:
        updates['currency'] = str(updates['currency']).upper()
        if updates['currency'] not in SUPPORTED_CURRENCIES:
            raise AuthError(f"Unsupported currency '{updates['currency']}'")
    if 'theme' in updates and updates['theme'] not in THEMES:
        raise AuthError(f"Unsupported theme '{updates['theme']}'")

    if updates:
        assignments = ", ".join(f"{column} = ?" for column in updates)
        params = list(updates.values()) + [db._now_iso(), session.user_id]
        try:
            with db.connect() as conn:
                conn.execute(f"UPDATE users SET {assignments}, updated_at = ? WHERE id = ?", params)
                conn.commit()
        except sqlite3.IntegrityError as exc:
            raise AuthError("A user with this email address has already been registered") from exc
        except sqlite3.Error as exc:
            logger.exception("Profile update failed")
            raise AuthError(str(exc)) from exc
    return get_profile(session)
