from datetime import date

import pytest

from finance_tracker import auth, db
from finance_tracker.errors import AuthError
from finance_tracker.models import Transaction


def test_sign_up_then_sign_in(temp_db):
    session = auth.sign_up('Ada@Example.com', 'secret1', full_name='Ada Lovelace')
    assert session.email == 'ada@example.com'
    again = auth.sign_in('ada@example.com', 'secret1')
    assert again.user_id == session.user_id
    profile = auth.get_profile(again)
    assert profile.full_name == 'Ada Lovelace'
    assert profile.currency == 'USD'
    assert profile.theme == 'light'


def test_sign_up_rejects_duplicates_and_bad_input(temp_db):
    auth.sign_up('ada@example.com', 'secret1')
    with pytest.raises(AuthError, match='already registered'):
        auth.sign_up('ada@example.com', 'secret2')
    with pytest.raises(AuthError):
        auth.sign_up('not-an-email', 'secret1')
    with pytest.raises(AuthError):
        auth.sign_up('bob@example.com', '123')


def test_sign_in_wrong_password(temp_db):
    auth.sign_up('ada@example.com', 'secret1')
    with pytest.raises(AuthError, match='Invalid login credentials'):
        auth.sign_in('ada@example.com', 'wrong-one')
    with pytest.raises(AuthError, match='Invalid login credentials'):
        auth.sign_in('nobody@example.com', 'secret1')


def test_session_is_immutable(temp_db):
    session = auth.sign_up('ada@example.com', 'secret1')
    with pytest.raises(AttributeError):
        session.user_id = 'someone-else'


def test_update_profile(temp_db):
    session = auth.sign_up('ada@example.com', 'secret1')
    profile = auth.update_profile(session, {'currency': 'eur', 'theme': 'dark', 'phone': '+44 20 7946 0000'})
    assert profile.currency == 'EUR'
    assert profile.theme == 'dark'
    with pytest.raises(AuthError):
        auth.update_profile(session, {'currency': 'XYZ'})
    with pytest.raises(AuthError):
        auth.update_profile(session, {'password_hash': 'x'})


def test_update_profile_email_conflict(temp_db):
    auth.sign_up('bob@example.com', 'secret1')
    session = auth.sign_up('ada@example.com', 'secret1')
    with pytest.raises(AuthError):
        auth.update_profile(session, {'email': 'bob@example.com'})


def test_change_password(temp_db):
    session = auth.sign_up('ada@example.com', 'secret1')
    with pytest.raises(AuthError, match='incorrect'):
        auth.change_password(session, 'nope', 'newsecret')
    auth.change_password(session, 'secret1', 'newsecret')
    assert auth.sign_in('ada@example.com', 'newsecret').user_id == session.user_id


def test_delete_account_removes_data(temp_db):
    session = auth.sign_up('ada@example.com', 'secret1')
    db.insert_transaction(
        Transaction(amount=-5, category='Food & Dining', description='Tea', date=date(2024, 3, 1)),
        session.user_id,
    )
    with pytest.raises(AuthError):
        auth.delete_account(session, 'wrong')
    auth.delete_account(session, 'secret1')
    assert db.count_transactions(session.user_id) == 0
    with pytest.raises(AuthError):
        auth.sign_in('ada@example.com', 'secret1')


def test_failed_account_deletion_keeps_everything(temp_db):
    session = auth.sign_up('ada@example.com', 'secret1')
    db.insert_transaction(
        Transaction(amount=-5, category='Food & Dining', description='Tea', date=date(2024, 3, 1)),
        session.user_id,
    )
    db.insert_category('Pets', 'expense', session.user_id)
    with db.connect() as conn:
        conn.execute(
            "CREATE TRIGGER block_user_delete BEFORE DELETE ON users "
            "BEGIN SELECT RAISE(ABORT, 'account locked'); END"
        )
        conn.commit()

    with pytest.raises(AuthError, match='account locked'):
        auth.delete_account(session, 'secret1')
    assert db.count_transactions(session.user_id) == 1
    assert [c.name for c in db.list_categories(session.user_id)] == ['Pets']
    assert auth.sign_in('ada@example.com', 'secret1').user_id == session.user_id


def test_sign_up_without_full_name(temp_db):
    session = auth.sign_up('ada@example.com', 'secret1', full_name=None)
    assert auth.get_profile(session).full_name == ''
