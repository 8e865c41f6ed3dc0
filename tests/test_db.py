from datetime import date

import pytest

from finance_tracker import db
from finance_tracker.auth import Session
from finance_tracker.errors import FetchError, InsertError, UnauthorizedError, UpdateError
from finance_tracker.models import Transaction


def make_txn(amount, day, category='Food & Dining', description='Lunch'):
    return Transaction(amount=amount, category=category, description=description, date=date.fromisoformat(day))


def test_insert_and_list_most_recent_first(temp_db):
    first = db.insert_transaction(make_txn(-10, '2024-03-01'), 'alice')
    second = db.insert_transaction(make_txn(500, '2024-03-05', 'Salary', 'Pay'), 'alice')
    third = db.insert_transaction(make_txn(-5, '2024-03-05'), 'alice')
    db.insert_transaction(make_txn(-99, '2024-03-10'), 'bob')

    listed = db.list_transactions('alice')
    assert [txn.id for txn in listed] == [third.id, second.id, first.id]
    assert all(txn.user_id == 'alice' for txn in listed)
    assert second.type == 'income'
    assert second.created_at is not None


def test_fetch_transactions_frame(temp_db):
    db.insert_transaction(make_txn(-10, '2024-03-01'), 'alice')
    frame = db.fetch_transactions_frame('alice')
    assert list(frame['amount']) == [-10.0]
    assert frame.loc[0, 'type'] == 'expense'


def test_list_transactions_between(temp_db):
    for day in ('2024-02-29', '2024-03-01', '2024-03-31', '2024-04-01'):
        db.insert_transaction(make_txn(-1, day), 'alice')
    rows = db.list_transactions_between('alice', date(2024, 3, 1), date(2024, 3, 31))
    assert [txn.date for txn in rows] == [date(2024, 3, 1), date(2024, 3, 31)]


def test_get_transaction_scoped_and_missing(temp_db):
    saved = db.insert_transaction(make_txn(-10, '2024-03-01'), 'alice')
    assert db.get_transaction(saved.id).user_id == 'alice'
    with pytest.raises(FetchError):
        db.get_transaction(saved.id, user_id='bob')
    with pytest.raises(FetchError):
        db.get_transaction(12345)


def test_ensure_owner(temp_db):
    saved = db.insert_transaction(make_txn(-10, '2024-03-01'), 'alice')
    txn = db.get_transaction(saved.id)
    assert db.ensure_owner(txn, Session('alice', 'a@example.com')) is txn
    with pytest.raises(UnauthorizedError):
        db.ensure_owner(txn, Session('bob', 'b@example.com'))
    with pytest.raises(FetchError):
        db.get_owned_transaction(saved.id, Session('bob', 'b@example.com'))


def test_insert_rejects_zero_amount(temp_db):
    with pytest.raises(InsertError):
        db.insert_transaction(make_txn(0, '2024-03-01'), 'alice')


def test_update_transaction(temp_db):
    saved = db.insert_transaction(make_txn(-10, '2024-03-01'), 'alice')
    updated = db.update_transaction(saved.id, {'amount': 25, 'category': 'Freelance', 'date': '2024-03-04'}, 'alice')
    assert updated.type == 'income'
    reloaded = db.get_transaction(saved.id, user_id='alice')
    assert reloaded.amount == 25
    assert reloaded.date == date(2024, 3, 4)
    assert reloaded.updated_at == updated.updated_at


def test_update_rejects_type_mismatch_and_unknown_fields(temp_db):
    saved = db.insert_transaction(make_txn(-10, '2024-03-01'), 'alice')
    with pytest.raises(UpdateError):
        db.update_transaction(saved.id, {'amount': -20, 'type': 'income'}, 'alice')
    with pytest.raises(UpdateError):
        db.update_transaction(saved.id, {'user_id': 'bob'}, 'alice')


def test_update_rejects_unparseable_values(temp_db):
    saved = db.insert_transaction(make_txn(-10, '2024-03-01'), 'alice')
    with pytest.raises(UpdateError, match='Invalid amount'):
        db.update_transaction(saved.id, {'amount': 'abc'}, 'alice')
    with pytest.raises(UpdateError, match='Invalid amount'):
        db.update_transaction(saved.id, {'amount': None}, 'alice')
    with pytest.raises(UpdateError, match='Invalid date'):
        db.update_transaction(saved.id, {'date': 'not-a-date'}, 'alice')
    reloaded = db.get_transaction(saved.id, user_id='alice')
    assert reloaded.amount == -10
    assert reloaded.date == date(2024, 3, 1)


def test_update_other_users_row_fails(temp_db):
    saved = db.insert_transaction(make_txn(-10, '2024-03-01'), 'alice')
    with pytest.raises(UpdateError):
        db.update_transaction(saved.id, {'amount': -1}, 'bob')
    assert db.get_transaction(saved.id).amount == -10


def test_delete_is_idempotent_and_scoped(temp_db):
    saved = db.insert_transaction(make_txn(-10, '2024-03-01'), 'alice')
    db.delete_transaction(saved.id, 'bob')
    assert db.count_transactions('alice') == 1
    db.delete_transaction(saved.id, 'alice')
    db.delete_transaction(saved.id, 'alice')
    assert db.count_transactions('alice') == 0


def test_categories(temp_db):
    db.insert_category('Pets', 'expense', 'alice')
    db.insert_category('Royalties', 'income', 'alice')
    db.insert_category('Pets', 'expense', 'bob')
    assert [c.name for c in db.list_categories('alice')] == ['Pets', 'Royalties']
    assert [c.name for c in db.list_categories('alice', 'income')] == ['Royalties']
    with pytest.raises(InsertError):
        db.insert_category('Pets', 'expense', 'alice')
    with pytest.raises(InsertError):
        db.insert_category('  ', 'expense', 'alice')


def test_clear_user_rows_waits_for_commit(temp_db):
    db.insert_transaction(make_txn(-10, '2024-03-01'), 'alice')
    db.insert_category('Pets', 'expense', 'alice')
    db.insert_transaction(make_txn(-3, '2024-03-02'), 'bob')
    with db.connect() as conn:
        assert db.clear_user_rows(conn, 'alice') == {'transactions': 1, 'categories': 1}
        conn.rollback()
    assert db.count_transactions('alice') == 1
    with db.connect() as conn:
        db.clear_user_rows(conn, 'alice')
        conn.commit()
    assert db.list_transactions('alice') == []
    assert db.count_transactions('bob') == 1
