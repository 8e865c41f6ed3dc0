import importlib.util
from pathlib import Path

from finance_tracker import auth, db
from finance_tracker.errors import InsertError

SCRIPTS_DIR = Path(__file__).resolve().parents[1] / 'scripts'


def _load_script(filename, name):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS_DIR / filename)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_seed_creates_account_and_inserts_demo_rows(temp_db, capsys):
    seed = _load_script('seed_demo_data.py', 'seed_demo_data_test')
    assert seed.main('demo@example.com', 'secret1', create=True) == 0
    session = auth.sign_in('demo@example.com', 'secret1')
    assert db.count_transactions(session.user_id) == len(seed.DEMO_TRANSACTIONS)
    assert 'Inserted 15 demo transactions' in capsys.readouterr().out


def test_seed_reports_partial_insert_and_fails(temp_db, monkeypatch, capsys):
    seed = _load_script('seed_demo_data.py', 'seed_demo_data_test')
    real_insert = db.insert_transaction
    calls = []

    def flaky_insert(transaction, user_id):
        calls.append(transaction)
        if len(calls) == 3:
            raise InsertError('disk I/O error')
        return real_insert(transaction, user_id)

    monkeypatch.setattr(db, 'insert_transaction', flaky_insert)
    assert seed.main('demo@example.com', 'secret1', create=True) == 1
    out = capsys.readouterr().out
    assert 'Inserted 2 of 15 demo transactions' in out
    assert 'disk I/O error' in out


def test_seed_unknown_account_fails(temp_db, capsys):
    seed = _load_script('seed_demo_data.py', 'seed_demo_data_test')
    assert seed.main('nobody@example.com', 'secret1') == 1
    assert 'Could not sign in' in capsys.readouterr().out
