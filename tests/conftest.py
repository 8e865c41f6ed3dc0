import pandas as pd
import pytest

from finance_tracker import config, db


@pytest.fixture
def temp_db(tmp_path, monkeypatch):
    """Point the store at a fresh SQLite file under ``tmp_path``."""
    monkeypatch.setattr(config, 'DATA_DIR', tmp_path)
    monkeypatch.setattr(config, 'EXPORTS_DIR', tmp_path / 'exports')
    monkeypatch.setattr(db, 'DB_PATH', tmp_path / 'finance_tracker.db')
    db.init_db()
    return tmp_path


@pytest.fixture
def sample_df():
    return pd.DataFrame([
        {'id': 1, 'amount': 5000, 'category': 'Salary', 'description': 'Monthly Salary', 'date': '2024-03-15'},
        {'id': 2, 'amount': -150.75, 'category': 'Food & Dining', 'description': 'Grocery Shopping', 'date': '2024-03-14'},
        {'id': 3, 'amount': -1200, 'category': 'Housing', 'description': 'Rent Payment', 'date': '2024-03-01'},
    ])
