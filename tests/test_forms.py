from datetime import date

import pytest

from finance_tracker.errors import ValidationError
from finance_tracker.forms import CategoryForm, PasswordForm, ProfileForm, TransactionForm
from finance_tracker.models import Transaction


def fields_of(errors):
    return {error.field for error in errors}


def test_transaction_form_requires_fields():
    errors = TransactionForm(amount='', category='', description='  ', date=None).validate()
    assert fields_of(errors) == {'amount', 'category', 'description', 'date'}


@pytest.mark.parametrize('amount', ['0', '-5', 'abc', 'nan'])
def test_transaction_form_rejects_bad_amounts(amount):
    form = TransactionForm(amount=amount, category='Housing', description='Rent', date=date(2024, 3, 1))
    assert fields_of(form.validate()) == {'amount'}


def test_transaction_form_applies_sign():
    expense = TransactionForm(amount='12.50', txn_type='expense', category='Shopping',
                              description='Socks', date='2024-03-02')
    assert expense.to_fields()['amount'] == -12.5
    assert expense.to_fields()['date'] == date(2024, 3, 2)
    income = TransactionForm(amount=100, txn_type='income', category='Salary', description='Pay')
    assert income.to_transaction().type == 'income'


def test_transaction_form_to_fields_raises():
    with pytest.raises(ValidationError) as excinfo:
        TransactionForm(amount=5, txn_type='transfer', category='X', description='Y').to_fields()
    assert 'txn_type' in excinfo.value.as_dict()


def test_from_transaction_prefills_edit_form():
    txn = Transaction(amount=-80, category='Utilities', description='Power', date=date(2024, 3, 3), id=9)
    form = TransactionForm.from_transaction(txn)
    assert form.amount == 80
    assert form.txn_type == 'expense'
    assert form.mode == 'edit'
    assert form.notes == ''


def test_profile_form_validation():
    form = ProfileForm(full_name='', email='not-an-email', phone='123', currency='XYZ', theme='blue')
    assert fields_of(form.validate()) == {'full_name', 'email', 'phone', 'currency', 'theme'}
    ok = ProfileForm(full_name='Ada', email='ada@example.com', phone='+1 555 123 4567')
    assert ok.validate() == []
    assert ProfileForm(full_name='Ada', email='ada@example.com').validate() == []


def test_password_form():
    assert fields_of(PasswordForm('old', 'short', 'other').validate()) == {'new_password', 'confirm_password'}
    assert PasswordForm('old', 'longenough', 'longenough').validate() == []


def test_category_form():
    assert fields_of(CategoryForm(name=' ', txn_type='expense').validate()) == {'name'}
    assert CategoryForm(name='Pets').validate() == []
