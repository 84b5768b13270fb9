from decimal import Decimal

import pytest

from core.exceptions import InsufficientFundsException
from apps.wallet.exceptions import InvalidAmountException, WalletNotFoundException
from apps.wallet.models import BalanceField, Wallet, WalletTransaction
from apps.wallet.selectors import WalletQueries
from apps.wallet.services import WalletService, format_amount, to_amount


pytestmark = pytest.mark.django_db


def test_wallet_created_with_user(make_user):
    user = make_user()
    wallet = Wallet.objects.get(user=user)
    assert wallet.balance == Decimal('0')
    assert wallet.winning_balance == Decimal('0')


def test_deposit_writes_one_row(player):
    txn = WalletTransaction.objects.get(user=player)
    assert txn.type == WalletTransaction.TYPE_DEPOSIT
    assert txn.balance_before == Decimal('0')
    assert txn.balance_after == Decimal('1000.00')


def test_conditional_debit(player):
    txn = WalletService.conditional_debit(player.id, '250.50', reference_type='game_session', reference_id=1)
    assert txn.type == WalletTransaction.TYPE_BET
    assert txn.balance_before == Decimal('1000.00')
    assert txn.balance_after == Decimal('749.50')
    assert Wallet.objects.get(user=player).balance == Decimal('749.50')


def test_conditional_debit_refuses_overdraft(player):
    WalletService.conditional_debit(player.id, '600')
    with pytest.raises(InsufficientFundsException):
        WalletService.conditional_debit(player.id, '600')

    assert Wallet.objects.get(user=player).balance == Decimal('400.00')
    assert WalletTransaction.objects.filter(user=player, type=WalletTransaction.TYPE_BET).count() == 1


def test_conditional_debit_unknown_wallet(db):
    with pytest.raises(WalletNotFoundException):
        WalletService.conditional_debit(999999, '1')


def test_credit_and_debit_named_field(player):
    WalletService.credit(player.id, '90', BalanceField.WINNING_BALANCE, WalletTransaction.TYPE_WIN)
    txn = WalletService.debit(player.id, '40', BalanceField.WINNING_BALANCE, WalletTransaction.TYPE_REVERT)

    wallet = Wallet.objects.get(user=player)
    assert wallet.winning_balance == Decimal('50.00')
    assert wallet.balance == Decimal('1000.00')
    assert txn.balance_field == BalanceField.WINNING_BALANCE
    assert (txn.balance_before, txn.balance_after) == (Decimal('90.00'), Decimal('50.00'))


def test_debit_never_goes_negative(player):
    with pytest.raises(InsufficientFundsException):
        WalletService.debit(player.id, '1', BalanceField.WINNING_BALANCE, WalletTransaction.TYPE_REVERT)
    assert Wallet.objects.get(user=player).winning_balance == Decimal('0')


@pytest.mark.parametrize('value', ['0', '-1', '1.001', 'abc', None])
def test_to_amount_rejects(value):
    with pytest.raises(InvalidAmountException):
        to_amount(value)


def test_every_mutation_has_a_ledger_row(player):
    WalletService.conditional_debit(player.id, '100')
    WalletService.credit(player.id, '900', BalanceField.WINNING_BALANCE, WalletTransaction.TYPE_WIN)
    WalletService.request_withdrawal(player, '200', {'account_number': '1', 'ifsc': 'X', 'account_name': 'P'})

    wallet = Wallet.objects.get(user=player)
    for field in BalanceField:
        rows = WalletTransaction.objects.filter(user=player, balance_field=field).order_by('created_at', 'id')
        if rows:
            assert rows.last().balance_after == getattr(wallet, field)


def test_balance_summary_and_transaction_summary(player):
    WalletService.conditional_debit(player.id, '100')
    summary = WalletService.get_balance_summary(player, use_cache=False)
    assert summary['balance'] == '900.00'
    assert summary['total_balance'] == '900.00'

    by_type = WalletQueries.get_user_summary(player)
    assert by_type['deposit'] == {'total_amount': '1000.00', 'count': 1}
    assert by_type['bet']['count'] == 1
    assert by_type['win']['count'] == 0


def test_repeated_full_debits_stop_at_floor(make_user):
    user = make_user(balance='250')
    outcomes = []
    for _attempt in range(5):
        try:
            WalletService.conditional_debit(user.id, '100')
            outcomes.append('debited')
        except InsufficientFundsException:
            outcomes.append('refused')

    assert outcomes.count('debited') == 2
    assert Wallet.objects.get(user=user).balance == Decimal('50.00')
    assert WalletTransaction.objects.filter(user=user, type=WalletTransaction.TYPE_BET).count() == 2


@pytest.mark.parametrize('value, expected', [
    (Decimal('20'), '20.00'), (Decimal('14.750'), '14.75'), (None, '0.00'), (Decimal('0'), '0.00'),
])
def test_format_amount_is_backend_independent(value, expected):
    assert format_amount(value) == expected
