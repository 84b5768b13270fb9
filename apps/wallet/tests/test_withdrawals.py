from decimal import Decimal

import pytest

from core.exceptions import InsufficientFundsException
from apps.wallet.exceptions import InvalidAmountException, WithdrawalAlreadyProcessedException
from apps.wallet.models import BalanceField, Wallet, WalletTransaction, WithdrawalRequest
from apps.wallet.services import WalletService


pytestmark = pytest.mark.django_db

BANK = {'account_number': '12345678', 'ifsc': 'SBIN0000001', 'account_name': 'Player One'}


@pytest.fixture
def winner(player):
    WalletService.credit(player.id, '500', BalanceField.WINNING_BALANCE, WalletTransaction.TYPE_WIN)
    return player


def test_request_holds_winnings(winner):
    withdrawal = WalletService.request_withdrawal(winner, '300', BANK)

    wallet = Wallet.objects.get(user=winner)
    assert withdrawal.status == WithdrawalRequest.STATUS_PENDING
    assert wallet.winning_balance == Decimal('200.00')
    assert wallet.held_withdrawal_balance == Decimal('300.00')
    assert wallet.balance == Decimal('1000.00')


def test_request_below_minimum(winner):
    with pytest.raises(InvalidAmountException):
        WalletService.request_withdrawal(winner, '50', BANK)


def test_request_uses_winnings_only(player):
    with pytest.raises(InsufficientFundsException):
        WalletService.request_withdrawal(player, '100', BANK)


def test_approve_releases_hold(winner, admin):
    withdrawal = WalletService.request_withdrawal(winner, '300', BANK)
    WalletService.approve_withdrawal(withdrawal.id, admin)

    wallet = Wallet.objects.get(user=winner)
    assert wallet.held_withdrawal_balance == Decimal('0.00')
    assert wallet.winning_balance == Decimal('200.00')
    release = WalletTransaction.objects.filter(
        user=winner, balance_field=BalanceField.HELD_WITHDRAWAL_BALANCE
    ).get()
    assert release.type == WalletTransaction.TYPE_WITHDRAWAL
    assert release.reference_id == withdrawal.id


def test_reject_returns_to_winnings(winner, admin):
    withdrawal = WalletService.request_withdrawal(winner, '300', BANK)
    WalletService.reject_withdrawal(withdrawal.id, admin)

    wallet = Wallet.objects.get(user=winner)
    assert wallet.winning_balance == Decimal('500.00')
    assert wallet.held_withdrawal_balance == Decimal('0.00')
    assert WalletTransaction.objects.filter(user=winner, type=WalletTransaction.TYPE_REFUND).count() == 1


def test_request_processed_once(winner, admin):
    withdrawal = WalletService.request_withdrawal(winner, '300', BANK)
    WalletService.approve_withdrawal(withdrawal.id, admin)
    with pytest.raises(WithdrawalAlreadyProcessedException):
        WalletService.reject_withdrawal(withdrawal.id, admin)
