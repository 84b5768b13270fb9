from decimal import Decimal, InvalidOperation
import logging

from django.conf import settings
from django.core.cache import cache
from django.db import transaction
from django.db.models import F
from django.utils import timezone

from core.exceptions import InsufficientFundsException
from .exceptions import (
    InvalidAmountException, WalletNotFoundException,
    WithdrawalNotFoundException, WithdrawalAlreadyProcessedException,
)
from .models import BalanceField, Wallet, WalletTransaction, WithdrawalRequest

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def to_amount(value) -> Decimal:
    """Coerce to a positive 2-place Decimal or raise InvalidAmountException"""
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountException(f"Invalid amount: {value!r}")
    if not amount.is_finite() or amount <= 0:
        raise InvalidAmountException("Amount must be greater than zero")
    if amount != amount.quantize(CENT):
        raise InvalidAmountException("Amount cannot have more than 2 decimal places")
    return amount.quantize(CENT)


def format_amount(value) -> str:
    """Two-place string for API output; aggregates come back unscaled on some backends"""
    return str(Decimal(value or 0).quantize(CENT))


def balance_cache_key(user_id):
    return f"wallet_balance:{user_id}"


class WalletService:
    """
    Balance mutation primitives.

    Every mutation writes exactly one WalletTransaction in the same
    atomic block. When called inside an outer ``transaction.atomic()`` the
    inner block is a savepoint, so the caller's unit of work decides what is
    committed.
    """

    @staticmethod
    def get_or_create_wallet(user):
        wallet, created = Wallet.objects.get_or_create(user=user)
        return wallet

    @staticmethod
    def get_wallet(user_id):
        try:
            return Wallet.objects.get(user_id=user_id)
        except Wallet.DoesNotExist:
            raise WalletNotFoundException(f"No wallet for user {user_id}")

    @staticmethod
    def _lock_wallet(user_id):
        try:
            return Wallet.objects.select_for_update().get(user_id=user_id)
        except Wallet.DoesNotExist:
            raise WalletNotFoundException(f"No wallet for user {user_id}")

    @staticmethod
    def _record(user_id, transaction_type, amount, field, balance_before, balance_after,
                description='', reference_type=None, reference_id=None, metadata=None):
        txn = WalletTransaction.objects.create(
            user_id=user_id,
            type=transaction_type,
            amount=amount,
            balance_field=field,
            balance_before=balance_before,
            balance_after=balance_after,
            description=description[:255],
            reference_type=reference_type,
            reference_id=reference_id,
            metadata=metadata or {},
        )
        transaction.on_commit(lambda: cache.delete(balance_cache_key(user_id)))
        logger.info(
            f"Ledger {transaction_type}: user={user_id} field={field} amount={amount} "
            f"{balance_before} -> {balance_after}"
        )
        return txn

    @staticmethod
    def conditional_debit(user_id, amount, description='', reference_type=None, reference_id=None,
                          metadata=None):
        """
        Take ``amount`` from the deposit balance only if it is covered.

        The check and the decrement are one UPDATE, so two concurrent
        placements can never both pass against the same stale balance.
        """
        amount = to_amount(amount)
        with transaction.atomic():
            updated = Wallet.objects.filter(user_id=user_id, balance__gte=amount).update(
                balance=F('balance') - amount,
                version=F('version') + 1,
                updated_at=timezone.now(),
            )
            if updated == 0:
                if not Wallet.objects.filter(user_id=user_id).exists():
                    raise WalletNotFoundException(f"No wallet for user {user_id}")
                raise InsufficientFundsException()

            balance_after = Wallet.objects.values_list('balance', flat=True).get(user_id=user_id)
            return WalletService._record(
                user_id, WalletTransaction.TYPE_BET, amount, BalanceField.BALANCE,
                balance_after + amount, balance_after,
                description, reference_type, reference_id, metadata,
            )

    @staticmethod
    def credit(user_id, amount, field, transaction_type, description='', reference_type=None,
               reference_id=None, metadata=None):
        """Increase one balance field under a row lock"""
        amount = to_amount(amount)
        field = BalanceField(field)
        with transaction.atomic():
            wallet = WalletService._lock_wallet(user_id)
            balance_before = getattr(wallet, field)
            setattr(wallet, field, balance_before + amount)
            wallet.version += 1
            wallet.save(update_fields=[field, 'version', 'updated_at'])
            return WalletService._record(
                user_id, transaction_type, amount, field,
                balance_before, getattr(wallet, field),
                description, reference_type, reference_id, metadata,
            )

    @staticmethod
    def debit(user_id, amount, field, transaction_type, description='', reference_type=None,
              reference_id=None, metadata=None):
        """
        Decrease one balance field under a row lock.

        Callers check sufficiency first; a field is still never allowed to go
        negative, the whole unit of work aborts instead.
        """
        amount = to_amount(amount)
        field = BalanceField(field)
        with transaction.atomic():
            wallet = WalletService._lock_wallet(user_id)
            balance_before = getattr(wallet, field)
            if balance_before < amount:
                raise InsufficientFundsException(
                    f"Insufficient {field.label.lower()}: has {balance_before}, needs {amount}"
                )
            setattr(wallet, field, balance_before - amount)
            wallet.version += 1
            wallet.save(update_fields=[field, 'version', 'updated_at'])
            return WalletService._record(
                user_id, transaction_type, amount, field,
                balance_before, getattr(wallet, field),
                description, reference_type, reference_id, metadata,
            )

    @staticmethod
    def deposit(user_id, amount, description=None):
        """Admin top-up of the deposit balance"""
        return WalletService.credit(
            user_id, amount, BalanceField.BALANCE, WalletTransaction.TYPE_DEPOSIT,
            description=description or 'Funds added by admin',
        )

    @staticmethod
    def _move(wallet, source, target, amount):
        source_before = getattr(wallet, source)
        target_before = getattr(wallet, target)
        setattr(wallet, source, source_before - amount)
        setattr(wallet, target, target_before + amount)
        wallet.version += 1
        wallet.save(update_fields=[source, target, 'version', 'updated_at'])
        return source_before, target_before

    @staticmethod
    def request_withdrawal(user, amount, bank_details):
        """Earmark winnings for withdrawal: winning_balance -> held_withdrawal_balance"""
        amount = to_amount(amount)
        min_withdrawal = settings.MATKA_CONFIG['MIN_WITHDRAWAL_AMOUNT']
        if amount < min_withdrawal:
            raise InvalidAmountException(f"Minimum withdrawal amount is {min_withdrawal}")

        with transaction.atomic():
            wallet = WalletService._lock_wallet(user.id)
            if wallet.winning_balance < amount:
                raise InsufficientFundsException('Insufficient winning balance')

            winning_before, held_before = WalletService._move(
                wallet, BalanceField.WINNING_BALANCE, BalanceField.HELD_WITHDRAWAL_BALANCE, amount
            )
            withdrawal = WithdrawalRequest.objects.create(
                user=user,
                amount=amount,
                bank_details=bank_details,
            )
            WalletService._record(
                user.id, WalletTransaction.TYPE_WITHDRAWAL, amount, BalanceField.WINNING_BALANCE,
                winning_before, wallet.winning_balance,
                'Withdrawal request created', 'withdrawal_request', withdrawal.id,
                {'held_before': str(held_before), 'held_after': str(wallet.held_withdrawal_balance)},
            )
            return withdrawal

    @staticmethod
    def _lock_pending_withdrawal(withdrawal_id):
        try:
            withdrawal = WithdrawalRequest.objects.select_for_update().get(pk=withdrawal_id)
        except WithdrawalRequest.DoesNotExist:
            raise WithdrawalNotFoundException()
        if withdrawal.status != WithdrawalRequest.STATUS_PENDING:
            raise WithdrawalAlreadyProcessedException()
        return withdrawal

    @staticmethod
    def approve_withdrawal(withdrawal_id, admin):
        """Release the held amount; the payout itself happens off-platform"""
        with transaction.atomic():
            withdrawal = WalletService._lock_pending_withdrawal(withdrawal_id)
            withdrawal.status = WithdrawalRequest.STATUS_APPROVED
            withdrawal.processed_by = admin
            withdrawal.processed_at = timezone.now()
            withdrawal.save(update_fields=['status', 'processed_by', 'processed_at'])

            WalletService.debit(
                withdrawal.user_id, withdrawal.amount, BalanceField.HELD_WITHDRAWAL_BALANCE,
                WalletTransaction.TYPE_WITHDRAWAL,
                description='Withdrawal approved',
                reference_type='withdrawal_request',
                reference_id=withdrawal.id,
            )
            return withdrawal

    @staticmethod
    def reject_withdrawal(withdrawal_id, admin):
        """Return the held amount to winning_balance"""
        with transaction.atomic():
            withdrawal = WalletService._lock_pending_withdrawal(withdrawal_id)
            withdrawal.status = WithdrawalRequest.STATUS_REJECTED
            withdrawal.processed_by = admin
            withdrawal.processed_at = timezone.now()
            withdrawal.save(update_fields=['status', 'processed_by', 'processed_at'])

            wallet = WalletService._lock_wallet(withdrawal.user_id)
            if wallet.held_withdrawal_balance < withdrawal.amount:
                raise InsufficientFundsException('Held balance does not cover this withdrawal')
            held_before, winning_before = WalletService._move(
                wallet, BalanceField.HELD_WITHDRAWAL_BALANCE, BalanceField.WINNING_BALANCE, withdrawal.amount
            )
            WalletService._record(
                withdrawal.user_id, WalletTransaction.TYPE_REFUND, withdrawal.amount,
                BalanceField.WINNING_BALANCE, winning_before, wallet.winning_balance,
                'Withdrawal rejected - amount refunded', 'withdrawal_request', withdrawal.id,
                {'held_before': str(held_before), 'held_after': str(wallet.held_withdrawal_balance)},
            )
            return withdrawal

    @staticmethod
    def get_balance_summary(user, use_cache=True):
        """
        Current balances as strings, cached briefly and dropped on every
        committed mutation
        """
        cache_key = balance_cache_key(user.id)
        if use_cache:
            cached = cache.get(cache_key)
            if cached is not None:
                return cached

        wallet = WalletService.get_or_create_wallet(user)
        summary = {
            'balance': str(wallet.balance),
            'winning_balance': str(wallet.winning_balance),
            'held_withdrawal_balance': str(wallet.held_withdrawal_balance),
            'total_balance': str(wallet.total_balance),
        }
        if use_cache:
            cache.set(cache_key, summary, 30)
        return summary
