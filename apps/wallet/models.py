from django.db import models
from django.conf import settings
import uuid
from decimal import Decimal


class BalanceField(models.TextChoices):
    BALANCE = 'balance', 'Deposit balance'
    WINNING_BALANCE = 'winning_balance', 'Winning balance'
    HELD_WITHDRAWAL_BALANCE = 'held_withdrawal_balance', 'Held for withdrawal'


class Wallet(models.Model):
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='wallet')
    # Deposited funds, the only balance bets are paid from
    balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    # Settled winnings, withdrawable
    winning_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    # Winnings earmarked by a pending withdrawal request
    held_withdrawal_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    version = models.IntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=models.Q(balance__gte=0), name='wallet_balance_non_negative'),
            models.CheckConstraint(condition=models.Q(winning_balance__gte=0), name='wallet_winning_balance_non_negative'),
            models.CheckConstraint(
                condition=models.Q(held_withdrawal_balance__gte=0),
                name='wallet_held_withdrawal_balance_non_negative',
            ),
        ]

    def __str__(self):
        return f"{self.user} - {self.balance} / {self.winning_balance}"

    @property
    def total_balance(self):
        return self.balance + self.winning_balance


class WalletTransaction(models.Model):
    """Append-only ledger row, one per balance mutation"""
    TYPE_BET = 'bet'
    TYPE_WIN = 'win'
    TYPE_DEPOSIT = 'deposit'
    TYPE_WITHDRAWAL = 'withdrawal'
    TYPE_REFUND = 'refund'
    TYPE_REVERT = 'revert'
    TRANSACTION_TYPES = (
        (TYPE_BET, 'Bet'),
        (TYPE_WIN, 'Win'),
        (TYPE_DEPOSIT, 'Deposit'),
        (TYPE_WITHDRAWAL, 'Withdrawal'),
        (TYPE_REFUND, 'Refund'),
        (TYPE_REVERT, 'Revert'),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='transactions')
    type = models.CharField(max_length=20, choices=TRANSACTION_TYPES)
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    balance_field = models.CharField(max_length=30, choices=BalanceField.choices, default=BalanceField.BALANCE)
    balance_before = models.DecimalField(max_digits=14, decimal_places=2)
    balance_after = models.DecimalField(max_digits=14, decimal_places=2)
    description = models.CharField(max_length=255, blank=True)
    reference_type = models.CharField(max_length=50, null=True, blank=True)
    reference_id = models.BigIntegerField(null=True, blank=True)
    metadata = models.JSONField(default=dict, blank=True)
    idempotency_key = models.UUIDField(unique=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['user', '-created_at'], name='wallet_wall_user_id_0b7c3e_idx'),
            models.Index(fields=['type', 'created_at'], name='wallet_wall_type_4e9a1f_idx'),
            models.Index(fields=['reference_type', 'reference_id'], name='wallet_wall_referen_7d2b6c_idx'),
        ]
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.type} - {self.amount} - {self.created_at}"


class WithdrawalRequest(models.Model):
    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='withdrawal_requests')
    amount = models.DecimalField(max_digits=14, decimal_places=2)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    bank_details = models.JSONField(default=dict)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='processed_withdrawals',
    )
    processed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['user', '-created_at'], name='wallet_with_user_id_9a3f5b_idx'),
            models.Index(fields=['status', 'created_at'], name='wallet_with_status_2c8d4e_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user} - {self.amount} - {self.status}"
