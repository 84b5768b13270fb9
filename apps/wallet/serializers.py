from rest_framework import serializers
from decimal import Decimal
from django.conf import settings
from .models import WalletTransaction, WithdrawalRequest


class TransactionSerializer(serializers.ModelSerializer):
    """Serializer for ledger rows"""
    type_display = serializers.CharField(source='get_type_display', read_only=True)

    class Meta:
        model = WalletTransaction
        fields = [
            'id', 'type', 'type_display', 'amount', 'balance_field', 'balance_before',
            'balance_after', 'description', 'reference_type', 'reference_id',
            'metadata', 'created_at'
        ]
        read_only_fields = fields


class WithdrawalSerializer(serializers.ModelSerializer):
    """Serializer for withdrawal records"""
    status_display = serializers.CharField(source='get_status_display', read_only=True)
    user_phone = serializers.CharField(source='user.phone', read_only=True)

    class Meta:
        model = WithdrawalRequest
        fields = [
            'id', 'user', 'user_phone', 'amount', 'status', 'status_display',
            'bank_details', 'processed_by', 'processed_at', 'created_at'
        ]
        read_only_fields = fields


class DepositRequestSerializer(serializers.Serializer):
    """Admin deposit into a user's wallet"""
    user_id = serializers.IntegerField(min_value=1)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)


class WithdrawalRequestSerializer(serializers.Serializer):
    """Serializer for withdrawal request creation"""
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, min_value=Decimal('0.01'))
    bank_details = serializers.JSONField()

    def validate_amount(self, value):
        min_withdrawal = settings.MATKA_CONFIG['MIN_WITHDRAWAL_AMOUNT']
        if value < min_withdrawal:
            raise serializers.ValidationError(f"Minimum withdrawal amount is {min_withdrawal}")
        return value

    def validate_bank_details(self, value):
        if not isinstance(value, dict) or not value:
            raise serializers.ValidationError("Bank details are required")
        for field in ('account_number', 'ifsc', 'account_name'):
            if not value.get(field):
                raise serializers.ValidationError(f"Bank details require '{field}'")
        return value


class WithdrawalDecisionSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[WithdrawalRequest.STATUS_APPROVED, WithdrawalRequest.STATUS_REJECTED])
