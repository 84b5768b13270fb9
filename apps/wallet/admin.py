from django.contrib import admin
from .models import Wallet, WalletTransaction, WithdrawalRequest


@admin.register(Wallet)
class WalletAdmin(admin.ModelAdmin):
    list_display = ('user', 'balance', 'winning_balance', 'held_withdrawal_balance', 'updated_at')
    search_fields = ('user__phone', 'user__name')
    # Balances only change through the ledger
    readonly_fields = ('balance', 'winning_balance', 'held_withdrawal_balance', 'version')


@admin.register(WalletTransaction)
class WalletTransactionAdmin(admin.ModelAdmin):
    list_display = ('user', 'type', 'amount', 'balance_field', 'balance_before', 'balance_after', 'created_at')
    list_filter = ('type', 'balance_field')
    search_fields = ('user__phone', 'description')

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(WithdrawalRequest)
class WithdrawalRequestAdmin(admin.ModelAdmin):
    list_display = ('user', 'amount', 'status', 'processed_by', 'created_at')
    list_filter = ('status',)
