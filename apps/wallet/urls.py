from django.urls import path
from .views import (
    WalletView, TransactionHistoryView, TransactionSummaryView, WithdrawalView,
    admin_deposit, admin_withdrawal_list, admin_withdrawal_decision,
)

urlpatterns = [
    path('', WalletView.as_view(), name='wallet'),
    path('transactions/', TransactionHistoryView.as_view(), name='transactions'),
    path('summary/', TransactionSummaryView.as_view(), name='transaction-summary'),
    path('withdrawals/', WithdrawalView.as_view(), name='withdrawals'),
    path('admin/deposit/', admin_deposit, name='admin-deposit'),
    path('admin/withdrawals/', admin_withdrawal_list, name='admin-withdrawals'),
    path('admin/withdrawals/<int:withdrawal_id>/', admin_withdrawal_decision, name='admin-withdrawal-decision'),
]
