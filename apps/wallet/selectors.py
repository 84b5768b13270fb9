from django.db.models import Count, Sum
from .models import WalletTransaction, WithdrawalRequest
from .services import format_amount


class WalletQueries:
    """Read-only wallet queries"""

    @staticmethod
    def get_transaction_history(user, transaction_type=None):
        transactions = WalletTransaction.objects.filter(user=user)
        if transaction_type:
            transactions = transactions.filter(type=transaction_type)
        return transactions.order_by('-created_at', '-id')

    @staticmethod
    def get_user_summary(user):
        """Totals and counts per transaction type"""
        rows = (
            WalletTransaction.objects.filter(user=user)
            .values('type')
            .annotate(total_amount=Sum('amount'), count=Count('id'))
            .order_by('type')
        )
        summary = {
            txn_type: {'total_amount': '0.00', 'count': 0}
            for txn_type, _label in WalletTransaction.TRANSACTION_TYPES
        }
        for row in rows:
            summary[row['type']] = {
                'total_amount': format_amount(row['total_amount']),
                'count': row['count'],
            }
        return summary

    @staticmethod
    def get_withdrawal_requests(user=None, status=None):
        requests = WithdrawalRequest.objects.select_related('user')
        if user is not None:
            requests = requests.filter(user=user)
        if status:
            requests = requests.filter(status=status)
        return requests.order_by('-created_at')
