from django.db import transaction
from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view
from apps.audit.services import record_action
from core.utils.decorators import require_role
from core.utils.responses import SuccessResponse
from .models import WithdrawalRequest
from .selectors import WalletQueries
from .serializers import (
    TransactionSerializer, WithdrawalSerializer, DepositRequestSerializer,
    WithdrawalRequestSerializer, WithdrawalDecisionSerializer,
)
from .services import WalletService


class WalletView(generics.GenericAPIView):
    """Current balances of the authenticated user"""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        summary = WalletService.get_balance_summary(request.user)
        return SuccessResponse(data=summary, message='Wallet information retrieved successfully.')


class TransactionHistoryView(generics.ListAPIView):
    serializer_class = TransactionSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return WalletQueries.get_transaction_history(
            self.request.user, transaction_type=self.request.query_params.get('type')
        )


class TransactionSummaryView(generics.GenericAPIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return SuccessResponse(data=WalletQueries.get_user_summary(request.user))


class WithdrawalView(generics.ListCreateAPIView):
    """List own withdrawal requests or submit a new one"""
    permission_classes = [permissions.IsAuthenticated]

    def get_serializer_class(self):
        if self.request.method == 'POST':
            return WithdrawalRequestSerializer
        return WithdrawalSerializer

    def get_queryset(self):
        return WalletQueries.get_withdrawal_requests(user=self.request.user)

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        withdrawal = WalletService.request_withdrawal(
            user=request.user,
            amount=data['amount'],
            bank_details=data['bank_details'],
        )
        return SuccessResponse(
            data=WithdrawalSerializer(withdrawal).data,
            message='Withdrawal request submitted. Awaiting admin approval.',
            status=status.HTTP_201_CREATED
        )


@api_view(['POST'])
@require_role(['ADMIN'])
def admin_deposit(request):
    serializer = DepositRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    txn = WalletService.deposit(data['user_id'], data['amount'], data.get('description'))
    return SuccessResponse(
        data=TransactionSerializer(txn).data,
        message=f"Deposit of {data['amount']} added successfully.",
        status=status.HTTP_201_CREATED,
    )


@api_view(['GET'])
@require_role(['ADMIN'])
def admin_withdrawal_list(request):
    requests = WalletQueries.get_withdrawal_requests(status=request.query_params.get('status'))
    return SuccessResponse(data=WithdrawalSerializer(requests, many=True).data)


@api_view(['POST'])
@require_role(['ADMIN'])
def admin_withdrawal_decision(request, withdrawal_id):
    serializer = WithdrawalDecisionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    decision = serializer.validated_data['status']

    with transaction.atomic():
        if decision == WithdrawalRequest.STATUS_APPROVED:
            withdrawal = WalletService.approve_withdrawal(withdrawal_id, request.user)
        else:
            withdrawal = WalletService.reject_withdrawal(withdrawal_id, request.user)
        record_action(request, f'withdrawal_{decision}', 'withdrawal_request', withdrawal.id)
    return SuccessResponse(
        data=WithdrawalSerializer(withdrawal).data,
        message=f'Withdrawal {decision} successfully',
    )
