from decimal import Decimal
from unittest import mock

import pytest
from django.db import DatabaseError

from apps.audit.models import AuditLog
from apps.wallet.models import BalanceField, Wallet, WalletTransaction, WithdrawalRequest
from apps.wallet.services import WalletService


pytestmark = pytest.mark.django_db

BANK = {'account_number': '12345678', 'ifsc': 'SBIN0000001', 'account_name': 'Player One'}


def test_wallet_balances(api_client, player):
    api_client.force_authenticate(player)
    data = api_client.get('/api/wallet/').json()['data']
    assert data['balance'] == '1000.00'
    assert data['winning_balance'] == '0.00'


def test_admin_deposit(api_client, admin, player):
    api_client.force_authenticate(admin)
    response = api_client.post('/api/wallet/admin/deposit/', {'user_id': player.id, 'amount': '250.00'}, format='json')

    assert response.status_code == 201
    assert response.json()['data']['balance_after'] == '1250.00'


def test_deposit_is_admin_only(api_client, player):
    api_client.force_authenticate(player)
    response = api_client.post('/api/wallet/admin/deposit/', {'user_id': player.id, 'amount': '250.00'}, format='json')
    assert response.status_code == 403


def test_withdrawal_flow(api_client, admin, player):
    WalletService.credit(player.id, '500', BalanceField.WINNING_BALANCE, WalletTransaction.TYPE_WIN)
    api_client.force_authenticate(player)
    created = api_client.post('/api/wallet/withdrawals/', {'amount': '200.00', 'bank_details': BANK}, format='json')
    assert created.status_code == 201
    withdrawal_id = created.json()['data']['id']

    api_client.force_authenticate(admin)
    decided = api_client.post(f'/api/wallet/admin/withdrawals/{withdrawal_id}/', {'status': 'approved'}, format='json')
    assert decided.status_code == 200
    assert WithdrawalRequest.objects.get(pk=withdrawal_id).status == WithdrawalRequest.STATUS_APPROVED
    assert AuditLog.objects.filter(action='withdrawal_approved', resource_id=str(withdrawal_id)).exists()

    repeat = api_client.post(f'/api/wallet/admin/withdrawals/{withdrawal_id}/', {'status': 'rejected'}, format='json')
    assert repeat.status_code == 409


def test_withdrawal_requires_bank_details(api_client, player):
    api_client.force_authenticate(player)
    response = api_client.post('/api/wallet/withdrawals/', {'amount': '200.00', 'bank_details': {}}, format='json')
    assert response.status_code == 400


def test_withdrawal_decision_rolls_back_when_audit_fails(api_client, admin, player):
    WalletService.credit(player.id, '500', BalanceField.WINNING_BALANCE, WalletTransaction.TYPE_WIN)
    withdrawal = WalletService.request_withdrawal(player, '200', BANK)
    api_client.force_authenticate(admin)

    with mock.patch('apps.wallet.views.record_action', side_effect=DatabaseError('audit table unavailable')):
        response = api_client.post(f'/api/wallet/admin/withdrawals/{withdrawal.id}/', {'status': 'approved'}, format='json')

    assert response.status_code == 500
    assert WithdrawalRequest.objects.get(pk=withdrawal.id).status == WithdrawalRequest.STATUS_PENDING
    assert Wallet.objects.get(user=player).held_withdrawal_balance == Decimal('200.00')
