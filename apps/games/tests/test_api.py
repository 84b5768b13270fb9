from unittest import mock

import pytest
from django.db import DatabaseError

from apps.audit.models import AuditLog
from apps.games.models import Bet, GameSession
from apps.games.services import BetService
from apps.wallet.models import WalletTransaction


pytestmark = pytest.mark.django_db


@pytest.fixture
def at_noon(noon):
    with mock.patch('apps.games.clock.server_now', return_value=noon):
        yield noon


def test_place_bets_endpoint(api_client, player, game, at_noon):
    api_client.force_authenticate(player)
    response = api_client.post(
        f'/api/games/{game.id}/bets/',
        {'numbers': ['12', '47'], 'bet_type': 'jodi', 'amount': '10', 'palti': True},
        format='json',
    )

    assert response.status_code == 201
    data = response.json()['data']
    assert data['placed_count'] == 4
    assert data['total_amount'] == '40.00'
    assert data['new_balance'] == '960.00'
    assert {bet['bet_number'] for bet in data['bets']} == {'12', '21', '47', '74'}


def test_place_bets_requires_one_mode(api_client, player, game, at_noon):
    api_client.force_authenticate(player)
    response = api_client.post(
        f'/api/games/{game.id}/bets/', {'crossing_digits': '12', 'numbers': ['12'], 'amount': '5'}, format='json'
    )
    assert response.status_code == 400
    assert response.json()['success'] is False


def test_insufficient_funds_envelope(api_client, make_user, game, at_noon):
    user = make_user(balance='5')
    api_client.force_authenticate(user)
    response = api_client.post(f'/api/games/{game.id}/bets/', {'crossing_digits': '12', 'amount': '5'}, format='json')

    assert response.status_code == 400
    assert response.json()['errors'] == {'code': 'insufficient_funds'}


def test_game_list_reports_server_state(api_client, player, game, at_noon):
    api_client.force_authenticate(player)
    data = api_client.get('/api/games/').json()['data']

    assert data['server_time'] == at_noon.isoformat()
    listed = data['games'][0]
    assert listed['is_open'] is True
    assert listed['time_left'] == 9 * 3600


def test_declare_requires_admin(api_client, player, session):
    api_client.force_authenticate(player)
    response = api_client.post('/api/results/declare/', {'session_id': session.id, 'winning_number': '47'}, format='json')
    assert response.status_code == 403
    assert GameSession.objects.get(pk=session.pk).is_pending


def test_declare_and_correct_endpoints(api_client, admin, player, game, session, noon, rates):
    BetService.place_bets(player, game.id, cells=[{'type': 'jodi', 'number': '47', 'amount': '100'}], now=noon, rates=rates)
    api_client.force_authenticate(admin)

    response = api_client.post('/api/results/declare/', {'session_id': session.id, 'winning_number': '47'}, format='json')
    assert response.status_code == 200
    assert response.json()['data']['winning_number'] == '47'

    again = api_client.post('/api/results/declare/', {'session_id': session.id, 'winning_number': '47'}, format='json')
    assert again.status_code == 409
    assert again.json()['errors'] == {'code': 'already_declared'}

    corrected = api_client.post('/api/results/correct/', {'session_id': session.id, 'winning_number': '48'}, format='json')
    assert corrected.status_code == 200
    assert corrected.json()['data']['old_winning_number'] == '47'
    assert corrected.json()['data']['new_winning_number'] == '48'

    assert list(AuditLog.objects.order_by('id').values_list('action', flat=True)) == [
        'result_declared', 'result_corrected',
    ]


def test_schedule_endpoint_rejects_bad_number(api_client, admin, session):
    api_client.force_authenticate(admin)
    response = api_client.post('/api/results/schedule/', {'session_id': session.id, 'winning_number': '7'}, format='json')
    assert response.status_code == 400


def test_bet_history_and_stats(api_client, player, game, noon, rates):
    BetService.place_bets(player, game.id, crossing_digits='12', amount='5', now=noon, rates=rates)
    api_client.force_authenticate(player)

    history = api_client.get('/api/games/bets/history/').json()
    assert history['pagination']['count'] == 4

    stats = api_client.get('/api/games/bets/stats/').json()['data']
    assert stats['total_bets'] == 4
    assert stats['pending_bets'] == 4
    assert stats['total_bet_amount'] == '20.00'


def test_health_check(api_client, db):
    response = api_client.get('/api/health/')
    assert response.status_code == 200
    assert response.json()['database'] == 'connected'


def test_declare_rolls_back_when_audit_fails(api_client, admin, player, game, session, noon, rates):
    BetService.place_bets(player, game.id, cells=[{'type': 'jodi', 'number': '47', 'amount': '100'}], now=noon, rates=rates)
    api_client.force_authenticate(admin)

    with mock.patch('apps.games.views.record_action', side_effect=DatabaseError('audit table unavailable')):
        response = api_client.post(
            '/api/results/declare/', {'session_id': session.id, 'winning_number': '47'}, format='json'
        )

    assert response.status_code == 500
    assert GameSession.objects.get(pk=session.pk).is_pending
    assert Bet.objects.get(user=player).status == Bet.STATUS_PENDING
    assert not WalletTransaction.objects.filter(type=WalletTransaction.TYPE_WIN).exists()


def test_game_status(api_client, player, game, at_noon):
    api_client.force_authenticate(player)
    data = api_client.get(f'/api/games/{game.id}/status/').json()['data']

    assert data['is_open'] is True
    assert data['time_left'] == 9 * 3600
    assert data['server_time'] == at_noon.isoformat()
    assert data['session_id'] is None
    assert not GameSession.objects.filter(game=game).exists()


def test_game_status_unknown_game(api_client, player, game, at_noon):
    api_client.force_authenticate(player)
    response = api_client.get(f'/api/games/{game.id + 1}/status/')
    assert response.status_code == 404
