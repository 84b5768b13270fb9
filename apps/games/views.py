from django.db import transaction
from rest_framework import generics, permissions, status
from rest_framework.decorators import api_view
from apps.audit.models import AuditLog
from apps.audit.services import record_action
from core.utils.decorators import require_role
from core.utils.responses import SuccessResponse
from . import clock
from .models import Bet
from .selectors import GameQueries
from .serializers import (
    BetSerializer, GameSessionSerializer, PlaceBetSerializer, ResultSerializer,
    SessionBetSerializer,
)
from .services import BetService, GameSessionService
from .settlement import SettlementService


def game_state(game, session, now):
    """Open/close state of one game at server time ``now``"""
    return {
        'id': game.id,
        'name': game.name,
        'open_time': game.open_time.strftime('%H:%M:%S'),
        'close_time': game.close_time.strftime('%H:%M:%S'),
        'mid_time': game.mid_time.strftime('%H:%M:%S') if game.mid_time else None,
        'max_bet_after_mid_time': str(game.max_bet_after_mid_time),
        'is_open': GameSessionService.is_game_open(game, now),
        'time_left': GameSessionService.time_left(game, now),
        'session_id': session.id if session else None,
        'session_status': session.status if session else None,
        'winning_number': session.winning_number if session else None,
    }


class GameListView(generics.GenericAPIView):
    """Active games with today's session state, judged by the server clock"""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        now = clock.server_now()
        sessions = GameQueries.get_sessions_for_date(now.date())

        games = [game_state(game, sessions.get(game.id), now) for game in GameQueries.get_active_games()]

        return SuccessResponse(
            data={'games': games, 'server_time': now.isoformat()},
            message=f'Found {len(games)} active game(s).'
        )


class GameStatusView(generics.GenericAPIView):
    """One game's state for client timer refresh; never creates a session"""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, game_id, *args, **kwargs):
        now = clock.server_now()
        game = GameQueries.get_active_game(game_id)
        session = GameQueries.get_session_for_date(game.id, now.date())
        return SuccessResponse(data={**game_state(game, session, now), 'server_time': now.isoformat()})


class PlaceBetView(generics.GenericAPIView):
    serializer_class = PlaceBetSerializer
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request, game_id, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = BetService.place_bets(
            request.user,
            game_id,
            cells=data.get('bets'),
            crossing_digits=data.get('crossing_digits'),
            numbers=data.get('numbers'),
            bet_type=data.get('bet_type'),
            amount=data.get('amount'),
            palti=data.get('palti', False),
        )
        return SuccessResponse(
            data={
                'placed_count': result['placed_count'],
                'total_amount': str(result['total_amount']),
                'new_balance': str(result['new_balance']),
                'bets': BetSerializer(result['bets'], many=True).data,
            },
            message=f"{result['placed_count']} bet(s) placed successfully.",
            status=status.HTTP_201_CREATED,
        )


class BetHistoryView(generics.ListAPIView):
    serializer_class = BetSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return GameQueries.get_user_bets(self.request.user, status=self.request.query_params.get('status'))


class WinningBetsView(generics.ListAPIView):
    serializer_class = BetSerializer
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        return GameQueries.get_user_bets(self.request.user, status=Bet.STATUS_WIN)


class BetStatsView(generics.GenericAPIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        return SuccessResponse(data=GameQueries.get_user_stats(request.user))


class ResultHistoryView(generics.GenericAPIView):
    """Declared results, newest first"""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, *args, **kwargs):
        results = GameQueries.get_results(game_id=request.query_params.get('game_id'))
        return SuccessResponse(data=GameSessionSerializer(results, many=True).data)


@api_view(['GET'])
@require_role(['ADMIN'])
def admin_session_bets(request, session_id):
    bets = GameQueries.get_session_bets(session_id, status=request.query_params.get('status'))
    return SuccessResponse(data=SessionBetSerializer(bets, many=True).data)


@api_view(['POST'])
@require_role(['ADMIN'])
def declare_result(request):
    serializer = ResultSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    # The audit row commits with the settlement or not at all
    with transaction.atomic():
        session, result = SettlementService.declare(data['session_id'], data['winning_number'])
        record_action(request, AuditLog.ACTION_RESULT_DECLARED, 'game_session', session.id, data={
            'winning_number': session.winning_number, **{k: str(v) for k, v in result.items()}
        })
    return SuccessResponse(
        data=GameSessionSerializer(session).data,
        message=f"Result {session.winning_number} declared. {result['winners']} winning bet(s) settled."
    )


@api_view(['POST'])
@require_role(['ADMIN'])
def schedule_result(request):
    serializer = ResultSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    with transaction.atomic():
        session = SettlementService.schedule(data['session_id'], data['winning_number'])
        record_action(request, AuditLog.ACTION_RESULT_SCHEDULED, 'game_session', session.id, data={
            'winning_number': session.scheduled_winning_number
        })
    return SuccessResponse(
        data=GameSessionSerializer(session).data,
        message=f"Result {session.scheduled_winning_number} scheduled for {session.game.close_time:%H:%M}."
    )


@api_view(['POST'])
@require_role(['ADMIN'])
def correct_result(request):
    serializer = ResultSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    with transaction.atomic():
        result = SettlementService.correct(data['session_id'], data['winning_number'])
        record_action(request, AuditLog.ACTION_RESULT_CORRECTED, 'game_session', result['session'].id, data={
            'old_winning_number': result['old_winning_number'],
            'new_winning_number': result['new_winning_number'],
        })
    return SuccessResponse(
        data={
            'session_id': result['session'].id,
            'old_winning_number': result['old_winning_number'],
            'new_winning_number': result['new_winning_number'],
            'reverted_users': result['reverted_users'],
            'winners': result['winners'],
        },
        message=f"Result corrected from {result['old_winning_number']} to {result['new_winning_number']}."
    )
