from django.conf import settings
from django.db.models import Count, Q, Sum
from apps.wallet.services import format_amount
from .exceptions import GameNotFoundException
from .models import Bet, Game, GameSession, Setting
from .pricing import PayoutRates

RATE_KEYS = ('rate_jodi', 'rate_haruf', 'rate_haruf_andar', 'rate_haruf_bahar')


def load_payout_rates() -> PayoutRates:
    """Current rates from the settings store, with configured defaults"""
    values = dict(Setting.objects.filter(key__in=RATE_KEYS).values_list('key', 'value'))
    config = settings.MATKA_CONFIG
    return PayoutRates.from_mapping(values, config['DEFAULT_RATE_JODI'], config['DEFAULT_RATE_HARUF'])


class GameQueries:
    """Read-only game, session and bet queries"""

    @staticmethod
    def get_active_games():
        return Game.objects.filter(is_active=True).order_by('open_time')

    @staticmethod
    def get_active_game(game_id):
        try:
            return Game.objects.get(pk=game_id, is_active=True)
        except Game.DoesNotExist:
            raise GameNotFoundException()

    @staticmethod
    def get_session_for_date(game_id, session_date):
        return GameSession.objects.filter(game_id=game_id, session_date=session_date).first()

    @staticmethod
    def get_sessions_for_date(session_date):
        """Sessions of the given date keyed by game id"""
        sessions = GameSession.objects.filter(session_date=session_date, game__is_active=True)
        return {session.game_id: session for session in sessions}

    @staticmethod
    def get_results(game_id=None, limit=50):
        sessions = GameSession.objects.select_related('game').filter(status=GameSession.STATUS_COMPLETED)
        if game_id:
            sessions = sessions.filter(game_id=game_id)
        return sessions.order_by('-session_date', 'game__open_time')[:limit]

    @staticmethod
    def get_user_bets(user, status=None):
        bets = Bet.objects.select_related('game_session__game').filter(user=user)
        if status:
            bets = bets.filter(status=status)
        return bets.order_by('-created_at', '-id')

    @staticmethod
    def get_session_bets(session_id, status=None):
        bets = Bet.objects.select_related('user').filter(game_session_id=session_id)
        if status:
            bets = bets.filter(status=status)
        return bets.order_by('-created_at', '-id')

    @staticmethod
    def get_user_stats(user):
        stats = Bet.objects.filter(user=user).aggregate(
            total_bets=Count('id'),
            total_wins=Count('id', filter=Q(status=Bet.STATUS_WIN)),
            total_losses=Count('id', filter=Q(status=Bet.STATUS_LOSS)),
            pending_bets=Count('id', filter=Q(status=Bet.STATUS_PENDING)),
            total_bet_amount=Sum('bet_amount'),
            total_winnings=Sum('payout_amount', filter=Q(status=Bet.STATUS_WIN)),
        )
        stats['total_bet_amount'] = format_amount(stats['total_bet_amount'])
        stats['total_winnings'] = format_amount(stats['total_winnings'])
        return stats


def find_due_scheduled_sessions(now):
    """
    Scheduled, still pending sessions whose result may be declared: any
    earlier day, or today once the game's close time has passed.
    """
    candidates = GameSession.objects.select_related('game').filter(
        is_scheduled=True,
        status=GameSession.STATUS_PENDING,
        scheduled_winning_number__isnull=False,
        session_date__lte=now.date(),
    ).order_by('session_date', 'id')
    current = now.time()
    return [
        session for session in candidates
        if session.session_date < now.date() or current >= session.game.close_time
    ]
