from decimal import Decimal
import logging

from django.conf import settings
from django.db import IntegrityError, transaction

from apps.wallet.services import WalletService
from core.exceptions import InvalidBetException
from . import clock
from .exceptions import GameClosedException, SessionNotPendingException
from .models import Bet, GameSession
from .pricing import calculate_total_amount, expand_bets
from .selectors import GameQueries, load_payout_rates

logger = logging.getLogger(__name__)


class GameSessionService:
    """Daily sessions and the server-clock open/close rules"""

    @staticmethod
    def get_or_create_session(game, session_date):
        """
        The single session for (game, date).

        Two callers racing here both end up with the same row: the loser of
        the insert hits the unique constraint and re-reads.
        """
        try:
            with transaction.atomic():
                session, created = GameSession.objects.get_or_create(game=game, session_date=session_date)
        except IntegrityError:
            session = GameSession.objects.get(game=game, session_date=session_date)
            created = False
        if created:
            logger.info(f"Opened session {session.id} for game {game.id} on {session_date}")
        return session

    @staticmethod
    def get_today_session(game, now=None):
        now = now or clock.server_now()
        return GameSessionService.get_or_create_session(game, now.date())

    @staticmethod
    def is_game_open(game, now=None):
        now = now or clock.server_now()
        return clock.is_open_at(game.open_time, game.close_time, now.time())

    @staticmethod
    def time_left(game, now=None):
        """Seconds until close while open, else 0"""
        now = now or clock.server_now()
        return clock.seconds_until_close(game.open_time, game.close_time, now.time())


class BetService:

    @staticmethod
    def create_bets(user, session, specs, total_amount):
        """Debit the total and insert every bet as pending, all or nothing"""
        with transaction.atomic():
            # Settlement holds this lock too, so no bet lands after a declare
            locked = GameSession.objects.select_for_update().get(pk=session.pk)
            if not locked.is_pending:
                raise SessionNotPendingException('Result already declared for this session')

            WalletService.conditional_debit(
                user.id,
                total_amount,
                description=f"Bet placed on {session.game.name} ({len(specs)} bet(s))",
                reference_type='game_session',
                reference_id=session.id,
                metadata={'bet_count': len(specs)},
            )
            bets = Bet.objects.bulk_create([
                Bet(
                    user=user,
                    game_session=session,
                    bet_type=spec.bet_type,
                    bet_number=spec.bet_number,
                    bet_amount=spec.bet_amount,
                    payout_multiplier=spec.payout_multiplier,
                )
                for spec in specs
            ])
        return bets

    @staticmethod
    def mark_bets(bet_ids, status):
        if not bet_ids:
            return 0
        return Bet.objects.filter(id__in=bet_ids).update(status=status)

    @staticmethod
    def reset_session_bets(session):
        return Bet.objects.filter(game_session=session).update(
            status=Bet.STATUS_PENDING, payout_amount=Decimal('0'),
        )

    @staticmethod
    def _check_limits(game, specs, now):
        config = settings.MATKA_CONFIG
        past_mid_time = game.mid_time is not None and clock.is_past_mid_time(
            game.open_time, game.mid_time, now.time()
        )
        for spec in specs:
            if spec.bet_amount < config['MIN_BET_AMOUNT']:
                raise InvalidBetException(f"Minimum bet amount is {config['MIN_BET_AMOUNT']}")
            if spec.bet_amount > config['MAX_BET_AMOUNT']:
                raise InvalidBetException(f"Maximum bet amount is {config['MAX_BET_AMOUNT']}")
            if past_mid_time and spec.bet_amount > game.max_bet_after_mid_time:
                raise InvalidBetException(
                    f"After {game.mid_time:%H:%M} the maximum bet is {game.max_bet_after_mid_time}"
                )

    @staticmethod
    def place_bets(user, game_id, cells=None, crossing_digits=None, numbers=None, bet_type=None,
                   amount=None, palti=False, now=None, rates=None):
        """
        Expand the wager input and place every resulting bet on today's session.

        Returns the placement summary: count, total, the new deposit balance
        and the created bets.
        """
        now = now or clock.server_now()
        game = GameQueries.get_active_game(game_id)

        if not GameSessionService.is_game_open(game, now):
            raise GameClosedException()

        session = GameSessionService.get_today_session(game, now)
        if not session.is_pending:
            raise SessionNotPendingException('Result already declared for today')

        specs = expand_bets(
            rates or load_payout_rates(),
            cells=cells, crossing_digits=crossing_digits, numbers=numbers,
            bet_type=bet_type, amount=amount, palti=palti,
        )
        BetService._check_limits(game, specs, now)
        total_amount = calculate_total_amount(specs)

        bets = BetService.create_bets(user, session, specs, total_amount)
        new_balance = WalletService.get_wallet(user.id).balance
        logger.info(
            f"User {user.id} placed {len(bets)} bet(s) totalling {total_amount} "
            f"on session {session.id}"
        )
        return {
            'placed_count': len(bets),
            'total_amount': total_amount,
            'new_balance': new_balance,
            'bets': bets,
        }
