"""
Result declaration, scheduling and correction.

A session moves pending -> completed exactly once; corrections rewind the
payouts of a completed session and settle it again under the new number.
Each public operation is one atomic unit holding the session row lock.
"""
from collections import defaultdict
from decimal import Decimal
import logging

from django.db import transaction
from django.utils import timezone

from apps.wallet.models import BalanceField, WalletTransaction
from apps.wallet.services import WalletService
from .exceptions import (
    AlreadyDeclaredException, InvalidWinningNumberException, NoChangeException,
    NotYetDeclaredException, SessionNotFoundException, SessionNotPendingException,
)
from .models import Bet, GameSession
from .pricing import HARUF_ANDAR, HARUF_BAHAR, JODI, is_valid_jodi_number
from .services import BetService

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def check_win(bet_type, bet_number, winning_number):
    """Jodi matches both digits, andar the first, bahar the second"""
    if bet_type == JODI:
        return bet_number == winning_number
    if bet_type == HARUF_ANDAR:
        return bet_number == winning_number[0]
    if bet_type == HARUF_BAHAR:
        return bet_number == winning_number[1]
    return False


def _validate_number(winning_number):
    number = str(winning_number if winning_number is not None else '').strip()
    if not is_valid_jodi_number(number):
        raise InvalidWinningNumberException()
    return number


def _lock_session(session_id):
    try:
        return GameSession.objects.select_for_update().select_related('game').get(pk=session_id)
    except GameSession.DoesNotExist:
        raise SessionNotFoundException()


class SettlementService:

    @staticmethod
    def _settle(session, winning_number):
        """Classify the pending bets of ``session`` and pay the winners"""
        winners = []
        loser_ids = []
        for bet in Bet.objects.filter(game_session=session, status=Bet.STATUS_PENDING).order_by('id'):
            if check_win(bet.bet_type, bet.bet_number, winning_number):
                bet.status = Bet.STATUS_WIN
                bet.payout_amount = (bet.bet_amount * bet.payout_multiplier).quantize(CENT)
                winners.append(bet)
            else:
                loser_ids.append(bet.id)

        BetService.mark_bets(loser_ids, Bet.STATUS_LOSS)
        Bet.objects.bulk_update(winners, ['status', 'payout_amount'])

        payouts = defaultdict(lambda: Decimal('0.00'))
        counts = defaultdict(int)
        for bet in winners:
            payouts[bet.user_id] += bet.payout_amount
            counts[bet.user_id] += 1

        # Ascending user id keeps wallet lock order stable across settlements.
        # A win that rounds to 0.00 is recorded on the bet but moves no money.
        for user_id in sorted(payouts):
            if payouts[user_id] <= 0:
                continue
            WalletService.credit(
                user_id, payouts[user_id], BalanceField.WINNING_BALANCE, WalletTransaction.TYPE_WIN,
                description=(
                    f"Win payout for {counts[user_id]} bet(s) in session {session.id} ({winning_number})"
                ),
                reference_type='game_session',
                reference_id=session.id,
                metadata={'winning_number': winning_number, 'bet_count': counts[user_id]},
            )

        total_paid = sum(payouts.values(), Decimal('0.00'))
        logger.info(
            f"Settled session {session.id} with {winning_number}: {len(winners)} win(s), "
            f"{len(loser_ids)} loss(es), {len(payouts)} user(s) paid {total_paid}"
        )
        return {'winners': len(winners), 'losers': len(loser_ids), 'total_payout': total_paid}

    @staticmethod
    def declare(session_id, winning_number):
        """Complete a pending session with ``winning_number`` and pay out"""
        winning_number = _validate_number(winning_number)
        with transaction.atomic():
            session = _lock_session(session_id)
            updated = GameSession.objects.filter(pk=session.pk, status=GameSession.STATUS_PENDING).update(
                status=GameSession.STATUS_COMPLETED,
                winning_number=winning_number,
                is_scheduled=False,
                result_declared_at=timezone.now(),
            )
            if updated == 0:
                raise AlreadyDeclaredException()
            session.refresh_from_db()
            result = SettlementService._settle(session, winning_number)
        return session, result

    @staticmethod
    def schedule(session_id, winning_number):
        """Store a number for the scheduler to declare once the game closes"""
        winning_number = _validate_number(winning_number)
        with transaction.atomic():
            session = _lock_session(session_id)
            if not session.is_pending:
                raise SessionNotPendingException('Cannot schedule a result for a completed session')
            session.scheduled_winning_number = winning_number
            session.is_scheduled = True
            session.save(update_fields=['scheduled_winning_number', 'is_scheduled'])
        logger.info(f"Scheduled result {winning_number} for session {session.id}")
        return session

    @staticmethod
    def correct(session_id, new_winning_number):
        """
        Replace the winning number of a completed session.

        Every payout of the old number is taken back from winning_balance
        (one revert entry per user), the bets are reset and settled again.
        If any user no longer holds their old winnings the whole correction
        is refused with InsufficientFundsException.
        """
        new_winning_number = _validate_number(new_winning_number)
        with transaction.atomic():
            session = _lock_session(session_id)
            if session.status != GameSession.STATUS_COMPLETED:
                raise NotYetDeclaredException()
            old_winning_number = session.winning_number
            if old_winning_number == new_winning_number:
                raise NoChangeException()

            reversals = defaultdict(lambda: Decimal('0.00'))
            for user_id, payout in Bet.objects.filter(
                game_session=session, status=Bet.STATUS_WIN
            ).values_list('user_id', 'payout_amount'):
                reversals[user_id] += payout

            for user_id in sorted(reversals):
                if reversals[user_id] <= 0:
                    continue
                WalletService.debit(
                    user_id, reversals[user_id], BalanceField.WINNING_BALANCE, WalletTransaction.TYPE_REVERT,
                    description=(
                        f"Result corrected for session {session.id}: "
                        f"{old_winning_number} -> {new_winning_number}"
                    ),
                    reference_type='game_session',
                    reference_id=session.id,
                    metadata={'old_winning_number': old_winning_number, 'new_winning_number': new_winning_number},
                )

            BetService.reset_session_bets(session)
            session.winning_number = new_winning_number
            session.result_declared_at = timezone.now()
            session.save(update_fields=['winning_number', 'result_declared_at'])
            result = SettlementService._settle(session, new_winning_number)

        logger.info(
            f"Corrected session {session.id} from {old_winning_number} to {new_winning_number}, "
            f"reverted {len(reversals)} user(s)"
        )
        return {
            'session': session,
            'old_winning_number': old_winning_number,
            'new_winning_number': new_winning_number,
            'reverted_users': len(reversals),
            **result,
        }
