from decimal import Decimal

import pytest

from core.exceptions import InsufficientFundsException
from apps.games.exceptions import (
    AlreadyDeclaredException, InvalidWinningNumberException, NoChangeException,
    NotYetDeclaredException, SessionNotFoundException, SessionNotPendingException,
)
from apps.games.models import Bet, GameSession
from apps.games.pricing import PayoutRates
from apps.games.services import BetService
from apps.games.settlement import SettlementService, check_win
from apps.wallet.models import BalanceField, Wallet, WalletTransaction
from apps.wallet.services import WalletService


pytestmark = pytest.mark.django_db


def place(user, game, noon, rates, cells):
    return BetService.place_bets(user, game.id, cells=cells, now=noon, rates=rates)


@pytest.fixture
def placed(player, game, session, noon, rates):
    place(player, game, noon, rates, [
        {'type': 'jodi', 'number': '47', 'amount': '100'},
        {'type': 'haruf_andar', 'number': '4', 'amount': '50'},
        {'type': 'haruf_bahar', 'number': '4', 'amount': '20'},
    ])
    return session


def test_check_win():
    assert check_win('jodi', '47', '47')
    assert not check_win('jodi', '74', '47')
    assert check_win('haruf_andar', '4', '47')
    assert check_win('haruf_bahar', '7', '47')
    assert not check_win('haruf_bahar', '4', '47')


def test_declare_pays_aggregated_winnings(player, placed):
    session, result = SettlementService.declare(placed.id, '47')

    assert session.status == GameSession.STATUS_COMPLETED
    assert session.winning_number == '47'
    assert result['winners'] == 2 and result['losers'] == 1

    jodi = Bet.objects.get(bet_type='jodi')
    andar = Bet.objects.get(bet_type='haruf_andar')
    bahar = Bet.objects.get(bet_type='haruf_bahar')
    assert (jodi.status, jodi.payout_amount) == (Bet.STATUS_WIN, Decimal('9000.00'))
    assert (andar.status, andar.payout_amount) == (Bet.STATUS_WIN, Decimal('450.00'))
    assert (bahar.status, bahar.payout_amount) == (Bet.STATUS_LOSS, Decimal('0.00'))

    wins = WalletTransaction.objects.filter(user=player, type=WalletTransaction.TYPE_WIN)
    assert wins.count() == 1
    assert wins.get().amount == Decimal('9450.00')
    assert Wallet.objects.get(user=player).winning_balance == Decimal('9450.00')


def test_conservation_across_users(make_user, game, session, noon, rates):
    alice = make_user(balance='500')
    bob = make_user(balance='500')
    place(alice, game, noon, rates, [{'type': 'jodi', 'number': '12', 'amount': '10'}])
    place(bob, game, noon, rates, [{'type': 'jodi', 'number': '12', 'amount': '5'},
                                   {'type': 'haruf_bahar', 'number': '2', 'amount': '3'}])

    SettlementService.declare(session.id, '12')

    paid = sum(Bet.objects.filter(status=Bet.STATUS_WIN).values_list('payout_amount', flat=True))
    credited = sum(WalletTransaction.objects.filter(type=WalletTransaction.TYPE_WIN).values_list('amount', flat=True))
    assert paid == credited == Decimal('900') + Decimal('450') + Decimal('27')
    assert not Bet.objects.filter(status=Bet.STATUS_PENDING).exists()


def test_declare_twice_is_refused(player, placed):
    SettlementService.declare(placed.id, '47')
    with pytest.raises(AlreadyDeclaredException):
        SettlementService.declare(placed.id, '47')

    assert isinstance(AlreadyDeclaredException(), SessionNotPendingException)
    assert WalletTransaction.objects.filter(user=player, type=WalletTransaction.TYPE_WIN).count() == 1
    assert Wallet.objects.get(user=player).winning_balance == Decimal('9450.00')


def test_declare_validates_input(session):
    with pytest.raises(InvalidWinningNumberException):
        SettlementService.declare(session.id, '7')
    with pytest.raises(SessionNotFoundException):
        SettlementService.declare(999999, '07')


def test_declare_with_no_bets(session):
    _session, result = SettlementService.declare(session.id, '00')
    assert result == {'winners': 0, 'losers': 0, 'total_payout': Decimal('0.00')}


def test_schedule(session):
    scheduled = SettlementService.schedule(session.id, '33')
    assert scheduled.is_scheduled
    assert scheduled.scheduled_winning_number == '33'
    assert scheduled.status == GameSession.STATUS_PENDING

    SettlementService.declare(session.id, '33')
    with pytest.raises(SessionNotPendingException):
        SettlementService.schedule(session.id, '44')


def test_correct_moves_winnings(player, placed):
    SettlementService.declare(placed.id, '47')
    result = SettlementService.correct(placed.id, '74')

    assert (result['old_winning_number'], result['new_winning_number']) == ('47', '74')
    assert GameSession.objects.get(pk=placed.id).winning_number == '74'
    # Only the bahar bet on 4 wins with 74: 20 * 9
    assert Wallet.objects.get(user=player).winning_balance == Decimal('180.00')
    assert set(Bet.objects.values_list('bet_type', 'status')) == {
        ('jodi', Bet.STATUS_LOSS), ('haruf_andar', Bet.STATUS_LOSS), ('haruf_bahar', Bet.STATUS_WIN),
    }
    revert = WalletTransaction.objects.get(user=player, type=WalletTransaction.TYPE_REVERT)
    assert revert.amount == Decimal('9450.00')
    assert '47' in revert.description and '74' in revert.description


def test_correct_back_and_forth_is_reversible(player, placed):
    SettlementService.declare(placed.id, '47')
    SettlementService.correct(placed.id, '12')
    SettlementService.correct(placed.id, '47')

    wallet = Wallet.objects.get(user=player)
    assert wallet.winning_balance == Decimal('9450.00')
    assert wallet.balance == Decimal('830.00')
    assert Bet.objects.get(bet_type='jodi').payout_amount == Decimal('9000.00')


def test_correct_requires_completed_and_change(placed):
    with pytest.raises(NotYetDeclaredException):
        SettlementService.correct(placed.id, '47')
    SettlementService.declare(placed.id, '47')
    with pytest.raises(NoChangeException):
        SettlementService.correct(placed.id, '47')


def test_correct_aborts_when_winnings_were_moved(player, placed):
    SettlementService.declare(placed.id, '47')
    WalletService.request_withdrawal(player, '9000', {'account_number': '1', 'ifsc': 'X', 'account_name': 'P'})

    with pytest.raises(InsufficientFundsException):
        SettlementService.correct(placed.id, '11')

    assert GameSession.objects.get(pk=placed.id).winning_number == '47'
    assert not WalletTransaction.objects.filter(type=WalletTransaction.TYPE_REVERT).exists()
    assert Wallet.objects.get(user=player).winning_balance == Decimal('450.00')
    assert Bet.objects.get(bet_type='jodi').status == Bet.STATUS_WIN


def snapshot(user):
    bets = list(Bet.objects.order_by('id').values_list('id', 'status', 'payout_amount'))
    wallet = Wallet.objects.get(user=user)
    return bets, wallet.balance, wallet.winning_balance


def test_second_declare_changes_nothing(player, placed):
    SettlementService.declare(placed.id, '47')
    after_first = snapshot(player)

    with pytest.raises(AlreadyDeclaredException):
        SettlementService.declare(placed.id, '12')

    assert snapshot(player) == after_first
    assert GameSession.objects.get(pk=placed.id).winning_number == '47'


def test_correction_restores_post_declare_state(make_user, game, session, noon, rates):
    alice = make_user(balance='500')
    bob = make_user(balance='500')
    place(alice, game, noon, rates, [{'type': 'jodi', 'number': '47', 'amount': '10'}])
    place(bob, game, noon, rates, [{'type': 'haruf_andar', 'number': '1', 'amount': '10'},
                                   {'type': 'haruf_bahar', 'number': '7', 'amount': '5'}])

    SettlementService.declare(session.id, '47')
    declared = (snapshot(alice), snapshot(bob))

    SettlementService.correct(session.id, '12')
    assert Wallet.objects.get(user=alice).winning_balance == Decimal('0.00')
    assert Wallet.objects.get(user=bob).winning_balance == Decimal('90.00')

    SettlementService.correct(session.id, '47')
    assert (snapshot(alice), snapshot(bob)) == declared

    # 47 -> 12 reverts alice and bob, 12 -> 47 reverts bob only
    assert WalletTransaction.objects.filter(type=WalletTransaction.TYPE_REVERT).count() == 3
    for user in (alice, bob):
        wins = WalletTransaction.objects.filter(user=user, type=WalletTransaction.TYPE_WIN)
        reverts = WalletTransaction.objects.filter(user=user, type=WalletTransaction.TYPE_REVERT)
        credited = sum(wins.values_list('amount', flat=True)) - sum(reverts.values_list('amount', flat=True))
        assert credited == Wallet.objects.get(user=user).winning_balance


def test_fractional_rate_is_stored_and_paid_exactly(player, game, session, noon):
    rates = PayoutRates(jodi=Decimal('9.125'), haruf=Decimal('9'))
    result = BetService.place_bets(player, game.id, cells=[{'type': 'jodi', 'number': '47', 'amount': '100'}],
                                   now=noon, rates=rates)
    assert result['bets'][0].payout_multiplier == Decimal('9.125')
    assert Bet.objects.get(user=player).payout_multiplier == Decimal('9.125')

    SettlementService.declare(session.id, '47')

    assert Bet.objects.get(user=player).payout_amount == Decimal('912.50')
    assert Wallet.objects.get(user=player).winning_balance == Decimal('912.50')


def test_win_rounding_to_zero_does_not_block_settlement(player, game, session, noon):
    rates = PayoutRates(jodi=Decimal('0.004'), haruf=Decimal('9'))
    BetService.place_bets(player, game.id, cells=[{'type': 'jodi', 'number': '47', 'amount': '1'}],
                          now=noon, rates=rates)

    _session, result = SettlementService.declare(session.id, '47')
    assert result['winners'] == 1
    bet = Bet.objects.get(user=player)
    assert (bet.status, bet.payout_amount) == (Bet.STATUS_WIN, Decimal('0.00'))
    assert not WalletTransaction.objects.filter(type=WalletTransaction.TYPE_WIN).exists()

    SettlementService.correct(session.id, '12')
    assert not WalletTransaction.objects.filter(type=WalletTransaction.TYPE_REVERT).exists()
    assert Bet.objects.get(user=player).status == Bet.STATUS_LOSS
