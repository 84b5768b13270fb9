from datetime import datetime, time
from decimal import Decimal

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from apps.accounts.models import User
from apps.games.models import Game
from apps.games.pricing import PayoutRates
from apps.games.services import GameSessionService
from apps.wallet.services import WalletService


@pytest.fixture
def make_user(db):
    counter = {'n': 0}

    def _make(balance='0', role=User.ROLE_USER, **kwargs):
        counter['n'] += 1
        user = User.objects.create_user(
            phone=kwargs.pop('phone', f"90000000{counter['n']:02d}"),
            password='secret-pass',
            role=role,
            **kwargs,
        )
        if Decimal(balance) > 0:
            WalletService.deposit(user.id, balance)
        return user
    return _make


@pytest.fixture
def player(make_user):
    return make_user(balance='1000.00', name='Player One')


@pytest.fixture
def admin(make_user):
    return make_user(role=User.ROLE_ADMIN, name='Admin')


@pytest.fixture
def noon():
    return timezone.make_aware(datetime(2026, 1, 10, 12, 0))


@pytest.fixture
def game(db):
    return Game.objects.create(name='Morning Star', open_time=time(9, 0), close_time=time(21, 0))


@pytest.fixture
def session(game, noon):
    return GameSessionService.get_today_session(game, noon)


@pytest.fixture
def rates():
    return PayoutRates(jodi=Decimal('90'), haruf=Decimal('9'))


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()
