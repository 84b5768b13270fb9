from django.urls import path
from .views import (
    GameListView, GameStatusView, PlaceBetView, BetHistoryView, WinningBetsView, BetStatsView,
    admin_session_bets,
)

urlpatterns = [
    path('', GameListView.as_view(), name='game-list'),
    path('<int:game_id>/status/', GameStatusView.as_view(), name='game-status'),
    path('<int:game_id>/bets/', PlaceBetView.as_view(), name='place-bets'),
    path('bets/history/', BetHistoryView.as_view(), name='bet-history'),
    path('bets/wins/', WinningBetsView.as_view(), name='winning-bets'),
    path('bets/stats/', BetStatsView.as_view(), name='bet-stats'),
    path('sessions/<int:session_id>/bets/', admin_session_bets, name='session-bets'),
]
