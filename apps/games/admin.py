from django.contrib import admin
from .models import Bet, Game, GameSession, Setting


@admin.register(Game)
class GameAdmin(admin.ModelAdmin):
    list_display = ('name', 'open_time', 'close_time', 'mid_time', 'max_bet_after_mid_time', 'is_active')
    list_filter = ('is_active',)
    search_fields = ('name',)


@admin.register(GameSession)
class GameSessionAdmin(admin.ModelAdmin):
    list_display = ('game', 'session_date', 'status', 'winning_number', 'is_scheduled', 'result_declared_at')
    list_filter = ('status', 'is_scheduled')
    # Results go through the declare/correct endpoints so payouts stay consistent
    readonly_fields = ('status', 'winning_number', 'result_declared_at')


@admin.register(Bet)
class BetAdmin(admin.ModelAdmin):
    list_display = ('user', 'game_session', 'bet_type', 'bet_number', 'bet_amount', 'status', 'payout_amount')
    list_filter = ('bet_type', 'status')
    search_fields = ('user__phone', 'bet_number')

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(Setting)
class SettingAdmin(admin.ModelAdmin):
    list_display = ('key', 'value', 'description', 'updated_at')
