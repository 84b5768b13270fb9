from django.db import models
from django.conf import settings
from decimal import Decimal


class Game(models.Model):
    """A recurring daily market"""
    name = models.CharField(max_length=100)
    open_time = models.TimeField()
    # May be earlier than open_time, in which case the game closes after midnight
    close_time = models.TimeField()
    # Past this time the per-bet amount is capped at max_bet_after_mid_time
    mid_time = models.TimeField(null=True, blank=True)
    max_bet_after_mid_time = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('100.00'))
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['open_time']
        indexes = [
            models.Index(fields=['is_active', 'open_time'], name='games_game_is_acti_1e4f7a_idx'),
        ]

    def __str__(self):
        return self.name


class GameSession(models.Model):
    """One calendar day of a game; the unit that receives a winning number"""
    STATUS_PENDING = 'pending'
    STATUS_COMPLETED = 'completed'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_COMPLETED, 'Completed'),
    )

    game = models.ForeignKey(Game, on_delete=models.CASCADE, related_name='sessions')
    session_date = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    winning_number = models.CharField(max_length=2, null=True, blank=True)
    scheduled_winning_number = models.CharField(max_length=2, null=True, blank=True)
    is_scheduled = models.BooleanField(default=False)
    result_declared_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['game', 'session_date'], name='unique_game_session_per_day'),
        ]
        indexes = [
            models.Index(fields=['status', 'is_scheduled'], name='games_games_status_6b2d9c_idx'),
            models.Index(fields=['-session_date'], name='games_games_session_3a8e1f_idx'),
        ]
        ordering = ['-session_date']

    def __str__(self):
        return f"{self.game} - {self.session_date}"

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING


class Bet(models.Model):
    TYPE_JODI = 'jodi'
    TYPE_HARUF_ANDAR = 'haruf_andar'
    TYPE_HARUF_BAHAR = 'haruf_bahar'
    BET_TYPES = (
        (TYPE_JODI, 'Jodi'),
        (TYPE_HARUF_ANDAR, 'Haruf Andar'),
        (TYPE_HARUF_BAHAR, 'Haruf Bahar'),
    )

    STATUS_PENDING = 'pending'
    STATUS_WIN = 'win'
    STATUS_LOSS = 'loss'
    STATUS_CHOICES = (
        (STATUS_PENDING, 'Pending'),
        (STATUS_WIN, 'Win'),
        (STATUS_LOSS, 'Loss'),
    )

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='bets')
    game_session = models.ForeignKey(GameSession, on_delete=models.CASCADE, related_name='bets')
    bet_type = models.CharField(max_length=20, choices=BET_TYPES)
    bet_number = models.CharField(max_length=2)
    bet_amount = models.DecimalField(max_digits=14, decimal_places=2)
    # Rate at placement time; settlement never re-reads current rates
    payout_multiplier = models.DecimalField(max_digits=10, decimal_places=4)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING)
    payout_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0'))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=models.Q(bet_amount__gt=0), name='bet_amount_positive'),
        ]
        indexes = [
            models.Index(fields=['game_session', 'status'], name='games_bet_game_se_4c1a8b_idx'),
            models.Index(fields=['user', '-created_at'], name='games_bet_user_id_7f3e2d_idx'),
            models.Index(fields=['game_session', 'bet_type', 'bet_number'], name='games_bet_game_se_9d5b6a_idx'),
        ]
        ordering = ['-created_at', '-id']

    def __str__(self):
        return f"{self.user} - {self.bet_type} {self.bet_number} - {self.bet_amount}"


class Setting(models.Model):
    """Global key/value settings, e.g. rate_jodi and rate_haruf"""
    key = models.CharField(max_length=100, unique=True)
    value = models.CharField(max_length=255)
    description = models.CharField(max_length=255, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.key}={self.value}"
