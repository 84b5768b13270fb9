from rest_framework import serializers
from decimal import Decimal
from .models import Bet, GameSession


class BetSerializer(serializers.ModelSerializer):
    game_name = serializers.CharField(source='game_session.game.name', read_only=True)
    session_date = serializers.DateField(source='game_session.session_date', read_only=True)
    winning_number = serializers.CharField(source='game_session.winning_number', read_only=True)

    class Meta:
        model = Bet
        fields = [
            'id', 'game_session', 'game_name', 'session_date', 'bet_type', 'bet_number',
            'bet_amount', 'payout_multiplier', 'status', 'payout_amount', 'winning_number',
            'created_at'
        ]
        read_only_fields = fields


class SessionBetSerializer(serializers.ModelSerializer):
    """Bets of one session as seen by an admin"""
    user_phone = serializers.CharField(source='user.phone', read_only=True)
    user_name = serializers.CharField(source='user.name', read_only=True)

    class Meta:
        model = Bet
        fields = [
            'id', 'user', 'user_phone', 'user_name', 'bet_type', 'bet_number', 'bet_amount',
            'payout_multiplier', 'status', 'payout_amount', 'created_at'
        ]
        read_only_fields = fields


class GameSessionSerializer(serializers.ModelSerializer):
    game_name = serializers.CharField(source='game.name', read_only=True)

    class Meta:
        model = GameSession
        fields = [
            'id', 'game', 'game_name', 'session_date', 'status', 'winning_number',
            'scheduled_winning_number', 'is_scheduled', 'result_declared_at'
        ]
        read_only_fields = fields


class PlaceBetSerializer(serializers.Serializer):
    """
    Wager input in one of three shapes: grid ``bets``, ``crossing_digits``
    with ``amount``, or ``numbers`` with ``bet_type``, ``amount`` and
    ``palti``. Values are checked by the pricing rules, not here.
    """
    bets = serializers.ListField(child=serializers.DictField(), required=False, allow_empty=False)
    crossing_digits = serializers.CharField(required=False, max_length=10)
    numbers = serializers.ListField(child=serializers.CharField(allow_blank=True), required=False, allow_empty=False)
    bet_type = serializers.CharField(required=False, max_length=20)
    amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal('0.01'), required=False
    )
    palti = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        modes = [key for key in ('bets', 'crossing_digits', 'numbers') if attrs.get(key)]
        if len(modes) != 1:
            raise serializers.ValidationError("Provide exactly one of bets, crossing_digits or numbers")
        if modes[0] != 'bets' and attrs.get('amount') is None:
            raise serializers.ValidationError({'amount': ["This field is required."]})
        return attrs


class ResultSerializer(serializers.Serializer):
    session_id = serializers.IntegerField(min_value=1)
    winning_number = serializers.RegexField(
        r'^[0-9]{2}$', max_length=2,
        error_messages={'invalid': 'Winning number must be a 2-digit number (00-99)'}
    )
