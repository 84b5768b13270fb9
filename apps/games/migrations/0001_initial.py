from decimal import Decimal

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Game',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100)),
                ('open_time', models.TimeField()),
                ('close_time', models.TimeField()),
                ('mid_time', models.TimeField(blank=True, null=True)),
                ('max_bet_after_mid_time', models.DecimalField(decimal_places=2, default=Decimal('100.00'), max_digits=14)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['open_time'],
                'indexes': [models.Index(fields=['is_active', 'open_time'], name='games_game_is_acti_1e4f7a_idx')],
            },
        ),
        migrations.CreateModel(
            name='Setting',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('key', models.CharField(max_length=100, unique=True)),
                ('value', models.CharField(max_length=255)),
                ('description', models.CharField(blank=True, max_length=255)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
        ),
        migrations.CreateModel(
            name='GameSession',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('session_date', models.DateField()),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed')], default='pending', max_length=20)),
                ('winning_number', models.CharField(blank=True, max_length=2, null=True)),
                ('scheduled_winning_number', models.CharField(blank=True, max_length=2, null=True)),
                ('is_scheduled', models.BooleanField(default=False)),
                ('result_declared_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('game', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='sessions', to='games.game')),
            ],
            options={
                'ordering': ['-session_date'],
                'indexes': [
                    models.Index(fields=['status', 'is_scheduled'], name='games_games_status_6b2d9c_idx'),
                    models.Index(fields=['-session_date'], name='games_games_session_3a8e1f_idx'),
                ],
                'constraints': [
                    models.UniqueConstraint(fields=('game', 'session_date'), name='unique_game_session_per_day'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Bet',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('bet_type', models.CharField(choices=[('jodi', 'Jodi'), ('haruf_andar', 'Haruf Andar'), ('haruf_bahar', 'Haruf Bahar')], max_length=20)),
                ('bet_number', models.CharField(max_length=2)),
                ('bet_amount', models.DecimalField(decimal_places=2, max_digits=14)),
                ('payout_multiplier', models.DecimalField(decimal_places=2, max_digits=8)),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('win', 'Win'), ('loss', 'Loss')], default='pending', max_length=10)),
                ('payout_amount', models.DecimalField(decimal_places=2, default=Decimal('0'), max_digits=14)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('game_session', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bets', to='games.gamesession')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bets', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['game_session', 'status'], name='games_bet_game_se_4c1a8b_idx'),
                    models.Index(fields=['user', '-created_at'], name='games_bet_user_id_7f3e2d_idx'),
                    models.Index(fields=['game_session', 'bet_type', 'bet_number'], name='games_bet_game_se_9d5b6a_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(bet_amount__gt=0), name='bet_amount_positive'),
                ],
            },
        ),
    ]
