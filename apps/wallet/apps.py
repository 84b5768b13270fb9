from django.apps import AppConfig


class WalletConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'apps.wallet'
    label = 'wallet'

    def ready(self):
        from . import signals  # noqa: F401
