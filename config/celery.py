import os
import logging
from celery import Celery

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings.base')

logger = logging.getLogger(__name__)

app = Celery('matka_backend')

# Using a string here means the worker doesn't have to serialize
# the configuration object to child processes.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Load task modules from all registered Django apps.
app.autodiscover_tasks()


@app.on_after_finalize.connect
def log_configuration(sender, **kwargs):
    logger.info(f"Celery broker: {sender.conf.broker_url}")
    logger.info(f"Celery result backend: {sender.conf.result_backend}")
