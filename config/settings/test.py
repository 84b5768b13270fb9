import tempfile

from .base import *

DEBUG = False
SECRET_KEY = 'test-secret-key'

# File-backed so threaded tests share one database. IMMEDIATE makes every
# atomic block take the write lock up front, the way row locks serialize
# writers on PostgreSQL.
DATABASES = {
    'default': {
        'ENGINE': 'django.db.backends.sqlite3',
        'NAME': os.path.join(tempfile.gettempdir(), 'matka.sqlite3'),
        'OPTIONS': {
            'timeout': 20,
            'transaction_mode': 'IMMEDIATE',
        },
        'TEST': {
            'NAME': os.getenv('TEST_DB_PATH', os.path.join(tempfile.gettempdir(), 'test_matka.sqlite3')),
        },
    }
}

CACHES = {
    'default': {
        'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
    }
}

PASSWORD_HASHERS = [
    'django.contrib.auth.hashers.MD5PasswordHasher',
]

CELERY_TASK_ALWAYS_EAGER = True
CELERY_TASK_EAGER_PROPAGATES = True
CELERY_BROKER_URL = 'memory://'
CELERY_RESULT_BACKEND = 'cache+memory://'

LOGGING['root']['level'] = 'WARNING'
