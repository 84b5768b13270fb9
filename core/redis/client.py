import valkey
from django.conf import settings
import logging

logger = logging.getLogger(__name__)


class RedisClient:
    """Lazily created Valkey (Redis-compatible) connection pool"""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.pool = None
            cls._instance.connection = None
        return cls._instance

    def _initialize(self):
        self.pool = valkey.ConnectionPool.from_url(
            settings.REDIS_URL,
            max_connections=20,
            decode_responses=True
        )
        self.connection = valkey.Valkey(connection_pool=self.pool)
        logger.info("Valkey connection pool initialized")

    def get_connection(self):
        if self.connection is None:
            self._initialize()
        return self.connection

    def close(self):
        if self.pool is not None:
            self.pool.disconnect()


redis_client = RedisClient()
