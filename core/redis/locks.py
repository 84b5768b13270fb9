import uuid
import time
from .client import redis_client

RELEASE_SCRIPT = """
if redis.call("get", KEYS[1]) == ARGV[1] then
    return redis.call("del", KEYS[1])
else
    return 0
end
"""


class DistributedLock:
    """
    Distributed lock using Redis SET NX with an expiry.

    Used to keep periodic jobs from overlapping across workers. Database
    correctness never depends on it.
    """
    def __init__(self, key, ttl=5, blocking=True, timeout=10):
        self.key = f"lock:{key}"
        self.ttl = ttl
        self.blocking = blocking
        self.timeout = timeout
        self.identifier = str(uuid.uuid4())
        self.acquired = False

    def acquire(self):
        connection = redis_client.get_connection()
        end_time = time.monotonic() + self.timeout

        while True:
            if connection.set(self.key, self.identifier, nx=True, ex=self.ttl):
                self.acquired = True
                return True

            if not self.blocking or time.monotonic() > end_time:
                return False

            time.sleep(0.01)

    def release(self):
        """Release the lock only if we still own it"""
        if not self.acquired:
            return 0
        connection = redis_client.get_connection()
        self.acquired = False
        return connection.eval(RELEASE_SCRIPT, 1, self.key, self.identifier)

    def __enter__(self):
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()
