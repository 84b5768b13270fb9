from celery import shared_task
import logging

from core.exceptions import MatkaException
from core.redis.locks import DistributedLock
from . import clock
from .selectors import find_due_scheduled_sessions
from .settlement import SettlementService

logger = logging.getLogger(__name__)


@shared_task
def declare_scheduled_results():
    """
    Declare every scheduled result that has become due.

    Runs on each beat tick. Overlapping ticks are skipped through a short
    lock; a session declared in between simply fails its conditional
    transition and is logged.
    """
    lock = DistributedLock('scheduled-results', ttl=55, blocking=False)
    if not lock.acquire():
        logger.info("Scheduled result run already in progress, skipping")
        return {'declared': 0, 'skipped': True}

    declared = 0
    try:
        for session in find_due_scheduled_sessions(clock.server_now()):
            try:
                SettlementService.declare(session.id, session.scheduled_winning_number)
                declared += 1
                logger.info(f"Declared scheduled result {session.scheduled_winning_number} for session {session.id}")
            except MatkaException as e:
                logger.warning(f"Scheduled declare skipped for session {session.id}: {e.detail}")
            except Exception:
                logger.exception(f"Scheduled declare failed for session {session.id}")
    finally:
        lock.release()
    return {'declared': declared, 'skipped': False}
