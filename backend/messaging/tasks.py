from celery import shared_task
import logging

from .services import EventPublisher

logger = logging.getLogger(__name__)


@shared_task
def relay_pending_outbox_messages(batch_size=None):
    """
    Periodic task that retries delivery of outbox messages still PENDING.

    Scheduled through CELERY_BEAT_SCHEDULE. Messages that fail again stay
    pending for the next run.

    Returns:
        dict: Status and the number of messages still pending
    """
    logger.info("Relaying pending outbox messages...")

    publisher = EventPublisher()
    still_pending = len(publisher.relay_pending(batch_size=batch_size))

    if still_pending:
        logger.warning(f"{still_pending} outbox message(s) still pending after relay")

    return {
        "status": "completed",
        "still_pending": still_pending,
    }
