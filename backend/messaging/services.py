"""
Outbox-backed event publishing.

`record` must be called inside the transaction that performs the state change.
`dispatch` runs after commit and hands pending rows to the broker. A delivery
failure leaves the row PENDING for `relay_pending_outbox_messages`, so a
committed change is never left without its event.
"""
import logging
from datetime import timedelta
from typing import Iterable, List

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from .brokers import get_message_broker
from .models import OutboxMessage

logger = logging.getLogger(__name__)


class EventType:
    ORDER_CREATE = "ORDER_CREATE"
    ORDER_STATUS_UPDATE = "ORDER_STATUS_UPDATE"
    PAYMENT_STATUS_UPDATE = "PAYMENT_STATUS_UPDATE"


class EventPublisher:

    def __init__(self, broker=None, topic=None):
        self.broker = broker or get_message_broker()
        self.topic = topic or settings.ORDER_EVENTS_TOPIC

    def record(self, event_type, data, key) -> OutboxMessage:
        return OutboxMessage.objects.create(
            topic=self.topic,
            partition_key=str(key),
            event_type=event_type,
            payload=data,
        )

    def dispatch(self, messages: Iterable[OutboxMessage]) -> int:
        """
        Delivers the given messages, skipping any already sent.

        Returns the number delivered. Failures are recorded on the row and
        logged, never raised. Once a message for a key fails, later messages
        for that key wait for the next relay so per-order order holds.
        """
        delivered = 0
        blocked_keys = set()
        for message in messages:
            if message.partition_key in blocked_keys:
                continue
            if self._deliver(message):
                delivered += 1
            elif message.status == OutboxMessage.Status.PENDING:
                blocked_keys.add(message.partition_key)
        return delivered

    def dispatch_pending_for(self, key) -> int:
        pending = OutboxMessage.objects.filter(
            partition_key=str(key), status=OutboxMessage.Status.PENDING
        ).order_by("id")
        return self.dispatch(list(pending))

    def relay_pending(self, batch_size=None) -> List[OutboxMessage]:
        """Retries the oldest pending messages. Returns the ones still pending."""
        batch_size = batch_size or settings.OUTBOX_RELAY_BATCH_SIZE
        pending = list(
            OutboxMessage.objects.filter(status=OutboxMessage.Status.PENDING).order_by("id")[:batch_size]
        )
        self.dispatch(pending)
        return [message for message in pending if message.status == OutboxMessage.Status.PENDING]

    def _deliver(self, message) -> bool:
        claimed = self._claim(message)
        if claimed is None:
            # Sent, or being sent, by a concurrent relay
            return False

        # Published outside any transaction so no row lock or connection is
        # held while the broker retries
        try:
            self.broker.send_message(claimed.topic, claimed.message, key=claimed.partition_key)
        except Exception as exc:
            claimed.last_error = str(exc)
            claimed.claimed_until = None
            OutboxMessage.objects.filter(pk=claimed.pk).update(last_error=claimed.last_error, claimed_until=None)
            logger.error(
                f"Failed to publish {claimed.event_type} for order {claimed.partition_key} "
                f"(attempt {claimed.attempts}): {exc}"
            )
            self._sync(message, claimed)
            return False

        claimed.status = OutboxMessage.Status.SENT
        claimed.sent_at = timezone.now()
        claimed.last_error = ""
        claimed.claimed_until = None
        OutboxMessage.objects.filter(pk=claimed.pk).update(
            status=claimed.status,
            sent_at=claimed.sent_at,
            last_error="",
            claimed_until=None,
        )
        self._sync(message, claimed)

        logger.info(f"Published {claimed.event_type} for order {claimed.partition_key}")
        return True

    @staticmethod
    def _claim(message):
        """
        Marks a pending row as in flight and counts the attempt.

        The claim expires after OUTBOX_CLAIM_SECONDS so a relay that died
        mid-publish does not strand the row.
        """
        now = timezone.now()
        with transaction.atomic():
            claimed = (
                OutboxMessage.objects.select_for_update(skip_locked=True)
                .filter(pk=message.pk, status=OutboxMessage.Status.PENDING)
                .filter(Q(claimed_until__isnull=True) | Q(claimed_until__lt=now))
                .first()
            )
            if claimed is None:
                return None
            claimed.attempts += 1
            claimed.claimed_until = now + timedelta(seconds=settings.OUTBOX_CLAIM_SECONDS)
            claimed.save(update_fields=["attempts", "claimed_until"])
        return claimed

    @staticmethod
    def _sync(message, claimed):
        message.attempts = claimed.attempts
        message.status = claimed.status
        message.sent_at = claimed.sent_at
        message.last_error = claimed.last_error
        message.claimed_until = claimed.claimed_until
