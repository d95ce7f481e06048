"""
Payment services for orders.

- PaymentOrchestrator: opens a gateway session for CARD orders after the
  order is committed.
- PaymentConfirmationService: applies gateway payment results and publishes
  PAYMENT_STATUS_UPDATE.
"""
import logging

from django.conf import settings
from django.db import transaction

from messaging.services import EventPublisher, EventType
from orders.exceptions import OrderNotFoundError, PaymentSessionError
from orders.models import Order
from orders.serializers import order_event_data

from .gateways import PaymentGatewayError, get_payment_gateway

logger = logging.getLogger(__name__)


class PaymentOrchestrator:
    """
    Conditionally starts payment for a persisted order.

    The session is bound to the order id and the order's idempotency token,
    so a retried request reaches the same gateway session.
    """

    def __init__(self, gateway=None, currency=None):
        self.gateway = gateway or get_payment_gateway()
        self.currency = currency or settings.ORDER_CURRENCY

    def start_payment(self, order: Order, idempotency_key: str):
        """
        Returns the payment URL for CARD orders and None otherwise.

        A URL already stored on the order is reused without calling the
        gateway. Gateway failures raise PaymentSessionError; the order itself
        stays committed.
        """
        if order.payment_mode != Order.PaymentMode.CARD:
            return None

        if order.payment_url:
            return order.payment_url

        try:
            session = self.gateway.create_session(
                amount=order.total,
                order_id=str(order.id),
                tenant_id=order.tenant_id,
                currency=self.currency,
                idempotency_key=idempotency_key,
            )
        except PaymentGatewayError as exc:
            logger.error(f"Payment session could not be created for order {order.id}: {exc}")
            raise PaymentSessionError() from exc

        Order.objects.filter(pk=order.pk).update(
            payment_session_id=session.id,
            payment_url=session.payment_url,
        )
        order.payment_session_id = session.id
        order.payment_url = session.payment_url
        return session.payment_url


class PaymentConfirmationService:
    """
    Moves an order's payment status from PENDING to PAID or FAILED.

    Any other transition is ignored: gateways redeliver webhooks, and a
    settled payment must not flip.
    """

    def __init__(self, publisher=None):
        self.publisher = publisher or EventPublisher()

    def confirm_payment(self, order_id, paid: bool, session_id=None) -> Order:
        new_status = Order.PaymentStatus.PAID if paid else Order.PaymentStatus.FAILED

        with transaction.atomic():
            order = (
                Order.objects.select_for_update()
                .select_related("customer")
                .filter(pk=order_id)
                .first()
            )
            if order is None:
                raise OrderNotFoundError(order_id)

            if session_id and order.payment_session_id and session_id != order.payment_session_id:
                logger.warning(
                    f"Payment session {session_id} does not match order {order_id} "
                    f"session {order.payment_session_id}; ignoring"
                )
                return order

            if order.payment_status != Order.PaymentStatus.PENDING:
                logger.info(
                    f"Ignoring payment result {new_status} for order {order_id}: "
                    f"already {order.payment_status}"
                )
                return order

            order.payment_status = new_status
            order.save(update_fields=["payment_status", "updated_at"])
            message = self.publisher.record(
                EventType.PAYMENT_STATUS_UPDATE,
                order_event_data(order),
                key=order.id,
            )

        logger.info(f"Order {order_id} payment status set to {new_status}")
        self.publisher.dispatch([message])
        return order
