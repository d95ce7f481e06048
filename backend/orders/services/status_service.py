from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
import logging

from messaging.services import EventPublisher, EventType
from orders.exceptions import (
    InvalidStatusTransitionError,
    OrderNotFoundError,
    OrderPermissionError,
)
from orders.models import Order
from orders.serializers import order_event_data
from users.context import AuthorizationContext

logger = logging.getLogger(__name__)


class OrderStatusService:
    """
    Applies order status transitions.

    Only admins, and managers of the order's own tenant, may move an order.
    Statuses only move forward along Order.STATUS_PROGRESSION; skipping ahead
    is allowed, going back or staying put is not.
    """

    def __init__(self, publisher=None):
        self.publisher = publisher or EventPublisher()

    @staticmethod
    def can_transition(current_status, requested_status) -> bool:
        if requested_status not in Order.OrderStatus.values:
            return False
        return Order.status_rank(requested_status) > Order.status_rank(current_status)

    def change_status(self, order_id, requested_status, context: AuthorizationContext):
        """
        Returns {"_id": order_id} after the new status and its
        ORDER_STATUS_UPDATE event are committed together.
        """
        if not (context.is_admin or context.is_manager):
            raise OrderPermissionError()

        with transaction.atomic():
            order = self._get_for_update(order_id)

            if not context.is_admin and not context.manages_tenant(order.tenant_id):
                logger.warning(
                    f"Manager of tenant {context.tenant_id} tried to change order {order_id} "
                    f"of tenant {order.tenant_id}"
                )
                raise OrderPermissionError()

            if not self.can_transition(order.order_status, requested_status):
                raise InvalidStatusTransitionError(order.order_status, requested_status)

            previous_status = order.order_status
            order.order_status = requested_status
            order.save(update_fields=["order_status", "updated_at"])
            message = self.publisher.record(
                EventType.ORDER_STATUS_UPDATE,
                order_event_data(order),
                key=order.id,
            )

        logger.info(f"Order {order.id} moved from {previous_status} to {requested_status}")
        self.publisher.dispatch([message])
        return {"_id": str(order.id)}

    @staticmethod
    def _get_for_update(order_id):
        try:
            order = (
                Order.objects.select_for_update()
                .select_related("customer")
                .filter(pk=order_id)
                .first()
            )
        except (ValueError, DjangoValidationError):
            order = None
        if order is None:
            raise OrderNotFoundError(order_id)
        return order
