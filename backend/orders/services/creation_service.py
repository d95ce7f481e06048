from dataclasses import dataclass
from typing import Optional
import logging

from django.db import DatabaseError, IntegrityError, transaction

from customers.services import CustomerService
from discounts.services import DiscountResolver
from messaging.services import EventPublisher, EventType
from orders.calculators import OrderTotalsCalculator
from orders.exceptions import CustomerNotFoundError, OrderPersistenceError
from orders.models import IdempotencyRecord, Order
from orders.serializers import order_event_data
from payments.services import PaymentOrchestrator
from pricing.engine import PricingEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderPlacement:
    order: Order
    payment_url: Optional[str]
    replayed: bool = False

    @property
    def response(self):
        return {"paymentUrl": self.payment_url}


class OrderCreationService:
    """
    Places orders exactly once per idempotency token.

    Steps run strictly in sequence:
    1. price the cart from the price cache (fails closed)
    2. resolve the coupon and compute totals
    3. idempotency lookup; a known token replays the stored order
    4. one transaction inserting the order, its idempotency record and its
       ORDER_CREATE outbox message
    5. payment session for CARD orders
    6. relay of the order's pending events

    Nothing from step 5 onward runs unless step 4 committed. Replays create no
    new events and reuse the stored payment URL.
    """

    def __init__(self, pricing_engine=None, totals_calculator=None, publisher=None, payment_orchestrator=None):
        self.pricing_engine = pricing_engine or PricingEngine()
        self.totals_calculator = totals_calculator or OrderTotalsCalculator()
        self.publisher = publisher or EventPublisher()
        self.payment_orchestrator = payment_orchestrator or PaymentOrchestrator()

    def place_order(
        self,
        *,
        cart,
        tenant_id,
        customer_id,
        payment_mode,
        address,
        idempotency_key,
        coupon_code=None,
        comment="",
    ) -> OrderPlacement:
        pricing = self.pricing_engine.price_cart(cart)
        discount_percent = DiscountResolver.get_discount_percentage(coupon_code, tenant_id)
        totals = self.totals_calculator.calculate(pricing.total, discount_percent)

        record = self._find_record(idempotency_key)
        if record is not None:
            return self._replay(record, idempotency_key)

        customer = CustomerService.get_customer(customer_id)
        if customer is None:
            raise CustomerNotFoundError()

        try:
            with transaction.atomic():
                order = Order.objects.create(
                    tenant_id=str(tenant_id),
                    customer=customer,
                    cart=list(cart),
                    address=address,
                    comment=comment or "",
                    payment_mode=payment_mode,
                    order_status=Order.OrderStatus.RECEIVED,
                    payment_status=Order.PaymentStatus.PENDING,
                    client_priced_topping_ids=pricing.client_priced_topping_ids,
                    **totals.as_dict(),
                )
                IdempotencyRecord.objects.create(
                    key=idempotency_key,
                    order=order,
                    response={"order_id": str(order.id), "total": order.total},
                )
                self.publisher.record(EventType.ORDER_CREATE, order_event_data(order), key=order.id)
        except IntegrityError as exc:
            # A concurrent request with the same token committed first
            record = self._find_record(idempotency_key)
            if record is None:
                logger.error(f"Order creation failed for idempotency key {idempotency_key!r}: {exc}")
                raise OrderPersistenceError() from exc
            logger.info(f"Idempotency key {idempotency_key!r} claimed concurrently; replaying order {record.order_id}")
            return self._replay(record, idempotency_key)
        except DatabaseError as exc:
            logger.error(f"Order creation failed for idempotency key {idempotency_key!r}: {exc}")
            raise OrderPersistenceError() from exc

        logger.info(
            f"Order {order.id} placed for tenant {order.tenant_id}: total {order.total} "
            f"({order.payment_mode})"
        )
        return self._complete(order, idempotency_key, replayed=False)

    @staticmethod
    def _find_record(idempotency_key):
        return (
            IdempotencyRecord.objects.select_related("order", "order__customer")
            .filter(key=idempotency_key)
            .first()
        )

    def _replay(self, record, idempotency_key) -> OrderPlacement:
        logger.info(f"Replaying order {record.order_id} for idempotency key {idempotency_key!r}")
        return self._complete(record.order, idempotency_key, replayed=True)

    def _complete(self, order, idempotency_key, replayed) -> OrderPlacement:
        try:
            payment_url = self.payment_orchestrator.start_payment(order, idempotency_key)
        finally:
            # The creation event is durable either way; deliver it even if payment failed
            self._relay_events(order)
        return OrderPlacement(order=order, payment_url=payment_url, replayed=replayed)

    def _relay_events(self, order):
        try:
            self.publisher.dispatch_pending_for(order.id)
        except DatabaseError as exc:
            # Rows stay PENDING for relay_pending_outbox_messages
            logger.error(f"Could not relay events for order {order.id}; left for the outbox relay: {exc}")
