"""
Payment gateway clients.

The order services only need one operation from a gateway: open a hosted
payment session for an order and hand back its URL. The concrete gateway is
chosen by the PAYMENT_GATEWAY_BACKEND setting.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
import logging

import stripe
from django.conf import settings
from django.utils.module_loading import import_string

from .money import to_minor

logger = logging.getLogger(__name__)


class PaymentGatewayError(Exception):
    """Raised when the gateway cannot open a payment session."""


@dataclass(frozen=True)
class PaymentSession:
    id: str
    payment_url: str


class PaymentGateway(ABC):
    """
    The Abstract Base Class for a payment gateway.
    """

    @abstractmethod
    def create_session(self, amount, order_id, tenant_id, currency, idempotency_key) -> PaymentSession:
        """
        Opens a payment session for an order.

        Calls with the same idempotency_key must return the same session.
        Raises PaymentGatewayError when the gateway rejects or cannot be reached.
        """
        pass


class StripeCheckoutGateway(PaymentGateway):
    """
    Hosted Stripe Checkout sessions.

    The order and tenant ids travel as session metadata so the webhook can
    find the order again.
    """

    def create_session(self, amount, order_id, tenant_id, currency, idempotency_key) -> PaymentSession:
        stripe.api_key = settings.STRIPE_SECRET_KEY
        order_id = str(order_id)

        try:
            session = stripe.checkout.Session.create(
                mode="payment",
                line_items=[
                    {
                        "price_data": {
                            "currency": currency,
                            "unit_amount": to_minor(currency, amount),
                            "product_data": {"name": "Online Pizza order"},
                        },
                        "quantity": 1,
                    }
                ],
                metadata={"order_id": order_id, "tenant_id": str(tenant_id)},
                client_reference_id=order_id,
                success_url=settings.PAYMENT_SUCCESS_URL.format(order_id=order_id),
                cancel_url=settings.PAYMENT_CANCEL_URL.format(order_id=order_id),
                idempotency_key=idempotency_key,
            )
        except stripe.StripeError as e:
            logger.error(f"Stripe checkout session creation failed for order {order_id}: {e}")
            raise PaymentGatewayError(str(e)) from e

        logger.info(f"Created Stripe checkout session {session.id} for order {order_id}")
        return PaymentSession(id=session.id, payment_url=session.url)


_gateway = None


def get_payment_gateway() -> PaymentGateway:
    """Returns the process-wide gateway configured by PAYMENT_GATEWAY_BACKEND."""
    global _gateway
    if _gateway is None:
        _gateway = import_string(settings.PAYMENT_GATEWAY_BACKEND)()
    return _gateway


def reset_payment_gateway():
    global _gateway
    _gateway = None
