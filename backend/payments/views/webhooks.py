"""
Webhook views for payment providers.

Stripe reports the outcome of Checkout sessions here. The order id travels
in the session metadata set when the session was created.
"""

from django.conf import settings
from django.http import HttpResponse
from django.utils.decorators import method_decorator
from django.views.decorators.csrf import csrf_exempt
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView
import logging

import stripe

from orders.exceptions import OrderNotFoundError
from payments.services import PaymentConfirmationService

logger = logging.getLogger(__name__)

PAID_EVENTS = {"checkout.session.async_payment_succeeded"}
FAILED_EVENTS = {"checkout.session.async_payment_failed", "checkout.session.expired"}


@method_decorator(csrf_exempt, name="dispatch")
class StripeWebhookView(APIView):
    """
    Stripe webhook view to handle asynchronous payment events.

    Signature verification replaces authentication: the request is trusted
    only if stripe.Webhook.construct_event accepts it.
    """

    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request, *args, **kwargs):
        payload = request.body
        sig_header = request.META.get("HTTP_STRIPE_SIGNATURE")
        endpoint_secret = settings.STRIPE_WEBHOOK_SECRET

        try:
            event = stripe.Webhook.construct_event(payload, sig_header, endpoint_secret)
        except ValueError as e:
            # Invalid payload
            logger.error(f"Stripe webhook: Invalid payload - {e}")
            return HttpResponse(status=400)
        except stripe.SignatureVerificationError as e:
            # Invalid signature
            logger.error(f"Stripe webhook: Invalid signature - {e}")
            return HttpResponse(status=400)

        event_type = event["type"]
        session = event["data"]["object"]

        if event_type == "checkout.session.completed":
            if session.get("payment_status") not in ("paid", "no_payment_required"):
                # Async payment methods settle later via async_payment_succeeded/failed
                logger.info(f"Stripe webhook: session {session.get('id')} completed, payment still pending")
                return HttpResponse(status=200)
            paid = True
        elif event_type in PAID_EVENTS:
            paid = True
        elif event_type in FAILED_EVENTS:
            paid = False
        else:
            logger.info(f"Stripe webhook: ignoring event type {event_type}")
            return HttpResponse(status=200)

        order_id = (session.get("metadata") or {}).get("order_id") or session.get("client_reference_id")
        if not order_id:
            logger.error(f"Stripe webhook: no order_id on {event_type} session {session.get('id')}")
            return HttpResponse(status=400)

        try:
            PaymentConfirmationService().confirm_payment(order_id, paid=paid, session_id=session.get("id"))
        except OrderNotFoundError:
            # Not ours to retry; Stripe would redeliver forever
            logger.error(f"Stripe webhook: order {order_id} from {event_type} not found")

        return HttpResponse(status=200)
