"""
Payment Confirmation Tests

Covers PaymentConfirmationService and the Stripe webhook that drives it.

Test Categories:
1. PENDING -> PAID / FAILED with PAYMENT_STATUS_UPDATE
2. Redelivered or mismatched results are ignored
3. Webhook signature handling and event mapping

Run with: pytest backend/payments/tests/test_payment_confirmation.py -v
"""
import json
import uuid
from unittest.mock import patch

import pytest
import stripe

from orders.exceptions import OrderNotFoundError
from orders.models import Order
from payments.services import PaymentConfirmationService


WEBHOOK_URL = "/api/payments/webhook/stripe/"


@pytest.fixture
def card_order(make_order):
    return make_order(
        payment_mode=Order.PaymentMode.CARD,
        payment_session_id="cs_test_1",
        payment_url="https://checkout.example.com/pay/cs_test_1",
    )


@pytest.mark.django_db
class TestPaymentConfirmationService:

    def test_paid_result_marks_order_paid(self, card_order, message_broker):
        order = PaymentConfirmationService().confirm_payment(card_order.id, paid=True, session_id="cs_test_1")

        assert order.payment_status == Order.PaymentStatus.PAID
        card_order.refresh_from_db()
        assert card_order.payment_status == Order.PaymentStatus.PAID

        events = message_broker.events("PAYMENT_STATUS_UPDATE")
        assert len(events) == 1
        assert events[0]["data"]["payment_status"] == "paid"
        assert message_broker.sent[0]["key"] == str(card_order.id)

    def test_failed_result_marks_order_failed(self, card_order, message_broker):
        PaymentConfirmationService().confirm_payment(card_order.id, paid=False)

        card_order.refresh_from_db()
        assert card_order.payment_status == Order.PaymentStatus.FAILED
        assert len(message_broker.events("PAYMENT_STATUS_UPDATE")) == 1

    def test_settled_payment_does_not_flip(self, card_order, message_broker):
        """
        Scenario:
        - Order already PAID
        - A late FAILED result arrives
        - Expected: stays PAID, no event
        """
        service = PaymentConfirmationService()
        service.confirm_payment(card_order.id, paid=True)

        service.confirm_payment(card_order.id, paid=False)

        card_order.refresh_from_db()
        assert card_order.payment_status == Order.PaymentStatus.PAID
        assert len(message_broker.events("PAYMENT_STATUS_UPDATE")) == 1

    def test_mismatched_session_is_ignored(self, card_order, message_broker):
        PaymentConfirmationService().confirm_payment(card_order.id, paid=True, session_id="cs_test_other")

        card_order.refresh_from_db()
        assert card_order.payment_status == Order.PaymentStatus.PENDING
        assert message_broker.sent == []

    def test_unknown_order_raises(self, db):
        with pytest.raises(OrderNotFoundError):
            PaymentConfirmationService().confirm_payment(uuid.uuid4(), paid=True)


def stripe_event(event_type, session):
    return {"type": event_type, "data": {"object": session}}


@pytest.mark.django_db
class TestStripeWebhook:

    def post(self, api_client, event):
        with patch("payments.views.webhooks.stripe.Webhook.construct_event", return_value=event):
            return api_client.post(
                WEBHOOK_URL,
                data=json.dumps(event),
                content_type="application/json",
                HTTP_STRIPE_SIGNATURE="t=1,v1=signature",
            )

    def test_completed_paid_session_marks_order_paid(self, api_client, card_order):
        event = stripe_event(
            "checkout.session.completed",
            {"id": "cs_test_1", "payment_status": "paid", "metadata": {"order_id": str(card_order.id)}},
        )

        response = self.post(api_client, event)

        assert response.status_code == 200
        card_order.refresh_from_db()
        assert card_order.payment_status == Order.PaymentStatus.PAID

    def test_expired_session_marks_order_failed(self, api_client, card_order):
        event = stripe_event(
            "checkout.session.expired",
            {"id": "cs_test_1", "client_reference_id": str(card_order.id), "metadata": {}},
        )

        response = self.post(api_client, event)

        assert response.status_code == 200
        card_order.refresh_from_db()
        assert card_order.payment_status == Order.PaymentStatus.FAILED

    def test_completed_but_unpaid_session_leaves_order_pending(self, api_client, card_order, message_broker):
        event = stripe_event(
            "checkout.session.completed",
            {"id": "cs_test_1", "payment_status": "unpaid", "metadata": {"order_id": str(card_order.id)}},
        )

        response = self.post(api_client, event)

        assert response.status_code == 200
        card_order.refresh_from_db()
        assert card_order.payment_status == Order.PaymentStatus.PENDING
        assert message_broker.sent == []

    def test_async_payment_settles_after_unpaid_completion(self, api_client, card_order, message_broker):
        """
        Scenario:
        - Async payment method: session completes with payment_status "unpaid"
        - async_payment_succeeded follows
        - Expected: order ends PAID with one PAYMENT_STATUS_UPDATE
        """
        session = {"id": "cs_test_1", "metadata": {"order_id": str(card_order.id)}}

        self.post(api_client, stripe_event("checkout.session.completed", {**session, "payment_status": "unpaid"}))
        self.post(api_client, stripe_event("checkout.session.async_payment_succeeded", {**session, "payment_status": "paid"}))

        card_order.refresh_from_db()
        assert card_order.payment_status == Order.PaymentStatus.PAID
        assert len(message_broker.events("PAYMENT_STATUS_UPDATE")) == 1

    def test_async_payment_failure_marks_order_failed(self, api_client, card_order):
        session = {"id": "cs_test_1", "metadata": {"order_id": str(card_order.id)}}

        self.post(api_client, stripe_event("checkout.session.completed", {**session, "payment_status": "unpaid"}))
        self.post(api_client, stripe_event("checkout.session.async_payment_failed", {**session, "payment_status": "unpaid"}))

        card_order.refresh_from_db()
        assert card_order.payment_status == Order.PaymentStatus.FAILED

    def test_unrelated_event_is_acknowledged(self, api_client, card_order, message_broker):
        response = self.post(api_client, stripe_event("customer.created", {"id": "cus_1"}))

        assert response.status_code == 200
        assert message_broker.sent == []

    def test_unknown_order_is_acknowledged(self, api_client):
        event = stripe_event(
            "checkout.session.completed",
            {"id": "cs_test_9", "payment_status": "paid", "metadata": {"order_id": str(uuid.uuid4())}},
        )

        response = self.post(api_client, event)

        assert response.status_code == 200

    def test_session_without_order_id_is_rejected(self, api_client):
        event = stripe_event("checkout.session.completed", {"id": "cs_test_9", "payment_status": "paid"})

        response = self.post(api_client, event)

        assert response.status_code == 400

    def test_invalid_signature_is_rejected(self, api_client, card_order):
        error = stripe.SignatureVerificationError("bad signature", "t=1,v1=bad")
        with patch("payments.views.webhooks.stripe.Webhook.construct_event", side_effect=error):
            response = api_client.post(
                WEBHOOK_URL, data="{}", content_type="application/json", HTTP_STRIPE_SIGNATURE="t=1,v1=bad"
            )

        assert response.status_code == 400
        card_order.refresh_from_db()
        assert card_order.payment_status == Order.PaymentStatus.PENDING
