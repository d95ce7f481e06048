"""
Root conftest.py for all backend tests.

This file makes fixtures available to all test files across all apps.
"""
import uuid
from datetime import timedelta

import pytest
from django.utils import timezone

from messaging import brokers
from payments import gateways
from payments.gateways import PaymentGateway, PaymentGatewayError, PaymentSession


TENANT_A = "tenant-a"
TENANT_B = "tenant-b"


class FakePaymentGateway(PaymentGateway):
    """
    Records create_session calls and answers like a gateway would: the same
    idempotency key always yields the same session.
    """

    def __init__(self):
        self.calls = []
        self.sessions = {}
        self.fail = False

    def create_session(self, amount, order_id, tenant_id, currency, idempotency_key):
        self.calls.append(
            {
                "amount": amount,
                "order_id": order_id,
                "tenant_id": tenant_id,
                "currency": currency,
                "idempotency_key": idempotency_key,
            }
        )
        if self.fail:
            raise PaymentGatewayError("Gateway unavailable")
        if idempotency_key not in self.sessions:
            session_id = f"cs_test_{len(self.sessions) + 1}"
            self.sessions[idempotency_key] = PaymentSession(
                id=session_id,
                payment_url=f"https://checkout.example.com/pay/{session_id}",
            )
        return self.sessions[idempotency_key]


# ============================================================================
# AUTO-USE FIXTURES (Run automatically for every test)
# ============================================================================

@pytest.fixture(autouse=True)
def message_broker(monkeypatch):
    """
    Replace the configured broker with an in-memory one for every test.

    CRITICAL: Tests must never publish to a real broker.
    """
    broker = brokers.InMemoryMessageBroker()
    monkeypatch.setattr(brokers, "_broker", broker)
    return broker


@pytest.fixture(autouse=True)
def payment_gateway(monkeypatch):
    """Replace the configured payment gateway with a recording fake."""
    gateway = FakePaymentGateway()
    monkeypatch.setattr(gateways, "_gateway", gateway)
    return gateway


# ============================================================================
# TENANT / CUSTOMER FIXTURES
# ============================================================================

@pytest.fixture
def tenant_a():
    return TENANT_A


@pytest.fixture
def tenant_b():
    return TENANT_B


@pytest.fixture
def customer(db):
    from customers.models import Customer

    return Customer.objects.create(
        user_id="user-customer-1",
        first_name="Asha",
        last_name="Rao",
        email="asha@example.com",
        addresses=[{"text": "12 MG Road, Bengaluru", "is_default": True}],
    )


@pytest.fixture
def other_customer(db):
    from customers.services import CustomerService

    customer, _ = CustomerService.get_or_create_by_user_id(
        "user-customer-2",
        first_name="Ravi",
        last_name="Kumar",
        email="ravi@example.com",
    )
    return customer


# ============================================================================
# PRICE CACHE / COUPON FIXTURES
# ============================================================================

@pytest.fixture
def pizza_pricing(db, tenant_a):
    """
    Cached pricing for a pizza of tenant A.

    Small costs 200 with a free thin crust, so a single small thin pizza
    prices at exactly 200.
    """
    from pricing.models import ProductPricingCache

    return ProductPricingCache.objects.create(
        product_id="pizza-margherita",
        tenant_id=tenant_a,
        price_configuration={
            "Size": {
                "price_type": "base",
                "available_options": {"Small": 200, "Medium": 300, "Large": 400},
            },
            "Crust": {
                "price_type": "aditional",
                "available_options": {"Thin": 0, "Thick": 50},
            },
        },
    )


@pytest.fixture
def cheese_topping(db, tenant_a):
    from pricing.models import ToppingPriceCache

    return ToppingPriceCache.objects.create(topping_id="topping-cheese", tenant_id=tenant_a, price=50)


@pytest.fixture
def coupon_10(db, tenant_a):
    """A 10% coupon for tenant A, valid for another week."""
    from discounts.models import Coupon

    return Coupon.objects.create(
        tenant_id=tenant_a,
        title="Festive offer",
        code="FEST10",
        discount=10,
        valid_upto=timezone.localdate() + timedelta(days=7),
    )


@pytest.fixture
def simple_cart():
    """One small thin-crust pizza without toppings (prices at 200)."""
    return [
        {
            "product_id": "pizza-margherita",
            "name": "Margherita",
            "quantity": 1,
            "price_configuration": {"Size": "Small", "Crust": "Thin"},
            "selected_toppings": [],
        }
    ]


@pytest.fixture
def order_request(tenant_a, customer, simple_cart, pizza_pricing):
    """Keyword arguments for OrderCreationService.place_order (CASH)."""
    return {
        "cart": simple_cart,
        "tenant_id": tenant_a,
        "customer_id": str(customer.id),
        "payment_mode": "cash",
        "address": "12 MG Road, Bengaluru",
        "comment": "Ring the bell",
        "coupon_code": None,
        "idempotency_key": str(uuid.uuid4()),
    }


@pytest.fixture
def make_order(db, customer, tenant_a, simple_cart):
    """
    Factory for orders persisted directly, bypassing creation.

    Usage:
        order = make_order(tenant_id="tenant-b", order_status="confirmed")
    """
    from orders.models import Order

    def _make_order(**overrides):
        values = {
            "tenant_id": tenant_a,
            "customer": customer,
            "cart": simple_cart,
            "address": "12 MG Road, Bengaluru",
            "subtotal": 200,
            "discount": 0,
            "taxes": 36,
            "delivery_charges": 100,
            "total": 336,
            "payment_mode": Order.PaymentMode.CASH,
        }
        values.update(overrides)
        return Order.objects.create(**values)

    return _make_order


# ============================================================================
# AUTHORIZATION / API CLIENT FIXTURES
# ============================================================================

@pytest.fixture
def make_context():
    from users.context import AuthorizationContext

    def _make_context(role, tenant_id=None, subject_id=None):
        return AuthorizationContext(role=role, tenant_id=tenant_id, subject_id=subject_id)

    return _make_context


def access_token_for(role, tenant_id=None, subject_id="user-staff-1"):
    """Access token shaped like the auth service's: sub, role, tenant claims."""
    from rest_framework_simplejwt.tokens import AccessToken

    token = AccessToken()
    token["sub"] = subject_id
    token["role"] = role
    if tenant_id is not None:
        token["tenant"] = tenant_id
    return str(token)


@pytest.fixture
def api_client():
    """
    Provide DRF API client for API tests.

    Usage:
        def test_my_api(api_client):
            response = api_client.get('/api/orders/')
            assert response.status_code == 401
    """
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def make_client():
    """
    Factory for API clients authenticated with a bearer token.

    Usage:
        client = make_client("manager", tenant_id="tenant-a")
    """
    from rest_framework.test import APIClient

    def _make_client(role, tenant_id=None, subject_id="user-staff-1"):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {access_token_for(role, tenant_id, subject_id)}")
        return client

    return _make_client


@pytest.fixture
def admin_client(make_client):
    return make_client("admin", subject_id="user-admin-1")


@pytest.fixture
def manager_client_a(make_client, tenant_a):
    return make_client("manager", tenant_id=tenant_a, subject_id="user-manager-a")


@pytest.fixture
def manager_client_b(make_client, tenant_b):
    return make_client("manager", tenant_id=tenant_b, subject_id="user-manager-b")


@pytest.fixture
def customer_client(make_client, customer):
    return make_client("customer", subject_id=customer.user_id)
