import uuid

from django.db import models
from django.utils.translation import gettext_lazy as _

from customers.models import Customer


class Order(models.Model):
    """
    A placed order.

    Money fields are whole major currency units and are computed
    server-side at creation; the cart is kept verbatim as submitted.
    """

    class OrderStatus(models.TextChoices):
        RECEIVED = "received", _("Received")
        CONFIRMED = "confirmed", _("Confirmed")
        PREPARED = "prepared", _("Prepared")
        OUT_FOR_DELIVERY = "out_for_delivery", _("Out For Delivery")
        DELIVERED = "delivered", _("Delivered")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        FAILED = "failed", _("Failed")

    class PaymentMode(models.TextChoices):
        CARD = "card", _("Card")
        CASH = "cash", _("Cash")

    # Lifecycle order, earliest first
    STATUS_PROGRESSION = [
        OrderStatus.RECEIVED,
        OrderStatus.CONFIRMED,
        OrderStatus.PREPARED,
        OrderStatus.OUT_FOR_DELIVERY,
        OrderStatus.DELIVERED,
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    tenant_id = models.CharField(max_length=64, db_index=True)
    customer = models.ForeignKey(Customer, on_delete=models.PROTECT, related_name="orders")

    cart = models.JSONField(help_text="Cart items exactly as submitted")
    address = models.TextField()
    comment = models.TextField(blank=True, default="")

    # Amounts
    subtotal = models.PositiveIntegerField(default=0)
    discount = models.PositiveIntegerField(default=0)
    taxes = models.PositiveIntegerField(default=0)
    delivery_charges = models.PositiveIntegerField(default=0)
    total = models.PositiveIntegerField(default=0)

    payment_mode = models.CharField(max_length=10, choices=PaymentMode.choices)
    order_status = models.CharField(max_length=20, choices=OrderStatus.choices, default=OrderStatus.RECEIVED)
    payment_status = models.CharField(max_length=10, choices=PaymentStatus.choices, default=PaymentStatus.PENDING)

    # Payment gateway session
    payment_session_id = models.CharField(max_length=255, blank=True, null=True)
    payment_url = models.URLField(max_length=2048, blank=True, null=True)

    client_priced_topping_ids = models.JSONField(
        default=list,
        blank=True,
        help_text="Toppings priced from client data because the price cache had no entry",
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = _("Order")
        verbose_name_plural = _("Orders")
        indexes = [
            models.Index(fields=["tenant_id", "created_at"], name="order_tenant_created_idx"),
            models.Index(fields=["customer", "created_at"], name="order_customer_created_idx"),
            models.Index(fields=["order_status"], name="order_status_idx"),
        ]

    def __str__(self):
        return f"Order {self.id} ({self.order_status})"

    @classmethod
    def status_rank(cls, status):
        return cls.STATUS_PROGRESSION.index(status)


class IdempotencyRecord(models.Model):
    """
    Maps a client-supplied idempotency token to the order it created.

    The unique key is the only cross-request coordination for order creation.
    """

    key = models.CharField(max_length=255, unique=True)
    order = models.ForeignKey(Order, on_delete=models.PROTECT, related_name="idempotency_records")
    response = models.JSONField(default=dict, help_text="Response snapshot returned to the first request")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Idempotency Record")
        verbose_name_plural = _("Idempotency Records")

    def __str__(self):
        return f"{self.key} -> {self.order_id}"
