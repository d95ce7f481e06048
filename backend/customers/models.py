"""
Customer models.

Customers are owned by the identity side of the platform; this service keeps
a read model keyed by the external user id (the JWT `sub` claim) so orders
can reference and embed customer data.
"""
from django.db import models
import uuid


class Customer(models.Model):
    """
    Customer profile referenced by orders.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(
        max_length=128,
        unique=True,
        help_text="External user identifier (the authenticated subject)",
    )

    # Personal information
    first_name = models.CharField(max_length=150, blank=True)
    last_name = models.CharField(max_length=150, blank=True)
    email = models.EmailField(blank=True)
    phone_number = models.CharField(max_length=20, blank=True)

    addresses = models.JSONField(
        default=list,
        blank=True,
        help_text="Saved delivery addresses: [{'text': str, 'is_default': bool}]",
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "customers_customer"
        verbose_name = "Customer"
        verbose_name_plural = "Customers"
        indexes = [
            models.Index(fields=["email"], name="customer_email_idx"),
        ]

    def __str__(self):
        return f"Customer {self.id}"

    @property
    def full_name(self):
        """Return customer's full name"""
        return f"{self.first_name} {self.last_name}".strip()
