from django.core.exceptions import ValidationError
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class Coupon(models.Model):
    """
    A percentage coupon scoped to one tenant.

    The same code may exist under different tenants with different terms.
    """

    # Multi-tenancy
    tenant_id = models.CharField(max_length=64, db_index=True)

    title = models.CharField(max_length=255)
    code = models.CharField(max_length=50, help_text="Code customers enter at checkout (unique per tenant)")
    discount = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(0), MaxValueValidator(100)],
        help_text="Discount percentage applied to the cart total.",
    )
    valid_upto = models.DateField(help_text="Last day (inclusive) on which the coupon is honored.")

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["code"]
        constraints = [
            # Code must be unique per tenant
            models.UniqueConstraint(
                fields=["tenant_id", "code"],
                name="unique_coupon_code_per_tenant",
            ),
        ]
        indexes = [
            models.Index(fields=["tenant_id", "code"], name="coupon_tenant_code_idx"),  # For coupon code lookups
        ]

    def __str__(self):
        return f"{self.code} ({self.discount}% off, tenant {self.tenant_id})"

    def is_valid_on(self, day=None):
        """Checks if the coupon is still valid on the given day (defaults to today)."""
        day = day or timezone.localdate()
        return day <= self.valid_upto

    def clean(self):
        super().clean()
        if self.discount is not None and self.discount > 100:
            raise ValidationError({"discount": "Percentage discount cannot exceed 100%."})
