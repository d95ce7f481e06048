from django.db import models


class ProductPricingCache(models.Model):
    """
    Local copy of a catalog product's configurable prices.

    price_configuration layout:
        {
            "Size": {
                "price_type": "base",
                "available_options": {"Small": 400, "Medium": 600}
            },
            "Crust": {
                "price_type": "aditional",
                "available_options": {"Thin": 50, "Thick": 100}
            }
        }

    Prices are whole amounts in the major currency unit (rupees for inr).
    """

    product_id = models.CharField(max_length=64, unique=True)
    tenant_id = models.CharField(max_length=64, db_index=True)
    price_configuration = models.JSONField(default=dict)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Product Pricing Cache"
        verbose_name_plural = "Product Pricing Cache"

    def __str__(self):
        return f"Pricing for product {self.product_id}"


class ToppingPriceCache(models.Model):
    """Local copy of a catalog topping's price."""

    topping_id = models.CharField(max_length=64, unique=True)
    tenant_id = models.CharField(max_length=64, db_index=True)
    price = models.PositiveIntegerField()
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Topping Price Cache"
        verbose_name_plural = "Topping Price Cache"

    def __str__(self):
        return f"Topping {self.topping_id}: {self.price}"
