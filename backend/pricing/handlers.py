"""
Price cache population.

Catalog services publish product and topping updates; these handlers keep
the local cache in step. Each message is an upsert keyed by the catalog id,
so redelivered or out-of-band replays are harmless.
"""
import logging

from .models import ProductPricingCache, ToppingPriceCache

logger = logging.getLogger(__name__)


def handle_product_update(message):
    """
    Upserts a product's price configuration.

    Expected message: {"id": str, "tenant_id": str, "price_configuration": {...}}
    """
    product_id = str(message["id"])
    entry, created = ProductPricingCache.objects.update_or_create(
        product_id=product_id,
        defaults={
            "tenant_id": str(message["tenant_id"]),
            "price_configuration": message.get("price_configuration") or {},
        },
    )
    logger.info(f"{'Cached' if created else 'Refreshed'} pricing for product {product_id}")
    return entry


def handle_topping_update(message):
    """
    Upserts a topping's price.

    Expected message: {"id": str, "tenant_id": str, "price": int}
    """
    topping_id = str(message["id"])
    entry, created = ToppingPriceCache.objects.update_or_create(
        topping_id=topping_id,
        defaults={
            "tenant_id": str(message["tenant_id"]),
            "price": int(message["price"]),
        },
    )
    logger.info(f"{'Cached' if created else 'Refreshed'} price for topping {topping_id}")
    return entry
