"""
Read access to the price cache.

Lookups are set-based: one query per collection regardless of cart size.
Ids that are not cached are simply absent from the result.
"""
from typing import Dict, Iterable

from .models import ProductPricingCache, ToppingPriceCache


class PriceCacheLookup:

    @staticmethod
    def get_product_pricing(product_ids: Iterable[str]) -> Dict[str, ProductPricingCache]:
        ids = {str(product_id) for product_id in product_ids}
        if not ids:
            return {}
        return {
            entry.product_id: entry
            for entry in ProductPricingCache.objects.filter(product_id__in=ids)
        }

    @staticmethod
    def get_topping_prices(topping_ids: Iterable[str]) -> Dict[str, int]:
        ids = {str(topping_id) for topping_id in topping_ids}
        if not ids:
            return {}
        return dict(
            ToppingPriceCache.objects.filter(topping_id__in=ids).values_list("topping_id", "price")
        )
