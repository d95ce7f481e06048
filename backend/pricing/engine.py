"""
Authoritative cart pricing.

Prices come from the local price cache, never from the client, with one
exception: a topping missing from the cache falls back to the price the
client sent. Every topping line records which source priced it so the
fallback stays visible on the order.

Products fail closed: a cart that references a product, dimension or option
the cache does not know is rejected rather than priced from client data.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Tuple

from orders.exceptions import PricingError

from .lookup import PriceCacheLookup

logger = logging.getLogger(__name__)


class PriceTrust:
    CACHED = "CACHED"
    CLIENT = "CLIENT"


@dataclass(frozen=True)
class ToppingPrice:
    topping_id: str
    amount: int
    trust: str = PriceTrust.CACHED


@dataclass(frozen=True)
class ItemPricing:
    product_id: str
    quantity: int
    product_config_total: int
    toppings: Tuple[ToppingPrice, ...] = ()

    @property
    def toppings_total(self) -> int:
        return sum(topping.amount for topping in self.toppings)

    @property
    def unit_total(self) -> int:
        return self.product_config_total + self.toppings_total

    @property
    def line_total(self) -> int:
        return self.quantity * self.unit_total


@dataclass(frozen=True)
class CartPricing:
    items: Tuple[ItemPricing, ...] = field(default_factory=tuple)

    @property
    def total(self) -> int:
        return sum(item.line_total for item in self.items)

    @property
    def client_priced_topping_ids(self) -> List[str]:
        """Topping ids priced from client data, in cart order without duplicates."""
        seen = []
        for item in self.items:
            for topping in item.toppings:
                if topping.trust == PriceTrust.CLIENT and topping.topping_id not in seen:
                    seen.append(topping.topping_id)
        return seen


class PricingEngine:
    """
    Prices a cart against cached catalog data.

    `price_cart` performs the two cache lookups and delegates to
    `compute`, which is pure and can be fed cache entries directly.
    """

    def __init__(self, lookup=None):
        self.lookup = lookup or PriceCacheLookup

    def price_cart(self, cart: Sequence[Mapping]) -> CartPricing:
        product_ids = {str(item["product_id"]) for item in cart}
        topping_ids = {
            str(topping["id"])
            for item in cart
            for topping in item.get("selected_toppings") or []
        }
        product_pricing = self.lookup.get_product_pricing(product_ids)
        topping_prices = self.lookup.get_topping_prices(topping_ids)
        return self.compute(cart, product_pricing, topping_prices)

    @classmethod
    def compute(cls, cart, product_pricing: Mapping, topping_prices: Mapping[str, int]) -> CartPricing:
        items = tuple(
            cls._price_item(item, product_pricing, topping_prices) for item in cart
        )
        pricing = CartPricing(items=items)

        if pricing.client_priced_topping_ids:
            logger.warning(
                f"Priced toppings {pricing.client_priced_topping_ids} from client data: "
                f"not present in the price cache"
            )
        return pricing

    @staticmethod
    def _price_item(item, product_pricing, topping_prices) -> ItemPricing:
        product_id = str(item["product_id"])
        entry = product_pricing.get(product_id)
        if entry is None:
            raise PricingError(product_id)

        configuration = _price_configuration(entry)
        config_total = 0
        for dimension, option in (item.get("price_configuration") or {}).items():
            if dimension not in configuration:
                raise PricingError(product_id, dimension=dimension)
            price = (configuration[dimension].get("available_options") or {}).get(option)
            if price is None:
                raise PricingError(product_id, dimension=dimension, option=option)
            config_total += int(price)

        toppings = []
        for topping in item.get("selected_toppings") or []:
            topping_id = str(topping["id"])
            cached = topping_prices.get(topping_id)
            if cached is not None:
                toppings.append(ToppingPrice(topping_id, int(cached), PriceTrust.CACHED))
            else:
                toppings.append(ToppingPrice(topping_id, int(topping.get("price") or 0), PriceTrust.CLIENT))

        return ItemPricing(
            product_id=product_id,
            quantity=int(item["quantity"]),
            product_config_total=config_total,
            toppings=tuple(toppings),
        )


def _price_configuration(entry) -> Dict:
    # Accepts cache model instances as well as plain mappings
    if isinstance(entry, Mapping):
        return entry.get("price_configuration") or {}
    return entry.price_configuration or {}
