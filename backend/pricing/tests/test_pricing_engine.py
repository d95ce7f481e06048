"""
Pricing Engine Tests

Cart totals must come from the price cache, never from the client. These
tests cover the arithmetic, the fail-closed behaviour for unknown products
and options, and the client-price fallback for uncached toppings.

Priority: 1 (Revenue correctness)

Run with: pytest backend/pricing/tests/test_pricing_engine.py -v
"""
import pytest

from orders.exceptions import PricingError
from pricing.engine import PriceTrust, PricingEngine
from pricing.handlers import handle_product_update, handle_topping_update
from pricing.models import ProductPricingCache, ToppingPriceCache


PIZZA = {
    "price_configuration": {
        "Size": {"price_type": "base", "available_options": {"Small": 200, "Large": 400}},
        "Crust": {"price_type": "aditional", "available_options": {"Thin": 0, "Thick": 50}},
    }
}


def cart_item(quantity=1, size="Small", crust="Thin", toppings=None, product_id="pizza"):
    return {
        "product_id": product_id,
        "quantity": quantity,
        "price_configuration": {"Size": size, "Crust": crust},
        "selected_toppings": toppings or [],
    }


# ============================================================================
# PURE COMPUTATION
# ============================================================================

class TestCartArithmetic:
    """Totals are quantity x (configuration price + toppings price), summed."""

    def test_single_item_configuration_price(self):
        pricing = PricingEngine.compute([cart_item()], {"pizza": PIZZA}, {})

        assert pricing.total == 200
        assert pricing.items[0].product_config_total == 200
        assert pricing.items[0].toppings_total == 0

    def test_quantity_multiplies_configuration_and_toppings(self):
        """
        Scenario:
        - 3 x Large Thick (400 + 50) with two cached toppings (30 + 20)
        - Expected: 3 * (450 + 50) = 1500
        """
        toppings = [{"id": "olive", "price": 1}, {"id": "onion", "price": 1}]
        pricing = PricingEngine.compute(
            [cart_item(quantity=3, size="Large", crust="Thick", toppings=toppings)],
            {"pizza": PIZZA},
            {"olive": 30, "onion": 20},
        )

        assert pricing.items[0].unit_total == 500
        assert pricing.items[0].line_total == 1500
        assert pricing.total == 1500

    def test_multiple_items_are_summed(self):
        cart = [cart_item(quantity=2), cart_item(size="Large", crust="Thick")]

        pricing = PricingEngine.compute(cart, {"pizza": PIZZA}, {})

        assert pricing.total == 2 * 200 + 450

    def test_cached_topping_price_overrides_client_price(self):
        """
        CRITICAL: A client cannot lower a cached topping's price.
        """
        pricing = PricingEngine.compute(
            [cart_item(toppings=[{"id": "cheese", "price": 1}])],
            {"pizza": PIZZA},
            {"cheese": 50},
        )

        topping = pricing.items[0].toppings[0]
        assert topping.amount == 50
        assert topping.trust == PriceTrust.CACHED
        assert pricing.total == 250
        assert pricing.client_priced_topping_ids == []

    def test_uncached_topping_falls_back_to_client_price(self):
        """
        Scenario:
        - Topping missing from the cache, client says 40
        - Expected: priced at 40, marked CLIENT, reported for audit
        """
        pricing = PricingEngine.compute(
            [cart_item(toppings=[{"id": "jalapeno", "price": 40}])],
            {"pizza": PIZZA},
            {},
        )

        topping = pricing.items[0].toppings[0]
        assert topping.amount == 40
        assert topping.trust == PriceTrust.CLIENT
        assert pricing.total == 240
        assert pricing.client_priced_topping_ids == ["jalapeno"]

    def test_client_priced_topping_ids_are_unique(self):
        cart = [
            cart_item(toppings=[{"id": "jalapeno", "price": 40}]),
            cart_item(toppings=[{"id": "jalapeno", "price": 40}]),
        ]

        pricing = PricingEngine.compute(cart, {"pizza": PIZZA}, {})

        assert pricing.client_priced_topping_ids == ["jalapeno"]

    def test_compute_is_deterministic(self):
        cart = [cart_item(quantity=2, toppings=[{"id": "cheese", "price": 5}])]

        first = PricingEngine.compute(cart, {"pizza": PIZZA}, {"cheese": 50})
        second = PricingEngine.compute(cart, {"pizza": PIZZA}, {"cheese": 50})

        assert first == second


class TestFailClosed:
    """Unknown products, dimensions and options reject the cart."""

    def test_unknown_product_raises(self):
        with pytest.raises(PricingError) as exc_info:
            PricingEngine.compute([cart_item(product_id="calzone")], {"pizza": PIZZA}, {})

        assert exc_info.value.product_id == "calzone"
        assert "calzone" in exc_info.value.message

    def test_unknown_dimension_raises(self):
        item = cart_item()
        item["price_configuration"]["Sauce"] = "Pesto"

        with pytest.raises(PricingError) as exc_info:
            PricingEngine.compute([item], {"pizza": PIZZA}, {})

        assert exc_info.value.dimension == "Sauce"

    def test_unknown_option_raises(self):
        with pytest.raises(PricingError) as exc_info:
            PricingEngine.compute([cart_item(size="Family")], {"pizza": PIZZA}, {})

        assert exc_info.value.dimension == "Size"
        assert exc_info.value.option == "Family"

    def test_pricing_error_maps_to_bad_request(self):
        assert PricingError("pizza").status_code == 400


# ============================================================================
# CACHE-BACKED PRICING
# ============================================================================

@pytest.mark.django_db
class TestPriceCart:
    """price_cart reads the cache tables."""

    def test_prices_cart_from_cache_tables(self, pizza_pricing, cheese_topping):
        cart = [
            {
                "product_id": pizza_pricing.product_id,
                "quantity": 2,
                "price_configuration": {"Size": "Medium", "Crust": "Thick"},
                "selected_toppings": [{"id": cheese_topping.topping_id, "price": 0}],
            }
        ]

        pricing = PricingEngine().price_cart(cart)

        assert pricing.total == 2 * (300 + 50 + 50)

    def test_missing_cache_entry_fails_closed(self, db):
        with pytest.raises(PricingError):
            PricingEngine().price_cart([cart_item(product_id="not-cached")])


@pytest.mark.django_db
class TestPriceCacheHandlers:
    """Catalog updates upsert the cache."""

    def test_product_update_creates_then_refreshes(self, tenant_a):
        handle_product_update({"id": "pizza-1", "tenant_id": tenant_a, "price_configuration": PIZZA["price_configuration"]})
        handle_product_update(
            {
                "id": "pizza-1",
                "tenant_id": tenant_a,
                "price_configuration": {
                    "Size": {"price_type": "base", "available_options": {"Small": 250}},
                },
            }
        )

        assert ProductPricingCache.objects.filter(product_id="pizza-1").count() == 1
        entry = ProductPricingCache.objects.get(product_id="pizza-1")
        assert entry.price_configuration == {
            "Size": {"price_type": "base", "available_options": {"Small": 250}},
        }

    def test_topping_update_upserts_price(self, tenant_a):
        handle_topping_update({"id": "olive", "tenant_id": tenant_a, "price": 30})
        handle_topping_update({"id": "olive", "tenant_id": tenant_a, "price": 35})

        assert ToppingPriceCache.objects.get(topping_id="olive").price == 35
        assert ToppingPriceCache.objects.count() == 1
