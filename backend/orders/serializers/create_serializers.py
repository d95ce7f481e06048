from rest_framework import serializers

from orders.models import Order


class SelectedToppingSerializer(serializers.Serializer):
    id = serializers.CharField()
    name = serializers.CharField(required=False, allow_blank=True)
    price = serializers.IntegerField(min_value=0, default=0, help_text="Used only when the topping is not cached")


class CartItemSerializer(serializers.Serializer):
    """
    One cart line as submitted by the client.

    price_configuration maps a dimension name to the chosen option, e.g.
    {"Size": "Medium", "Crust": "Thin"}.
    """

    product_id = serializers.CharField()
    name = serializers.CharField(required=False, allow_blank=True)
    quantity = serializers.IntegerField(min_value=1)
    price_configuration = serializers.DictField(child=serializers.CharField(), default=dict)
    selected_toppings = SelectedToppingSerializer(many=True, default=list)


class CreateOrderSerializer(serializers.Serializer):
    """
    Validates an order placement request. Prices in the cart are never
    trusted; they are recomputed from the price cache.
    """

    cart = CartItemSerializer(many=True, allow_empty=False)
    coupon_code = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    tenant_id = serializers.CharField()
    payment_mode = serializers.ChoiceField(choices=Order.PaymentMode.choices)
    customer_id = serializers.CharField()
    comment = serializers.CharField(required=False, allow_blank=True, default="")
    address = serializers.CharField()
