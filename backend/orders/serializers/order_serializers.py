from core_backend.base import BaseModelSerializer
from core_backend.base.serializers import FieldsetMixin
from customers.serializers import CustomerSerializer
from orders.models import Order


# Fields a client may ask for through ?fields=. Anything else is rejected.
PROJECTABLE_FIELDS = (
    "id",
    "tenant_id",
    "customer",
    "cart",
    "address",
    "comment",
    "subtotal",
    "discount",
    "taxes",
    "delivery_charges",
    "total",
    "payment_mode",
    "order_status",
    "payment_status",
    "payment_url",
    "created_at",
    "updated_at",
)


class OrderSerializer(FieldsetMixin, BaseModelSerializer):
    """
    Read serializer for orders, with the customer always embedded.

    Also produces the `data` part of lifecycle events, so consumers see the
    same shape as API clients.

    View modes:
    - mine: a customer's own order history (no cart)
    - detail (default): everything
    """

    customer = CustomerSerializer(read_only=True)

    class Meta:
        model = Order
        fields = list(PROJECTABLE_FIELDS)
        read_only_fields = fields
        required_fields = {"id", "customer"}
        fieldsets = {
            "mine": [field for field in PROJECTABLE_FIELDS if field != "cart"],
            "detail": "__all__",
        }



def order_event_data(order):
    """The `data` part of a lifecycle event: the full order with its customer."""
    return OrderSerializer(order, context={"view_mode": "detail"}).data
