"""
Orders serializers package.
"""

# Read serializers
from .order_serializers import (
    PROJECTABLE_FIELDS,
    OrderSerializer,
    order_event_data,
)

# Request serializers
from .create_serializers import (
    CartItemSerializer,
    CreateOrderSerializer,
    SelectedToppingSerializer,
)
from .status_serializers import UpdateOrderStatusSerializer

__all__ = [
    # Read
    'PROJECTABLE_FIELDS',
    'OrderSerializer',
    'order_event_data',

    # Requests
    'CartItemSerializer',
    'CreateOrderSerializer',
    'SelectedToppingSerializer',
    'UpdateOrderStatusSerializer',
]
