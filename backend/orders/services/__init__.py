"""
Orders services package.

- OrderCreationService: idempotent order placement (pricing, persistence,
  payment, events)
- OrderStatusService: authorized status transitions
- OrderQueryService: role-aware reads
"""

# Order placement
from .creation_service import OrderCreationService, OrderPlacement

# Status transitions
from .status_service import OrderStatusService

# Reads
from .query_service import OrderQueryService

__all__ = [
    'OrderCreationService',
    'OrderPlacement',
    'OrderStatusService',
    'OrderQueryService',
]
