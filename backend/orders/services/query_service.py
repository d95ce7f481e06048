import logging

from django.core.exceptions import ValidationError as DjangoValidationError

from customers.services import CustomerService
from orders.exceptions import (
    CustomerNotFoundError,
    InvalidProjectionError,
    OrderError,
    OrderNotFoundError,
    OrderPermissionError,
)
from orders.models import Order
from orders.serializers import PROJECTABLE_FIELDS
from users.context import AuthorizationContext

logger = logging.getLogger(__name__)


class OrderQueryService:
    """Role-aware order reads. Results are newest first with the customer joined."""

    @staticmethod
    def _base_queryset():
        return Order.objects.select_related("customer").order_by("-created_at")

    @staticmethod
    def list_orders(context: AuthorizationContext, tenant_id=None):
        """
        Admins see every order, optionally narrowed to one tenant. Managers
        only ever see their own tenant's orders.
        """
        queryset = OrderQueryService._base_queryset()
        if context.is_admin:
            if tenant_id:
                queryset = queryset.filter(tenant_id=str(tenant_id))
            return queryset
        if context.is_manager and context.tenant_id:
            return queryset.filter(tenant_id=context.tenant_id)
        raise OrderPermissionError()

    @staticmethod
    def list_my_orders(context: AuthorizationContext):
        if not context.subject_id:
            raise OrderError("No userId found.")

        customer = CustomerService.get_customer_by_user_id(context.subject_id)
        if customer is None:
            raise CustomerNotFoundError()

        return OrderQueryService._base_queryset().filter(customer=customer)

    @staticmethod
    def validate_fields(fields):
        """Returns the requested field names, rejecting any outside the allow-list."""
        fields = [field for field in (fields or []) if field]
        unknown = set(fields) - set(PROJECTABLE_FIELDS)
        if unknown:
            raise InvalidProjectionError(unknown)
        return fields

    @staticmethod
    def get_order(context: AuthorizationContext, order_id, fields=None):
        """
        Fetches one order visible to the caller.

        Visible to admins, managers of the order's tenant and the customer
        who placed it.
        """
        OrderQueryService.validate_fields(fields)

        try:
            order = OrderQueryService._base_queryset().filter(pk=order_id).first()
        except (ValueError, DjangoValidationError):
            order = None
        if order is None:
            raise OrderNotFoundError(order_id)

        if context.is_admin or context.manages_tenant(order.tenant_id):
            return order
        if context.is_customer and context.subject_id and order.customer.user_id == context.subject_id:
            return order

        logger.info(f"Denied read of order {order_id} to {context.role} {context.subject_id}")
        raise OrderPermissionError()
