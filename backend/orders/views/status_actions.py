from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response

from orders.serializers import UpdateOrderStatusSerializer
from orders.services import OrderStatusService
from users.authentication import get_authorization_context


class StatusActionsMixin:
    """
    Mixin for order status transition actions

    This mixin provides action methods for OrderViewSet.
    """

    @action(detail=True, methods=["patch"], url_path="change-status")
    def change_status(self, request: Request, pk=None) -> Response:
        """
        Moves the order forward to the requested status.

        Returns {"_id": <order id>}. Admins may move any order, managers only
        their own tenant's orders.
        """
        serializer = UpdateOrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = OrderStatusService().change_status(
            order_id=pk,
            requested_status=serializer.validated_data["status"],
            context=get_authorization_context(request),
        )
        return Response(result)
