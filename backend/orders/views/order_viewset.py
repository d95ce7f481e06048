from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ValidationError
from rest_framework.request import Request
from rest_framework.response import Response
import logging

from orders.models import IdempotencyRecord
from orders.serializers import CreateOrderSerializer, OrderSerializer
from orders.services import OrderCreationService, OrderQueryService
from users.authentication import get_authorization_context

from .status_actions import StatusActionsMixin

logger = logging.getLogger(__name__)

IDEMPOTENCY_HEADER = "Idempotency-Key"
IDEMPOTENCY_KEY_MAX_LENGTH = IdempotencyRecord._meta.get_field("key").max_length


class OrderViewSet(StatusActionsMixin, viewsets.GenericViewSet):
    """
    ViewSet for placing and reading orders.

    - POST   /orders/                      place an order (Idempotency-Key header required)
    - GET    /orders/?tenantId=            list orders (admins, managers)
    - GET    /orders/mine/                 the caller's own orders
    - GET    /orders/<id>/?fields=a,b      one order, optionally projected
    - PATCH  /orders/<id>/change-status/   status transition (StatusActionsMixin)
    """

    serializer_class = OrderSerializer

    def get_serializer_class(self):
        if self.action == "create":
            return CreateOrderSerializer
        return OrderSerializer

    def create(self, request: Request) -> Response:
        idempotency_key = request.headers.get(IDEMPOTENCY_HEADER)
        if not idempotency_key:
            raise ValidationError({"idempotency_key": [f"The {IDEMPOTENCY_HEADER} header is required."]})
        if len(idempotency_key) > IDEMPOTENCY_KEY_MAX_LENGTH:
            raise ValidationError(
                {"idempotency_key": [f"Ensure this value has at most {IDEMPOTENCY_KEY_MAX_LENGTH} characters."]}
            )

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        placement = OrderCreationService().place_order(
            idempotency_key=idempotency_key,
            **serializer.validated_data,
        )
        return Response(
            placement.response,
            status=status.HTTP_200_OK if placement.replayed else status.HTTP_201_CREATED,
        )

    def list(self, request: Request) -> Response:
        queryset = OrderQueryService.list_orders(
            get_authorization_context(request),
            tenant_id=request.query_params.get("tenantId"),
        )
        page = self.paginate_queryset(queryset)
        if page is not None:
            serializer = self.get_serializer(page, many=True)
            return self.get_paginated_response(serializer.data)
        return Response(self.get_serializer(queryset, many=True).data)

    @action(detail=False, methods=["get"], url_path="mine")
    def mine(self, request: Request) -> Response:
        queryset = OrderQueryService.list_my_orders(get_authorization_context(request))
        serializer = OrderSerializer(queryset, many=True, context={"request": request, "view_mode": "mine"})
        return Response(serializer.data)

    def retrieve(self, request: Request, pk=None) -> Response:
        raw_fields = request.query_params.get("fields")
        fields = raw_fields.split(",") if raw_fields else []

        order = OrderQueryService.get_order(get_authorization_context(request), pk, fields)
        serializer = OrderSerializer(
            order,
            context={"request": request, "requested_fields": OrderQueryService.validate_fields(fields)},
        )
        return Response(serializer.data)
