from rest_framework import serializers

from core_backend.base import BaseModelSerializer
from .models import Customer


class CustomerSerializer(BaseModelSerializer):
    """
    Customer data embedded in order responses and lifecycle events.
    """

    full_name = serializers.CharField(read_only=True)

    class Meta:
        model = Customer
        fields = [
            "id",
            "user_id",
            "first_name",
            "last_name",
            "full_name",
            "email",
            "phone_number",
            "addresses",
        ]
        read_only_fields = fields
