from rest_framework import serializers


class UpdateOrderStatusSerializer(serializers.Serializer):
    """
    Serializer for a requested status change.

    The value is validated against the status progression by the status
    service, which needs the order's current status to do so.
    """

    status = serializers.CharField()
