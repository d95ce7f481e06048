"""
URL configuration for core_backend project.
"""

from django.http import JsonResponse
from django.urls import path, include


def health_check(request):
    """Simple health check endpoint that doesn't require authentication"""
    return JsonResponse({"status": "ok", "message": "Backend is running"})


urlpatterns = [
    path("api/health/", health_check, name="health_check"),
    # The orders app registers its base endpoint as 'orders'
    path("api/", include("orders.urls")),  # /api/orders/
    path("api/payments/", include("payments.urls")),
]
