from django.urls import path

from .views import StripeWebhookView

app_name = "payments"

urlpatterns = [
    # Stripe webhook
    path("webhook/stripe/", StripeWebhookView.as_view(), name="stripe-webhook"),
]
