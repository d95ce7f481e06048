"""
Payment views package.

- webhooks.py: Provider webhook handlers
"""

from .webhooks import StripeWebhookView

__all__ = [
    'StripeWebhookView',
]
