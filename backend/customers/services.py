"""
Customer services.
"""
import logging

from django.core.exceptions import ValidationError

from .models import Customer

logger = logging.getLogger(__name__)


class CustomerService:
    """
    Lookups used by order orchestration.

    Both lookups return None for unknown customers; callers decide whether a
    missing customer is an error in their context.
    """

    @staticmethod
    def get_customer(customer_id):
        try:
            return Customer.objects.filter(id=customer_id).first()
        except (ValueError, ValidationError):
            # Malformed UUIDs are simply unknown customers
            logger.info(f"Rejected malformed customer id {customer_id!r}")
            return None

    @staticmethod
    def get_customer_by_user_id(user_id):
        if not user_id:
            return None
        return Customer.objects.filter(user_id=user_id).first()

    @staticmethod
    def get_or_create_by_user_id(user_id, **profile):
        """
        Returns (customer, created) for an external user id.

        `profile` fills name/contact fields only when the customer is created;
        an existing customer is returned unchanged.
        """
        customer, created = Customer.objects.get_or_create(user_id=str(user_id), defaults=profile)
        if created:
            logger.info(f"Created customer {customer.id} for user {user_id}")
        return customer, created
