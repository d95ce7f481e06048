import logging

from .models import Coupon

logger = logging.getLogger(__name__)


class DiscountResolver:
    """
    Resolves a coupon code to a discount percentage for one tenant.

    Never mutates coupon state: there are no usage counters here.
    """

    @staticmethod
    def get_discount_percentage(coupon_code, tenant_id, today=None) -> int:
        """
        Returns the coupon's discount percentage, or 0 when the code is missing,
        unknown for this tenant, or expired before `today`.
        """
        if not coupon_code:
            return 0

        coupon = Coupon.objects.filter(code=coupon_code, tenant_id=tenant_id).first()
        if coupon is None:
            logger.info(f"Coupon {coupon_code!r} not found for tenant {tenant_id}")
            return 0

        if not coupon.is_valid_on(today):
            logger.info(f"Coupon {coupon_code!r} for tenant {tenant_id} expired on {coupon.valid_upto}")
            return 0

        return coupon.discount
