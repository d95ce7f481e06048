from celery import shared_task
import logging

from .handlers import handle_product_update, handle_topping_update

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, default_retry_delay=30)
def update_product_pricing(self, message):
    """
    Applies a catalog product update to the price cache.

    Returns:
        dict: Status and the product id
    """
    try:
        entry = handle_product_update(message)
    except (KeyError, TypeError, ValueError) as exc:
        logger.error(f"Discarding malformed product update {message!r}: {exc}")
        return {"status": "failed", "error": str(exc)}
    except Exception as exc:
        logger.error(f"Error caching product pricing {message.get('id')}: {exc}")
        raise self.retry(exc=exc)

    return {"status": "completed", "product_id": entry.product_id}


@shared_task(bind=True, max_retries=3, default_retry_delay=30)
def update_topping_price(self, message):
    """
    Applies a catalog topping update to the price cache.

    Returns:
        dict: Status and the topping id
    """
    try:
        entry = handle_topping_update(message)
    except (KeyError, TypeError, ValueError) as exc:
        logger.error(f"Discarding malformed topping update {message!r}: {exc}")
        return {"status": "failed", "error": str(exc)}
    except Exception as exc:
        logger.error(f"Error caching topping price {message.get('id')}: {exc}")
        raise self.retry(exc=exc)

    return {"status": "completed", "topping_id": entry.topping_id}
