"""
API exception handling.

Domain errors raised by the service layer are translated into DRF responses
here so views stay free of try/except boilerplate. Server-side failures are
logged with context and returned with a generic message only.
"""
import logging

from rest_framework.response import Response
from rest_framework.views import exception_handler

from orders.exceptions import OrderError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    """
    Custom exception handler: DRF's default handling plus OrderError mapping.
    """
    response = exception_handler(exc, context)
    if response is not None:
        return response

    if isinstance(exc, OrderError):
        request = context.get("request")
        if exc.status_code >= 500:
            logger.error(
                f"Order API error: {exc.__class__.__name__}",
                exc_info=exc.__cause__ or exc,
                extra={
                    "path": getattr(request, "path", None),
                    "method": getattr(request, "method", None),
                },
            )
        else:
            logger.info(f"Order request rejected ({exc.status_code}): {exc.message}")
        return Response({"detail": exc.message}, status=exc.status_code)

    return None
