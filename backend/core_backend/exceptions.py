"""
Domain exceptions for the POS core and the DRF handler that renders them.

Services raise these; views never build error responses for them by hand.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class POSError(Exception):
    """Base exception for POS core errors."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class NotFound(POSError):
    """Raised when a referenced entity id does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity, entity_id, message=None):
        self.entity = entity
        self.entity_id = entity_id
        if message is None:
            message = f"{entity} not found"
        super().__init__(message, details={"id": str(entity_id)})


class ValidationFailure(POSError, ValueError):
    """Raised when input fails structural or semantic checks, before any write."""

    pass


class BusinessRuleConflict(POSError):
    """Raised when a request conflicts with a business rule."""

    status_code = status.HTTP_409_CONFLICT


class OrderStateConflict(BusinessRuleConflict):
    """Raised when an order status transition is not allowed."""

    def __init__(self, order, target_status, message=None):
        self.order = order
        self.target_status = target_status
        if message is None:
            message = f"Cannot transition order from {order.status} to {target_status}."
        super().__init__(
            message,
            details={"order_id": str(order.id), "status": order.status},
        )


class ExternalSyncError(POSError):
    """Raised inside the digital menu synchronizer; never reaches an HTTP caller."""

    pass


def pos_exception_handler(exc, context):
    """
    DRF exception handler that renders POSError subclasses as JSON errors
    and defers everything else to the default handler.
    """
    if isinstance(exc, POSError):
        request = context.get("request")
        if request is not None:
            logger.info(
                f"{exc.__class__.__name__} on {request.method} {request.path}: {exc.message}"
            )
        return Response({"error": exc.message, **exc.details}, status=exc.status_code)

    return exception_handler(exc, context)
