"""
Domain errors raised by the service layer.

Routes translate these into HTTPException with a structured detail payload.
"""
from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class GigzzError(Exception):
    """Base application error."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "server_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(GigzzError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "not_found"


class ForbiddenError(GigzzError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "forbidden"


class ValidationFailedError(GigzzError):
    status_code = status.HTTP_400_BAD_REQUEST
    code = "validation_error"


class ConflictError(GigzzError):
    status_code = status.HTTP_409_CONFLICT
    code = "conflict"


class InsufficientTokensError(GigzzError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
    code = "insufficient_tokens"


class AlreadyPromotedError(ConflictError):
    code = "already_promoted"


class PromotionFailedError(GigzzError):
    code = "promotion_failed"


class PaymentError(GigzzError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "payment_error"


class EmailDeliveryError(GigzzError):
    status_code = status.HTTP_502_BAD_GATEWAY
    code = "email_error"


def to_http_exception(error: GigzzError) -> HTTPException:
    """Convert a domain error into an HTTPException with a structured detail."""
    detail = {"error": error.code, "message": error.message}
    detail.update(error.details)
    return HTTPException(status_code=error.status_code, detail=detail)
