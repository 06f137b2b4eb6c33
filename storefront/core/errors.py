"""
Domain errors raised by the service layer.

Each error carries the HTTP status code and the human readable message that
ends up in the response envelope ``{"success": false, "message": ...}``.
"""
from fastapi import status


class APIError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequestError(APIError):
    status_code = status.HTTP_400_BAD_REQUEST


class UnauthorizedError(APIError):
    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(APIError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(APIError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(APIError):
    status_code = status.HTTP_409_CONFLICT


class PaymentError(APIError):
    status_code = status.HTTP_402_PAYMENT_REQUIRED
