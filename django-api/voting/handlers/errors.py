"""Mapping from domain errors to HTTP responses.

Installed as the REST framework EXCEPTION_HANDLER so views can let domain
errors propagate instead of catching them one by one.
"""

from rest_framework import status
from rest_framework.exceptions import ValidationError as RequestValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from voting.domain.errors import DomainError, ErrorCode

HTTP_STATUS = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_CONTESTANT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.COMPETITION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CONTESTANT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SUBMISSION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.TIER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.COMPETITION_CLOSED: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_TRANSACTION: status.HTTP_409_CONFLICT,
    ErrorCode.ALREADY_APPLIED: status.HTTP_409_CONFLICT,
    ErrorCode.INVALID_STATUS_TRANSITION: status.HTTP_409_CONFLICT,
    ErrorCode.TIER_LOCKED: status.HTTP_409_CONFLICT,
    ErrorCode.TIER_CAPACITY_REACHED: status.HTTP_409_CONFLICT,
    ErrorCode.INTAKE_CLOSED: status.HTTP_409_CONFLICT,
    ErrorCode.PAYMENT_REQUIRED: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCode.PAYMENT_FAILED: status.HTTP_402_PAYMENT_REQUIRED,
    ErrorCode.QUOTA_EXCEEDED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.SETTLEMENT_MISMATCH: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message},
        status=HTTP_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def domain_exception_handler(exc, context):
    if isinstance(exc, DomainError):
        return error_response(exc)

    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, RequestValidationError):
        response.data = {
            "code": ErrorCode.VALIDATION_ERROR.value,
            "message": "Invalid request",
            "errors": response.data,
        }
    return response
