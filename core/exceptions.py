from rest_framework.views import exception_handler
from rest_framework import status
from rest_framework.exceptions import ParseError
from core.utils.responses import ErrorResponse
import logging

logger = logging.getLogger(__name__)


def custom_exception_handler(exc, context):
    """
    Custom exception handler for DRF - ensures all errors return JSON in consistent format
    """
    # Domain errors carry their own status and code
    if isinstance(exc, MatkaException):
        logger.info(f"Declined request: {exc.code}: {exc.detail}")
        return ErrorResponse(
            message=str(exc.detail),
            status=exc.status_code,
            code=exc.code,
        )

    # Call REST framework's default exception handler first
    response = exception_handler(exc, context)

    if response is not None:
        if isinstance(exc, ParseError):
            return ErrorResponse(
                message='Invalid JSON format provided. Please check your request body.',
                status=response.status_code,
                errors={'detail': response.data.get('detail', str(exc))}
            )

        if isinstance(response.data, dict):
            # Serializer validation errors carry field lists
            if any(isinstance(v, (list, dict)) for v in response.data.values() if v):
                errors = {}
                message = 'Validation error'

                for key, value in response.data.items():
                    if isinstance(value, list):
                        errors[key] = value
                        if value:
                            message = f"Validation error: {value[0]}"
                    elif isinstance(value, dict):
                        errors[key] = value
                    elif key == 'detail':
                        message = str(value) if value else 'An error occurred'

                return ErrorResponse(message=message, status=response.status_code, errors=errors)

            errors = response.data.copy()
            error_detail = errors.pop('detail', 'An error occurred')
            return ErrorResponse(
                message=str(error_detail) if error_detail else 'An error occurred',
                status=response.status_code,
                errors=errors
            )

        return ErrorResponse(
            message=str(response.data) if response.data else 'An error occurred',
            status=response.status_code,
        )

    # Handle uncaught exceptions
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    request = context.get('request')
    is_staff = bool(request and request.user.is_authenticated and request.user.is_staff)

    return ErrorResponse(
        message='An unexpected error occurred',
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        errors={'detail': str(exc)} if is_staff else {}
    )


class MatkaException(Exception):
    """Base exception for the betting platform"""
    default_detail = 'An error occurred'
    default_code = 'error'
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail=None, code=None):
        self.detail = detail or self.default_detail
        self.code = code or self.default_code
        super().__init__(self.detail)


class NotFoundException(MatkaException):
    default_detail = 'Not found'
    default_code = 'not_found'
    status_code = status.HTTP_404_NOT_FOUND


class StateConflictException(MatkaException):
    default_detail = 'Already processed'
    default_code = 'state_conflict'
    status_code = status.HTTP_409_CONFLICT


class InsufficientFundsException(MatkaException):
    default_detail = 'Insufficient balance'
    default_code = 'insufficient_funds'


class InvalidBetException(MatkaException):
    default_detail = 'Invalid bet'
    default_code = 'invalid_bet'
