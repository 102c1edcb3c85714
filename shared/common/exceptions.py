"""
API Exception Classes and the shared DRF Exception Handler
"""

import logging
from typing import Dict, Any, Optional
from rest_framework import status
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework.exceptions import APIException
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DatabaseError
from django.http import Http404

logger = logging.getLogger(__name__)


# =============================================================================
# BASE EXCEPTION
# =============================================================================

class BaseAPIException(APIException):
    """Base class for API exceptions carrying a platform error code"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'An unexpected error occurred.'
    default_code = 'error'
    error_code = 'INTERNAL_ERROR'

    def __init__(
        self,
        detail: Optional[str] = None,
        code: Optional[str] = None,
        error_code: Optional[str] = None,
        extra_data: Optional[Dict] = None
    ):
        super().__init__(detail=detail, code=code)
        self.error_code = error_code or self.error_code
        self.extra_data = extra_data or {}


class BadRequestException(BaseAPIException):
    """400 Bad Request"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Bad request.'
    default_code = 'bad_request'
    error_code = 'BAD_REQUEST'


class ForbiddenException(BaseAPIException):
    """403 Forbidden"""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'forbidden'
    error_code = 'FORBIDDEN'


class NotFoundException(BaseAPIException):
    """404 Not Found"""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'The requested resource was not found.'
    default_code = 'not_found'
    error_code = 'NOT_FOUND'


class InternalServerException(BaseAPIException):
    """500 Internal Server Error"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'An internal server error occurred.'
    default_code = 'internal_server_error'
    error_code = 'INTERNAL_ERROR'


# =============================================================================
# EXCEPTION HANDLER
# =============================================================================

def _error_body(code: str, message: str, request_id: Optional[str], details: Any = None) -> Dict:
    error = {
        'code': code,
        'message': message,
        'request_id': request_id,
    }
    if details:
        error['details'] = details
    return {'success': False, 'error': error}


def custom_exception_handler(exc, context) -> Optional[Response]:
    """
    DRF exception handler producing the platform error envelope.

    Anything DRF does not know about is logged and reported as a generic
    500 so no internal detail (or partial payload) leaks to the caller.
    """
    request = context.get('request')
    request_id = getattr(request, 'request_id', None) if request else None

    response = exception_handler(exc, context)

    if response is not None:
        return format_error_response(exc, response, request_id)

    if isinstance(exc, DjangoValidationError):
        errors = exc.message_dict if hasattr(exc, 'message_dict') else {'detail': exc.messages}
        return Response(
            _error_body('VALIDATION_ERROR', 'Validation error', request_id, errors),
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, Http404):
        return Response(
            _error_body('NOT_FOUND', str(exc) or 'Resource not found', request_id),
            status=status.HTTP_404_NOT_FOUND
        )

    if isinstance(exc, DatabaseError):
        logger.error(
            f"Storage failure: {exc}",
            extra={'request_id': request_id, 'exception_type': type(exc).__name__}
        )
    else:
        logger.exception(
            f"Unhandled exception: {exc}",
            extra={'request_id': request_id, 'exception_type': type(exc).__name__}
        )

    return Response(
        _error_body(
            'INTERNAL_ERROR',
            'An unexpected error occurred. Please try again later.',
            request_id
        ),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def format_error_response(exc, response: Response, request_id: str = None) -> Response:
    """Rewrite a DRF-produced error response into the platform envelope"""

    error_code = getattr(exc, 'error_code', None) or _code_for_status(response.status_code)
    extra_data = getattr(exc, 'extra_data', {})

    details = None
    if extra_data.get('errors'):
        details = extra_data['errors']
    elif isinstance(response.data, dict) and 'detail' not in response.data:
        # Field-level validation errors from DRF serializers
        details = response.data

    response.data = _error_body(error_code, get_error_message(exc, response), request_id, details)
    return response


def get_error_message(exc, response: Response) -> str:
    """Extract a human readable message from an exception or response"""

    detail = getattr(exc, 'detail', None)
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list) and detail:
        return str(detail[0])
    if isinstance(detail, dict):
        if 'detail' in detail:
            return str(detail['detail'])
        return 'Validation error'

    if isinstance(response.data, dict):
        return str(response.data.get('detail', response.data))

    return str(response.data)


def _code_for_status(status_code: int) -> str:
    return {
        status.HTTP_400_BAD_REQUEST: 'VALIDATION_ERROR',
        status.HTTP_401_UNAUTHORIZED: 'UNAUTHORIZED',
        status.HTTP_403_FORBIDDEN: 'FORBIDDEN',
        status.HTTP_404_NOT_FOUND: 'NOT_FOUND',
        status.HTTP_405_METHOD_NOT_ALLOWED: 'METHOD_NOT_ALLOWED',
    }.get(status_code, 'ERROR')
