# Shared Common Library for the Flight School Platform
# Authentication, permissions, error envelope, pagination and middleware
# used by the platform's Django services.

__version__ = "1.0.0"

from .exceptions import (
    BaseAPIException,
    BadRequestException,
    ForbiddenException,
    NotFoundException,
    InternalServerException,
    custom_exception_handler,
)

__all__ = [
    '__version__',
    'BaseAPIException',
    'BadRequestException',
    'ForbiddenException',
    'NotFoundException',
    'InternalServerException',
    'custom_exception_handler',
]
