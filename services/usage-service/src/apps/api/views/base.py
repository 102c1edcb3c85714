# services/usage-service/src/apps/api/views/base.py
"""
Base Views and Mixins

Common functionality for Usage Service API views.
"""

import logging
import uuid

from rest_framework.viewsets import ViewSet

from shared.common.exceptions import (
    BadRequestException,
    ForbiddenException,
    NotFoundException,
    InternalServerException,
)
from apps.core.services.exceptions import (
    UsageServiceError,
    UserNotFoundError,
    UsageValidationError,
    UsagePermissionError,
    LedgerStorageError,
)
from apps.core.services.repository import UsageRepository

logger = logging.getLogger(__name__)


class ExceptionHandlerMixin:
    """
    Mixin for handling service layer exceptions.

    Service errors are turned into API exceptions so they leave through the
    shared exception handler with the usual error envelope.
    """

    def handle_exception(self, exc):
        if isinstance(exc, UsageServiceError):
            exc = self.to_api_exception(exc)
        return super().handle_exception(exc)

    @staticmethod
    def to_api_exception(exc: UsageServiceError):
        if isinstance(exc, UserNotFoundError):
            return NotFoundException(detail=exc.message, error_code=exc.code)

        if isinstance(exc, UsageValidationError):
            return BadRequestException(
                detail=exc.message,
                error_code=exc.code,
                extra_data={'errors': exc.details}
            )

        if isinstance(exc, UsagePermissionError):
            return ForbiddenException(detail=exc.message, error_code=exc.code)

        if isinstance(exc, LedgerStorageError):
            logger.error(f"Ledger storage failure: {exc.message}", extra=exc.details)
            return InternalServerException()

        return BadRequestException(detail=exc.message, error_code=exc.code)


class BaseUsageViewSet(ExceptionHandlerMixin, ViewSet):
    """
    Base ViewSet for Usage Service.

    Services are built per request around `repository_class`.
    """

    repository_class = UsageRepository

    def get_repository(self) -> UsageRepository:
        return self.repository_class()

    def get_target_user_id(self) -> uuid.UUID:
        """Parse the `user_id` URL kwarg; any spelling of a UUID names the same user."""
        raw = self.kwargs.get(self.lookup_field)
        try:
            return uuid.UUID(str(raw))
        except ValueError:
            raise UserNotFoundError(raw)
