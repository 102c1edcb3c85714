# services/usage-service/src/apps/core/services/__init__.py
"""
Usage Service - Service Layer

Hour-package ledger computation and the services built on it.
"""

from .exceptions import (
    UsageServiceError,
    UserNotFoundError,
    UsageValidationError,
    UsagePermissionError,
    LedgerStorageError,
)
from .repository import UsageRepository
from .package_service import PackageService
from .usage_service import UsageService, UsageReport
from .settlement_service import SettlementService
from .overview_service import OverviewService

__all__ = [
    'UsageServiceError',
    'UserNotFoundError',
    'UsageValidationError',
    'UsagePermissionError',
    'LedgerStorageError',
    'UsageRepository',
    'PackageService',
    'UsageService',
    'UsageReport',
    'SettlementService',
    'OverviewService',
]
