# services/usage-service/src/apps/core/services/usage_service.py
"""
Usage Service

Computes a user's hour-package usage report: packages extracted from
invoices, flights allocated FIFO against them, statuses and statistics.
"""

import uuid
import logging
from decimal import Decimal
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from django.conf import settings
from django.utils import timezone

from ..models import User
from .ledger import FifoAllocator, PackageUsage, apply_statuses, ZERO
from .package_service import PackageService
from .repository import UsageRepository
from .statistics_service import FlightStatistics, compute_statistics, empty_statistics

logger = logging.getLogger(__name__)


@dataclass
class UsageReport:
    """Everything the usage endpoint returns for one user."""
    user: User
    packages: List[PackageUsage] = field(default_factory=list)
    total_purchased_hours: Decimal = ZERO
    total_used_hours: Decimal = ZERO
    total_chartered_hours: Decimal = ZERO
    remaining_hours: Decimal = ZERO
    flight_count: int = 0
    statistics: FlightStatistics = field(default_factory=empty_statistics)


class UsageService:
    """
    Service for a user's hour-package ledger.

    The ledger is recomputed from invoices and flight logs on every call;
    nothing is cached or persisted.
    """

    def __init__(self, repository: Optional[UsageRepository] = None):
        self.repository = repository or UsageRepository()

    def get_user_usage(self, user_id: uuid.UUID, now: Optional[datetime] = None) -> UsageReport:
        """
        Build the usage report for a user.

        Args:
            user_id: Target user
            now: Reference time for expiry checks (defaults to now)

        Returns:
            UsageReport

        Raises:
            UserNotFoundError: Unknown user
            LedgerStorageError: Invoices or flights could not be read
        """
        ledger_settings = settings.USAGE_LEDGER
        user = self.repository.get_user(user_id)

        invoices = self.repository.get_package_invoices(user_id)
        packages = PackageService.extract_packages(invoices, user_id)

        if not packages:
            logger.info(
                "No hour packages for user",
                extra={'user_id': str(user_id), 'invoice_count': len(invoices)}
            )
            return UsageReport(user=user)

        flights = self.repository.get_flights(user_id)

        allocator = FifoAllocator(
            user_id,
            max_allocations_per_package=ledger_settings['MAX_ALLOCATIONS_PER_PACKAGE'],
        )
        usages = allocator.allocate(packages, flights)
        apply_statuses(
            usages,
            now=now or timezone.now(),
            low_hours_threshold=Decimal(ledger_settings['LOW_HOURS_THRESHOLD']),
        )

        total_purchased = sum((u.total_hours for u in usages), ZERO)
        total_used = sum((u.used_hours for u in usages), ZERO)
        total_chartered = sum((u.chartered_hours for u in usages), ZERO)

        report = UsageReport(
            user=user,
            packages=usages,
            total_purchased_hours=total_purchased,
            total_used_hours=total_used,
            total_chartered_hours=total_chartered,
            remaining_hours=total_purchased - total_used - total_chartered,
            flight_count=len(flights),
            statistics=compute_statistics(flights, user_id),
        )

        logger.info(
            "Usage computed",
            extra={
                'user_id': str(user_id),
                'package_count': len(usages),
                'flight_count': len(flights),
                'remaining_hours': float(report.remaining_hours),
            }
        )

        return report
