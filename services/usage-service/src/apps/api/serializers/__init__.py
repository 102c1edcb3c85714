# services/usage-service/src/apps/api/serializers/__init__.py
"""
Usage Service API Serializers
"""

from .usage_serializers import (
    UserSummarySerializer,
    FlightAllocationSerializer,
    PackageUsageSerializer,
    UsageReportSerializer,
)

from .ledger_serializers import (
    LedgerEntrySerializer,
    LedgerSummarySerializer,
    SettlementLedgerSerializer,
)

from .overview_serializers import (
    ClientUsageSerializer,
    AggregateStatsSerializer,
    OverviewFilterSerializer,
    HourOrderSerializer,
)

__all__ = [
    'UserSummarySerializer',
    'FlightAllocationSerializer',
    'PackageUsageSerializer',
    'UsageReportSerializer',
    'LedgerEntrySerializer',
    'LedgerSummarySerializer',
    'SettlementLedgerSerializer',
    'ClientUsageSerializer',
    'AggregateStatsSerializer',
    'OverviewFilterSerializer',
    'HourOrderSerializer',
]
