# services/usage-service/src/apps/core/services/overview_service.py
"""
Overview Service

Usage summary of every client of the school, for managers.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Dict, Any, List, Optional

from django.conf import settings

from .ledger import ZERO
from .package_service import PackageService
from .repository import UsageRepository

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = ('email', 'first_name', 'last_name')


class OverviewService:
    """
    Lightweight per-client totals.

    Unlike the per-user report this does not run the FIFO allocation; it
    adds up purchased hours and aggregated flight hours.
    """

    def __init__(self, repository: Optional[UsageRepository] = None):
        self.repository = repository or UsageRepository()

    def list_clients(
        self,
        search: str = None,
        sort_by: str = 'email',
        sort_order: str = 'asc',
        today: date = None
    ) -> Dict[str, Any]:
        """
        Summaries of all clients matching `search`, sorted.

        A client is any user who flew or paid for a flight, or who owns an
        hour package.

        Returns:
            Dict with `clients` (list of rows) and `aggregate_stats`
        """
        if sort_by not in SORTABLE_FIELDS:
            sort_by = 'email'

        packages_by_user = {
            user_id: packages
            for user_id, packages in PackageService.group_packages_by_user(
                self.repository.get_all_package_invoices()
            ).items()
            if packages
        }

        client_ids = {str(uid) for uid in self.repository.get_flight_participant_ids()}
        client_ids.update(packages_by_user.keys())

        if not client_ids:
            return {'clients': [], 'aggregate_stats': self._aggregate([])}

        users = self.repository.get_users(
            client_ids,
            search=search,
            sort_by=sort_by,
            descending=(sort_order == 'desc')
        )

        flight_aggs = self.repository.get_flight_aggregations(today=today)
        clients = [
            self._client_row(user, packages_by_user.get(str(user.id), []), flight_aggs.get(str(user.id)))
            for user in users
        ]

        logger.info(
            "Usage overview computed",
            extra={'client_count': len(clients), 'search': search or ''}
        )

        return {'clients': clients, 'aggregate_stats': self._aggregate(clients)}

    @staticmethod
    def _client_row(user, packages, agg: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        agg = agg or {}
        currency = packages[0].currency if packages else settings.USAGE_LEDGER['DEFAULT_CURRENCY']

        return {
            'id': str(user.id),
            'email': user.email,
            'firstName': user.first_name,
            'lastName': user.last_name,
            'summary': {
                'totalPurchasedHours': sum((p.total_hours for p in packages), ZERO),
                'totalFlownHours': agg.get('regular_hours', ZERO),
                'totalFerryHours': agg.get('ferry_hours', ZERO),
                'totalCharteredHours': agg.get('chartered_hours', ZERO),
                'totalDemoHours': agg.get('demo_hours', ZERO),
                'packageCount': len(packages),
                'totalValue': sum((p.price or ZERO for p in packages), ZERO),
                'currency': currency,
                'flights12Months': agg.get('flights_12_months', 0),
                'flights90Days': agg.get('flights_90_days', 0),
            },
        }

    @staticmethod
    def _aggregate(clients: List[Dict[str, Any]]) -> Dict[str, Decimal]:
        stats = {
            'totalPurchasedHours': ZERO,
            'totalFlownHours': ZERO,
            'totalFerryHours': ZERO,
            'totalCharteredHours': ZERO,
            'totalDemoHours': ZERO,
        }
        for client in clients:
            for key in stats:
                stats[key] += client['summary'][key]

        stats['totalRemainingHours'] = (
            stats['totalPurchasedHours'] - stats['totalFlownHours'] - stats['totalCharteredHours']
        )
        return stats
