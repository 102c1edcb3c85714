# services/usage-service/src/apps/core/services/repository.py
"""
Usage Repository

Storage access for the usage service. Every read the ledger needs goes
through here, so services can be handed a different repository (tests,
batch jobs) without touching the ORM.
"""

import uuid
import logging
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Dict, Any, Iterable, Optional

from django.conf import settings
from django.db import DatabaseError
from django.db.models import Q, F, Sum, Count, Prefetch, Value
from django.db.models.functions import Coalesce, Lower
from django.utils import timezone

from ..models import User, Invoice, InvoiceClient, InvoiceItem, FlightLog, FlightType
from .exceptions import UserNotFoundError, LedgerStorageError
from .ledger import FlightRecord

logger = logging.getLogger(__name__)


class UsageRepository:
    """
    ORM-backed reads for users, hour-package invoices and flight logs.

    Database failures surface as LedgerStorageError; nothing is retried.
    """

    # ==================== USERS ====================

    def get_user(self, user_id: uuid.UUID) -> User:
        try:
            user = User.objects.filter(id=user_id).first()
        except DatabaseError as e:
            logger.error(f"Error fetching user: {e}", extra={'user_id': str(user_id)})
            raise LedgerStorageError('user') from e

        if not user:
            raise UserNotFoundError(user_id)
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        try:
            return User.objects.filter(email__iexact=email).first()
        except DatabaseError as e:
            logger.error(f"Error fetching user by email: {e}")
            raise LedgerStorageError('user') from e

    def get_users(
        self,
        user_ids: Iterable,
        search: str = None,
        sort_by: str = 'email',
        descending: bool = False
    ) -> List[User]:
        """
        Users among `user_ids`, optionally matching `search` (case-insensitive,
        on e-mail or name), ordered case-insensitively by `sort_by`.
        """
        queryset = User.objects.filter(id__in=list(user_ids))

        if search:
            queryset = queryset.filter(
                Q(email__icontains=search) |
                Q(first_name__icontains=search) |
                Q(last_name__icontains=search)
            )

        ordering = Coalesce(Lower(sort_by), Value(''))
        queryset = queryset.order_by(
            ordering.desc() if descending else ordering.asc(),
            'id'
        )

        try:
            return list(queryset)
        except DatabaseError as e:
            logger.error(f"Error fetching users: {e}")
            raise LedgerStorageError('users') from e

    # ==================== INVOICES ====================

    def _package_invoice_queryset(self):
        return Invoice.objects.filter(
            status__in=settings.USAGE_LEDGER['PACKAGE_INVOICE_STATUSES']
        ).prefetch_related(
            Prefetch('clients', queryset=InvoiceClient.objects.order_by('id')),
            Prefetch('items', queryset=InvoiceItem.objects.order_by('line_id')),
        ).order_by('issue_date', 'created_at')

    def get_package_invoices(self, user_id: uuid.UUID) -> List[Invoice]:
        """Paid and imported invoices billed to the user, oldest first."""
        try:
            return list(
                self._package_invoice_queryset().filter(clients__user_id=user_id).distinct()
            )
        except DatabaseError as e:
            logger.error(f"Error fetching invoices: {e}", extra={'user_id': str(user_id)})
            raise LedgerStorageError('invoices') from e

    def get_all_package_invoices(self) -> List[Invoice]:
        """Paid and imported invoices billed to any linked user."""
        try:
            return list(
                self._package_invoice_queryset().filter(clients__user_id__isnull=False).distinct()
            )
        except DatabaseError as e:
            logger.error(f"Error fetching invoices: {e}")
            raise LedgerStorageError('invoices') from e

    # ==================== FLIGHTS ====================

    def get_flights(self, user_id: uuid.UUID) -> List[FlightRecord]:
        """Flights the user piloted or paid for, in chronological order."""
        try:
            rows = list(
                FlightLog.objects.filter(
                    Q(user_id=user_id) | Q(payer_id=user_id)
                ).order_by('date', 'created_at').values(
                    'id', 'user_id', 'instructor_id', 'payer_id',
                    'total_hours', 'date', 'flight_type',
                )
            )
        except DatabaseError as e:
            logger.error(f"Error fetching flights: {e}", extra={'user_id': str(user_id)})
            raise LedgerStorageError('flights') from e

        return [FlightRecord(**row) for row in rows]

    def get_flight_participant_ids(self) -> set:
        """Every user that piloted or paid for at least one flight."""
        try:
            rows = FlightLog.objects.values_list('user_id', 'payer_id')
            ids = set()
            for pilot_id, payer_id in rows:
                if pilot_id:
                    ids.add(pilot_id)
                if payer_id:
                    ids.add(payer_id)
            return ids
        except DatabaseError as e:
            logger.error(f"Error fetching flight participants: {e}")
            raise LedgerStorageError('flights') from e

    def get_flight_aggregations(self, today: date = None) -> Dict[Any, Dict[str, Any]]:
        """
        Per-user flight hour totals for the usage overview.

        Piloted and chartered flights are aggregated separately and merged
        by user id.
        """
        today = today or timezone.now().date()
        year_ago = today - timedelta(days=365)
        quarter_ago = today - timedelta(days=90)
        non_regular = [FlightType.FERRY, FlightType.DEMO, FlightType.CHARTER]

        try:
            piloted = list(
                FlightLog.objects.values('user_id').annotate(
                    regular_hours=Sum('total_hours', filter=~Q(flight_type__in=non_regular)),
                    ferry_hours=Sum('total_hours', filter=Q(flight_type=FlightType.FERRY)),
                    demo_hours=Sum('total_hours', filter=Q(flight_type=FlightType.DEMO)),
                    charter_hours=Sum('total_hours', filter=Q(flight_type=FlightType.CHARTER)),
                    flights_12_months=Count('id', filter=Q(date__gte=year_ago)),
                    flights_90_days=Count('id', filter=Q(date__gte=quarter_ago)),
                ).order_by()
            )
            chartered = list(
                FlightLog.objects.filter(payer_id__isnull=False).exclude(
                    user_id=F('payer_id')
                ).values('payer_id').annotate(
                    chartered_hours=Sum('total_hours'),
                    flights_12_months=Count('id', filter=Q(date__gte=year_ago)),
                    flights_90_days=Count('id', filter=Q(date__gte=quarter_ago)),
                ).order_by()
            )
        except DatabaseError as e:
            logger.error(f"Error fetching flight aggregations: {e}")
            raise LedgerStorageError('flight aggregations') from e

        merged: Dict[Any, Dict[str, Any]] = {}

        def _row(user_id):
            return merged.setdefault(str(user_id), {
                'regular_hours': Decimal('0'),
                'ferry_hours': Decimal('0'),
                'demo_hours': Decimal('0'),
                'charter_hours': Decimal('0'),
                'chartered_hours': Decimal('0'),
                'flights_12_months': 0,
                'flights_90_days': 0,
            })

        for agg in piloted:
            row = _row(agg['user_id'])
            for key in ('regular_hours', 'ferry_hours', 'demo_hours', 'charter_hours'):
                row[key] += agg[key] or Decimal('0')
            row['flights_12_months'] += agg['flights_12_months']
            row['flights_90_days'] += agg['flights_90_days']

        for agg in chartered:
            row = _row(agg['payer_id'])
            row['chartered_hours'] += agg['chartered_hours'] or Decimal('0')
            row['flights_12_months'] += agg['flights_12_months']
            row['flights_90_days'] += agg['flights_90_days']

        return merged
