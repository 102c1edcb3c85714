# services/usage-service/src/apps/core/services/settlement_service.py
"""
Settlement Service

Chronological statement of a user's hour account: hours added by invoices,
hours deducted by flights, and the running balance.
"""

import uuid
import logging
from decimal import Decimal
from typing import Dict, Any, List, Optional

from ..models import FlightType
from .ledger import (
    FlightRecord,
    FlightRole,
    ZERO,
    _same_user,
    determine_role,
    is_flown_for_other_payer,
    normalize_user_id,
)
from .package_service import PackageService
from .repository import UsageRepository

logger = logging.getLogger(__name__)

FLIGHT_TYPE_LABELS = {
    FlightType.FERRY: 'Ferry',
    FlightType.DEMO: 'Demo',
    FlightType.CHARTER: 'Charter',
    FlightType.SCHOOL: 'School',
    FlightType.INVOICED: 'Invoiced',
    FlightType.PROMO: 'Promo',
}

NON_DEDUCTIBLE_TYPES = (FlightType.FERRY, FlightType.DEMO)

# Invoices sort ahead of flights logged on the same day.
EVENT_ORDER = {'invoice': 0, 'flight': 1}


def flight_type_label(flight_type: Optional[str]) -> str:
    if not flight_type:
        return FLIGHT_TYPE_LABELS[FlightType.SCHOOL]
    return FLIGHT_TYPE_LABELS.get(flight_type, flight_type)


def deducted_hours(flight: FlightRecord, user_id, role: FlightRole) -> Decimal:
    """
    Hours a flight takes off the user's balance.

    Only flights the user pays for count: the payer is `payer_id`, or the
    pilot when nobody else is billed. Instructing, ferry and demo flights
    are free, as is flying a charter someone else pays for.
    """
    payer = flight.payer_id or flight.user_id

    if (
        _same_user(payer, user_id)
        and role != FlightRole.INSTRUCTOR
        and flight.flight_type not in NON_DEDUCTIBLE_TYPES
        and not is_flown_for_other_payer(flight, user_id)
    ):
        return flight.total_hours or ZERO
    return ZERO


class SettlementService:
    """Service for the settlement ledger."""

    def __init__(self, repository: Optional[UsageRepository] = None):
        self.repository = repository or UsageRepository()

    def get_ledger(self, user_id: uuid.UUID) -> Dict[str, Any]:
        """
        Build the settlement ledger for a user.

        Raises:
            UserNotFoundError: Unknown user
            LedgerStorageError: Invoices or flights could not be read
        """
        self.repository.get_user(user_id)

        invoices = self.repository.get_package_invoices(user_id)
        flights = self.repository.get_flights(user_id)

        entries = self._invoice_entries(invoices, user_id) + self._flight_entries(flights, user_id)
        entries.sort(key=lambda entry: (entry['date'], EVENT_ORDER[entry['eventType']]))

        balance = ZERO
        for entry in entries:
            balance += entry['hoursAdded'] - entry['hoursDeducted']
            entry['balanceDue'] = balance

        invoice_count = sum(1 for e in entries if e['eventType'] == 'invoice')

        logger.info(
            "Settlement ledger computed",
            extra={'user_id': str(user_id), 'entry_count': len(entries)}
        )

        return {
            'userId': normalize_user_id(user_id),
            'ledgerEntries': entries,
            'summary': {
                'totalHoursAdded': sum((e['hoursAdded'] for e in entries), ZERO),
                'totalHoursDeducted': sum((e['hoursDeducted'] for e in entries), ZERO),
                'finalBalance': balance,
                'entryCount': len(entries),
                'invoiceCount': invoice_count,
                'flightCount': len(entries) - invoice_count,
                'hoursByType': self._hours_by_type(flights, user_id),
            },
        }

    def _invoice_entries(self, invoices, user_id) -> List[Dict[str, Any]]:
        entries = []
        for invoice in invoices:
            if not _same_user(PackageService.billed_user_id(invoice), user_id):
                continue

            for item in invoice.items.all():
                if not item.is_hour_item:
                    continue

                quantity = item.quantity.normalize()
                description = f"Invoice ({quantity:f}h package)"
                if item.name:
                    description += f" - {item.name}"

                entries.append({
                    'date': invoice.issue_date,
                    'eventType': 'invoice',
                    'reference': invoice.reference,
                    'description': description,
                    'hoursAdded': item.quantity,
                    'hoursDeducted': ZERO,
                    'balanceDue': ZERO,
                    'invoiceAmount': item.total_amount,
                    'currency': invoice.effective_currency,
                })
        return entries

    def _flight_entries(self, flights: List[FlightRecord], user_id) -> List[Dict[str, Any]]:
        entries = []
        for flight in flights:
            role = determine_role(flight, user_id)
            entries.append({
                'date': flight.date,
                'eventType': 'flight',
                'reference': f"F-{str(flight.id)[:8]}",
                'description': flight_type_label(flight.flight_type),
                'hoursAdded': ZERO,
                'hoursDeducted': deducted_hours(flight, user_id, role),
                'balanceDue': ZERO,
                'flightType': flight.flight_type,
                'role': role.value,
                'flightId': str(flight.id),
            })
        return entries

    @staticmethod
    def _hours_by_type(flights: List[FlightRecord], user_id) -> Dict[str, Dict[str, Any]]:
        buckets = {
            FlightType.INVOICED: 'invoiced',
            FlightType.SCHOOL: 'school',
            FlightType.CHARTER: 'charter',
            FlightType.DEMO: 'demo',
            FlightType.FERRY: 'ferry',
        }
        totals = {name: {'hours': ZERO, 'count': 0} for name in buckets.values()}

        for flight in flights:
            name = buckets.get(flight.flight_type)
            if name is None:
                continue
            if not (_same_user(flight.user_id, user_id) or _same_user(flight.payer_id, user_id)):
                continue
            totals[name]['hours'] += flight.total_hours or ZERO
            totals[name]['count'] += 1

        return totals
