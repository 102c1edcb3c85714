# services/usage-service/src/apps/core/services/statistics_service.py
"""
Flight statistics for a user's usage report.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Any, Iterable

from ..models import FlightType
from .ledger import FlightRecord, ZERO, _same_user, is_chartered_flight

NON_REGULAR_TYPES = (FlightType.FERRY, FlightType.DEMO, FlightType.CHARTER)


@dataclass
class CategoryTotal:
    total: Decimal = ZERO
    count: int = 0

    def add(self, flight: FlightRecord) -> None:
        self.total += flight.total_hours or ZERO
        self.count += 1


@dataclass
class FlightStatistics:
    """
    Hours and flight counts per category.

    The categories overlap: a CHARTER flight the user piloted counts as
    pilot_charter, and one another pilot flew on the user's account counts
    as chartered, whatever its type.
    """
    regular: CategoryTotal
    chartered: CategoryTotal
    demo: CategoryTotal
    ferry: CategoryTotal
    pilot_charter: CategoryTotal

    def to_dict(self) -> Dict[str, Any]:
        return {
            'flownHours': {
                'regular': self.regular.total,
                'regularCount': self.regular.count,
            },
            'charteredHours': {'total': self.chartered.total, 'count': self.chartered.count},
            'demoHours': {'total': self.demo.total, 'count': self.demo.count},
            'ferryHours': {'total': self.ferry.total, 'count': self.ferry.count},
            'pilotCharterHours': {
                'total': self.pilot_charter.total,
                'count': self.pilot_charter.count,
            },
        }


def empty_statistics() -> FlightStatistics:
    return FlightStatistics(
        regular=CategoryTotal(),
        chartered=CategoryTotal(),
        demo=CategoryTotal(),
        ferry=CategoryTotal(),
        pilot_charter=CategoryTotal(),
    )


def compute_statistics(flights: Iterable[FlightRecord], user_id) -> FlightStatistics:
    """Category totals read straight off the flight list, not the allocations."""
    stats = empty_statistics()

    for flight in flights:
        if is_chartered_flight(flight, user_id):
            stats.chartered.add(flight)

        if not _same_user(flight.user_id, user_id):
            continue

        if flight.flight_type == FlightType.FERRY:
            stats.ferry.add(flight)
        elif flight.flight_type == FlightType.DEMO:
            stats.demo.add(flight)
        elif flight.flight_type == FlightType.CHARTER:
            stats.pilot_charter.add(flight)
        else:
            stats.regular.add(flight)

    return stats
