# services/usage-service/src/apps/core/services/ledger.py
"""
Hour Package Ledger

FIFO consumption of purchased hour packages by flights, and package
status classification. Pure computation: no ORM, no I/O. Callers build
the inputs (see UsageRepository) and serialize the outputs.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import List, Optional, Iterable, Any

logger = logging.getLogger(__name__)

ZERO = Decimal('0')


class FlightRole(str, Enum):
    """Role of the ledger owner on a flight."""
    PILOT = 'PILOT'
    INSTRUCTOR = 'INSTRUCTOR'
    PAYER = 'PAYER'


class PackageStatus(str, Enum):
    """Package lifecycle status, derived after allocation."""
    EXPIRED = 'expired'
    OVERDRAWN = 'overdrawn'
    LOW_HOURS = 'low hours'
    IN_PROGRESS = 'in progress'


@dataclass
class HourPackage:
    """A block of purchased hours taken from one invoice line item."""
    id: str
    invoice_id: Optional[str]
    total_hours: Decimal
    purchase_date: date
    price: Decimal
    currency: str
    expiry_date: Optional[date] = None


@dataclass
class FlightRecord:
    """Read-only view of a flight log entry."""
    id: Any
    user_id: Any
    date: date
    total_hours: Optional[Decimal]
    flight_type: Optional[str] = None
    instructor_id: Any = None
    payer_id: Any = None


@dataclass
class FlightAllocation:
    """One deduction of flight hours from one package."""
    flight_id: Any
    date: date
    hours: Decimal
    total_flight_hours: Decimal
    flight_type: Optional[str]
    role: FlightRole


@dataclass
class PackageUsage:
    """A package together with the hours consumed from it."""
    package: HourPackage
    used_hours: Decimal = ZERO
    chartered_hours: Decimal = ZERO
    remaining_hours: Decimal = ZERO
    status: PackageStatus = PackageStatus.IN_PROGRESS
    allocated_flights: List[FlightAllocation] = field(default_factory=list)
    allocated_chartered_flights: List[FlightAllocation] = field(default_factory=list)

    def __post_init__(self):
        self.remaining_hours = self.package.total_hours - (self.used_hours + self.chartered_hours)

    @property
    def total_hours(self) -> Decimal:
        return self.package.total_hours

    @property
    def consumed_hours(self) -> Decimal:
        return self.used_hours + self.chartered_hours

    @property
    def available_hours(self) -> Decimal:
        return self.package.total_hours - self.consumed_hours


def normalize_user_id(value) -> Optional[str]:
    """Canonical text form of a user id: UUIDs compare case-insensitively."""
    if value is None:
        return None
    return str(value).strip().lower()


def _same_user(left, right) -> bool:
    return left is not None and right is not None and normalize_user_id(left) == normalize_user_id(right)


def is_chartered_flight(flight: FlightRecord, user_id) -> bool:
    """The user paid for a flight somebody else piloted."""
    return _same_user(flight.payer_id, user_id) and not _same_user(flight.user_id, user_id)


def is_flown_for_other_payer(flight: FlightRecord, user_id) -> bool:
    """The user piloted a flight billed to somebody else."""
    return (
        _same_user(flight.user_id, user_id)
        and flight.payer_id is not None
        and not _same_user(flight.payer_id, user_id)
    )


def determine_role(flight: FlightRecord, user_id) -> FlightRole:
    """
    Role of `user_id` on `flight`.

    Instructor wins over payer: a user who instructed a flight they also
    chartered is reported as INSTRUCTOR.
    """
    if _same_user(flight.instructor_id, user_id):
        return FlightRole.INSTRUCTOR
    if is_chartered_flight(flight, user_id):
        return FlightRole.PAYER
    return FlightRole.PILOT


def has_billable_hours(flight: FlightRecord) -> bool:
    return flight.total_hours is not None and flight.total_hours > ZERO


def sort_packages(packages: Iterable[HourPackage]) -> List[HourPackage]:
    """Oldest purchase first; packages bought the same day keep their order."""
    return sorted(packages, key=lambda package: package.purchase_date)


def sort_flights(flights: Iterable[FlightRecord]) -> List[FlightRecord]:
    """Chronological order; same-day flights keep their order."""
    return sorted(flights, key=lambda flight: flight.date)


class FifoAllocator:
    """
    Allocates flight hours to hour packages, oldest package first.

    Hours a user flies beyond everything purchased are charged to the most
    recent package, which then shows a negative balance.
    """

    def __init__(self, user_id, max_allocations_per_package: int = 100):
        self.user_id = user_id
        self.max_allocations_per_package = max_allocations_per_package

    def allocate(
        self,
        packages: Iterable[HourPackage],
        flights: Iterable[FlightRecord]
    ) -> List[PackageUsage]:
        """
        Run the allocation pass.

        Both inputs are sorted here, so the result does not depend on the
        order the storage layer returned them in.
        """
        usages = [PackageUsage(package=package) for package in sort_packages(packages)]

        for flight in sort_flights(flights):
            self._allocate_flight(usages, flight)

        for usage in usages:
            usage.remaining_hours = usage.available_hours

        return usages

    def _allocate_flight(self, usages: List[PackageUsage], flight: FlightRecord) -> None:
        # Missing, zero or negative durations are bad records; they must not
        # block the rest of the ledger.
        if not has_billable_hours(flight):
            logger.debug(
                "Skipping flight without billable hours",
                extra={'flight_id': str(flight.id), 'total_hours': str(flight.total_hours)}
            )
            return

        # The payer's packages carry this flight, not the pilot's.
        if is_flown_for_other_payer(flight, self.user_id):
            return

        flight_hours = flight.total_hours
        chartered = is_chartered_flight(flight, self.user_id)
        role = determine_role(flight, self.user_id)
        remaining = flight_hours

        for usage in usages:
            if remaining <= ZERO:
                break

            available = usage.available_hours
            if available <= ZERO:
                continue

            deduction = min(remaining, available)
            remaining -= deduction
            self._charge(usage, flight, deduction, chartered, role)

        if remaining > ZERO and usages:
            self._charge(usages[-1], flight, remaining, chartered, role)

    def _charge(
        self,
        usage: PackageUsage,
        flight: FlightRecord,
        hours: Decimal,
        chartered: bool,
        role: FlightRole
    ) -> None:
        if chartered:
            usage.chartered_hours += hours
            trace = usage.allocated_chartered_flights
        else:
            usage.used_hours += hours
            trace = usage.allocated_flights

        if len(trace) < self.max_allocations_per_package:
            trace.append(FlightAllocation(
                flight_id=flight.id,
                date=flight.date,
                hours=hours,
                total_flight_hours=flight.total_hours,
                flight_type=flight.flight_type,
                role=role,
            ))


def _start_of(day, tzinfo) -> Optional[datetime]:
    if day is None:
        return None
    if isinstance(day, datetime):
        if (day.tzinfo is None) != (tzinfo is None):
            return day.replace(tzinfo=tzinfo)
        return day
    return datetime.combine(day, time.min, tzinfo=tzinfo)


def classify_package_status(
    usage: PackageUsage,
    now: Optional[datetime] = None,
    low_hours_threshold: Decimal = Decimal('5')
) -> PackageStatus:
    """
    Status precedence: expired, overdrawn, low hours, in progress.

    No package carries an expiry date today; the check stays so packages
    with one are reported correctly.
    """
    now = now or datetime.now()
    if not isinstance(now, datetime):
        now = datetime.combine(now, time.min)
    remaining = usage.remaining_hours

    # A package expires once its expiry day has begun.
    expires_at = _start_of(usage.package.expiry_date, now.tzinfo)

    if expires_at is not None and expires_at < now:
        return PackageStatus.EXPIRED
    if remaining < ZERO:
        return PackageStatus.OVERDRAWN
    if remaining < Decimal(low_hours_threshold):
        return PackageStatus.LOW_HOURS
    return PackageStatus.IN_PROGRESS


def apply_statuses(
    usages: Iterable[PackageUsage],
    now: Optional[datetime] = None,
    low_hours_threshold: Decimal = Decimal('5')
) -> None:
    for usage in usages:
        usage.remaining_hours = usage.available_hours
        usage.status = classify_package_status(usage, now, low_hours_threshold)
