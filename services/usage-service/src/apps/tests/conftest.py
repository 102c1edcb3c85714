# services/usage-service/src/apps/tests/conftest.py
"""
Pytest Configuration and Fixtures

Shared fixtures for usage service tests.
"""

import uuid
from datetime import date, timedelta
from decimal import Decimal

import pytest


# =============================================================================
# UUID Fixtures
# =============================================================================

@pytest.fixture
def user_id():
    """Generate user ID."""
    return uuid.uuid4()


@pytest.fixture
def other_user_id():
    """Generate a second user ID."""
    return uuid.uuid4()


@pytest.fixture
def instructor_id():
    """Generate instructor ID."""
    return uuid.uuid4()


@pytest.fixture
def base_date():
    """First day of the scenarios."""
    return date(2024, 3, 1)


# =============================================================================
# Database Fixtures
# =============================================================================

@pytest.fixture
def user(db, user_id):
    """Create the ledger owner."""
    from apps.core.models import User
    return User.objects.create(
        id=user_id,
        email='ana.pilot@example.com',
        first_name='Ana',
        last_name='Pilot',
    )


@pytest.fixture
def other_user(db, other_user_id):
    """Create a second user."""
    from apps.core.models import User
    return User.objects.create(
        id=other_user_id,
        email='bogdan.charter@example.com',
        first_name='Bogdan',
        last_name='Charter',
    )


@pytest.fixture
def create_invoice(db):
    """
    Factory fixture for invoices billed to a user.

    `items` is a list of (quantity, unit, total_amount) tuples.
    """
    from apps.core.models import Invoice, InvoiceClient, InvoiceItem, InvoiceStatus

    counter = {'n': 0}

    def _create_invoice(
        user_id,
        issue_date,
        items=((Decimal('10'), 'HUR', Decimal('5000.00')),),
        status=InvoiceStatus.PAID,
        currency='RON',
        smartbill_id=None,
    ):
        counter['n'] += 1
        invoice = Invoice.objects.create(
            smartbill_id=smartbill_id or f"SB-{counter['n']:04d}",
            series='FCT',
            number=str(counter['n']),
            issue_date=issue_date,
            status=status,
            total_amount=sum((total for _, _, total in items), Decimal('0')),
            currency=currency,
        )
        InvoiceClient.objects.create(
            invoice=invoice,
            user_id=user_id,
            name='Client',
        )
        for line_id, (quantity, unit, total) in enumerate(items, start=1):
            InvoiceItem.objects.create(
                invoice=invoice,
                line_id=line_id,
                name=f'{quantity} hours',
                quantity=Decimal(quantity),
                unit=unit,
                total_amount=total,
            )
        return invoice

    return _create_invoice


@pytest.fixture
def create_flight(db):
    """Factory fixture for flight log entries."""
    from apps.core.models import FlightLog, FlightType

    def _create_flight(
        pilot_id,
        flight_date,
        hours,
        flight_type=FlightType.SCHOOL,
        payer_id=None,
        instructor_id=None,
    ):
        return FlightLog.objects.create(
            user_id=pilot_id,
            date=flight_date,
            total_hours=Decimal(hours) if hours is not None else None,
            flight_type=flight_type,
            payer_id=payer_id,
            instructor_id=instructor_id,
        )

    return _create_flight


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def usage_service():
    """Get a UsageService backed by the ORM."""
    from apps.core.services import UsageService
    return UsageService()


@pytest.fixture
def settlement_service():
    """Get a SettlementService backed by the ORM."""
    from apps.core.services import SettlementService
    return SettlementService()


@pytest.fixture
def overview_service():
    """Get an OverviewService backed by the ORM."""
    from apps.core.services import OverviewService
    return OverviewService()


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_client():
    """Get Django REST framework API client."""
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def client_for():
    """Factory fixture for API clients carrying a signed access token."""
    from rest_framework.test import APIClient
    from shared.common.authentication import JWTTokenGenerator

    def _client_for(user_id, email='someone@example.com', roles=('pilot',)):
        client = APIClient()
        token = JWTTokenGenerator.generate_access_token(
            user_id=user_id,
            email=email,
            roles=list(roles),
        )
        client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        return client

    return _client_for


@pytest.fixture
def owner_client(client_for, user):
    """API client authenticated as the ledger owner."""
    return client_for(user.id, email=user.email, roles=['student'])


@pytest.fixture
def admin_client(client_for):
    """API client authenticated as an admin."""
    return client_for(uuid.uuid4(), email='admin@example.com', roles=['ADMIN'])


# =============================================================================
# Helper Fixtures
# =============================================================================

@pytest.fixture
def scenario(user, create_invoice, create_flight, base_date):
    """
    Two packages (5h, then 10h) and two flights that spill from the first
    package into the second.
    """
    create_invoice(
        user.id,
        base_date,
        items=[(Decimal('5'), 'HUR', Decimal('2500.00'))],
    )
    create_invoice(
        user.id,
        base_date + timedelta(days=4),
        items=[(Decimal('10'), 'HUR', Decimal('4800.00'))],
    )
    create_flight(user.id, base_date + timedelta(days=1), '3')
    create_flight(user.id, base_date + timedelta(days=5), '8')
    return user
