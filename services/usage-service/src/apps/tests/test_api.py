# services/usage-service/src/apps/tests/test_api.py
"""
API Tests

Tests for usage service REST API endpoints.
"""

import uuid
from decimal import Decimal
from unittest.mock import patch, MagicMock

import pytest
from django.db import DatabaseError
from rest_framework import status


# =============================================================================
# Usage API Tests
# =============================================================================

@pytest.mark.django_db
class TestUsageAPI:
    """Tests for GET /api/v1/usage/{user_id}/."""

    def test_owner_gets_usage(self, owner_client, scenario):
        response = owner_client.get(f'/api/v1/usage/{scenario.id}/')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['user'] == {
            'id': str(scenario.id),
            'email': 'ana.pilot@example.com',
            'firstName': 'Ana',
            'lastName': 'Pilot',
        }
        assert body['totalPurchasedHours'] == 15
        assert body['totalUsedHours'] == 11
        assert body['totalCharteredHours'] == 0
        assert body['remainingHours'] == 4
        assert body['flightCount'] == 2

    def test_package_shape(self, owner_client, scenario):
        response = owner_client.get(f'/api/v1/usage/{scenario.id}/')

        first, second = response.json()['packages']
        assert first['usedHours'] == 5
        assert first['remainingHours'] == 0
        assert first['status'] == 'low hours'
        assert first['expiryDate'] is None
        assert first['currency'] == 'RON'
        assert second['usedHours'] == 6
        assert second['remainingHours'] == 4

        allocation = first['allocatedFlights'][1]
        assert set(allocation) == {
            'flightId', 'date', 'hours', 'totalFlightHours', 'flightType', 'role',
        }
        assert allocation['hours'] == 2
        assert allocation['totalFlightHours'] == 8
        assert allocation['role'] == 'PILOT'
        assert first['allocatedCharteredFlights'] == []

    def test_statistics_shape(self, owner_client, scenario):
        response = owner_client.get(f'/api/v1/usage/{scenario.id}/')

        statistics = response.json()['statistics']
        assert statistics['flownHours'] == {'regular': 11, 'regularCount': 2}
        assert statistics['charteredHours'] == {'total': 0, 'count': 0}
        assert statistics['pilotCharterHours'] == {'total': 0, 'count': 0}

    def test_zero_packages(self, owner_client, user, create_flight, base_date):
        create_flight(user.id, base_date, '2')

        response = owner_client.get(f'/api/v1/usage/{user.id}/')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['packages'] == []
        assert body['totalPurchasedHours'] == 0
        assert body['flightCount'] == 0

    def test_manager_reads_any_user(self, client_for, scenario):
        client = client_for(uuid.uuid4(), roles=['BASE_MANAGER'])

        response = client.get(f'/api/v1/usage/{scenario.id}/')

        assert response.status_code == status.HTTP_200_OK

    def test_other_user_forbidden(self, client_for, scenario):
        client = client_for(uuid.uuid4(), roles=['pilot'])

        response = client.get(f'/api/v1/usage/{scenario.id}/')

        assert response.status_code == status.HTTP_403_FORBIDDEN
        body = response.json()
        assert body['success'] is False
        assert body['error']['code'] == 'FORBIDDEN'

    def test_requires_token(self, api_client, scenario):
        response = api_client.get(f'/api/v1/usage/{scenario.id}/')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_rejects_bad_token(self, api_client, scenario):
        api_client.credentials(HTTP_AUTHORIZATION='Bearer not-a-token')

        response = api_client.get(f'/api/v1/usage/{scenario.id}/')

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_upper_case_id_for_manager(self, admin_client, scenario):
        response = admin_client.get(f'/api/v1/usage/{str(scenario.id).upper()}/')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['user']['id'] == str(scenario.id)
        assert body['totalPurchasedHours'] == 15
        assert body['totalUsedHours'] == 11
        assert len(body['packages']) == 2

    def test_upper_case_id_for_owner(self, owner_client, scenario):
        response = owner_client.get(f'/api/v1/usage/{str(scenario.id).upper()}/')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['remainingHours'] == 4

    def test_malformed_id(self, admin_client, db):
        response = admin_client.get(f'/api/v1/usage/{"-" * 36}/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()['error']['code'] == 'USER_NOT_FOUND'

    def test_unknown_user(self, admin_client, db):
        response = admin_client.get(f'/api/v1/usage/{uuid.uuid4()}/')

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()['error']['code'] == 'USER_NOT_FOUND'

    def test_storage_failure_returns_generic_error(self, owner_client, user):
        invoice_model = MagicMock()
        invoice_model.objects.filter.side_effect = DatabaseError('timeout')

        with patch('apps.core.services.repository.Invoice', invoice_model):
            response = owner_client.get(f'/api/v1/usage/{user.id}/')

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        body = response.json()
        assert body['success'] is False
        assert body['error']['code'] == 'INTERNAL_ERROR'
        assert 'packages' not in body


# =============================================================================
# Ledger API Tests
# =============================================================================

@pytest.mark.django_db
class TestLedgerAPI:
    """Tests for GET /api/v1/usage/{user_id}/ledger/."""

    def test_owner_gets_ledger(self, owner_client, scenario):
        response = owner_client.get(f'/api/v1/usage/{scenario.id}/ledger/')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['userId'] == str(scenario.id)
        assert [e['balanceDue'] for e in body['ledgerEntries']] == [5, 2, 12, 4]
        assert body['summary']['finalBalance'] == 4
        assert body['summary']['hoursByType']['school'] == {'hours': 11, 'count': 2}

    def test_entry_fields_by_type(self, owner_client, scenario):
        response = owner_client.get(f'/api/v1/usage/{scenario.id}/ledger/')

        invoice_entry, flight_entry = response.json()['ledgerEntries'][:2]
        assert invoice_entry['eventType'] == 'invoice'
        assert invoice_entry['invoiceAmount'] == 2500
        assert 'flightId' not in invoice_entry
        assert flight_entry['eventType'] == 'flight'
        assert flight_entry['description'] == 'School'
        assert flight_entry['reference'].startswith('F-')
        assert 'invoiceAmount' not in flight_entry

    def test_upper_case_id(self, owner_client, scenario):
        response = owner_client.get(f'/api/v1/usage/{str(scenario.id).upper()}/ledger/')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['userId'] == str(scenario.id)
        assert body['summary']['finalBalance'] == 4

    def test_other_user_forbidden(self, client_for, scenario):
        client = client_for(uuid.uuid4(), roles=['student'])

        response = client.get(f'/api/v1/usage/{scenario.id}/ledger/')

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Overview API Tests
# =============================================================================

@pytest.mark.django_db
class TestOverviewAPI:
    """Tests for GET /api/v1/usage/."""

    @pytest.fixture
    def clients(self, scenario, other_user, create_flight, base_date):
        create_flight(other_user.id, base_date, '1', payer_id=scenario.id)
        return scenario, other_user

    def test_manager_lists_clients(self, admin_client, clients):
        response = admin_client.get('/api/v1/usage/')

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body['success'] is True
        assert body['count'] == 2
        assert [c['email'] for c in body['results']] == [
            'ana.pilot@example.com', 'bogdan.charter@example.com',
        ]
        assert body['results'][0]['summary']['totalPurchasedHours'] == 15
        assert body['results'][0]['summary']['totalCharteredHours'] == 1
        assert body['aggregate_stats']['totalRemainingHours'] == 2

    def test_aggregate_covers_all_pages(self, admin_client, clients):
        response = admin_client.get('/api/v1/usage/', {'page_size': 1})

        body = response.json()
        assert len(body['results']) == 1
        assert body['total_pages'] == 2
        assert body['aggregate_stats']['totalPurchasedHours'] == 15

    def test_search_and_sort(self, admin_client, clients):
        response = admin_client.get(
            '/api/v1/usage/',
            {'search': 'example.com', 'sort_by': 'first_name', 'sort_order': 'desc'}
        )

        assert [c['firstName'] for c in response.json()['results']] == ['Bogdan', 'Ana']

    def test_invalid_sort_field(self, admin_client, clients):
        response = admin_client.get('/api/v1/usage/', {'sort_by': 'password'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error']['code'] == 'VALIDATION_ERROR'

    def test_regular_user_forbidden(self, owner_client, clients):
        response = owner_client.get('/api/v1/usage/')

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# Order API Tests
# =============================================================================

@pytest.mark.django_db
class TestOrderAPI:
    """Tests for POST /api/v1/usage/order/."""

    def test_order_for_self(self, owner_client, user):
        from apps.core.models import Invoice

        response = owner_client.post(
            '/api/v1/usage/order/',
            {'client_email': user.email, 'hours': '10', 'price': '5950.00'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body['success'] is True
        assert body['invoice']['status'] == 'draft'
        assert body['invoice']['smartbill_id'].startswith('ORDER-')
        assert body['hours'] == 10
        assert Invoice.objects.filter(clients__user_id=user.id).count() == 1

    def test_order_for_someone_else_forbidden(self, owner_client, user, other_user):
        response = owner_client.post(
            '/api/v1/usage/order/',
            {'client_email': other_user.email, 'hours': '10', 'price': '5950.00'},
            format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()['error']['code'] == 'USAGE_PERMISSION_DENIED'

    def test_manager_orders_for_client(self, admin_client, user):
        response = admin_client.post(
            '/api/v1/usage/order/',
            {'client_email': user.email, 'hours': '5', 'price': '2500'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert Decimal(str(response.json()['invoice']['total_amount'])) == Decimal('2500')

    def test_prospect_may_order(self, client_for, user):
        client = client_for(user.id, email=user.email, roles=['PROSPECT'])

        response = client.post(
            '/api/v1/usage/order/',
            {'client_email': user.email, 'hours': '1', 'price': '500'},
            format='json'
        )

        assert response.status_code == status.HTTP_201_CREATED

    def test_role_without_ordering_rights(self, client_for, user):
        client = client_for(user.id, email=user.email, roles=['mechanic'])

        response = client.post(
            '/api/v1/usage/order/',
            {'client_email': user.email, 'hours': '1', 'price': '500'},
            format='json'
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_client_email(self, admin_client, db):
        response = admin_client.post(
            '/api/v1/usage/order/',
            {'client_email': 'ghost@example.com', 'hours': '1', 'price': '500'},
            format='json'
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.parametrize('payload', [
        {'hours': '10', 'price': '100'},
        {'client_email': 'ana.pilot@example.com', 'hours': '0', 'price': '100'},
        {'client_email': 'ana.pilot@example.com', 'hours': '10', 'price': '-1'},
    ])
    def test_invalid_payload(self, owner_client, user, payload):
        response = owner_client.post('/api/v1/usage/order/', payload, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()['error']['code'] == 'VALIDATION_ERROR'


# =============================================================================
# Health Tests
# =============================================================================

@pytest.mark.django_db
class TestHealth:

    def test_health(self, api_client):
        response = api_client.get('/health/')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['service'] == 'usage-service'

    def test_ready(self, api_client):
        response = api_client.get('/ready/')

        assert response.status_code == status.HTTP_200_OK
        assert response.json()['checks']['database'] == 'connected'
