# services/usage-service/src/apps/api/views/usage_views.py
"""
Usage Views

REST API views for hour-package usage, the settlement ledger, the client
overview and hour-package orders.
"""

import logging

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.response import Response

from shared.common.pagination import StandardPagination
from shared.common.permissions import (
    CanOrderHours,
    IsTargetUserOrUsageManager,
    IsUsageManager,
    get_elevated_roles,
)
from apps.core.services import (
    UsageService,
    SettlementService,
    OverviewService,
    PackageService,
)
from apps.core.services.exceptions import UsagePermissionError, UserNotFoundError
from apps.api.serializers import (
    UsageReportSerializer,
    SettlementLedgerSerializer,
    ClientUsageSerializer,
    AggregateStatsSerializer,
    OverviewFilterSerializer,
    HourOrderSerializer,
)
from .base import BaseUsageViewSet

logger = logging.getLogger(__name__)


class UsageViewSet(BaseUsageViewSet):
    """
    ViewSet for hour-package usage.

    Users see their own ledger; managers see everybody's.
    """

    lookup_field = 'user_id'
    lookup_value_regex = '[0-9a-fA-F-]{36}'
    pagination_class = StandardPagination

    def get_permissions(self):
        if self.action == 'list':
            permission_classes = [IsUsageManager]
        elif self.action == 'order':
            permission_classes = [CanOrderHours]
        else:
            permission_classes = [IsTargetUserOrUsageManager]
        return [permission() for permission in permission_classes]

    # ==========================================================================
    # Overview
    # ==========================================================================

    def list(self, request):
        """
        Usage summary of every client.

        GET /api/v1/usage/?search=&sort_by=email&sort_order=asc&page=1
        """
        filters = OverviewFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)

        overview = OverviewService(self.get_repository()).list_clients(
            search=filters.validated_data.get('search'),
            sort_by=filters.validated_data['sort_by'],
            sort_order=filters.validated_data['sort_order'],
        )

        paginator = self.pagination_class()
        paginator.extra_fields['aggregate_stats'] = AggregateStatsSerializer(
            overview['aggregate_stats']
        ).data

        page = paginator.paginate_queryset(overview['clients'], request, view=self)
        serializer = ClientUsageSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    # ==========================================================================
    # Per-user usage
    # ==========================================================================

    def retrieve(self, request, user_id=None):
        """
        Hour packages of a user, with flights allocated oldest package first.

        GET /api/v1/usage/{user_id}/
        """
        report = UsageService(self.get_repository()).get_user_usage(self.get_target_user_id())

        serializer = UsageReportSerializer(report)
        return Response(serializer.data)

    @action(detail=True, methods=['get'])
    def ledger(self, request, user_id=None):
        """
        Chronological settlement ledger of a user.

        GET /api/v1/usage/{user_id}/ledger/
        """
        ledger = SettlementService(self.get_repository()).get_ledger(self.get_target_user_id())

        serializer = SettlementLedgerSerializer(ledger)
        return Response(serializer.data)

    # ==========================================================================
    # Orders
    # ==========================================================================

    @action(detail=False, methods=['post'])
    def order(self, request):
        """
        Order an hour package. Creates a draft invoice.

        POST /api/v1/usage/order/
        """
        serializer = HourOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        client_email = data['client_email']
        is_manager = request.user.has_any_role(get_elevated_roles())

        if not is_manager and client_email.lower() != (request.user.email or '').lower():
            raise UsagePermissionError("You can only order hours for yourself")

        client = self.get_repository().get_user_by_email(client_email)
        if client is None:
            raise UserNotFoundError(message=f"No user with e-mail {client_email}")

        invoice = PackageService.order_hour_package(
            user=client,
            client_email=client_email,
            hours=data['hours'],
            price=data['price'],
        )

        logger.info(
            "Hour package order placed",
            extra={'ordered_by': str(request.user.id), 'client_id': str(client.id)}
        )

        return Response(
            PackageService.order_to_dict(invoice, data['hours'], data['price']),
            status=status.HTTP_201_CREATED
        )
