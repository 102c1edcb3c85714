# services/usage-service/src/apps/api/serializers/overview_serializers.py
"""
Overview Serializers

REST API serializers for the client usage overview and hour orders.
"""

from decimal import Decimal

from rest_framework import serializers

from .usage_serializers import HoursField


class ClientSummarySerializer(serializers.Serializer):
    totalPurchasedHours = HoursField()
    totalFlownHours = HoursField()
    totalFerryHours = HoursField()
    totalCharteredHours = HoursField()
    totalDemoHours = HoursField()
    packageCount = serializers.IntegerField()
    totalValue = serializers.DecimalField(max_digits=14, decimal_places=2)
    currency = serializers.CharField()
    flights12Months = serializers.IntegerField()
    flights90Days = serializers.IntegerField()


class ClientUsageSerializer(serializers.Serializer):
    """Serializer for one row of the usage overview."""

    id = serializers.UUIDField()
    email = serializers.EmailField()
    firstName = serializers.CharField()
    lastName = serializers.CharField()
    summary = ClientSummarySerializer()


class AggregateStatsSerializer(serializers.Serializer):
    """Serializer for totals across every listed client."""

    totalPurchasedHours = HoursField(max_digits=14)
    totalFlownHours = HoursField(max_digits=14)
    totalFerryHours = HoursField(max_digits=14)
    totalCharteredHours = HoursField(max_digits=14)
    totalDemoHours = HoursField(max_digits=14)
    totalRemainingHours = HoursField(max_digits=14)


class OverviewFilterSerializer(serializers.Serializer):
    """Query parameters of the usage overview."""

    search = serializers.CharField(required=False, allow_blank=True)
    sort_by = serializers.ChoiceField(
        choices=['email', 'first_name', 'last_name'],
        required=False,
        default='email'
    )
    sort_order = serializers.ChoiceField(
        choices=['asc', 'desc'],
        required=False,
        default='asc'
    )


class HourOrderSerializer(serializers.Serializer):
    """Serializer for an hour-package order."""

    client_email = serializers.EmailField()
    hours = serializers.DecimalField(
        max_digits=6,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
    price = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=Decimal('0.01')
    )
