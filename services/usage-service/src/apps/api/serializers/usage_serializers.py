# services/usage-service/src/apps/api/serializers/usage_serializers.py
"""
Usage Serializers

REST API serializers for the per-user hour-package usage report.
"""

from rest_framework import serializers


class HoursField(serializers.DecimalField):
    """Hour amounts, rendered as JSON numbers."""

    def __init__(self, **kwargs):
        kwargs.setdefault('max_digits', 10)
        kwargs.setdefault('decimal_places', 2)
        super().__init__(**kwargs)


class UserSummarySerializer(serializers.Serializer):
    """Serializer for the user block of a usage report."""

    id = serializers.UUIDField()
    email = serializers.EmailField()
    firstName = serializers.CharField(source='first_name')
    lastName = serializers.CharField(source='last_name')


class FlightAllocationSerializer(serializers.Serializer):
    """Serializer for one deduction of flight hours from a package."""

    flightId = serializers.CharField(source='flight_id')
    date = serializers.DateField()
    hours = HoursField()
    totalFlightHours = HoursField(source='total_flight_hours')
    flightType = serializers.CharField(source='flight_type', allow_null=True)
    role = serializers.CharField(source='role.value')


class PackageUsageSerializer(serializers.Serializer):
    """Serializer for a package with its allocations."""

    id = serializers.CharField(source='package.id')
    invoiceId = serializers.CharField(source='package.invoice_id', allow_null=True)
    totalHours = HoursField(source='package.total_hours')
    usedHours = HoursField(source='used_hours')
    charteredHours = HoursField(source='chartered_hours')
    remainingHours = HoursField(source='remaining_hours')
    purchaseDate = serializers.DateField(source='package.purchase_date')
    expiryDate = serializers.DateField(source='package.expiry_date', allow_null=True)
    status = serializers.CharField(source='status.value')
    price = serializers.DecimalField(source='package.price', max_digits=12, decimal_places=2)
    currency = serializers.CharField(source='package.currency')
    allocatedFlights = FlightAllocationSerializer(source='allocated_flights', many=True)
    allocatedCharteredFlights = FlightAllocationSerializer(
        source='allocated_chartered_flights',
        many=True
    )


class UsageReportSerializer(serializers.Serializer):
    """Serializer for the usage report response."""

    user = UserSummarySerializer()
    packages = PackageUsageSerializer(many=True)
    totalPurchasedHours = HoursField(source='total_purchased_hours')
    totalUsedHours = HoursField(source='total_used_hours')
    totalCharteredHours = HoursField(source='total_chartered_hours')
    remainingHours = HoursField(source='remaining_hours')
    flightCount = serializers.IntegerField(source='flight_count')
    statistics = serializers.SerializerMethodField()

    def get_statistics(self, obj):
        return obj.statistics.to_dict()
