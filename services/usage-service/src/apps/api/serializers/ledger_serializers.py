# services/usage-service/src/apps/api/serializers/ledger_serializers.py
"""
Ledger Serializers

REST API serializers for the settlement ledger.
"""

from rest_framework import serializers

from .usage_serializers import HoursField


class LedgerEntrySerializer(serializers.Serializer):
    """
    Serializer for one ledger line.

    Invoice lines carry invoiceAmount and currency; flight lines carry
    flightType, role and flightId.
    """

    date = serializers.DateField()
    eventType = serializers.CharField()
    reference = serializers.CharField()
    description = serializers.CharField()
    hoursAdded = HoursField()
    hoursDeducted = HoursField()
    balanceDue = HoursField()

    invoiceAmount = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    currency = serializers.CharField(required=False)

    flightType = serializers.CharField(required=False)
    role = serializers.CharField(required=False)
    flightId = serializers.CharField(required=False)


class HoursByTypeEntrySerializer(serializers.Serializer):
    hours = HoursField()
    count = serializers.IntegerField()


class HoursByTypeSerializer(serializers.Serializer):
    invoiced = HoursByTypeEntrySerializer()
    school = HoursByTypeEntrySerializer()
    charter = HoursByTypeEntrySerializer()
    demo = HoursByTypeEntrySerializer()
    ferry = HoursByTypeEntrySerializer()


class LedgerSummarySerializer(serializers.Serializer):
    """Serializer for ledger totals."""

    totalHoursAdded = HoursField()
    totalHoursDeducted = HoursField()
    finalBalance = HoursField()
    entryCount = serializers.IntegerField()
    invoiceCount = serializers.IntegerField()
    flightCount = serializers.IntegerField()
    hoursByType = HoursByTypeSerializer()


class SettlementLedgerSerializer(serializers.Serializer):
    """Serializer for the settlement ledger response."""

    userId = serializers.UUIDField()
    ledgerEntries = LedgerEntrySerializer(many=True)
    summary = LedgerSummarySerializer()
