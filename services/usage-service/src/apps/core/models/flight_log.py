# services/usage-service/src/apps/core/models/flight_log.py
"""
Flight Log Model

Flights as recorded in the school's flight log.
"""

import uuid
from django.db import models


class FlightType(models.TextChoices):
    """Flight type choices."""
    SCHOOL = 'SCHOOL', 'School'
    INVOICED = 'INVOICED', 'Invoiced'
    CHARTER = 'CHARTER', 'Charter'
    DEMO = 'DEMO', 'Demo'
    FERRY = 'FERRY', 'Ferry'
    PROMO = 'PROMO', 'Promo'


class FlightLog(models.Model):
    """
    A single logged flight.

    `user_id` is the pilot; `payer_id`, when set, is the user billed for
    the flight (a charter payer when it differs from the pilot).
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    # Crew and billing
    user_id = models.UUIDField(db_index=True)
    instructor_id = models.UUIDField(blank=True, null=True, db_index=True)
    payer_id = models.UUIDField(blank=True, null=True, db_index=True)

    # Flight
    date = models.DateField(db_index=True)
    flight_type = models.CharField(
        max_length=20,
        choices=FlightType.choices,
        default=FlightType.SCHOOL
    )
    total_hours = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        blank=True,
        null=True,
        help_text='Billable flight duration in hours'
    )

    remarks = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'flight_logs'
        ordering = ['date', 'created_at']
        indexes = [
            models.Index(fields=['user_id', 'date']),
            models.Index(fields=['payer_id', 'date']),
        ]

    def __str__(self):
        return f"{self.date} {self.flight_type} {self.total_hours}h"
