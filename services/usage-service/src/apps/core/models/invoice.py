# services/usage-service/src/apps/core/models/invoice.py
"""
Invoice Models

Invoices imported from the accounting system (SmartBill) or created by
hour-package orders, with their client rows and line items.
"""

import uuid
from decimal import Decimal
from django.conf import settings
from django.db import models


class InvoiceStatus(models.TextChoices):
    """Invoice status choices."""
    DRAFT = 'draft', 'Draft'
    PENDING = 'pending', 'Pending'
    PAID = 'paid', 'Paid'
    IMPORTED = 'imported', 'Imported'
    CANCELLED = 'cancelled', 'Cancelled'
    VOID = 'void', 'Void'


class Invoice(models.Model):
    """
    Invoice header.

    Only paid and imported invoices count as hour purchases.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False
    )

    # External reference
    smartbill_id = models.CharField(
        max_length=100,
        blank=True,
        null=True,
        db_index=True,
        help_text='Accounting system reference'
    )
    series = models.CharField(max_length=20, blank=True, null=True)
    number = models.CharField(max_length=50, blank=True, null=True)

    # Dates
    issue_date = models.DateField(db_index=True)
    due_date = models.DateField(blank=True, null=True)
    import_date = models.DateTimeField(blank=True, null=True)

    # Status
    status = models.CharField(
        max_length=20,
        choices=InvoiceStatus.choices,
        default=InvoiceStatus.DRAFT,
        db_index=True
    )

    # Amounts
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    vat_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    currency = models.CharField(max_length=3, blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'invoices'
        ordering = ['issue_date', 'created_at']
        indexes = [
            models.Index(fields=['status', 'issue_date']),
        ]

    def __str__(self):
        return f"{self.reference}: {self.total_amount} {self.effective_currency}"

    @property
    def reference(self) -> str:
        return self.smartbill_id or f"INV-{self.id}"

    @property
    def effective_currency(self) -> str:
        return self.currency or settings.USAGE_LEDGER['DEFAULT_CURRENCY']


class InvoiceClient(models.Model):
    """
    Billed party of an invoice, linked to a platform user when known.
    """

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name='clients'
    )
    user_id = models.UUIDField(blank=True, null=True, db_index=True)
    company_id = models.UUIDField(blank=True, null=True)

    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, null=True)
    phone = models.CharField(max_length=50, blank=True, null=True)
    vat_code = models.CharField(max_length=50, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    city = models.CharField(max_length=100, blank=True, null=True)
    country = models.CharField(max_length=100, blank=True, null=True)

    class Meta:
        db_table = 'invoice_clients'

    def __str__(self):
        return self.name


class InvoiceItem(models.Model):
    """
    Invoice line item. Items whose unit is an hour unit are hour packages.
    """

    invoice = models.ForeignKey(
        Invoice,
        on_delete=models.CASCADE,
        related_name='items'
    )
    line_id = models.PositiveIntegerField()

    name = models.CharField(max_length=255, blank=True, null=True)
    description = models.TextField(blank=True, null=True)
    quantity = models.DecimalField(max_digits=10, decimal_places=2)
    unit = models.CharField(max_length=20, blank=True, null=True)
    unit_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0.00')
    )
    vat_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        blank=True,
        null=True
    )

    class Meta:
        db_table = 'invoice_items'
        ordering = ['line_id']
        constraints = [
            models.UniqueConstraint(fields=['invoice', 'line_id'], name='unique_invoice_line'),
        ]

    def __str__(self):
        return f"{self.invoice_id}-{self.line_id}: {self.quantity} {self.unit}"

    @property
    def is_hour_item(self) -> bool:
        return self.unit in settings.USAGE_LEDGER['HOUR_UNITS']
