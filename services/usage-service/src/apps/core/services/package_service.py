# services/usage-service/src/apps/core/services/package_service.py
"""
Package Service

Turns hour-denominated invoice lines into hour packages, and records
hour-package orders as draft invoices.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from datetime import timedelta
from typing import Dict, Any, List, Iterable, Optional

from django.conf import settings
from django.db import transaction, DatabaseError
from django.utils import timezone

from ..models import Invoice, InvoiceClient, InvoiceItem, InvoiceStatus, User
from .exceptions import UsageValidationError, LedgerStorageError
from .ledger import HourPackage, _same_user, normalize_user_id, sort_packages

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


class PackageService:
    """
    Service for hour packages.

    Packages are never stored: they are read off invoice line items each
    time a ledger is computed.
    """

    # ==================== EXTRACTION ====================

    @staticmethod
    def billed_user_id(invoice: Invoice) -> Optional[str]:
        """User id of the invoice's (first) client row, if linked."""
        clients = list(invoice.clients.all())
        if not clients or not clients[0].user_id:
            return None
        return normalize_user_id(clients[0].user_id)

    @staticmethod
    def extract_packages(invoices: Iterable[Invoice], user_id) -> List[HourPackage]:
        """
        Build the user's hour packages from their invoices.

        Args:
            invoices: Paid/imported invoices with clients and items loaded
            user_id: Ledger owner

        Returns:
            Packages sorted by purchase date, oldest first
        """
        packages = []

        for invoice in invoices:
            if not _same_user(PackageService.billed_user_id(invoice), user_id):
                continue

            for item in invoice.items.all():
                if not item.is_hour_item:
                    continue
                if item.quantity is None or item.quantity <= 0:
                    logger.warning(
                        "Ignoring hour line item without a positive quantity",
                        extra={'invoice_id': str(invoice.id), 'line_id': item.line_id}
                    )
                    continue

                packages.append(HourPackage(
                    id=f"{invoice.id}-{item.line_id}",
                    invoice_id=invoice.smartbill_id,
                    total_hours=item.quantity,
                    purchase_date=invoice.issue_date,
                    price=item.total_amount,
                    currency=invoice.effective_currency,
                    expiry_date=None,
                ))

        return sort_packages(packages)

    @staticmethod
    def group_packages_by_user(invoices: Iterable[Invoice]) -> Dict[str, List[HourPackage]]:
        """Hour packages of every linked client, keyed by user id."""
        owners = {}
        for invoice in invoices:
            owner = PackageService.billed_user_id(invoice)
            if owner:
                owners.setdefault(owner, []).append(invoice)

        return {
            owner: PackageService.extract_packages(owned, owner)
            for owner, owned in owners.items()
        }

    # ==================== ORDERS ====================

    @staticmethod
    def order_hour_package(
        user: User,
        client_email: str,
        hours: Decimal,
        price: Decimal,
        client_name: str = None
    ) -> Invoice:
        """
        Record an hour-package order as a draft invoice.

        The order only becomes a usable package once accounting marks the
        invoice paid (or imports it).

        Args:
            user: User the hours are ordered for
            client_email: E-mail to put on the invoice client row
            hours: Hours ordered
            price: Total price, VAT included
            client_name: Name for the invoice client row

        Returns:
            The created Invoice
        """
        if hours is None or hours <= 0:
            raise UsageValidationError("Hours must be greater than zero", field="hours")
        if price is None or price <= 0:
            raise UsageValidationError("Price must be greater than zero", field="price")

        ledger_settings = settings.USAGE_LEDGER
        now = timezone.now()
        vat_rate = Decimal(ledger_settings['ORDER_VAT_RATE'])
        stamp = str(int(now.timestamp() * 1000))

        try:
            with transaction.atomic():
                invoice = Invoice.objects.create(
                    smartbill_id=f"ORDER-{stamp}",
                    series='ORD',
                    number=stamp,
                    issue_date=now.date(),
                    due_date=now.date() + timedelta(days=ledger_settings['ORDER_DUE_DAYS']),
                    status=InvoiceStatus.DRAFT,
                    total_amount=price,
                    currency=ledger_settings['DEFAULT_CURRENCY'],
                    vat_amount=(price * vat_rate / 100).quantize(CENT, rounding=ROUND_HALF_UP),
                    import_date=now,
                )
                InvoiceClient.objects.create(
                    invoice=invoice,
                    user_id=user.id,
                    name=client_name or user.full_name or client_email,
                    email=client_email,
                )
                InvoiceItem.objects.create(
                    invoice=invoice,
                    line_id=1,
                    name=f"{hours} Hour Flight Package",
                    description=f"Flight training package of {hours} hours",
                    quantity=hours,
                    unit='HUR',
                    unit_price=(price / hours).quantize(CENT, rounding=ROUND_HALF_UP),
                    total_amount=price,
                    vat_rate=vat_rate,
                )
        except DatabaseError as e:
            logger.error(f"Error creating hour package order: {e}", extra={'user_id': str(user.id)})
            raise LedgerStorageError('invoice', message="Failed to create invoice") from e

        logger.info(
            "Hour package ordered",
            extra={
                'invoice_id': str(invoice.id),
                'user_id': str(user.id),
                'hours': float(hours),
                'price': float(price),
            }
        )

        return invoice

    @staticmethod
    def order_to_dict(invoice: Invoice, hours: Decimal, price: Decimal) -> Dict[str, Any]:
        return {
            'success': True,
            'message': 'Hour package ordered successfully',
            'invoice': {
                'id': str(invoice.id),
                'smartbill_id': invoice.smartbill_id,
                'series': invoice.series,
                'number': invoice.number,
                'issue_date': invoice.issue_date.isoformat(),
                'due_date': invoice.due_date.isoformat() if invoice.due_date else None,
                'status': invoice.status,
                'total_amount': float(invoice.total_amount),
                'vat_amount': float(invoice.vat_amount),
                'currency': invoice.currency,
            },
            'hours': float(hours),
            'price': float(price),
        }
