# services/usage-service/src/apps/core/models/__init__.py
"""
Usage Service Models

Read models for users, invoices and flight logs that feed the
hour-package ledger.
"""

from .user import User
from .invoice import (
    Invoice,
    InvoiceClient,
    InvoiceItem,
    InvoiceStatus,
)
from .flight_log import (
    FlightLog,
    FlightType,
)

__all__ = [
    # User
    'User',
    # Invoice
    'Invoice',
    'InvoiceClient',
    'InvoiceItem',
    'InvoiceStatus',
    # Flight log
    'FlightLog',
    'FlightType',
]
