"""
Invoice Module for the Giro Scanner.

This module provides:
    - Invoice: accumulates validated fields across OCR fragments
    - Field records and the changed-fields bit flags
    - Presentation helpers for giro type, account and amount
"""

from .fields import Amount, EventKind, Field, GiroAccount, InvoiceFields, ParseEvent, field_names
from .invoice import Invoice
from .presenter import GiroType, format_account, format_amount, infer_giro_type

__all__ = [
    'Amount',
    'EventKind',
    'Field',
    'GiroAccount',
    'InvoiceFields',
    'ParseEvent',
    'field_names',
    'Invoice',
    'GiroType',
    'format_account',
    'format_amount',
    'infer_giro_type',
]
