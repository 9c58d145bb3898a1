"""
Invoice Field Data Classes.

This module defines the records held by an Invoice and the values it
reports after each parse:

    Field: Bit flags naming the tracked fields
    Amount: Whole SEK, ore and the amount check digit
    GiroAccount: Account digits and the internal document type
    InvoiceFields: The per-invoice record, every field optional
    ParseEvent: What happened to one candidate during a parse
"""

import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional


class Field(enum.IntFlag):
    """
    Fields reported by Invoice.parse().

    Values compare equal to plain integers, so a full first decode of an
    OCR line equals 15 and a parse that found nothing new equals 0.
    """
    NONE = 0
    REFERENCE = 1
    AMOUNT = 2
    GIRO_ACCOUNT = 4
    DOCUMENT_TYPE = 8


class EventKind(str, enum.Enum):
    """Outcome for a candidate found by one of the grammars."""
    ACCEPTED = "accepted"
    UNCHANGED = "unchanged"
    CHECKSUM_FAILED = "checksum_failed"


@dataclass(frozen=True)
class Amount:
    """
    Amount to pay, as printed on the OCR line.

    Attributes:
        whole: Whole SEK, 0 to 99,999,999.
        fractional: Ore, 0 to 99.
        check_digit: The amount check digit.
    """
    whole: int
    fractional: int
    check_digit: str


@dataclass(frozen=True)
class GiroAccount:
    """
    Bankgiro or Plusgiro account number with its document type.

    Attributes:
        number: 7 or 8 digits, without separator.
        document_type: Internal document type, 0 to 99.
    """
    number: str
    document_type: int


@dataclass
class InvoiceFields:
    """
    Best known value of every invoice field.

    None means the field has not been read yet. The amount and its check
    digit, and the account and its document type, live in one record
    each, so they are always defined together.
    """
    reference: Optional[str] = None
    amount: Optional[Amount] = None
    giro_account: Optional[GiroAccount] = None

    def copy(self) -> 'InvoiceFields':
        """Return a shallow copy; the nested records are immutable."""
        return InvoiceFields(
            reference=self.reference,
            amount=self.amount,
            giro_account=self.giro_account
        )


@dataclass(frozen=True)
class ParseEvent:
    """
    Diagnostic record of one candidate seen by Invoice.parse().

    Attributes:
        kind: Whether the candidate was stored, already known or rejected.
        field: The field(s) the candidate belongs to.
        candidate: The matched digits as printed.
        detail: Extra human-readable context.
    """
    kind: EventKind
    field: Field
    candidate: str
    detail: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'field': field_names(self.field),
            'candidate': self.candidate,
            'detail': self.detail
        }


_FIELD_NAMES = (
    (Field.REFERENCE, 'reference'),
    (Field.AMOUNT, 'amount'),
    (Field.GIRO_ACCOUNT, 'giro_account'),
    (Field.DOCUMENT_TYPE, 'document_type'),
)


def field_names(fields: Field) -> list:
    """
    List the names of the fields set in a bitmask.

    Example:
        >>> field_names(Field.REFERENCE | Field.AMOUNT)
        ['reference', 'amount']
    """
    return [name for flag, name in _FIELD_NAMES if fields & flag]
