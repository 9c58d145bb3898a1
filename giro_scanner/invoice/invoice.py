"""
Invoice Field Accumulator.

An Invoice collects everything needed to register a payment from the OCR
line of a Bankgiro/Plusgiro slip:

    - A reference number with a valid check digit
    - An amount in SEK and ore with a valid check digit
    - A Bankgiro/Plusgiro account number
    - Optionally, the internal document type printed after the account

Text is fed in with parse(), typically one OCR result per camera frame.
Every call may add or replace fields, but only with values that passed
validation and differ from what is already known, and it reports which
fields changed. Values are never cleared by parsing, so once an invoice
is complete it stays complete.

An Invoice is not thread-safe; one scanning loop should own it.
"""

import json
from typing import Any, Callable, Collection, Dict, List, Optional

from ..parser.checksum import is_valid_luhn
from ..parser.grammar import (
    AccountCandidate,
    AmountCandidate,
    GrammarMatcher,
    ReferenceCandidate,
)
from ..utils.exceptions import FieldValidationError
from ..utils.helpers import is_digit_string
from ..utils.logger import get_logger
from .fields import (
    Amount,
    EventKind,
    Field,
    GiroAccount,
    InvoiceFields,
    ParseEvent,
    field_names,
)
from .presenter import (
    BANKGIRO_DOCUMENT_TYPES,
    GiroType,
    format_account,
    format_amount,
    infer_giro_type,
)

logger = get_logger(__name__)

ParseListener = Callable[[ParseEvent], None]

MAX_AMOUNT_WHOLE = 99_999_999
MIN_REFERENCE_LENGTH = 2
MAX_REFERENCE_LENGTH = 25


class Invoice:
    """
    Accumulates validated invoice fields across OCR fragments.

    Attributes:
        last_fields_decoded: Fields changed by the most recent parse().
        last_events: Diagnostics for each candidate seen by the most
            recent parse(), including checksum rejections.

    Example:
        >>> invoice = Invoice()
        >>> int(invoice.parse("H  #79927398713  #  100  00 8 >  90001193#41#"))
        15
        >>> invoice.get_formatted_account()
        '9000-1193'
        >>> invoice.is_complete()
        True
    """

    def __init__(
        self,
        bankgiro_document_types: Collection[int] = BANKGIRO_DOCUMENT_TYPES,
        listener: Optional[ParseListener] = None
    ) -> None:
        """
        Create an invoice with no fields read.

        Args:
            bankgiro_document_types: Document types classified as Bankgiro.
            listener: Optional callback receiving every ParseEvent.
        """
        self._fields = InvoiceFields()
        self._matcher = GrammarMatcher()
        self._bankgiro_types = tuple(bankgiro_document_types)
        self._listeners: List[ParseListener] = []
        if listener is not None:
            self._listeners.append(listener)

        self.last_fields_decoded = Field.NONE
        self.last_events: List[ParseEvent] = []

    # ------------------------------------------------------------------
    # Parsing
    # ------------------------------------------------------------------

    def add_listener(self, listener: ParseListener) -> None:
        """Register a callback for the ParseEvents of every later parse."""
        self._listeners.append(listener)

    def parse(self, fragment: str) -> Field:
        """
        Parse a text fragment and merge any new, valid fields.

        Args:
            fragment: OCR text, a whole OCR line or any part of one.

        Returns:
            The fields that changed. A field is not reported if the value
            read equals the one already held, or if its check digit is
            wrong. Field.NONE (== 0) when nothing changed.
        """
        logger.debug(f"Parsing {fragment!r}")
        found = self._matcher.match(fragment)
        events: List[ParseEvent] = []
        decoded = Field.NONE

        if found.reference is not None:
            decoded |= self._merge_reference(found.reference, events)
        if found.amount is not None:
            decoded |= self._merge_amount(found.amount, events)
        if found.account is not None:
            decoded |= self._merge_account(found.account, events)

        self.last_fields_decoded = decoded
        self.last_events = events
        for event in events:
            for listener in self._listeners:
                listener(event)
        return decoded

    def _merge_reference(self, candidate: ReferenceCandidate, events: List[ParseEvent]) -> Field:
        if not is_valid_luhn(candidate.value):
            logger.warning(f"Got reference {candidate.value}. Check digit invalid.")
            events.append(ParseEvent(
                EventKind.CHECKSUM_FAILED, Field.REFERENCE, candidate.value,
                f"check digit {candidate.check_digit} does not match"
            ))
            return Field.NONE

        if candidate.value == self._fields.reference:
            events.append(ParseEvent(EventKind.UNCHANGED, Field.REFERENCE, candidate.value))
            return Field.NONE

        self._fields.reference = candidate.value
        events.append(ParseEvent(EventKind.ACCEPTED, Field.REFERENCE, candidate.value))
        return Field.REFERENCE

    def _merge_amount(self, candidate: AmountCandidate, events: List[ParseEvent]) -> Field:
        printed = f"{candidate.whole} {candidate.fractional} {candidate.check_digit}"
        if not is_valid_luhn(candidate.checksum_digits):
            logger.warning(f"Got amount {printed}. Check digit invalid.")
            events.append(ParseEvent(
                EventKind.CHECKSUM_FAILED, Field.AMOUNT, printed,
                f"check digit {candidate.check_digit} does not match"
            ))
            return Field.NONE

        amount = Amount(
            whole=int(candidate.whole),
            fractional=int(candidate.fractional),
            check_digit=candidate.check_digit
        )
        if amount == self._fields.amount:
            events.append(ParseEvent(EventKind.UNCHANGED, Field.AMOUNT, printed))
            return Field.NONE

        logger.debug(f"Got amount {printed}. Check digit valid.")
        self._fields.amount = amount
        events.append(ParseEvent(EventKind.ACCEPTED, Field.AMOUNT, printed))
        return Field.AMOUNT

    def _merge_account(self, candidate: AccountCandidate, events: List[ParseEvent]) -> Field:
        # The account grammar has no checksum; a syntactic match is enough
        changed = Field.GIRO_ACCOUNT | Field.DOCUMENT_TYPE
        printed = f"{candidate.account}#{candidate.document_type}#"
        account = GiroAccount(
            number=candidate.account,
            document_type=int(candidate.document_type)
        )
        if account == self._fields.giro_account:
            events.append(ParseEvent(EventKind.UNCHANGED, changed, printed))
            return Field.NONE

        self._fields.giro_account = account
        events.append(ParseEvent(EventKind.ACCEPTED, changed, printed))
        return changed

    @property
    def checksum_failures(self) -> List[ParseEvent]:
        """Candidates rejected by the most recent parse()."""
        return [e for e in self.last_events if e.kind is EventKind.CHECKSUM_FAILED]

    # ------------------------------------------------------------------
    # Field accessors
    # ------------------------------------------------------------------

    @property
    def fields(self) -> InvoiceFields:
        """A copy of the current field record."""
        return self._fields.copy()

    @property
    def reference(self) -> Optional[str]:
        return self._fields.reference

    @property
    def check_digit_reference(self) -> Optional[str]:
        if self._fields.reference is None:
            return None
        return self._fields.reference[-1]

    @property
    def amount(self) -> Optional[int]:
        """Whole SEK of the amount."""
        return self._fields.amount.whole if self._fields.amount else None

    @property
    def amount_fractional(self) -> Optional[int]:
        """Ore of the amount."""
        return self._fields.amount.fractional if self._fields.amount else None

    @property
    def check_digit_amount(self) -> Optional[str]:
        return self._fields.amount.check_digit if self._fields.amount else None

    @property
    def giro_account(self) -> Optional[str]:
        """Raw account digits, without separator."""
        return self._fields.giro_account.number if self._fields.giro_account else None

    @property
    def internal_document_type(self) -> Optional[int]:
        return self._fields.giro_account.document_type if self._fields.giro_account else None

    def is_reference_defined(self) -> bool:
        return self._fields.reference is not None

    def is_amount_defined(self) -> bool:
        return self._fields.amount is not None

    def is_giro_account_defined(self) -> bool:
        return self._fields.giro_account is not None

    def is_document_type_defined(self) -> bool:
        return self._fields.giro_account is not None

    def is_complete(self) -> bool:
        """
        An invoice is complete once it holds a reference number, an amount
        with ore and check digit, and a giro account. The document type is
        not required: many slips carry a usable account without one.
        """
        return (
            self.is_reference_defined()
            and self.is_amount_defined()
            and self.is_giro_account_defined()
        )

    def missing_fields(self) -> List[str]:
        """Names of the fields still needed for a complete invoice."""
        missing = []
        if not self.is_reference_defined():
            missing.append('reference')
        if not self.is_amount_defined():
            missing.append('amount')
        if not self.is_giro_account_defined():
            missing.append('giro_account')
        return missing

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------

    def get_type(self) -> Optional[GiroType]:
        """
        Guess whether this is a Bankgiro or a Plusgiro invoice.

        The mapping from internal document type is empirical, see
        presenter.infer_giro_type().

        Returns:
            None if the document type is unknown, GiroType.BANKGIRO ("BG")
            for types 41 and 42, otherwise GiroType.PLUSGIRO ("PG").
        """
        return infer_giro_type(self.internal_document_type, self._bankgiro_types)

    def get_formatted_account(self) -> Optional[str]:
        """The account as printed for its giro type, or None if unknown."""
        return format_account(self.giro_account, self.get_type())

    def get_formatted_amount(self) -> str:
        """The amount as "<SEK>,<ore>", or "" if unknown."""
        return format_amount(self.amount, self.amount_fractional)

    # ------------------------------------------------------------------
    # Explicit assignment
    # ------------------------------------------------------------------

    def set_reference(self, reference: str) -> None:
        """
        Set the reference number directly, e.g. after manual entry.

        Raises:
            FieldValidationError: If the reference is not 2 to 25 digits
                ending in a valid check digit.
        """
        if not is_digit_string(reference):
            raise FieldValidationError('reference', reference, "must contain only digits")
        if not MIN_REFERENCE_LENGTH <= len(reference) <= MAX_REFERENCE_LENGTH:
            raise FieldValidationError(
                'reference', reference,
                f"must be {MIN_REFERENCE_LENGTH} to {MAX_REFERENCE_LENGTH} digits"
            )
        if not is_valid_luhn(reference):
            raise FieldValidationError('reference', reference, "check digit mismatch")
        self._fields.reference = reference

    def set_amount(self, whole: int, fractional: int, check_digit) -> None:
        """
        Set the amount directly.

        Args:
            whole: Whole SEK, 0 to 99,999,999.
            fractional: Ore, 0 to 99.
            check_digit: The amount check digit, as str or int.

        Raises:
            FieldValidationError: If a part is out of range or the check
                digit does not match.
        """
        check_digit = str(check_digit)
        value = f"{whole} {fractional} {check_digit}"
        if isinstance(whole, bool) or not isinstance(whole, int) or not 0 <= whole <= MAX_AMOUNT_WHOLE:
            raise FieldValidationError('amount', value, "whole SEK out of range")
        if isinstance(fractional, bool) or not isinstance(fractional, int) or not 0 <= fractional <= 99:
            raise FieldValidationError('amount', value, "ore out of range")
        if not (is_digit_string(check_digit) and len(check_digit) == 1):
            raise FieldValidationError('amount', value, "check digit must be a single digit")
        if not is_valid_luhn(f"{whole}{fractional:02d}{check_digit}"):
            raise FieldValidationError('amount', value, "check digit mismatch")
        self._fields.amount = Amount(whole, fractional, check_digit)

    def set_giro_account(self, number: str, document_type: int) -> None:
        """
        Set the giro account and its internal document type directly.

        Raises:
            FieldValidationError: If the account is not 7 or 8 digits or
                the document type is outside 0 to 99.
        """
        if not is_digit_string(number) or len(number) not in (7, 8):
            raise FieldValidationError('giro_account', number, "must be 7 or 8 digits")
        if isinstance(document_type, bool) or not isinstance(document_type, int) \
                or not 0 <= document_type <= 99:
            raise FieldValidationError('document_type', document_type, "must be 0 to 99")
        self._fields.giro_account = GiroAccount(number, document_type)

    def reset_reference(self) -> None:
        self._fields.reference = None

    def reset_amount(self) -> None:
        self._fields.amount = None

    def reset_giro_account(self) -> None:
        """Forget the account together with its document type."""
        self._fields.giro_account = None

    def reset(self) -> None:
        """Forget every field and the outcome of the last parse."""
        self._fields = InvoiceFields()
        self.last_fields_decoded = Field.NONE
        self.last_events = []

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        Returns:
            Dictionary with raw and formatted field values.
        """
        giro_type = self.get_type()
        return {
            'reference': self.reference,
            'check_digit_reference': self.check_digit_reference,
            'amount': self.amount,
            'amount_fractional': self.amount_fractional,
            'check_digit_amount': self.check_digit_amount,
            'formatted_amount': self.get_formatted_amount(),
            'giro_account': self.giro_account,
            'internal_document_type': self.internal_document_type,
            'type': giro_type.value if giro_type else None,
            'formatted_account': self.get_formatted_account(),
            'complete': self.is_complete(),
            'missing_fields': self.missing_fields(),
            'last_fields_decoded': field_names(self.last_fields_decoded)
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __str__(self) -> str:
        # Laid out like the OCR line at the bottom of the slip
        document_type = self.internal_document_type
        return (
            "#\t" + (self.reference or "NO REF")
            + " #\t " + (str(self.amount) if self.is_amount_defined() else "NO AMOUNT")
            + " " + (f"{self.amount_fractional:02d}" if self.is_amount_defined() else "XX")
            + "   " + (self.check_digit_amount or "X")
            + " >\t\t" + (self.giro_account or "NO GIRO")
            + "#" + (f"{document_type:02d}" if document_type is not None else "XX")
            + "#\t" + ("Invoice complete" if self.is_complete() else "Invoice incomplete")
        )

    def __repr__(self) -> str:
        return (
            f"Invoice("
            f"reference={self.reference}, "
            f"amount={self.get_formatted_amount() or None}, "
            f"account={self.get_formatted_account()}, "
            f"complete={self.is_complete()})"
        )
