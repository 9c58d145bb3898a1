"""
Grammar Matcher Module.

This module holds the three field grammars of the OCR line printed at
the bottom of a Swedish Bankgiro/Plusgiro payment slip:

    H  #79927398713  #  100  00 8 >  90001193#41#
       `-reference-'    `-amount--'  `-account-'

Each grammar is searched on its own against the whole fragment and only
its first match counts. A fragment may hold any subset of the fields.

The patterns were derived from the Bankgirot (BG6070) and Plusgirot
(G445) descriptions of the OCR line.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from ..utils.logger import get_logger

logger = get_logger(__name__)


# Reference number:
#   start of fragment, or "H", whitespace and "#", or an optional "#" and
#   whitespace; then 2 to 25 digits (last one is the check digit); one to
#   three spaces; "#"; whitespace, not followed by a two-digit code and
#   "#" (that is the account's document type, not a reference).
REFERENCE_PATTERN = re.compile(
    r"(?:^|H\s+#|#?\s+)(\d{1,24}(\d))\s{1,3}#\s+(?!\s|\d{2}#)",
    re.ASCII
)

# Amount:
#   start of fragment and optional whitespace, or "#" and whitespace;
#   1 to 8 digits of whole SEK; whitespace; 2 digits of ore; one to three
#   spaces; the check digit; one space; ">".
AMOUNT_PATTERN = re.compile(
    r"(?:^\s*|#\s+)(\d{1,8})\s+(\d{2})\s{1,3}(\d)\s>",
    re.ASCII
)

# Bankgiro/Plusgiro account:
#   start of fragment and optional whitespace, or ">" and whitespace;
#   7 or 8 digits; an optional space; "#"; the 2-digit internal document
#   type; "#"; only whitespace until the end of the fragment.
ACCOUNT_PATTERN = re.compile(
    r"(?:^\s*|>\s+)(\d{7,8})\s?#(\d{2})#\s*$",
    re.ASCII
)


@dataclass(frozen=True)
class ReferenceCandidate:
    """
    A reference number found in a fragment, not yet validated.

    Attributes:
        value: All reference digits including the check digit.
        check_digit: The final digit.
        span: (start, end) of the whole match in the fragment.
    """
    value: str
    check_digit: str
    span: Tuple[int, int]


@dataclass(frozen=True)
class AmountCandidate:
    """
    An amount found in a fragment, not yet validated.

    Attributes:
        whole: Whole SEK as printed, 1 to 8 digits.
        fractional: Ore as printed, exactly 2 digits.
        check_digit: The amount check digit.
        span: (start, end) of the whole match in the fragment.
    """
    whole: str
    fractional: str
    check_digit: str
    span: Tuple[int, int]

    @property
    def checksum_digits(self) -> str:
        """Digits covered by the amount check digit, check digit last."""
        return self.whole + self.fractional + self.check_digit


@dataclass(frozen=True)
class AccountCandidate:
    """
    A giro account and internal document type found in a fragment.

    Attributes:
        account: 7 or 8 account digits.
        document_type: The 2-digit internal document type as printed.
        span: (start, end) of the whole match in the fragment.
    """
    account: str
    document_type: str
    span: Tuple[int, int]


@dataclass(frozen=True)
class GrammarMatch:
    """Candidates found by one pass of all three grammars."""
    reference: Optional[ReferenceCandidate] = None
    amount: Optional[AmountCandidate] = None
    account: Optional[AccountCandidate] = None

    @property
    def is_empty(self) -> bool:
        return self.reference is None and self.amount is None and self.account is None


def match_reference(fragment: str) -> Optional[ReferenceCandidate]:
    """
    Find the first reference number in a fragment.

    Args:
        fragment: OCR text to search.

    Returns:
        ReferenceCandidate, or None if the grammar does not match.

    Example:
        >>> match_reference("H  #79927398713  #  ").value
        '79927398713'
    """
    m = REFERENCE_PATTERN.search(fragment)
    if m is None:
        return None
    return ReferenceCandidate(value=m.group(1), check_digit=m.group(2), span=m.span())


def match_amount(fragment: str) -> Optional[AmountCandidate]:
    """
    Find the first amount in a fragment.

    Args:
        fragment: OCR text to search.

    Returns:
        AmountCandidate, or None if the grammar does not match.

    Example:
        >>> match_amount("#  100  00 8 >").checksum_digits
        '100008'
    """
    m = AMOUNT_PATTERN.search(fragment)
    if m is None:
        return None
    return AmountCandidate(
        whole=m.group(1),
        fractional=m.group(2),
        check_digit=m.group(3),
        span=m.span()
    )


def match_account(fragment: str) -> Optional[AccountCandidate]:
    """
    Find the giro account and document type in a fragment.

    The account closes the OCR line, so it only matches at the end of
    the fragment.

    Args:
        fragment: OCR text to search.

    Returns:
        AccountCandidate, or None if the grammar does not match.
    """
    m = ACCOUNT_PATTERN.search(fragment)
    if m is None:
        return None
    return AccountCandidate(account=m.group(1), document_type=m.group(2), span=m.span())


class GrammarMatcher:
    """
    Runs the reference, amount and account grammars over a fragment.

    The grammars are independent: each one sees the entire fragment and
    a miss in one has no effect on the others.

    Example:
        >>> matcher = GrammarMatcher()
        >>> found = matcher.match("H  #79927398713  #  100  00 8 >  90001193#41#")
        >>> found.account.account
        '90001193'
    """

    def match(self, fragment: str) -> GrammarMatch:
        """
        Search a fragment with all three grammars.

        Args:
            fragment: OCR text to search.

        Returns:
            GrammarMatch holding a candidate, or None, per field.
        """
        result = GrammarMatch(
            reference=match_reference(fragment),
            amount=match_amount(fragment),
            account=match_account(fragment)
        )
        if result.is_empty:
            logger.debug(f"No field grammar matched: {fragment!r}")
        return result
