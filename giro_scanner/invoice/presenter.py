"""
Presenter Module.

Pure formatting and classification helpers for invoice fields:
    - Bankgiro/Plusgiro classification from the internal document type
    - Account number formatting with the dash used on the slips
    - Amount formatting as "<SEK>,<ore>"
"""

import enum
from typing import Collection, Optional

from ..utils.logger import get_logger

logger = get_logger(__name__)

# Document types seen on Bankgiro slips. No published source maps the
# internal document type to a giro system, so this is a heuristic based
# on observed slips; every other type is taken to be Plusgiro.
BANKGIRO_DOCUMENT_TYPES = (41, 42)


class GiroType(str, enum.Enum):
    """Swedish giro systems."""
    BANKGIRO = "BG"
    PLUSGIRO = "PG"

    def __str__(self) -> str:
        return self.value


def infer_giro_type(
    document_type: Optional[int],
    bankgiro_types: Collection[int] = BANKGIRO_DOCUMENT_TYPES
) -> Optional[GiroType]:
    """
    Guess whether an invoice is paid to a Bankgiro or a Plusgiro account.

    Args:
        document_type: Internal document type, or None if not read yet.
        bankgiro_types: Document types classified as Bankgiro.

    Returns:
        None for an unknown document type, GiroType.BANKGIRO for the
        Bankgiro types, otherwise GiroType.PLUSGIRO.

    Example:
        >>> infer_giro_type(41)
        <GiroType.BANKGIRO: 'BG'>
        >>> infer_giro_type(14)
        <GiroType.PLUSGIRO: 'PG'>
    """
    if document_type is None:
        return None
    if document_type in bankgiro_types:
        return GiroType.BANKGIRO
    return GiroType.PLUSGIRO


def format_account(number: Optional[str], giro_type: Optional[GiroType]) -> Optional[str]:
    """
    Format an account number the way it is printed for its giro system.

    Bankgiro numbers are split as XXXX-XXXX (8 digits) or XXX-XXXX
    (7 digits). Plusgiro numbers get a dash before the final digit,
    which is their check digit. Without a known type the raw digits are
    returned.

    Args:
        number: Raw account digits, or None.
        giro_type: Giro system of the account, or None.

    Returns:
        The formatted account, or None if number is None.

    Example:
        >>> format_account("90001193", GiroType.BANKGIRO)
        '9000-1193'
        >>> format_account("1234567", GiroType.PLUSGIRO)
        '123456-7'
    """
    if number is None:
        return None

    if giro_type is GiroType.BANKGIRO:
        if len(number) == 8:
            return f"{number[:4]}-{number[4:]}"
        if len(number) == 7:
            return f"{number[:3]}-{number[3:]}"
        logger.debug(f"Unexpected Bankgiro number length {len(number)}: {number}")
        return number

    if giro_type is GiroType.PLUSGIRO:
        return f"{number[:-1]}-{number[-1:]}"

    return number


def format_amount(whole: Optional[int], fractional: Optional[int]) -> str:
    """
    Format an amount as "<SEK>,<ore>" with two ore digits.

    Args:
        whole: Whole SEK, or None.
        fractional: Ore, or None.

    Returns:
        The formatted amount, or an empty string if either part is None.

    Example:
        >>> format_amount(100, 0)
        '100,00'
        >>> format_amount(None, 50)
        ''
    """
    if whole is None or fractional is None:
        return ""
    return f"{whole},{fractional:02d}"
