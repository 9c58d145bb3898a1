"""
Checksum Validator Module.

Modulus-10 (Luhn) check digits as used on the OCR line of Bankgiro and
Plusgiro payment slips. Both the reference number and the amount carry
one; the giro account number does not get checked here.

Example:
    >>> is_valid_luhn("79927398713")
    True
    >>> luhn_check_digit("7992739871")
    '3'
"""

from typing import Tuple

from ..utils.helpers import is_digit_string

# Contribution of a digit in a doubled position: 2*d, minus 9 when above 9
_DOUBLED: Tuple[int, ...] = (0, 2, 4, 6, 8, 1, 3, 5, 7, 9)


def luhn_sum(digits: str) -> int:
    """
    Compute the Luhn sum of a digit string.

    Digits are read right to left. The rightmost digit counts at face
    value, the next one doubled, and so on alternately.

    Args:
        digits: Non-empty string of ASCII digits.

    Returns:
        The weighted digit sum.

    Raises:
        ValueError: If the string is empty or holds a non-digit.
    """
    if not is_digit_string(digits):
        raise ValueError(f"Expected a string of digits, got {digits!r}")

    total = 0
    for position, char in enumerate(reversed(digits)):
        digit = ord(char) - ord('0')
        total += _DOUBLED[digit] if position % 2 else digit
    return total


def is_valid_luhn(digits: str) -> bool:
    """
    Check a digit string whose last digit is its own Luhn check digit.

    Args:
        digits: Digits including the trailing check digit.

    Returns:
        True if the Luhn sum is divisible by 10. The empty string is
        never valid.

    Raises:
        ValueError: If the string holds anything other than digits.
    """
    if digits == "":
        return False
    return luhn_sum(digits) % 10 == 0


def luhn_check_digit(payload: str) -> str:
    """
    Compute the check digit to append to a payload.

    Args:
        payload: Digits without a check digit.

    Returns:
        The single digit that makes ``payload + digit`` valid.

    Example:
        >>> luhn_check_digit("10000")
        '8'
    """
    # Appending a zero shifts every payload digit into its final position
    remainder = luhn_sum(payload + "0") % 10
    return str((10 - remainder) % 10)
