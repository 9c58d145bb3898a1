"""
OCR Line Parsing Module.

This module provides:
    - The reference, amount and account grammars of the giro OCR line
    - The modulus-10 (Luhn) checksum used by reference and amount
"""

from .checksum import is_valid_luhn, luhn_check_digit, luhn_sum
from .grammar import (
    AccountCandidate,
    AmountCandidate,
    GrammarMatch,
    GrammarMatcher,
    ReferenceCandidate,
    match_account,
    match_amount,
    match_reference,
)

__all__ = [
    'is_valid_luhn',
    'luhn_check_digit',
    'luhn_sum',
    'AccountCandidate',
    'AmountCandidate',
    'GrammarMatch',
    'GrammarMatcher',
    'ReferenceCandidate',
    'match_account',
    'match_amount',
    'match_reference',
]
