"""
Scan Session Module for the Giro Scanner.

This module provides functionality for:
    - Feeding a stream of OCR fragments into one invoice
    - Stopping once the invoice is complete
    - Summarizing the scan
"""

from .scan_result import ScanResult
from .scan_session import ScanSession

__all__ = [
    'ScanResult',
    'ScanSession'
]
