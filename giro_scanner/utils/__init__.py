"""
Utility Module for the Giro Scanner.

This module provides common utilities used across all other modules:
    - Logging configuration
    - Exception hierarchy
    - Fragment input helpers
"""

from .logger import setup_logger, get_logger
from .helpers import is_digit_string, read_fragments

__all__ = [
    'setup_logger',
    'get_logger',
    'is_digit_string',
    'read_fragments'
]
