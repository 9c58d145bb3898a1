"""
Custom Exceptions Module.

This module defines the custom exceptions used throughout the giro
scanner. Parsing scanner input never raises: a fragment that does not
match, or a candidate that fails its checksum, is simply not stored.
Exceptions are reserved for explicit field assignment, configuration
and command-line input problems.

Exception Hierarchy:
    GiroScannerError (base)
    ├── InputError
    │   └── FragmentSourceNotFoundError
    ├── ConfigurationError
    └── ValidationError
        └── FieldValidationError
"""


class GiroScannerError(Exception):
    """
    Base exception for all giro scanner errors.

    Attributes:
        message: Human-readable error message.
        details: Optional dictionary with additional error details.
    """

    def __init__(self, message: str, details: dict = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message.
            details: Optional dictionary with additional context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS
# =============================================================================

class InputError(GiroScannerError):
    """Base exception for fragment input errors."""
    pass


class FragmentSourceNotFoundError(InputError):
    """Raised when a fragment file cannot be found."""

    def __init__(self, filepath: str):
        message = f"Fragment source not found: {filepath}"
        details = {"filepath": filepath}
        super().__init__(message, details)


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================

class ConfigurationError(GiroScannerError):
    """Raised when the configuration file is missing or malformed."""
    pass


# =============================================================================
# VALIDATION ERRORS
# =============================================================================

class ValidationError(GiroScannerError):
    """Base exception for rejected field values."""
    pass


class FieldValidationError(ValidationError):
    """
    Raised when a value assigned explicitly to an invoice field is invalid.

    Example:
        >>> raise FieldValidationError("reference", "123", "check digit mismatch")
    """

    def __init__(self, field: str, value, reason: str = None):
        message = f"Validation failed for field '{field}'"
        if reason:
            message = f"{message}: {reason}"
        details = {"field": field, "value": value, "reason": reason}
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(message, details)


__all__ = [
    'GiroScannerError',
    'InputError',
    'FragmentSourceNotFoundError',
    'ConfigurationError',
    'ValidationError',
    'FieldValidationError',
]
