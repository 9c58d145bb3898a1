"""
Giro Scanner - Source Package.

Incremental extraction of payment fields from the OCR line printed at
the bottom of Swedish Bankgiro/Plusgiro payment slips.

Modules:
    - parser: Field grammars and the modulus-10 checksum
    - invoice: Field accumulator and presentation helpers
    - session: Feeding a fragment stream into one invoice
    - utils: Logging, exceptions and input helpers

Architecture:
    Fragment → Grammar Matcher → Checksum → Invoice → ScanResult
"""

__version__ = "1.0.0"

__all__ = [
    'parser',
    'invoice',
    'session',
    'utils'
]
