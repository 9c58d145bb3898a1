"""
Scan Result Data Class.

This module defines the summary returned by ScanSession.scan(): how many
fragments were read, which of them advanced the invoice, which candidates
were rejected, and the invoice fields at the end of the scan.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional
import json

from ..invoice.fields import ParseEvent


@dataclass
class ScanResult:
    """
    Outcome of scanning a stream of OCR fragments into one invoice.

    Attributes:
        fragments_read: Number of fragments handed to the invoice
        fragments_advanced: Number of fragments that changed any field
        complete: Whether the invoice was complete when the scan stopped
        stop_reason: "complete", "exhausted" or "limit"
        invoice: Invoice.to_dict() snapshot taken when the scan stopped
        rejections: Checksum failures seen during the scan
        started_at: ISO timestamp of the start of the scan() call
        finished_at: ISO timestamp of the end of the scan

    Example:
        >>> result = session.scan(fragments)
        >>> if result.complete:
        ...     print(result.invoice['formatted_amount'])
    """
    fragments_read: int = 0
    fragments_advanced: int = 0
    complete: bool = False
    stop_reason: str = "exhausted"
    invoice: Dict[str, Any] = field(default_factory=dict)
    rejections: List[ParseEvent] = field(default_factory=list)
    started_at: Optional[str] = None
    finished_at: Optional[str] = None

    def __post_init__(self):
        if self.started_at is None:
            self.started_at = datetime.now().isoformat()

    @property
    def rejection_count(self) -> int:
        return len(self.rejections)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to dictionary format.

        Returns:
            Dictionary representation of the scan result.
        """
        return {
            'fragments_read': self.fragments_read,
            'fragments_advanced': self.fragments_advanced,
            'complete': self.complete,
            'stop_reason': self.stop_reason,
            'invoice': self.invoice,
            'rejections': [r.to_dict() for r in self.rejections],
            'started_at': self.started_at,
            'finished_at': self.finished_at
        }

    def to_json(self, indent: int = 2) -> str:
        """
        Convert to JSON string.

        Args:
            indent: JSON indentation level.

        Returns:
            JSON string representation.
        """
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        return (
            f"ScanResult("
            f"read={self.fragments_read}, "
            f"advanced={self.fragments_advanced}, "
            f"rejected={self.rejection_count}, "
            f"complete={self.complete})"
        )
