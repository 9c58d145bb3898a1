"""
Scan Session Module.

This module provides the ScanSession class that feeds a stream of OCR
fragments, such as the text recognized in consecutive camera frames,
into one Invoice until it is complete.

Operations:
    - Parse each fragment into the invoice
    - Log every newly decoded field
    - Collect checksum rejections
    - Stop on completion, on exhaustion or after a fragment limit
"""

from datetime import datetime
from itertools import islice
from typing import Iterable, List, Optional

from config import get_config
from ..invoice.fields import Field, ParseEvent, field_names
from ..invoice.invoice import Invoice
from ..utils.logger import get_logger
from .scan_result import ScanResult

logger = get_logger(__name__)


class ScanSession:
    """
    Drives one invoice through a sequence of OCR fragments.

    A session owns its invoice and is meant to be used from a single
    scanning loop; it does no locking of its own.

    Attributes:
        invoice: The Invoice being filled in
        stop_when_complete: Stop reading once the invoice is complete
        max_fragments: Maximum fragments read by one scan, None for no limit

    Example:
        >>> session = ScanSession()
        >>> result = session.scan(["H  #79927398713  #  ", "#  100  00 8 >  90001193#41#"])
        >>> result.complete
        True
    """

    def __init__(
        self,
        invoice: Optional[Invoice] = None,
        stop_when_complete: Optional[bool] = None,
        max_fragments: Optional[int] = None
    ) -> None:
        """
        Initialize the session, reading unset options from configuration.

        Args:
            invoice: Invoice to fill in; a new one is created if omitted.
            stop_when_complete: Overrides scanner.stop_when_complete.
            max_fragments: Overrides scanner.max_fragments.
        """
        if invoice is None:
            invoice = Invoice(
                bankgiro_document_types=get_config(
                    "presenter.bankgiro_document_types",
                    [41, 42]
                )
            )
        self.invoice = invoice

        if stop_when_complete is None:
            stop_when_complete = get_config("scanner.stop_when_complete", True)
        self.stop_when_complete = bool(stop_when_complete)

        if max_fragments is None:
            max_fragments = get_config("scanner.max_fragments")
        if max_fragments is not None and max_fragments < 1:
            raise ValueError(f"max_fragments must be positive, got {max_fragments}")
        self.max_fragments = max_fragments

        self._fragments_read = 0
        self._fragments_advanced = 0
        self._rejections: List[ParseEvent] = []
        logger.debug(
            f"ScanSession initialized (stop_when_complete={self.stop_when_complete}, "
            f"max_fragments={self.max_fragments})"
        )

    @property
    def fragments_read(self) -> int:
        """Fragments fed into the invoice over the life of the session."""
        return self._fragments_read

    def feed(self, fragment: str) -> Field:
        """
        Parse one fragment into the invoice.

        Args:
            fragment: OCR text.

        Returns:
            The fields changed by this fragment.
        """
        was_complete = self.invoice.is_complete()
        decoded = self.invoice.parse(fragment)
        self._fragments_read += 1

        self._rejections.extend(self.invoice.checksum_failures)

        if decoded:
            self._fragments_advanced += 1
            logger.info(
                f"Fragment {self._fragments_read}: decoded "
                f"{', '.join(field_names(decoded))}"
            )
            if self.invoice.is_complete() and not was_complete:
                logger.info(f"Invoice complete: {self.invoice!r}")

        return decoded

    def scan(self, fragments: Iterable[str]) -> ScanResult:
        """
        Feed fragments until the invoice is complete or input runs out.

        Each call returns a new ScanResult covering only the fragments read
        by that call. At most max_fragments are taken from the input, so an
        iterator stopped at the limit still holds every unread fragment.

        Args:
            fragments: OCR fragments in the order they were recognized.

        Returns:
            ScanResult describing the scan and the final invoice.
        """
        result = ScanResult()
        read_before = self._fragments_read
        advanced_before = self._fragments_advanced
        rejected_before = len(self._rejections)

        if self.stop_when_complete and self.invoice.is_complete():
            stop_reason = "complete"
        else:
            stop_reason = "exhausted"
            for fragment in islice(fragments, self.max_fragments):
                self.feed(fragment)
                if self.stop_when_complete and self.invoice.is_complete():
                    stop_reason = "complete"
                    break
            else:
                read = self._fragments_read - read_before
                if self.max_fragments is not None and read >= self.max_fragments:
                    stop_reason = "limit"

        result.fragments_read = self._fragments_read - read_before
        result.fragments_advanced = self._fragments_advanced - advanced_before
        result.rejections = self._rejections[rejected_before:]
        return self._finish(result, stop_reason)

    def _finish(self, result: ScanResult, stop_reason: str) -> ScanResult:
        result.stop_reason = stop_reason
        result.complete = self.invoice.is_complete()
        result.invoice = self.invoice.to_dict()
        result.finished_at = datetime.now().isoformat()

        if result.complete:
            logger.info(
                f"Scan finished after {result.fragments_read} fragments ({stop_reason})"
            )
        else:
            logger.warning(
                f"Scan finished after {result.fragments_read} fragments ({stop_reason}), "
                f"missing: {', '.join(self.invoice.missing_fields())}"
            )
        return result
