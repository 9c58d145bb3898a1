#!/usr/bin/env python3
"""
Giro Scanner - Main Entry Point.

Reads OCR fragments of a Bankgiro/Plusgiro payment slip, one per line,
and accumulates the reference number, amount and giro account until the
invoice is complete.

Usage:
    Command Line:
        python main.py --input frames.txt
        some-ocr-tool | python main.py --input - --json

    Python:
        from main import run_scan
        result = run_scan("frames.txt")

Exit codes:
    0 - invoice complete
    1 - input or configuration error
    2 - fragments exhausted before the invoice was complete
"""

import argparse
import logging
import sys
from typing import List, Optional

from config import ConfigurationManager, get_config
from giro_scanner.invoice.invoice import Invoice
from giro_scanner.session import ScanResult, ScanSession
from giro_scanner.utils.exceptions import ConfigurationError, InputError
from giro_scanner.utils.helpers import read_fragments
from giro_scanner.utils.logger import LOGGER_NAMESPACE, get_logger, setup_logger_from_config

EXIT_COMPLETE = 0
EXIT_ERROR = 1
EXIT_INCOMPLETE = 2


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Argument list, sys.argv[1:] if None.

    Returns:
        Parsed argument namespace.
    """
    parser = argparse.ArgumentParser(
        description="Extract payment fields from giro slip OCR lines",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    Scan a file of recognized lines:
        python main.py --input frames.txt

    Read from a pipe and print JSON:
        ocr-capture | python main.py --input - --json
        """
    )

    parser.add_argument(
        "--input", "-i",
        type=str,
        required=True,
        help="Text file with one OCR fragment per line, or '-' for stdin"
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to custom configuration file"
    )

    # Scanning options
    parser.add_argument(
        "--all",
        action="store_true",
        help="Read every fragment even after the invoice is complete"
    )

    parser.add_argument(
        "--max-fragments",
        type=int,
        default=None,
        help="Stop after this many fragments"
    )

    # Output options
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the scan result as JSON"
    )

    # Logging options
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )

    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Only log warnings and errors"
    )

    return parser.parse_args(argv)


def initialize_system(args: argparse.Namespace) -> ConfigurationManager:
    """
    Initialize configuration and logging.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Initialized configuration manager.
    """
    if args.config:
        ConfigurationManager.reset()
    config = ConfigurationManager(args.config)

    logger = setup_logger_from_config()

    if args.debug:
        logging.getLogger(LOGGER_NAMESPACE).setLevel(logging.DEBUG)
        for handler in logger.handlers:
            handler.setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger(LOGGER_NAMESPACE).setLevel(logging.WARNING)

    logger.info(f"Giro scanner {config.get('project.version', '1.0.0')}")
    logger.info(f"Input: {args.input}")

    return config


def run_scan(
    input_path: str,
    stop_when_complete: Optional[bool] = None,
    max_fragments: Optional[int] = None,
    invoice: Optional[Invoice] = None
) -> ScanResult:
    """
    Scan every fragment of a file, or stdin, into one invoice.

    Args:
        input_path: Path to a text file, or "-" for stdin.
        stop_when_complete: Overrides scanner.stop_when_complete.
        max_fragments: Overrides scanner.max_fragments.
        invoice: Invoice to continue filling in.

    Returns:
        ScanResult of the session.

    Raises:
        FragmentSourceNotFoundError: If the input file does not exist.

    Example:
        >>> result = run_scan("frames.txt")
        >>> result.invoice['formatted_account']
        '9000-1193'
    """
    strip = get_config("scanner.strip_fragments", True)
    session = ScanSession(
        invoice=invoice,
        stop_when_complete=stop_when_complete,
        max_fragments=max_fragments
    )
    return session.scan(read_fragments(input_path, strip=strip))


def format_text_report(result: ScanResult) -> str:
    """
    Render a scan result for the terminal.

    Args:
        result: Result of a scan.

    Returns:
        Multi-line human readable summary.
    """
    fields = result.invoice
    account = fields.get('formatted_account') or "-"
    if fields.get('type'):
        account = f"{fields['type']} {account}"
    amount = fields.get('formatted_amount')

    lines = [
        f"Reference:  {fields.get('reference') or '-'}",
        f"Amount:     {amount + ' SEK' if amount else '-'}",
        f"Account:    {account}",
        f"Status:     {'complete' if result.complete else 'incomplete'}",
        f"Fragments:  {result.fragments_read} read, "
        f"{result.fragments_advanced} advanced, "
        f"{result.rejection_count} rejected",
    ]
    if not result.complete:
        lines.append(f"Missing:    {', '.join(fields.get('missing_fields', []))}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function - entry point for command-line execution.

    Returns:
        Exit code, see the module docstring.
    """
    args = parse_arguments(argv)

    try:
        initialize_system(args)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ERROR

    logger = get_logger(__name__)

    if args.max_fragments is not None and args.max_fragments < 1:
        logger.error("--max-fragments must be a positive number")
        return EXIT_ERROR

    try:
        result = run_scan(
            args.input,
            stop_when_complete=False if args.all else None,
            max_fragments=args.max_fragments
        )
    except InputError as e:
        logger.error(str(e))
        return EXIT_ERROR

    output_format = "json" if args.json else get_config("output.format", "text")
    if output_format == "json":
        print(result.to_json())
    else:
        print(format_text_report(result))

    return EXIT_COMPLETE if result.complete else EXIT_INCOMPLETE


if __name__ == "__main__":
    sys.exit(main())
