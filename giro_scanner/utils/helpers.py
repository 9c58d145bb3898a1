"""
Helper Utilities Module.

This module provides small utility functions shared by the parser,
the invoice model and the command-line driver.

Functions:
    - is_digit_string: Check that a value is a non-empty run of ASCII digits
    - read_fragments: Yield text fragments from a file or stdin
"""

import sys
from pathlib import Path
from typing import Iterator, Optional, TextIO, Union

from .exceptions import FragmentSourceNotFoundError

STDIN_MARKER = "-"

_ASCII_DIGITS = frozenset("0123456789")


def is_digit_string(value) -> bool:
    """
    Check whether a value is a non-empty string of ASCII digits.

    str.isdigit() also accepts superscripts and other Unicode digits,
    which never occur on a giro slip.

    Example:
        >>> is_digit_string("0123")
        True
        >>> is_digit_string("12a")
        False
        >>> is_digit_string("")
        False
    """
    return isinstance(value, str) and bool(value) and set(value) <= _ASCII_DIGITS


def read_fragments(
    source: Union[str, Path],
    strip: bool = True,
    stdin: Optional[TextIO] = None
) -> Iterator[str]:
    """
    Read text fragments, one per line, from a file or from stdin.

    Blank lines are skipped. Other whitespace is kept, the giro
    grammars use it to delimit fields.

    Args:
        source: Path to a UTF-8 text file, or "-" for stdin.
        strip: Remove the line terminator from each line.
        stdin: Stream used for "-", defaults to sys.stdin.

    Returns:
        An iterator over the text fragments in input order. A missing
        file is reported before any fragment is read.

    Raises:
        FragmentSourceNotFoundError: If the file does not exist.

    Example:
        >>> for fragment in read_fragments("scan.txt"):
        ...     invoice.parse(fragment)
    """
    if str(source) == STDIN_MARKER:
        return _iter_lines(stdin or sys.stdin, strip)

    path = Path(source)
    if not path.is_file():
        raise FragmentSourceNotFoundError(str(path))

    return _iter_file(path, strip)


def _iter_file(path: Path, strip: bool) -> Iterator[str]:
    with open(path, "r", encoding="utf-8") as f:
        yield from _iter_lines(f, strip)


def _iter_lines(stream: TextIO, strip: bool) -> Iterator[str]:
    for line in stream:
        fragment = line.rstrip("\r\n") if strip else line
        if fragment.strip():
            yield fragment
