"""Base types and utilities for the BibTeX reader."""

from collections.abc import Callable
from pathlib import Path
from typing import NamedTuple

from bibmerge.models import BibRecord

# Diagnostic sink: receives one human-readable message per problem.
ErrorSink = Callable[[str], None]


class ParseResult(NamedTuple):
    """Result of parsing BibTeX text.

    Supports tuple unpacking: ``records, warnings, errors = parse_bibtex(...)``.

    Attributes
    ----------
    records : list[BibRecord]
        Parsed records.
    warnings : list[str]
        Warning messages (skipped special blocks).
    errors : list[str]
        Error messages (malformed blocks that were skipped).
    """

    records: list[BibRecord]
    warnings: list[str]
    errors: list[str]


def detect_encoding(file_bytes: bytes) -> str:
    """Detect encoding of file bytes using deterministic strategy.

    Parameters
    ----------
    file_bytes : bytes
        Complete file content as bytes.

    Returns
    -------
    str
        Detected encoding (utf-8-sig, utf-8 or latin-1).
    """
    if file_bytes.startswith(b"\xef\xbb\xbf"):
        return "utf-8-sig"

    try:
        file_bytes.decode("utf-8")
        return "utf-8"
    except UnicodeDecodeError:
        pass

    return "latin-1"


def normalize_line_endings(content: str) -> str:
    """Normalize line endings to LF."""
    content = content.replace("\r\n", "\n")
    return content.replace("\r", "\n")


def read_lines(file_path: Path) -> list[str]:
    """Read a text file as LF-split lines with encoding detection.

    Parameters
    ----------
    file_path : Path
        File to read.

    Returns
    -------
    list[str]
        Decoded lines without newline characters.
    """
    file_bytes = file_path.read_bytes()
    content = file_bytes.decode(detect_encoding(file_bytes))
    return normalize_line_endings(content).split("\n")
