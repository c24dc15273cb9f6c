"""Exception taxonomy for bibmerge.

Only ``ParseError`` escapes the public API (in strict mode). The other
errors are raised internally and recovered where they occur: a malformed
entry is reported and skipped, an unavailable provider contributes no
results, unparseable venue text leaves the venue fields absent.
"""

__all__ = [
    "BibmergeError",
    "MalformedRecordError",
    "ParseError",
    "ProviderUnavailableError",
    "UnparseableExternalTextError",
]


class BibmergeError(Exception):
    """Base class for all bibmerge errors."""


class MalformedRecordError(BibmergeError):
    """Raised when an entry map cannot be split into a consistent record."""


class ProviderUnavailableError(BibmergeError):
    """Raised by a fetcher on connection failure, timeout or unknown host."""


class UnparseableExternalTextError(BibmergeError):
    """Raised when external venue text matches none of the known patterns."""

    def __init__(self, kind: str, text: str) -> None:
        """Initialize error.

        Parameters
        ----------
        kind : str
            Pattern family that was tried ("conference" or "journal").
        text : str
            Offending text.
        """
        super().__init__(f"Could not extract {kind} venue information from [{text}]")
        self.kind = kind
        self.text = text


class ParseError(BibmergeError):
    """Raised when parsing a file fails in strict mode."""

    def __init__(
        self,
        message: str,
        file: str | None = None,
    ) -> None:
        """Initialize parse error.

        Parameters
        ----------
        message : str
            Error message.
        file : str | None, optional
            File where error occurred.
        """
        super().__init__(message)
        self.file = file
