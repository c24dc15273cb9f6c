"""Helper functions and compiled regex patterns for normalization."""

import re
import unicodedata

# Pre-compiled regex patterns
YEAR_DIGITS_RE = re.compile(r"^\s*(\d+)\s*$")
NON_KEY_CHAR_RE = re.compile(r"[^A-Za-z0-9]")
PERSON_SEPARATOR = " and "


def strip_accents(text: str) -> str:
    """Remove diacritical marks for ASCII transliteration.

    Parameters
    ----------
    text : str
        Input text with potential diacritics.

    Returns
    -------
    str
        Text with diacritical marks removed.
    """
    nfd = unicodedata.normalize("NFD", text)
    stripped = "".join(c for c in nfd if unicodedata.category(c) != "Mn")
    return unicodedata.normalize("NFC", stripped)


def key_friendly(text: str) -> str:
    """Transliterate to ASCII and keep only letters and digits.

    Parameters
    ----------
    text : str
        Plain (already de-LaTeXed) text.

    Returns
    -------
    str
        ASCII letters and digits of ``text``, in order.
    """
    return NON_KEY_CHAR_RE.sub("", strip_accents(text))


def split_persons(value: str) -> list[str]:
    """Split a person-field value on the literal ``" and "`` separator.

    Surrounding whitespace is stripped and empty names are dropped.
    """
    return [name.strip() for name in value.split(PERSON_SEPARATOR) if name.strip()]
