"""Conversion between formatted field text and plain Unicode text.

Field values are stored as *formatted text*: the LaTeX source exactly as it
appears in a BibTeX file. Text coming from Unicode sources (JSON APIs) is
converted into formatted text on import, and formatted text is converted to
plain text only for display and key generation.
"""

from pylatexenc.latex2text import LatexNodes2Text
from pylatexenc.latexencode import unicode_to_latex

__all__ = ["from_unicode", "to_plain", "escape_latex"]

_LATEX_TO_TEXT = LatexNodes2Text()

# ASCII characters with a meaning in LaTeX markup
_SPECIAL_CHAR_ESCAPES = {
    "&": r"\&",
    "%": r"\%",
    "#": r"\#",
    "$": r"\$",
    "_": r"\_",
    "^": r"\^{}",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "\\": r"\textbackslash{}",
}


def from_unicode(text: str) -> str:
    """Convert Unicode text to formatted text.

    LaTeX special characters are escaped (``"{"`` -> ``"\\{"``) and
    non-ASCII characters become LaTeX macros protected by braces
    (``"é"`` -> ``"{\\'e}"``), so the result is balanced markup whatever
    the input.

    Parameters
    ----------
    text : str
        Plain Unicode text.

    Returns
    -------
    str
        Formatted (LaTeX) text.
    """
    escaped = "".join(_SPECIAL_CHAR_ESCAPES.get(char, char) for char in text)
    return escape_latex(escaped)


def escape_latex(value: str) -> str:
    """Escape the non-ASCII characters of a value for BibTeX output.

    Already-escaped ASCII LaTeX passes through unchanged, so escaping is
    idempotent on stored values.
    """
    if value.isascii():
        return value
    return unicode_to_latex(
        value,
        non_ascii_only=True,
        replacement_latex_protection="braces",
        unknown_char_policy="keep",
        unknown_char_warning=False,
    )


def to_plain(value: str) -> str:
    """Render formatted text as plain Unicode (accents decoded, braces dropped).

    Parameters
    ----------
    value : str
        Formatted (LaTeX) text.

    Returns
    -------
    str
        Plain text with whitespace collapsed.
    """
    if not value:
        return ""
    text = _LATEX_TO_TEXT.latex_to_text(value)
    return " ".join(text.split())
