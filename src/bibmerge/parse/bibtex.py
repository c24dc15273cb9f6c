"""BibTeX format parser.

Entries: @<entrytype>{citekey, field = {value}, ...}
Special entries (@STRING, @PREAMBLE, @COMMENT) are skipped.
Reference: http://www.bibtex.org/Format/

Parsing is a generator over entries. A malformed entry is reported to the
caller's error sink and skipped; the remaining entries are still produced.
"""

import re
from collections.abc import Iterator
from pathlib import Path

from bibmerge.errors import MalformedRecordError, ParseError
from bibmerge.models import BibRecord, EntryType
from bibmerge.parse.base import ErrorSink, ParseResult, normalize_line_endings, read_lines

ENTRY_CANDIDATE_PATTERN = re.compile(r"^[ \t]*@", re.MULTILINE)
ENTRY_START_PATTERN = re.compile(r"@\s*(\w+)\s*([{(])")
FIELD_NAME_PATTERN = re.compile(r"([\w\-:.]+)\s*=\s*")
LINE_BREAK_PATTERN = re.compile(r"\s*\n\s*")

SPECIAL_ENTRIES = frozenset({"string", "preamble", "comment"})

_CLOSERS = {"{": "}", "(": ")"}


def _ignore(_: str) -> None:
    return None


def iter_entries(
    lines: list[str],
    on_error: ErrorSink,
    on_warning: ErrorSink | None = None,
) -> Iterator[BibRecord]:
    """Yield the records of BibTeX text, one per regular entry.

    Parameters
    ----------
    lines : list[str]
        Text content as lines (no newline characters).
    on_error : ErrorSink
        Receives a message for every malformed entry; the entry is skipped.
    on_warning : ErrorSink | None, optional
        Receives a message for skipped special entries and duplicate fields.

    Yields
    ------
    BibRecord
        Parsed records, in file order.
    """
    warn = on_warning or _ignore
    content = "\n".join(lines)
    pos = 0

    while True:
        candidate = ENTRY_CANDIDATE_PATTERN.search(content, pos)
        if candidate is None:
            return

        at = candidate.end() - 1
        line_no = _line_of(content, at)
        header = ENTRY_START_PATTERN.match(content, at)
        if not header:
            eol = content.find("\n", at)
            snippet = content[at:] if eol == -1 else content[at:eol]
            on_error(f"Line {line_no}: Malformed entry start: {snippet[:50]}")
            pos = at + 1
            continue

        entry_name = header.group(1).lower()
        open_idx = header.end() - 1
        close_idx = _find_closing(content, open_idx)

        if close_idx == -1:
            on_error(f"Line {line_no}: Unclosed entry @{entry_name}")
            pos = header.end()
            continue

        pos = close_idx + 1

        if entry_name in SPECIAL_ENTRIES:
            warn(f"Line {line_no}: Skipping @{entry_name.upper()} entry")
            continue

        body = content[header.end() : close_idx]
        comma = body.find(",")
        if comma == -1:
            citekey, fields_text = body.strip(), ""
        else:
            citekey, fields_text = body[:comma].strip(), body[comma + 1 :]

        if any(c.isspace() or c in "{}=" for c in citekey):
            on_error(f"Line {line_no}: Malformed citation key in @{entry_name}: {citekey[:50]}")
            continue

        def field_warning(message: str, line_no: int = line_no, citekey: str = citekey) -> None:
            warn(f"Line {line_no}: {message} in {citekey}")

        entry_map: dict[str, str] = {}
        for field_name, value in _parse_fields(fields_text, field_warning):
            if field_name in entry_map:
                warn(f"Line {line_no}: Duplicate field '{field_name}' in {citekey}, keeping first")
                continue
            entry_map[field_name] = value

        entry_type = EntryType.from_name(entry_name)
        if entry_type is None:
            warn(f"Line {line_no}: Unknown entry type @{entry_name}, treating as misc")

        try:
            yield BibRecord.from_entry_map(entry_type, citekey or None, entry_map)
        except MalformedRecordError as e:
            on_error(f"Line {line_no}: {e}")


def parse_bibtex(text: str) -> ParseResult:
    """Parse BibTeX text and collect records, warnings and errors.

    Parameters
    ----------
    text : str
        BibTeX content.

    Returns
    -------
    ParseResult
        Records, warnings, and errors.
    """
    warnings: list[str] = []
    errors: list[str] = []
    lines = normalize_line_endings(text).split("\n")
    records = list(iter_entries(lines, errors.append, warnings.append))
    return ParseResult(records, warnings, errors)


def parse_bibtex_file(
    path: str | Path,
    *,
    strict: bool = False,
) -> ParseResult:
    """Parse a BibTeX file.

    Parameters
    ----------
    path : str | Path
        File to parse.
    strict : bool, optional
        If True, raise ParseError when any entry is malformed, by default False.

    Returns
    -------
    ParseResult
        Records, warnings, and errors.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ParseError
        If ``strict`` and the file has malformed entries.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    warnings: list[str] = []
    errors: list[str] = []
    records = list(iter_entries(read_lines(file_path), errors.append, warnings.append))

    if errors and strict:
        raise ParseError(
            f"Failed to parse {file_path.name}: {'; '.join(errors)}",
            file=str(file_path),
        )

    return ParseResult(records, warnings, errors)


def _line_of(content: str, index: int) -> int:
    return content.count("\n", 0, index) + 1


def _find_closing(content: str, open_idx: int) -> int:
    """Index of the delimiter closing the entry opened at ``open_idx``, or -1."""
    opener = content[open_idx]
    closer = _CLOSERS[opener]
    brace_depth = 0
    in_quotes = False
    escape_next = False

    for i in range(open_idx + 1, len(content)):
        char = content[i]
        if escape_next:
            escape_next = False
            continue

        if char == "\\":
            escape_next = True
            continue

        # Quotes only delimit values at the top level of the entry
        if char == '"' and brace_depth == 0:
            in_quotes = not in_quotes
        elif char == "{":
            brace_depth += 1
        elif char == "}":
            if brace_depth == 0 and closer == "}" and not in_quotes:
                return i
            brace_depth -= 1
            if brace_depth < 0:
                return -1
        elif char == closer and brace_depth == 0 and not in_quotes:
            return i

    return -1


def _parse_fields(content: str, warn: ErrorSink) -> list[tuple[str, str]]:
    """Field name/value pairs of an entry body, in order.

    Only the first part of a ``#`` concatenation is kept; the rest of the
    value is skipped with a warning.
    """
    fields: list[tuple[str, str]] = []

    i = 0
    while i < len(content):
        # Skip whitespace and separators
        while i < len(content) and (content[i].isspace() or content[i] == ","):
            i += 1
        if i >= len(content):
            break

        field_match = FIELD_NAME_PATTERN.match(content, i)
        if not field_match:
            i += 1
            continue

        field_name = field_match.group(1).lower()
        i = field_match.end()
        if i >= len(content):
            break

        # Parse value based on delimiter
        if content[i] == "{":
            value, i = _parse_braced_value(content, i)
        elif content[i] == '"':
            value, i = _parse_quoted_value(content, i)
        else:
            value, i = _parse_bare_value(content, i)

        following = _skip_spaces(content, i)
        if following < len(content) and content[following] == "#":
            warn(f"Dropped '#' concatenation after field '{field_name}'")
            i = _end_of_value(content, following)

        fields.append((field_name, LINE_BREAK_PATTERN.sub(" ", value.strip())))

    return fields


def _parse_braced_value(content: str, start: int) -> tuple[str, int]:
    brace_depth = 0
    value_chars: list[str] = []
    i = start

    while i < len(content):
        char = content[i]
        if char == "\\" and i + 1 < len(content):
            # Escaped braces do not nest
            value_chars.append(content[i : i + 2])
            i += 2
            continue
        if char == "{":
            brace_depth += 1
            if brace_depth > 1:
                value_chars.append(char)
        elif char == "}":
            brace_depth -= 1
            if brace_depth == 0:
                return "".join(value_chars), i + 1
            value_chars.append(char)
        else:
            value_chars.append(char)
        i += 1

    return "".join(value_chars), i


def _parse_quoted_value(content: str, start: int) -> tuple[str, int]:
    i = start + 1  # skip opening quote
    value_chars: list[str] = []
    brace_depth = 0

    while i < len(content):
        char = content[i]
        if char == "\\" and i + 1 < len(content):
            # Keep LaTeX escapes verbatim
            value_chars.append(content[i : i + 2])
            i += 2
            continue
        if char == "{":
            brace_depth += 1
        elif char == "}":
            brace_depth -= 1
        elif char == '"' and brace_depth == 0:
            return "".join(value_chars), i + 1
        value_chars.append(char)
        i += 1

    return "".join(value_chars), i


def _parse_bare_value(content: str, start: int) -> tuple[str, int]:
    value_chars: list[str] = []
    i = start

    while i < len(content) and content[i] not in ",\n}#":
        value_chars.append(content[i])
        i += 1

    return "".join(value_chars).strip(), i


def _skip_spaces(content: str, i: int) -> int:
    while i < len(content) and content[i].isspace():
        i += 1
    return i


def _end_of_value(content: str, start: int) -> int:
    """Index of the comma ending the value that continues at ``start``."""
    brace_depth = 0
    in_quotes = False
    i = start
    while i < len(content):
        char = content[i]
        if char == "\\":
            i += 2
            continue
        if char == '"' and brace_depth == 0:
            in_quotes = not in_quotes
        elif char == "{":
            brace_depth += 1
        elif char == "}":
            brace_depth -= 1
        elif char == "," and brace_depth == 0 and not in_quotes:
            return i
        i += 1
    return len(content)
