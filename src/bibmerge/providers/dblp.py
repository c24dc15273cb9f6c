"""DBLP search provider.

Queries the DBLP publication search API and turns each hit into an
inproceedings or article record. Hits come in two shapes:

- legacy: ``{"@score": 180, "title": {"dblp:authors": ..., "dblp:title": ...,
  "dblp:venue": ..., "dblp:type": ..., "dblp:year": ...}}`` where the venue is a
  single free-text string such as ``"POPL 2012:103-111"``;
- current: ``{"@score": "7", "info": {"authors": ..., "title": ..., "venue": ...,
  "type": "Journal Articles", "year": ..., "volume": ..., "pages": ...}}``.

Parsing is permissive: a field that cannot be extracted is left absent, and a
hit that yields no usable record is skipped.
"""

import json
import math
from collections.abc import Iterator, Sequence
from typing import Any
from urllib.parse import urlencode

from bibmerge.errors import (
    MalformedRecordError,
    ProviderUnavailableError,
    UnparseableExternalTextError,
)
from bibmerge.models import BibRecord, EntryType, SearchResult
from bibmerge.normalize.text import from_unicode
from bibmerge.normalize.venue import (
    cleanup_pages,
    cleanup_title,
    is_corr_venue,
    parse_conference_venue,
    parse_journal_venue,
)
from bibmerge.parse.base import ErrorSink
from bibmerge.providers.base import Fetcher
from bibmerge.providers.http import fetch_text

__all__ = ["DblpSearchProvider", "DBLP_SOURCE", "DEFAULT_DBLP_URL", "parse_dblp_response"]

DBLP_SOURCE = "dblp"
DEFAULT_DBLP_URL = "https://dblp.org/search/publ/api"

# Raw DBLP scores are divided by this to land in [0, 1]
SCORE_SCALE = 200.0

# Current API type labels
_INFO_TYPES: dict[str, EntryType] = {
    "conference and workshop papers": EntryType.INPROCEEDINGS,
    "journal articles": EntryType.ARTICLE,
}

# Identifiers are compared textually and kept exactly as served
VERBATIM_FIELDS = frozenset({"doi", "dblp", "link"})


def _ignore(_: str) -> None:
    return None


class DblpSearchProvider:
    """Search provider backed by the DBLP publication search API.

    Parameters
    ----------
    fetch : Fetcher, optional
        Transport, by default :func:`bibmerge.providers.http.fetch_text`.
    base_url : str, optional
        Search endpoint.
    max_hits : int, optional
        Number of hits requested, by default 10.
    timeout : float, optional
        Request timeout in seconds, by default 3.0.
    on_warning : ErrorSink | None, optional
        Receives messages for network failures and unparseable data.
    """

    source = DBLP_SOURCE

    def __init__(
        self,
        fetch: Fetcher = fetch_text,
        *,
        base_url: str = DEFAULT_DBLP_URL,
        max_hits: int = 10,
        timeout: float = 3.0,
        on_warning: ErrorSink | None = None,
    ) -> None:
        self._fetch = fetch
        self.base_url = base_url
        self.max_hits = max_hits
        self.timeout = timeout
        self._warn = on_warning or _ignore

    def build_url(self, terms: Sequence[str]) -> str:
        """Search URL for the given terms."""
        query = urlencode(
            {"q": " ".join(terms), "h": self.max_hits, "c": 4, "f": 0, "format": "json"}
        )
        return f"{self.base_url}?{query}"

    def search(self, terms: Sequence[str]) -> list[SearchResult]:
        """Query DBLP; network failures produce a warning and no results."""
        if not terms:
            return []
        try:
            text = self._fetch(self.build_url(terms), self.timeout)
        except ProviderUnavailableError as e:
            self._warn(f"DBLP unavailable: {e}")
            return []
        return parse_dblp_response(text, self._warn)


def parse_dblp_response(text: str, on_warning: ErrorSink | None = None) -> list[SearchResult]:
    """Convert a DBLP JSON response into search results.

    Parameters
    ----------
    text : str
        Response body.
    on_warning : ErrorSink | None, optional
        Receives messages for malformed JSON and unparseable hits.

    Returns
    -------
    list[SearchResult]
        Results in response order.
    """
    warn = on_warning or _ignore
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        warn(f"DBLP responded with malformed JSON: {e}")
        return []

    results: list[SearchResult] = []
    for hit in _find_hits(data):
        record = _hit_to_record(hit, warn)
        if record is not None:
            results.append(
                SearchResult(record=record, sources=frozenset({DBLP_SOURCE}), score=_score_of(hit))
            )
    return results


def _find_hits(node: Any) -> Iterator[dict]:
    """Every ``hit`` object anywhere in the document, in document order."""
    if isinstance(node, dict):
        for name, value in node.items():
            if name == "hit":
                hits = value if isinstance(value, list) else [value]
                yield from (h for h in hits if isinstance(h, dict))
            else:
                yield from _find_hits(value)
    elif isinstance(node, list):
        for item in node:
            yield from _find_hits(item)


def _score_of(hit: dict) -> float:
    raw = hit.get("@score")
    try:
        score = float(raw) / SCORE_SCALE
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(score):
        return 0.0
    return min(max(score, 0.0), 1.0)


def _text_of(value: Any) -> str | None:
    """String content of a JSON value that may be a ``{"text": ...}`` object."""
    if isinstance(value, dict):
        value = value.get("text")
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        text = str(value).strip()
        return text or None
    return None


def _names_of(value: Any) -> list[str]:
    if isinstance(value, dict):
        # {"dblp:author": [...]} / {"author": [...]} or a single {"text": ...}
        inner = value.get("dblp:author", value.get("author"))
        if inner is not None:
            return _names_of(inner)
    items = value if isinstance(value, list) else [value]
    return [name for name in (_text_of(item) for item in items) if name]


def _hit_to_record(hit: dict, warn: ErrorSink) -> BibRecord | None:
    legacy = hit.get("title")
    info = hit.get("info")
    try:
        if isinstance(legacy, dict):
            entry_map = _legacy_entry_map(legacy, warn)
        elif isinstance(info, dict):
            entry_map = _info_entry_map(info)
        else:
            return None
        if entry_map is None:
            return None
        entry_type, fields = entry_map
        return BibRecord.from_entry_map(entry_type, None, fields)
    except MalformedRecordError as e:
        warn(f"Skipping DBLP hit: {e}")
        return None


def _common_fields(authors: list[str], title: str | None) -> dict[str, str]:
    fields: dict[str, str] = {}
    if authors:
        fields["author"] = " and ".join(authors)
    if title:
        fields["title"] = cleanup_title(title)
    return fields


def _legacy_entry_map(
    title_obj: dict, warn: ErrorSink
) -> tuple[EntryType, dict[str, str]] | None:
    entry_type = EntryType.from_name(_text_of(title_obj.get("dblp:type")))
    if entry_type not in (EntryType.INPROCEEDINGS, EntryType.ARTICLE):
        return None

    title_value = title_obj.get("dblp:title")
    fields = _common_fields(_names_of(title_obj.get("dblp:authors")), _text_of(title_value))
    if isinstance(title_value, dict) and _text_of(title_value.get("@ee")):
        fields["link"] = _text_of(title_value.get("@ee"))
    year = _text_of(title_obj.get("dblp:year"))
    if year:
        fields["year"] = year

    venue = _text_of(title_obj.get("dblp:venue"))
    if entry_type is EntryType.ARTICLE and venue and is_corr_venue(venue):
        return None
    if venue:
        try:
            if entry_type is EntryType.INPROCEEDINGS:
                info = parse_conference_venue(venue)
                fields.update(info.as_fields("booktitle"))
            else:
                info = parse_journal_venue(venue)
                fields.update(info.as_fields("journal"))
        except UnparseableExternalTextError as e:
            warn(str(e))
    return entry_type, _formatted(fields)


def _info_entry_map(info: dict) -> tuple[EntryType, dict[str, str]] | None:
    label = (_text_of(info.get("type")) or "").lower()
    entry_type = _INFO_TYPES.get(label)
    if entry_type is None:
        return None

    venue_value = info.get("venue")
    if isinstance(venue_value, list):
        venue_value = venue_value[0] if venue_value else None
    venue = _text_of(venue_value)
    if entry_type is EntryType.ARTICLE and venue and is_corr_venue(venue):
        return None

    fields = _common_fields(_names_of(info.get("authors")), _text_of(info.get("title")))
    if venue:
        fields["booktitle" if entry_type is EntryType.INPROCEEDINGS else "journal"] = venue
    for name in ("year", "volume", "number", "doi"):
        value = _text_of(info.get(name))
        if value:
            fields[name] = value
    pages = _text_of(info.get("pages"))
    if pages:
        fields["pages"] = cleanup_pages(pages)
    if _text_of(info.get("key")):
        fields["dblp"] = _text_of(info.get("key"))
    if _text_of(info.get("ee")):
        fields["link"] = _text_of(info.get("ee"))
    return entry_type, _formatted(fields)


def _formatted(fields: dict[str, str]) -> dict[str, str]:
    return {
        name: value if name in VERBATIM_FIELDS else from_unicode(value)
        for name, value in fields.items()
    }
