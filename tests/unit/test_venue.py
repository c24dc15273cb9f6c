"""Tests for normalization of external venue, title and page text."""

import pytest

from bibmerge.errors import UnparseableExternalTextError
from bibmerge.normalize.venue import (
    VenueInfo,
    cleanup_journal,
    cleanup_pages,
    cleanup_title,
    is_corr_venue,
    parse_conference_venue,
    parse_journal_venue,
)


@pytest.mark.unit
def test_journal_with_volume_number_pages() -> None:
    """Test the full journal pattern with abbreviation."""
    info = parse_journal_venue("Commun. ACM (CACM) 55(2):103-111 (2012)")

    assert info == VenueInfo(venue="CACM", year="2012", volume="55", number="2", pages="103--111")
    assert info.as_fields("journal") == {
        "journal": "CACM",
        "year": "2012",
        "volume": "55",
        "number": "2",
        "pages": "103--111",
    }


@pytest.mark.unit
@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (
            "Acta Inf. (ACTA) 1:271-281 (1972)",
            VenueInfo(venue="ACTA", year="1972", volume="1", pages="271--281"),
        ),
        (
            "Logical Methods in Computer Science (LMCS) 4(4) (2008)",
            VenueInfo(venue="LMCS", year="2008", volume="4", number="4"),
        ),
        (
            "J. Funct. Program. 22:1-40 (2012)",
            VenueInfo(venue="J. Funct. Program.", year="2012", volume="22", pages="1--40"),
        ),
    ],
)
def test_journal_fallback_patterns(text: str, expected: VenueInfo) -> None:
    """Test journal patterns without number or without pages."""
    assert parse_journal_venue(text) == expected


@pytest.mark.unit
def test_conference_venue() -> None:
    """Test conference venues with and without pages."""
    assert parse_conference_venue("POPL 2012:103-111") == VenueInfo(
        venue="POPL", year="2012", pages="103--111"
    )
    assert parse_conference_venue("TYPES 2004") == VenueInfo(venue="TYPES", year="2004")
    assert parse_conference_venue("ICFP 2010:").as_fields("booktitle") == {
        "booktitle": "ICFP",
        "year": "2010",
    }


@pytest.mark.unit
def test_unparseable_venue_raises() -> None:
    """Test text matching no pattern raises with the offending text."""
    with pytest.raises(UnparseableExternalTextError, match=r"\[Some Workshop\]") as exc_info:
        parse_conference_venue("Some Workshop")
    assert exc_info.value.kind == "conference"

    with pytest.raises(UnparseableExternalTextError):
        parse_journal_venue("Commun. ACM")


@pytest.mark.unit
def test_corr_detection() -> None:
    """Test arXiv venues are recognised."""
    assert is_corr_venue("CoRR abs/1201.0001 (2012)")
    assert not is_corr_venue("Commun. ACM (CACM) 55(2):103-111 (2012)")


@pytest.mark.unit
@pytest.mark.parametrize(
    ("pages", "expected"),
    [
        ("103-111", "103--111"),
        (" 103 - 111 ", "103--111"),
        ("103--111", "103--111"),
        ("e12", "e12"),
    ],
)
def test_cleanup_pages(pages: str, expected: str) -> None:
    """Test page ranges are normalized to a double dash."""
    assert cleanup_pages(pages) == expected


@pytest.mark.unit
def test_cleanup_journal_and_title() -> None:
    """Test journal abbreviation and title cleanup."""
    assert cleanup_journal(" Commun. ACM (CACM) ") == "CACM"
    assert cleanup_journal("Inf. Comput.") == "Inf. Comput."
    assert cleanup_title("Proofs &amp; Types.") == "Proofs & Types"
    assert cleanup_title("Why? Because.. ") == "Why? Because."
