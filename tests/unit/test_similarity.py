"""Tests for record equivalence."""

from collections.abc import Callable

import pytest

from bibmerge.matching import are_equivalent, match_reason
from bibmerge.models import BibRecord, EntryType

Factory = Callable[..., BibRecord]


@pytest.mark.unit
def test_identical_records(make_record: Factory) -> None:
    """Test a record is equivalent to an equal copy."""
    record = make_record(title="T", author=["A"])

    assert match_reason(record, make_record(title="T", author=["A"])) == "identical"


@pytest.mark.unit
@pytest.mark.parametrize("field_name", ["doi", "dblp"])
def test_shared_identifier(make_record: Factory, field_name: str) -> None:
    """Test a shared DOI or DBLP id makes records equivalent."""
    a = make_record(title="One", **{field_name: "x/1"})
    b = make_record(title="Other", **{field_name: "x/1"})

    assert match_reason(a, b) == field_name


@pytest.mark.unit
def test_identifier_present_on_one_side_only(make_record: Factory) -> None:
    """Test an identifier missing on one side proves nothing."""
    a = make_record(title="One", doi="x/1")
    b = make_record(title="Other")

    assert not are_equivalent(a, b)


@pytest.mark.unit
def test_declared_key(make_record: Factory) -> None:
    """Test equal declared keys make records equivalent."""
    a = make_record(key="Smith12", title="One")
    b = make_record(key="Smith12", title="Two")

    assert match_reason(a, b) == "key"


@pytest.mark.unit
def test_generated_key(make_record: Factory) -> None:
    """Test records generating the same key are equivalent."""
    a = make_record(key="a", author=["J. Smith"], year="2012", title="Types", journal="X")
    b = make_record(
        entry_type=EntryType.INPROCEEDINGS,
        author=["John Smith"],
        year="2012",
        title="Types",
        booktitle="Y",
    )

    assert match_reason(a, b) == "generated_key"


@pytest.mark.unit
def test_empty_generated_keys_match(make_record: Factory) -> None:
    """Test records without persons, year or title share the empty generated key."""
    a = make_record(note="first")
    b = make_record(note="second")

    assert match_reason(a, b) == "generated_key"


@pytest.mark.unit
def test_same_title_needs_corroboration(make_record: Factory) -> None:
    """Test same-title works from different years and venues stay apart."""
    a = make_record(
        entry_type=EntryType.INPROCEEDINGS,
        author=["Herman Geuvers"],
        title="Types for Proofs and Programs",
        booktitle="TYPES 2002",
        year="2002",
    )
    b = make_record(
        entry_type=EntryType.INPROCEEDINGS,
        author=["Jean-Christophe Filli{\\^a}tre"],
        title="Types for Proofs and Programs",
        booktitle="TYPES 2004",
        year="2004",
    )

    assert not are_equivalent(a, b)

    c = b.with_field("year", "2002")
    assert match_reason(a, c) == "title_venue"


@pytest.mark.unit
def test_title_with_same_journal(make_record: Factory) -> None:
    """Test equal title and journal are enough."""
    a = make_record(author=["A B"], title="T", journal="J", year="2001")
    b = make_record(author=["C D"], title="T", journal="J", year="2002")

    assert match_reason(a, b) == "title_venue"


@pytest.mark.unit
def test_equivalence_is_symmetric(make_record: Factory) -> None:
    """Test equivalence does not depend on argument order."""
    records = [
        make_record(title="T", doi="d"),
        make_record(title="U", doi="d"),
        make_record(key="k", title="V"),
        make_record(key="k"),
        make_record(author=["A Smith"], year="2010", title="W"),
        make_record(author=["B Smith"], year="2010", title="W", journal="J"),
        make_record(title="W", journal="J"),
        make_record(),
    ]

    for a in records:
        for b in records:
            assert are_equivalent(a, b) == are_equivalent(b, a)
