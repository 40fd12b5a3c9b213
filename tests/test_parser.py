# tests/test_parser.py

from __future__ import annotations

import pytest

from gedcom_graph.config import GGConfig
from gedcom_graph.core.exceptions import (
    DuplicateEventError,
    MalformedDataError,
    MissingDataError,
    ParseError,
    UnhandledTagError,
    UnhandledTokenError,
    UnhandledValueError,
)
from gedcom_graph.parser import Parser, parse
from gedcom_graph.records import EventKind, Pedigree, Sex


def _ged(*lines: str) -> str:
    """Wrap record lines in a minimal HEAD / TRLR envelope."""
    return "\n".join(("0 HEAD",) + lines + ("0 TRLR",)) + "\n"


def _strict() -> GGConfig:
    return GGConfig({"parser": {"strict_header": True}})


# ---------------------------------------------------------------------------
# Reference fixture
# ---------------------------------------------------------------------------

def test_simple_counts(simple_tree) -> None:
    assert len(simple_tree.individuals) == 3
    assert len(simple_tree.families) == 1
    assert len(simple_tree.submitters) == 1
    assert simple_tree.sources == []
    assert simple_tree.repositories == []


def test_simple_header(simple_tree) -> None:
    header = simple_tree.header
    assert header.encoding == "ASCII"
    assert header.submitter_ref == "@SUBMITTER@"
    assert header.gedcom_version == "5.5"
    assert header.gedcom_form == "LINEAGE-LINKED"
    assert header.destinations == ["Destination of transmission"]
    assert header.source.system_id == "ID_OF_CREATING_FILE"


def test_simple_submitter(simple_tree) -> None:
    submitter = simple_tree.submitters[0]
    assert submitter.xref == "@SUBMITTER@"
    assert submitter.name == "/Submitter/"
    assert submitter.phone == "555-1234"
    assert submitter.address.value == "Submitters address\naddress continued here"
    assert submitter.comments == "message line 1\nmessage line 2\nmessage line 3"


def test_simple_individuals(simple_tree) -> None:
    father = simple_tree.individuals["@FATHER@"]
    assert father.name.value == "/Father/"
    assert father.title == "title"
    assert father.sex is Sex.MALE
    assert father.fam_spouse == {"@FAMILY@"}
    assert father.dates() == ["1 JAN 1899", "31 DEC 1990"]
    assert father.places() == ["birth place", "death place"]
    assert [e.kind for e in father.events()] == [EventKind.BIRTH, EventKind.DEATH]

    mother = simple_tree.individuals["@MOTHER@"]
    assert mother.sex is Sex.FEMALE
    assert mother.title is None

    child = simple_tree.individuals["@CHILD@"]
    assert child.sex is Sex.UNKNOWN
    assert child.fam_child == {"@FAMILY@": None}
    assert child.fam_spouse == set()


def test_simple_family(simple_tree) -> None:
    family = simple_tree.families["@FAMILY@"]
    assert family.husbs == ["@FATHER@"]
    assert family.wives == ["@MOTHER@"]
    assert family.children == ["@CHILD@"]

    (marriage,) = family.events()
    assert marriage.kind is EventKind.MARRIAGE
    assert marriage.place == "marriage place"
    assert marriage.date == "1 APR 1950"


# ---------------------------------------------------------------------------
# Extended fixture
# ---------------------------------------------------------------------------

def test_extended_header(extended_tree) -> None:
    header = extended_tree.header
    assert header.encoding == "UTF-8"
    assert header.gedcom_version == "5.5.1"
    assert header.date == "12 MAR 2021 10:15:00"
    assert header.language == "English"
    assert header.filename == "extended.ged"
    assert header.note == "Header note continues here"
    assert header.place_format == "City, County, Country"
    assert header.submitter_ref == "@U1@"

    source = header.source
    assert source.system_id == "FAMILY_HISTORIAN"
    assert source.version == "7.0"
    assert source.name == "Family Historian"
    assert source.corporation == "Calico Pie Limited"
    assert source.address.value == "1 Main Street"
    assert source.address.city == "London"


def test_extended_counts(extended_tree) -> None:
    assert extended_tree.counts() == {
        "submitters": 1,
        "individuals": 4,
        "families": 1,
        "repositories": 1,
        "sources": 1,
        "multimedia": 1,
    }


def test_extended_submitter_address(extended_tree) -> None:
    address = extended_tree.submitters[0].address
    assert address.value == "12 High Street\nFlat 3 rear entrance"
    assert address.city == "Springfield"
    assert address.post == "12345"
    assert address.country == "Freedonia"


def test_extended_repository_and_source(extended_tree) -> None:
    repo = extended_tree.repositories[0]
    assert repo.xref == "@R1@"
    assert repo.name == "County Record Office"
    assert repo.address.city == "Springfield"
    assert repo.phone == "555-0000"

    source = extended_tree.sources[0]
    assert source.title == "Parish register of St Mary"
    assert source.abbreviation == "Parish register"
    assert source.author == "Rev. Smith"
    assert source.data.agency == "Parish of St Mary"

    (recorded,) = source.data.events()
    assert recorded.kind is EventKind.SOURCE_DATA
    assert recorded.source_data == "BIRT, DEAT"
    assert recorded.date == "FROM 1850 TO 1900"
    assert source.data.places() == ["Springfield"]

    (citation,) = source.repo_citations
    assert citation.xref == "@R1@"
    assert citation.call_number == "1234/A"


def test_extended_media(extended_tree) -> None:
    media = extended_tree.multimedia[0]
    assert media.xref == "@M1@"
    assert media.title == "Wedding"
    (media_file,) = media.files
    assert media_file.path == "photos/wedding.jpg"
    assert media_file.form == "jpg"
    assert media_file.media_type == "photo"


def test_extended_individual_details(extended_tree) -> None:
    john = extended_tree.individuals["@I1@"]
    name = john.name
    assert name.value == "John Paul /Smith/ Jr."
    assert name.given == "John Paul"
    assert name.surname == "Smith"
    assert name.prefix == "Dr."
    assert name.suffix == "Jr."
    assert name.surname_prefix == "van"
    assert name.nickname == "Jack"

    assert john.last_updated == "1 JAN 2020 12:00:00"
    assert john.notes == ["A note\non two lines"]
    assert john.fam_spouse == {"@F1@"}
    assert john.fam_child == {"@F0@": Pedigree.BIRTH}

    birth = john.events()[0]
    assert birth.kind is EventKind.BIRTH
    (citation,) = birth.citations
    assert (citation.xref, citation.page, citation.quality) == ("@S1@", "folio 12", "3")

    residences = [e for e in john.events() if e.kind is EventKind.RESIDENCE]
    assert [e.place for e in residences] == ["Shelbyville", "Capital City"]


def test_custom_tags_recorded_on_individual(extended_tree) -> None:
    john = extended_tree.individuals["@I1@"]
    assert [(c.tag, c.value) for c in john.custom_data] == [("_UID", "0123456789")]


def test_extended_sex_and_pedigree(extended_tree) -> None:
    people = extended_tree.individuals
    assert people["@I2@"].sex is Sex.FEMALE
    assert people["@I3@"].sex is Sex.UNKNOWN
    assert people["@I4@"].sex is Sex.NONBINARY
    assert people["@I3@"].fam_child == {"@F1@": Pedigree.ADOPTED}


def test_extended_family(extended_tree) -> None:
    family = extended_tree.families["@F1@"]
    assert family.children == ["@I3@"]
    assert family.num_children == 1
    assert [e.kind for e in family.events()] == [EventKind.MARRIAGE, EventKind.OTHER]
    assert family.events()[1].tag == "DIV"
    assert family.dates() == ["5 MAY 1895", "1910"]


def test_parsing_is_deterministic() -> None:
    from gedcom_graph.utils import tests_data_path

    text = tests_data_path("extended.ged").read_text(encoding="utf-8")
    assert parse(text) == parse(text)


# ---------------------------------------------------------------------------
# Continuations and custom tags
# ---------------------------------------------------------------------------

def test_cont_and_conc_joiners() -> None:
    tree = parse(_ged(
        "0 @I1@ INDI",
        "1 NOTE first",
        "2 CONC part",
        "2 CONT second",
        "2 CONT",
    ))
    assert tree.individuals["@I1@"].notes == ["first part\nsecond\n"]


def test_custom_tag_subtree_skipped_at_any_depth() -> None:
    tree = parse(_ged(
        "1 _APP something",
        "2 _NESTED deeper",
        "3 SOUR looks standard but is inside a custom tag",
        "0 @F1@ FAM",
        "1 MARR",
        "2 _WITNESS somebody",
        "3 NAME ignored",
        "2 DATE 1900",
        "1 HUSB @I1@",
    ))
    family = tree.families["@F1@"]
    assert family.husbs == ["@I1@"]
    assert family.dates() == ["1900"]


def test_custom_record_at_top_level_is_skipped() -> None:
    tree = parse(_ged(
        "0 @X1@ _LOC Somewhere",
        "1 NAME not an individual",
        "0 @I1@ INDI",
    ))
    assert list(tree.individuals) == ["@I1@"]


def test_unknown_header_substructure_is_warned_and_skipped() -> None:
    tree = parse(_ged(
        "1 GEDC",
        "2 VERS 5.5.1",
        "2 NAME unexpected",
        "3 DATE still unexpected",
        "2 FORM LINEAGE-LINKED",
    ))
    assert tree.header.gedcom_version == "5.5.1"
    assert tree.header.gedcom_form == "LINEAGE-LINKED"


def test_unknown_header_substructure_fails_when_strict() -> None:
    text = _ged("1 GEDC", "2 NAME unexpected")
    with pytest.raises(UnhandledTagError) as info:
        Parser(text, config=_strict()).parse_record()
    assert info.value.line == 3


def test_unusual_gedcom_form() -> None:
    text = _ged("1 GEDC", "2 FORM EVENT_ORIENTED")
    assert parse(text).header.gedcom_form == "EVENT_ORIENTED"
    with pytest.raises(UnhandledValueError):
        parse(text, config=_strict())


def test_first_name_is_kept() -> None:
    tree = parse(_ged("0 @I1@ INDI", "1 NAME First /One/", "1 NAME Second /Two/"))
    assert tree.individuals["@I1@"].name.value == "First /One/"


def test_duplicate_individual_last_write_wins() -> None:
    tree = parse(_ged(
        "0 @I1@ INDI",
        "1 NAME Early /Record/",
        "0 @I1@ INDI",
        "1 NAME Late /Record/",
    ))
    assert tree.individuals["@I1@"].name.value == "Late /Record/"


def test_record_without_xref_is_dropped() -> None:
    tree = parse(_ged("0 INDI", "1 NAME Nobody"))
    assert tree.individuals == {}


def test_family_link_pedigree_is_case_insensitive() -> None:
    tree = parse(_ged("0 @I1@ INDI", "1 FAMC @F1@", "2 PEDI Foster"))
    assert tree.individuals["@I1@"].fam_child == {"@F1@": Pedigree.FOSTER}


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

def test_unknown_standard_top_level_tag() -> None:
    with pytest.raises(UnhandledTagError) as info:
        parse(_ged("0 @N1@ NOTE a shared note"))
    assert info.value.line == 2
    assert info.value.tag == "NOTE"


def test_unknown_standard_tag_in_record() -> None:
    with pytest.raises(UnhandledTagError) as info:
        parse(_ged("0 @I1@ INDI", "1 NAME Ok /Name/", "1 CHIL @I2@"))
    assert info.value.line == 4


@pytest.mark.parametrize(
    "lines, line, field",
    [
        (("0 @I1@ INDI", "1 SEX X"), 3, "SEX"),
        (("0 @I1@ INDI", "1 FAMC @F1@", "2 PEDI bogus"), 4, "PEDI"),
        (("0 @F1@ FAM", "1 NCHI abc"), 3, "NCHI"),
    ],
)
def test_unhandled_values(lines, line, field) -> None:
    with pytest.raises(UnhandledValueError) as info:
        parse(_ged(*lines))
    assert info.value.line == line
    assert info.value.field == field


def test_missing_trailer() -> None:
    with pytest.raises(MissingDataError):
        parse("0 HEAD\n0 @I1@ INDI\n1 NAME No /Trailer/\n")


def test_missing_required_value() -> None:
    with pytest.raises(MissingDataError) as info:
        parse(_ged("0 @F1@ FAM", "1 HUSB"))
    assert info.value.line == 3


def test_time_without_date_is_malformed() -> None:
    with pytest.raises(MalformedDataError) as info:
        parse(_ged("1 TIME 10:00:00"))
    assert info.value.line == 2


def test_second_header_is_malformed() -> None:
    with pytest.raises(MalformedDataError):
        parse(_ged("0 HEAD"))


def test_record_must_start_at_level_zero() -> None:
    with pytest.raises(MalformedDataError):
        parse("1 NAME floating\n0 TRLR\n")


def test_level_zero_pointer_only_is_syntax_error() -> None:
    with pytest.raises(ParseError) as info:
        parse(_ged("0 @I1@"))
    assert info.value.line == 2


def test_pointer_on_subordinate_line_is_unhandled_token() -> None:
    with pytest.raises(UnhandledTokenError) as info:
        parse(_ged("0 @I1@ INDI", "1 SEX M", "1 @X@ NAME Someone"))
    assert info.value.line == 4
    assert isinstance(info.value, ParseError)


def test_value_on_record_line_is_unhandled_token() -> None:
    with pytest.raises(UnhandledTokenError) as info:
        parse(_ged("0 @F1@ FAM unexpected value", "1 HUSB @I1@"))
    assert info.value.line == 2


def test_value_on_header_line_is_unhandled_token() -> None:
    with pytest.raises(UnhandledTokenError) as info:
        parse("0 HEAD oops\n0 TRLR\n")
    assert info.value.line == 1


def test_second_marriage_is_rejected_with_line() -> None:
    with pytest.raises(DuplicateEventError) as info:
        parse(_ged(
            "0 @F1@ FAM",
            "1 MARR",
            "2 DATE 1900",
            "1 MARR",
            "2 DATE 1901",
        ))
    assert info.value.line == 5
    assert info.value.kind is EventKind.MARRIAGE
    assert "Marriage" in str(info.value)


def test_repeated_individual_events_are_allowed() -> None:
    tree = parse(_ged("0 @I1@ INDI", "1 BIRT", "2 DATE 1900", "1 BIRT", "2 DATE 1901"))
    assert tree.individuals["@I1@"].dates() == ["1900", "1901"]


def test_non_ascii_digit_count_is_unhandled_value() -> None:
    with pytest.raises(UnhandledValueError) as info:
        parse(_ged("0 @F1@ FAM", "1 NCHI \u00b2"))
    assert info.value.line == 3
    assert info.value.field == "NCHI"


def test_non_ascii_digit_level_is_a_parse_error() -> None:
    with pytest.raises(MalformedDataError) as info:
        parse("\u00b2 HEAD\n0 TRLR\n")
    assert info.value.line == 1


def test_unicode_separators_stay_inside_values() -> None:
    tree = parse(_ged(
        "0 @I1@ INDI",
        "1 NOTE first\u2028second\x0cthird",
        "1 SEX M",
    ))
    person = tree.individuals["@I1@"]
    assert person.notes == ["first\u2028second\x0cthird"]
    assert person.sex is Sex.MALE


def test_line_numbers_after_unicode_separators() -> None:
    with pytest.raises(UnhandledValueError) as info:
        parse(_ged("0 @I1@ INDI", "1 NOTE a\u2028b\x85c", "1 SEX X"))
    assert info.value.line == 4
