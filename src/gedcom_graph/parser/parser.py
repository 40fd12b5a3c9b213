"""
parser.py
Recursive-descent state machine turning a GEDCOM token stream into a
RecordTree.

The state lives on the call stack: each ``_parse_*`` method remembers the
level of the line that opened its structure and consumes subordinate lines
until the level drops back to (or below) that opening level. Every
nestable structure uses the same loop, ``_subordinate_tags``.

Cursor convention: a ``_parse_*`` / ``_take_*`` helper is entered with the
tokenizer positioned on the tag that opened its structure, and returns
with the tokenizer positioned on the next line's LevelMarker (or at end of
input).
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Tuple, Union

from gedcom_graph.config import get_config
from gedcom_graph.core.exceptions import (
    DuplicateEventError,
    MalformedDataError,
    MissingDataError,
    UnhandledTagError,
    UnhandledTokenError,
    UnhandledValueError,
)
from gedcom_graph.loader.file_loader import load_file
from gedcom_graph.loader.tokenizer import (
    CrossRefPointer,
    CustomTag,
    LevelMarker,
    LineValue,
    StandardTag,
    Tokenizer,
)
from gedcom_graph.logging import get_logger
from gedcom_graph.records import (
    Address,
    CustomData,
    Event,
    FAMILY_EVENT_TAGS,
    Family,
    FamilyLink,
    HasEvents,
    Header,
    HeaderSource,
    INDIVIDUAL_EVENT_TAGS,
    Individual,
    Media,
    MediaFile,
    Name,
    Pedigree,
    RecordTree,
    RepoCitation,
    Repository,
    Sex,
    Source,
    SourceCitation,
    SourceData,
    Submitter,
)

# Hard line break / soft wrap.
CONTINUATION_JOINERS = {"CONT": "\n", "CONC": " "}

# Standard tags accepted on records but not modelled; skipped with their
# whole subtree.
UNMODELLED_TAGS = frozenset({"REFN", "RIN", "RFN", "AFN", "RESN"})

# Event detail lines that are accepted but not modelled.
EVENT_DETAIL_TAGS = frozenset({
    "AGE", "AGNC", "CAUS", "NOTE", "ADDR", "PHON", "HUSB", "WIFE", "OBJE",
    "RELI", "RESN", "FAMC",
})


class Parser:
    """
    GEDCOM parser state machine.

        parser = Parser(text)
        tree = parser.parse_record()

    Any standard-tag violation aborts the parse with a ParseError subclass
    carrying the line number; custom tags are skipped with a warning.
    """

    def __init__(self, text: str, config=None):
        self.cfg = config if config is not None else get_config()
        self.log = get_logger("parser")
        self.tokenizer = Tokenizer(text)
        # Depth of the line whose tokens are currently being consumed.
        self._level = 0
        self._seen_header = False

    # ---------------------------------------------------------
    # Token helpers
    # ---------------------------------------------------------
    @property
    def line(self) -> int:
        return self.tokenizer.line

    def _advance(self) -> None:
        self.tokenizer.advance()

    def _current_tag(self) -> str:
        token = self.tokenizer.current
        if isinstance(token, (StandardTag, CustomTag)):
            return token.name
        raise UnhandledTokenError(self.line, token)

    def _subordinate_tags(
        self,
        level: int,
        custom: Optional[Callable[[CustomData], None]] = None,
    ) -> Iterator[str]:
        """
        Yield each standard tag nested below a structure opened at ``level``.

        The loop ends at the first line whose level is ``<= level`` (or at
        end of input). Custom tags are skipped together with their
        subordinate lines; when ``custom`` is given each one is passed to it.
        The consumer must consume every yielded tag (and its subtree).
        """
        while True:
            token = self.tokenizer.current
            if token is None:
                return
            if isinstance(token, LevelMarker):
                if token.depth <= level:
                    return
                self._level = token.depth
                self._advance()
            elif isinstance(token, StandardTag):
                yield token.name
            elif isinstance(token, CustomTag):
                self._skip_custom(custom)
            else:
                raise UnhandledTokenError(self.line, token)

    def _skip_subtree(self) -> int:
        """Consume the current line and all of its subordinate lines."""
        self._advance()
        return self._skip_rest_of_structure()

    def _skip_custom(
        self, sink: Optional[Callable[[CustomData], None]] = None
    ) -> CustomData:
        line, tag = self.line, self._current_tag()
        value = self._take_optional_value()
        skipped = self._skip_rest_of_structure()
        data = CustomData(tag=tag, value=value)

        if sink is not None:
            sink(data)
            self.log.debug("line %d: recorded custom tag %s", line, tag)
        else:
            self.log.warning(
                "line %d: skipping custom tag %s (%d subordinate lines)",
                line, tag, skipped,
            )
        return data

    def _skip_rest_of_structure(self) -> int:
        """Consume tokens up to the next line at or above the current level."""
        level = self._level
        skipped = 0
        while self.tokenizer.current is not None:
            token = self.tokenizer.current
            if isinstance(token, LevelMarker):
                if token.depth <= level:
                    break
                skipped += 1
            self._advance()
        return skipped

    def _take_optional_value(self) -> Optional[str]:
        """Consume the current tag and return its line value, if any."""
        self._advance()
        token = self.tokenizer.current
        if isinstance(token, LineValue):
            self._advance()
            return token.text
        return None

    def _take_text(self, required: bool = True, skip: Iterable[str] = ()) -> Optional[str]:
        """
        Take the current tag's value, reassembling CONT / CONC continuation
        lines. Tags listed in ``skip`` are ignored with their subtree; any
        other standard tag below the value is an error.
        """
        level, line, tag = self._level, self.line, self._current_tag()
        value = self._take_optional_value()

        for sub in self._subordinate_tags(level):
            if sub in CONTINUATION_JOINERS:
                value = self._continue(value, sub)
            elif sub in skip:
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, sub)

        if value is None and required:
            raise MissingDataError(line, f"value for {tag}")
        return value

    def _continue(self, value: Optional[str], tag: str) -> str:
        more = self._take_optional_value() or ""
        return (value or "") + CONTINUATION_JOINERS[tag] + more

    def _add_event(self, owner: HasEvents, event: Event, line: int) -> None:
        try:
            owner.add_event(event)
        except DuplicateEventError as exc:
            raise DuplicateEventError(exc.kind, line=line, owner=exc.owner) from None

    def _header_oddity(self, where: str) -> None:
        """Skip advisory header substructure, or fail when configured strict."""
        line, tag = self.line, self._current_tag()
        if self.cfg.strict_header:
            raise UnhandledTagError(line, tag)
        self.log.warning("line %d: skipping unrecognized %s tag %s", line, where, tag)
        self._skip_subtree()

    # ---------------------------------------------------------
    # Top level
    # ---------------------------------------------------------
    def parse_record(self) -> RecordTree:
        """Parse the whole input; returns the tree only if parsing succeeds."""
        tree = RecordTree()

        while True:
            token = self.tokenizer.current
            if token is None:
                raise MissingDataError(self.line, "trailer (TRLR)")
            if not isinstance(token, LevelMarker):
                raise UnhandledTokenError(self.line, token)
            if token.depth != 0:
                raise MalformedDataError(
                    self.line, f"expected a level 0 record, found level {token.depth}"
                )

            self._level = 0
            self._advance()

            xref: Optional[str] = None
            if isinstance(self.tokenizer.current, CrossRefPointer):
                xref = self.tokenizer.current.xref
                self._advance()

            token = self.tokenizer.current
            if isinstance(token, CustomTag):
                self._skip_custom()
                continue
            if not isinstance(token, StandardTag):
                raise UnhandledTokenError(self.line, token)

            tag = token.name
            if tag == "HEAD":
                tree.header = self._parse_header()
            elif tag == "FAM":
                tree.add_family(xref, self._parse_family(xref))
            elif tag == "INDI":
                tree.add_individual(xref, self._parse_individual(xref))
            elif tag == "REPO":
                tree.add_repository(self._parse_repository(xref))
            elif tag == "SOUR":
                tree.add_source(self._parse_source(xref))
            elif tag == "SUBM":
                tree.add_submitter(self._parse_submitter(xref))
            elif tag == "OBJE":
                tree.add_multimedia(self._parse_media(xref))
            elif tag == "TRLR":
                self._advance()
                break
            else:
                raise UnhandledTagError(self.line, tag)

        if self.tokenizer.current is not None:
            self.log.debug("line %d: ignoring content after TRLR", self.line)

        self.log.info(
            "Parsed %d individuals, %d families, %d sources",
            len(tree.individuals), len(tree.families), len(tree.sources),
        )
        return tree

    # ---------------------------------------------------------
    # Header
    # ---------------------------------------------------------
    def _parse_header(self) -> Header:
        if self._seen_header:
            raise MalformedDataError(self.line, "more than one HEAD record")
        self._seen_header = True

        level = self._level
        self._advance()
        header = Header()

        for tag in self._subordinate_tags(level):
            if tag == "CHAR":
                header.encoding, header.encoding_version = self._parse_charset()
            elif tag == "CORP":
                header.corporation = self._take_text()
            elif tag == "COPR":
                header.copyright = self._take_text()
            elif tag == "DATE":
                header.date = self._parse_date_time()
            elif tag == "TIME":
                line = self.line
                time = self._take_text()
                if header.date is None:
                    raise MalformedDataError(line, "TIME without a preceding DATE")
                header.date = f"{header.date} {time}"
            elif tag == "DEST":
                header.add_destination(self._take_text())
            elif tag == "LANG":
                header.language = self._take_text()
            elif tag == "FILE":
                header.filename = self._take_text()
            elif tag == "NOTE":
                header.note = self._take_text(required=False)
            elif tag == "SUBM":
                header.submitter_ref = self._take_text()
            elif tag == "SUBN":
                header.submission_ref = self._take_text()
            elif tag == "GEDC":
                self._parse_gedcom_meta(header)
            elif tag == "SOUR":
                header.source = self._parse_header_source()
            elif tag == "PLAC":
                header.place_format = self._parse_place_format()
            else:
                raise UnhandledTagError(self.line, tag)

        return header

    def _parse_charset(self) -> Tuple[str, Optional[str]]:
        level, line = self._level, self.line
        encoding = self._take_optional_value()
        version = None
        for tag in self._subordinate_tags(level):
            if tag == "VERS":
                version = self._take_text()
            else:
                raise UnhandledTagError(self.line, tag)
        if encoding is None:
            raise MissingDataError(line, "value for CHAR")
        return encoding, version

    def _parse_gedcom_meta(self, header: Header) -> None:
        """GEDC block. Advisory only: odd substructure is warned and skipped."""
        level = self._level
        self._take_optional_value()

        for tag in self._subordinate_tags(level):
            if tag == "VERS":
                header.gedcom_version = self._take_text()
            elif tag == "FORM":
                line = self.line
                form = self._take_text(skip=("VERS",))
                header.gedcom_form = form
                if form.strip().upper() != "LINEAGE-LINKED":
                    if self.cfg.strict_header:
                        raise UnhandledValueError(line, form, "GEDC.FORM")
                    self.log.warning(
                        "line %d: unrecognized GEDCOM form %r, expected LINEAGE-LINKED",
                        line, form,
                    )
            else:
                self._header_oddity("GEDC")

    def _parse_header_source(self) -> HeaderSource:
        level = self._level
        source = HeaderSource(system_id=self._take_optional_value())

        for tag in self._subordinate_tags(level):
            if tag == "VERS":
                source.version = self._take_text()
            elif tag == "NAME":
                source.name = self._take_text()
            elif tag == "CORP":
                source.corporation, source.address = self._parse_corporation()
            elif tag == "DATA":
                source.data_name = self._take_text(
                    required=False, skip=("DATE", "COPR")
                )
            else:
                self._header_oddity("HEAD.SOUR")

        return source

    def _parse_corporation(self) -> Tuple[Optional[str], Optional[Address]]:
        level = self._level
        name = self._take_optional_value()
        address = None
        for tag in self._subordinate_tags(level):
            if tag == "ADDR":
                address = self._parse_address()
            elif tag in ("PHON", "EMAIL", "FAX", "WWW"):
                self._skip_subtree()
            else:
                self._header_oddity("HEAD.SOUR.CORP")
        return name, address

    def _parse_place_format(self) -> Optional[str]:
        level = self._level
        self._take_optional_value()
        form = None
        for tag in self._subordinate_tags(level):
            if tag == "FORM":
                form = self._take_text()
            else:
                self._header_oddity("HEAD.PLAC")
        return form

    # ---------------------------------------------------------
    # Records
    # ---------------------------------------------------------
    def _parse_submitter(self, xref: Optional[str]) -> Submitter:
        level = self._level
        self._advance()
        submitter = Submitter(xref=xref)

        for tag in self._subordinate_tags(level):
            if tag == "NAME":
                submitter.name = self._take_text()
            elif tag == "ADDR":
                submitter.address = self._parse_address()
            elif tag == "PHON":
                submitter.phone = self._take_text()
            elif tag == "COMM":
                submitter.comments = self._take_text(required=False)
            elif tag == "LANG":
                submitter.language = self._take_text()
            elif tag in ("EMAIL", "FAX", "WWW", "OBJE", "NOTE", "CHAN") or tag in UNMODELLED_TAGS:
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, tag)

        return submitter

    def _parse_individual(self, xref: Optional[str]) -> Individual:
        level = self._level
        self._advance()
        individual = Individual(xref=xref)

        for tag in self._subordinate_tags(level, custom=individual.add_custom_data):
            if tag == "NAME":
                name = self._parse_name()
                if individual.name is None:
                    individual.name = name
            elif tag == "SEX":
                individual.sex = self._parse_sex()
            elif tag in INDIVIDUAL_EVENT_TAGS:
                line = self.line
                self._add_event(individual, self._parse_event(tag), line)
            elif tag in ("FAMC", "FAMS"):
                individual.add_family_link(self._parse_family_link(tag))
            elif tag == "CHAN":
                individual.last_updated = self._parse_change_date()
            elif tag == "TITL":
                individual.title = self._take_text()
            elif tag == "NOTE":
                individual.notes.append(self._take_text(required=False) or "")
            elif tag == "SOUR":
                individual.citations.append(self._parse_citation())
            elif tag in UNMODELLED_TAGS or tag in ("OBJE", "SUBM", "ASSO", "ALIA"):
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, tag)

        return individual

    def _parse_family(self, xref: Optional[str]) -> Family:
        level = self._level
        self._advance()
        family = Family(xref=xref)

        for tag in self._subordinate_tags(level):
            if tag == "HUSB":
                family.add_husband(self._take_text())
            elif tag == "WIFE":
                family.add_wife(self._take_text())
            elif tag == "CHIL":
                family.add_child(self._take_text())
            elif tag == "NCHI":
                family.num_children = self._parse_count()
            elif tag in FAMILY_EVENT_TAGS:
                line = self.line
                self._add_event(family, self._parse_event(tag), line)
            elif tag == "CHAN":
                family.last_updated = self._parse_change_date()
            elif tag == "NOTE":
                family.notes.append(self._take_text(required=False) or "")
            elif tag in UNMODELLED_TAGS or tag in ("SOUR", "OBJE", "SUBM"):
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, tag)

        return family

    def _parse_source(self, xref: Optional[str]) -> Source:
        level = self._level
        self._advance()
        source = Source(xref=xref)

        for tag in self._subordinate_tags(level):
            if tag == "DATA":
                self._parse_source_data(source.data)
            elif tag == "TITL":
                source.title = self._take_text()
            elif tag == "ABBR":
                source.abbreviation = self._take_text()
            elif tag == "AUTH":
                source.author = self._take_text()
            elif tag == "PUBL":
                source.publication = self._take_text()
            elif tag == "TEXT":
                source.text = self._take_text()
            elif tag == "REPO":
                source.add_repo_citation(self._parse_repo_citation())
            elif tag == "NOTE":
                source.notes.append(self._take_text(required=False) or "")
            elif tag in UNMODELLED_TAGS or tag in ("CHAN", "OBJE"):
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, tag)

        return source

    def _parse_source_data(self, data: SourceData) -> None:
        level = self._level
        self._take_optional_value()

        for tag in self._subordinate_tags(level):
            if tag == "EVEN":
                line = self.line
                event = self._parse_event("EVEN")
                event.with_source_data(event.description or "")
                event.description = None
                self._add_event(data, event, line)
            elif tag == "AGNC":
                data.agency = self._take_text()
            elif tag == "NOTE":
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, tag)

    def _parse_repository(self, xref: Optional[str]) -> Repository:
        level = self._level
        self._advance()
        repo = Repository(xref=xref)

        for tag in self._subordinate_tags(level):
            if tag == "NAME":
                repo.name = self._take_text()
            elif tag == "ADDR":
                repo.address = self._parse_address()
            elif tag == "PHON":
                repo.phone = self._take_text()
            elif tag == "NOTE":
                repo.notes.append(self._take_text(required=False) or "")
            elif tag in UNMODELLED_TAGS or tag in ("EMAIL", "FAX", "WWW", "CHAN"):
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, tag)

        return repo

    def _parse_media(self, xref: Optional[str]) -> Media:
        level = self._level
        self._advance()
        media = Media(xref=xref)

        for tag in self._subordinate_tags(level):
            if tag == "FILE":
                media_file = self._parse_media_file()
                media.files.append(media_file)
                media.title = media.title or media_file.title
            elif tag == "TITL":
                media.title = self._take_text()
            elif tag == "FORM":
                form = self._take_text()
                for f in media.files:
                    f.form = f.form or form
            elif tag == "NOTE":
                media.notes.append(self._take_text(required=False) or "")
            elif tag in UNMODELLED_TAGS or tag in ("BLOB", "CHAN", "SOUR", "OBJE"):
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, tag)

        return media

    # ---------------------------------------------------------
    # Substructures
    # ---------------------------------------------------------
    def _parse_name(self) -> Name:
        level = self._level
        name = Name(value=self._take_optional_value())

        for tag in self._subordinate_tags(level):
            if tag == "GIVN":
                name.given = self._take_text()
            elif tag == "SURN":
                name.surname = self._take_text()
            elif tag == "NPFX":
                name.prefix = self._take_text()
            elif tag == "SPFX":
                name.surname_prefix = self._take_text()
            elif tag == "NSFX":
                name.suffix = self._take_text()
            elif tag == "NICK":
                name.nickname = self._take_text()
            elif tag in ("TYPE", "NOTE", "SOUR", "FONE", "ROMN"):
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, tag)

        return name

    def _parse_sex(self) -> Sex:
        line = self.line
        value = self._take_text()
        try:
            return Sex.from_code(value.strip())
        except ValueError:
            raise UnhandledValueError(line, value, "SEX") from None

    def _parse_count(self) -> int:
        line = self.line
        value = self._take_text()
        if not value.strip().isdecimal():
            raise UnhandledValueError(line, value, "NCHI")
        return int(value)

    def _parse_family_link(self, tag: str) -> FamilyLink:
        level, line = self._level, self.line
        family = self._take_optional_value()
        if family is None:
            raise MissingDataError(line, f"family reference for {tag}")
        link = FamilyLink.from_tag(family, tag)

        for sub in self._subordinate_tags(level):
            if sub == "PEDI":
                pedi_line = self.line
                text = self._take_text()
                try:
                    link.pedigree = Pedigree.from_text(text)
                except ValueError:
                    raise UnhandledValueError(pedi_line, text, "PEDI") from None
            elif sub in ("NOTE", "STAT"):
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, sub)

        return link

    def _parse_event(self, tag: str) -> Event:
        level = self._level
        event = Event.from_tag(tag)
        event.description = self._take_optional_value()

        for sub in self._subordinate_tags(level):
            if sub == "DATE":
                event.date = self._parse_date_time()
            elif sub == "PLAC":
                event.place = self._take_text(
                    skip=("FORM", "MAP", "FONE", "ROMN", "NOTE", "SOUR")
                )
            elif sub == "SOUR":
                event.add_citation(self._parse_citation())
            elif sub == "TYPE":
                event.description = self._take_text()
            elif sub in EVENT_DETAIL_TAGS:
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, sub)

        return event

    def _parse_date_time(self) -> str:
        """DATE value, joined with a subordinate TIME when present."""
        level, line = self._level, self.line
        date = self._take_optional_value()
        if date is None:
            raise MissingDataError(line, "value for DATE")

        for sub in self._subordinate_tags(level):
            if sub == "TIME":
                date = f"{date} {self._take_text()}"
            else:
                raise UnhandledTagError(self.line, sub)

        return date

    def _parse_change_date(self) -> Optional[str]:
        level = self._level
        self._take_optional_value()
        changed = None
        for sub in self._subordinate_tags(level):
            if sub == "DATE":
                changed = self._parse_date_time()
            elif sub == "NOTE":
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, sub)
        return changed

    def _parse_citation(self) -> SourceCitation:
        level, line = self._level, self.line
        xref = self._take_optional_value()
        if xref is None:
            raise MissingDataError(line, "source reference for SOUR")
        citation = SourceCitation(xref=xref)

        for sub in self._subordinate_tags(level):
            if sub == "PAGE":
                citation.page = self._take_text()
            elif sub == "QUAY":
                citation.quality = self._take_text()
            elif sub in CONTINUATION_JOINERS:
                # Inline (pointer-less) source descriptions may continue.
                citation.xref = self._continue(citation.xref, sub)
            elif sub in ("DATA", "EVEN", "NOTE", "OBJE", "TEXT"):
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, sub)

        return citation

    def _parse_repo_citation(self) -> RepoCitation:
        level, line = self._level, self.line
        xref = self._take_optional_value()
        if xref is None:
            raise MissingDataError(line, "repository reference for REPO")
        citation = RepoCitation(xref=xref)

        for sub in self._subordinate_tags(level):
            if sub == "CALN":
                citation.call_number = self._take_text(skip=("MEDI",))
            elif sub == "NOTE":
                self._skip_subtree()
            else:
                raise UnhandledTagError(self.line, sub)

        return citation

    def _parse_address(self) -> Address:
        level = self._level
        address = Address()
        value = self._take_optional_value()

        for sub in self._subordinate_tags(level):
            if sub in CONTINUATION_JOINERS:
                value = self._continue(value, sub)
            elif sub == "ADR1":
                address.adr1 = self._take_text()
            elif sub == "ADR2":
                address.adr2 = self._take_text()
            elif sub == "ADR3":
                address.adr3 = self._take_text()
            elif sub == "CITY":
                address.city = self._take_text()
            elif sub == "STAE":
                address.state = self._take_text()
            elif sub == "POST":
                address.post = self._take_text()
            elif sub == "CTRY":
                address.country = self._take_text()
            else:
                raise UnhandledTagError(self.line, sub)

        if value:
            address.value = value
        return address

    def _parse_media_file(self) -> MediaFile:
        level, line = self._level, self.line
        path = self._take_optional_value()
        if path is None:
            raise MissingDataError(line, "path for FILE")
        media_file = MediaFile(path=path)

        for sub in self._subordinate_tags(level):
            if sub == "FORM":
                form_level = self._level
                media_file.form = self._take_optional_value()
                for detail in self._subordinate_tags(form_level):
                    if detail in ("TYPE", "MEDI"):
                        media_file.media_type = self._take_text()
                    else:
                        raise UnhandledTagError(self.line, detail)
            elif sub == "TITL":
                media_file.title = self._take_text()
            else:
                raise UnhandledTagError(self.line, sub)

        return media_file


# ---------------------------------------------------------
# Convenience entry points
# ---------------------------------------------------------
def parse(text: str, config=None) -> RecordTree:
    """Parse GEDCOM text that is already in memory."""
    return Parser(text, config=config).parse_record()


def parse_file(path: Union[str, Path], config=None) -> RecordTree:
    """Read ``path`` fully, then parse it."""
    return parse(load_file(path), config=config)
