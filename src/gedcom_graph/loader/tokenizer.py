# src/gedcom_graph/loader/tokenizer.py

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import FrozenSet, Iterator, List, Optional, Tuple, Union

from gedcom_graph.core.exceptions import GedcomSyntaxError


# ---------------------------------------------------------------------------
# Token types
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class LevelMarker:
    """Leading level number of a physical line."""
    depth: int


@dataclass(frozen=True, slots=True)
class CrossRefPointer:
    """Optional ``@XREF@`` naming the record a line introduces."""
    xref: str


@dataclass(frozen=True, slots=True)
class StandardTag:
    name: str


@dataclass(frozen=True, slots=True)
class CustomTag:
    """Underscore-prefixed or otherwise non-standard (vendor) tag."""
    name: str


@dataclass(frozen=True, slots=True)
class LineValue:
    """Remainder of the line after the tag."""
    text: str


Token = Union[LevelMarker, CrossRefPointer, StandardTag, CustomTag, LineValue]


# GEDCOM 5.5.1 tag vocabulary. Anything outside it is classified as custom.
STANDARD_TAGS: FrozenSet[str] = frozenset({
    "ABBR", "ADDR", "ADR1", "ADR2", "ADR3", "ADOP", "AFN", "AGE", "AGNC",
    "ALIA", "ANCE", "ANCI", "ANUL", "ASSO", "AUTH", "BAPL", "BAPM", "BARM",
    "BASM", "BIRT", "BLES", "BLOB", "BURI", "CALN", "CAST", "CAUS", "CENS",
    "CHAN", "CHAR", "CHIL", "CHR", "CHRA", "CITY", "CONC", "CONF", "CONL",
    "CONT", "COPR", "CORP", "CREM", "CTRY", "DATA", "DATE", "DEAT", "DESC",
    "DESI", "DEST", "DIV", "DIVF", "DSCR", "EDUC", "EMAIL", "EMIG", "ENDL",
    "ENGA", "EVEN", "FACT", "FAM", "FAMC", "FAMF", "FAMS", "FAX", "FCOM",
    "FILE", "FORM", "FONE", "GEDC", "GIVN", "GRAD", "HEAD", "HUSB", "IDNO",
    "IMMI", "INDI", "LANG", "LATI", "LONG", "MAP", "MARB", "MARC", "MARL",
    "MARR", "MARS", "MEDI", "NAME", "NATI", "NATU", "NCHI", "NICK", "NMR",
    "NOTE", "NPFX", "NSFX", "OBJE", "OCCU", "ORDI", "ORDN", "PAGE", "PEDI",
    "PHON", "PLAC", "POST", "PROB", "PROP", "PUBL", "QUAY", "REFN", "RELA",
    "RELI", "REPO", "RESI", "RESN", "RETI", "RFN", "RIN", "ROLE", "ROMN",
    "SEX", "SLGC", "SLGS", "SOUR", "SPFX", "SSN", "STAE", "STAT", "SUBM",
    "SUBN", "SURN", "TEMP", "TEXT", "TIME", "TITL", "TRLR", "TYPE", "VERS",
    "WIFE", "WILL", "WWW",
    # Submitter comments (GEDCOM 5.5).
    "COMM",
})


def classify_tag(tag: str) -> Union[StandardTag, CustomTag]:
    """Return the tag token for ``tag``; the parser decides what to do with it."""
    if tag.startswith("_") or tag not in STANDARD_TAGS:
        return CustomTag(tag)
    return StandardTag(tag)


# ---------------------------------------------------------------------------
# Line splitting
# ---------------------------------------------------------------------------

def _strip_eol(line: str) -> str:
    """Strip trailing CR/LF characters but preserve all other whitespace."""
    return line.rstrip("\r\n")


def tokenize_line(line: str, lineno: int = 0) -> List[Token]:
    """
    Split a single GEDCOM line into its tokens.

    Tokens come out in strict order:
        LevelMarker, [CrossRefPointer], StandardTag | CustomTag, [LineValue]

    Examples:
        "0 HEAD"                -> [LevelMarker(0), StandardTag("HEAD")]
        "0 @I1@ INDI"           -> [LevelMarker(0), CrossRefPointer("@I1@"),
                                    StandardTag("INDI")]
        "1 NAME John /Doe/"     -> [LevelMarker(1), StandardTag("NAME"),
                                    LineValue("John /Doe/")]
        "1 _UID 1234"           -> [LevelMarker(1), CustomTag("_UID"),
                                    LineValue("1234")]
    """
    raw = _strip_eol(line)

    # Handle optional UTF-8 BOM on the very first line.
    if lineno == 1 and raw.startswith("\ufeff"):
        raw = raw.lstrip("\ufeff")

    raw = raw.lstrip(" \t")
    if not raw:
        raise GedcomSyntaxError(lineno, "empty or whitespace-only line")

    # --- 1. Extract level -------------------------------------------------
    parts = raw.split(" ", 1)
    if len(parts) == 1:
        raise GedcomSyntaxError(lineno, f"missing tag (only level found) in {raw!r}")

    level_str, rest = parts[0], parts[1]
    if not level_str.isdecimal():
        raise GedcomSyntaxError(lineno, f"level is not numeric in {raw!r}")

    tokens: List[Token] = [LevelMarker(int(level_str))]
    rest = rest.lstrip(" ")

    if not rest:
        raise GedcomSyntaxError(lineno, f"missing tag after level in {raw!r}")

    # --- 2. Extract optional pointer -------------------------------------
    if rest.startswith("@"):
        # Pointer runs until the next space: "@I1@ INDI" -> "@I1@", "INDI"
        try:
            space_index = rest.index(" ")
        except ValueError:
            raise GedcomSyntaxError(
                lineno, f"pointer present but no tag in {raw!r}"
            ) from None

        tokens.append(CrossRefPointer(rest[:space_index]))
        rest = rest[space_index + 1 :].lstrip(" ")

        if not rest:
            raise GedcomSyntaxError(
                lineno, f"pointer present but missing tag in {raw!r}"
            )

    # --- 3. Extract tag and optional value --------------------------------
    if " " in rest:
        tag, value = rest.split(" ", 1)
    else:
        tag, value = rest, ""

    tokens.append(classify_tag(tag))
    if value:
        tokens.append(LineValue(value))

    return tokens


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

class Tokenizer:
    """
    Lazy, forward-only token stream over the full text of a GEDCOM file.

    Exactly one token is current at a time; ``advance()`` moves to the next
    one and ``current`` becomes ``None`` once the input is exhausted.
    ``line`` is the 1-based physical line of the current token. Only one
    physical line is held at a time.
    """

    def __init__(self, text: str):
        self._lines = self._iter_lines(text)
        self._pending: List[Token] = []
        self.line: int = 0
        self.current: Optional[Token] = None
        self.advance()

    @staticmethod
    def _iter_lines(text: str) -> Iterator[Tuple[int, str]]:
        # Only CR, LF and CRLF end a line; other Unicode separators stay in
        # the value.
        lines = io.StringIO(text, newline=None)
        for lineno, raw_line in enumerate(lines, start=1):
            raw_line = _strip_eol(raw_line)
            if not raw_line.strip(" \t\ufeff"):
                # Blank lines are not meaningful in GEDCOM.
                continue
            yield lineno, raw_line

    def advance(self) -> Optional[Token]:
        """Move to the next token and return it (``None`` at end of input)."""
        if not self._pending:
            for lineno, raw_line in self._lines:
                self.line = lineno
                self._pending = tokenize_line(raw_line, lineno)
                self._pending.reverse()
                break
        self.current = self._pending.pop() if self._pending else None
        return self.current

    @property
    def at_end(self) -> bool:
        return self.current is None

    def __iter__(self) -> Iterator[Token]:
        while self.current is not None:
            token = self.current
            self.advance()
            yield token


def tokenize(text: str) -> List[Token]:
    """Materialize every token of ``text``; handy for tests and debugging."""
    return list(Tokenizer(text))
