"""
Error taxonomy for gedcom_graph.

Parse errors carry the 1-based line number of the token that triggered
them. Only custom (underscore / vendor) tags are tolerated; everything in
this module aborts the operation that raised it.
"""

from __future__ import annotations

from typing import Any, Optional


class GedcomError(Exception):
    """Base exception for all gedcom_graph failures."""


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class ParseError(GedcomError):
    """Base class for errors raised while parsing; always carries ``line``."""

    def __init__(self, line: int, message: str):
        self.line = line
        super().__init__(f"{message} (line {line})")


class UnhandledTagError(ParseError):
    """A standard tag that is not valid in the current structure."""

    def __init__(self, line: int, tag: str):
        self.tag = tag
        super().__init__(line, f"Unhandled tag {tag!r}")


class UnhandledValueError(ParseError):
    """A line value outside the finite set accepted for its field."""

    def __init__(self, line: int, value: str, field: Optional[str] = None):
        self.value = value
        self.field = field
        what = f" for {field}" if field else ""
        super().__init__(line, f"Unhandled value {value!r}{what}")


class UnhandledTokenError(ParseError):
    """The token stream does not match the grammar at this point."""

    def __init__(self, line: int, token: Any):
        self.token = token
        super().__init__(line, f"Unhandled token {token!r}")


class MissingDataError(ParseError):
    """A required value or record is absent."""

    def __init__(self, line: int, what: str = "required value"):
        self.what = what
        super().__init__(line, f"Missing {what}")


class MalformedDataError(ParseError):
    """Data is present but structurally or semantically invalid."""

    def __init__(self, line: int, detail: str = "malformed data"):
        self.detail = detail
        super().__init__(line, detail)


class GedcomSyntaxError(MalformedDataError):
    """Raised when a GEDCOM line cannot be split into level/pointer/tag/value."""


class DuplicateEventError(ParseError):
    """A record received a second event of a kind that must be unique."""

    def __init__(self, kind: Any, line: int = 0, owner: Optional[str] = None):
        self.kind = kind
        self.owner = owner
        name = getattr(kind, "label", kind)
        who = f"{owner} " if owner else ""
        super().__init__(line, f"{who}already has a {name} event")


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------

class AnalysisError(GedcomError):
    """Base class for failures in graph analysis over a RecordTree."""


class CycleError(AnalysisError):
    """The descent graph contains a cycle; ``xref`` is where it was closed."""

    def __init__(self, xref: str):
        self.xref = xref
        super().__init__(f"Tree has a cycle through {xref}")
