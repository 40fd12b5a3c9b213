# src/gedcom_graph/records/event.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Protocol, runtime_checkable

from gedcom_graph.core.exceptions import DuplicateEventError


# ---------------------------------------------------------------------------
# Event kinds
# ---------------------------------------------------------------------------

class EventKind(Enum):
    ADOPTION = "Adoption"
    BIRTH = "Birth"
    BURIAL = "Burial"
    DEATH = "Death"
    CHRISTENING = "Christening"
    MARRIAGE = "Marriage"
    RESIDENCE = "Residence"
    SOURCE_DATA = "SourceData"
    # Used for any event tag without a dedicated kind (CENS, EMIG, DIV, ...)
    OTHER = "Other"

    @property
    def label(self) -> str:
        return self.value


EVENT_TAG_KINDS = {
    "ADOP": EventKind.ADOPTION,
    "BIRT": EventKind.BIRTH,
    "BURI": EventKind.BURIAL,
    "CHR": EventKind.CHRISTENING,
    "DEAT": EventKind.DEATH,
    "MARR": EventKind.MARRIAGE,
    "RESI": EventKind.RESIDENCE,
}

INDIVIDUAL_EVENT_TAGS: FrozenSet[str] = frozenset({
    "ADOP", "BIRT", "BAPM", "BARM", "BASM", "BLES", "BURI", "CENS", "CHR",
    "CHRA", "CONF", "CREM", "DEAT", "EMIG", "FCOM", "GRAD", "IMMI", "NATU",
    "ORDN", "RETI", "RESI", "PROB", "WILL", "EVEN",
})

FAMILY_EVENT_TAGS: FrozenSet[str] = frozenset({
    "ANUL", "CENS", "DIV", "DIVF", "ENGA", "MARB", "MARC", "MARR", "MARL",
    "MARS", "RESI", "EVEN",
})


# ---------------------------------------------------------------------------
# Event records
# ---------------------------------------------------------------------------

@dataclass(slots=True)
class SourceCitation:
    """A ``SOUR @S1@`` pointer hanging off an event or record."""
    xref: str
    page: Optional[str] = None
    quality: Optional[str] = None


@dataclass(slots=True)
class Event:
    """
    A dated / placed fact about an individual, a family or a source.

    ``source_data`` holds the recorded-events text when ``kind`` is
    SOURCE_DATA (the ``EVEN`` line inside a source's DATA block).
    ``tag`` keeps the GEDCOM tag the event came from so OTHER events remain
    distinguishable.
    """
    kind: EventKind
    tag: Optional[str] = None
    source_data: Optional[str] = None
    description: Optional[str] = None
    date: Optional[str] = None
    place: Optional[str] = None
    citations: List[SourceCitation] = field(default_factory=list)

    @classmethod
    def from_tag(cls, tag: str) -> "Event":
        return cls(kind=EVENT_TAG_KINDS.get(tag, EventKind.OTHER), tag=tag)

    def with_source_data(self, value: str) -> None:
        """Convert this event into a SOURCE_DATA event carrying ``value``."""
        self.kind = EventKind.SOURCE_DATA
        self.source_data = value

    def add_citation(self, citation: SourceCitation) -> None:
        self.citations.append(citation)

    def same_kind(self, other: "Event") -> bool:
        return self.kind is other.kind and self.source_data == other.source_data


# ---------------------------------------------------------------------------
# "Has events" capability
# ---------------------------------------------------------------------------

@runtime_checkable
class HasEvents(Protocol):
    """Capability shared by records that carry a list of events."""

    def add_event(self, event: Event) -> None: ...

    def events(self) -> List[Event]: ...

    def dates(self) -> List[str]: ...

    def places(self) -> List[str]: ...


def check_singular(
    existing: List[Event],
    event: Event,
    singular: FrozenSet[EventKind],
    owner: Optional[str] = None,
) -> None:
    """Raise DuplicateEventError if ``event`` repeats a singular kind."""
    if event.kind not in singular:
        return
    for e in existing:
        if e.same_kind(event):
            raise DuplicateEventError(e.kind, owner=owner)


def event_dates(events: List[Event]) -> List[str]:
    return [e.date for e in events if e.date is not None]


def event_places(events: List[Event]) -> List[str]:
    return [e.place for e in events if e.place is not None]
