# src/gedcom_graph/records/entities.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, FrozenSet, List, Optional

from gedcom_graph.records.event import (
    Event,
    EventKind,
    check_singular,
    event_dates,
    event_places,
)


# -----------------------------
# Small atoms
# -----------------------------

@dataclass(slots=True)
class Address:
    """ADDR structure; ``value`` is the reassembled multi-line address."""
    value: Optional[str] = None
    adr1: Optional[str] = None
    adr2: Optional[str] = None
    adr3: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    post: Optional[str] = None
    country: Optional[str] = None


@dataclass(slots=True)
class RepoCitation:
    xref: str
    call_number: Optional[str] = None


@dataclass(slots=True)
class MediaFile:
    path: str
    form: Optional[str] = None
    media_type: Optional[str] = None
    title: Optional[str] = None


# -----------------------------
# Header
# -----------------------------

@dataclass(slots=True)
class HeaderSource:
    """HEAD.SOUR: the system that produced the file."""
    system_id: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    corporation: Optional[str] = None
    address: Optional[Address] = None
    data_name: Optional[str] = None


@dataclass(slots=True)
class Header:
    encoding: Optional[str] = None
    encoding_version: Optional[str] = None
    copyright: Optional[str] = None
    corporation: Optional[str] = None
    date: Optional[str] = None
    destinations: List[str] = field(default_factory=list)
    language: Optional[str] = None
    filename: Optional[str] = None
    note: Optional[str] = None
    submitter_ref: Optional[str] = None
    submission_ref: Optional[str] = None
    gedcom_version: Optional[str] = None
    gedcom_form: Optional[str] = None
    place_format: Optional[str] = None
    source: Optional[HeaderSource] = None

    def add_destination(self, destination: str) -> None:
        self.destinations.append(destination)


# -----------------------------
# Top-level records
# -----------------------------

@dataclass(slots=True)
class SourceData:
    """The DATA block of a source: recorded events and responsible agency."""
    SINGULAR_EVENT_KINDS: ClassVar[FrozenSet[EventKind]] = frozenset()

    agency: Optional[str] = None
    _events: List[Event] = field(default_factory=list, init=False)

    def add_event(self, event: Event) -> None:
        check_singular(self._events, event, self.SINGULAR_EVENT_KINDS)
        self._events.append(event)

    def events(self) -> List[Event]:
        return list(self._events)

    def dates(self) -> List[str]:
        return event_dates(self._events)

    def places(self) -> List[str]:
        return event_places(self._events)


@dataclass(slots=True)
class Source:
    xref: Optional[str] = None
    title: Optional[str] = None
    abbreviation: Optional[str] = None
    author: Optional[str] = None
    publication: Optional[str] = None
    text: Optional[str] = None
    data: SourceData = field(default_factory=SourceData)
    repo_citations: List[RepoCitation] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def add_repo_citation(self, citation: RepoCitation) -> None:
        self.repo_citations.append(citation)


@dataclass(slots=True)
class Repository:
    xref: Optional[str] = None
    name: Optional[str] = None
    address: Optional[Address] = None
    phone: Optional[str] = None
    notes: List[str] = field(default_factory=list)


@dataclass(slots=True)
class Submitter:
    """Who reported the genealogy facts."""
    xref: Optional[str] = None
    name: Optional[str] = None
    address: Optional[Address] = None
    phone: Optional[str] = None
    comments: Optional[str] = None
    language: Optional[str] = None


@dataclass(slots=True)
class Media:
    """A level-0 OBJE multimedia record."""
    xref: Optional[str] = None
    title: Optional[str] = None
    files: List[MediaFile] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)
