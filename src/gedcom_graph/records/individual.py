# src/gedcom_graph/records/individual.py

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Dict, FrozenSet, List, Optional, Set

from gedcom_graph.records.event import (
    Event,
    EventKind,
    SourceCitation,
    check_singular,
    event_dates,
    event_places,
)


class Sex(Enum):
    MALE = "M"
    FEMALE = "F"
    NONBINARY = "N"
    UNKNOWN = "U"

    @classmethod
    def from_code(cls, code: str) -> "Sex":
        """Map a GEDCOM SEX value; raises ValueError for anything else."""
        return cls(code)


class Pedigree(Enum):
    ADOPTED = "adopted"
    BIRTH = "birth"
    FOSTER = "foster"
    SEALING = "sealing"

    @classmethod
    def from_text(cls, text: str) -> "Pedigree":
        """Case-insensitive lookup; raises ValueError for unknown text."""
        return cls(text.strip().lower())


class FamilyLinkType(Enum):
    SPOUSE = "FAMS"
    CHILD = "FAMC"


@dataclass(slots=True)
class FamilyLink:
    """A FAMS / FAMC line: which family, in which role, with what pedigree."""
    family: str
    link_type: FamilyLinkType
    pedigree: Optional[Pedigree] = None

    @classmethod
    def from_tag(cls, family: str, tag: str) -> "FamilyLink":
        return cls(family=family, link_type=FamilyLinkType(tag))


@dataclass(slots=True)
class Name:
    """
    GEDCOM NAME substructure.

    ``value`` is the full line value, e.g. "Gregor Johann /Mendel/"; the
    remaining fields come from GIVN / SURN / NPFX / SPFX / NSFX / NICK.
    """
    value: Optional[str] = None
    given: Optional[str] = None
    surname: Optional[str] = None
    prefix: Optional[str] = None
    surname_prefix: Optional[str] = None
    suffix: Optional[str] = None
    nickname: Optional[str] = None


@dataclass(slots=True)
class CustomData:
    """Unrecognized (vendor) tag captured as a key/value pair."""
    tag: str
    value: Optional[str] = None


@dataclass(slots=True)
class Individual:
    """
    A person within the family tree.

    ``fam_spouse`` and ``fam_child`` may name families that are never
    defined in the file; consumers must tolerate dangling references.
    """
    SINGULAR_EVENT_KINDS: ClassVar[FrozenSet[EventKind]] = frozenset()

    xref: Optional[str] = None
    name: Optional[Name] = None
    title: Optional[str] = None
    sex: Sex = Sex.UNKNOWN
    fam_spouse: Set[str] = field(default_factory=set)
    fam_child: Dict[str, Optional[Pedigree]] = field(default_factory=dict)
    custom_data: List[CustomData] = field(default_factory=list)
    last_updated: Optional[str] = None
    notes: List[str] = field(default_factory=list)
    citations: List[SourceCitation] = field(default_factory=list)
    _events: List[Event] = field(default_factory=list, init=False)

    def add_family_link(self, link: FamilyLink) -> None:
        if link.link_type is FamilyLinkType.SPOUSE:
            self.fam_spouse.add(link.family)
        elif link.family not in self.fam_child or link.pedigree is not None:
            self.fam_child[link.family] = link.pedigree

    def add_custom_data(self, data: CustomData) -> None:
        self.custom_data.append(data)

    # -- HasEvents ---------------------------------------------------------

    def add_event(self, event: Event) -> None:
        check_singular(self._events, event, self.SINGULAR_EVENT_KINDS, self.xref)
        self._events.append(event)

    def events(self) -> List[Event]:
        return list(self._events)

    def dates(self) -> List[str]:
        return event_dates(self._events)

    def places(self) -> List[str]:
        return event_places(self._events)
