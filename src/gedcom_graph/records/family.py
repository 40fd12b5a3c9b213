# src/gedcom_graph/records/family.py

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


@dataclass(slots=True)
class Family:
    """
    A family unit: a relationship between individuals.

    HUSB / WIFE are treated as plain parent slots. No gender validation is
    done and either list may hold zero, one or several xrefs.
    """
    SINGULAR_EVENT_KINDS: ClassVar[FrozenSet[EventKind]] = frozenset({
        EventKind.MARRIAGE,
    })

    xref: Optional[str] = None
    husbs: List[str] = field(default_factory=list)
    wives: List[str] = field(default_factory=list)
    children: List[str] = field(default_factory=list)
    num_children: Optional[int] = None
    notes: List[str] = field(default_factory=list)
    last_updated: Optional[str] = None
    _events: List[Event] = field(default_factory=list, init=False)

    def add_husband(self, xref: str) -> None:
        self.husbs.append(xref)

    def add_wife(self, xref: str) -> None:
        self.wives.append(xref)

    def add_child(self, xref: str) -> None:
        self.children.append(xref)

    def spouses(self) -> List[str]:
        return self.husbs + self.wives

    def members(self) -> List[str]:
        return self.husbs + self.wives + self.children

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
