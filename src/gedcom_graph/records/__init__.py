"""
Record tree data model.

Pure data: entity dataclasses plus the RecordTree that owns them. The
parser builds these; the analyzer and exporter only read them.
"""

from __future__ import annotations

from .entities import (
    Address,
    Header,
    HeaderSource,
    Media,
    MediaFile,
    RepoCitation,
    Repository,
    Source,
    SourceData,
    Submitter,
)
from .event import (
    EVENT_TAG_KINDS,
    FAMILY_EVENT_TAGS,
    INDIVIDUAL_EVENT_TAGS,
    Event,
    EventKind,
    HasEvents,
    SourceCitation,
)
from .family import Family
from .individual import (
    CustomData,
    FamilyLink,
    FamilyLinkType,
    Individual,
    Name,
    Pedigree,
    Sex,
)
from .tree import RecordTree

__all__ = [
    "Address",
    "CustomData",
    "EVENT_TAG_KINDS",
    "Event",
    "EventKind",
    "FAMILY_EVENT_TAGS",
    "Family",
    "FamilyLink",
    "FamilyLinkType",
    "HasEvents",
    "Header",
    "HeaderSource",
    "INDIVIDUAL_EVENT_TAGS",
    "Individual",
    "Media",
    "MediaFile",
    "Name",
    "Pedigree",
    "RecordTree",
    "RepoCitation",
    "Repository",
    "Sex",
    "Source",
    "SourceCitation",
    "SourceData",
    "Submitter",
]
