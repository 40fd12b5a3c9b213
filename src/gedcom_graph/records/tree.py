# src/gedcom_graph/records/tree.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from gedcom_graph.logging import get_logger
from gedcom_graph.records.entities import (
    Header,
    Media,
    Repository,
    Source,
    Submitter,
)
from gedcom_graph.records.family import Family
from gedcom_graph.records.individual import Individual

log = get_logger("records.tree")


@dataclass(slots=True)
class RecordTree:
    """
    Everything parsed out of one GEDCOM file.

    Individuals and families are indexed by xref; a duplicate xref replaces
    the earlier record (last write wins). Repositories, sources, submitters
    and multimedia are kept in file order without an index.
    """
    header: Header = field(default_factory=Header)
    individuals: Dict[str, Individual] = field(default_factory=dict)
    families: Dict[str, Family] = field(default_factory=dict)
    repositories: List[Repository] = field(default_factory=list)
    sources: List[Source] = field(default_factory=list)
    submitters: List[Submitter] = field(default_factory=list)
    multimedia: List[Media] = field(default_factory=list)

    # ------------------------------------------------------------------ #
    # Insertion helpers
    # ------------------------------------------------------------------ #

    def add_individual(self, xref: Optional[str], individual: Individual) -> None:
        if not xref:
            log.warning("Dropping INDI record without a cross-reference id")
            return
        if xref in self.individuals:
            log.warning("Duplicate individual %s; keeping the later record", xref)
        self.individuals[xref] = individual

    def add_family(self, xref: Optional[str], family: Family) -> None:
        if not xref:
            log.warning("Dropping FAM record without a cross-reference id")
            return
        if xref in self.families:
            log.warning("Duplicate family %s; keeping the later record", xref)
        self.families[xref] = family

    def add_repository(self, repo: Repository) -> None:
        self.repositories.append(repo)

    def add_source(self, source: Source) -> None:
        self.sources.append(source)

    def add_submitter(self, submitter: Submitter) -> None:
        self.submitters.append(submitter)

    def add_multimedia(self, media: Media) -> None:
        self.multimedia.append(media)

    # ------------------------------------------------------------------ #
    # Summary
    # ------------------------------------------------------------------ #

    def counts(self) -> Dict[str, int]:
        return {
            "submitters": len(self.submitters),
            "individuals": len(self.individuals),
            "families": len(self.families),
            "repositories": len(self.repositories),
            "sources": len(self.sources),
            "multimedia": len(self.multimedia),
        }

    def summary(self) -> str:
        """Plain-text statistics block, one line per entity kind."""
        rule = "-" * 22
        lines = [rule, "| Gedcom Data Stats: |", rule]
        lines.extend(f"  {kind}: {count}" for kind, count in self.counts().items())
        lines.append(rule)
        return "\n".join(lines)

    def stats(self) -> None:
        print(self.summary())

    def __repr__(self) -> str:  # pragma: no cover - cosmetic
        return (
            f"<RecordTree individuals={len(self.individuals)} "
            f"families={len(self.families)}>"
        )
