"""
Graph analysis over a completed RecordTree.

Two traversals of the implicit relationship graph:

* ``topological_sort`` orders individuals by descent: every child of a
  family comes before that family's spouses. It follows parent -> child
  edges only and fails with CycleError when the data makes someone their
  own ancestor.
* ``connected_components`` partitions individuals into groups linked by any
  shared family membership (spouses, parents, children, siblings).

Spouse / child membership is read from both sides of the data: FAMS / FAMC
links on the individual and HUSB / WIFE / CHIL lines on the family.
References that do not resolve to a known individual or family are ignored.
Neither function mutates the tree.
"""

from __future__ import annotations

from collections import Counter
from enum import Enum
from typing import Dict, Iterator, List, Optional, Set, Tuple

from gedcom_graph.core.exceptions import CycleError
from gedcom_graph.logging import get_logger
from gedcom_graph.records import Family, RecordTree

log = get_logger("analysis.analyzer")


# ---------------------------------------------------------------------------
# Membership indexes
# ---------------------------------------------------------------------------

def _membership(tree: RecordTree) -> Tuple[Dict[str, List[str]], Dict[str, List[str]]]:
    """
    Return (spouse_families, child_families): xref -> sorted family xrefs,
    restricted to families present in the tree.
    """
    spouse_of: Dict[str, Set[str]] = {xref: set() for xref in tree.individuals}
    child_of: Dict[str, Set[str]] = {xref: set() for xref in tree.individuals}

    for xref, individual in tree.individuals.items():
        spouse_of[xref].update(f for f in individual.fam_spouse if f in tree.families)
        child_of[xref].update(f for f in individual.fam_child if f in tree.families)

    for fam_xref, family in tree.families.items():
        for spouse in family.spouses():
            if spouse in spouse_of:
                spouse_of[spouse].add(fam_xref)
        for child in family.children:
            if child in child_of:
                child_of[child].add(fam_xref)

    return (
        {xref: sorted(fams) for xref, fams in spouse_of.items()},
        {xref: sorted(fams) for xref, fams in child_of.items()},
    )


def _family_children(tree: RecordTree, family: Family) -> Iterator[str]:
    for child in family.children:
        if child in tree.individuals:
            yield child


# ---------------------------------------------------------------------------
# Topological sort
# ---------------------------------------------------------------------------

class _Mark(Enum):
    IN_PROGRESS = 1
    DONE = 2


def topological_sort(tree: RecordTree) -> List[str]:
    """
    Sort individual xrefs so children precede the spouses of their family.

    Depth-first with three colours (unvisited / in progress / done) on an
    explicit stack, so deep pedigrees cannot exhaust the interpreter stack.
    Roots are taken in lexicographic xref order, spouse families in xref
    order and children in the order the family declares them.

    Raises:
        CycleError: when an in-progress individual is reached again.
    """
    spouse_of, _ = _membership(tree)

    def children_of(xref: str) -> Iterator[str]:
        for fam_xref in spouse_of.get(xref, ()):
            yield from _family_children(tree, tree.families[fam_xref])

    marks: Dict[str, _Mark] = {}
    ordered: List[str] = []

    for root in sorted(tree.individuals):
        if root in marks:
            continue

        marks[root] = _Mark.IN_PROGRESS
        stack = [(root, children_of(root))]

        while stack:
            xref, pending = stack[-1]
            for child in pending:
                mark = marks.get(child)
                if mark is _Mark.DONE:
                    continue
                if mark is _Mark.IN_PROGRESS:
                    log.warning("Cycle detected at %s", child)
                    raise CycleError(child)
                marks[child] = _Mark.IN_PROGRESS
                stack.append((child, children_of(child)))
                break
            else:
                stack.pop()
                marks[xref] = _Mark.DONE
                ordered.append(xref)

    return ordered


# ---------------------------------------------------------------------------
# Connected components
# ---------------------------------------------------------------------------

def connected_components(tree: RecordTree) -> List[Set[str]]:
    """
    Partition individual xrefs into family-connected components.

    Seeds are taken in lexicographic order from the not-yet-visited pool;
    components are returned in the order their seeds were taken.
    """
    spouse_of, child_of = _membership(tree)

    def neighbours(xref: str) -> Iterator[str]:
        for fam_xref in spouse_of[xref] + child_of[xref]:
            for member in tree.families[fam_xref].members():
                if member in tree.individuals:
                    yield member

    visited: Set[str] = set()
    components: List[Set[str]] = []

    for seed in sorted(tree.individuals):
        if seed in visited:
            continue

        component = {seed}
        visited.add(seed)
        stack = [seed]
        while stack:
            for other in neighbours(stack.pop()):
                if other not in visited:
                    visited.add(other)
                    component.add(other)
                    stack.append(other)

        components.append(component)

    return components


# ---------------------------------------------------------------------------
# Analyzer facade
# ---------------------------------------------------------------------------

class Analyzer:
    """
    Runs both analyses over ``tree`` up front.

    Construction raises CycleError when the descent graph has a cycle; use
    ``connected_components`` directly to analyse such a tree.
    """

    def __init__(self, tree: RecordTree):
        self.tree = tree
        self.individuals_sorted: List[str] = topological_sort(tree)
        self.components: List[Set[str]] = connected_components(tree)
        log.info(
            "Analyzed %d individuals into %d components",
            len(self.individuals_sorted), len(self.components),
        )

    def component_of(self, xref: str) -> Optional[Set[str]]:
        for component in self.components:
            if xref in component:
                return component
        return None

    def count_individual_names(self) -> Dict[str, int]:
        """How many individuals carry each full NAME value."""
        counts = Counter(
            ind.name.value
            for ind in self.tree.individuals.values()
            if ind.name is not None and ind.name.value is not None
        )
        return dict(sorted(counts.items()))

    def leaf_individuals(self) -> List[str]:
        """Individuals with no known children in any family they head."""
        spouse_of, _ = _membership(self.tree)
        leaves = []
        for xref in sorted(self.tree.individuals):
            has_children = any(
                next(_family_children(self.tree, self.tree.families[f]), None)
                or self.tree.families[f].num_children
                for f in spouse_of[xref]
            )
            if not has_children:
                leaves.append(xref)
        return leaves
