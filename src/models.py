"""Data classes for people, kinship edges and layout nodes."""

from __future__ import annotations

from dataclasses import dataclass, field

PARENT = "parent"
CHILD = "child"
SPOUSE = "spouse"
SIBLING = "sibling"
EDGE_KINDS = (PARENT, CHILD, SPOUSE, SIBLING)

GENDERS = ("male", "female", "other")


@dataclass(frozen=True)
class Person:
    id: str
    given_name: str
    family_name: str
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_date: str | None = None  # ISO format YYYY-MM-DD or None
    gender: str | None = None  # one of GENDERS, None when unknown
    note: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.given_name} {self.family_name}".strip()


@dataclass(frozen=True)
class KinshipEdge:
    id: str
    person1_id: str
    person2_id: str
    kind: str  # parent, child, spouse, sibling


@dataclass(eq=False)
class LayoutNode:
    """
    Per-person layout state for one engine run.

    Adjacency lists hold other LayoutNodes and are symmetric. Nodes compare by
    identity, so they can be used in sets while x/y are still changing.
    """

    person: Person
    order: int = 0  # position in the input snapshot, used for stable tiebreaks
    generation: int = 0
    x: float = 0.0
    y: float = 0.0
    parents: list[LayoutNode] = field(default_factory=list, repr=False)
    children: list[LayoutNode] = field(default_factory=list, repr=False)
    spouses: list[LayoutNode] = field(default_factory=list, repr=False)
    siblings: list[LayoutNode] = field(default_factory=list, repr=False)
    is_attached_partner: bool = False
    anchor: LayoutNode | None = field(default=None, repr=False)

    @property
    def id(self) -> str:
        return self.person.id

    @property
    def anchor_id(self) -> str | None:
        return self.anchor.id if self.anchor is not None else None

    def relatives(self) -> list[LayoutNode]:
        """Parents, children, spouses and siblings in that order, each once."""
        found: list[LayoutNode] = []
        for node in (*self.parents, *self.children, *self.spouses, *self.siblings):
            if not any(n is node for n in found):
                found.append(node)
        return found

    def attached_partners(self) -> list[LayoutNode]:
        """Spouses that were resolved as partners riding along with this node."""
        return [s for s in self.spouses if s.anchor is self]


@dataclass
class LayoutReport:
    """Data-quality counters for one layout run. Nothing here is fatal."""

    dropped_unknown_person: int = 0
    dropped_self_reference: int = 0
    dropped_unknown_kind: int = 0
    duplicate_persons: int = 0
    sibling_spouse_conflicts: int = 0
    family_groups: int = 0
    deferred_ancestors: int = 0
    orphans_placed: int = 0
    step_family_groups: int = 0

    @property
    def dropped_edges(self) -> int:
        return self.dropped_unknown_person + self.dropped_self_reference + self.dropped_unknown_kind
