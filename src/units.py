"""Family unit composition: sibling clusters plus their attached partners."""

import logging

from models import LayoutNode
from ordering import birth_key_missing_last

logger = logging.getLogger(__name__)

ROOT_KEY = ()


def parents_key(node: LayoutNode) -> tuple[str, ...]:
    return tuple(sorted(p.id for p in node.parents))


def group_siblings_by_parents(nodes: list[LayoutNode]) -> list[list[LayoutNode]]:
    """Bucket nodes by their exact parent set, keeping first-seen order."""
    groups: dict[tuple[str, ...], list[LayoutNode]] = {}
    for node in nodes:
        groups.setdefault(parents_key(node), []).append(node)
    return list(groups.values())


def is_deferred_ancestor(node: LayoutNode) -> bool:
    """A lone ancestor whose children form the real root-level sibling cluster."""
    return len(node.children) >= 2 and not node.siblings and not node.spouses


def find_roots(group: list[LayoutNode]) -> tuple[list[LayoutNode], list[LayoutNode]]:
    """
    Find the layout roots of one family group.

    Roots are members with no parent inside the group. Deferred ancestors are
    set aside and their in-group children take their place as roots; they are
    positioned above those children once the rest is laid out. A group with
    no viable root falls back to its earliest-born member.

    Returns (roots, deferred).
    """
    members = {n.id for n in group}
    roots: list[LayoutNode] = []
    deferred: list[LayoutNode] = []

    for node in group:
        if any(p.id in members for p in node.parents):
            continue
        if is_deferred_ancestor(node):
            deferred.append(node)
        else:
            roots.append(node)

    for ancestor in deferred:
        logger.debug("%s deferred above children %s", ancestor.id, [c.id for c in ancestor.children])
        for child in ancestor.children:
            if child.id in members and child not in roots:
                roots.append(child)

    if not any(not r.is_attached_partner for r in roots):
        blood = [n for n in group if not n.is_attached_partner]
        fallback = min(blood or group, key=birth_key_missing_last)
        logger.debug("No viable root, falling back to earliest-born %s", fallback.id)
        roots = [fallback]
        deferred = [d for d in deferred if d is not fallback]

    return roots, deferred


def unit_sort_key(node: LayoutNode) -> tuple:
    """Blood relatives before attached partners, then by birth date."""
    return (node.is_attached_partner, *birth_key_missing_last(node))


def compose_family_units(roots: list[LayoutNode]) -> list[list[LayoutNode]]:
    """
    Cluster root nodes into family units.

    A unit starts from an unprocessed root that is not an attached partner,
    takes in every other root with the same non-empty parent set or a sibling
    edge to a member, then every attached partner of every member.
    """
    units: list[list[LayoutNode]] = []
    processed: set[str] = set()
    candidates = [r for r in roots if not r.is_attached_partner]

    for start in candidates:
        if start.id in processed:
            continue
        unit = [start]
        processed.add(start.id)

        # grow transitively so sibling-of-sibling chains end up together
        i = 0
        while i < len(unit):
            member = unit[i]
            key = parents_key(member)
            for other in candidates:
                if other.id in processed:
                    continue
                if (key != ROOT_KEY and parents_key(other) == key) or any(s is other for s in member.siblings):
                    unit.append(other)
                    processed.add(other.id)
            i += 1

        for member in list(unit):
            for partner in member.attached_partners():
                if partner.id not in processed:
                    unit.append(partner)
                    processed.add(partner.id)

        unit.sort(key=unit_sort_key)
        logger.debug("Family unit: %s", [n.id for n in unit])
        units.append(unit)

    return units
