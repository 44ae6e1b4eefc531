"""Maternal/paternal side separation around a focal person."""

from collections import deque
import logging

from config import LayoutConfig
from models import LayoutNode
from ordering import name_key

logger = logging.getLogger(__name__)

# positions closer than this count as equal
EPSILON = 1e-6


def order_parents(a: LayoutNode, b: LayoutNode) -> tuple[LayoutNode, LayoutNode]:
    """
    Return (left, right) for two parents.

    Female goes left and male right; without a usable gender the earlier
    birth date goes left, and names settle the rest.
    """
    ga, gb = a.person.gender, b.person.gender
    if ga != gb:
        if ga == "female" or gb == "male":
            return a, b
        if gb == "female" or ga == "male":
            return b, a

    da, db = a.person.birth_date, b.person.birth_date
    if da and db and da != db:
        return (a, b) if da < db else (b, a)

    return (a, b) if name_key(a) <= name_key(b) else (b, a)


def _walk(start: list[LayoutNode], step, blocked: set[str]) -> list[LayoutNode]:
    seen = {n.id for n in start}
    found = list(start)
    queue = deque(start)
    while queue:
        node = queue.popleft()
        for nxt in step(node):
            if nxt.id in seen or nxt.id in blocked:
                continue
            seen.add(nxt.id)
            found.append(nxt)
            queue.append(nxt)
    return found


def shared_descendants(left: LayoutNode, right: LayoutNode, focal: LayoutNode) -> list[LayoutNode]:
    """Children of both parents other than the focal person, their descendants and partners."""
    right_children = {c.id for c in right.children}
    shared = [c for c in left.children if c.id in right_children and c is not focal]
    found = _walk(shared, lambda n: n.children, {focal.id, left.id, right.id})
    ids = {n.id for n in found}
    for node in list(found):
        for partner in node.attached_partners():
            if partner.id not in ids and partner is not focal:
                ids.add(partner.id)
                found.append(partner)
    return found


def parent_lineage(parent: LayoutNode, blocked: set[str]) -> list[LayoutNode]:
    """
    Everyone who moves with one parent.

    Ancestors of the parent, their siblings, and all their descendants,
    never crossing a blocked id. Attached partners and anchors are added so
    couples move as one piece.
    """
    ancestors = _walk([parent], lambda n: n.parents, blocked)
    ids = {n.id for n in ancestors}
    core = list(ancestors)
    for node in ancestors:
        for sibling in node.siblings:
            if sibling.id not in ids and sibling.id not in blocked:
                ids.add(sibling.id)
                core.append(sibling)

    lineage = _walk(core, lambda n: n.children, blocked)
    ids = {n.id for n in lineage}
    for node in list(lineage):
        mates = node.attached_partners()
        if node.anchor is not None:
            mates.append(node.anchor)
        for mate in mates:
            if mate.id not in ids and mate.id not in blocked:
                ids.add(mate.id)
                lineage.append(mate)
    return lineage


def focal_component(focal: LayoutNode) -> list[LayoutNode]:
    """Everyone connected to the focal person by any relation."""
    return _walk([focal], lambda n: n.relatives(), set())


def _by_generation(nodes: list[LayoutNode]) -> dict[int, list[LayoutNode]]:
    rows: dict[int, list[LayoutNode]] = {}
    for node in nodes:
        rows.setdefault(node.generation, []).append(node)
    return rows


def _is_couple(a: LayoutNode, b: LayoutNode) -> bool:
    return a.anchor is b or b.anchor is a


def clearing_offset(
    lineage: list[LayoutNode], obstacles: list[LayoutNode], offset: float, direction: int, card_width: float
) -> float:
    """
    Extend `offset` in `direction` (-1 left, +1 right) until no card of the
    lineage, moved by it, overlaps an obstacle card of the same generation.
    """
    rows = _by_generation(obstacles)
    while True:
        needed = []
        for node in lineage:
            x = node.x + offset
            for other in rows.get(node.generation, ()):
                if not _is_couple(node, other) and abs(x - other.x) < card_width - EPSILON:
                    needed.append(other.x + direction * card_width - node.x)
        if not needed:
            return offset
        offset = min(needed) if direction < 0 else max(needed)


def nearest_free_shift(
    nodes: list[LayoutNode], obstacles: list[LayoutNode], shift: float, card_width: float
) -> float:
    """
    The shift closest to `shift` that moves `nodes` as one block without any
    card landing on an obstacle card of its generation.
    """
    rows = _by_generation(obstacles)
    blocked = []
    for node in nodes:
        for other in rows.get(node.generation, ()):
            if not _is_couple(node, other):
                gap = other.x - node.x
                blocked.append((gap - card_width, gap + card_width))

    def free(s: float) -> bool:
        return all(not (lo + EPSILON < s < hi - EPSILON) for lo, hi in blocked)

    candidates = [shift, *(bound for interval in blocked for bound in interval)]
    return min((c for c in candidates if free(c)), key=lambda c: (abs(c - shift), abs(c)))


def _move(nodes: list[LayoutNode], offset: float):
    if abs(offset) < EPSILON:
        return
    for node in nodes:
        node.x += offset


def separate_sides(nodes: dict[str, LayoutNode], focal_id: str | None, config: LayoutConfig) -> dict[str, list[str]]:
    """
    Push the focal person's parents and their lineages apart.

    The left parent's lineage is translated so the parent sits one family
    spacing left of the focal person, the right one the same distance to the
    right. A lineage that would land on someone else's card keeps moving
    outward until it clears. Descendants of both parents follow 30% of the
    parents' midpoint shift, as far as that leaves them clear of every other
    card in their row. A second run on the result moves nothing.

    Returns the moved ids per side.
    """
    moved: dict[str, list[str]] = {"left": [], "right": [], "shared": []}
    focal = nodes.get(focal_id) if focal_id is not None else None
    if focal is None or not focal.parents:
        return moved

    spacing = config.family_group_spacing
    card_width = config.card_width
    component = focal_component(focal)

    if len(focal.parents) == 1:
        parent = focal.parents[0]
        lineage = parent_lineage(parent, {focal.id})
        lineage_ids = {n.id for n in lineage}
        others = [n for n in component if n.id not in lineage_ids]
        offset = clearing_offset(lineage, others, focal.x - spacing - parent.x, -1, card_width)
        _move(lineage, offset)
        moved["left"] = [n.id for n in lineage]
        logger.debug("Moved single-parent lineage of %s: %s", parent.id, moved["left"])
        return moved

    if len(focal.parents) > 2:
        logger.warning("%s has %d parents; separating the first two", focal.id, len(focal.parents))
    left, right = order_parents(focal.parents[0], focal.parents[1])
    shared = shared_descendants(left, right, focal)
    shared_ids = {n.id for n in shared}

    left_lineage = parent_lineage(left, {focal.id, right.id} | shared_ids)
    right_lineage = parent_lineage(right, {focal.id, left.id} | shared_ids)
    overlap = {n.id for n in left_lineage} & {n.id for n in right_lineage}
    if overlap:
        logger.debug("Nodes on both sides stay put: %s", sorted(overlap))
    left_lineage = [n for n in left_lineage if n.id not in overlap]
    right_lineage = [n for n in right_lineage if n.id not in overlap]

    sided = {n.id for n in left_lineage} | {n.id for n in right_lineage} | shared_ids
    fixed = [n for n in component if n.id not in sided]

    old_mid = (left.x + right.x) / 2
    offset = clearing_offset(left_lineage, fixed, focal.x - spacing - left.x, -1, card_width)
    _move(left_lineage, offset)
    offset = clearing_offset(right_lineage, fixed + left_lineage, focal.x + spacing - right.x, 1, card_width)
    _move(right_lineage, offset)

    shift = ((left.x + right.x) / 2 - old_mid) * config.shared_descendant_nudge
    if abs(shift) < EPSILON:
        shift = 0.0
    shift = nearest_free_shift(shared, fixed + left_lineage + right_lineage, shift, card_width)
    _move(shared, shift)

    moved["left"] = [n.id for n in left_lineage]
    moved["right"] = [n.id for n in right_lineage]
    moved["shared"] = [n.id for n in shared]
    logger.debug("Side separation for %s: left=%s right=%s", focal.id, moved["left"], moved["right"])
    return moved
