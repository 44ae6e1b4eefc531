"""
Subtree layout: bottom-up widths, top-down x positions.

Each family group is laid out from its family units. A member's subtree width
covers its descendants only; attached partners ride along next to their
anchor, and the room they need beyond the subtree width is reserved in the
member's footprint so cards of one generation do not overlap.
"""

from dataclasses import dataclass, field
import logging

from config import LayoutConfig
from models import LayoutNode, LayoutReport
from ordering import birth_key_missing_last
from units import compose_family_units, find_roots, group_siblings_by_parents

logger = logging.getLogger(__name__)


@dataclass
class LayoutState:
    """Caches for one layout run. Never shared between runs."""

    config: LayoutConfig
    report: LayoutReport = field(default_factory=LayoutReport)
    widths: dict[str, float] = field(default_factory=dict)
    owned_groups: dict[str, list[list[LayoutNode]]] = field(default_factory=dict)
    claimed: set[str] = field(default_factory=set)
    measuring: set[str] = field(default_factory=set)
    placed: set[str] = field(default_factory=set)


# ============================================================================
# Spacing and ordering rules
# ============================================================================


def block_children(node: LayoutNode) -> list[LayoutNode]:
    """Children of a member and of its attached partners, without repeats."""
    children = list(node.children)
    for partner in node.attached_partners():
        for child in partner.children:
            if not any(c is child for c in children):
                children.append(child)
    return children


def couple_block_width(node: LayoutNode, config: LayoutConfig) -> float:
    return config.card_width + config.partner_offset * len(node.attached_partners())


def sibling_gap(left: LayoutNode, right: LayoutNode, config: LayoutConfig) -> float:
    """
    Horizontal gap between two adjacent blood relatives.

    Grows with the number of children the pair has, so descendant fans do
    not run into each other, and with an attached partner on either side.
    """
    left_count = len(block_children(left))
    right_count = len(block_children(right))
    gap = config.child_gap

    total = left_count + right_count
    if total > 0:
        gap += total * config.per_child_gap
        if left_count > 0 and right_count > 0:
            gap += config.child_gap * 1.5
        if left_count >= config.many_children_threshold or right_count >= config.many_children_threshold:
            gap += config.child_gap * 2

    if left.attached_partners() or right.attached_partners():
        gap += config.spouse_spacing / 2
    return gap


def member_sort_key(node: LayoutNode, widths: dict[str, float]) -> tuple:
    """Members with a partner first, then narrower subtrees, then birth date."""
    return (0 if node.attached_partners() else 1, widths.get(node.id, 0.0), *birth_key_missing_last(node))


def order_members(members: list[LayoutNode], state: LayoutState) -> list[LayoutNode]:
    return sorted(members, key=lambda n: member_sort_key(n, state.widths))


def footprint(node: LayoutNode, state: LayoutState) -> float:
    return max(state.widths.get(node.id, state.config.card_width), couple_block_width(node, state.config))


# ============================================================================
# Measure pass
# ============================================================================


def measure_member(node: LayoutNode, state: LayoutState) -> float:
    """
    Return the subtree width of one member, claiming its unclaimed children.

    A child is claimed by the first member that measures it, so every
    subtree is laid out once even when a child is reachable from two places.
    """
    if node.id in state.widths:
        return state.widths[node.id]
    if node.id in state.measuring:
        # cyclic input: stop descending
        return state.config.card_width
    state.measuring.add(node.id)

    children = [c for c in block_children(node) if c.id not in state.claimed]
    state.claimed.update(c.id for c in children)

    groups = []
    for group in group_siblings_by_parents(children):
        # attached partners are placed by their anchor, not by their parents
        blood = [c for c in group if not c.is_attached_partner]
        if blood:
            groups.append(blood)
    state.owned_groups[node.id] = groups

    width = state.config.card_width
    if groups:
        block = sum(measure_group(g, state) for g in groups)
        block += state.config.child_gap * (len(groups) - 1)
        width = max(width, block)

    state.measuring.discard(node.id)
    state.widths[node.id] = width
    return width


def measure_group(members: list[LayoutNode], state: LayoutState) -> float:
    """Total width of a row of sibling members including their gaps."""
    if not members:
        return 0.0
    for member in members:
        measure_member(member, state)
    ordered = order_members(members, state)
    width = sum(footprint(m, state) for m in ordered)
    for left, right in zip(ordered, ordered[1:]):
        width += sibling_gap(left, right, state.config)
    return width


# ============================================================================
# Place pass
# ============================================================================


def place_couple(node: LayoutNode, center: float, state: LayoutState):
    """Centre a member and its attached partners around `center`."""
    config = state.config
    partners = [p for p in node.attached_partners() if p.id not in state.placed]
    node.x = center - config.partner_offset * len(partners) / 2
    node.y = config.y_for(node.generation)
    state.placed.add(node.id)
    for i, partner in enumerate(partners, start=1):
        partner.generation = node.generation
        partner.x = node.x + config.partner_offset * i
        partner.y = node.y
        state.placed.add(partner.id)


def place_member(node: LayoutNode, x_start: float, state: LayoutState):
    if node.id in state.placed:
        return
    center = x_start + footprint(node, state) / 2

    groups = state.owned_groups.get(node.id, [])
    if groups:
        group_widths = [measure_group(g, state) for g in groups]
        total = sum(group_widths) + state.config.child_gap * (len(groups) - 1)
        cursor = center - total / 2
        for group, width in zip(groups, group_widths):
            place_group(group, cursor, state)
            cursor += width + state.config.child_gap

    place_couple(node, center, state)


def place_group(members: list[LayoutNode], x_start: float, state: LayoutState):
    ordered = order_members(members, state)
    cursor = x_start
    for i, member in enumerate(ordered):
        place_member(member, cursor, state)
        cursor += footprint(member, state)
        if i < len(ordered) - 1:
            cursor += sibling_gap(member, ordered[i + 1], state.config)


def _mean_x(nodes: list[LayoutNode]) -> float:
    return sum(n.x for n in nodes) / len(nodes)


def place_leftovers(group: list[LayoutNode], deferred: list[LayoutNode], right_edge: float, state: LayoutState):
    """
    Position deferred ancestors and any member the unit layout never reached.

    Such a member sits above the mean x of its placed children; one with no
    placed children goes into a side lane right of the group.
    """
    config = state.config
    for ancestor in deferred:
        children = [c for c in ancestor.children if c.id in state.placed]
        if children and ancestor.id not in state.placed:
            place_couple(ancestor, _mean_x(children), state)
            state.report.deferred_ancestors += 1

    lane_x = right_edge + config.family_group_spacing
    for node in group:
        if node.id in state.placed:
            continue
        children = [c for c in node.children if c.id in state.placed]
        if children:
            place_couple(node, _mean_x(children), state)
            logger.debug("Placed leftover %s above its children", node.id)
        else:
            width = couple_block_width(node, config)
            place_couple(node, lane_x + width / 2, state)
            lane_x += width + config.child_gap
            logger.debug("Placed orphan %s in side lane at x=%.0f", node.id, node.x)
        state.report.orphans_placed += 1


def layout_family_group(group: list[LayoutNode], x_start: float, state: LayoutState) -> float:
    """Lay out one connected family group from `x_start`; return its right edge."""
    config = state.config
    roots, deferred = find_roots(group)
    units = compose_family_units(roots)
    for unit in units:
        state.claimed.update(n.id for n in unit)

    cursor = x_start
    right_edge = x_start
    for unit in units:
        blood = [n for n in unit if not n.is_attached_partner]
        width = measure_group(blood, state)
        place_group(blood, cursor, state)
        right_edge = cursor + width
        cursor = right_edge + config.family_group_spacing

    place_leftovers(group, deferred, right_edge, state)

    placed = [n for n in group if n.id in state.placed]
    if placed:
        right_edge = max(right_edge, max(n.x for n in placed) + config.card_width / 2)
    return right_edge


def layout_groups(groups: list[list[LayoutNode]], config: LayoutConfig, report: LayoutReport | None = None) -> LayoutState:
    """Lay out every family group left to right, one after another."""
    state = LayoutState(config=config, report=report if report is not None else LayoutReport())
    cursor = config.base_x
    for group in groups:
        right_edge = layout_family_group(group, cursor, state)
        cursor = right_edge + config.family_group_spacing
    return state
