"""Couple resolution: which spouse anchors a couple and which rides along."""

import logging

from models import LayoutNode, LayoutReport
from ordering import birth_key_missing_last

logger = logging.getLogger(__name__)


def find_blood_relatives(nodes: dict[str, LayoutNode]) -> set[str]:
    """
    Return the ids of everyone with a parent, child or sibling edge.

    The set is extended once to siblings of blood relatives.
    """
    blood = {n.id for n in nodes.values() if n.parents or n.children or n.siblings}
    for node in nodes.values():
        if node.id in blood:
            blood.update(s.id for s in node.siblings)
    return blood


def anchor_priority(node: LayoutNode) -> tuple:
    """Sort key for two blood relatives of one generation; the smaller key anchors."""
    return (-(len(node.parents) + len(node.siblings)), *birth_key_missing_last(node))


def _can_ride(partner: LayoutNode, anchor: LayoutNode) -> bool:
    """Couples never chain: a rider has no riders of its own and its anchor rides nobody."""
    return not partner.is_attached_partner and not partner.attached_partners() and not anchor.is_attached_partner


def resolve_couples(nodes: dict[str, LayoutNode], report: LayoutReport | None = None) -> list[tuple[str, str]]:
    """
    Classify every spouse pair and mark attached partners.

    A pair that is also joined by a sibling edge never forms a couple. When
    only one spouse is a blood relative the other becomes its attached
    partner. When both are, the later generation attaches to the earlier one;
    within one generation `anchor_priority` decides. A person is attached to
    at most one anchor.

    Returns the resolved (anchor id, partner id) pairs in resolution order.
    """
    report = report if report is not None else LayoutReport()
    blood = find_blood_relatives(nodes)
    seen: set[tuple[str, str]] = set()
    couples: list[tuple[str, str]] = []

    for node in nodes.values():
        for spouse in node.spouses:
            key = tuple(sorted((node.id, spouse.id)))
            if key in seen:
                continue
            seen.add(key)

            if any(s is spouse for s in node.siblings):
                report.sibling_spouse_conflicts += 1
                logger.debug("Spouse edge %s-%s ignored: they are siblings", node.id, spouse.id)
                continue

            a_blood = node.id in blood
            b_blood = spouse.id in blood
            if a_blood and not b_blood:
                anchor, partner = node, spouse
            elif b_blood and not a_blood:
                anchor, partner = spouse, node
            elif node.generation != spouse.generation:
                anchor, partner = sorted((node, spouse), key=lambda n: n.generation)
            else:
                anchor, partner = sorted((node, spouse), key=anchor_priority)

            if not _can_ride(partner, anchor) and a_blood and b_blood and _can_ride(anchor, partner):
                anchor, partner = partner, anchor
            if not _can_ride(partner, anchor):
                logger.debug("Spouse edge %s-%s left unpaired: %s already pairs elsewhere", anchor.id, partner.id, partner.id)
                continue
            partner.is_attached_partner = True
            partner.anchor = anchor
            couples.append((anchor.id, partner.id))
            logger.debug("%s attached to anchor %s", partner.id, anchor.id)

    return couples
