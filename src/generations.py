"""Generation assignment by constrained breadth-first propagation."""

from collections import deque
import logging

import networkx as nx

from graph import build_graph
from models import LayoutNode
from ordering import birth_key_missing_first

logger = logging.getLogger(__name__)


def find_family_groups(nodes: dict[str, LayoutNode], G: nx.Graph | None = None) -> list[list[LayoutNode]]:
    """Split the nodes into connected family groups, members in input order."""
    if G is None:
        G = build_graph(nodes)
    groups = []
    for component in nx.connected_components(G):
        groups.append(sorted((nodes[pid] for pid in component), key=lambda n: n.order))
    groups.sort(key=lambda group: group[0].order)
    return groups


def choose_seed(group: list[LayoutNode], focal_id: str | None = None) -> LayoutNode:
    """
    Pick the node a family group's generations are counted from.

    The focal person wins when it belongs to the group. Otherwise the earliest
    born member without a parent inside the group is used (unknown birth dates
    count as earliest), falling back to the whole group when every member has
    a parent there.
    """
    for node in group:
        if node.id == focal_id:
            return node

    members = {n.id for n in group}
    candidates = [n for n in group if not any(p.id in members for p in n.parents)]
    return min(candidates or group, key=birth_key_missing_first)


def assign_generations(group: list[LayoutNode], focal_id: str | None = None) -> dict[str, int]:
    """
    Assign an integer generation to every member of one connected group.

    Siblings and spouses share a generation, children sit one below and
    parents one above. When a sibling or spouse propagation meets a member
    that already holds a different generation, it overwrites it; a parent or
    child propagation never does. Each member is expanded once, so cyclic
    input still terminates.
    """
    if not group:
        return {}

    members = {n.id for n in group}
    seed = choose_seed(group, focal_id)
    generation = {seed.id: 0}
    expanded: set[str] = set()
    queue = deque([seed])

    while queue:
        node = queue.popleft()
        if node.id in expanded:
            continue
        expanded.add(node.id)
        g = generation[node.id]

        for related, offset in (
            (node.siblings, 0),
            (node.spouses, 0),
            (node.children, 1),
            (node.parents, -1),
        ):
            for other in related:
                if other.id not in members:
                    continue
                target = g + offset
                current = generation.get(other.id)
                if current is None:
                    generation[other.id] = target
                    queue.append(other)
                elif current != target and offset == 0:
                    logger.debug(
                        "Generation of %s overridden %d -> %d by %s", other.id, current, target, node.id
                    )
                    generation[other.id] = target

    for node in group:
        node.generation = generation.get(node.id, 0)
    return generation
