"""Lanes for family groups with no path back to the focal person."""

import logging

import networkx as nx

from config import LayoutConfig
from graph import build_graph
from models import LayoutNode

logger = logging.getLogger(__name__)


def place_step_families(
    nodes: dict[str, LayoutNode], focal_id: str | None, config: LayoutConfig, G: nx.Graph | None = None
) -> list[list[str]]:
    """
    Move every group disconnected from the focal person into its own lane.

    Lanes start one family spacing right of the focal component's right
    edge; each further group starts one spacing beyond the previous lane.

    Returns the ids of each step-family group, in lane order.
    """
    if focal_id is None or focal_id not in nodes:
        return []
    if G is None:
        G = build_graph(nodes)

    main = nx.node_connected_component(G, focal_id)
    rest = G.subgraph(pid for pid in G if pid not in main)
    if rest.number_of_nodes() == 0:
        return []

    half = config.card_width / 2
    lane_x = max(nodes[pid].x for pid in main) + half + config.family_group_spacing

    groups = [sorted((nodes[pid] for pid in component), key=lambda n: n.order) for component in nx.connected_components(rest)]
    groups.sort(key=lambda group: group[0].order)

    lanes = []
    for group in groups:
        left_edge = min(n.x for n in group) - half
        offset = lane_x - left_edge
        for node in group:
            node.x += offset
        lane_x = max(n.x for n in group) + half + config.family_group_spacing
        lanes.append([n.id for n in group])
        logger.debug("Step-family group %s moved by %.0f", lanes[-1], offset)

    return lanes
