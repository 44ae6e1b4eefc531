"""Relationship graph building: symmetric adjacency from a flat edge list."""

import logging

import networkx as nx

from models import CHILD, EDGE_KINDS, PARENT, SIBLING, SPOUSE, KinshipEdge, LayoutNode, LayoutReport, Person

logger = logging.getLogger(__name__)


def _link(relation: list[LayoutNode], other: LayoutNode):
    if not any(n is other for n in relation):
        relation.append(other)


def build_layout_nodes(
    persons: list[Person], edges: list[KinshipEdge], report: LayoutReport | None = None
) -> dict[str, LayoutNode]:
    """
    Build one LayoutNode per person with symmetric adjacency.

    Every edge is added in both directions whatever direction it was declared
    in, and a pair never appears twice in the same relation list. Edges that
    reference an unknown person, point at themselves or carry an unknown kind
    are dropped and counted in the report. The input records are not touched.
    """
    report = report if report is not None else LayoutReport()
    nodes: dict[str, LayoutNode] = {}

    for person in persons:
        if person.id in nodes:
            report.duplicate_persons += 1
            logger.warning("Duplicate person id %s ignored", person.id)
            continue
        nodes[person.id] = LayoutNode(person=person, order=len(nodes))

    for edge in edges:
        a = nodes.get(edge.person1_id)
        b = nodes.get(edge.person2_id)
        if a is None or b is None:
            report.dropped_unknown_person += 1
            logger.debug("Dropping edge %s: unknown person", edge.id)
            continue
        if a is b:
            report.dropped_self_reference += 1
            logger.debug("Dropping edge %s: self reference on %s", edge.id, a.id)
            continue
        if edge.kind not in EDGE_KINDS:
            report.dropped_unknown_kind += 1
            logger.debug("Dropping edge %s: unknown kind %r", edge.id, edge.kind)
            continue

        if edge.kind == CHILD:
            # child edges are parent edges read the other way round
            a, b = b, a
        if edge.kind in (PARENT, CHILD):
            _link(a.children, b)
            _link(b.parents, a)
        elif edge.kind == SPOUSE:
            _link(a.spouses, b)
            _link(b.spouses, a)
        else:
            _link(a.siblings, b)
            _link(b.siblings, a)

    if report.dropped_edges:
        logger.warning("Dropped %d unusable edges", report.dropped_edges)
    return nodes


def build_graph(nodes: dict[str, LayoutNode]) -> nx.Graph:
    """
    Build an undirected NetworkX graph from the layout nodes.

    Nodes are keyed by person id and added in input order, so traversals over
    the graph are deterministic. Edges carry a `relation` attribute seen from
    the lower-ordered endpoint.
    """
    G = nx.Graph()
    for node in nodes.values():
        G.add_node(node.id)

    for node in nodes.values():
        for relation, related in (
            (PARENT, node.children),
            (SPOUSE, node.spouses),
            (SIBLING, node.siblings),
        ):
            for other in related:
                if not G.has_edge(node.id, other.id):
                    G.add_edge(node.id, other.id, relation=relation)

    return G
