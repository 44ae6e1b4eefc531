"""Layout validation: reports data-quality issues and geometry problems."""

import networkx as nx

from engine import LayoutResult

# cards placed edge to edge may differ from card_width by float rounding
OVERLAP_TOLERANCE = 1e-6


def validate_layout(result: LayoutResult) -> list[str]:
    """
    Check a computed layout for:
    - Edges dropped while building the relationship graph
    - Cycles in parent-child relationships
    - Children not exactly one generation below a parent
    - Spouse edges ignored because the pair are also siblings
    - Cards of one generation overlapping

    Returns a list of warning messages. The layout itself is not touched.
    """
    warnings: list[str] = []
    report = result.report
    nodes = result.nodes

    if report.dropped_unknown_person:
        warnings.append(f"Dropped {report.dropped_unknown_person} edges referencing unknown people")
    if report.dropped_self_reference:
        warnings.append(f"Dropped {report.dropped_self_reference} self-referential edges")
    if report.dropped_unknown_kind:
        warnings.append(f"Dropped {report.dropped_unknown_kind} edges of unknown kind")
    if report.duplicate_persons:
        warnings.append(f"Ignored {report.duplicate_persons} duplicate person records")

    # Cycle check over parent -> child edges only
    parent_graph = nx.DiGraph()
    parent_graph.add_edges_from((n.id, c.id) for n in nodes.values() for c in n.children)
    try:
        cycle = nx.find_cycle(parent_graph, orientation="original")
        warnings.append(f"Cycle detected in parent-child relationships: {[edge[0] for edge in cycle]}")
    except nx.NetworkXNoCycle:
        pass

    for node in nodes.values():
        for child in node.children:
            if child.generation != node.generation + 1:
                warnings.append(
                    f"Generation mismatch: {child.person.display_name} ({child.generation}) "
                    f"under parent {node.person.display_name} ({node.generation})"
                )

    if report.sibling_spouse_conflicts:
        warnings.append(
            f"Ignored {report.sibling_spouse_conflicts} spouse edges between people who are also siblings"
        )

    warnings.extend(find_overlaps(result))
    return warnings


def find_overlaps(result: LayoutResult) -> list[str]:
    """Pairs in one generation closer than a card width that are not a couple."""
    card_width = result.config.card_width
    by_generation: dict[int, list] = {}
    for node in result.nodes.values():
        by_generation.setdefault(node.generation, []).append(node)

    overlaps = []
    for generation, row in sorted(by_generation.items()):
        row.sort(key=lambda n: n.x)
        for i, a in enumerate(row):
            for b in row[i + 1:]:
                if b.x - a.x >= card_width - OVERLAP_TOLERANCE:
                    break
                if a.anchor is b or b.anchor is a:
                    continue
                overlaps.append(
                    f"Overlap in generation {generation}: {a.person.display_name} and {b.person.display_name}"
                )
    return overlaps
