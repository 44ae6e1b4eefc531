"""Layout pipeline: people and kinship edges in, per-person geometry out."""

from dataclasses import dataclass, field
import logging

from config import LayoutConfig
from couples import resolve_couples
from generations import assign_generations, find_family_groups
from graph import build_graph, build_layout_nodes
from layout import layout_groups
from models import KinshipEdge, LayoutNode, LayoutReport, Person
from separation import separate_sides
from stepfamily import place_step_families

logger = logging.getLogger(__name__)


@dataclass
class LayoutResult:
    nodes: dict[str, LayoutNode]
    report: LayoutReport
    config: LayoutConfig
    focal_id: str | None = None
    couples: list[tuple[str, str]] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.nodes)

    def position(self, person_id: str) -> tuple[float, float]:
        node = self.nodes[person_id]
        return (node.x, node.y)

    def bounds(self) -> tuple[float, float, float, float]:
        """(min_x, min_y, max_x, max_y) over card edges; zeros for an empty layout."""
        if not self.nodes:
            return (0.0, 0.0, 0.0, 0.0)
        hw = self.config.card_width / 2
        hh = self.config.card_height / 2
        xs = [n.x for n in self.nodes.values()]
        ys = [n.y for n in self.nodes.values()]
        return (min(xs) - hw, min(ys) - hh, max(xs) + hw, max(ys) + hh)

    def to_payload(self) -> list[dict]:
        """Per-person geometry and topology for a renderer."""
        return [
            {
                "id": node.id,
                "generation": node.generation,
                "x": node.x,
                "y": node.y,
                "is_attached_partner": node.is_attached_partner,
                "anchor_id": node.anchor_id,
                "parents": [p.id for p in node.parents],
                "children": [c.id for c in node.children],
                "spouses": [s.id for s in node.spouses],
                "siblings": [s.id for s in node.siblings],
            }
            for node in self.nodes.values()
        ]


def compute_layout(
    persons: list[Person],
    edges: list[KinshipEdge],
    focal_person_id: str | None = None,
    config: LayoutConfig | None = None,
) -> LayoutResult:
    """
    Run the full layout pipeline on one snapshot.

    Builds fresh nodes every call and keeps no state between calls. Bad data
    never raises; it is resolved by fixed precedence rules and counted in the
    returned report.
    """
    if config is None:
        config = LayoutConfig()
    report = LayoutReport()

    nodes = build_layout_nodes(persons, edges, report)
    if not nodes:
        return LayoutResult(nodes=nodes, report=report, config=config, focal_id=focal_person_id)
    if focal_person_id is not None and focal_person_id not in nodes:
        logger.warning("Focal person %s not in snapshot; ignoring", focal_person_id)
        focal_person_id = None

    G = build_graph(nodes)
    groups = find_family_groups(nodes, G)
    report.family_groups = len(groups)
    for group in groups:
        assign_generations(group, focal_person_id)

    couples = resolve_couples(nodes, report)
    layout_groups(groups, config, report)

    if focal_person_id is not None:
        separate_sides(nodes, focal_person_id, config)
        lanes = place_step_families(nodes, focal_person_id, config, G)
        report.step_family_groups = len(lanes)

    logger.info(
        "Laid out %d people in %d family groups (%d couples)", len(nodes), len(groups), len(couples)
    )
    return LayoutResult(nodes=nodes, report=report, config=config, focal_id=focal_person_id, couples=couples)
