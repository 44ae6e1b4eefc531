"""Tests for couple resolution."""

from conftest import edge, parents, person
from couples import anchor_priority, find_blood_relatives, resolve_couples
from generations import assign_generations
from graph import build_layout_nodes
from models import LayoutReport


def resolved(persons, edges, report=None):
    nodes = build_layout_nodes(persons, edges)
    assign_generations(list(nodes.values()))
    couples = resolve_couples(nodes, report)
    return nodes, couples


def test_blood_relatives():
    nodes = build_layout_nodes(
        [person("P"), person("S"), person("C"), person("X")],
        [*parents("C", "P"), edge("P", "S", "spouse")],
    )
    assert find_blood_relatives(nodes) == {"P", "C"}


def test_married_in_spouse_rides_with_blood_relative():
    nodes, couples = resolved(
        [person("In"), person("P", "1900-01-01"), person("C")],
        [*parents("C", "P"), edge("In", "C", "spouse")],
    )
    assert couples == [("C", "In")]
    assert nodes["In"].is_attached_partner
    assert nodes["In"].anchor is nodes["C"]
    assert not nodes["C"].is_attached_partner
    assert nodes["C"].attached_partners() == [nodes["In"]]


def test_sibling_edge_beats_spouse_edge():
    report = LayoutReport()
    nodes, couples = resolved(
        [person("A"), person("B")],
        [edge("A", "B", "sibling"), edge("A", "B", "spouse")],
        report,
    )
    assert couples == []
    assert report.sibling_spouse_conflicts == 1
    assert not nodes["A"].is_attached_partner
    assert not nodes["B"].is_attached_partner


def test_earlier_generation_anchors_between_blood_relatives():
    """Generation decides before family size or birth date."""
    nodes = build_layout_nodes(
        [person("G"), person("P", "1900-01-01"), person("PS"), person("YP"), person("Y", "1990-01-01")],
        [*parents("P", "G"), edge("P", "PS", "sibling"), *parents("Y", "YP"), edge("P", "Y", "spouse")],
    )
    nodes["P"].generation = 2
    nodes["Y"].generation = 1
    couples = resolve_couples(nodes)
    assert couples == [("Y", "P")]
    assert nodes["P"].anchor is nodes["Y"]


def test_equal_generation_prefers_more_family_then_earlier_birth():
    nodes, couples = resolved(
        [
            person("H", "1948-01-01"),
            person("W", "1950-01-01"),
            person("HP"),
            person("WP"),
            person("WS"),
            person("K"),
        ],
        [
            edge("H", "W", "spouse"),
            *parents("H", "HP"),
            *parents("W", "WP"),
            edge("W", "WS", "sibling"),
            *parents("K", "H", "W"),
        ],
    )
    # W has a parent and a sibling, H only a parent
    assert couples == [("W", "H")]
    assert anchor_priority(nodes["W"]) < anchor_priority(nodes["H"])


def test_equal_family_falls_back_to_birth_date():
    nodes, couples = resolved(
        [person("A", "1950-01-01"), person("B", "1948-01-01"), person("C")],
        [*parents("C", "A", "B"), edge("A", "B", "spouse")],
    )
    assert couples == [("B", "A")]


def test_partner_attaches_to_one_anchor_only():
    nodes, couples = resolved(
        [person("P", "1900-01-01"), person("C1"), person("C2"), person("In")],
        [*parents("C1", "P"), *parents("C2", "P"), edge("In", "C1", "spouse"), edge("In", "C2", "spouse")],
    )
    assert couples == [("C1", "In")]
    assert nodes["In"].anchor is nodes["C1"]
    assert nodes["C2"].attached_partners() == []


def test_no_chained_couples():
    nodes, couples = resolved(
        [person("P", "1900-01-01"), person("C"), person("A"), person("B")],
        [*parents("C", "P"), edge("C", "A", "spouse"), edge("A", "B", "spouse")],
    )
    assert ("C", "A") in couples
    for anchor_id, partner_id in couples:
        assert not nodes[anchor_id].is_attached_partner
        assert nodes[partner_id].attached_partners() == []
