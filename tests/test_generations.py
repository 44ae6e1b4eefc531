"""Tests for family groups and generation assignment."""

from conftest import edge, parents, person
from generations import assign_generations, choose_seed, find_family_groups
from graph import build_layout_nodes


def gens(nodes):
    return {pid: n.generation for pid, n in nodes.items()}


def test_family_groups_are_connected_components():
    nodes = build_layout_nodes(
        [person("A"), person("X"), person("B"), person("Y")],
        [edge("A", "B", "spouse"), edge("X", "Y", "sibling")],
    )
    groups = find_family_groups(nodes)
    assert [[n.id for n in g] for g in groups] == [["A", "B"], ["X", "Y"]]


class TestChooseSeed:
    def test_focal_person_wins(self):
        nodes = build_layout_nodes([person("P", "1900-01-01"), person("C")], parents("C", "P"))
        group = list(nodes.values())
        assert choose_seed(group, "C").id == "C"

    def test_earliest_born_without_parents(self):
        nodes = build_layout_nodes(
            [person("C", "1800-01-01"), person("P1", "1950-01-01"), person("P2", "1940-01-01")],
            [*parents("C", "P1"), edge("P1", "P2", "spouse")],
        )
        assert choose_seed(list(nodes.values())).id == "P2"

    def test_missing_birth_date_counts_as_earliest(self):
        nodes = build_layout_nodes(
            [person("A", "1900-01-01"), person("B")],
            [edge("A", "B", "spouse")],
        )
        assert choose_seed(list(nodes.values())).id == "B"


class TestAssignGenerations:
    def test_three_generations(self, three_generation_family):
        persons, edges = three_generation_family
        nodes = build_layout_nodes(persons, edges)
        assign_generations(list(nodes.values()), "Focal")
        g = gens(nodes)
        assert g["Focal"] == 0
        assert g["Sib"] == 0
        assert g["Cousin"] == 0
        assert g["M"] == g["F"] == g["AuntM"] == g["UncleF"] == -1
        assert g["GM1"] == g["GF1"] == g["GM2"] == g["GF2"] == -2

    def test_children_one_below_parents(self, three_generation_family):
        persons, edges = three_generation_family
        nodes = build_layout_nodes(persons, edges)
        assign_generations(list(nodes.values()))
        for node in nodes.values():
            for child in node.children:
                assert child.generation == node.generation + 1

    def test_sibling_overrides_earlier_child_assignment(self):
        """B is recorded both as Z's child and as A's sibling; the sibling edge wins."""
        nodes = build_layout_nodes(
            [person("R", "1900-01-01"), person("Z"), person("A"), person("B")],
            [*parents("Z", "R"), *parents("A", "R"), *parents("B", "Z"), edge("A", "B", "sibling")],
        )
        assign_generations(list(nodes.values()))
        g = gens(nodes)
        assert g["R"] == 0
        assert g["Z"] == g["A"] == 1
        assert g["B"] == 1

    def test_parent_edge_does_not_override(self):
        nodes = build_layout_nodes(
            [person("R", "1900-01-01"), person("A"), person("Z"), person("B")],
            [*parents("A", "R"), *parents("Z", "R"), edge("A", "B", "sibling"), *parents("B", "Z")],
        )
        assign_generations(list(nodes.values()))
        assert nodes["B"].generation == 1

    def test_parent_cycle_terminates(self):
        nodes = build_layout_nodes(
            [person("A"), person("B")],
            [edge("A", "B", "parent"), edge("B", "A", "parent")],
        )
        result = assign_generations(list(nodes.values()))
        assert result == {"A": 0, "B": 1}

    def test_spouses_share_generation(self):
        nodes = build_layout_nodes(
            [person("P", "1900-01-01"), person("C"), person("S")],
            [*parents("C", "P"), edge("C", "S", "spouse")],
        )
        assign_generations(list(nodes.values()))
        assert nodes["S"].generation == nodes["C"].generation == nodes["P"].generation + 1

    def test_empty_group(self):
        assert assign_generations([]) == {}
