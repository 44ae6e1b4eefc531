"""Shared builders for layout tests."""

import itertools

import pytest

from models import KinshipEdge, Person

_edge_ids = itertools.count()


def person(pid: str, birth: str | None = None, gender: str | None = None, given: str | None = None) -> Person:
    return Person(id=pid, given_name=given or pid, family_name="Test", birth_date=birth, gender=gender)


def edge(a: str, b: str, kind: str) -> KinshipEdge:
    return KinshipEdge(id=f"e{next(_edge_ids)}", person1_id=a, person2_id=b, kind=kind)


def parents(child: str, *parent_ids: str) -> list[KinshipEdge]:
    return [edge(p, child, "parent") for p in parent_ids]


@pytest.fixture
def three_generation_family():
    """
    Maternal and paternal grandparents, the parents M and F, their children
    Focal and Sib, an aunt on the mother's side and an uncle with a child on
    the father's side.
    """
    persons = [
        person("GM1", "1920-01-01", "female"),
        person("GF1", "1918-01-01", "male"),
        person("M", "1950-01-01", "female"),
        person("AuntM", "1952-01-01", "female"),
        person("GM2", "1922-01-01", "female"),
        person("GF2", "1920-01-01", "male"),
        person("F", "1948-01-01", "male"),
        person("UncleF", "1946-01-01", "male"),
        person("Focal", "1975-01-01", "female"),
        person("Sib", "1978-01-01", "male"),
        person("Cousin", "1980-01-01", "male"),
    ]
    edges = [
        edge("GM1", "GF1", "spouse"),
        *parents("M", "GM1", "GF1"),
        *parents("AuntM", "GM1", "GF1"),
        edge("M", "AuntM", "sibling"),
        edge("GM2", "GF2", "spouse"),
        *parents("F", "GM2", "GF2"),
        *parents("UncleF", "GM2", "GF2"),
        edge("F", "UncleF", "sibling"),
        edge("M", "F", "spouse"),
        *parents("Focal", "M", "F"),
        *parents("Sib", "M", "F"),
        edge("Focal", "Sib", "sibling"),
        *parents("Cousin", "UncleF"),
    ]
    return persons, edges
