"""Tests for date normalisation and snapshot loading."""

import json

import pytest

from parsing import SnapshotError, load_gedcom, load_people_and_edges, load_snapshot, parse_date_string


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("1839-08-29", "1839-08-29"),
        ("25 NOV 1954", "1954-11-25"),
        ("02 May1838", "1838-05-02"),
        ("April 17, 1850", "1850-04-17"),
        ("NOV 1954", "1954-11-01"),
        ("01-27-1920", "1920-01-27"),
        ("1698", "1698-01-01"),
        ("ABT 1900", "1900-01-01"),
        ("BEF. 3 MAR 1850", "1850-03-03"),
        ("1920-00-00", "1920-01-01"),
        (1850, "1850-01-01"),
    ],
)
def test_parse_date_string(raw, expected):
    assert parse_date_string(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "unknown", "Smarch 1900", "1900-13-01", 19])
def test_parse_date_string_rejects(raw):
    assert parse_date_string(raw) is None


def write_snapshot(path, data):
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


class TestLoadSnapshot:
    def test_reads_people_and_relationships(self, tmp_path):
        path = write_snapshot(
            tmp_path / "family.json",
            {
                "people": [
                    {"id": 1, "first_name": "Ann", "last_name": "Lee", "birth_date": "3 MAR 1950", "gender": "F"},
                    {"id": 2, "first_name": "Bo", "last_name": "Lee", "gender": "male", "notes": "twin"},
                ],
                "relationships": [
                    {"id": 7, "person1_id": 1, "person2_id": 2, "relationship_type": "sibling"},
                    {"person1_id": 2, "person2_id": 1, "relationship_type": "spouse"},
                ],
            },
        )
        persons, edges = load_snapshot(path)

        assert [p.id for p in persons] == ["1", "2"]
        assert persons[0].birth_date == "1950-03-03"
        assert persons[0].gender == "female"
        assert persons[1].note == "twin"
        assert persons[1].display_name == "Bo Lee"
        assert edges[0].id == "7"
        assert edges[1].id == "r1"
        assert (edges[1].person1_id, edges[1].kind) == ("2", "spouse")

    def test_numeric_dates_are_accepted(self, tmp_path):
        path = write_snapshot(
            tmp_path / "numbers.json",
            {"people": [{"id": 1, "first_name": "A", "birth_date": 1950, "death_date": 2001, "gender": 1}]},
        )
        persons, edges = load_snapshot(path)
        assert persons[0].birth_date == "1950-01-01"
        assert persons[0].death_date == "2001-01-01"
        assert persons[0].gender is None
        assert edges == []

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(SnapshotError):
            load_snapshot(path)

    def test_missing_required_field(self, tmp_path):
        path = write_snapshot(tmp_path / "bad.json", {"people": [{"first_name": "NoId"}]})
        with pytest.raises(SnapshotError):
            load_snapshot(path)

    def test_snapshot_error_is_value_error(self, tmp_path):
        path = write_snapshot(tmp_path / "list.json", [])
        with pytest.raises(ValueError):
            load_people_and_edges(path)


GEDCOM = """0 HEAD
1 CHAR UTF-8
1 GEDC
2 VERS 5.5.1
0 @I1@ INDI
1 NAME John /Smith/
1 SEX M
0 @I2@ INDI
1 NAME Mary /Jones/
1 SEX F
0 @I3@ INDI
1 NAME Ann /Smith/
1 SEX F
0 @I4@ INDI
1 NAME Tom /Smith/
1 SEX M
0 @F1@ FAM
1 HUSB @I1@
1 WIFE @I2@
1 CHIL @I3@
1 CHIL @I4@
0 TRLR
"""


def test_load_gedcom(tmp_path):
    path = tmp_path / "family.ged"
    path.write_text(GEDCOM, encoding="utf-8")

    persons, edges = load_people_and_edges(path)

    assert [p.id for p in persons] == ["I1", "I2", "I3", "I4"]
    assert (persons[0].given_name, persons[0].family_name) == ("John", "Smith")
    assert persons[1].gender == "female"
    kinds = [e.kind for e in edges]
    assert kinds.count("spouse") == 1
    assert kinds.count("parent") == 4
    assert kinds.count("sibling") == 1
    assert ("I1", "I2", "spouse") in [(e.person1_id, e.person2_id, e.kind) for e in edges]
    assert load_gedcom(path)[0] == persons
