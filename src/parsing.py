"""Snapshot loading: data-store JSON exports and GEDCOM files."""

import json
import logging
from pathlib import Path
import re

from ged4py import GedcomReader

from models import GENDERS, PARENT, SIBLING, SPOUSE, KinshipEdge, Person

logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot file cannot be turned into people and edges."""


MONTHS = {
    "JAN": 1, "FEB": 2, "MAR": 3, "APR": 4, "MAY": 5, "JUN": 6,
    "JUL": 7, "AUG": 8, "SEP": 9, "OCT": 10, "NOV": 11, "DEC": 12,
}

QUALIFIER_RE = re.compile(
    r"^(ABT\.?|ABOUT|BEF\.?|BEFORE|AFT\.?|AFTER|EST\.?|CAL\.?|CIRCA|CA\.?|AROUND):?\s*", re.IGNORECASE
)

# (pattern, order of the day/month/year groups); month groups may be names
DATE_PATTERNS = [
    (re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$"), "ymd"),  # 1839-08-29
    (re.compile(r"^(\d{1,2})\s+([A-Za-z]+)\.?\s*(\d{4})$"), "dmy"),  # 25 NOV 1954, 02 May1838
    (re.compile(r"^([A-Za-z]+)\.?\s*(\d{1,2}),\s*(\d{4})$"), "mdy"),  # April 17, 1850
    (re.compile(r"^([A-Za-z]+)\.?,?\s*(\d{4})$"), "my"),  # NOV 1954, May, 1837
    (re.compile(r"^(\d{1,2})[-/](\d{1,2})[-/](\d{4})$"), "mdy"),  # 01-27-1920
    (re.compile(r"^(\d{4})$"), "y"),  # 1698
]


def _month(value: str) -> int | None:
    if value.isdigit():
        return int(value)
    return MONTHS.get(value[:3].upper())


def parse_date_string(date_str: str | int | None) -> str | None:
    """
    Normalise a free-form date into ISO format (YYYY-MM-DD).

    Qualifiers such as ABT or BEF are dropped, a missing day or month
    becomes 01, and anything unrecognised returns None. Exports may write a
    bare year as a number.
    """
    if date_str is None or date_str == "":
        return None
    s = QUALIFIER_RE.sub("", str(date_str).strip().strip("()").rstrip("?")).strip()
    if not s:
        return None

    for pattern, order in DATE_PATTERNS:
        match = pattern.match(s)
        if not match:
            continue
        parts = dict(zip(order, match.groups()))
        year = int(parts["y"])
        month = _month(parts["m"]) if "m" in parts else 1
        if month is None:
            continue
        # some exports write unknown parts as 00
        month = month or 1
        day = int(parts.get("d", 1)) or 1
        if 1 <= month <= 12 and 1 <= day <= 31:
            return f"{year:04d}-{month:02d}-{day:02d}"
    return None


def _normalize_gender(value: str | None) -> str | None:
    if not value:
        return None
    value = str(value).strip().lower()
    value = {"m": "male", "f": "female", "u": None}.get(value, value)
    return value if value in GENDERS else None


# ============================================================================
# Data-store JSON export
# ============================================================================


def person_from_record(record: dict) -> Person:
    return Person(
        id=str(record["id"]),
        given_name=record.get("first_name") or "",
        family_name=record.get("last_name") or "",
        birth_date=parse_date_string(record.get("birth_date")),
        death_date=parse_date_string(record.get("death_date")),
        gender=_normalize_gender(record.get("gender")),
        note=record.get("notes") or "",
    )


def edge_from_record(record: dict, index: int) -> KinshipEdge:
    return KinshipEdge(
        id=str(record.get("id", f"r{index}")),
        person1_id=str(record["person1_id"]),
        person2_id=str(record["person2_id"]),
        kind=record["relationship_type"],
    )


def load_snapshot(path: Path) -> tuple[list[Person], list[KinshipEdge]]:
    """
    Load a data-store export holding `people` and `relationships` arrays.

    Records use the store's column names (first_name, last_name, birth_date,
    death_date, gender, notes; person1_id, person2_id, relationship_type).
    """
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SnapshotError(f"{path}: not valid JSON ({e})") from e

    if not isinstance(data, dict):
        raise SnapshotError(f"{path}: expected an object with people and relationships")
    try:
        persons = [person_from_record(r) for r in data.get("people", [])]
        edges = [edge_from_record(r, i) for i, r in enumerate(data.get("relationships", []))]
    except (KeyError, TypeError) as e:
        raise SnapshotError(f"{path}: malformed record ({e})") from e

    logger.info("Loaded %d people and %d relationships from %s", len(persons), len(edges), path)
    return persons, edges


# ============================================================================
# GEDCOM import
# ============================================================================


def gedcom_id(xref_id: str) -> str:
    """Strip the @ delimiters from a GEDCOM xref like '@I_347421849@'."""
    return xref_id.strip("@")


def extract_name_parts(indi) -> tuple[str, str]:
    """Return (given name, surname) from an individual record."""
    name_rec = indi.sub_tag("NAME")
    if name_rec is None or name_rec.value is None:
        return ("Unknown", "")

    # ged4py returns NAME as tuple: (given, surname, suffix)
    if isinstance(name_rec.value, tuple):
        given, surname, _ = name_rec.value
        return (given or "Unknown", surname or "")

    givn = name_rec.sub_tag("GIVN")
    surn = name_rec.sub_tag("SURN")
    if givn or surn:
        return (givn.value if givn else "Unknown", surn.value if surn else "")
    return (str(name_rec.value).replace("/", "").strip() or "Unknown", "")


def extract_event_date(indi, tag: str) -> str | None:
    event = indi.sub_tag(tag)
    if event is None:
        return None
    date_rec = event.sub_tag("DATE")
    if date_rec is None or not date_rec.value:
        return None
    # ged4py may return DateValue objects
    return parse_date_string(str(date_rec.value))


def extract_note(indi) -> str:
    note = indi.sub_tag("NOTE")
    return str(note.value) if note is not None and note.value else ""


def load_gedcom(path: Path) -> tuple[list[Person], list[KinshipEdge]]:
    """
    Import individuals and families from a GEDCOM file.

    Each family yields a spouse edge between its partners, parent edges to
    every child, and sibling edges between its children.
    """
    persons: list[Person] = []
    edges: list[KinshipEdge] = []

    def add_edge(a: str, b: str, kind: str):
        edges.append(KinshipEdge(id=f"e{len(edges)}", person1_id=a, person2_id=b, kind=kind))

    reader = GedcomReader(str(path))
    for rec in reader.records0("INDI"):
        if rec.xref_id is None:
            continue
        given, surname = extract_name_parts(rec)
        sex = rec.sub_tag("SEX")
        persons.append(
            Person(
                id=gedcom_id(rec.xref_id),
                given_name=given,
                family_name=surname,
                birth_date=extract_event_date(rec, "BIRT"),
                death_date=extract_event_date(rec, "DEAT"),
                gender=_normalize_gender(sex.value if sex else None),
                note=extract_note(rec),
            )
        )

    for rec in reader.records0("FAM"):
        if rec.xref_id is None:
            continue
        partners = []
        for tag in ("HUSB", "WIFE"):
            partner = rec.sub_tag(tag)
            if partner is not None and partner.xref_id:
                partners.append(gedcom_id(partner.xref_id))
        children = [gedcom_id(c.xref_id) for c in rec.sub_tags("CHIL") if c.xref_id]

        if len(partners) == 2:
            add_edge(partners[0], partners[1], SPOUSE)
        for parent in partners:
            for child in children:
                add_edge(parent, child, PARENT)
        for i, child in enumerate(children):
            for other in children[i + 1:]:
                add_edge(child, other, SIBLING)

    logger.info("Imported %d people and %d relationships from %s", len(persons), len(edges), path)
    return persons, edges


def load_people_and_edges(path: Path) -> tuple[list[Person], list[KinshipEdge]]:
    """Dispatch on file extension: .ged is GEDCOM, anything else a JSON snapshot."""
    if Path(path).suffix.lower() == ".ged":
        return load_gedcom(path)
    return load_snapshot(path)
