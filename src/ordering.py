"""Tie-break key functions shared by the layout stages."""

from models import LayoutNode

EARLIEST_DATE = "0000-01-01"
LATEST_DATE = "9999-12-31"


def birth_key_missing_first(node: LayoutNode) -> tuple[str, int]:
    """Birth date order where an unknown date counts as the earliest possible one."""
    return (node.person.birth_date or EARLIEST_DATE, node.order)


def birth_key_missing_last(node: LayoutNode) -> tuple[str, int]:
    """Birth date order where an unknown date counts as the latest possible one."""
    return (node.person.birth_date or LATEST_DATE, node.order)


def name_key(node: LayoutNode) -> tuple[str, str, str]:
    person = node.person
    return (person.family_name.casefold(), person.given_name.casefold(), person.id)
