"""
1) Load a family snapshot (data-store JSON export or GEDCOM file).
2) Build the relationship graph and compute the layout.
3) Validate the result and report data-quality warnings.
4) Write per-person geometry for the renderer as JSON.
"""

import argparse
import json
import logging
from pathlib import Path

from config import load_config
from engine import compute_layout
from parsing import SnapshotError, load_people_and_edges
from validation import validate_layout

MAX_WARNINGS_SHOWN = 10


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Compute family tree layout coordinates.")
    parser.add_argument("input", type=Path, help="Snapshot JSON or GEDCOM (.ged) file.")
    parser.add_argument("--focal", help="Id of the person to centre parent sides and step families on.")
    parser.add_argument("--config", type=Path, help="TOML file with a [layout] table of spacing overrides.")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("layout.json"),
        help="Path to output JSON file (default: layout.json).",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log layout decisions.")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(args.config)
        print(f"Loading snapshot: {args.input}")
        persons, edges = load_people_and_edges(args.input)
    except (OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1
    print(f"  Found {len(persons)} people and {len(edges)} relationships")

    print("Computing layout...")
    result = compute_layout(persons, edges, focal_person_id=args.focal, config=config)
    report = result.report
    print(f"  {len(result)} people in {report.family_groups} family groups, {len(result.couples)} couples")
    if report.step_family_groups:
        print(f"  {report.step_family_groups} step-family groups moved to side lanes")

    print("Validating layout...")
    warnings = validate_layout(result)
    if warnings:
        print(f"  Found {len(warnings)} validation warnings:")
        for w in warnings[:MAX_WARNINGS_SHOWN]:
            print(f"    - {w}")
        if len(warnings) > MAX_WARNINGS_SHOWN:
            print(f"    ... and {len(warnings) - MAX_WARNINGS_SHOWN} more")
    else:
        print("  No validation issues found")

    min_x, min_y, max_x, max_y = result.bounds()
    payload = {
        "focal_id": result.focal_id,
        "bounds": {"min_x": min_x, "min_y": min_y, "max_x": max_x, "max_y": max_y},
        "nodes": result.to_payload(),
    }
    args.output.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    print(f"Layout saved to {args.output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
