from __future__ import annotations

import argparse
import sys
from pathlib import Path

from ..core import compose_request, threat_family
from ..io import dump_result_file, load_compose_file, load_threats_file


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="threat-workbench",
        description="Compose threat statements and resolve threat families from JSON files.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    compose = sub.add_parser("compose", help="Compose a staged threat statement")
    compose.add_argument("input", help="JSON object with stage, tables, links and stage_inputs")
    compose.add_argument("--out", default="", help="Optional output JSON file for the composed result")

    family = sub.add_parser("family", help="List the family of a saved threat")
    family.add_argument("input", help="JSON file containing a list of saved threats")
    family.add_argument("threat_id", help="Id of the threat to resolve")
    return parser


def _input_path(raw: str) -> Path | None:
    path = Path(raw).resolve()
    if not path.exists() or not path.is_file():
        print(f"error: input file not found: {path}", file=sys.stderr)
        return None
    return path


def _run_compose(args: argparse.Namespace) -> int:
    input_path = _input_path(args.input)
    if input_path is None:
        return 2
    try:
        request = load_compose_file(input_path)
    except (TypeError, ValueError) as exc:
        print(f"error: invalid input: {exc}", file=sys.stderr)
        return 2

    composed = compose_request(request)
    print(composed.text)
    if args.out:
        output_path = Path(args.out).resolve()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        dump_result_file(output_path, composed.to_payload())
        print(f"wrote={output_path}")
    return 0


def _run_family(args: argparse.Namespace) -> int:
    input_path = _input_path(args.input)
    if input_path is None:
        return 2
    try:
        threats = load_threats_file(input_path)
    except (TypeError, ValueError) as exc:
        print(f"error: invalid input: {exc}", file=sys.stderr)
        return 2

    # Ids on the command line are strings; match them against the stored ids.
    threat_id = next((t.id for t in threats if str(t.id) == args.threat_id), args.threat_id)
    for member in threat_family(threat_id, threats):
        print(member)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.command == "compose":
        return _run_compose(args)
    return _run_family(args)


if __name__ == "__main__":
    raise SystemExit(main())
