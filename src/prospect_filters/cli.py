"""CLI commands for inspecting filters and compiling DSL files."""

import argparse
import json
import sys
from pathlib import Path

from .domain.errors import DslValidationError, FilterNotFoundError
from .wiring import build_query_service


def load_dsl_from_file(path: Path) -> dict:
    """Load a DSL document from a JSON file. Exits on missing file or invalid JSON."""
    if not path.exists():
        print(f"Error: DSL file not found: {path}", file=sys.stderr)
        sys.exit(1)
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        print(f"Error: invalid JSON in {path}: {e}", file=sys.stderr)
        sys.exit(1)
    if not isinstance(raw, dict):
        print("Error: DSL file must contain an object with contact and company buckets.", file=sys.stderr)
        sys.exit(1)
    return raw


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Inspect filters and compile filter DSL documents")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    filters_parser = subparsers.add_parser("filters", help="List active filters")
    filters_parser.add_argument("--entity", choices=["contact", "company"], default=None)

    validate_parser = subparsers.add_parser("validate", help="Validate and normalize a DSL file")
    validate_parser.add_argument("file", type=Path)

    compile_parser = subparsers.add_parser("compile", help="Compile a DSL file into a search body")
    compile_parser.add_argument("file", type=Path)
    compile_parser.add_argument("--strict", action="store_true", help="Fail on any validation error")

    values_parser = subparsers.add_parser("values", help="List selectable values for a filter")
    values_parser.add_argument("filter_id")
    values_parser.add_argument("--search", default=None)
    values_parser.add_argument("--page", type=int, default=1)
    values_parser.add_argument("--per-page", type=int, default=10)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 0

    svc = build_query_service()

    if args.command == "filters":
        for d in svc.manager.get_active_filters():
            if args.entity and args.entity not in {e.value for e in d.applies_to}:
                continue
            applies = ",".join(sorted(e.value for e in d.applies_to))
            print(f"{d.id:<20} {d.value_source.value:<14} {d.type.value:<8} {applies}")
    elif args.command == "validate":
        result = svc.validate(load_dsl_from_file(args.file))
        _print_json(result.to_dict())
        return 0 if result.valid else 1
    elif args.command == "compile":
        try:
            compiled = svc.compile(load_dsl_from_file(args.file), strict=args.strict or None)
        except DslValidationError as e:
            print(f"Error: {e}", file=sys.stderr)
            for message in e.errors:
                print(f"  - {message}", file=sys.stderr)
            return 1
        _print_json(compiled.to_dict())
    elif args.command == "values":
        try:
            page = svc.manager.get_filter_values(args.filter_id, args.search, max(1, args.page), max(1, args.per_page))
        except FilterNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        _print_json(page.model_dump(mode="json"))
    return 0


if __name__ == "__main__":
    sys.exit(main())
