"""Command-line interface for browsing and maintaining the artist catalog."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from artisthelper.catalog import CatalogExportError, CatalogSession, FilterCriteria, InvalidArtistError
from artisthelper.config import GRADES, iter_policies
from artisthelper.config_loader import CatalogSettings, FilterProfile
from artisthelper.ingest import (
    DEFAULT_SOURCE_MAPPING,
    find_duplicates,
    load_dataset,
    load_records_from_csv,
    write_dataset,
)
from artisthelper.ingest.spreadsheet import describe, placeholder_image
from artisthelper.persistence import open_store


_FILTER_OPTIONS = (
    ("--search", "search", "Substring match on name, group or any skill"),
    ("--genre", "genre", "Exact genre"),
    ("--position", "position", "Exact role (Center, Vocalist, Dancer)"),
    ("--rank", "rank", "Exact rank"),
    ("--group", "group", "Exact group"),
    ("--skill2", "secondary_skill", "Exact secondary skill"),
    ("--skill3", "tertiary_skill", "Exact tertiary skill"),
    ("--thoughts", "thoughts", "Curator verdict (Yes, No, If Nothing Better, Bad)"),
    ("--build", "build", "Substring match on build"),
)


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--dataset", type=Path, default=None, help="Artist dataset JSON")
    parser.add_argument("--db", type=Path, default=None, help="SQLite store path")
    parser.add_argument(
        "--no-store",
        action="store_true",
        help="Read the dataset directly without the persisted copy",
    )
    parser.add_argument(
        "--policy",
        choices=[policy.name for policy in iter_policies()],
        default=None,
        help="Scoring policy to apply",
    )


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Browse and maintain the artist catalog")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress messages")
    sub = parser.add_subparsers(dest="command", required=True)

    list_parser = sub.add_parser("list", help="Print the filtered, sorted artist table")
    _add_common(list_parser)
    for flag, dest, help_text in _FILTER_OPTIONS:
        list_parser.add_argument(flag, dest=dest, default="", help=help_text)
    list_parser.add_argument(
        "--thoughts-presence",
        action="store_true",
        help="Treat --thoughts Yes/No as has-verdict / no-verdict",
    )
    list_parser.add_argument("--grade", choices=GRADES, default="", help="Computed grade")
    list_parser.add_argument("--load-profile", type=Path, help="Load filter selections JSON", default=None)
    list_parser.add_argument("--save-profile", type=Path, help="Save filter selections JSON", default=None)

    add_parser = sub.add_parser("add", help="Append an artist with the next free id")
    _add_common(add_parser)
    add_parser.add_argument("name")
    add_parser.add_argument("--group", default="No Group")
    add_parser.add_argument("--genre", required=True)
    add_parser.add_argument("--position", required=True)
    add_parser.add_argument("--rank", required=True)
    add_parser.add_argument("--skill", action="append", default=[], help="Skill text, up to three, in slot order")
    add_parser.add_argument("--thoughts", default=None)
    add_parser.add_argument("--build", default=None)
    add_parser.add_argument("--description", default=None)

    export_parser = sub.add_parser("export", help="Write the current artist list")
    _add_common(export_parser)
    export_parser.add_argument("--format", choices=("json", "csv"), default="json")
    export_parser.add_argument("--output", type=Path, default=None, help="Destination (stdout if omitted)")

    convert_parser = sub.add_parser("convert", help="Convert a curator CSV into the dataset JSON")
    convert_parser.add_argument("source", type=Path, help="Source CSV")
    convert_parser.add_argument("--output", type=Path, required=True, help="Dataset JSON path")
    convert_parser.add_argument(
        "--column",
        action="append",
        default=[],
        help="Column mapping override (e.g., thoughts=Curator Notes)",
    )
    convert_parser.add_argument("--start-id", type=int, default=1)

    dupes_parser = sub.add_parser("check-dupes", help="Report duplicate ids and names")
    dupes_parser.add_argument("--dataset", type=Path, default=None, help="Artist dataset JSON")

    serve_parser = sub.add_parser("serve", help="Run the catalog web app")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)

    return parser.parse_args(argv)


def _parse_mapping(entries: list[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Invalid mapping entry '{entry}', expected key=value")
        key, value = entry.split("=", 1)
        mapping[key.strip()] = value.strip()
    return mapping


def _settings(args: argparse.Namespace) -> CatalogSettings:
    settings = CatalogSettings.from_env()
    if getattr(args, "dataset", None):
        settings = replace(settings, dataset_path=args.dataset)
    if getattr(args, "db", None):
        settings = replace(settings, db_path=args.db)
    if getattr(args, "policy", None):
        settings = replace(settings, policy_name=args.policy)
    return settings


def _open_session(args: argparse.Namespace) -> CatalogSession:
    settings = _settings(args)
    store = None if args.no_store else open_store(settings.db_path, key=settings.store_key)
    return CatalogSession.open(settings, store=store)


def _criteria_from_args(args: argparse.Namespace) -> FilterCriteria:
    criteria = FilterCriteria()
    if args.load_profile:
        criteria = FilterProfile.load(args.load_profile).to_criteria()
    overrides = {dest: getattr(args, dest) for _, dest, _ in _FILTER_OPTIONS if getattr(args, dest)}
    if args.grade:
        overrides["grade"] = args.grade
    if args.thoughts_presence:
        overrides["thoughts_mode"] = "presence"
    return replace(criteria, **overrides)


def _cmd_list(args: argparse.Namespace) -> int:
    session = _open_session(args)
    criteria = _criteria_from_args(args)
    if args.save_profile:
        FilterProfile.from_criteria(criteria).save(args.save_profile)
        print(f"Saved filter profile to {args.save_profile}")

    rows = session.view(criteria)
    header = f"{'ID':>4}  {'Name':<12} {'Genre':<11} {'Role':<9} {'Rank':<8} {'Grade':<5} {'Score':>5}  Skill 2 / Skill 3"
    print(header)
    print("-" * len(header))
    for row in rows:
        artist = row.artist
        skills = " / ".join(skill or "-" for skill in (artist.secondary_skill, artist.tertiary_skill))
        print(
            f"{artist.id:>4}  {artist.name:<12} {artist.genre:<11} {artist.position:<9} "
            f"{artist.rank:<8} {row.grade:<5} {row.score:>5}  {skills}"
        )
    print(f"{len(rows)} of {len(session.records)} artists")
    return 0


def _cmd_add(args: argparse.Namespace) -> int:
    session = _open_session(args)
    if len(args.skill) > 3:
        print("At most three skills can be given", file=sys.stderr)
        return 2
    payload = {
        "name": args.name,
        "group": args.group,
        "genre": args.genre,
        "position": args.position,
        "rank": args.rank,
        "skills": args.skill,
        "thoughts": args.thoughts,
        "build": args.build,
        "description": args.description or describe(args.name, args.position, args.group),
        "image": placeholder_image(args.name),
    }
    try:
        record = session.add(payload)
    except (InvalidArtistError, ValueError) as exc:
        print(f"Artist not added: {exc}", file=sys.stderr)
        return 1
    print(f"Added {record.name} with id {record.id}")
    return 0


def _cmd_export(args: argparse.Namespace) -> int:
    session = _open_session(args)
    try:
        text = session.export_json() if args.format == "json" else session.export_csv()
    except CatalogExportError as exc:
        print(f"Export failed: {exc}", file=sys.stderr)
        return 1
    if args.output:
        args.output.write_text(text, encoding="utf-8")
        print(f"Wrote {len(session.records)} artists to {args.output}")
    else:
        print(text)
    return 0


def _cmd_convert(args: argparse.Namespace) -> int:
    mapping = DEFAULT_SOURCE_MAPPING | _parse_mapping(args.column)
    records = load_records_from_csv(args.source, mapping=mapping, start_id=args.start_id)
    write_dataset(records, args.output)
    print(f"Converted {len(records)} artists to {args.output}")
    return 0


def _cmd_check_dupes(args: argparse.Namespace) -> int:
    records = load_dataset(args.dataset)
    duplicates = find_duplicates(records)
    if not duplicates:
        print("No duplicate artists found")
        return 0
    print("Found duplicates:")
    for entry in duplicates:
        print(f"  {entry.kind.upper()} {entry.value}: {entry.entries[0]} / {entry.entries[1]}")
    return 1


def _cmd_serve(args: argparse.Namespace) -> int:
    import uvicorn

    from artisthelper.api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


_COMMANDS = {
    "list": _cmd_list,
    "add": _cmd_add,
    "export": _cmd_export,
    "convert": _cmd_convert,
    "check-dupes": _cmd_check_dupes,
    "serve": _cmd_serve,
}


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return _COMMANDS[args.command](args)


if __name__ == "__main__":
    sys.exit(main())
