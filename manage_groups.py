#!/usr/bin/env python3
"""
Schedule Nudge - group mapping administration

Edits the chat → calendar mapping snapshot offline. Every mutation prints the
new base64 snapshot, which is then stored back into GROUP_CALENDAR_MAPPINGS.

Usage:
    manage_groups.py list
    manage_groups.py add -1001234567890 team@example.com --name "Team Chat"
    manage_groups.py update -1001234567890 primary
    manage_groups.py remove -1001234567890
    manage_groups.py export --json
"""

import argparse
import sys
from typing import List, Optional

from config.group_config import DEFAULT_GROUP_NAME, GroupConfigStore, decode_snapshot, parse_groups
from utils.environ import GROUP_CALENDAR_MAPPINGS
from utils.validators import parse_chat_id, validate_calendar_id

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="manage_groups.py",
        description="Manage the chat → calendar mapping snapshot.",
    )
    parser.add_argument(
        "--snapshot",
        default=None,
        help="Snapshot to operate on (defaults to GROUP_CALENDAR_MAPPINGS)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("list", help="List configured mappings")

    add_parser = subparsers.add_parser("add", help="Add or replace a mapping")
    add_parser.add_argument("group_id", help="Telegram chat id (groups are negative)")
    add_parser.add_argument("calendar_id", help="'primary' or a calendar address")
    add_parser.add_argument("--name", default=DEFAULT_GROUP_NAME, help="Display name for the chat")

    update_parser = subparsers.add_parser("update", help="Point a mapped chat at another calendar")
    update_parser.add_argument("group_id")
    update_parser.add_argument("calendar_id")

    remove_parser = subparsers.add_parser("remove", help="Remove a mapping")
    remove_parser.add_argument("group_id")

    export_parser = subparsers.add_parser("export", help="Print the snapshot")
    export_parser.add_argument("--json", action="store_true", help="Print readable JSON instead of base64")

    return parser


def _chat_id_or_exit(raw: str) -> int:
    chat_id, error = parse_chat_id(raw)
    if chat_id is None:
        print(f"❌ {error}", file=sys.stderr)
        sys.exit(EXIT_USAGE)
    return chat_id


def _calendar_id_or_exit(calendar_id: str) -> str:
    if not validate_calendar_id(calendar_id):
        print(
            f"❌ Invalid calendar ID: {calendar_id!r}. Use 'primary' or an address like name@example.com.",
            file=sys.stderr,
        )
        sys.exit(EXIT_USAGE)
    return calendar_id


def _print_groups(store: GroupConfigStore) -> None:
    groups = store.get_all_groups()
    if not groups:
        print("No group mappings configured.")
        return
    print(f"{len(groups)} group mapping(s):")
    for group in groups:
        kind = "group" if store.is_group_chat(group.group_id) else "private"
        print(f"  {group.group_id:>16}  {group.calendar_id:<32}  {group.group_name} ({kind})")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    snapshot = args.snapshot if args.snapshot is not None else GROUP_CALENDAR_MAPPINGS

    store = GroupConfigStore()
    if snapshot and snapshot.strip():
        # Editing starts from the stored mapping, so a bad snapshot must stop here
        try:
            parse_groups(decode_snapshot(snapshot))
        except ValueError as e:
            print(f"❌ Could not read the mapping snapshot: {e}", file=sys.stderr)
            print("Nothing was changed. Fix the snapshot or pass --snapshot explicitly.", file=sys.stderr)
            return EXIT_USAGE
    store.load(snapshot)

    if args.command == "list":
        _print_groups(store)
        return EXIT_OK

    if args.command == "export":
        print(store.export_json() if args.json else store.export_snapshot())
        return EXIT_OK

    chat_id = _chat_id_or_exit(args.group_id)

    if args.command == "add":
        calendar_id = _calendar_id_or_exit(args.calendar_id)
        replaced = store.has_group(chat_id)
        store.add_group(chat_id, calendar_id, args.name)
        print(f"✅ {'Updated' if replaced else 'Added'} mapping for {chat_id} → {calendar_id}", file=sys.stderr)
    elif args.command == "update":
        calendar_id = _calendar_id_or_exit(args.calendar_id)
        if not store.update_group_calendar(chat_id, calendar_id):
            print(f"❌ No mapping found for {chat_id}", file=sys.stderr)
            return EXIT_NOT_FOUND
        print(f"✅ Mapping for {chat_id} now uses {calendar_id}", file=sys.stderr)
    elif args.command == "remove":
        if not store.remove_group(chat_id):
            print(f"❌ No mapping found for {chat_id}", file=sys.stderr)
            return EXIT_NOT_FOUND
        print(f"✅ Removed mapping for {chat_id}", file=sys.stderr)

    print(store.export_snapshot())
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
