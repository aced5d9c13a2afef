#!/usr/bin/env python3
"""
Headless CSV interchange for a MenuPad menus file.

  menus_csv.py export menus.json out.csv
  menus_csv.py import menus.json in.csv [--target-folder NAME] [--no-create]
                                         [--overwrite] [--keep-paths]
  menus_csv.py history menus.json
  menus_csv.py restore menus.json REV

With --history, imports are committed to a git repository beside the menus
file, once before and once after the merge.
"""
import sys
import argparse
from pathlib import Path

from core.constants import DEFAULT_IMPORT_FOLDER
from core.csv_manager import import_into_tree, read_csv_file, write_export
from core.errors import HistoryError
from core.log import Log
from core.merge import ImportOptions
from core.storage import load_menus, save_menus

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export or import MenuPad menus as CSV")
    parser.add_argument("--verbosity", type=int, default=0, help="Log verbosity (0=quiet)")
    parser.add_argument("--history", action="store_true",
                        help="Snapshot the menus file in git around each import")
    sub = parser.add_subparsers(dest="command", required=True)

    p_export = sub.add_parser("export", help="Write every menu to a CSV file")
    p_export.add_argument("menus", help="Menus JSON file")
    p_export.add_argument("csv", help="Destination CSV file")

    p_import = sub.add_parser("import", help="Merge a CSV file into the menus file")
    p_import.add_argument("menus", help="Menus JSON file (created if missing)")
    p_import.add_argument("csv", help="Source CSV file")
    p_import.add_argument("--target-folder", default=DEFAULT_IMPORT_FOLDER,
                          help=f"Top-level folder receiving the menus (default: {DEFAULT_IMPORT_FOLDER})")
    p_import.add_argument("--no-create", action="store_true",
                          help="Fail instead of creating a missing target folder")
    p_import.add_argument("--overwrite", action="store_true",
                          help="Import menus even when the title already exists")
    p_import.add_argument("--keep-paths", action="store_true",
                          help="Recreate folders from the CSV folder column")

    p_history = sub.add_parser("history", help="List snapshots of the menus file")
    p_history.add_argument("menus", help="Menus JSON file")
    p_history.add_argument("--limit", type=int, default=20)

    p_restore = sub.add_parser("restore", help="Bring back the menus from a snapshot")
    p_restore.add_argument("menus", help="Menus JSON file")
    p_restore.add_argument("rev", help="Snapshot hash (a prefix is enough)")
    return parser

def cmd_export(args) -> int:
    tree = load_menus(args.menus)
    result = write_export(tree, args.csv)
    print(f"Exported {result.count} menu(s) to {args.csv}")
    return 0

def cmd_import(args) -> int:
    tree = load_menus(args.menus)
    options = ImportOptions(
        target_folder_name=args.target_folder,
        create_new_folder=not args.no_create,
        overwrite_existing=args.overwrite,
        keep_folder_paths=args.keep_paths,
    )
    result, report = import_into_tree(tree, read_csv_file(args.csv), options)

    if args.history:
        from core.history import snapshot
        snapshot(args.menus, "Before CSV import")
    save_menus(args.menus, tree)
    if args.history:
        snapshot(args.menus, f"Import {report.added_count} menu(s) from {Path(args.csv).name}")

    where = f' into "{report.target_folder_name}"' if report.target_folder_name else ""
    print(f"Imported {report.added_count} menu(s){where}, skipped {report.skipped_count} duplicate(s)")
    for line in result.errors:
        print(f"  rejected {line}", file=sys.stderr)
    for line in result.warnings:
        print(f"  warning {line}", file=sys.stderr)
    return 0

def cmd_history(args) -> int:
    from core.history import get_history
    for info in get_history(args.menus, limit=args.limit):
        print(f"{info.hash[:8]}  {info.date}  {info.menu_count:4d} menu(s)  {info.message}")
    return 0

def cmd_restore(args) -> int:
    from core.history import read_snapshot, snapshot
    tree = read_snapshot(args.menus, args.rev)
    snapshot(args.menus, "Before restore")
    save_menus(args.menus, tree)
    snapshot(args.menus, f"Restore {args.rev}")
    print(f"Restored menus from {args.rev}")
    return 0

COMMANDS = {
    "export": cmd_export,
    "import": cmd_import,
    "history": cmd_history,
    "restore": cmd_restore,
}

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    Log.set_verbosity(args.verbosity)
    try:
        return COMMANDS[args.command](args)
    except (ValueError, HistoryError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

if __name__ == '__main__':
    sys.exit(main())
