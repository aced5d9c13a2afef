#!/usr/bin/env python3
'''
Copyright 2025 Aaron Vose (avose@aaronvose.net)
Licensed under the LGPL v2.1; see the file 'LICENSE' for details.
'''

import sys
import argparse
from pathlib import Path

from core.constants import DEFAULT_MENUS_PATH

def run():
    parser = argparse.ArgumentParser(description="MenuPad prompt menu configurator")
    parser.add_argument(
        "menus",
        nargs="?", default=DEFAULT_MENUS_PATH,
        help=f"Menus JSON file to open (default: {DEFAULT_MENUS_PATH})"
    )
    parser.add_argument(
        "--verbosity",
        type=int, default=0,
        help="Set verbosity level (0=quiet, 1=normal, 2=verbose, 3+=debug)"
    )
    parser.add_argument(
        "--stdexp",
        action="store_true",
        help="Use standard exception handling to stdout / stderr."
    )
    parser.add_argument(
        "--history",
        action="store_true",
        help="Keep git snapshots of the menus file around each CSV import."
    )
    args = parser.parse_args()

    # Imported late so --help works without a display.
    from app import main
    return main(str(Path(args.menus).expanduser()), verbosity=args.verbosity, stdexp=args.stdexp, history=args.history)

if __name__ == "__main__":
    sys.exit(run())
