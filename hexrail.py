#!/usr/bin/env python3
"""
hexrail.py - Export railway game tiles and maps to SVG

Usage:
    python hexrail.py definitions [--tiles extra.json]
    python hexrail.py assets 1830 [--log mygame.json]
    python hexrail.py newgame 1830 mygame

Asset mode writes <game>-manifest.svg, <game>-sheet-<n>.svg and
<game>-map.svg for a game under games/<game>/.
"""

import argparse
import sys
from pathlib import Path

from draw import RenderOptions, draw_map, draw_tile_definitions, draw_tile_manifest, draw_tile_sheets
from errors import ConfigurationError, DataIntegrityError
from game import GAMES_DIR, load_definitions, load_game, write_new_log
from tiles import definitions


def export_definitions(args, options: RenderOptions) -> None:
    """Draw every known tile definition on one page."""
    tile_definitions = dict(definitions())
    if args.tiles:
        print(f"Reading extra tile definitions from {args.tiles}...")
        extra = load_definitions(args.tiles)
        if options.verbose:
            print(f"  {len(extra)} definitions")
        tile_definitions.update(extra)

    output = args.output_dir / "definitions.svg"
    dwg = draw_tile_definitions(tile_definitions, filename=str(output))
    dwg.save()
    print(f"Saved {output}")


def export_assets(args, options: RenderOptions) -> None:
    """Export manifest, tile sheets and map of one game."""
    print(f"Processing game '{args.game}'")
    game = load_game(args.game, games_dir=args.games_dir, log_path=args.log, verbose=options.verbose)

    print("Exporting tile manifest...")
    output = args.output_dir / f"{game.name}-manifest.svg"
    draw_tile_manifest(game, filename=str(output)).save()
    print(f"Saved {output}")

    print("Exporting tile sheets...")
    sheets = draw_tile_sheets(game, output_dir=args.output_dir)
    for sheet in sheets:
        sheet.save()
        if options.verbose:
            print(f"  Saved {sheet.filename}")
    print(f"Saved {len(sheets)} tile sheet(s)")

    print("Exporting map...")
    output = args.output_dir / f"{game.name}-map.svg"
    draw_map(game, options, filename=str(output)).save()
    print(f"Saved {output}")


def start_new_game(args, options: RenderOptions) -> None:
    """Write an empty usage log for a new game."""
    print(f"Starting new game of {args.game}")
    output = args.output_dir / f"{args.name}.json"
    write_new_log(args.game, output)
    print(f"Writing to {output}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export railway game tiles and maps to SVG")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print per-item detail")
    parser.add_argument("-d", "--debug-coordinates", action="store_true",
                        help="Overlay grid coordinates and basis axes on the map")
    parser.add_argument("--output-dir", type=Path, default=Path("."),
                        help="Directory for generated files (default: current directory)")

    subparsers = parser.add_subparsers(dest="mode", required=True)

    defs = subparsers.add_parser("definitions", help="Draw all tile definitions")
    defs.add_argument("--tiles", type=Path, help="Extra tile definitions (JSON object of name -> definition)")
    defs.set_defaults(func=export_definitions)

    assets = subparsers.add_parser("assets", help="Export manifest, tile sheets and map of a game")
    assets.add_argument("game", help="Game name (directory under --games-dir)")
    assets.add_argument("--log", type=Path, help="Usage log of a game in progress")
    assets.add_argument("--games-dir", type=Path, default=GAMES_DIR,
                        help=f"Directory holding game definitions (default: {GAMES_DIR})")
    assets.set_defaults(func=export_assets)

    newgame = subparsers.add_parser("newgame", help="Start a usage log for a new game")
    newgame.add_argument("game", help="Game being played")
    newgame.add_argument("name", help="Log file name, without .json")
    newgame.set_defaults(func=start_new_game)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    options = RenderOptions(verbose=args.verbose, debug_coordinates=args.debug_coordinates)

    try:
        args.output_dir.mkdir(parents=True, exist_ok=True)
        args.func(args, options)
    except (ConfigurationError, DataIntegrityError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
