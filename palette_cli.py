#!/usr/bin/env python3
"""
Command-line front end for the palette workspace.

Saved palettes live in a JSON file (default ~/.palette_workspace.json,
override with --store or PALETTE_STORE).

Examples:
    palette-workspace generate '#3366cc' --mode triadic --save --name Ocean
    palette-workspace generate --image photo.png
    palette-workspace list
    palette-workspace export 0 --format css
    palette-workspace share 0 --base-url https://example.com/tools
    palette-workspace open 'https://example.com/tools?palette=...'
"""

import argparse
import logging
import os
import sys
from pathlib import Path

from color_space import hsl_string, rgb_string
from contrast import contrast, contrast_report, readable_text_color, wcag_level
from export_palette import export_css, export_json, export_scss, png_filename, render_png
from generate_palette import MODES, generate, generate_from_image
from palette_errors import PaletteError
from palette_events import EventBus, PALETTE_GENERATED, PALETTE_SAVED
from palette_model import Palette
from persistence import JsonFileStore, PersistenceGateway
from share_codec import decode, share_url, token_from_url
from workspace import Workspace

DEFAULT_STORE = Path.home() / '.palette_workspace.json'
DEFAULT_BASE_URL = 'http://localhost:8000/'


def setup_logging(verbose: bool, quiet: bool) -> None:
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    if verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def format_palette(palette: Palette) -> str:
    """Plain-text listing of a palette with per-color contrast readouts."""
    lines = [palette.name or '(unnamed palette)']
    if palette.is_empty:
        lines.append('  (no groups)')
    for group in palette.groups:
        lines.append(f"  {group.name}")
        if not group.colors:
            lines.append('    (empty)')
        for color in group.colors:
            ratios = contrast_report(color.hex)
            lines.append(
                f"    {color.hex.upper()}  {rgb_string(color.hex)}  {hsl_string(color.hex)}"
                f"  white {ratios['white']:5.2f}  black {ratios['black']:5.2f}"
            )
    return '\n'.join(lines)


# =============================================================================
# Commands
# =============================================================================

def cmd_generate(args, workspace: Workspace, gateway: PersistenceGateway) -> int:
    if args.image:
        result = generate_from_image(args.image)
    elif args.seed:
        result = generate(args.seed, args.mode)
    elif args.mode == 'random':
        result = generate('', 'random')
    else:
        print("Error: a seed color or --image is required", file=sys.stderr)
        return 2

    workspace.bus.publish(PALETTE_GENERATED, result)
    if args.name:
        workspace.rename_palette(args.name)

    print(format_palette(workspace.palette))
    if args.save:
        workspace.save(gateway)
    return 0


def cmd_list(args, workspace: Workspace, gateway: PersistenceGateway) -> int:
    entries = gateway.list()
    if not entries:
        print("No palettes saved yet.")
        return 0
    for i, entry in enumerate(entries):
        print(f"[{i}] {entry.get('name', '')}")
    return 0


def cmd_show(args, workspace: Workspace, gateway: PersistenceGateway) -> int:
    print(format_palette(gateway.load(args.index)))
    return 0


def cmd_delete(args, workspace: Workspace, gateway: PersistenceGateway) -> int:
    removed = gateway.delete_at(args.index)
    print(f"Deleted \"{removed.get('name', '')}\"")
    return 0


def cmd_share(args, workspace: Workspace, gateway: PersistenceGateway) -> int:
    print(share_url(args.base_url, gateway.load(args.index)))
    return 0


def cmd_open(args, workspace: Workspace, gateway: PersistenceGateway) -> int:
    token = token_from_url(args.link)
    workspace.replace(decode(token if token is not None else args.link))
    print(format_palette(workspace.palette))
    if args.save:
        workspace.save(gateway)
    return 0


def cmd_export(args, workspace: Workspace, gateway: PersistenceGateway) -> int:
    palette = gateway.load(args.index)

    if args.format == 'png':
        output = Path(args.output) if args.output else Path(png_filename(palette))
        output.write_bytes(render_png(palette))
        print(f"Wrote: {output}")
        return 0

    exporters = {'css': export_css, 'scss': export_scss, 'json': export_json}
    text = exporters[args.format](palette)
    if args.output:
        Path(args.output).write_text(text)
        print(f"Wrote: {args.output}")
    else:
        print(text)
    return 0


def cmd_contrast(args, workspace: Workspace, gateway: PersistenceGateway) -> int:
    for reference in ('white', 'black'):
        ratio = contrast(args.color, reference)
        print(f"{reference:>5}: {ratio:5.2f} ({wcag_level(ratio)})")
    print(f"Text: {readable_text_color(args.color)}")
    return 0


# =============================================================================
# Entry point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Generate, edit, share and export color palettes.')
    parser.add_argument('--store', default=os.environ.get('PALETTE_STORE', str(DEFAULT_STORE)),
                        help='JSON file holding saved palettes')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only log warnings and errors')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('generate', help='Generate a palette from a seed color or image')
    p.add_argument('seed', nargs='?', help='Seed color (hex, rgb(), hsl() or name)')
    p.add_argument('--mode', '-m', choices=MODES, default='monochromatic')
    p.add_argument('--image', '-i', help='Derive the palette from an image instead')
    p.add_argument('--name', '-n', help='Palette name (defaults to the mode or image name)')
    p.add_argument('--save', action='store_true', help='Save the generated palette')
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser('list', help='List saved palettes')
    p.set_defaults(func=cmd_list)

    p = sub.add_parser('show', help='Show a saved palette')
    p.add_argument('index', type=int)
    p.set_defaults(func=cmd_show)

    p = sub.add_parser('delete', help='Delete a saved palette')
    p.add_argument('index', type=int)
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser('share', help='Print a share link for a saved palette')
    p.add_argument('index', type=int)
    p.add_argument('--base-url', default=DEFAULT_BASE_URL)
    p.set_defaults(func=cmd_share)

    p = sub.add_parser('open', help='Open a share link or token')
    p.add_argument('link', help='Share URL or bare token')
    p.add_argument('--save', action='store_true', help='Save the opened palette')
    p.set_defaults(func=cmd_open)

    p = sub.add_parser('export', help='Export a saved palette')
    p.add_argument('index', type=int)
    p.add_argument('--format', '-f', choices=('css', 'scss', 'json', 'png'), default='css')
    p.add_argument('--output', '-o', help='Output file (text formats print to stdout by default)')
    p.set_defaults(func=cmd_export)

    p = sub.add_parser('contrast', help='Show WCAG contrast of a color against white and black')
    p.add_argument('color')
    p.set_defaults(func=cmd_contrast)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose, args.quiet)

    bus = EventBus()
    workspace = Workspace(bus)
    gateway = PersistenceGateway(JsonFileStore(args.store))
    bus.subscribe(PALETTE_SAVED, lambda index: print(f"Palette \"{workspace.palette.name}\" saved as [{index}]"))

    try:
        return args.func(args, workspace, gateway)
    except (PaletteError, FileNotFoundError, IndexError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
