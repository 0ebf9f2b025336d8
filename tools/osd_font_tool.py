#!/usr/bin/env python3
"""
osd_font_tool.py - Convert FPV goggles OSD fonts between bin, tile dir and tile grid.

Usage:
  python tools/osd_font_tool.py convert bin:font_hd.bin tiledir:tiles
  python tools/osd_font_tool.py convert tiledir:tiles tilegrid:font_hd.png
  python tools/osd_font_tool.py convert tilegrid:font_hd.png bin:font_hd.bin
  python tools/osd_font_tool.py info bin:font_hd.bin

Descriptors:
  bin:PATH        packed RGBA blob loaded by the goggles (SD 36x54 or HD 24x36 tiles)
  tiledir:PATH    directory with 000.png .. 255.png
  tilegrid:PATH   one .png holding all 256 tiles in a 16x16 grid

Every conversion decodes the source into one in-memory font and encodes that
font into the target, so any source/target pair works (same format included).
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Dict, List, Optional, Tuple

from bin_codec import decode_bin, encode_bin
from format_spec import FormatKind, FormatSpec, parse
from osd_tiles import FontToolError, TileCollection, geometry_label
from tile_dir_codec import decode_tile_dir, encode_tile_dir
from tile_grid_codec import decode_tile_grid, encode_tile_grid

Decoder = Callable[[str], TileCollection]
Encoder = Callable[[TileCollection, str], None]

CODECS: Dict[FormatKind, Tuple[Decoder, Encoder]] = {
    FormatKind.BIN: (decode_bin, encode_bin),
    FormatKind.TILEDIR: (decode_tile_dir, encode_tile_dir),
    FormatKind.TILEGRID: (decode_tile_grid, encode_tile_grid),
}


def decode(source: FormatSpec) -> TileCollection:
    decoder, _ = CODECS[source.kind]
    return decoder(source.path)


def encode(collection: TileCollection, target: FormatSpec) -> None:
    _, encoder = CODECS[target.kind]
    encoder(collection, target.path)


def convert(
    source: FormatSpec,
    target: FormatSpec,
    report: Optional[Callable[[str], None]] = None,
) -> TileCollection:
    collection = decode(source)
    if report:
        report(f"Read {geometry_label(collection)} from {source}")
    encode(collection, target)
    if report:
        report(f"Wrote {target}")
    return collection


def describe(collection: TileCollection) -> List[str]:
    blank = collection.blank_count()
    return [
        f"kind:   {collection.kind.name if collection.kind else 'custom (not storable as bin)'}",
        f"tile:   {collection.width}x{collection.height}",
        f"tiles:  {len(collection)} ({len(collection) - blank} drawn, {blank} blank)",
    ]


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="osd-font-tool",
        description="Convert FPV goggles OSD fonts between bin, tiledir and tilegrid.",
    )
    ap.add_argument("-q", "--quiet", action="store_true", help="Only print errors")
    sub = ap.add_subparsers(dest="command", required=True)

    conv = sub.add_parser("convert", help="Convert a font from one format to another")
    conv.add_argument("source", help="Source descriptor (bin:PATH, tiledir:PATH, tilegrid:PATH)")
    conv.add_argument("target", help="Target descriptor (bin:PATH, tiledir:PATH, tilegrid:PATH)")

    info = sub.add_parser("info", help="Show tile kind and size of a font")
    info.add_argument("source", help="Source descriptor (bin:PATH, tiledir:PATH, tilegrid:PATH)")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    report = None if args.quiet else print

    try:
        if args.command == "convert":
            convert(parse(args.source), parse(args.target), report=report)
        else:
            source = parse(args.source)
            collection = decode(source)
            print(str(source))
            for line in describe(collection):
                print(f"  {line}")
    except FontToolError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
