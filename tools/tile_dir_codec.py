#!/usr/bin/env python3
"""
tile_dir_codec.py - Directory of per-tile PNG files <-> TileCollection.

  tiles/000.png .. tiles/255.png, one RGBA image per tile, all the same size.
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple

from osd_tiles import (
    TILE_COUNT,
    GeometryMismatchError,
    MissingTileError,
    Tile,
    TileCollection,
    TileIOError,
    read_rgba_image,
    tile_file_name,
    write_rgba_image,
)


def list_tile_files(path: Path) -> List[Path]:
    if not path.is_dir():
        raise TileIOError(str(path), NotADirectoryError("not a tile directory"))
    try:
        present = {p.name for p in path.iterdir() if p.is_file()}
    except OSError as exc:
        raise TileIOError(str(path), exc) from exc

    files = []
    for index in range(TILE_COUNT):
        name = tile_file_name(index)
        if name not in present:
            raise MissingTileError(str(path), index)
        files.append(path / name)
    return files


def decode_tile_dir(path: str | Path) -> TileCollection:
    path = Path(path)
    files = list_tile_files(path)

    tiles: List[Tile] = []
    ref: Optional[Tuple[int, int]] = None
    for index, tile_path in enumerate(files):
        tile = Tile(read_rgba_image(tile_path, index))
        if ref is None:
            ref = tile.size
        elif tile.size != ref:
            raise GeometryMismatchError(
                f"tile is {tile.width}x{tile.height}, tile 000 is {ref[0]}x{ref[1]}",
                path=str(path),
                index=index,
                expected=ref,
                actual=tile.size,
            )
        tiles.append(tile)
    return TileCollection(tiles)


def encode_tile_dir(collection: TileCollection, path: str | Path) -> None:
    path = Path(path)
    if path.exists() and not path.is_dir():
        raise TileIOError(str(path), NotADirectoryError("path exists and is not a directory"))
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise TileIOError(str(path), exc) from exc

    for index, tile in enumerate(collection):
        write_rgba_image(tile.pixels, path / tile_file_name(index), index)
