#!/usr/bin/env python3
"""
tile_grid_codec.py - Single 16x16 grid image <-> TileCollection.

Tile i sits in cell (col = i % 16, row = i // 16), pixel offset (col*W, row*H).
The image is exactly 16*W x 16*H; there are no separators between cells.
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import numpy as np

from osd_tiles import (
    BYTES_PER_PIXEL,
    TILE_COUNT,
    GeometryMismatchError,
    Tile,
    TileCollection,
    read_rgba_image,
    write_rgba_image,
)

GRID_COLS = 16
GRID_ROWS = TILE_COUNT // GRID_COLS


def grid_cell(index: int) -> Tuple[int, int]:
    """Return (col, row) of tile `index`."""
    if not (0 <= index < TILE_COUNT):
        raise IndexError(f"tile index out of range 0..{TILE_COUNT - 1}: {index}")
    return index % GRID_COLS, index // GRID_COLS


def decode_tile_grid(path: str | Path) -> TileCollection:
    path = Path(path)
    img = read_rgba_image(path)
    img_h, img_w = img.shape[:2]
    if img_w % GRID_COLS or img_h % GRID_ROWS:
        raise GeometryMismatchError(
            f"grid image is {img_w}x{img_h}, both sides must be multiples of {GRID_COLS}",
            path=str(path),
            actual=(img_w, img_h),
        )
    tw = img_w // GRID_COLS
    th = img_h // GRID_ROWS

    tiles = []
    for index in range(TILE_COUNT):
        col, row = grid_cell(index)
        py = row * th
        px = col * tw
        tiles.append(Tile(img[py:py + th, px:px + tw]))
    return TileCollection(tiles)


def compose_grid(collection: TileCollection) -> np.ndarray:
    tw, th = collection.tile_size
    out = np.zeros((GRID_ROWS * th, GRID_COLS * tw, BYTES_PER_PIXEL), dtype=np.uint8)
    for index, tile in enumerate(collection):
        col, row = grid_cell(index)
        out[row * th:(row + 1) * th, col * tw:(col + 1) * tw] = tile.pixels
    return out


def encode_tile_grid(collection: TileCollection, path: str | Path) -> None:
    write_rgba_image(compose_grid(collection), Path(path))
