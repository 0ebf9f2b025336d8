#!/usr/bin/env python3
"""
bin_codec.py - Goggles firmware font blob <-> TileCollection.

Layout (no header, no padding):
  256 tile records back to back, index order.
  Each record is W*H pixels, row-major, 4 bytes per pixel: R, G, B, A.

  SD tiles 36x54 -> 7776 bytes/tile, 1990656 bytes/file
  HD tiles 24x36 -> 3456 bytes/tile,  884736 bytes/file
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

import numpy as np

from osd_tiles import (
    BYTES_PER_PIXEL,
    TILE_COUNT,
    GeometryMismatchError,
    SizeMismatchError,
    Tile,
    TileCollection,
    TileIOError,
    TileKind,
)


def detect_kind(path: str, size: int, kind: Optional[TileKind] = None) -> TileKind:
    if kind is not None:
        if size != kind.bin_file_size:
            raise SizeMismatchError(path, [kind.bin_file_size], size)
        return kind
    detected = TileKind.for_bin_file_size(size)
    if detected is None:
        raise SizeMismatchError(path, [k.bin_file_size for k in TileKind], size)
    return detected


def decode_bin(path: str | Path, kind: Optional[TileKind] = None) -> TileCollection:
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise TileIOError(str(path), exc) from exc
    kind = detect_kind(str(path), len(data), kind)

    records = np.frombuffer(data, dtype=np.uint8).reshape(
        TILE_COUNT, kind.height, kind.width, BYTES_PER_PIXEL
    )
    return TileCollection(Tile(rec) for rec in records)


def pack_tiles(collection: TileCollection) -> bytes:
    if collection.kind is None:
        valid = ", ".join(f"{k.name} {k.width}x{k.height}" for k in TileKind)
        raise GeometryMismatchError(
            f"{collection.width}x{collection.height} tiles cannot be stored in a bin file (valid: {valid})",
            actual=collection.tile_size,
        )

    return b"".join(tile.pixels.tobytes() for tile in collection)


def write_atomic(path: Path, blob: bytes) -> None:
    parent = path.parent
    tmp_name = None
    try:
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=parent)
        with os.fdopen(fd, "wb") as f:
            f.write(blob)
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as exc:
        raise TileIOError(str(path), exc) from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)


def encode_bin(collection: TileCollection, path: str | Path) -> None:
    blob = pack_tiles(collection)
    write_atomic(Path(path), blob)
