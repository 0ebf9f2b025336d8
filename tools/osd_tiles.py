#!/usr/bin/env python3
"""
osd_tiles.py - Shared OSD tile model for the font codecs.

A font is a TileCollection of exactly 256 RGBA tiles. Every codec decodes into
this model and encodes out of it; no codec talks to another directly.

Pixel buffers are numpy uint8 arrays shaped (H, W, 4), channels R,G,B,A.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Optional, Sequence, Tuple

import numpy as np
from PIL import Image

TILE_COUNT = 256
BYTES_PER_PIXEL = 4  # R, G, B, A
TILE_FILE_EXT = ".png"


# ----------------------------
# Errors
# ----------------------------

class FontToolError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class SizeMismatchError(FontToolError):
    def __init__(self, path: str, expected: Sequence[int], actual: int):
        sizes = " or ".join(str(s) for s in expected)
        super().__init__(f"{path}: file is {actual} bytes, expected {sizes}")
        self.path = path
        self.expected = tuple(expected)
        self.actual = actual


class GeometryMismatchError(FontToolError):
    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        index: Optional[int] = None,
        expected: Optional[Tuple[int, int]] = None,
        actual: Optional[Tuple[int, int]] = None,
    ):
        where = []
        if path is not None:
            where.append(str(path))
        if index is not None:
            where.append(f"tile {index:03d}")
        prefix = f"{', '.join(where)}: " if where else ""
        super().__init__(prefix + message)
        self.path = path
        self.index = index
        self.expected = expected
        self.actual = actual


class MissingTileError(FontToolError):
    def __init__(self, path: str, index: int):
        super().__init__(f"{path}: missing tile {index:03d}{TILE_FILE_EXT}")
        self.path = path
        self.index = index


class UnknownFormatError(FontToolError):
    def __init__(self, token: str):
        super().__init__(f"unknown format: {token!r} (expected bin, tiledir or tilegrid)")
        self.token = token


class MalformedDescriptorError(FontToolError):
    def __init__(self, descriptor: str, reason: str = "expected kind:path"):
        super().__init__(f"malformed descriptor {descriptor!r}: {reason}")
        self.descriptor = descriptor
        self.reason = reason


class TileIOError(FontToolError):
    def __init__(self, path: str, error: Exception, index: Optional[int] = None):
        tile = f" (tile {index:03d})" if index is not None else ""
        super().__init__(f"{path}{tile}: {error}")
        self.path = path
        self.error = error
        self.index = index


# ----------------------------
# Tile kinds
# ----------------------------

class TileKind(Enum):
    SD = (36, 54)
    HD = (24, 36)

    @property
    def width(self) -> int:
        return self.value[0]

    @property
    def height(self) -> int:
        return self.value[1]

    @property
    def tile_byte_size(self) -> int:
        return self.width * self.height * BYTES_PER_PIXEL

    @property
    def bin_file_size(self) -> int:
        return self.tile_byte_size * TILE_COUNT

    @classmethod
    def for_dimensions(cls, width: int, height: int) -> Optional["TileKind"]:
        for kind in cls:
            if kind.value == (width, height):
                return kind
        return None

    @classmethod
    def for_bin_file_size(cls, size: int) -> Optional["TileKind"]:
        for kind in cls:
            if kind.bin_file_size == size:
                return kind
        return None


# ----------------------------
# Model
# ----------------------------

@dataclass(frozen=True, eq=False)
class Tile:
    pixels: np.ndarray

    def __post_init__(self):
        px = np.array(self.pixels, dtype=np.uint8, copy=True)
        if px.ndim != 3 or px.shape[2] != BYTES_PER_PIXEL:
            raise ValueError(f"Tile pixels must be shaped (H, W, 4), got {px.shape}")
        px.flags.writeable = False
        object.__setattr__(self, "pixels", px)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def kind(self) -> Optional[TileKind]:
        return TileKind.for_dimensions(self.width, self.height)

    def is_blank(self) -> bool:
        return not self.pixels[:, :, 3].any()

    @classmethod
    def blank(cls, width: int, height: int) -> "Tile":
        return cls(np.zeros((height, width, BYTES_PER_PIXEL), dtype=np.uint8))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Tile):
            return NotImplemented
        return np.array_equal(self.pixels, other.pixels)

    __hash__ = None


class TileCollection:
    """Exactly TILE_COUNT tiles of one shared size, in index order."""

    def __init__(self, tiles: Sequence[Tile]):
        tiles = list(tiles)
        if len(tiles) != TILE_COUNT:
            raise GeometryMismatchError(f"a font holds exactly {TILE_COUNT} tiles, got {len(tiles)}")
        ref = tiles[0].size
        for i, t in enumerate(tiles):
            if t.size != ref:
                raise GeometryMismatchError(
                    f"tile is {t.width}x{t.height}, expected {ref[0]}x{ref[1]}",
                    index=i,
                    expected=ref,
                    actual=t.size,
                )
        self._tiles: Tuple[Tile, ...] = tuple(tiles)

    @property
    def width(self) -> int:
        return self._tiles[0].width

    @property
    def height(self) -> int:
        return self._tiles[0].height

    @property
    def tile_size(self) -> Tuple[int, int]:
        return self.width, self.height

    @property
    def kind(self) -> Optional[TileKind]:
        return TileKind.for_dimensions(self.width, self.height)

    def blank_count(self) -> int:
        return sum(1 for t in self._tiles if t.is_blank())

    def __len__(self) -> int:
        return len(self._tiles)

    def __getitem__(self, index: int) -> Tile:
        return self._tiles[index]

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._tiles)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TileCollection):
            return NotImplemented
        return self._tiles == other._tiles

    __hash__ = None

    def __repr__(self) -> str:
        kind = self.kind.name if self.kind else "custom"
        return f"TileCollection({kind} {self.width}x{self.height}, {len(self)} tiles)"


def blank_collection(width: int, height: int) -> TileCollection:
    tile = Tile.blank(width, height)
    return TileCollection([tile] * TILE_COUNT)


def geometry_label(collection: TileCollection) -> str:
    kind = collection.kind
    name = kind.name if kind else "custom"
    return f"{name} tiles ({collection.width}x{collection.height})"


# ----------------------------
# Image I/O
# ----------------------------

def read_rgba_image(path: Path, index: Optional[int] = None) -> np.ndarray:
    try:
        with Image.open(path) as img:
            rgba = img.convert("RGBA")
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise TileIOError(str(path), exc, index) from exc
    return np.asarray(rgba, dtype=np.uint8)


def write_rgba_image(pixels: np.ndarray, path: Path, index: Optional[int] = None) -> None:
    img = Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8))
    try:
        img.save(path)
    except (OSError, ValueError) as exc:
        raise TileIOError(str(path), exc, index) from exc


def tile_file_name(index: int) -> str:
    return f"{index:03d}{TILE_FILE_EXT}"

