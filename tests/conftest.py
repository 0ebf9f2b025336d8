import numpy as np
import pytest

from osd_tiles import TILE_COUNT, Tile, TileCollection, TileKind


def random_collection(width: int, height: int, seed: int = 0) -> TileCollection:
    rng = np.random.default_rng(seed)
    pixels = rng.integers(0, 256, size=(TILE_COUNT, height, width, 4), dtype=np.uint8)
    # keep some fully transparent tiles around, fonts are mostly empty
    pixels[200:, :, :, 3] = 0
    return TileCollection(Tile(p) for p in pixels)


@pytest.fixture
def hd_font() -> TileCollection:
    return random_collection(TileKind.HD.width, TileKind.HD.height, seed=1)


@pytest.fixture
def sd_font() -> TileCollection:
    return random_collection(TileKind.SD.width, TileKind.SD.height, seed=2)


@pytest.fixture
def small_font() -> TileCollection:
    return random_collection(5, 7, seed=3)


def _break_second_idat(path):
    data = bytearray(path.read_bytes())
    ofs = 8
    seen = 0
    while ofs < len(data):
        length = int.from_bytes(data[ofs:ofs + 4], "big")
        if data[ofs + 4:ofs + 8] == b"IDAT":
            seen += 1
            if seen == 2:
                data[ofs + 4:ofs + 8] = b"\x00\x01\x02\x03"
                path.write_bytes(bytes(data))
                return
        ofs += 12 + length
    raise AssertionError(f"{path} has a single IDAT chunk")


@pytest.fixture
def break_second_idat():
    """Rename the second IDAT chunk of a PNG so decoding fails mid-stream."""
    return _break_second_idat
