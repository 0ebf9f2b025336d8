import numpy as np
import pytest

from bin_codec import decode_bin, encode_bin, pack_tiles
from osd_tiles import GeometryMismatchError, SizeMismatchError, TileIOError, TileKind


def test_round_trip_hd(tmp_path, hd_font):
    path = tmp_path / "font_hd.bin"
    encode_bin(hd_font, path)
    assert path.stat().st_size == TileKind.HD.bin_file_size
    assert decode_bin(path) == hd_font


def test_round_trip_sd(tmp_path, sd_font):
    path = tmp_path / "font.bin"
    encode_bin(sd_font, path)
    font = decode_bin(path)
    assert font.kind is TileKind.SD
    assert font == sd_font


def test_record_layout(hd_font):
    blob = pack_tiles(hd_font)
    size = TileKind.HD.tile_byte_size
    assert len(blob) == 256 * size
    # tile 42, pixel (x=3, y=1) -> RGBA bytes
    ofs = 42 * size + (1 * 24 + 3) * 4
    assert tuple(blob[ofs:ofs + 4]) == tuple(hd_font[42].pixels[1, 3])


def test_truncated_file_fails(tmp_path):
    path = tmp_path / "short.bin"
    path.write_bytes(bytes(TileKind.HD.bin_file_size - 1))
    with pytest.raises(SizeMismatchError) as exc:
        decode_bin(path)
    assert exc.value.actual == TileKind.HD.bin_file_size - 1
    assert TileKind.HD.bin_file_size in exc.value.expected


def test_oversized_file_fails(tmp_path):
    path = tmp_path / "long.bin"
    path.write_bytes(bytes(TileKind.HD.bin_file_size + 1))
    with pytest.raises(SizeMismatchError):
        decode_bin(path)


def test_exact_size_succeeds(tmp_path):
    path = tmp_path / "zero.bin"
    path.write_bytes(bytes(TileKind.HD.bin_file_size))
    font = decode_bin(path)
    assert len(font) == 256
    assert font.tile_size == (24, 36)
    assert font.blank_count() == 256


def test_explicit_kind_must_match(tmp_path):
    path = tmp_path / "hd.bin"
    path.write_bytes(bytes(TileKind.HD.bin_file_size))
    assert decode_bin(path, TileKind.HD).kind is TileKind.HD
    with pytest.raises(SizeMismatchError) as exc:
        decode_bin(path, TileKind.SD)
    assert exc.value.expected == (TileKind.SD.bin_file_size,)


def test_missing_file(tmp_path):
    with pytest.raises(TileIOError) as exc:
        decode_bin(tmp_path / "nope.bin")
    assert "nope.bin" in str(exc.value)


def test_non_hardware_geometry_refused(tmp_path, small_font):
    path = tmp_path / "font.bin"
    path.write_bytes(b"keep me")
    with pytest.raises(GeometryMismatchError):
        encode_bin(small_font, path)
    assert path.read_bytes() == b"keep me"
    assert [p.name for p in tmp_path.iterdir()] == ["font.bin"]


def test_write_failure_leaves_no_temp(tmp_path, hd_font):
    target = tmp_path / "missing_dir" / "font.bin"
    with pytest.raises(TileIOError):
        encode_bin(hd_font, target)
    assert not target.exists()


def test_overwrites_existing(tmp_path, hd_font):
    path = tmp_path / "font.bin"
    path.write_bytes(b"old")
    encode_bin(hd_font, path)
    assert decode_bin(path) == hd_font
    assert sorted(p.name for p in tmp_path.iterdir()) == ["font.bin"]


def test_decoded_tiles_are_independent_of_buffer(tmp_path, hd_font):
    path = tmp_path / "font.bin"
    encode_bin(hd_font, path)
    font = decode_bin(path)
    assert not font[0].pixels.flags.writeable
    assert np.array_equal(font[255].pixels, hd_font[255].pixels)
