from __future__ import annotations

import struct
from pathlib import Path

import pytest


def _file_header(shape_type: int, file_length_bytes: int) -> bytes:
    return (
        struct.pack(">7i", 9994, 0, 0, 0, 0, 0, file_length_bytes // 2)
        + struct.pack("<2i", 1000, shape_type)
        + struct.pack("<8d", *([0.0] * 8))
    )


def _point_content(geometry) -> bytes:
    if geometry is None:
        return struct.pack("<i", 0)
    northing, easting = geometry
    return struct.pack("<i2d", 1, easting, northing)


def _polygon_content(geometry) -> bytes:
    if geometry is None:
        return struct.pack("<i", 0)
    starts = []
    coords = []
    for ring in geometry:
        starts.append(len(coords) // 2)
        for northing, easting in ring:
            coords.extend((easting, northing))
    point_count = len(coords) // 2
    return (
        struct.pack("<i4d2i", 5, 0.0, 0.0, 0.0, 0.0, len(starts), point_count)
        + struct.pack(f"<{len(starts)}i", *starts)
        + struct.pack(f"<{len(coords)}d", *coords)
    )


def _dbf(fields: list[tuple[str, int]], records: list[list[bytes]], record_count: int) -> bytes:
    record_length = 1 + sum(length for _, length in fields)
    header_length = 32 + 32 * len(fields) + 1
    out = bytearray(struct.pack("<4BIHH20x", 3, 124, 1, 1, record_count, header_length, record_length))
    for name, length in fields:
        out += name.encode("ascii").ljust(11, b"\x00") + b"C" + b"\x00" * 4 + bytes([length, 0]) + b"\x00" * 14
    out += b"\x0d"
    for values in records:
        out += b" "
        for (_, length), value in zip(fields, values):
            out += value.ljust(length, b" ")[:length]
    out += b"\x1a"
    return bytes(out)


def write_triad(
    base: Path,
    shape_type: int,
    geometries: list,
    fields: list[tuple[str, int]],
    records: list[list[bytes]],
    *,
    dbf_record_count: int | None = None,
) -> Path:
    encode = _point_content if shape_type == 1 else _polygon_content
    contents = [encode(geometry) for geometry in geometries]

    shp_body = bytearray()
    shx_body = bytearray()
    offset = 100
    for number, content in enumerate(contents, start=1):
        shx_body += struct.pack(">2i", offset // 2, len(content) // 2)
        shp_body += struct.pack(">2i", number, len(content) // 2) + content
        offset += 8 + len(content)

    base.parent.mkdir(parents=True, exist_ok=True)
    base.with_name(base.name + ".shp").write_bytes(_file_header(shape_type, 100 + len(shp_body)) + shp_body)
    base.with_name(base.name + ".shx").write_bytes(_file_header(shape_type, 100 + len(shx_body)) + shx_body)
    count = len(records) if dbf_record_count is None else dbf_record_count
    base.with_name(base.name + ".dbf").write_bytes(_dbf(fields, records, count))
    return base


POINT_FIELDS = [("TextString", 40), ("KIRJELDUS", 30)]
POLYGON_FIELDS = [("TYYP", 2), ("MNIMI", 30), ("ONIMI", 30), ("ANIMI", 40)]


@pytest.fixture
def shapefile_triad():
    return write_triad


@pytest.fixture
def place_names(tmp_path: Path) -> Path:
    return write_triad(
        tmp_path / "kohanimi",
        1,
        [(6589000.0, 542000.0), (6400000.0, 500000.0), (6450000.0, 600000.0)],
        POINT_FIELDS,
        [
            [b"Kivin\xf5mm", b"Maa\xfcksuse nimi"],
            [b"Abja", b"Maa\xfcksuse nimi"],
            [b"J\xe4rv", b"Veekogu nimi"],
        ],
    )


def square_ring(northing: float, easting: float, side: float, step: float) -> list[tuple[float, float]]:
    """Clockwise (in easting/northing) open square with a vertex every ``step``."""
    count = int(side / step)
    ring = [(northing + i * step, easting) for i in range(count)]
    ring += [(northing + side, easting + i * step) for i in range(count)]
    ring += [(northing + side - i * step, easting + side) for i in range(count)]
    ring += [(northing, easting + side - i * step) for i in range(count)]
    return ring


@pytest.fixture
def settlement_units(tmp_path: Path) -> Path:
    return write_triad(
        tmp_path / "asustusyksus",
        5,
        [
            [square_ring(6589000.0, 542000.0, 100.0, 20.0)],
            [
                [(6400000.0, 500000.0), (6400010.0, 500000.0), (6400010.0, 500010.0)],
                [(6400100.0, 500100.0), (6400100.0, 500100.0)],
            ],
            [[(6450000.0, 600000.0), (6450000.0, 600000.0)]],
        ],
        POLYGON_FIELDS,
        [
            [b" 8", b"Harju maakond", b"Tallinn", b"Kesklinna linnaosa"],
            [b"3", b"Viljandi maakond", b"Mulgi vald", b"Abja-Paluoja linn"],
            [b"8", b"Viljandi maakond", b"Mulgi vald", "Tühi küla".encode("cp1257")],
        ],
    )


@pytest.fixture
def square():
    return square_ring
