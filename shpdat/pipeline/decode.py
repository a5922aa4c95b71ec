"""Readers for the exported points and polygons files."""

from __future__ import annotations

from dataclasses import dataclass

from shpdat.common.binary import BinaryCursor
from shpdat.common.constants import (
    COORDINATE_WIDTH,
    POINT_COUNT_WIDTH,
    POINT_NAME_INDEX_WIDTH,
    POINT_NAMES_COUNT_WIDTH,
    POLYGON_COUNT_WIDTH,
    POLYGON_NAME_COUNT_WIDTHS,
    POLYGON_TYPE_WIDTH,
    RING_COUNT_WIDTH,
    RING_POINT_COUNT_WIDTH,
)
from shpdat.common.errors import FormatError
from shpdat.pipeline.names import decode_names


@dataclass(frozen=True)
class DecodedPoint:
    ix: int
    iy: int
    name_index: int


@dataclass(frozen=True)
class DecodedPolygon:
    type_code: int
    name_indexes: tuple[int, int, int]
    rings: list[list[tuple[int, int]]]


@dataclass(frozen=True)
class DecodedPoints:
    names: list[bytes]
    points: list[DecodedPoint]


@dataclass(frozen=True)
class DecodedPolygons:
    names: tuple[list[bytes], list[bytes], list[bytes]]
    polygons: list[DecodedPolygon]


def _check_index(index: int, names: list[bytes], what: str) -> int:
    if index >= len(names):
        raise FormatError(f"{what} index {index} outside dictionary of {len(names)} names")
    return index


def decode_points(data: bytes) -> DecodedPoints:
    cursor = BinaryCursor(data, "points file")
    names = decode_names(cursor, POINT_NAMES_COUNT_WIDTH)
    points = []
    for _ in range(cursor.read_uint(POINT_COUNT_WIDTH)):
        ix = cursor.read_int(COORDINATE_WIDTH)
        iy = cursor.read_int(COORDINATE_WIDTH)
        name_index = _check_index(cursor.read_uint(POINT_NAME_INDEX_WIDTH), names, "point name")
        points.append(DecodedPoint(ix=ix, iy=iy, name_index=name_index))
    if not cursor.at_end():
        raise FormatError(f"points file has {len(data) - cursor.offset} trailing bytes")
    return DecodedPoints(names=names, points=points)


def decode_polygons(data: bytes) -> DecodedPolygons:
    """Rings come back as absolute quantized (ix, iy) pairs."""
    cursor = BinaryCursor(data, "polygons file")
    names = tuple(decode_names(cursor, width) for width in POLYGON_NAME_COUNT_WIDTHS)
    polygons = []
    for _ in range(cursor.read_uint(POLYGON_COUNT_WIDTH)):
        type_code = cursor.read_uint(POLYGON_TYPE_WIDTH)
        indexes = tuple(
            _check_index(cursor.read_uint(width), names[slot], f"polygon name slot {slot}")
            for slot, width in enumerate(POLYGON_NAME_COUNT_WIDTHS)
        )
        rings = []
        for _ in range(cursor.read_uint(RING_COUNT_WIDTH)):
            ring = []
            x = y = 0
            for _ in range(cursor.read_uint(RING_POINT_COUNT_WIDTH)):
                x += cursor.read_int(COORDINATE_WIDTH)
                y += cursor.read_int(COORDINATE_WIDTH)
                ring.append((x, y))
            rings.append(ring)
        polygons.append(DecodedPolygon(type_code=type_code, name_indexes=indexes, rings=rings))
    if not cursor.at_end():
        raise FormatError(f"polygons file has {len(data) - cursor.offset} trailing bytes")
    return DecodedPolygons(names=(names[0], names[1], names[2]), polygons=polygons)
