"""Binary export of points and polygons."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from shpdat.common.binary import pack_int, pack_uint
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
from shpdat.common.fs import write_bytes
from shpdat.common.models import PointFeature, PolygonFeature
from shpdat.pipeline.names import build_dictionaries
from shpdat.pipeline.quantize import Quantizer


@dataclass(frozen=True)
class ExportStats:
    features_in: int
    features_out: int
    names: tuple[int, ...]
    rings: int = 0
    ring_points: int = 0


def encode_points(points: list[PointFeature], quantizer: Quantizer) -> tuple[bytes, ExportStats]:
    """Points file: names, point count, then (northing, easting, name index) per point."""
    (dictionary,) = build_dictionaries(point.name for point in points)
    out = bytearray(dictionary.encode(POINT_NAMES_COUNT_WIDTH, "point names"))
    out += pack_uint(len(points), POINT_COUNT_WIDTH, "point count")
    for point in points:
        ix, iy = quantizer.quantize(point.xy)
        out += pack_int(ix, COORDINATE_WIDTH, f"northing of {point.name!r}", quantizer.overflow)
        out += pack_int(iy, COORDINATE_WIDTH, f"easting of {point.name!r}", quantizer.overflow)
        out += pack_uint(dictionary.index_of(point.name), POINT_NAME_INDEX_WIDTH, "point name index")
    stats = ExportStats(features_in=len(points), features_out=len(points), names=(len(dictionary),))
    return bytes(out), stats


def _encode_ring(ring, quantizer: Quantizer) -> bytes:
    out = bytearray(pack_uint(len(ring), RING_POINT_COUNT_WIDTH, "ring point count"))
    last_x = last_y = 0
    for xy in ring:
        x, y = quantizer.quantize(xy)
        out += pack_int(x - last_x, COORDINATE_WIDTH, "northing delta", quantizer.overflow)
        out += pack_int(y - last_y, COORDINATE_WIDTH, "easting delta", quantizer.overflow)
        last_x, last_y = x, y
    return bytes(out)


def encode_polygons(polygons: list[PolygonFeature], quantizer: Quantizer) -> tuple[bytes, ExportStats]:
    """Polygons file: three name dictionaries, polygon count, then each non-empty polygon."""
    kept = [polygon for polygon in polygons if not polygon.is_empty()]
    dictionaries = build_dictionaries(*([polygon.names[slot] for polygon in kept] for slot in range(3)))

    out = bytearray()
    for slot, (dictionary, width) in enumerate(zip(dictionaries, POLYGON_NAME_COUNT_WIDTHS)):
        out += dictionary.encode(width, f"polygon name slot {slot}")
    out += pack_uint(len(kept), POLYGON_COUNT_WIDTH, "polygon count")

    ring_total = point_total = 0
    for polygon in kept:
        out += pack_uint(polygon.type_code, POLYGON_TYPE_WIDTH, "polygon type")
        for slot, (dictionary, width) in enumerate(zip(dictionaries, POLYGON_NAME_COUNT_WIDTHS)):
            out += pack_uint(dictionary.index_of(polygon.names[slot]), width, f"polygon name slot {slot} index")
        rings = [ring for ring in polygon.rings if ring]
        out += pack_uint(len(rings), RING_COUNT_WIDTH, "ring count")
        for ring in rings:
            out += _encode_ring(ring, quantizer)
            point_total += len(ring)
        ring_total += len(rings)

    stats = ExportStats(
        features_in=len(polygons),
        features_out=len(kept),
        names=tuple(len(dictionary) for dictionary in dictionaries),
        rings=ring_total,
        ring_points=point_total,
    )
    return bytes(out), stats


def write_points_file(path: Path, points: list[PointFeature], quantizer: Quantizer) -> ExportStats:
    payload, stats = encode_points(points, quantizer)
    write_bytes(path, payload)
    return stats


def write_polygons_file(path: Path, polygons: list[PolygonFeature], quantizer: Quantizer) -> ExportStats:
    payload, stats = encode_polygons(polygons, quantizer)
    write_bytes(path, payload)
    return stats
