"""Summaries of exported files, with bounds transformed to WGS84."""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Iterable

from pyproj import CRS, Transformer

from shpdat.common.constants import POLYGON_TYPE_LABELS
from shpdat.common.errors import InputFileError
from shpdat.common.fs import write_json
from shpdat.pipeline.decode import decode_points, decode_polygons
from shpdat.pipeline.quantize import Quantizer


def _read_output(path: Path) -> bytes:
    try:
        return path.read_bytes()
    except OSError as exc:
        raise InputFileError(f"Cannot read exported file {path}: {exc}") from exc


def _bounds(pairs: Iterable[tuple[int, int]]) -> dict | None:
    pairs = list(pairs)
    if not pairs:
        return None
    xs = [ix for ix, _ in pairs]
    ys = [iy for _, iy in pairs]
    return {"min_ix": min(xs), "max_ix": max(xs), "min_iy": min(ys), "max_iy": max(ys)}


def _wgs84_bounds(bounds: dict | None, quantizer: Quantizer, epsg: int) -> dict | None:
    if bounds is None:
        return None
    transformer = Transformer.from_crs(CRS.from_epsg(epsg), CRS.from_epsg(4326), always_xy=True)
    south_west = quantizer.dequantize(bounds["min_ix"], bounds["min_iy"])
    north_east = quantizer.dequantize(bounds["max_ix"], bounds["max_iy"])
    min_lon, min_lat = transformer.transform(south_west.easting, south_west.northing)
    max_lon, max_lat = transformer.transform(north_east.easting, north_east.northing)
    return {
        "min_lat": round(min_lat, 7),
        "max_lat": round(max_lat, 7),
        "min_lon": round(min_lon, 7),
        "max_lon": round(max_lon, 7),
    }


def summarize_points(data: bytes, quantizer: Quantizer, epsg: int) -> dict:
    decoded = decode_points(data)
    bounds = _bounds((point.ix, point.iy) for point in decoded.points)
    return {
        "name_count": len(decoded.names),
        "point_count": len(decoded.points),
        "bounds_quantized": bounds,
        "bounds_wgs84": _wgs84_bounds(bounds, quantizer, epsg),
    }


def summarize_polygons(data: bytes, quantizer: Quantizer, epsg: int) -> dict:
    decoded = decode_polygons(data)
    bounds = _bounds(pair for polygon in decoded.polygons for ring in polygon.rings for pair in ring)
    types = Counter(POLYGON_TYPE_LABELS.get(polygon.type_code, str(polygon.type_code)) for polygon in decoded.polygons)
    return {
        "name_counts": [len(names) for names in decoded.names],
        "polygon_count": len(decoded.polygons),
        "ring_count": sum(len(polygon.rings) for polygon in decoded.polygons),
        "ring_point_count": sum(len(ring) for polygon in decoded.polygons for ring in polygon.rings),
        "types": dict(sorted(types.items())),
        "bounds_quantized": bounds,
        "bounds_wgs84": _wgs84_bounds(bounds, quantizer, epsg),
    }


def run_inspect(cfg: dict, points_path: Path, polygons_path: Path, out_path: Path | None = None) -> dict:
    quantizer = Quantizer.from_config(cfg)
    epsg = int(cfg["projection"]["epsg"])
    payload = {
        "points": summarize_points(_read_output(points_path), quantizer, epsg),
        "polygons": summarize_polygons(_read_output(polygons_path), quantizer, epsg),
    }
    if out_path is not None:
        write_json(out_path, payload)
    return payload
