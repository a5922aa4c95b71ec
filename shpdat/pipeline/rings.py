"""Polygon ring normalisation and Douglas-Peucker simplification."""

from __future__ import annotations

from dataclasses import dataclass

from shapely.geometry import LinearRing, LineString

from shpdat.common.models import XY, PolygonFeature

MIN_RING_COORDINATES = 4


@dataclass(frozen=True)
class SimplifySettings:
    tolerance: float | None = None
    min_ring_points: int = 20

    @classmethod
    def from_config(cls, tolerance_units: int | None, cfg: dict) -> "SimplifySettings":
        """Convert a tolerance given in quantized units to projection units.

        ``None`` or a negative value disables simplification.
        """
        min_points = int(cfg["simplify"]["min_ring_points"])
        if tolerance_units is None or tolerance_units < 0:
            return cls(tolerance=None, min_ring_points=min_points)
        return cls(tolerance=tolerance_units / cfg["projection"]["scale"], min_ring_points=min_points)

    @property
    def enabled(self) -> bool:
        return self.tolerance is not None


def _to_planar(ring: list[XY]) -> list[tuple[float, float]]:
    return [(xy.easting, xy.northing) for xy in ring]


def _from_planar(coords) -> list[XY]:
    return [XY(northing=y, easting=x) for x, y in coords]


def normalize_ring(ring: list[XY]) -> list[XY]:
    """Close the ring and wind it clockwise in (easting, northing) space.

    Rings with fewer than three distinct points have no winding and are
    only closed.
    """
    if len(set(ring)) < 3:
        if ring and ring[0] != ring[-1]:
            return ring + [ring[0]]
        return list(ring)
    linear = LinearRing(_to_planar(ring))
    coords = list(linear.coords)
    if linear.is_ccw:
        coords.reverse()
    return _from_planar(coords)


def simplify_ring(ring: list[XY], tolerance: float) -> list[XY]:
    # A LineString keeps both endpoints, so the closing point survives.
    simplified = LineString(_to_planar(ring)).simplify(tolerance, preserve_topology=False)
    coords = list(simplified.coords)
    if len(coords) < MIN_RING_COORDINATES:
        return []
    return _from_planar(coords)


def process_ring(ring: list[XY], settings: SimplifySettings) -> list[XY]:
    normalized = normalize_ring(ring)
    if not settings.enabled or len(normalized) < settings.min_ring_points:
        return normalized
    return simplify_ring(normalized, settings.tolerance)


def process_polygon(polygon: PolygonFeature, settings: SimplifySettings) -> PolygonFeature:
    rings = [processed for processed in (process_ring(ring, settings) for ring in polygon.rings) if processed]
    return PolygonFeature(rings=rings, type_code=polygon.type_code, names=polygon.names)


def process_polygons(polygons: list[PolygonFeature], settings: SimplifySettings) -> list[PolygonFeature]:
    return [process_polygon(polygon, settings) for polygon in polygons]
