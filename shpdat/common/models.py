"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class XY:
    northing: float
    easting: float


@dataclass(frozen=True)
class DbfField:
    name: bytes
    offset: int
    length: int


@dataclass(frozen=True)
class PointFeature:
    xy: XY
    name: bytes


@dataclass
class PolygonFeature:
    rings: list[list[XY]]
    type_code: int = 0
    names: tuple[bytes, bytes, bytes] = (b"", b"", b"")

    def is_empty(self) -> bool:
        return not any(self.rings)


@dataclass
class ShapeDataset:
    name: str
    shape_type: int
    record_count: int
    points: list[PointFeature] = field(default_factory=list)
    polygons: list[PolygonFeature] = field(default_factory=list)
