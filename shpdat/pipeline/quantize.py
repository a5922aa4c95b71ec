"""Fixed-precision integer coordinates relative to the projection false origin."""

from __future__ import annotations

from dataclasses import dataclass

from shpdat.common.models import XY


@dataclass(frozen=True)
class Quantizer:
    false_northing: float
    false_easting: float
    scale: float = 20
    overflow: str = "error"

    @classmethod
    def from_config(cls, cfg: dict) -> "Quantizer":
        projection = cfg["projection"]
        return cls(
            false_northing=projection["false_northing"],
            false_easting=projection["false_easting"],
            scale=projection["scale"],
            overflow=cfg["quantize"]["overflow"],
        )

    def quantize_value(self, value: float, origin: float) -> int:
        return int(round((value - origin) * self.scale))

    def quantize(self, xy: XY) -> tuple[int, int]:
        return (
            self.quantize_value(xy.northing, self.false_northing),
            self.quantize_value(xy.easting, self.false_easting),
        )

    def dequantize(self, ix: int, iy: int) -> XY:
        return XY(
            northing=ix / self.scale + self.false_northing,
            easting=iy / self.scale + self.false_easting,
        )
