"""Minimal strict schema for the converter YAML config."""

from __future__ import annotations

from shpdat.common.constants import OVERFLOW_POLICIES
from shpdat.common.errors import ConfigError


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_number(value: object, ctx: str, *, positive: bool = False) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{ctx} must be a number")
    if positive and value <= 0:
        raise ConfigError(f"{ctx} must be positive")


def validate_converter_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    top_required = {"inputs", "output", "projection", "simplify", "quantize", "logging", "sources"}
    _assert_required_keys(cfg, top_required, "converter config")
    _assert_no_unknown_keys(cfg, top_required, "converter config", allow_unknown)

    inputs = cfg["inputs"]
    if not isinstance(inputs, list) or not inputs or not all(isinstance(name, str) and name for name in inputs):
        raise ConfigError("inputs must be a non-empty list of dataset base names")

    output_keys = {"points_filename", "polygons_filename", "summary_filename"}
    _assert_required_keys(cfg["output"], output_keys, "output")
    _assert_no_unknown_keys(cfg["output"], output_keys, "output", allow_unknown)

    projection_keys = {"epsg", "false_northing", "false_easting", "scale"}
    _assert_required_keys(cfg["projection"], projection_keys, "projection")
    _assert_no_unknown_keys(cfg["projection"], projection_keys, "projection", allow_unknown)
    _assert_number(cfg["projection"]["false_northing"], "projection.false_northing")
    _assert_number(cfg["projection"]["false_easting"], "projection.false_easting")
    _assert_number(cfg["projection"]["scale"], "projection.scale", positive=True)

    _assert_required_keys(cfg["simplify"], {"min_ring_points"}, "simplify")
    _assert_no_unknown_keys(cfg["simplify"], {"min_ring_points"}, "simplify", allow_unknown)
    _assert_number(cfg["simplify"]["min_ring_points"], "simplify.min_ring_points")

    _assert_required_keys(cfg["quantize"], {"overflow"}, "quantize")
    _assert_no_unknown_keys(cfg["quantize"], {"overflow"}, "quantize", allow_unknown)
    if cfg["quantize"]["overflow"] not in OVERFLOW_POLICIES:
        raise ConfigError(f"quantize.overflow must be one of: {', '.join(OVERFLOW_POLICIES)}")

    _assert_required_keys(cfg["logging"], {"level", "file"}, "logging")
    _assert_no_unknown_keys(cfg["logging"], {"level", "file"}, "logging", allow_unknown)

    if not isinstance(cfg["sources"], list):
        raise ConfigError("sources must be a list")
    for idx, source in enumerate(cfg["sources"]):
        _assert_required_keys(source, {"name", "url"}, f"sources[{idx}]")

    return cfg
