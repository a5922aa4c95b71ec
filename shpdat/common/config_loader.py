"""Configuration loading and validation."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

from shpdat.common.errors import ConfigError
from shpdat.common.fs import read_yaml
from shpdat.common.schema import validate_converter_config

DEFAULT_CONFIG: dict[str, Any] = {
    "inputs": ["kohanimi", "asustusyksus"],
    "output": {
        "points_filename": "points.dat",
        "polygons_filename": "polygons.dat",
        "summary_filename": None,
    },
    # L-EST97 (EPSG:3301) false origin, 5 cm grid.
    "projection": {
        "epsg": 3301,
        "false_northing": 6375000,
        "false_easting": 500000,
        "scale": 20,
    },
    "simplify": {"min_ring_points": 20},
    "quantize": {"overflow": "error"},
    "logging": {"level": "INFO", "file": None},
    "sources": [],
}


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def load_config(config_path: Path | None = None, *, allow_unknown: bool = False) -> dict:
    base = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is None or not config_path.exists():
        return validate_converter_config(base, allow_unknown=allow_unknown)

    overlay = read_yaml(config_path)
    if overlay is None:
        return validate_converter_config(base, allow_unknown=allow_unknown)
    if not isinstance(overlay, dict):
        raise ConfigError(f"Config file must contain a mapping: {config_path}")
    return validate_converter_config(_deep_merge(base, overlay), allow_unknown=allow_unknown)
