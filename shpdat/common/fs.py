"""Filesystem helpers."""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from shpdat.common.errors import ConfigError


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc


def write_json(path: Path, payload) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True)
        f.write("\n")


def write_bytes(path: Path, payload: bytes) -> None:
    """Write an already encoded payload in a single call."""
    ensure_dir(path.parent)
    with path.open("wb") as f:
        f.write(payload)
