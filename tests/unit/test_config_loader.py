from pathlib import Path

import pytest

from shpdat.common.config_loader import DEFAULT_CONFIG, load_config
from shpdat.common.errors import ConfigError


def test_load_config_from_repo_config_dir():
    cfg = load_config(Path("config/converter.yml"))
    assert cfg["inputs"] == ["kohanimi", "asustusyksus"]
    assert cfg["projection"]["false_northing"] == 6375000
    assert cfg["output"]["points_filename"] == "points.dat"


def test_missing_config_file_uses_defaults(tmp_path: Path):
    assert load_config(tmp_path / "absent.yml") == DEFAULT_CONFIG
    assert load_config(None) == DEFAULT_CONFIG


def test_config_overlays_defaults(tmp_path: Path):
    path = tmp_path / "converter.yml"
    path.write_text(
        """inputs: [places]
simplify:
  min_ring_points: 10
quantize:
  overflow: wrap
""",
        encoding="utf-8",
    )

    cfg = load_config(path)

    assert cfg["inputs"] == ["places"]
    assert cfg["simplify"]["min_ring_points"] == 10
    assert cfg["quantize"]["overflow"] == "wrap"
    assert cfg["projection"]["scale"] == 20


def test_empty_config_file_uses_defaults(tmp_path: Path):
    path = tmp_path / "converter.yml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == DEFAULT_CONFIG


def test_defaults_are_not_mutated_by_overlay(tmp_path: Path):
    path = tmp_path / "converter.yml"
    path.write_text("output:\n  summary_filename: summary.json\n", encoding="utf-8")
    load_config(path)
    assert DEFAULT_CONFIG["output"]["summary_filename"] is None


@pytest.mark.parametrize(
    "body, message",
    [
        ("[1, 2]\n", "mapping"),
        ("inputs: [unclosed\n", "Invalid YAML"),
        ("unknown: 1\n", "Unknown keys"),
        ("quantize:\n  overflow: clamp\n", "quantize.overflow"),
        ("projection:\n  scale: 0\n", "positive"),
        ("inputs: []\n", "inputs"),
        ("sources:\n  - name: only-name\n", "sources\\[0\\]"),
    ],
)
def test_invalid_config_raises(tmp_path: Path, body: str, message: str):
    path = tmp_path / "converter.yml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_config(path)
