from pathlib import Path

import pytest

from shpdat.cli import parse_args, run_command

POINT_FIELDS = [("TextString", 40), ("KIRJELDUS", 30)]


def _run_once(work_dir: Path, shapefile_triad, tolerance: str) -> tuple[bytes, bytes]:
    shapefile_triad(
        work_dir / "kohanimi",
        1,
        [(6450000.0, 600000.0), (6589000.0, 542000.0)],
        POINT_FIELDS,
        [[b"Otep\xe4\xe4", b"Maa\xfcksuse nimi"], [b"Tallinn", b"Maa\xfcksuse nimi"]],
    )
    shapefile_triad(
        work_dir / "asustusyksus",
        5,
        [[[(6450000.0, 600000.0), (6450050.0, 600000.0), (6450050.0, 600050.0), (6450000.0, 600050.0)]]],
        [("TYYP", 2), ("MNIMI", 30), ("ONIMI", 30), ("ANIMI", 40)],
        [[b"7", b"Valga maakond", b"Otep\xe4\xe4 vald", b"Otep\xe4\xe4 linn"]],
    )
    assert run_command(parse_args([tolerance]), work_dir=work_dir) == 0
    return (work_dir / "points.dat").read_bytes(), (work_dir / "polygons.dat").read_bytes()


@pytest.mark.regression
def test_outputs_are_byte_stable_for_same_inputs(tmp_path: Path, shapefile_triad):
    first = _run_once(tmp_path / "first", shapefile_triad, "-1")
    second = _run_once(tmp_path / "second", shapefile_triad, "-1")

    assert first == second


@pytest.mark.regression
def test_points_file_snapshot(tmp_path: Path, shapefile_triad):
    points, _polygons = _run_once(tmp_path, shapefile_triad, "-1")

    assert points == (
        b"\x02\x00"
        + b"\x00\x06Otep\xe4\xe4"
        + b"\x00\x07Tallinn"
        + b"\x02\x00\x00\x00"
        + (1500000).to_bytes(3, "little", signed=True)
        + (2000000).to_bytes(3, "little", signed=True)
        + b"\x00\x00"
        + (4280000).to_bytes(3, "little", signed=True)
        + (840000).to_bytes(3, "little", signed=True)
        + b"\x01\x00"
    )


@pytest.mark.regression
def test_small_ring_is_identical_with_and_without_tolerance(tmp_path: Path, shapefile_triad):
    _points, plain = _run_once(tmp_path / "plain", shapefile_triad, "-1")
    _points, simplified = _run_once(tmp_path / "simplified", shapefile_triad, "100000")

    assert plain == simplified
