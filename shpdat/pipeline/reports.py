"""Run summary report."""

from __future__ import annotations

from pathlib import Path

from shpdat.common.fs import write_json
from shpdat.pipeline.export import ExportStats


def _stats_payload(stats: ExportStats) -> dict:
    return {
        "features_in": stats.features_in,
        "features_out": stats.features_out,
        "dropped": stats.features_in - stats.features_out,
        "dictionary_sizes": list(stats.names),
        "rings": stats.rings,
        "ring_points": stats.ring_points,
    }


def write_run_summary(
    path: Path,
    *,
    run_id: str,
    tolerance: int | None,
    datasets: dict[str, dict],
    ring_points_in: int,
    points: ExportStats,
    polygons: ExportStats,
) -> Path:
    payload = {
        "run_id": run_id,
        "tolerance": tolerance,
        "simplified": tolerance is not None and tolerance >= 0,
        "datasets": datasets,
        "ring_points_in": ring_points_in,
        "points": _stats_payload(points),
        "polygons": _stats_payload(polygons),
    }
    write_json(path, payload)
    return path
