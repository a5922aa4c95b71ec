"""Convert shapefile place names and settlement units into compact binary map data."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from shpdat.common.config_loader import load_config
from shpdat.common.constants import DEFAULT_CONFIG_PATH, EXIT_HARD_FAIL, EXIT_SUCCESS
from shpdat.common.errors import PipelineError
from shpdat.common.http import HttpClient
from shpdat.common.logging import build_logger, close_logger, log_event, log_failure
from shpdat.common.models import PointFeature, PolygonFeature
from shpdat.common.time_utils import elapsed_ms, generate_run_id
from shpdat.ingest.fetch import run_fetch
from shpdat.ingest.shapefile import read_shapefile
from shpdat.pipeline.export import write_points_file, write_polygons_file
from shpdat.pipeline.inspect import run_inspect
from shpdat.pipeline.quantize import Quantizer
from shpdat.pipeline.reports import write_run_summary
from shpdat.pipeline.rings import SimplifySettings, process_polygons


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "tolerance",
        nargs="?",
        type=int,
        default=None,
        help="simplification tolerance in 1/20 projection units; omit or negative to disable",
    )
    return parser.parse_args(argv)


def _build_run_logger(run_id: str, cfg: dict, work_dir: Path) -> logging.Logger:
    log_file = cfg["logging"]["file"]
    log_path = work_dir / log_file if log_file else None
    return build_logger(run_id, level=cfg["logging"]["level"], log_path=log_path)


def read_inputs(
    cfg: dict, work_dir: Path, logger: logging.Logger, run_id: str
) -> tuple[list[PointFeature], list[PolygonFeature], dict[str, dict]]:
    points: list[PointFeature] = []
    polygons: list[PolygonFeature] = []
    datasets: dict[str, dict] = {}
    for name in cfg["inputs"]:
        started = time.monotonic()
        dataset = read_shapefile(work_dir / name)
        points.extend(dataset.points)
        polygons.extend(dataset.polygons)
        kept = len(dataset.points) + len(dataset.polygons)
        datasets[name] = {"shape_type": dataset.shape_type, "records": dataset.record_count, "features": kept}
        log_event(
            logger,
            f"read {name}",
            run_id=run_id,
            stage="read",
            dataset=name,
            event="DATASET_READ",
            status="ok",
            duration_ms=elapsed_ms(started),
            rows_in=dataset.record_count,
            rows_out=kept,
        )
    return points, polygons, datasets


def run_convert(
    tolerance: int | None,
    cfg: dict,
    work_dir: Path,
    logger: logging.Logger,
    run_id: str,
) -> dict:
    quantizer = Quantizer.from_config(cfg)
    settings = SimplifySettings.from_config(tolerance, cfg)

    points, polygons, datasets = read_inputs(cfg, work_dir, logger, run_id)

    started = time.monotonic()
    ring_points_in = sum(len(ring) for polygon in polygons for ring in polygon.rings)
    processed = process_polygons(polygons, settings)
    ring_points_out = sum(len(ring) for polygon in processed for ring in polygon.rings)
    log_event(
        logger,
        "rings simplified" if settings.enabled else "rings normalised",
        run_id=run_id,
        stage="rings",
        event="RINGS_PROCESSED",
        status="ok",
        duration_ms=elapsed_ms(started),
        rows_in=ring_points_in,
        rows_out=ring_points_out,
    )

    output = cfg["output"]
    started = time.monotonic()
    point_stats = write_points_file(work_dir / output["points_filename"], points, quantizer)
    log_event(
        logger,
        f"exported {output['points_filename']}",
        run_id=run_id,
        stage="export",
        event="POINTS_EXPORTED",
        status="ok",
        duration_ms=elapsed_ms(started),
        rows_in=point_stats.features_in,
        rows_out=point_stats.features_out,
    )

    started = time.monotonic()
    polygon_stats = write_polygons_file(work_dir / output["polygons_filename"], processed, quantizer)
    log_event(
        logger,
        f"exported {output['polygons_filename']}",
        run_id=run_id,
        stage="export",
        event="POLYGONS_EXPORTED",
        status="ok",
        duration_ms=elapsed_ms(started),
        rows_in=polygon_stats.features_in,
        rows_out=polygon_stats.features_out,
    )

    if output["summary_filename"]:
        write_run_summary(
            work_dir / output["summary_filename"],
            run_id=run_id,
            tolerance=tolerance,
            datasets=datasets,
            ring_points_in=ring_points_in,
            points=point_stats,
            polygons=polygon_stats,
        )

    return {"datasets": datasets, "points": point_stats, "polygons": polygon_stats}


def run_command(args: argparse.Namespace, work_dir: Path | None = None) -> int:
    work_dir = work_dir or Path.cwd()
    run_id = generate_run_id()
    logger = build_logger(run_id)
    try:
        cfg = load_config(work_dir / DEFAULT_CONFIG_PATH)
        close_logger(logger)
        logger = _build_run_logger(run_id, cfg, work_dir)
        run_convert(args.tolerance, cfg, work_dir, logger, run_id)
    except PipelineError as exc:
        log_failure(logger, str(exc), run_id=run_id, event="RUN_FAIL", status="error", error_code=exc.error_code)
        return EXIT_HARD_FAIL
    except OSError as exc:
        log_failure(logger, str(exc), run_id=run_id, event="RUN_FAIL", status="error", error_code="IO_ERROR")
        return EXIT_HARD_FAIL
    finally:
        close_logger(logger)
    return EXIT_SUCCESS


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    return run_command(args)


def parse_fetch_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Download and unpack configured source archives.")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)
    parser.add_argument("--data-dir", default=".")
    return parser.parse_args(argv)


def fetch_main(argv: list[str] | None = None) -> int:
    args = parse_fetch_args(sys.argv[1:] if argv is None else argv)
    run_id = generate_run_id()
    logger = build_logger(run_id)
    try:
        cfg = load_config(Path(args.config))
        with HttpClient() as client:
            for result in run_fetch(cfg, Path(args.data_dir), client):
                log_event(
                    logger,
                    f"fetched {result['name']}",
                    run_id=run_id,
                    stage="fetch",
                    dataset=result["name"],
                    event="SOURCE_FETCHED",
                    status="ok",
                    rows_out=len(result["extracted"]),
                )
    except PipelineError as exc:
        log_failure(logger, str(exc), run_id=run_id, stage="fetch", event="RUN_FAIL", status="error", error_code=exc.error_code)
        return EXIT_HARD_FAIL
    finally:
        close_logger(logger)
    return EXIT_SUCCESS


def parse_inspect_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Summarise exported points and polygons files.")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH)
    parser.add_argument("--points", default=None)
    parser.add_argument("--polygons", default=None)
    parser.add_argument("--out", default=None)
    return parser.parse_args(argv)


def inspect_main(argv: list[str] | None = None) -> int:
    args = parse_inspect_args(sys.argv[1:] if argv is None else argv)
    run_id = generate_run_id()
    logger = build_logger(run_id)
    try:
        cfg = load_config(Path(args.config))
        points_path = Path(args.points or cfg["output"]["points_filename"])
        polygons_path = Path(args.polygons or cfg["output"]["polygons_filename"])
        summary = run_inspect(cfg, points_path, polygons_path, Path(args.out) if args.out else None)
        log_event(
            logger,
            "inspected outputs",
            run_id=run_id,
            stage="inspect",
            event="OUTPUTS_INSPECTED",
            status="ok",
            rows_out=summary["points"]["point_count"] + summary["polygons"]["polygon_count"],
        )
    except PipelineError as exc:
        log_failure(logger, str(exc), run_id=run_id, stage="inspect", event="RUN_FAIL", status="error", error_code=exc.error_code)
        return EXIT_HARD_FAIL
    finally:
        close_logger(logger)
    return EXIT_SUCCESS


if __name__ == "__main__":
    raise SystemExit(main())
