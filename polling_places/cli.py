"""CLI entrypoint for the polling places aggregation pipeline."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from polling_places.common.config_loader import load_config, with_input_path
from polling_places.common.constants import EXIT_HARD_FAIL, EXIT_PARTIAL, EXIT_SUCCESS, STAGES
from polling_places.common.errors import ContractError, PipelineError
from polling_places.common.logging import build_logger, close_logger, log_event
from polling_places.common.time_utils import generate_run_id, parse_run_date
from polling_places.fetch.geojson_fetch import run_fetch
from polling_places.pipeline.reports import write_run_summary
from polling_places.pipeline.run import run_aggregate_stage


def parse_args(argv: list[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("command", choices=[*STAGES, "all"])
    parser.add_argument("--run-date", default=None)
    parser.add_argument("--run-id", default=None)
    parser.add_argument("--config-dir", default="./config")
    parser.add_argument("--overlay-config-dir", default=None)
    parser.add_argument("--data-dir", default="./data")
    parser.add_argument("--input", default=None, help="Local GeoJSON file used instead of the configured URL")
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARN", "ERROR"])
    parser.add_argument("--strict", action="store_true")
    return parser.parse_args(argv)


def execute_stage(stage: str, cfg: dict, data_dir: Path, run_id: str, run_date: str) -> dict:
    if stage == "fetch":
        payload = run_fetch(cfg, data_dir, run_id, run_date)
        return {"rows_out": payload["feature_count"]}
    if stage == "aggregate":
        result = run_aggregate_stage(cfg, data_dir, run_id)
        counts = result["counts"]
        return {"rows_in": counts["source_records"], "rows_out": counts["aggregates"], "counts": counts}
    raise ValueError(f"Unknown stage: {stage}")


def run_command(args: argparse.Namespace) -> int:
    run_id = args.run_id or generate_run_id()
    run_date = parse_run_date(args.run_date)
    config_dir = Path(args.config_dir)
    overlay_config_dir = Path(args.overlay_config_dir) if args.overlay_config_dir else None
    data_dir = Path(args.data_dir)

    logger = build_logger(run_id, data_dir=data_dir, level=args.log_level)
    try:
        cfg = with_input_path(load_config(config_dir, overlay_config_dir=overlay_config_dir), args.input)
        stages = STAGES if args.command == "all" else (args.command,)

        counts = None
        for stage in stages:
            log_event(logger, "stage start", run_id=run_id, stage=stage, event="STAGE_START", status="ok")
            started = time.monotonic()
            try:
                outcome = execute_stage(stage, cfg, data_dir, run_id, run_date)
            except ContractError as exc:
                log_event(
                    logger,
                    f"stage {stage} rejected input: {exc}",
                    run_id=run_id,
                    stage=stage,
                    event="STAGE_FAIL",
                    status="error",
                    error_code=exc.error_code,
                )
                write_run_summary(data_dir, run_id=run_id, run_date=run_date, counts=None)
                return EXIT_HARD_FAIL
            except PipelineError as exc:
                log_event(
                    logger,
                    f"stage {stage} failed: {exc}",
                    run_id=run_id,
                    stage=stage,
                    event="STAGE_FAIL",
                    status="error",
                    error_code=exc.error_code,
                )
                write_run_summary(data_dir, run_id=run_id, run_date=run_date, counts=None)
                return EXIT_HARD_FAIL if args.strict else EXIT_PARTIAL
            except Exception as exc:
                log_event(
                    logger,
                    f"unexpected failure in stage {stage}: {exc!r}",
                    run_id=run_id,
                    stage=stage,
                    event="STAGE_FAIL",
                    status="error",
                    error_code="UNEXPECTED_ERROR",
                )
                write_run_summary(data_dir, run_id=run_id, run_date=run_date, counts=None)
                return EXIT_HARD_FAIL if args.strict else EXIT_PARTIAL

            counts = outcome.get("counts", counts)
            log_event(
                logger,
                "stage end",
                run_id=run_id,
                stage=stage,
                event="STAGE_END",
                status="ok",
                duration_ms=int((time.monotonic() - started) * 1000),
                rows_in=outcome.get("rows_in"),
                rows_out=outcome.get("rows_out"),
            )

        if counts is not None:
            write_run_summary(data_dir, run_id=run_id, run_date=run_date, counts=counts)
        return EXIT_SUCCESS
    except PipelineError as exc:
        log_event(logger, f"run failed: {exc}", run_id=run_id, event="RUN_FAIL", status="error", error_code=exc.error_code)
        return EXIT_HARD_FAIL
    finally:
        close_logger(logger)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        return run_command(args)
    except Exception:
        return EXIT_HARD_FAIL


if __name__ == "__main__":
    raise SystemExit(main())
