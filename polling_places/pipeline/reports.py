"""Run report aggregation."""

from __future__ import annotations

from pathlib import Path

from polling_places.common.fs import write_json
from polling_places.common.models import AggregateRecord


def summarise(source_count: int, aggregates: list[AggregateRecord]) -> dict:
    member_counts = [a.member_count for a in aggregates]
    return {
        "source_records": source_count,
        "aggregates": len(aggregates),
        "merged_aggregates": sum(1 for n in member_counts if n > 1),
        "max_members": max(member_counts, default=0),
        "missing_key_records": sum(a.member_count for a in aggregates if a.group_key is None),
    }


def write_run_summary(data_dir: Path, *, run_id: str, run_date: str, counts: dict | None) -> Path:
    status = "success"
    if counts is None:
        status = "error"
    elif counts["aggregates"] == 0:
        status = "empty"

    summary_path = data_dir / "out" / "reports" / "run_summary.json"
    payload = {
        "run_id": run_id,
        "run_date": run_date,
        "status": status,
        "counts": counts or {},
    }
    write_json(summary_path, payload)
    return summary_path
