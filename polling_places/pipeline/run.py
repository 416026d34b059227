"""Aggregate stage: snapshot to deduplicated places."""

from __future__ import annotations

from pathlib import Path

from polling_places.common.constants import RAW_SNAPSHOT_PATH
from polling_places.common.errors import StageError
from polling_places.common.fs import read_json
from polling_places.pipeline.aggregate import aggregate
from polling_places.pipeline.export import write_aggregates_csv, write_geojson
from polling_places.pipeline.features import features_to_source_records
from polling_places.pipeline.reports import summarise


def load_snapshot(data_dir: Path) -> dict:
    path = data_dir / RAW_SNAPSHOT_PATH
    if not path.exists():
        raise StageError(f"Raw snapshot missing, run the fetch stage first: {path}")
    return read_json(path)["collection"]


def run_aggregate_stage(config: dict, data_dir: Path, run_id: str) -> dict:
    fields = config["fields"]
    collection = load_snapshot(data_dir)

    records = features_to_source_records(
        collection,
        fields,
        source_epsg=int(config["crs"]["source_epsg"]),
    )
    aggregates = aggregate(records, reject_missing_key=config["grouping"]["missing_key"] == "reject")

    out_dir = data_dir / "out"
    geojson_path = write_geojson(out_dir / config["output"]["geojson_filename"], aggregates, fields)
    csv_path = write_aggregates_csv(
        out_dir / config["output"]["csv_filename"],
        aggregates,
        fields.get("member_label", fields["member_fields"][-1]),
    )

    return {
        "run_id": run_id,
        "counts": summarise(len(records), aggregates),
        "outputs": [str(geojson_path), str(csv_path)],
    }
