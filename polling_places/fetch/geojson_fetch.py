"""Fetch the raw polling places feed and store a snapshot."""

from __future__ import annotations

from pathlib import Path

from polling_places.common.constants import RAW_SNAPSHOT_PATH
from polling_places.common.errors import StageError
from polling_places.common.fs import read_json, write_json
from polling_places.common.http import HttpClient, RetryConfig, TimeoutConfig


def _client_for(source: dict) -> HttpClient:
    return HttpClient(
        timeout=TimeoutConfig(
            connect=float(source.get("connect_timeout", 20)),
            read=float(source.get("read_timeout", 120)),
        ),
        retry=RetryConfig(max_attempts=int(source.get("max_attempts", 5))),
    )


def _read_local(path: Path) -> dict:
    if not path.exists():
        raise StageError(f"Input GeoJSON not found: {path}")
    try:
        return read_json(path)
    except ValueError as exc:
        raise StageError(f"Input GeoJSON is not valid JSON: {path}") from exc


def run_fetch(
    config: dict,
    data_dir: Path,
    run_id: str,
    run_date: str,
    http_client: HttpClient | None = None,
) -> dict:
    source = config["source"]

    if source.get("path"):
        origin = str(source["path"])
        collection = _read_local(Path(origin))
    else:
        origin = source["url"]
        owns_client = http_client is None
        client = http_client or _client_for(source)
        try:
            collection = client.get_json(origin, params=source.get("params") or None)
        finally:
            if owns_client:
                client.close()

    if not isinstance(collection, dict) or not isinstance(collection.get("features"), list):
        raise StageError(f"Payload from {origin} is not a GeoJSON FeatureCollection")

    payload = {
        "run_id": run_id,
        "extract_date": run_date,
        "origin": origin,
        "feature_count": len(collection["features"]),
        "collection": collection,
    }
    write_json(data_dir / RAW_SNAPSHOT_PATH, payload, sort_keys=False)
    return payload
