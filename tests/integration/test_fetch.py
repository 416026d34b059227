from __future__ import annotations

import json
from pathlib import Path

import pytest

from polling_places.common.errors import StageError
from polling_places.common.fs import read_json
from polling_places.common.http import HttpRequestError
from polling_places.fetch.geojson_fetch import run_fetch

FIXTURE = Path(__file__).resolve().parents[1] / "fixtures" / "polling_places_sample.geojson"


class FakeClient:
    def __init__(self, payload=None, error: Exception | None = None):
        self.payload = payload
        self.error = error
        self.calls: list[tuple[str, dict | None]] = []

    def get_json(self, url, *, params=None, headers=None, timeout=None):
        self.calls.append((url, params))
        if self.error is not None:
            raise self.error
        return self.payload


def _config(**source):
    cfg_source = {"url": "https://example.test/sql", "params": {"format": "geojson"}, "path": None}
    cfg_source.update(source)
    return {"source": cfg_source}


@pytest.mark.integration
def test_fetch_writes_snapshot_from_http(tmp_path: Path):
    collection = json.loads(FIXTURE.read_text(encoding="utf-8"))
    client = FakeClient(collection)

    payload = run_fetch(_config(), tmp_path, "run-1", "2026-10-18", http_client=client)

    assert client.calls == [("https://example.test/sql", {"format": "geojson"})]
    assert payload["feature_count"] == 4
    snapshot = read_json(tmp_path / "raw" / "polling_places.geojson")
    assert snapshot["collection"]["features"] == collection["features"]
    assert snapshot["origin"] == "https://example.test/sql"


@pytest.mark.integration
def test_fetch_reads_local_path_without_http(tmp_path: Path):
    client = FakeClient(error=AssertionError("no http expected"))
    payload = run_fetch(_config(path=str(FIXTURE)), tmp_path, "run-2", "2026-10-18", http_client=client)

    assert payload["feature_count"] == 4
    assert client.calls == []


@pytest.mark.integration
def test_fetch_rejects_non_feature_collection(tmp_path: Path):
    client = FakeClient({"rows": []})
    with pytest.raises(StageError):
        run_fetch(_config(), tmp_path, "run-3", "2026-10-18", http_client=client)
    assert not (tmp_path / "raw" / "polling_places.geojson").exists()


@pytest.mark.integration
def test_fetch_propagates_http_errors(tmp_path: Path):
    client = FakeClient(error=HttpRequestError("HTTP status: 404"))
    with pytest.raises(HttpRequestError):
        run_fetch(_config(), tmp_path, "run-4", "2026-10-18", http_client=client)


@pytest.mark.integration
def test_fetch_missing_local_file_raises(tmp_path: Path):
    with pytest.raises(StageError):
        run_fetch(_config(path=str(tmp_path / "nope.geojson")), tmp_path, "run-5", "2026-10-18")
