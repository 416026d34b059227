"""GeoJSON and CSV export of aggregated places."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterable, Mapping

from polling_places.common.fs import write_csv, write_json
from polling_places.common.models import AggregateRecord

AGGREGATE_HEADERS = [
    "group_key",
    "display_name",
    "lon",
    "lat",
    "member_count",
    "members",
]


def member_label(members: Iterable[Mapping[str, Any]], field: str = "precinct") -> str:
    return ", ".join("" if m.get(field) is None else str(m.get(field)) for m in members)


def aggregate_to_feature(aggregate: AggregateRecord, fields: Mapping[str, Any]) -> dict:
    properties: dict[str, Any] = {
        fields["display_name"]: aggregate.display_name,
        fields["group_key"]: aggregate.group_key,
    }
    for key, value in aggregate.attributes.items():
        properties.setdefault(key, value)
    properties["coords"] = [list(c) for c in aggregate.raw_coordinates]
    properties["precincts"] = [dict(m) for m in aggregate.members]
    return {
        "type": "Feature",
        "properties": properties,
        "geometry": {"type": "Point", "coordinates": list(aggregate.centroid)},
    }


def to_feature_collection(aggregates: Iterable[AggregateRecord], fields: Mapping[str, Any]) -> dict:
    return {
        "type": "FeatureCollection",
        "features": [aggregate_to_feature(a, fields) for a in aggregates],
    }


def _serialize_row(aggregate: AggregateRecord, label_field: str) -> dict:
    lon, lat = aggregate.centroid
    return {
        "group_key": aggregate.group_key or "",
        "display_name": aggregate.display_name or "",
        "lon": lon,
        "lat": lat,
        "member_count": aggregate.member_count,
        "members": member_label(aggregate.members, label_field),
    }


def write_geojson(path: Path, aggregates: list[AggregateRecord], fields: Mapping[str, Any]) -> Path:
    # Feature order carries meaning; only property keys are sorted.
    write_json(path, to_feature_collection(aggregates, fields))
    return path


def write_aggregates_csv(path: Path, aggregates: list[AggregateRecord], label_field: str = "precinct") -> Path:
    write_csv(path, AGGREGATE_HEADERS, (_serialize_row(a, label_field) for a in aggregates))
    return path
