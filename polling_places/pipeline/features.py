"""Adapt GeoJSON point features into source records."""

from __future__ import annotations

from typing import Any, Mapping

from polling_places.common.constants import WGS84_EPSG
from polling_places.common.errors import MalformedRecord
from polling_places.common.models import SourceRecord
from polling_places.pipeline.coordinates import to_wgs84, validate_coordinate

DEFAULT_FIELDS = {
    "group_key": "street_address",
    "display_name": "placename",
    "member_fields": ["ward", "division", "precinct"],
    "attributes": None,
}


def _field_settings(fields: Mapping[str, Any] | None) -> dict[str, Any]:
    settings = dict(DEFAULT_FIELDS)
    if fields:
        settings.update(fields)
    return settings


def _group_key(value: Any) -> str | None:
    if value is None:
        return None
    return value if isinstance(value, str) else str(value)


def _coordinate(geometry: Any, source_epsg: int, index: int | None):
    if not isinstance(geometry, Mapping):
        raise MalformedRecord("feature has no geometry", index=index)
    coordinates = geometry.get("coordinates")
    if source_epsg == WGS84_EPSG:
        # The aggregator validates the pair and reports the record index.
        return tuple(coordinates) if isinstance(coordinates, list) else coordinates
    return to_wgs84(validate_coordinate(coordinates, index=index), source_epsg)


def feature_to_source_record(
    feature: Mapping[str, Any],
    fields: Mapping[str, Any] | None = None,
    *,
    source_epsg: int = WGS84_EPSG,
    index: int | None = None,
) -> SourceRecord:
    if not isinstance(feature, Mapping):
        raise MalformedRecord(f"feature is not a mapping: {type(feature).__name__}", index=index)
    settings = _field_settings(fields)
    properties = feature.get("properties")
    if properties is None:
        properties = {}
    elif not isinstance(properties, Mapping):
        raise MalformedRecord(f"feature properties are not a mapping: {type(properties).__name__}", index=index)

    key_field = settings["group_key"]
    name_field = settings["display_name"]
    member_fields = list(settings["member_fields"])

    member_info = {name: properties.get(name) for name in member_fields}

    attribute_fields = settings.get("attributes")
    if attribute_fields is None:
        skipped = {key_field, name_field, *member_fields}
        attributes = {k: v for k, v in properties.items() if k not in skipped}
    else:
        attributes = {name: properties.get(name) for name in attribute_fields}

    return SourceRecord(
        group_key=_group_key(properties.get(key_field)),
        coordinate=_coordinate(feature.get("geometry"), source_epsg, index),
        display_name=properties.get(name_field),
        attributes=attributes,
        member_info=member_info,
    )


def features_to_source_records(
    collection: Mapping[str, Any],
    fields: Mapping[str, Any] | None = None,
    *,
    source_epsg: int = WGS84_EPSG,
) -> list[SourceRecord]:
    features = collection.get("features") if isinstance(collection, Mapping) else None
    if not isinstance(features, list):
        raise MalformedRecord("payload is not a GeoJSON FeatureCollection")
    return [
        feature_to_source_record(feature, fields, source_epsg=source_epsg, index=idx)
        for idx, feature in enumerate(features)
    ]
