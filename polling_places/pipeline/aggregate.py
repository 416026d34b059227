"""Merge source records that share a group key into aggregate locations."""

from __future__ import annotations

from typing import Iterable, Mapping

from polling_places.common.errors import MalformedRecord
from polling_places.common.models import AggregateRecord, Coordinate, SourceRecord
from polling_places.pipeline.coordinates import centroid, validate_coordinate


class _Group:
    __slots__ = ("first", "members", "coordinates", "centroid")

    def __init__(self, first: SourceRecord, coordinate: Coordinate) -> None:
        self.first = first
        self.members: list[dict] = [dict(first.member_info)]
        self.coordinates: list[Coordinate] = [coordinate]
        self.centroid: Coordinate = coordinate

    def add(self, record: SourceRecord, coordinate: Coordinate) -> None:
        self.members.append(dict(record.member_info))
        self.coordinates.append(coordinate)
        self.centroid = centroid(self.coordinates)

    def freeze(self) -> AggregateRecord:
        return AggregateRecord(
            group_key=self.first.group_key,
            display_name=self.first.display_name,
            attributes=dict(self.first.attributes or {}),
            centroid=self.centroid,
            members=tuple(self.members),
            raw_coordinates=tuple(self.coordinates),
        )


def _check_record(record: SourceRecord, index: int, reject_missing_key: bool) -> Coordinate:
    key = record.group_key
    if key is None:
        if reject_missing_key:
            raise MalformedRecord("group key is missing", index=index)
    elif not isinstance(key, str):
        raise MalformedRecord(f"group key must be a string, got {type(key).__name__}", index=index)
    if record.member_info is None:
        raise MalformedRecord("member info is missing", index=index)
    if not isinstance(record.member_info, Mapping):
        raise MalformedRecord("member info must be a mapping", index=index)
    return validate_coordinate(record.coordinate, index=index)


def aggregate(records: Iterable[SourceRecord], *, reject_missing_key: bool = False) -> list[AggregateRecord]:
    """Group ``records`` by exact ``group_key`` equality.

    Aggregates come out in order of first appearance of their key and members
    keep input order. Records without a key share one group unless
    ``reject_missing_key`` is set. The first malformed record aborts the whole
    call with :class:`MalformedRecord`.
    """
    groups: dict[str | None, _Group] = {}

    for index, record in enumerate(records):
        coordinate = _check_record(record, index, reject_missing_key)
        group = groups.get(record.group_key)
        if group is None:
            groups[record.group_key] = _Group(record, coordinate)
        else:
            group.add(record, coordinate)

    return [group.freeze() for group in groups.values()]


def expand_aggregate(aggregate_record: AggregateRecord) -> list[SourceRecord]:
    """Flatten an aggregate back into one source record per member."""
    return [
        SourceRecord(
            group_key=aggregate_record.group_key,
            coordinate=coordinate,
            display_name=aggregate_record.display_name,
            attributes=dict(aggregate_record.attributes),
            member_info=dict(member),
        )
        for member, coordinate in zip(aggregate_record.members, aggregate_record.raw_coordinates)
    ]
