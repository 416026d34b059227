"""Data models used across the pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Mapping

Coordinate = tuple[float, float]


@dataclass(frozen=True)
class SourceRecord:
    """One raw point entry, e.g. a single precinct's polling assignment."""

    group_key: str | None
    coordinate: Coordinate
    display_name: str | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)
    member_info: Mapping[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "group_key": self.group_key,
            "coordinate": list(self.coordinate),
            "display_name": self.display_name,
            "attributes": dict(self.attributes),
            "member_info": dict(self.member_info),
        }


@dataclass(frozen=True)
class AggregateRecord:
    """One deduplicated location built from every record sharing a group key.

    ``display_name`` and ``attributes`` come from the first record seen for the
    key. ``members`` and ``raw_coordinates`` are parallel and in encounter
    order; ``centroid`` is the element-wise mean of ``raw_coordinates``.
    """

    group_key: str | None
    display_name: str | None
    attributes: dict[str, Any]
    centroid: Coordinate
    members: tuple[dict[str, Any], ...]
    raw_coordinates: tuple[Coordinate, ...]

    @property
    def member_count(self) -> int:
        return len(self.members)

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["centroid"] = list(self.centroid)
        out["members"] = [dict(m) for m in self.members]
        out["raw_coordinates"] = [list(c) for c in self.raw_coordinates]
        return out
