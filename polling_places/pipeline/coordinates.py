"""Coordinate validation, centroid computation and CRS transformation."""

from __future__ import annotations

import math
from functools import lru_cache
from numbers import Real
from typing import Any, Sequence

from pyproj import CRS, Transformer

from polling_places.common.constants import WGS84_EPSG
from polling_places.common.errors import MalformedRecord
from polling_places.common.models import Coordinate


def _as_finite_float(value: Any) -> float | None:
    # bool is a Real subclass but never a valid ordinate.
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    result = float(value)
    if not math.isfinite(result):
        return None
    return result


def validate_coordinate(value: Any, *, index: int | None = None) -> Coordinate:
    if value is None:
        raise MalformedRecord("coordinate is missing", index=index)
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise MalformedRecord(f"coordinate is not a pair: {value!r}", index=index)
    if len(value) != 2:
        raise MalformedRecord(f"coordinate must have 2 elements, got {len(value)}", index=index)

    x = _as_finite_float(value[0])
    y = _as_finite_float(value[1])
    if x is None or y is None:
        raise MalformedRecord(f"coordinate is not a finite numeric pair: {value!r}", index=index)
    return x, y


def centroid(coordinates: Sequence[Coordinate]) -> Coordinate:
    """Element-wise arithmetic mean over the complete coordinate history."""
    if not coordinates:
        raise ValueError("centroid of an empty coordinate list is undefined")
    if len(coordinates) == 1:
        x, y = coordinates[0]
        return x, y
    count = len(coordinates)
    return (
        math.fsum(c[0] for c in coordinates) / count,
        math.fsum(c[1] for c in coordinates) / count,
    )


@lru_cache(maxsize=16)
def wgs84_transformer(source_epsg: int) -> Transformer:
    return Transformer.from_crs(CRS.from_epsg(source_epsg), CRS.from_epsg(WGS84_EPSG), always_xy=True)


def to_wgs84(coordinate: Coordinate, source_epsg: int) -> Coordinate:
    """Transform an ``(x, y)`` pair from ``source_epsg`` to ``(lon, lat)``."""
    if source_epsg == WGS84_EPSG:
        return coordinate
    transformer = wgs84_transformer(source_epsg)
    lon, lat = transformer.transform(coordinate[0], coordinate[1])
    return float(lon), float(lat)
