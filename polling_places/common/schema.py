"""Minimal strict schema for YAML config validation."""

from __future__ import annotations

from polling_places.common.constants import MISSING_KEY_POLICIES
from polling_places.common.errors import ConfigError


def _assert_mapping(obj: object, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _validate_source(source: dict) -> None:
    _assert_required_keys(source, {"url"}, "source")
    if not source.get("url") and not source.get("path"):
        raise ConfigError("source needs a url or a path")
    for key in ("connect_timeout", "read_timeout"):
        if key in source and float(source[key]) <= 0:
            raise ConfigError(f"source.{key} must be positive")
    if "max_attempts" in source and int(source["max_attempts"]) < 1:
        raise ConfigError("source.max_attempts must be at least 1")


def _validate_fields(fields: dict) -> None:
    _assert_required_keys(fields, {"group_key", "display_name", "member_fields"}, "fields")
    if not isinstance(fields["member_fields"], list) or not fields["member_fields"]:
        raise ConfigError("fields.member_fields must be a non-empty list")
    attributes = fields.get("attributes")
    if attributes is not None and not isinstance(attributes, list):
        raise ConfigError("fields.attributes must be a list or null")
    label = fields.get("member_label", fields["member_fields"][-1])
    if label not in fields["member_fields"]:
        raise ConfigError(f"fields.member_label must be one of fields.member_fields: {label}")


def validate_config(cfg: object, *, allow_unknown: bool = False) -> dict:
    cfg = _assert_mapping(cfg, "config")
    top_required = {"source", "crs", "fields", "grouping", "output"}
    _assert_required_keys(cfg, top_required, "config")
    _assert_no_unknown_keys(cfg, top_required, "config", allow_unknown)

    for block in top_required:
        _assert_mapping(cfg[block], block)

    _validate_source(cfg["source"])
    _assert_no_unknown_keys(
        cfg["source"],
        {"url", "params", "path", "connect_timeout", "read_timeout", "max_attempts"},
        "source",
        allow_unknown,
    )

    _assert_required_keys(cfg["crs"], {"source_epsg"}, "crs")
    try:
        int(cfg["crs"]["source_epsg"])
    except (TypeError, ValueError) as exc:
        raise ConfigError("crs.source_epsg must be an integer EPSG code") from exc

    _validate_fields(cfg["fields"])
    _assert_no_unknown_keys(
        cfg["fields"],
        {"group_key", "display_name", "member_fields", "member_label", "attributes"},
        "fields",
        allow_unknown,
    )

    _assert_required_keys(cfg["grouping"], {"missing_key"}, "grouping")
    if cfg["grouping"]["missing_key"] not in MISSING_KEY_POLICIES:
        allowed = ", ".join(MISSING_KEY_POLICIES)
        raise ConfigError(f"grouping.missing_key must be one of: {allowed}")

    _assert_required_keys(cfg["output"], {"geojson_filename", "csv_filename"}, "output")

    return cfg
