"""Configuration loading and validation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from polling_places.common.errors import ConfigError
from polling_places.common.fs import read_yaml
from polling_places.common.schema import validate_config

CONFIG_FILENAME = "polling_places.yml"


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> Any:
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must be a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_config(
    config_dir: Path,
    *,
    allow_unknown: bool = False,
    overlay_config_dir: Path | None = None,
) -> dict:
    overlay_path = overlay_config_dir / CONFIG_FILENAME if overlay_config_dir is not None else None
    cfg = _load_yaml_with_overlay(config_dir / CONFIG_FILENAME, overlay_path)
    return validate_config(cfg, allow_unknown=allow_unknown)


def with_input_path(cfg: dict, input_path: str | None) -> dict:
    """Return ``cfg`` reading from a local GeoJSON file when one is given."""
    if not input_path:
        return cfg
    return _deep_merge(cfg, {"source": {"path": input_path}})
