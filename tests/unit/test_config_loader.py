from pathlib import Path

import pytest

from polling_places.common.config_loader import load_config, with_input_path
from polling_places.common.errors import ConfigError

REPO_CONFIG_DIR = Path(__file__).resolve().parents[2] / "config"

MINIMAL = """source:
  url: "https://example.test/polling_places"
crs:
  source_epsg: 4326
fields:
  group_key: street_address
  display_name: placename
  member_fields: [ward, division, precinct]
  attributes: null
grouping:
  missing_key: group
output:
  geojson_filename: places.geojson
  csv_filename: places.csv
"""


def test_load_config_from_repo_config_dir():
    cfg = load_config(REPO_CONFIG_DIR)
    assert cfg["fields"]["group_key"] == "street_address"
    assert cfg["grouping"]["missing_key"] == "group"
    assert cfg["source"]["params"]["format"] == "geojson"


def test_load_config_applies_overlay_values(tmp_path: Path):
    base = tmp_path / "base"
    overlay = tmp_path / "overlay"
    base.mkdir()
    overlay.mkdir()
    (base / "polling_places.yml").write_text(MINIMAL, encoding="utf-8")
    (overlay / "polling_places.yml").write_text(
        """grouping:
  missing_key: reject
source:
  max_attempts: 2
""",
        encoding="utf-8",
    )

    cfg = load_config(base, overlay_config_dir=overlay)

    assert cfg["grouping"]["missing_key"] == "reject"
    assert cfg["source"]["max_attempts"] == 2
    assert cfg["source"]["url"] == "https://example.test/polling_places"


def test_load_config_ignores_empty_overlay_file(tmp_path: Path):
    base = tmp_path / "base"
    overlay = tmp_path / "overlay"
    base.mkdir()
    overlay.mkdir()
    (base / "polling_places.yml").write_text(MINIMAL, encoding="utf-8")
    (overlay / "polling_places.yml").write_text("", encoding="utf-8")

    cfg = load_config(base, overlay_config_dir=overlay)
    assert cfg["grouping"]["missing_key"] == "group"


def test_load_config_rejects_non_mapping_overlay(tmp_path: Path):
    base = tmp_path / "base"
    overlay = tmp_path / "overlay"
    base.mkdir()
    overlay.mkdir()
    (base / "polling_places.yml").write_text(MINIMAL, encoding="utf-8")
    (overlay / "polling_places.yml").write_text("- not\n- a\n- mapping\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(base, overlay_config_dir=overlay)


def test_load_config_missing_file_raises(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_with_input_path_overrides_source():
    cfg = load_config(REPO_CONFIG_DIR)
    local = with_input_path(cfg, "fixtures/places.geojson")
    assert local["source"]["path"] == "fixtures/places.geojson"
    assert cfg["source"]["path"] is None
    assert with_input_path(cfg, None) is cfg
