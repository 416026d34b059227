import copy

import pytest

from polling_places.common.errors import ConfigError
from polling_places.common.schema import validate_config

VALID = {
    "source": {"url": "https://example.test", "params": {"format": "geojson"}},
    "crs": {"source_epsg": 4326},
    "fields": {
        "group_key": "street_address",
        "display_name": "placename",
        "member_fields": ["ward", "division", "precinct"],
        "attributes": None,
    },
    "grouping": {"missing_key": "group"},
    "output": {"geojson_filename": "a.geojson", "csv_filename": "a.csv"},
}


def _with(path: tuple[str, ...], value):
    cfg = copy.deepcopy(VALID)
    target = cfg
    for key in path[:-1]:
        target = target[key]
    target[path[-1]] = value
    return cfg


def test_valid_config_passes():
    assert validate_config(copy.deepcopy(VALID)) == VALID


def test_non_mapping_config_rejected():
    with pytest.raises(ConfigError):
        validate_config(["source"])


def test_missing_block_rejected():
    cfg = copy.deepcopy(VALID)
    del cfg["output"]
    with pytest.raises(ConfigError, match="output"):
        validate_config(cfg)


def test_unknown_top_level_key_rejected_unless_allowed():
    cfg = _with(("extra",), 1)
    with pytest.raises(ConfigError, match="Unknown keys"):
        validate_config(cfg)
    assert validate_config(cfg, allow_unknown=True)["extra"] == 1


@pytest.mark.parametrize(
    "path,value",
    [
        (("grouping", "missing_key"), "drop"),
        (("fields", "member_fields"), []),
        (("fields", "attributes"), "zip_code"),
        (("fields", "member_label"), "zip_code"),
        (("crs", "source_epsg"), "wgs84"),
        (("source", "url"), None),
        (("source", "max_attempts"), 0),
        (("source", "read_timeout"), -1),
    ],
)
def test_invalid_values_rejected(path, value):
    with pytest.raises(ConfigError):
        validate_config(_with(path, value))


def test_local_path_may_replace_url():
    cfg = _with(("source", "url"), None)
    cfg["source"]["path"] = "places.geojson"
    assert validate_config(cfg)["source"]["path"] == "places.geojson"
