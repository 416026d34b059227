from polling_places.cli import parse_args


def test_parse_args_defaults():
    args = parse_args(["aggregate"])
    assert args.command == "aggregate"
    assert args.input is None
    assert args.overlay_config_dir is None
    assert args.strict is False


def test_parse_args_accepts_input_and_overlay():
    args = parse_args(["all", "--input", "places.geojson", "--overlay-config-dir", "config/live"])
    assert args.input == "places.geojson"
    assert args.overlay_config_dir == "config/live"
