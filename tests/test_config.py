import json

import pytest

from campusnav.config import AppConfig, Destination, Waypoint, load_config


def test_default_catalog(catalog):
    assert len(catalog.destinations) == 10
    assert catalog.duration_ms == 3000
    ccict = catalog.find("CCICT BUILDING")
    assert ccict.waypoints[0] == Waypoint(20, 90)
    assert ccict.map_position == Waypoint(60, 35)
    assert ccict.map_media_url.endswith(".mp4")
    assert catalog.find("COT BUILDING").photo_url == ""


def test_destination_accepts_camel_case_keys():
    destination = Destination.from_mapping(
        {
            "name": "GYM BUILDING",
            "route": ["Walk."],
            "pathCoordinates": [{"x": 1, "y": 2}, {"x": 3, "y": 4}],
            "mapPosition": {"top": "10%", "left": "20%"},
            "photoUrl": "https://example.org/gym.MP4",
        }
    )
    assert destination.waypoints == [Waypoint(1, 2), Waypoint(3, 4)]
    assert destination.map_position == Waypoint(20, 10)
    assert destination.is_photo_video


def test_waypoint_errors():
    with pytest.raises(ValueError):
        Waypoint.from_value({"x": 1})
    with pytest.raises(ValueError):
        Waypoint.from_value([1, 2, 3])


def test_duplicate_names_rejected():
    with pytest.raises(ValueError, match="Duplicate"):
        AppConfig.from_mapping({"destinations": [{"name": "A"}, {"name": "A"}]})


def test_destinations_must_be_a_list():
    with pytest.raises(ValueError):
        AppConfig.from_mapping({"destinations": {"name": "A"}})


def test_missing_name_rejected():
    with pytest.raises(ValueError, match="name"):
        Destination.from_mapping({"route": []})


def test_load_json(tmp_path):
    path = tmp_path / "catalog.json"
    path.write_text(
        json.dumps({"duration_ms": 1500, "destinations": [{"name": "LIBRARY BUILDING", "path": [[0, 0]]}]}),
        encoding="utf8",
    )
    config = load_config(path)
    assert config.duration_ms == 1500
    assert config.destinations[0].waypoints == [Waypoint(0, 0)]


def test_load_yaml(tmp_path):
    pytest.importorskip("yaml")
    path = tmp_path / "catalog.yaml"
    path.write_text(
        "destinations:\n  - name: LIBRARY BUILDING\n    route: [Go.]\n    path: [[5, 5], [6, 6]]\n",
        encoding="utf8",
    )
    config = load_config(path)
    assert config.destinations[0].steps == ["Go."]


def test_load_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.json")

    path = tmp_path / "list.json"
    path.write_text("[]", encoding="utf8")
    with pytest.raises(ValueError):
        load_config(path)


@pytest.mark.parametrize(
    "destinations",
    [
        ["ADMIN BUILDING"],
        [{"name": "A", "path": "20,90"}],
        [{"name": "A", "route": {"first": "Walk."}}],
        [{"name": "A", "path": [[10, None]]}],
        [{"name": "A", "map_position": {"top": "10%"}}],
    ],
)
def test_malformed_destinations_raise_value_error(destinations):
    with pytest.raises(ValueError):
        AppConfig.from_mapping({"destinations": destinations})


@pytest.mark.parametrize("value", [[-1, 50], [50, 100.5], {"x": 101, "y": 0}])
def test_waypoints_must_be_percentages(value):
    with pytest.raises(ValueError, match="0-100"):
        Waypoint.from_value(value)


def test_waypoint_bounds_are_inclusive():
    assert Waypoint.from_value([0, 100]) == Waypoint(0, 100)
