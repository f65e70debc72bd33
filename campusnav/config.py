"""Configuration loading utilities for the campus navigation guide."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional
import json


DEFAULT_DURATION_MS = 3000.0

_DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "destinations.json"


@dataclass(frozen=True)
class Waypoint:
    """A point on a marker path, in percent of the map container."""

    x: float
    y: float

    @staticmethod
    def from_value(data: Any) -> "Waypoint":
        try:
            if isinstance(data, dict):
                x, y = float(data["x"]), float(data["y"])
            elif isinstance(data, (list, tuple)) and len(data) == 2:
                x, y = float(data[0]), float(data[1])
            else:
                raise ValueError(f"Waypoint must be a mapping with x/y or an [x, y] pair, got {data!r}")
        except KeyError as exc:
            raise ValueError(f"Waypoint configuration missing field: {exc.args[0]}") from exc
        except TypeError as exc:
            raise ValueError(f"Waypoint coordinates must be numbers, got {data!r}") from exc
        if not (0.0 <= x <= 100.0 and 0.0 <= y <= 100.0):
            raise ValueError(f"Waypoint coordinates must lie within 0-100 percent, got ({x}, {y})")
        return Waypoint(x=x, y=y)


def _percent(value: Any) -> float:
    # map_position entries are written as CSS offsets such as "35%".
    if value is None:
        raise ValueError("map_position needs both top and left offsets.")
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    return float(value)


@dataclass
class Destination:
    """A single campus destination and its route."""

    name: str
    steps: List[str] = field(default_factory=list)
    waypoints: List[Waypoint] = field(default_factory=list)
    map_video_url: str = ""
    map_image_url: str = ""
    photo_url: str = ""
    is_photo_video: bool = False
    map_position: Optional[Waypoint] = None

    @property
    def map_media_url(self) -> str:
        return self.map_video_url or self.map_image_url

    @staticmethod
    def from_mapping(data: Dict[str, Any]) -> "Destination":
        if not isinstance(data, dict):
            raise ValueError(f"Destination entries must be mappings, got {data!r}")
        try:
            name = str(data["name"])
        except KeyError as exc:
            raise ValueError("Destination configuration missing field: name") from exc
        if not name.strip():
            raise ValueError("Destination names must not be empty.")

        steps = data.get("route", data.get("steps")) or []
        if not isinstance(steps, (list, tuple)):
            raise ValueError(f"Route for {name} must be a list of strings.")

        path = data.get("path", data.get("pathCoordinates", data.get("waypoints"))) or []
        if not isinstance(path, (list, tuple)):
            raise ValueError(f"Path for {name} must be a list of waypoints.")
        waypoints = [Waypoint.from_value(item) for item in path]

        map_position = None
        position_data = data.get("map_position", data.get("mapPosition"))
        if isinstance(position_data, dict):
            if "left" in position_data or "top" in position_data:
                map_position = Waypoint.from_value(
                    [_percent(position_data.get("left")), _percent(position_data.get("top"))]
                )
            else:
                map_position = Waypoint.from_value(position_data)

        photo_url = str(data.get("photo_url", data.get("photoUrl")) or "")
        if "is_photo_video" in data:
            is_photo_video = bool(data["is_photo_video"])
        else:
            is_photo_video = photo_url.lower().endswith(".mp4")

        return Destination(
            name=name,
            steps=[str(step) for step in steps],
            waypoints=waypoints,
            map_video_url=str(data.get("map_video_url", data.get("mapVideoUrl")) or ""),
            map_image_url=str(data.get("map_image_url", data.get("mapImageUrl")) or ""),
            photo_url=photo_url,
            is_photo_video=is_photo_video,
            map_position=map_position,
        )


@dataclass
class AppConfig:
    """Top-level configuration: the destination catalog plus render settings."""

    title: str = ""
    duration_ms: float = DEFAULT_DURATION_MS
    frame_rate: int = 30
    width: int = 1280
    height: int = 720
    output_path: Path = Path("campusnav.mp4")
    destinations: List[Destination] = field(default_factory=list)

    def find(self, name: str) -> Optional[Destination]:
        for destination in self.destinations:
            if destination.name == name:
                return destination
        return None

    @staticmethod
    def from_mapping(data: Dict[str, Any]) -> "AppConfig":
        destinations_data = data.get("destinations") or []
        if not isinstance(destinations_data, Iterable) or isinstance(destinations_data, (str, bytes, dict)):
            raise ValueError("Destinations must be provided as a list of mappings.")

        destinations = [Destination.from_mapping(item) for item in destinations_data]
        seen = set()
        for destination in destinations:
            if destination.name in seen:
                raise ValueError(f"Duplicate destination name: {destination.name}")
            seen.add(destination.name)

        duration_ms = float(data.get("duration_ms", DEFAULT_DURATION_MS))
        if duration_ms <= 0:
            raise ValueError("duration_ms must be positive.")

        output_path = data.get("output") or data.get("output_path") or "campusnav.mp4"

        return AppConfig(
            title=data.get("title", ""),
            duration_ms=duration_ms,
            frame_rate=int(data.get("frame_rate", data.get("fps", 30))),
            width=int(data.get("width", 1280)),
            height=int(data.get("height", 720)),
            output_path=Path(output_path),
            destinations=destinations,
        )


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:  # pragma: no cover - optional dependency
        import yaml  # type: ignore
    except ImportError as exc:  # pragma: no cover - optional dependency
        raise RuntimeError(
            "YAML configuration requested but PyYAML is not available. Install with 'pip install pyyaml'."
        ) from exc
    with path.open("r", encoding="utf8") as handle:
        return yaml.safe_load(handle)  # type: ignore[no-any-return]


def load_config(path: Path) -> AppConfig:
    """Load an :class:`AppConfig` from a JSON or YAML file."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(path)

    if path.suffix.lower() in {".yaml", ".yml"}:
        raw = _load_yaml(path)
    else:
        with path.open("r", encoding="utf8") as handle:
            raw = json.load(handle)

    if not isinstance(raw, dict):
        raise ValueError("Configuration file must contain a mapping at the top level.")

    return AppConfig.from_mapping(raw)


def load_default_catalog() -> AppConfig:
    """Return the campus catalog bundled with the package."""

    return load_config(_DEFAULT_CATALOG_PATH)
