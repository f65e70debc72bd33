"""Planar helpers for marker paths expressed in percent of the map."""
from __future__ import annotations

import math
from typing import Tuple

from .config import Waypoint

Coordinate = Tuple[float, float]

# The marker icon points up at rest; atan2 measures from the +x axis.
HEADING_OFFSET_DEGREES = 90.0


def heading_degrees(a: Waypoint, b: Waypoint) -> float:
    """Return the marker heading from ``a`` towards ``b`` in degrees.

    Screen coordinates grow downwards, so the angle turns clockwise.
    """

    return math.degrees(math.atan2(b.y - a.y, b.x - a.x)) + HEADING_OFFSET_DEGREES


def interpolate(a: Waypoint, b: Waypoint, fraction: float) -> Coordinate:
    """Linearly interpolate between two waypoints."""

    return a.x + (b.x - a.x) * fraction, a.y + (b.y - a.y) * fraction
