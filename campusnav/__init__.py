"""Campus navigation guide with an animated route marker."""

from .animator import AnimationRun, AnimationSample, PathAnimator
from .config import AppConfig, Destination, Waypoint, load_config, load_default_catalog
from .navigation import Location, Mode, NavigationState, Navigator
from .scheduler import FrameClock, ManualTickSource
from .slug import from_slug, resolve, to_slug

__all__ = [
    "AnimationRun",
    "AnimationSample",
    "AppConfig",
    "Destination",
    "FrameClock",
    "Location",
    "ManualTickSource",
    "Mode",
    "NavigationState",
    "Navigator",
    "PathAnimator",
    "Waypoint",
    "from_slug",
    "load_config",
    "load_default_catalog",
    "resolve",
    "to_slug",
]
