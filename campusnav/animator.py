"""Time-driven marker animation along a path of waypoints."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .config import DEFAULT_DURATION_MS, Waypoint
from .geometry import heading_degrees, interpolate
from .scheduler import TickSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnimationSample:
    x: float
    y: float
    heading: float


SampleListener = Callable[[AnimationSample], None]


@dataclass
class AnimationRun:
    """One pass of the marker from the first waypoint to the last."""

    waypoints: List[Waypoint]
    duration_ms: float
    generation: int
    start_time: Optional[float] = None
    heading: float = 0.0
    last_elapsed: Optional[float] = None
    finished: bool = False
    cancelled: bool = False

    @property
    def active(self) -> bool:
        return not (self.finished or self.cancelled)

    def initial_sample(self) -> AnimationSample:
        first = self.waypoints[0]
        if len(self.waypoints) > 1:
            self.heading = heading_degrees(first, self.waypoints[1])
        return AnimationSample(first.x, first.y, self.heading)

    def sample(self, elapsed_ms: float) -> AnimationSample:
        """Return the sample at ``elapsed_ms`` and mark the run finished at the end."""

        progress = elapsed_ms / self.duration_ms
        segments = len(self.waypoints) - 1

        if progress >= 1:
            self.finished = True
            last = self.waypoints[-1]
            return AnimationSample(last.x, last.y, self.heading)

        if segments == 0:
            # Nothing to travel; hold the only point and stop ticking.
            self.finished = True
            only = self.waypoints[0]
            return AnimationSample(only.x, only.y, self.heading)

        scaled = progress * segments
        index = min(max(int(math.floor(scaled)), 0), segments - 1)
        fraction = scaled - index
        start, end = self.waypoints[index], self.waypoints[index + 1]
        x, y = interpolate(start, end, fraction)
        # index is clamped below the last waypoint, so the segment always has a direction.
        self.heading = heading_degrees(start, end)
        return AnimationSample(x, y, self.heading)


class PathAnimator:
    """Drive at most one :class:`AnimationRun` at a time from a tick source.

    Each run carries the generation it was started under. Starting a new run or
    cancelling bumps the generation, so callbacks from older runs that still
    reach :meth:`_on_tick` return without emitting anything.
    """

    def __init__(self, tick_source: TickSource, duration_ms: float = DEFAULT_DURATION_MS) -> None:
        if duration_ms <= 0:
            raise ValueError("duration_ms must be positive.")
        self._ticks = tick_source
        self.duration_ms = float(duration_ms)
        self._generation = 0
        self._run: Optional[AnimationRun] = None
        self._listener: Optional[SampleListener] = None
        self._handle: Optional[int] = None

    @property
    def run(self) -> Optional[AnimationRun]:
        return self._run

    @property
    def active(self) -> bool:
        return self._run is not None and self._run.active

    def start(self, waypoints: Sequence[Waypoint], listener: SampleListener) -> Optional[AnimationRun]:
        """Cancel any current run and animate along ``waypoints`` from the start."""

        self.cancel()
        if not waypoints:
            logger.debug("No waypoints, animation not started")
            return None

        self._generation += 1
        run = AnimationRun(
            waypoints=list(waypoints),
            duration_ms=self.duration_ms,
            generation=self._generation,
        )
        self._run = run
        self._listener = listener
        logger.debug("Starting run %d with %d waypoints", run.generation, len(run.waypoints))

        listener(run.initial_sample())
        self._handle = self._ticks.request(lambda timestamp: self._on_tick(run, timestamp))
        return run

    def cancel(self) -> None:
        self._generation += 1
        if self._handle is not None:
            self._ticks.cancel(self._handle)
            self._handle = None
        if self._run is not None and self._run.active:
            self._run.cancelled = True
            logger.debug("Cancelled run %d", self._run.generation)
        self._listener = None

    def _on_tick(self, run: AnimationRun, timestamp: float) -> None:
        if run.generation != self._generation or not run.active:
            return
        self._handle = None

        if run.start_time is None:
            run.start_time = timestamp
        elapsed = timestamp - run.start_time
        if run.last_elapsed is not None and elapsed <= run.last_elapsed:
            self._handle = self._ticks.request(lambda ts: self._on_tick(run, ts))
            return
        run.last_elapsed = elapsed

        sample = run.sample(elapsed)
        listener = self._listener
        if listener is not None:
            listener(sample)

        if run.finished:
            logger.debug("Run %d finished after %.0f ms", run.generation, elapsed)
        elif run.generation == self._generation:
            self._handle = self._ticks.request(lambda ts: self._on_tick(run, ts))
