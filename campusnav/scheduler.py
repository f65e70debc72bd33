"""Per-frame tick sources that drive marker animations.

A tick source behaves like a browser's ``requestAnimationFrame``: callbacks
registered with :meth:`ManualTickSource.request` run once, on the next frame,
with that frame's timestamp in milliseconds. Callbacks requested while a frame
is being processed wait for the following frame.
"""
from __future__ import annotations

import itertools
from typing import Callable, Dict, Iterator, Optional, Protocol

TickCallback = Callable[[float], None]


class TickSource(Protocol):
    def request(self, callback: TickCallback) -> int:
        ...

    def cancel(self, handle: int) -> None:
        ...


class ManualTickSource:
    """Tick source whose clock is advanced explicitly by its owner."""

    def __init__(self, start_ms: float = 0.0) -> None:
        self.now_ms = float(start_ms)
        self._handles = itertools.count(1)
        self._pending: Dict[int, TickCallback] = {}

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request(self, callback: TickCallback) -> int:
        handle = next(self._handles)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def tick(self, timestamp_ms: Optional[float] = None) -> int:
        """Run one frame and return how many callbacks were invoked."""

        if timestamp_ms is not None:
            if timestamp_ms < self.now_ms:
                raise ValueError("Tick timestamps must not go backwards.")
            self.now_ms = float(timestamp_ms)

        frame, self._pending = self._pending, {}
        for handle in sorted(frame):
            frame[handle](self.now_ms)
        return len(frame)

    def advance(self, delta_ms: float) -> int:
        if delta_ms < 0:
            raise ValueError("Cannot advance the clock by a negative amount.")
        return self.tick(self.now_ms + delta_ms)


class FrameClock(ManualTickSource):
    """Tick source advancing at a fixed frame rate, for offline rendering."""

    def __init__(self, frame_rate: int = 30, start_ms: float = 0.0) -> None:
        if frame_rate <= 0:
            raise ValueError("frame_rate must be positive.")
        super().__init__(start_ms)
        self.frame_rate = frame_rate

    @property
    def frame_ms(self) -> float:
        return 1000.0 / self.frame_rate

    def frames(self, max_frames: Optional[int] = None) -> Iterator[float]:
        """Tick until nothing is pending, yielding each frame's timestamp."""

        count = 0
        while self._pending and (max_frames is None or count < max_frames):
            # The first frame fires at the current time, like the first rAF.
            self.tick(self.now_ms if count == 0 else self.now_ms + self.frame_ms)
            count += 1
            yield self.now_ms
