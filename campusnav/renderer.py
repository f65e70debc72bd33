"""Rendering logic for producing animated route videos of a navigation run."""
from __future__ import annotations

import logging
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

import imageio.v2 as imageio
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.offsetbox import AnnotationBbox, OffsetImage
import numpy as np

from .animator import AnimationSample
from .config import AppConfig, Destination
from .icons import load_marker_icon, rotate_icon
from .navigation import Mode, Navigator
from .scheduler import FrameClock
from .slug import to_slug

logger = logging.getLogger(__name__)

Coordinate = Tuple[float, float]


@dataclass
class FrameState:
    position: Coordinate
    heading: float
    traveled: List[Coordinate] = field(default_factory=list)


class RouteRenderer:
    """Render the marker animation for one destination to a video file."""

    def __init__(self, config: AppConfig, destination: Destination, pause_at_end: float = 1.0) -> None:
        if not destination.waypoints:
            raise ValueError(f"{destination.name} has no path to animate.")
        self.config = config
        self.destination = destination
        self.pause_at_end = pause_at_end
        self._marker_icon = load_marker_icon(size=max(24, min(config.width, config.height) // 14))
        self._frame_states = self._build_frames()
        self._setup_canvas()

    # ------------------------------------------------------------------
    # Timeline construction
    # ------------------------------------------------------------------

    def _build_frames(self) -> List[FrameState]:
        clock = FrameClock(self.config.frame_rate)
        navigator = Navigator(
            self.config, clock, viewport=lambda: (self.config.width, self.config.height)
        )
        navigator.start()

        traveled: List[Coordinate] = []
        frames: List[FrameState] = []

        def record(sample: AnimationSample) -> None:
            traveled.append((sample.x, sample.y))

        navigator.subscribe_samples(record)
        navigator.location.assign(to_slug(self.destination.name))
        if navigator.state.mode is not Mode.NAVIGATING or navigator.state.destination is not self.destination:
            raise ValueError(f"{self.destination.name} is not part of the catalog.")

        for _ in clock.frames():
            marker = navigator.marker
            if marker is None:
                continue
            frames.append(FrameState((marker.x, marker.y), marker.heading, list(traveled)))
        navigator.stop()

        hold_frames = int(round(max(self.pause_at_end, 0.0) * self.config.frame_rate))
        if frames:
            final_state = frames[-1]
            frames.extend(
                FrameState(final_state.position, final_state.heading, list(final_state.traveled))
                for _ in range(hold_frames)
            )
        logger.debug("Built %d frames for %s", len(frames), self.destination.name)
        return frames

    # ------------------------------------------------------------------
    # Rendering helpers
    # ------------------------------------------------------------------

    def _setup_canvas(self) -> None:
        dpi = 100
        figsize = (self.config.width / dpi, self.config.height / dpi)
        self._fig, (self._ax, self._steps_ax) = plt.subplots(
            1, 2, figsize=figsize, dpi=dpi, gridspec_kw={"width_ratios": [3, 2]}
        )
        self._fig.patch.set_facecolor("#0b1d33")
        self._ax.set_facecolor("#2f5d3a")

        for axis in (self._ax, self._steps_ax):
            axis.set_xticks([])
            axis.set_yticks([])
        self._steps_ax.set_facecolor("#0b1d33")
        for spine in self._steps_ax.spines.values():
            spine.set_visible(False)

        # Percent coordinates with the origin in the top-left corner, like the page.
        self._ax.set_xlim(0, 100)
        self._ax.set_ylim(100, 0)

        for destination in self.config.destinations:
            if destination.map_position is None:
                continue
            highlighted = destination is self.destination
            self._ax.text(
                destination.map_position.x,
                destination.map_position.y,
                destination.name,
                fontsize=8 if highlighted else 6,
                fontweight="bold" if highlighted else "normal",
                color="#ffffff" if highlighted else "#d5e5ff",
                ha="center",
                va="center",
                alpha=1.0 if highlighted else 0.6,
            )

        xs = [wp.x for wp in self.destination.waypoints]
        ys = [wp.y for wp in self.destination.waypoints]
        self._ax.plot(xs, ys, color="#ffffff", linewidth=1.5, linestyle="--", alpha=0.7)

        title = self.config.title or "Campus Navigation"
        self._ax.set_title(f"{title}\n{self.destination.name}", color="white", fontsize=12, pad=10)

        lines = []
        for index, step in enumerate(self.destination.steps, start=1):
            wrapped = textwrap.fill(step, width=40, subsequent_indent="    ")
            lines.append(f"{index}. {wrapped}")
        self._steps_ax.text(
            0.02,
            0.98,
            "\n".join(lines),
            transform=self._steps_ax.transAxes,
            color="#ffffff",
            fontsize=9,
            ha="left",
            va="top",
        )

        self._trail_line, = self._ax.plot([], [], color="#ff5555", linewidth=3, solid_capstyle="round")

        start = self.destination.waypoints[0]
        self._marker_image_box = OffsetImage(self._marker_icon, zoom=1.0)
        self._marker_artist = AnnotationBbox(self._marker_image_box, (start.x, start.y), frameon=False)
        self._ax.add_artist(self._marker_artist)

        self._fig.tight_layout()

    def _draw_frame(self, frame: FrameState) -> None:
        if frame.traveled:
            self._trail_line.set_data([x for x, _ in frame.traveled], [y for _, y in frame.traveled])
        else:
            self._trail_line.set_data([], [])

        self._marker_image_box.set_data(rotate_icon(self._marker_icon, frame.heading))
        self._marker_artist.xy = frame.position

    def _open_writer(self, output_path: Path):
        if output_path.suffix.lower() == ".gif":
            return imageio.get_writer(output_path, mode="I", duration=1000.0 / self.config.frame_rate)
        try:
            return imageio.get_writer(
                output_path,
                fps=self.config.frame_rate,
                codec="libx264",
                format="FFMPEG",
                macro_block_size=None,
                quality=8,
            )
        except ImportError as exc:
            raise ImportError(
                "FFMPEG support is required to export videos. Install the "
                "'imageio-ffmpeg' package (for example via 'pip install "
                "imageio-ffmpeg') and try again."
            ) from exc

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def frame_count(self) -> int:
        return len(self._frame_states)

    @property
    def frames(self) -> List[FrameState]:
        return list(self._frame_states)

    def render(self, output_path: Optional[Path] = None) -> Path:
        output_path = Path(output_path or self.config.output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        with self._open_writer(output_path) as writer:
            for frame in self._frame_states:
                self._draw_frame(frame)
                self._fig.canvas.draw()
                image = np.asarray(self._fig.canvas.buffer_rgba())
                writer.append_data(np.ascontiguousarray(image[:, :, :3]))

        plt.close(self._fig)
        logger.info("Rendered %d frames to %s", len(self._frame_states), output_path)
        return output_path
