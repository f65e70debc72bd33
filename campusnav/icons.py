"""Helpers for drawing and rotating the navigation marker."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image, ImageDraw

MARKER_FILL = "#00ff00"
MARKER_BORDER = "#0000ff"
MARKER_FIGURE = "#ffffff"


def _generate_marker(size: int) -> Image.Image:
    # Lime disc with a blue ring and a white person figure facing up.
    image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    border = max(2, size // 25)
    draw.ellipse([(0, 0), (size - 1, size - 1)], fill=MARKER_BORDER)
    draw.ellipse([(border, border), (size - 1 - border, size - 1 - border)], fill=MARKER_FILL)

    unit = size / 24.0
    head_radius = 5 * unit
    centre_x = 12 * unit
    draw.ellipse(
        [(centre_x - head_radius, 7 * unit - head_radius), (centre_x + head_radius, 7 * unit + head_radius)],
        fill=MARKER_FIGURE,
    )
    draw.pieslice(
        [(4 * unit, 16 * unit), (20 * unit, 28 * unit)],
        start=180,
        end=360,
        fill=MARKER_FIGURE,
    )
    return image


def load_marker_icon(icon_path: Optional[Path] = None, size: int = 50) -> np.ndarray:
    """Return a numpy array containing the RGBA marker icon."""

    if icon_path and Path(icon_path).exists():
        image = Image.open(icon_path).convert("RGBA").resize((size, size), Image.LANCZOS)
    else:
        image = _generate_marker(size)
    return np.array(image)


def rotate_icon(icon: np.ndarray, heading: float) -> np.ndarray:
    """Rotate the icon clockwise by ``heading`` degrees, as CSS ``rotate()`` does."""

    image = Image.fromarray(icon)
    rotated = image.rotate(-heading, resample=Image.BICUBIC, expand=True)
    return np.array(rotated)
