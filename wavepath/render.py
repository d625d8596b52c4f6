"""render.py
Peak rows → fixed-width SVG waveform.

Two steps once the stream has ended:

1. ``resample_peaks`` walks the N rows with a fractional stride and picks the
   nearest row for each of the ``width / step`` horizontal slots
   (nearest-neighbour, no averaging, so transients survive).
2. ``assemble_path`` draws the forward outline above the centre line and
   mirrors it below, giving one closed, filled silhouette.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Sequence

import numpy as np

__all__ = [
    "RenderProfile",
    "PROFILES",
    "DEFAULT_PROFILE",
    "PathPoint",
    "resample_peaks",
    "build_path_points",
    "assemble_path",
    "render_svg",
]


@dataclass(frozen=True)
class RenderProfile:
    """Canvas geometry: ``width`` x ``height`` pixels, one point every ``step`` px."""

    width: int
    height: int
    step: int

    def __post_init__(self):
        if self.width < 1 or self.height < 1:
            raise ValueError(f"canvas must be at least 1x1 (got {self.width}x{self.height})")
        if not 1 <= self.step <= self.width:
            raise ValueError(f"step must be between 1 and width (got {self.step})")

    @property
    def slots(self) -> float:
        return self.width / self.step

    @property
    def middle(self) -> float:
        return self.height / 2


PROFILES: Dict[str, RenderProfile] = {
    "classic": RenderProfile(width=1200, height=500, step=2),
    "compact": RenderProfile(width=1000, height=200, step=10),
}
DEFAULT_PROFILE = "classic"


class PathPoint(NamedTuple):
    x: int
    y: int


def _round(value: float) -> int:
    # half-up, not Python's banker's rounding
    return int(math.floor(value + 0.5))


def resample_peaks(rows: np.ndarray, slots: float) -> List[float]:
    """Pick one amplitude per horizontal slot from *rows*.

    *rows* is ``(N, channels)`` (or 1-D); channels collapse to their maximum.
    Returns an empty list when N is zero.
    """
    rows = np.asarray(rows, dtype=np.float64)
    n_rows = len(rows)
    if n_rows == 0:
        return []
    peaks = rows.max(axis=1) if rows.ndim > 1 else rows

    stride = n_rows / slots
    values: List[float] = []
    position = 0.0
    while True:
        index = _round(position)
        if index >= n_rows:
            break
        values.append(float(peaks[index]))
        position += stride
    return values


def build_path_points(values: Sequence[float], profile: RenderProfile) -> List[PathPoint]:
    """Forward vertices, left to right, deflecting upward from the centre."""
    middle = profile.middle
    return [
        PathPoint(i * profile.step, _round(middle - middle * value))
        for i, value in enumerate(values)
    ]


def assemble_path(points: Sequence[PathPoint], profile: RenderProfile) -> str:
    """Closed path data: start at the left baseline, trace *points*, return
    to the right baseline, then trace the mirror image back."""
    middle = _round(profile.middle)
    parts = [f"M 0 {middle}"]
    parts.extend(f"L {p.x} {p.y}" for p in points)
    parts.append(f"L {profile.width} {middle}")
    parts.extend(f"L {p.x} {profile.height - p.y}" for p in reversed(points))
    parts.append("Z")
    return " ".join(parts)


def _svg_header(width: int, height: int) -> str:
    return (
        '<?xml version="1.0" standalone="no"?>'
        f'<svg viewBox="0 0 {width} {height}" xmlns="http://www.w3.org/2000/svg" version="1.1">'
    )


def render_svg(rows: np.ndarray, profile: RenderProfile) -> str:
    """Full document for *rows* on *profile*'s canvas."""
    points = build_path_points(resample_peaks(rows, profile.slots), profile)
    return (
        _svg_header(profile.width, profile.height)
        + f'<path fill="black" stroke="black" stroke-width="1" d="{assemble_path(points, profile)}" />'
        + "</svg>"
    )
