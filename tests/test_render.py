"""Tests for nearest-neighbour resampling and path assembly."""

from __future__ import annotations

import re

import numpy as np
import pytest

from wavepath.render import (
    PROFILES,
    PathPoint,
    RenderProfile,
    assemble_path,
    build_path_points,
    render_svg,
    resample_peaks,
)

SMALL = RenderProfile(width=100, height=50, step=10)


def _path_data(svg: str) -> str:
    return re.search(r' d="([^"]*)"', svg).group(1)


def test_no_rows_no_points() -> None:
    assert resample_peaks(np.empty((0, 2)), SMALL.slots) == []


def test_empty_document_is_closed_path() -> None:
    svg = render_svg(np.empty((0, 1)), PROFILES["classic"])

    assert svg.startswith('<?xml version="1.0" standalone="no"?>')
    assert '<svg viewBox="0 0 1200 500"' in svg
    assert svg.endswith("</svg>")
    assert svg.count("<path") == 1
    assert _path_data(svg) == "M 0 250 L 1200 250 Z"


def test_channels_collapse_to_maximum() -> None:
    rows = np.array([[0.1, 0.7], [0.4, 0.2]])
    assert resample_peaks(rows, 2) == [0.7, 0.4]


def test_one_row_per_slot_when_counts_match() -> None:
    rows = np.linspace(0, 0.9, 10).reshape(-1, 1)
    values = resample_peaks(rows, SMALL.slots)
    np.testing.assert_allclose(values, rows[:, 0])


def test_downsampling_picks_nearest_rows() -> None:
    rows = np.arange(40, dtype=float).reshape(-1, 1) / 100
    values = resample_peaks(rows, 10)

    # stride 4.0: rows 0, 4, 8, ...
    np.testing.assert_allclose(values, np.arange(0, 40, 4) / 100)


def test_upsampling_repeats_rows() -> None:
    rows = np.array([[0.2], [0.8]])
    values = resample_peaks(rows, 8)

    # stride 0.25: positions 0, .25, .5 (→1), .75, 1, 1.25, then 1.5 rounds to 2 and stops
    assert values == [0.2, 0.2, 0.8, 0.8, 0.8, 0.8]


def test_nearest_neighbour_keeps_transient() -> None:
    rows = np.zeros((20, 1))
    rows[10] = 1.0
    assert max(resample_peaks(rows, 10)) == 1.0


def test_point_geometry() -> None:
    points = build_path_points([0.0, 0.5, 1.0], SMALL)
    assert points == [PathPoint(0, 25), PathPoint(10, 13), PathPoint(20, 0)]


def test_rounding_is_half_up() -> None:
    profile = RenderProfile(width=10, height=10, step=1)
    # 5 - 5 * 0.1 = 4.5 → 5
    assert build_path_points([0.1], profile)[0].y == 5


def test_mirrored_path() -> None:
    points = [PathPoint(0, 25), PathPoint(10, 5), PathPoint(20, 20)]
    d = assemble_path(points, SMALL)
    assert d == "M 0 25 L 0 25 L 10 5 L 20 20 L 100 25 L 20 30 L 10 45 L 0 25 Z"


def test_path_is_vertically_symmetric() -> None:
    rows = np.random.default_rng(3).random((37, 2))
    d = _path_data(render_svg(rows, SMALL))
    coords = [tuple(map(int, pair)) for pair in re.findall(r"L (\d+) (\d+)", d)]
    forward, back = coords[: len(coords) // 2], coords[len(coords) // 2 + 1 :]

    assert coords[len(coords) // 2] == (100, 25)
    assert [(x, 50 - y) for x, y in reversed(forward)] == back
    assert d.endswith("Z")


def test_point_count_matches_slots() -> None:
    profile = PROFILES["compact"]
    for n_rows in (80, 100, 333, 5000):
        values = resample_peaks(np.ones((n_rows, 1)), profile.slots)
        assert abs(len(values) - profile.width // profile.step) <= 1


@pytest.mark.parametrize("kwargs", [{"width": 0, "height": 5, "step": 1},
                                    {"width": 10, "height": 5, "step": 0},
                                    {"width": 10, "height": 5, "step": 11}])
def test_invalid_profile(kwargs) -> None:
    with pytest.raises(ValueError):
        RenderProfile(**kwargs)
