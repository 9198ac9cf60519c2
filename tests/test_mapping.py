import math

import numpy as np
import pytest

from physicsexplorer.view import mapping
from physicsexplorer.view.mapping import CanvasGeometry, ClosedPath, rectangle_path

CANVAS = CanvasGeometry(600, 400)


def test_map_to_pixels_axes():
    assert mapping.map_to_pixels(2.0, 50, CANVAS) == 400.0
    assert mapping.map_to_pixels(2.0, 50, CANVAS, axis="y") == 100.0
    assert mapping.map_to_pixels(1.0, 10, CANVAS, origin=0.0) == 10.0


def test_map_to_pixels_clamps_on_request():
    assert mapping.map_to_pixels(100.0, 50, CANVAS) == 5300.0
    assert mapping.map_to_pixels(100.0, 50, CANVAS, clamp_to_bounds=True) == 600.0
    assert mapping.map_to_pixels(100.0, 50, CANVAS, axis="y", clamp_to_bounds=True) == 0.0


def test_map_to_pixels_rejects_unknown_axis():
    with pytest.raises(ValueError):
        mapping.map_to_pixels(1.0, 1.0, CANVAS, axis="z")


def test_to_pixels_and_arrow_length():
    assert mapping.to_pixels(0.001, 200, minimum=10) == 10.0
    assert mapping.to_pixels(5, 100, maximum=150) == 150.0
    assert mapping.arrow_length(-5e3, 50, 1e3, 100) == 55.0
    assert mapping.arrow_length(1e9, 50, 1e3, 100) == 150.0


def test_clamp_to_canvas():
    assert mapping.clamp_to_canvas((-10, 900), CANVAS, margin=5) == (5, 395)


@pytest.mark.parametrize("distance, expected", [(0, 0), (12, 2), (-3, 7), (10, 0), (-1e-17, 0.0)])
def test_wrap(distance, expected):
    assert mapping.wrap(distance, 10) == pytest.approx(expected)
    assert 0 <= mapping.wrap(distance, 10) < 10


def test_polar_is_counter_clockwise_on_screen():
    x, y = mapping.polar((100, 100), 10, math.pi / 2)
    assert x == pytest.approx(100)
    assert y == pytest.approx(90)


def test_spread():
    assert mapping.spread(4, 0, 100) == [0.0, 25.0, 50.0, 75.0]
    assert mapping.spread(0, 0, 100) == []


def test_rectangle_path_walks_clockwise():
    path = rectangle_path((300, 200), 300, 180)
    assert path.length == pytest.approx(960)
    assert path.point_at(0) == (150, 110)
    assert path.point_at(300) == (450, 110)
    assert path.point_at(480) == (450, 290)
    assert path.point_at(960) == (150, 110)
    assert path.point_at(-1) == pytest.approx((150, 111))


def test_path_is_continuous_across_corners_and_wrap():
    path = rectangle_path((300, 200), 300, 180)
    step = 2.5
    points = path.points_at(np.arange(-20, 2 * path.length, step))
    jumps = np.hypot(*np.diff(points, axis=0).T)
    assert jumps.max() <= step + 1e-9


def test_points_at_matches_point_at():
    path = ClosedPath([(0, 0), (40, 0), (40, 30)])
    distances = [-7.5, 0, 12, 40, 55, 70, 119.9, 250]
    vectorised = path.points_at(distances)
    assert vectorised.shape == (len(distances), 2)
    for d, point in zip(distances, vectorised):
        assert tuple(point) == pytest.approx(path.point_at(d))
    assert path.points_at(12).shape == (1, 2)


def test_path_drops_repeated_vertices():
    path = ClosedPath([(0, 0), (10, 0), (10, 0), (10, 10), (0, 10)])
    assert len(path.vertices) == 4
    assert path.length == pytest.approx(40)


@pytest.mark.parametrize("vertices", [[(0, 0)], [(1, 1), (1, 1)], [1, 2, 3]])
def test_degenerate_paths_are_rejected(vertices):
    with pytest.raises(ValueError):
        ClosedPath(vertices)
