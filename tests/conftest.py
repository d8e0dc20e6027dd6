import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from flowart import Canvas, FlowField, GridNoise


class RecordingRenderer:
    def __init__(self):
        self.lines = []
        self.polylines = []
        self.points = []

    def line(self, start, end, color, width):
        self.lines.append((start, end, color, width))

    def polyline(self, points, color, width):
        self.polylines.append((np.array(points), color, width))

    def point(self, center, radius, color):
        self.points.append((center, radius, color))


@pytest.fixture
def renderer():
    return RecordingRenderer()


@pytest.fixture
def canvas():
    return Canvas(100, 50)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def eastward_field(canvas, rng):
    """Field whose direction is (1, 0) everywhere."""
    return FlowField(canvas, noise=lambda x, y: -1.0, rng=rng)


@pytest.fixture
def noise_field(rng):
    return FlowField(Canvas(400, 300), noise=GridNoise(seed=7), smoothness=0.002, rng=rng)
