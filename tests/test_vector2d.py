import math

import numpy as np
import pytest

from flowart.geometry import DrawSettings, MarkerSettings, Rect, Vector2D


@pytest.mark.parametrize("x, y", [(1, 0), (0, 0), (-3.5, 2.25), (1e3, -7e2)])
def test_rotate_by_zero_keeps_vector(x, y):
    v = Vector2D(x, y)
    assert v.rotate(0).eq(v)


@pytest.mark.parametrize("angle", np.linspace(-2 * math.pi, 4 * math.pi, 25))
def test_from_angle_is_unit(angle):
    assert Vector2D.from_angle(angle).length() == pytest.approx(1.0)


@pytest.mark.parametrize(
    "n, expected",
    [(-1, (1, 0)), (0, (-1, 0)), (1, (1, 0)), (0.5, (0, -1)), (-0.5, (0, 1))],
)
def test_from_noise(n, expected):
    assert Vector2D.from_noise(n).eq(Vector2D(*expected))


@pytest.mark.parametrize("n", [-7.0, 1.5, 42])
def test_from_noise_clamps(n):
    assert Vector2D.from_noise(n).eq(Vector2D(1, 0))


def test_value_operations_leave_receiver_untouched():
    a = Vector2D(1, 2)
    b = Vector2D(3, -4)
    results = [
        a.add(b),
        a.sub(b),
        a.mul(b),
        a.scale(3),
        a.transform(1, 2, 3, 4),
        a.rotate(1.0),
        a.normalize(),
        a.map(lambda c, i: c * 2),
    ]
    assert a == Vector2D(1, 2)
    assert all(r is not a for r in results)
    assert results[0] == Vector2D(4, -2)
    assert results[1] == Vector2D(-2, 6)
    assert results[2] == Vector2D(3, -8)
    assert results[3] == Vector2D(3, 6)
    assert results[4] == Vector2D(7, 10)


def test_inplace_operations_mutate_and_chain():
    v = Vector2D(1, 2)
    same = v.add_(Vector2D(1, 1)).scale_(2).sub_(Vector2D(4, 0))
    assert same is v
    assert v == Vector2D(0, 6)
    v.mul_(Vector2D(3, 0.5))
    assert v == Vector2D(0, 3)
    v.normalize_()
    assert v == Vector2D(0, 1)
    v.rotate_(math.pi / 2)
    assert v.eq(Vector2D(-1, 0))
    v.map_(lambda c, i: c + i)
    assert v.eq(Vector2D(-1, 1))


def test_augmented_operators_mutate():
    v = Vector2D(1, 1)
    ref = v
    v += Vector2D(1, 2)
    v *= 2
    v -= Vector2D(1, 1)
    assert ref is v
    assert v == Vector2D(3, 5)


def test_operators_return_new_vectors():
    a = Vector2D(1, 2)
    assert a + Vector2D(1, 1) == Vector2D(2, 3)
    assert a - Vector2D(1, 1) == Vector2D(0, 1)
    assert a * 2 == Vector2D(2, 4)
    assert 2 * a == Vector2D(2, 4)
    assert -a == Vector2D(-1, -2)
    assert a == Vector2D(1, 2)


def test_normalize_zero_vector():
    assert Vector2D.zero().normalize() == Vector2D.zero()
    v = Vector2D(0, 0)
    assert v.normalize_() is v
    assert v == Vector2D.zero()


def test_normalize_gives_unit_length():
    assert Vector2D(3, 4).normalize().eq(Vector2D(0.6, 0.8))


def test_rotate_quarter_turn():
    # counter-clockwise in math coordinates
    assert Vector2D(1, 0).rotate(math.pi / 2).eq(Vector2D(0, 1))
    assert Vector2D(0, 1).rotate(math.pi / 2).eq(Vector2D(-1, 0))


def test_transform_matches_rotate():
    v = Vector2D(2, -1)
    a = 0.7
    c, s = math.cos(a), math.sin(a)
    assert v.transform(c, s, -s, c).eq(v.rotate(a))


def test_products():
    assert Vector2D(1, 0).cross(Vector2D(0, 1)) == 1
    assert Vector2D(0, 1).cross(Vector2D(1, 0)) == -1
    assert Vector2D(2, 3).cross(Vector2D(4, 6)) == 0
    assert Vector2D(2, 3).dot(Vector2D(4, -1)) == 5


def test_distances_and_directions():
    a = Vector2D(1, 1)
    b = Vector2D(4, 5)
    assert a.to(b) == Vector2D(3, 4)
    assert a.dist_to(b) == pytest.approx(5)
    assert a.dir_to(b).eq(Vector2D(0.6, 0.8))
    assert abs(Vector2D(3, 4)) == pytest.approx(5)
    assert Vector2D(3, 4).length_sqr() == 25
    assert Vector2D(0, 2).angle() == pytest.approx(math.pi / 2)


def test_eq_uses_tolerance():
    assert Vector2D(1, 1).eq(Vector2D(1 + 1e-7, 1 - 1e-7))
    assert not Vector2D(1, 1).eq(Vector2D(1 + 1e-3, 1))
    assert Vector2D(1, 1).eq(Vector2D(1.05, 1), epsilon=0.1)
    assert Vector2D(1, 1) != Vector2D(1 + 1e-12, 1)


def test_constructors():
    rect = Rect(0, 10, -4, 4)
    assert Vector2D.center(rect) == Vector2D(5, 0)
    assert Vector2D.one() == Vector2D(1, 1)
    rng = np.random.default_rng(0)
    for _ in range(100):
        assert rect.contains(Vector2D.random(rect, rng))


def test_conversions():
    v = Vector2D(1, 2)
    x, y = v
    assert (x, y) == (1.0, 2.0)
    assert v.to_tuple() == (1.0, 2.0)
    assert v.to_dict() == {"x": 1.0, "y": 2.0}
    np.testing.assert_array_equal(v.to_array(), [1.0, 2.0])
    assert repr(v) == "Vector2D(1.000, 2.000)"
    c = v.copy()
    assert c == v and c is not v


def test_vectors_are_not_hashable():
    with pytest.raises(TypeError):
        hash(Vector2D(1, 2))


def test_segment_without_marker():
    seg = Vector2D(3, 4).segment(Vector2D(1, 1), DrawSettings(line_width=2, line_color="blue"))
    assert seg.start == Vector2D(1, 1)
    assert seg.end == Vector2D(4, 5)
    assert seg.color == "blue"
    assert seg.width == 2
    assert seg.marker is None


def test_segment_marker_is_perpendicular_tail_centered_on_origin():
    settings = DrawSettings(marker=MarkerSettings(tail_color="red", tail_length=4))
    seg = Vector2D(10, 0).segment(Vector2D(5, 5), settings)
    assert seg.marker.start.eq(Vector2D(5, 3))
    assert seg.marker.end.eq(Vector2D(5, 7))
    assert seg.marker.color == "red"


def test_default_segment_has_marker():
    assert Vector2D(1, 0).segment(Vector2D.zero()).marker is not None
