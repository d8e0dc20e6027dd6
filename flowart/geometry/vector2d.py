import math
from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Tuple

import numpy as np


@dataclass
class Rect:
    """Axis aligned rectangle. Consumers assume min_x <= max_x and min_y <= max_y."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float

    @classmethod
    def from_size(cls, width: float, height: float) -> "Rect":
        return cls(0.0, width, 0.0, height)

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def contains(self, p: "Vector2D") -> bool:
        # half open, max_x / max_y are outside
        return self.min_x <= p.x < self.max_x and self.min_y <= p.y < self.max_y


@dataclass
class MarkerSettings:
    tail_color: str = "red"
    tail_length: float = 5.0


@dataclass
class DrawSettings:
    line_width: float = 1.0
    line_color: str = "#000"
    marker: Optional[MarkerSettings] = None


@dataclass
class Segment:
    """Drawable description of a vector placed at a point."""

    start: "Vector2D"
    end: "Vector2D"
    color: str = "#000"
    width: float = 1.0
    marker: Optional["Segment"] = None


DEFAULT_DRAW_SETTINGS = DrawSettings(marker=MarkerSettings())


class Vector2D:
    """
    Two dimensional vector.

    Plain methods (``add``, ``sub``, ``mul``, ``scale``, ``transform``,
    ``rotate``, ``normalize``, ``map``) return a new vector and leave the
    receiver untouched. The methods with a trailing underscore (``add_``,
    ``scale_``, ...) and the augmented operators modify the receiver in place
    and return it, so calls can be chained.

    Only mutate a vector you own: a temporary you just created or one no
    other object holds. Rays and flowlines keep references to the vectors they
    were built from, mutating those changes the ray.

    Parameters
    ----------
    x: float
        x-component.
    y: float
        y-component. The canvas y-axis points down.
    """

    __slots__ = ("x", "y")

    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.x = float(x)
        self.y = float(y)

    # ---- constructors ----
    @classmethod
    def zero(cls) -> "Vector2D":
        return cls(0.0, 0.0)

    @classmethod
    def one(cls) -> "Vector2D":
        return cls(1.0, 1.0)

    @classmethod
    def center(cls, rect: Rect) -> "Vector2D":
        return cls((rect.min_x + rect.max_x) / 2, (rect.min_y + rect.max_y) / 2)

    @classmethod
    def random(cls, rect: Rect, rng: Optional[np.random.Generator] = None) -> "Vector2D":
        """Uniform random point in [min_x, max_x) x [min_y, max_y)."""
        if rng is None:
            rng = np.random.default_rng()
        return cls(rng.uniform(rect.min_x, rect.max_x), rng.uniform(rect.min_y, rect.max_y))

    @classmethod
    def from_angle(cls, angle: float) -> "Vector2D":
        return cls(math.cos(angle), math.sin(angle))

    @classmethod
    def from_noise(cls, n: float) -> "Vector2D":
        """
        Map a noise sample to a unit vector.

        The sample is clamped to [-1, 1] and mapped linearly onto the angle
        range [0, 2*pi]: -1 and 1 both give (1, 0), 0 gives (-1, 0).
        """
        n = max(-1.0, min(1.0, n))
        return cls.from_angle((n + 1) * math.pi)

    def copy(self) -> "Vector2D":
        return Vector2D(self.x, self.y)

    # ---- value operations ----
    def add(self, v: "Vector2D") -> "Vector2D":
        return Vector2D(self.x + v.x, self.y + v.y)

    def sub(self, v: "Vector2D") -> "Vector2D":
        return Vector2D(self.x - v.x, self.y - v.y)

    def mul(self, v: "Vector2D") -> "Vector2D":
        return Vector2D(self.x * v.x, self.y * v.y)

    def scale(self, s: float) -> "Vector2D":
        return Vector2D(self.x * s, self.y * s)

    def transform(self, a: float, b: float, c: float, d: float) -> "Vector2D":
        """
        Apply the linear map

            | a c |
            | b d |

        to the vector.
        """
        return Vector2D(self.x * a + self.y * c, self.x * b + self.y * d)

    def rotate(self, angle: float) -> "Vector2D":
        """
        Rotate counter-clockwise by ``angle`` radians.

        The canvas y-axis points down, so the rotation shows clockwise on
        screen.
        """
        cos, sin = math.cos(angle), math.sin(angle)
        return self.transform(cos, sin, -sin, cos)

    def normalize(self) -> "Vector2D":
        """Unit vector in the same direction. The zero vector stays zero."""
        length = self.length()
        return Vector2D.zero() if length == 0 else self.scale(1 / length)

    def map(self, fn: Callable[[float, int], float]) -> "Vector2D":
        return Vector2D(fn(self.x, 0), fn(self.y, 1))

    # ---- in-place operations ----
    def set_(self, x: float, y: float) -> "Vector2D":
        self.x = float(x)
        self.y = float(y)
        return self

    def add_(self, v: "Vector2D") -> "Vector2D":
        self.x += v.x
        self.y += v.y
        return self

    def sub_(self, v: "Vector2D") -> "Vector2D":
        self.x -= v.x
        self.y -= v.y
        return self

    def mul_(self, v: "Vector2D") -> "Vector2D":
        self.x *= v.x
        self.y *= v.y
        return self

    def scale_(self, s: float) -> "Vector2D":
        self.x *= s
        self.y *= s
        return self

    def transform_(self, a: float, b: float, c: float, d: float) -> "Vector2D":
        x, y = self.x, self.y
        self.x = x * a + y * c
        self.y = x * b + y * d
        return self

    def rotate_(self, angle: float) -> "Vector2D":
        cos, sin = math.cos(angle), math.sin(angle)
        return self.transform_(cos, sin, -sin, cos)

    def normalize_(self) -> "Vector2D":
        length = self.length()
        if length == 0:
            return self.set_(0.0, 0.0)
        return self.scale_(1 / length)

    def map_(self, fn: Callable[[float, int], float]) -> "Vector2D":
        self.x = float(fn(self.x, 0))
        self.y = float(fn(self.y, 1))
        return self

    # ---- queries ----
    def angle(self) -> float:
        return math.atan2(self.y, self.x)

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def length_sqr(self) -> float:
        return self.x * self.x + self.y * self.y

    def to(self, v: "Vector2D") -> "Vector2D":
        """Vector pointing from self to v."""
        return v.sub(self)

    def dist_to(self, v: "Vector2D") -> float:
        return self.to(v).length()

    def dir_to(self, v: "Vector2D") -> "Vector2D":
        return self.to(v).normalize()

    def dot(self, v: "Vector2D") -> float:
        return self.x * v.x + self.y * v.y

    def cross(self, v: "Vector2D") -> float:
        """Scalar 2D cross product. Positive if v lies counter-clockwise of self."""
        return self.x * v.y - self.y * v.x

    def eq(self, v: "Vector2D", epsilon: float = 1e-6) -> bool:
        return abs(self.x - v.x) <= epsilon and abs(self.y - v.y) <= epsilon

    # ---- conversions ----
    def to_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y], dtype=float)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}

    def segment(self, origin: "Vector2D", settings: Optional[DrawSettings] = None) -> Segment:
        """
        Describe the vector drawn at ``origin`` as a line segment.

        If the settings carry a marker, the segment gets a perpendicular tail
        of ``tail_length`` centered on ``origin``.
        """
        if settings is None:
            settings = DEFAULT_DRAW_SETTINGS
        seg = Segment(origin.copy(), origin.add(self), settings.line_color, settings.line_width)
        if settings.marker is not None:
            tail = self.normalize().rotate_(math.pi / 2).scale_(settings.marker.tail_length)
            start = origin.sub(tail.scale(0.5))
            seg.marker = Segment(start, start.add(tail), settings.marker.tail_color, 1.0)
        return seg

    # ---- python protocol ----
    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    def __eq__(self, other) -> bool:
        if not isinstance(other, Vector2D):
            return NotImplemented
        return self.x == other.x and self.y == other.y

    __hash__ = None  # mutable

    def __add__(self, v: "Vector2D") -> "Vector2D":
        return self.add(v)

    def __sub__(self, v: "Vector2D") -> "Vector2D":
        return self.sub(v)

    def __mul__(self, s: float) -> "Vector2D":
        return self.scale(s)

    __rmul__ = __mul__

    def __neg__(self) -> "Vector2D":
        return self.scale(-1)

    def __iadd__(self, v: "Vector2D") -> "Vector2D":
        return self.add_(v)

    def __isub__(self, v: "Vector2D") -> "Vector2D":
        return self.sub_(v)

    def __imul__(self, s: float) -> "Vector2D":
        return self.scale_(s)

    def __abs__(self) -> float:
        return self.length()

    def __repr__(self) -> str:
        return f"Vector2D({self.x:.3f}, {self.y:.3f})"
