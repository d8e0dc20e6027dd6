import math
from typing import Iterable, Optional, Tuple

from flowart.geometry.vector2d import DrawSettings, Rect, Segment, Vector2D


_MIN_DIR_LEN_SQR = 1e-12


class Ray2D:
    """
    Ray starting at ``origin`` heading along ``direction``.

    p(s) = origin + direction * s,  s > 0

    If ``finite`` is set the ray ends at s = 1, i.e. it is the segment from
    origin to origin + direction. The direction does not have to be a unit
    vector. The ray keeps the vectors it is given, it does not copy them.
    """

    __slots__ = ("origin", "direction", "finite")

    def __init__(self, origin: Vector2D, direction: Vector2D, finite: bool = False):
        self.origin = origin
        self.direction = direction
        self.finite = finite

    @classmethod
    def center(cls, rect: Rect, finite: bool = False) -> "Ray2D":
        """Ray from the center of ``rect`` pointing along +x."""
        return cls(Vector2D.center(rect), Vector2D.from_angle(0), finite)

    def point_at(self, s: float) -> Vector2D:
        return self.origin.add(self.direction.scale(s))

    def end(self) -> Vector2D:
        return self.origin.add(self.direction)

    def raycast(self, rect: Rect) -> Optional[Tuple[Vector2D, float]]:
        """
        Return the first crossing of the rectangle border and its ray parameter.

        Parameters
        ----------
        rect: Rect
            Rectangle to cast against.

        Returns
        -------
        hit: tuple of (Vector2D, float) or None
            Crossing point and parameter s. None if the direction is
            degenerate, the border lies behind the ray or a finite ray ends
            before reaching it.
        """
        d = self.direction
        if d.length_sqr() < _MIN_DIR_LEN_SQR:
            return None

        scalars = []
        # right side
        if d.x > 0:
            scalars.append((rect.max_x - self.origin.x) / d.x)
        # left side
        if d.x < 0:
            scalars.append((rect.min_x - self.origin.x) / d.x)
        # max_y side (bottom on canvas)
        if d.y > 0:
            scalars.append((rect.max_y - self.origin.y) / d.y)
        # min_y side (top on canvas)
        if d.y < 0:
            scalars.append((rect.min_y - self.origin.y) / d.y)

        valid = [s for s in scalars if s > 0 and math.isfinite(s)]
        if not valid:
            return None
        s = min(valid)
        if self.finite and s > 1:
            return None
        return self.point_at(s), s

    def intersect(self, other: "Ray2D") -> Optional[Tuple[Vector2D, float]]:
        """
        Intersect with another ray.

        Solves origin + direction * s = other.origin + other.direction * t.
        Returns the intersection point and s, or None if the rays are parallel,
        the crossing lies behind either origin, or beyond the end of a finite
        ray.
        """
        det = self.direction.cross(other.direction)
        # parallel or collinear
        if det == 0:
            return None

        to_other = self.origin.to(other.origin)
        s = to_other.cross(other.direction) / det
        t = to_other.cross(self.direction) / det
        if s <= 0 or t <= 0:
            return None

        point = self.point_at(s)
        if self.finite and self.origin.to(point).length_sqr() > self.direction.length_sqr():
            return None
        if other.finite and other.origin.to(point).length_sqr() > other.direction.length_sqr():
            return None
        return point, s

    def intersect_closest(
        self, rays: Iterable["Ray2D"]
    ) -> Optional[Tuple[Vector2D, "Ray2D", float]]:
        """
        Closest intersection with any of ``rays``.

        Rays with exactly the same origin and direction as this one are
        skipped. On equal parameters the first ray wins.
        """
        closest = None
        min_s = math.inf
        for ray in rays:
            if ray.origin == self.origin and ray.direction == self.direction:
                continue
            hit = self.intersect(ray)
            if hit is not None and hit[1] < min_s:
                min_s = hit[1]
                closest = (hit[0], ray, min_s)
        return closest

    def segment(self, settings: Optional[DrawSettings] = None) -> Segment:
        return self.direction.segment(self.origin, settings)

    def __repr__(self) -> str:
        return f"Ray2D({self.origin!r}, {self.direction!r}, finite={self.finite})"
