import logging
from typing import Iterable, List, Optional, Protocol, Tuple

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle

from flowart.geometry import Ray2D, Segment, Vector2D

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    """Drawing surface contract used by the flow field and the geometry types."""

    def line(self, start: Vector2D, end: Vector2D, color: str, width: float) -> None:
        ...

    def polyline(self, points: np.ndarray, color: str, width: float) -> None:
        """Draw an open polyline through an (N, 2) array of points."""
        ...

    def point(self, center: Vector2D, radius: float, color: str) -> None:
        ...


def draw_segment(renderer: Renderer, segment: Segment) -> None:
    renderer.line(segment.start, segment.end, segment.color, segment.width)
    if segment.marker is not None:
        draw_segment(renderer, segment.marker)


def draw_point(renderer: Renderer, p: Vector2D, radius: float = 2.0, color: str = "#000") -> None:
    renderer.point(p, radius, color)


def draw_origin(renderer: Renderer, ray: Ray2D, radius: float = 2.0, color: str = "#000") -> None:
    renderer.point(ray.origin, radius, color)


def draw_intersection(
    renderer: Renderer, ray: Ray2D, other: Ray2D, radius: float = 2.0, color: str = "#000"
) -> Optional[Tuple[Vector2D, float]]:
    """Mark where ``ray`` crosses ``other``. Nothing is drawn on a miss."""
    hit = ray.intersect(other)
    if hit is not None:
        renderer.point(hit[0], radius, color)
    return hit


def draw_closest_intersection(
    renderer: Renderer,
    ray: Ray2D,
    rays: Iterable[Ray2D],
    radius: float = 2.0,
    color: str = "#f00",
) -> Optional[Tuple[Vector2D, Ray2D, float]]:
    """
    Mark the closest crossing of ``ray`` with any of ``rays``.

    Returns the result of ``Ray2D.intersect_closest``; nothing is drawn when
    it is None.
    """
    hit = ray.intersect_closest(rays)
    if hit is not None:
        renderer.point(hit[0], radius, color)
    return hit


class SvgRenderer:
    """
    Collects drawing calls and writes them as an SVG document.

    Canvas coordinates are used as-is, the SVG y-axis points down like the
    canvas.
    """

    def __init__(self, width: float, height: float, background: Optional[str] = None):
        self.width = width
        self.height = height
        self.background = background
        self.elements: List[str] = []

    def line(self, start, end, color="#000", width=1.0):
        self.elements.append(
            f'<line x1="{start.x:.6g}" y1="{start.y:.6g}" x2="{end.x:.6g}" y2="{end.y:.6g}" '
            f'stroke="{color}" stroke-width="{width}" />'
        )

    def polyline(self, points, color="#000", width=1.0):
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        if len(points) < 2:
            return
        d = f"M {points[0, 0]:.6g} {points[0, 1]:.6g} "
        d += " ".join(f"L {x:.6g} {y:.6g}" for x, y in points[1:])
        self.elements.append(
            f'<path d="{d}" stroke="{color}" stroke-width="{width}" fill="none" />'
        )

    def point(self, center, radius=2.0, color="#000"):
        self.elements.append(
            f'<circle cx="{center.x:.6g}" cy="{center.y:.6g}" r="{radius}" fill="{color}" />'
        )

    def clear(self):
        self.elements.clear()

    def to_string(self) -> str:
        parts = [
            f'<svg xmlns="http://www.w3.org/2000/svg" width="{self.width}" '
            f'height="{self.height}" viewBox="0 0 {self.width} {self.height}">'
        ]
        if self.background:
            parts.append(
                f'<rect x="0" y="0" width="{self.width}" height="{self.height}" '
                f'fill="{self.background}" />'
            )
        parts.extend(self.elements)
        parts.append("</svg>")
        return "\n".join(parts) + "\n"

    def write(self, file):
        with open(file, "w", encoding="utf-8") as f:
            f.write(self.to_string())
        logger.info(f"Wrote {len(self.elements)} elements to {file}")


class MatplotlibRenderer:
    """Draws onto a matplotlib axes with the y-axis flipped to match the canvas."""

    def __init__(
        self,
        ax=None,
        width: Optional[float] = None,
        height: Optional[float] = None,
        background: Optional[str] = None,
    ):
        if ax is None:
            _, ax = plt.subplots(figsize=(420 / 25.4, 297 / 25.4))
        self.ax = ax
        self.ax.set_aspect("equal")
        if width is not None and height is not None:
            self.ax.set_xlim(0, width)
            self.ax.set_ylim(height, 0)
        elif not self.ax.yaxis_inverted():
            self.ax.invert_yaxis()
        if background:
            self.ax.set_facecolor(background)
        self.ax.axis("off")

    def line(self, start, end, color="#000", width=1.0):
        self.ax.plot([start.x, end.x], [start.y, end.y], color=color, linewidth=width)

    def polyline(self, points, color="#000", width=1.0):
        points = np.asarray(points, dtype=float).reshape(-1, 2)
        if len(points) < 2:
            return
        self.ax.plot(points[:, 0], points[:, 1], color=color, linewidth=width)

    def point(self, center, radius=2.0, color="#000"):
        self.ax.add_patch(Circle((center.x, center.y), radius, color=color))

    def savefig(self, file, **kwargs):
        self.ax.figure.savefig(file, **kwargs)
        logger.info(f"Saved figure to {file}")
