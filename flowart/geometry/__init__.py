from flowart.geometry.vector2d import (
    DrawSettings,
    MarkerSettings,
    Rect,
    Segment,
    Vector2D,
)
from flowart.geometry.ray2d import Ray2D
