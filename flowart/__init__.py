from flowart.geometry import DrawSettings, MarkerSettings, Ray2D, Rect, Segment, Vector2D
from flowart.noise import GridNoise
from flowart.flowfield import Canvas, FlowField, Flowline, TraceConfig
