import logging
import pickle
from dataclasses import dataclass
from functools import partial
from multiprocessing import Pool, cpu_count
from typing import Callable, List, Optional, Sequence, Tuple

import numpy as np
from tqdm import tqdm

from flowart.geometry import DrawSettings, Ray2D, Rect, Vector2D
from flowart.noise import GridNoise
from flowart.render import draw_segment

logger = logging.getLogger(__name__)

NoiseFn = Callable[[float, float], float]

DEFAULT_COLOR = "#000000"
NOISE_RAY_LENGTH = 10.0


@dataclass
class Canvas:
    """Drawing surface size. Read on every call, so resizing takes effect immediately."""

    width: float
    height: float


@dataclass
class TraceConfig:
    segments: int = 100
    segment_len: float = 5.0
    n_jobs: int = 1
    line_width: float = 3.0


@dataclass
class Flowline:
    """
    A traced streamline.

    ``path`` holds one ray per step: the origin is a point on the line, the
    direction the unit field vector sampled there. ``reveal_index`` is the
    cursor used to draw the line piece by piece.
    """

    path: List[Ray2D]
    color: str = DEFAULT_COLOR
    reveal_index: int = 0

    def __len__(self) -> int:
        return len(self.path)

    def points(self) -> np.ndarray:
        return np.array([r.origin.to_tuple() for r in self.path], dtype=float).reshape(-1, 2)

    def revealed_points(self) -> np.ndarray:
        """Points of the prefix path[0 .. reveal_index]."""
        return self.points()[: min(self.reveal_index, len(self.path)) + 1]

    def advance(self) -> int:
        self.reveal_index = min(self.reveal_index + 1, len(self.path))
        return self.reveal_index

    @property
    def fully_revealed(self) -> bool:
        return self.reveal_index >= len(self.path) - 1


def trace_flowline(
    origin: Vector2D,
    noise: NoiseFn,
    smoothness: float,
    width: float,
    height: float,
    segments: int,
    segment_len: float,
) -> List[Ray2D]:
    """
    Follow the noise field from ``origin``.

    Parameters
    ----------
    origin: Vector2D
        Seed point, must lie inside the canvas. The path starts at a copy.
    noise: callable
        Noise function returning values in [-1, 1].
    smoothness: float
        Factor applied to coordinates before sampling.
    width, height: float
        Canvas size.
    segments: int
        Maximum number of steps after the seed.
    segment_len: float
        Distance covered per step.

    Returns
    -------
    path: list of Ray2D
        Between 1 and segments + 1 rays, all origins inside the canvas.
    """
    def direction_at(p: Vector2D) -> Vector2D:
        return Vector2D.from_noise(noise(p.x * smoothness, p.y * smoothness))

    bounds = Rect.from_size(width, height)
    path = [Ray2D(origin.copy(), direction_at(origin))]
    for _ in range(segments):
        last = path[-1]
        p = last.origin.add(last.direction.scale(segment_len))
        if not bounds.contains(p):
            break
        path.append(Ray2D(p, direction_at(p)))
    return path


def _trace_from_tuple(xy, **kwargs) -> List[Ray2D]:
    # picklable entry point for the worker pool
    return trace_flowline(Vector2D(*xy), **kwargs)


class FlowField:
    """
    Noise driven direction field on a canvas and the flowlines traced through it.

    Parameters
    ----------
    canvas : object with ``width`` and ``height``
        Bounds of the field. Read on every call.
    noise : callable, optional
        ``noise(x, y) -> float`` in [-1, 1]. Defaults to a ``GridNoise``
        seeded from ``rng``.
    smoothness : float
        Coordinates are multiplied by this before sampling the noise. Smaller
        values give slower changing directions.
    palette : sequence of str, optional
        Colors picked at random for new flowlines.
    rng : numpy.random.Generator, optional
        Source of randomness for seeds and colors.
    config : TraceConfig, optional
        Default tracing parameters.
    """

    _instance: Optional["FlowField"] = None

    @classmethod
    def create_instance(cls, *args, **kwargs) -> "FlowField":
        """Create the shared instance. Fails if it already exists."""
        if cls._instance is not None:
            raise RuntimeError("FlowField instance already exists")
        cls._instance = cls(*args, **kwargs)
        return cls._instance

    @classmethod
    def get_instance(cls) -> "FlowField":
        if cls._instance is None:
            raise RuntimeError("FlowField instance has to be created first")
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        cls._instance = None

    def __init__(
        self,
        canvas,
        noise: Optional[NoiseFn] = None,
        smoothness: float = 0.001,
        palette: Optional[Sequence[str]] = None,
        rng: Optional[np.random.Generator] = None,
        config: Optional[TraceConfig] = None,
    ):
        self.canvas = canvas
        self.rng = rng if rng is not None else np.random.default_rng()
        if noise is None:
            noise = GridNoise(seed=int(self.rng.integers(2**32)))
        self.noise = noise
        self.smoothness = smoothness
        if palette is not None and len(palette) == 0:
            raise ValueError("palette must contain at least one color")
        self.palette = list(palette) if palette is not None else None
        self.config = config if config is not None else TraceConfig()

        self._flowlines: List[Flowline] = []
        self._noise_rays: List[Ray2D] = []
        self._noise_rays_key: Optional[Tuple[float, float, float, float]] = None

    @property
    def smoothness(self) -> float:
        return self._smoothness

    @smoothness.setter
    def smoothness(self, value: float) -> None:
        if not value > 0:
            raise ValueError("smoothness must be positive")
        self._smoothness = float(value)

    @property
    def flowlines(self) -> Tuple[Flowline, ...]:
        return tuple(self._flowlines)

    def bounds(self) -> Rect:
        return Rect.from_size(self.canvas.width, self.canvas.height)

    def clear_flowlines(self) -> None:
        self._flowlines.clear()

    def sample_direction(self, p: Vector2D) -> Vector2D:
        """Unit field direction at ``p``."""
        return Vector2D.from_noise(self.noise(p.x * self._smoothness, p.y * self._smoothness))

    def _pick_color(self) -> str:
        if not self.palette:
            return DEFAULT_COLOR
        return self.palette[int(self.rng.integers(len(self.palette)))]

    def _trace_kwargs(self, segments: Optional[int], segment_len: Optional[float]) -> dict:
        segments = self.config.segments if segments is None else segments
        segment_len = self.config.segment_len if segment_len is None else segment_len
        if segments < 0:
            raise ValueError("segments must not be negative")
        if not segment_len > 0:
            raise ValueError("segment_len must be positive")
        return {
            "noise": self.noise,
            "smoothness": self._smoothness,
            "width": self.canvas.width,
            "height": self.canvas.height,
            "segments": int(segments),
            "segment_len": float(segment_len),
        }

    def flowline_from(
        self,
        origin: Vector2D,
        segments: Optional[int] = None,
        segment_len: Optional[float] = None,
    ) -> Flowline:
        """
        Trace a flowline starting at ``origin`` and add it to the field.

        The line follows the field for at most ``segments`` steps of length
        ``segment_len`` and stops early at the first point that would leave
        the canvas.
        """
        if not self.bounds().contains(origin):
            raise ValueError(f"origin {origin!r} lies outside the canvas")
        path = trace_flowline(origin, **self._trace_kwargs(segments, segment_len))
        line = Flowline(path, self._pick_color())
        self._flowlines.append(line)
        logger.debug(f"Traced flowline from {origin!r} with {len(path)} points")
        return line

    def seed_flowlines(
        self,
        n: int,
        segments: Optional[int] = None,
        segment_len: Optional[float] = None,
        n_jobs: Optional[int] = None,
        progress: bool = True,
    ) -> List[Flowline]:
        """
        Trace ``n`` flowlines from random seed points.

        With ``n_jobs > 1`` the tracing runs in a process pool, which needs a
        picklable noise function; a ``ValueError`` is raised before any
        worker starts otherwise. Colors are picked and lines are added in
        the calling process, in seed order.
        """
        kwargs = self._trace_kwargs(segments, segment_len)
        n_jobs = self.config.n_jobs if n_jobs is None else n_jobs
        if n_jobs > 1:
            try:
                pickle.dumps(self.noise)
            except (pickle.PicklingError, AttributeError, TypeError) as e:
                raise ValueError(
                    "noise function must be picklable to trace with n_jobs > 1"
                ) from e
        n_jobs = min(max(1, n_jobs), cpu_count())

        bounds = self.bounds()
        seeds = [Vector2D.random(bounds, self.rng) for _ in range(n)]
        logger.info(f"Seeding {n} flowlines using {n_jobs} process(es)")

        if n_jobs > 1:
            with Pool(n_jobs) as pool:
                results = pool.imap(
                    partial(_trace_from_tuple, **kwargs),
                    [s.to_tuple() for s in seeds],
                    chunksize=max(1, n // (4 * n_jobs)),
                )
                paths = list(
                    tqdm(results, total=n, desc="Tracing", unit="seed", disable=not progress)
                )
        else:
            paths = [
                trace_flowline(seed, **kwargs)
                for seed in tqdm(seeds, desc="Tracing", unit="seed", disable=not progress)
            ]

        lines = [Flowline(path, self._pick_color()) for path in paths]
        self._flowlines.extend(lines)
        return lines

    def draw_flowlines(self, renderer, line_width: Optional[float] = None) -> None:
        width = self.config.line_width if line_width is None else line_width
        for line in self._flowlines:
            renderer.polyline(line.points(), line.color, width)

    def draw_flowlines_segmentwise(self, renderer, line_width: Optional[float] = None) -> None:
        """
        Draw the revealed part of every flowline, then reveal one more segment.

        Each call moves every flowline's reveal index forward by one until it
        reaches the path length.
        """
        width = self.config.line_width if line_width is None else line_width
        for line in self._flowlines:
            renderer.polyline(line.revealed_points(), line.color, width)
            line.advance()

    def compute_noise_rays(self, resolution: float) -> List[Ray2D]:
        """
        Sample the field on a regular grid.

        The grid spacing is ``resolution`` times the canvas width and height.
        The result is cached and recomputed when the canvas size, the
        resolution or the smoothness changes.
        """
        if resolution < 0.01 or resolution > 1:
            raise ValueError("resolution must be a value between 0.01 and 1")

        width, height = self.canvas.width, self.canvas.height
        key = (width, height, resolution, self._smoothness)
        if key == self._noise_rays_key:
            return self._noise_rays

        step_x = width * resolution
        step_y = height * resolution
        rays = []
        for y in np.arange(0, height, step_y):
            for x in np.arange(0, width, step_x):
                p = Vector2D(x, y)
                rays.append(Ray2D(p, self.sample_direction(p).scale_(NOISE_RAY_LENGTH)))

        self._noise_rays = rays
        self._noise_rays_key = key
        logger.debug(f"Computed {len(rays)} noise rays for canvas {width}x{height}")
        return rays

    def noise_rays(self, resolution: float) -> Tuple[Ray2D, ...]:
        return tuple(self.compute_noise_rays(resolution))

    def draw_noise(
        self, renderer, resolution: float, settings: Optional[DrawSettings] = None
    ) -> None:
        for ray in self.compute_noise_rays(resolution):
            draw_segment(renderer, ray.segment(settings))
