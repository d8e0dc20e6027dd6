import numpy as np
from scipy.ndimage import gaussian_filter
from scipy.interpolate import RegularGridInterpolator


class GridNoise:
    """
    Coherent 2D value noise on a periodic lattice.

    A lattice of normal distributed values is smoothed with a wrapping
    gaussian filter, rescaled to [-1, 1] and interpolated bilinearly. The
    field repeats every ``size / frequency`` input units.

    Parameters
    ----------
    seed : int or None
        Seed for the lattice values. Equal seeds give equal fields.
    size : int
        Number of lattice cells per side.
    sigma : float
        Width of the smoothing kernel in lattice cells. Larger values give
        smoother fields.
    frequency : float
        Lattice cells per input unit.
    """

    def __init__(self, seed=None, size: int = 64, sigma: float = 3.0, frequency: float = 8.0):
        if size < 2:
            raise ValueError("size must be at least 2")
        if sigma <= 0 or frequency <= 0:
            raise ValueError("sigma and frequency must be positive")
        self.seed = seed
        self.size = size
        self.sigma = sigma
        self.frequency = frequency

        rng = np.random.default_rng(seed)
        lattice = gaussian_filter(rng.standard_normal((size, size)), sigma, mode="wrap")
        lattice -= lattice.mean()
        peak = np.abs(lattice).max()
        if peak > 0:
            lattice /= peak

        # repeat first row / column so the interpolation wraps around
        values = np.pad(lattice, ((0, 1), (0, 1)), mode="wrap")
        axis = np.arange(size + 1, dtype=float)
        self._interp = RegularGridInterpolator((axis, axis), values, method="linear")

    def sample(self, xs, ys) -> np.ndarray:
        """Vectorized noise lookup for coordinate arrays of equal shape."""
        xs = np.asarray(xs, dtype=float)
        ys = np.asarray(ys, dtype=float)
        gx = np.mod(xs * self.frequency, self.size)
        gy = np.mod(ys * self.frequency, self.size)
        pts = np.stack((gy.ravel(), gx.ravel()), axis=-1)
        return np.clip(self._interp(pts), -1.0, 1.0).reshape(xs.shape)

    def __call__(self, x: float, y: float) -> float:
        return float(self.sample(x, y))

    def __repr__(self) -> str:
        return (
            f"GridNoise(seed={self.seed}, size={self.size}, "
            f"sigma={self.sigma}, frequency={self.frequency})"
        )
