"""Piecewise-linear scalar curves.

Used for the normalized fiber length dependence of the maintenance heat
rate. Values outside the tabulated range are extrapolated linearly from the
end segments.
"""
from typing import Sequence, Tuple

import numpy as np
from scipy.interpolate import interp1d

from muscle_energetics.bhargava.config import MAINTENANCE_CURVE_DEFAULT
from muscle_energetics.bhargava.errors import ConfigurationError


class PiecewiseLinearCurve:
    """Piecewise-linear function through a set of (x, y) points.

    `x` must be strictly increasing and hold at least two finite points.
    """

    def __init__(self, x: Sequence[float], y: Sequence[float]):
        xs = np.asarray(x, dtype=float)
        ys = np.asarray(y, dtype=float)
        if xs.ndim != 1 or ys.ndim != 1 or xs.shape != ys.shape:
            raise ConfigurationError(f"curve x and y must be 1-D and equal length, got {xs.shape} and {ys.shape}")
        if xs.size < 2:
            raise ConfigurationError('curve needs at least two points')
        if not (np.all(np.isfinite(xs)) and np.all(np.isfinite(ys))):
            raise ConfigurationError('curve points must be finite')
        if np.any(np.diff(xs) <= 0.0):
            raise ConfigurationError('curve x values must be strictly increasing')
        self.x = xs
        self.y = ys
        self._f = interp1d(xs, ys, kind='linear', fill_value='extrapolate', assume_sorted=True)

    @classmethod
    def maintenance_default(cls) -> 'PiecewiseLinearCurve':
        return cls(MAINTENANCE_CURVE_DEFAULT['x'], MAINTENANCE_CURVE_DEFAULT['y'])

    @property
    def points(self) -> Tuple[Tuple[float, float], ...]:
        return tuple(zip(self.x.tolist(), self.y.tolist()))

    def __call__(self, values):
        out = self._f(np.asarray(values, dtype=float))
        return np.asarray(out, dtype=float)

    def __eq__(self, other):
        if not isinstance(other, PiecewiseLinearCurve):
            return NotImplemented
        return np.array_equal(self.x, other.x) and np.array_equal(self.y, other.y)

    def __repr__(self):
        return f"PiecewiseLinearCurve(points={self.points!r})"
