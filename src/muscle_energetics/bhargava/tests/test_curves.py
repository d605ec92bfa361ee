import numpy as np
import pytest

from muscle_energetics.bhargava.curves import PiecewiseLinearCurve
from muscle_energetics.bhargava.errors import ConfigurationError


def test_default_maintenance_curve():
    f = PiecewiseLinearCurve.maintenance_default()
    assert f.points == ((0.0, 0.5), (0.5, 0.5), (1.0, 1.0), (1.5, 0.5), (10.0, 0.5))
    assert float(f(1.0)) == pytest.approx(1.0)
    assert float(f(0.75)) == pytest.approx(0.75)
    assert float(f(1.25)) == pytest.approx(0.75)
    assert float(f(0.2)) == pytest.approx(0.5)


def test_curve_extrapolates_linearly():
    f = PiecewiseLinearCurve([0.0, 1.0], [0.0, 2.0])
    assert np.allclose(f([-1.0, 0.5, 3.0]), [-2.0, 1.0, 6.0])
    flat = PiecewiseLinearCurve.maintenance_default()
    assert float(flat(20.0)) == pytest.approx(0.5)
    assert float(flat(-1.0)) == pytest.approx(0.5)


@pytest.mark.parametrize('x,y', [
    ([0.0], [1.0]),
    ([0.0, 1.0], [1.0]),
    ([1.0, 0.0], [1.0, 1.0]),
    ([0.0, 0.0], [1.0, 1.0]),
    ([0.0, np.nan], [1.0, 1.0]),
])
def test_curve_rejects_malformed_points(x, y):
    with pytest.raises(ConfigurationError):
        PiecewiseLinearCurve(x, y)


def test_curve_equality():
    assert PiecewiseLinearCurve.maintenance_default() == PiecewiseLinearCurve.maintenance_default()
    assert PiecewiseLinearCurve([0, 1], [0, 1]) != PiecewiseLinearCurve([0, 1], [0, 2])
