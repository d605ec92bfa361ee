"""Bhargava et al. (2004) muscle metabolic rate engine.

Muscle metabolic power is the rate at which heat is liberated plus the rate
at which work is done:

    Edot = Bdot + sum over muscles (Adot + Mdot + Sdot + Wdot)

- Bdot: basal heat rate (W), whole body, added once per evaluation
- Adot: activation heat rate (W)
- Mdot: maintenance heat rate (W)
- Sdot: shortening heat rate (W)
- Wdot: mechanical work rate (W)

Positive fiber velocity is lengthening (eccentric), negative is shortening
(concentric). The engine is a set of pure functions: `compute_muscle_rates`
evaluates every muscle at once on numpy arrays (one row per muscle),
`compute_muscle_rate` is the single-muscle convenience wrapper.
"""
from dataclasses import dataclass, field, fields
from typing import Dict
import math

import numpy as np

from muscle_energetics.bhargava.config import MINIMUM_HEAT_RATE, PROBE_DEFAULTS, SHORTENING_CONSTANTS
from muscle_energetics.bhargava.curves import PiecewiseLinearCurve
from muscle_energetics.bhargava.errors import ComputationError, ConfigurationError
from muscle_energetics.bhargava.utils import as_finite_array, is_finite_number, require_positive

RATE_KEYS = ('activation', 'maintenance', 'shortening', 'mechanical_work', 'total_heat_rate', 'net_rate')

_TOGGLES = (
    'activation_rate_on',
    'maintenance_rate_on',
    'shortening_rate_on',
    'basal_rate_on',
    'mechanical_work_rate_on',
    'enforce_minimum_heat_rate_per_muscle',
    'use_force_dependent_shortening_prop_constant',
)


@dataclass
class MetabolicProbeConfig:
    """Probe-level switches shared by every muscle.

    Defaults come from `config.PROBE_DEFAULTS`.
    """
    activation_rate_on: bool = PROBE_DEFAULTS['activation_rate_on']
    maintenance_rate_on: bool = PROBE_DEFAULTS['maintenance_rate_on']
    shortening_rate_on: bool = PROBE_DEFAULTS['shortening_rate_on']
    basal_rate_on: bool = PROBE_DEFAULTS['basal_rate_on']
    mechanical_work_rate_on: bool = PROBE_DEFAULTS['mechanical_work_rate_on']
    enforce_minimum_heat_rate_per_muscle: bool = PROBE_DEFAULTS['enforce_minimum_heat_rate_per_muscle']
    use_force_dependent_shortening_prop_constant: bool = PROBE_DEFAULTS['use_force_dependent_shortening_prop_constant']
    basal_coefficient: float = PROBE_DEFAULTS['basal_coefficient']
    basal_exponent: float = PROBE_DEFAULTS['basal_exponent']
    maintenance_fiber_length_curve: PiecewiseLinearCurve = field(default_factory=PiecewiseLinearCurve.maintenance_default)

    @classmethod
    def with_terms(cls, activation_rate_on: bool, maintenance_rate_on: bool, shortening_rate_on: bool,
                   basal_rate_on: bool, mechanical_work_rate_on: bool) -> 'MetabolicProbeConfig':
        return cls(
            activation_rate_on=activation_rate_on,
            maintenance_rate_on=maintenance_rate_on,
            shortening_rate_on=shortening_rate_on,
            basal_rate_on=basal_rate_on,
            mechanical_work_rate_on=mechanical_work_rate_on,
        )

    @property
    def minimum_heat_rate_active(self) -> bool:
        """Floor only applies when all three heat terms are computed."""
        return bool(self.enforce_minimum_heat_rate_per_muscle
                    and self.activation_rate_on
                    and self.maintenance_rate_on
                    and self.shortening_rate_on)

    def validate(self) -> None:
        for name in _TOGGLES:
            if not isinstance(getattr(self, name), (bool, np.bool_)):
                raise ConfigurationError(f"{name} must be a bool, got {getattr(self, name)!r}")
        require_positive(self.basal_coefficient, 'basal_coefficient', ConfigurationError)
        if not is_finite_number(self.basal_exponent):
            raise ConfigurationError(f"basal_exponent must be finite, got {self.basal_exponent!r}")
        if not isinstance(self.maintenance_fiber_length_curve, PiecewiseLinearCurve):
            raise ConfigurationError('maintenance_fiber_length_curve must be a PiecewiseLinearCurve')


@dataclass(frozen=True)
class MuscleState:
    """Per-step scalars the host supplies for one muscle.

    `activation` is carried for completeness; it only enters the rates
    through the fiber forces.
    """
    excitation: float
    fiber_velocity: float
    active_fiber_force: float
    active_isometric_fiber_force: float
    passive_fiber_force: float
    normalized_fiber_length: float
    activation: float = math.nan


@dataclass(frozen=True)
class MuscleRateBreakdown:
    """Heat and work rates (W) of one muscle. Disabled terms are 0.0.

    `total_heat_rate` is Adot + Mdot + Sdot after the minimum heat floor;
    the individual terms are never clamped.
    """
    activation: float
    maintenance: float
    shortening: float
    mechanical_work: float
    total_heat_rate: float
    net_rate: float

    def as_dict(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def twitch_excitation(excitation, fiber_type_ratio):
    """Slow and fast twitch recruitment factors.

    slow = r * sin(pi/2 * u), fast = (1 - r) * (1 - cos(pi/2 * u)).
    Both are exactly zero at u = 0.
    """
    u = np.asarray(excitation, dtype=float)
    r = np.asarray(fiber_type_ratio, dtype=float)
    slow = r * np.sin(0.5 * np.pi * u)
    fast = (1.0 - r) * (1.0 - np.cos(0.5 * np.pi * u))
    return slow, fast


def shortening_prop_constant(fiber_velocity, active_fiber_force, active_isometric_fiber_force,
                             passive_fiber_force, force_dependent):
    """alpha for Sdot = -alpha * v, chosen per velocity branch."""
    v = np.asarray(fiber_velocity, dtype=float)
    f_ce = np.asarray(active_fiber_force, dtype=float)
    lengthening = v >= 0.0
    if force_dependent:
        f_iso = np.asarray(active_isometric_fiber_force, dtype=float)
        alpha_len = (SHORTENING_CONSTANTS['force_dependent_isometric'] * f_iso
                     + SHORTENING_CONSTANTS['force_dependent_active'] * f_ce)
        alpha_short = SHORTENING_CONSTANTS['force_dependent_shortening'] * f_ce
    else:
        f_pas = np.asarray(passive_fiber_force, dtype=float)
        alpha_len = SHORTENING_CONSTANTS['constant_total_force'] * (f_ce + f_pas)
        alpha_short = np.zeros_like(f_ce)
    return np.where(lengthening, alpha_len, alpha_short)


def _parameter_column(values, name, n):
    """Finite per-muscle parameter column; a single value applies to all rows."""
    arr = as_finite_array(values, name)
    if arr.shape[0] == 1:
        return np.full(n, arr[0])
    if arr.shape[0] != n:
        raise ComputationError(f"{name} has {arr.shape[0]} entries, expected {n}")
    return arr


def compute_muscle_rates(excitation, fiber_velocity, active_fiber_force, active_isometric_fiber_force,
                         passive_fiber_force, normalized_fiber_length, mass, fiber_type_ratio,
                         activation_coeff_slow, activation_coeff_fast, maintenance_coeff_slow,
                         maintenance_coeff_fast, config: MetabolicProbeConfig) -> Dict[str, np.ndarray]:
    """Vectorized per-muscle heat and work rates.

    State and mass inputs have one entry per muscle. The fiber type ratio
    and the coefficients may instead be a single value shared by all rows.
    Returns a dict keyed by `RATE_KEYS`, each an (N,) array in W. Raises
    ComputationError for unresolved or non-positive mass, non-finite or
    mis-sized inputs and excitation outside [0, 1].
    """
    m = np.atleast_1d(np.asarray(mass, dtype=float))
    if np.any(~np.isfinite(m) | (m <= 0.0)):
        bad = np.flatnonzero(~np.isfinite(m) | (m <= 0.0))
        raise ComputationError(f"muscle mass unresolved or non-positive at rows {bad.tolist()}; bind the probe first")
    n = m.shape[0]

    u = as_finite_array(excitation, 'excitation')
    v = as_finite_array(fiber_velocity, 'fiber_velocity')
    f_ce = as_finite_array(active_fiber_force, 'active_fiber_force')
    f_iso = as_finite_array(active_isometric_fiber_force, 'active_isometric_fiber_force')
    f_pas = as_finite_array(passive_fiber_force, 'passive_fiber_force')
    l_norm = as_finite_array(normalized_fiber_length, 'normalized_fiber_length')
    for name, arr in (('excitation', u), ('fiber_velocity', v), ('active_fiber_force', f_ce),
                      ('active_isometric_fiber_force', f_iso), ('passive_fiber_force', f_pas),
                      ('normalized_fiber_length', l_norm)):
        if arr.shape[0] != n:
            raise ComputationError(f"{name} has {arr.shape[0]} entries, expected {n}")
    if np.any((u < 0.0) | (u > 1.0)):
        bad = np.flatnonzero((u < 0.0) | (u > 1.0))
        raise ComputationError(f"excitation outside [0, 1] at rows {bad.tolist()}")

    r = _parameter_column(fiber_type_ratio, 'fiber_type_ratio', n)
    a_slow = _parameter_column(activation_coeff_slow, 'activation_coeff_slow', n)
    a_fast = _parameter_column(activation_coeff_fast, 'activation_coeff_fast', n)
    m_slow = _parameter_column(maintenance_coeff_slow, 'maintenance_coeff_slow', n)
    m_fast = _parameter_column(maintenance_coeff_fast, 'maintenance_coeff_fast', n)

    zeros = np.zeros(n, dtype=float)
    slow, fast = twitch_excitation(u, r)

    if config.activation_rate_on:
        a_dot = m * (a_slow * slow + a_fast * fast)
    else:
        a_dot = zeros.copy()

    if config.maintenance_rate_on:
        f_len = config.maintenance_fiber_length_curve(l_norm)
        m_dot = m * f_len * (m_slow * slow + m_fast * fast)
    else:
        m_dot = zeros.copy()

    if config.shortening_rate_on:
        alpha = shortening_prop_constant(v, f_ce, f_iso, f_pas, config.use_force_dependent_shortening_prop_constant)
        s_dot = -alpha * v
    else:
        s_dot = zeros.copy()

    if config.mechanical_work_rate_on:
        w_dot = np.where(v >= 0.0, -f_ce * v, 0.0)
    else:
        w_dot = zeros.copy()

    heat = a_dot + m_dot + s_dot
    if config.minimum_heat_rate_active:
        heat = np.where(heat / m < MINIMUM_HEAT_RATE, MINIMUM_HEAT_RATE * m, heat)

    net = heat + w_dot
    if not np.all(np.isfinite(net)):
        raise ComputationError('non-finite metabolic rate computed')

    return {
        'activation': a_dot,
        'maintenance': m_dot,
        'shortening': s_dot,
        'mechanical_work': w_dot,
        'total_heat_rate': heat,
        'net_rate': net,
    }


def compute_muscle_rate(state: MuscleState, params, config: MetabolicProbeConfig) -> MuscleRateBreakdown:
    """Rates for a single muscle from its state and (bound) parameters."""
    out = compute_muscle_rates(
        [state.excitation], [state.fiber_velocity], [state.active_fiber_force],
        [state.active_isometric_fiber_force], [state.passive_fiber_force], [state.normalized_fiber_length],
        [params.resolved_mass], [params.fiber_type_ratio],
        [params.activation_coeff_slow], [params.activation_coeff_fast],
        [params.maintenance_coeff_slow], [params.maintenance_coeff_fast],
        config,
    )
    return MuscleRateBreakdown(**{k: float(out[k][0]) for k in RATE_KEYS})


def compute_basal_rate(body_mass: float, config: MetabolicProbeConfig) -> float:
    """Whole-body basal heat rate, Bdot = coefficient * body_mass ** exponent."""
    if not config.basal_rate_on:
        return 0.0
    mass = require_positive(body_mass, 'body_mass', ComputationError)
    return float(config.basal_coefficient * mass ** config.basal_exponent)


def aggregate(basal_rate: float, net_rates) -> float:
    """Basal rate plus the sum of per-muscle net rates, summed in row order."""
    rates = np.asarray(net_rates, dtype=float)
    total = float(basal_rate) + float(np.sum(rates))
    if not math.isfinite(total):
        raise ComputationError(f"non-finite total metabolic rate: {total!r}")
    return total
