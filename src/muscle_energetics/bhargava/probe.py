"""Bound metabolic power probe and running probe operations.

`MetabolicPowerProbe` is what `binding.bind_probe` returns: an engine tied to
a host model whose parameter masses are already resolved. `evaluate(state)`
is pure; the running operations (integration, extrema) live in
`ProbeOperator`, which is fed the probe outputs step by step.
"""
from collections import OrderedDict
from dataclasses import replace
from typing import Dict, List, Optional, Sequence
import logging

import numpy as np

from muscle_energetics.bhargava.config import PROBE_OPERATIONS, REPORTING_MODES
from muscle_energetics.bhargava.curves import PiecewiseLinearCurve
from muscle_energetics.bhargava.engine import (
    MetabolicProbeConfig,
    MuscleRateBreakdown,
    RATE_KEYS,
    aggregate,
    compute_basal_rate,
    compute_muscle_rates,
)
from muscle_energetics.bhargava.errors import ComputationError, ConfigurationError
from muscle_energetics.bhargava.parameters import MuscleEnergeticsParameterSet
from muscle_energetics.bhargava.utils import is_finite_number

logger = logging.getLogger(__name__)

_DECOMPOSED_SUFFIXES = ('TOTAL', 'BASAL', 'ACTIVATION', 'MAINTENANCE', 'SHORTENING', 'MECHANICAL_WORK')


class MetabolicPowerProbe:
    """Whole-body metabolic power of a set of muscles.

    Parameters
    ----------
    name : str
        Probe name, used as the output label.
    config : MetabolicProbeConfig
    parameters : MuscleEnergeticsParameterSet
        Masses must already be resolved (see `binding.bind_probe`).
    model : host model
        Supplies `get_total_mass(state)` and `get_muscle_state(name, state)`.
    reporting : {'total', 'decomposed'}
    gain : float
        Multiplies every output channel.
    """

    def __init__(self, name: str, config: MetabolicProbeConfig, parameters: MuscleEnergeticsParameterSet,
                 model, reporting: str = 'total', gain: float = 1.0):
        if reporting not in REPORTING_MODES:
            raise ConfigurationError(f"reporting must be one of {REPORTING_MODES}, got {reporting!r}")
        if not is_finite_number(gain):
            raise ConfigurationError(f"gain must be finite, got {gain!r}")
        config.validate()
        self.name = name
        # settings are fixed once bound, like the parameter columns below
        curve = config.maintenance_fiber_length_curve
        curve = PiecewiseLinearCurve(curve.x.copy(), curve.y.copy())
        self.config = replace(config, maintenance_fiber_length_curve=curve)
        self.model = model
        self.reporting = reporting
        self.gain = float(gain)
        self._names = parameters.names()
        # snapshot so later edits to the set cannot leak into evaluation
        self._columns = parameters.as_arrays()
        logger.debug('probe %s: %d muscles, reporting=%s, gain=%s', name, len(self._names), reporting, self.gain)

    @property
    def muscle_names(self):
        return self._names

    @property
    def muscle_masses(self) -> Dict[str, float]:
        return OrderedDict(zip(self._names, self._columns['mass'].tolist()))

    def num_output_channels(self) -> int:
        return 1 if self.reporting == 'total' else len(_DECOMPOSED_SUFFIXES)

    def output_labels(self) -> List[str]:
        if self.reporting == 'total':
            return [self.name]
        return [f"{self.name}_{suffix}" for suffix in _DECOMPOSED_SUFFIXES]

    def _gather_states(self, state) -> Dict[str, np.ndarray]:
        keys = ('excitation', 'fiber_velocity', 'active_fiber_force', 'active_isometric_fiber_force',
                'passive_fiber_force', 'normalized_fiber_length')
        cols = {k: np.empty(len(self._names), dtype=float) for k in keys}
        for i, name in enumerate(self._names):
            try:
                ms = self.model.get_muscle_state(name, state)
            except KeyError as e:
                raise ComputationError(f"no state supplied for bound muscle '{name}'") from e
            for k in keys:
                cols[k][i] = getattr(ms, k)
        return cols

    def compute_rates(self, state) -> Dict[str, np.ndarray]:
        """Per-muscle rate arrays (row order = parameter set order)."""
        s = self._gather_states(state)
        c = self._columns
        return compute_muscle_rates(
            s['excitation'], s['fiber_velocity'], s['active_fiber_force'], s['active_isometric_fiber_force'],
            s['passive_fiber_force'], s['normalized_fiber_length'],
            c['mass'], c['fiber_type_ratio'],
            c['activation_coeff_slow'], c['activation_coeff_fast'],
            c['maintenance_coeff_slow'], c['maintenance_coeff_fast'],
            self.config,
        )

    def muscle_breakdowns(self, state) -> Dict[str, MuscleRateBreakdown]:
        rates = self.compute_rates(state)
        out = OrderedDict()
        for i, name in enumerate(self._names):
            out[name] = MuscleRateBreakdown(**{k: float(rates[k][i]) for k in RATE_KEYS})
        return out

    def evaluate(self, state) -> np.ndarray:
        """Output channel values for the current host state."""
        rates = self.compute_rates(state)
        basal = compute_basal_rate(self.model.get_total_mass(state), self.config)
        total = aggregate(basal, rates['net_rate'])
        if self.reporting == 'total':
            values = np.array([total], dtype=float)
        else:
            values = np.array([
                total,
                basal,
                float(np.sum(rates['activation'])),
                float(np.sum(rates['maintenance'])),
                float(np.sum(rates['shortening'])),
                float(np.sum(rates['mechanical_work'])),
            ], dtype=float)
        return self.gain * values


class ProbeOperator:
    """Running operation applied to successive probe outputs.

    - 'value': pass-through
    - 'integrate': trapezoidal integral over host time (W -> J)
    - 'minimum' / 'maximum': running extrema
    - 'minabs' / 'maxabs': running extrema of the absolute value
    """

    def __init__(self, operation: str = 'value', initial_conditions: Optional[Sequence[float]] = None):
        if operation not in PROBE_OPERATIONS:
            raise ConfigurationError(f"operation must be one of {PROBE_OPERATIONS}, got {operation!r}")
        self.operation = operation
        self.initial_conditions = None if initial_conditions is None else np.asarray(initial_conditions, dtype=float)
        self.reset()

    def reset(self):
        self._t_prev = None
        self._v_prev = None
        self._acc = None

    def update(self, time: float, values) -> np.ndarray:
        v = np.asarray(values, dtype=float)
        if self.operation == 'value':
            return v.copy()

        if self._t_prev is not None:
            if v.shape != self._v_prev.shape:
                raise ComputationError(f"channel count changed from {self._v_prev.shape} to {v.shape}")
            if time < self._t_prev:
                raise ComputationError(f"time went backwards: {time} < {self._t_prev}")

        if self.operation == 'integrate':
            if self._acc is None:
                if self.initial_conditions is not None:
                    self._acc = np.broadcast_to(self.initial_conditions, v.shape).astype(float)
                else:
                    self._acc = np.zeros_like(v)
            else:
                self._acc = self._acc + 0.5 * (v + self._v_prev) * (time - self._t_prev)
        else:
            x = np.abs(v) if self.operation in ('minabs', 'maxabs') else v
            if self._acc is None:
                self._acc = x.copy()
            elif self.operation in ('minimum', 'minabs'):
                self._acc = np.minimum(self._acc, x)
            else:
                self._acc = np.maximum(self._acc, x)

        self._t_prev = float(time)
        self._v_prev = v.copy()
        return self._acc.copy()
