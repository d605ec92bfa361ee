"""Per-muscle metabolic parameters and the ordered set that owns them.

A `MuscleEnergeticsParameter` holds the user configuration of one muscle
plus a single derived value, `resolved_mass`, which stays NaN until the
probe is bound to a model. The mass is either the user-provided value or

    m = (Fmax / specific_tension) * density * l_opt

with Fmax and l_opt taken from the bound muscle.
"""
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional, Tuple
import math

import numpy as np

from muscle_energetics.bhargava.config import MUSCLE_DEFAULTS
from muscle_energetics.bhargava.errors import ConfigurationError
from muscle_energetics.bhargava.utils import is_finite_number, require_positive

_COEFFICIENT_FIELDS = (
    'activation_coeff_slow',
    'activation_coeff_fast',
    'maintenance_coeff_slow',
    'maintenance_coeff_fast',
)


@dataclass
class MuscleEnergeticsParameter:
    """Metabolic parameters for a single muscle.

    Coefficients are in W/kg, `specific_tension` in Pa, `density` in kg/m^3
    and `provided_mass` in kg. Defaults follow Bhargava et al. (2004).
    """
    fiber_type_ratio: float = MUSCLE_DEFAULTS['fiber_type_ratio']
    activation_coeff_slow: float = MUSCLE_DEFAULTS['activation_coeff_slow']
    activation_coeff_fast: float = MUSCLE_DEFAULTS['activation_coeff_fast']
    maintenance_coeff_slow: float = MUSCLE_DEFAULTS['maintenance_coeff_slow']
    maintenance_coeff_fast: float = MUSCLE_DEFAULTS['maintenance_coeff_fast']
    specific_tension: float = MUSCLE_DEFAULTS['specific_tension']
    density: float = MUSCLE_DEFAULTS['density']
    use_provided_mass: bool = MUSCLE_DEFAULTS['use_provided_mass']
    provided_mass: Optional[float] = MUSCLE_DEFAULTS['provided_mass']

    # derived during binding, never user supplied
    resolved_mass: float = field(default=math.nan, init=False, compare=False)

    @classmethod
    def with_provided_mass(cls, fiber_type_ratio: float, muscle_mass: float) -> 'MuscleEnergeticsParameter':
        return cls(fiber_type_ratio=fiber_type_ratio, use_provided_mass=True, provided_mass=muscle_mass)

    @classmethod
    def with_coefficients(cls, fiber_type_ratio: float, activation_coeff_slow: float, activation_coeff_fast: float,
                          maintenance_coeff_slow: float, maintenance_coeff_fast: float) -> 'MuscleEnergeticsParameter':
        return cls(
            fiber_type_ratio=fiber_type_ratio,
            activation_coeff_slow=activation_coeff_slow,
            activation_coeff_fast=activation_coeff_fast,
            maintenance_coeff_slow=maintenance_coeff_slow,
            maintenance_coeff_fast=maintenance_coeff_fast,
        )

    @property
    def is_resolved(self) -> bool:
        return is_finite_number(self.resolved_mass) and self.resolved_mass > 0.0

    def validate(self) -> None:
        """Check the user-configured fields; raises ConfigurationError."""
        r = self.fiber_type_ratio
        if not is_finite_number(r) or not (0.0 <= float(r) <= 1.0):
            raise ConfigurationError(f"fiber_type_ratio must be between 0 and 1, got {r!r}")
        for name in _COEFFICIENT_FIELDS:
            require_positive(getattr(self, name), name, ConfigurationError)
        if self.use_provided_mass:
            if not is_finite_number(self.provided_mass) or float(self.provided_mass) <= 0.0:
                raise ConfigurationError(
                    f"missing or invalid provided mass: use_provided_mass is set but provided_mass={self.provided_mass!r}")
        else:
            require_positive(self.specific_tension, 'specific_tension', ConfigurationError)
            require_positive(self.density, 'density', ConfigurationError)

    def resolve_mass(self, max_isometric_force: float, optimal_fiber_length: float) -> float:
        """Set `resolved_mass` from the provided mass or from muscle geometry.

        Recomputing with the same inputs yields the same value, so a probe
        may be re-bound after model edits. Returns the resolved mass (kg).
        """
        if self.use_provided_mass:
            if not is_finite_number(self.provided_mass) or float(self.provided_mass) <= 0.0:
                raise ConfigurationError(
                    f"missing or invalid provided mass: provided_mass={self.provided_mass!r}")
            self.resolved_mass = float(self.provided_mass)
            return self.resolved_mass

        sigma = require_positive(self.specific_tension, 'specific_tension', ConfigurationError)
        rho = require_positive(self.density, 'density', ConfigurationError)
        f_max = require_positive(max_isometric_force, 'max_isometric_force', ConfigurationError)
        l_opt = require_positive(optimal_fiber_length, 'optimal_fiber_length', ConfigurationError)
        mass = (f_max / sigma) * rho * l_opt
        if not math.isfinite(mass) or mass <= 0.0:
            raise ConfigurationError(f"derived muscle mass is not positive: {mass!r}")
        self.resolved_mass = mass
        return mass

    def clear_mass(self) -> None:
        self.resolved_mass = math.nan


class MuscleEnergeticsParameterSet:
    """Ordered mapping of muscle name -> MuscleEnergeticsParameter.

    Insertion order is the aggregation and reporting order.
    """

    def __init__(self, items=None):
        self._params: 'OrderedDict[str, MuscleEnergeticsParameter]' = OrderedDict()
        if items is not None:
            pairs = items.items() if hasattr(items, 'items') else items
            for name, param in pairs:
                self.add(name, param)

    def add(self, name: str, param: Optional[MuscleEnergeticsParameter] = None) -> MuscleEnergeticsParameter:
        if not isinstance(name, str) or not name:
            raise ConfigurationError(f"muscle name must be a non-empty string, got {name!r}")
        if name in self._params:
            raise ConfigurationError(f"duplicate muscle name '{name}' in parameter set")
        if param is None:
            param = MuscleEnergeticsParameter()
        elif not isinstance(param, MuscleEnergeticsParameter):
            raise ConfigurationError(f"expected MuscleEnergeticsParameter for '{name}', got {type(param).__name__}")
        self._params[name] = param
        return param

    def remove(self, name: str) -> MuscleEnergeticsParameter:
        return self._params.pop(name)

    def __getitem__(self, name: str) -> MuscleEnergeticsParameter:
        return self._params[name]

    def __contains__(self, name) -> bool:
        return name in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def names(self) -> Tuple[str, ...]:
        return tuple(self._params)

    def items(self):
        return self._params.items()

    def validate(self) -> None:
        for name, param in self._params.items():
            try:
                param.validate()
            except ConfigurationError as e:
                raise ConfigurationError(f"muscle '{name}': {e}") from e

    def as_arrays(self) -> Dict[str, np.ndarray]:
        """Column arrays (one row per muscle, set order) for the rate engine."""
        params = list(self._params.values())
        cols = {'mass': np.array([p.resolved_mass for p in params], dtype=float),
                'fiber_type_ratio': np.array([p.fiber_type_ratio for p in params], dtype=float)}
        for name in _COEFFICIENT_FIELDS:
            cols[name] = np.array([getattr(p, name) for p in params], dtype=float)
        return cols

    def __repr__(self):
        return f"MuscleEnergeticsParameterSet({list(self._params)!r})"
