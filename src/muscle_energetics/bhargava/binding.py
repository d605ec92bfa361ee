"""Bind a metabolic parameter set to a host musculoskeletal model.

The host model is duck typed. It must provide:

- ``get_muscle(name)`` -> object with ``max_isometric_force`` (N) and
  ``optimal_fiber_length`` (m); raises ``KeyError`` for unknown names
- ``get_total_mass(state)`` -> whole-body mass (kg)
- ``get_muscle_state(name, state)`` -> ``engine.MuscleState``

`StaticMuscleModel` is an in-memory implementation where ``state`` is a
mapping of muscle name -> MuscleState.
"""
from collections import OrderedDict
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional
import logging

from muscle_energetics.bhargava.engine import MetabolicProbeConfig, MuscleState
from muscle_energetics.bhargava.errors import BindingError, ConfigurationError
from muscle_energetics.bhargava.parameters import MuscleEnergeticsParameterSet
from muscle_energetics.bhargava.probe import MetabolicPowerProbe
from muscle_energetics.bhargava.utils import require_positive, safe_log_exception

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MuscleDescriptor:
    """Constant muscle properties needed for mass derivation."""
    name: str
    max_isometric_force: float     # (N)
    optimal_fiber_length: float    # (m)


class StaticMuscleModel:
    """Host model backed by a fixed list of muscles and a body mass."""

    def __init__(self, muscles: Iterable[MuscleDescriptor], total_mass: float):
        self._muscles = OrderedDict()
        for m in muscles:
            if m.name in self._muscles:
                raise ConfigurationError(f"duplicate muscle '{m.name}' in model")
            self._muscles[m.name] = m
        self.total_mass = require_positive(total_mass, 'total_mass', ConfigurationError)

    def muscle_names(self):
        return tuple(self._muscles)

    def get_muscle(self, name: str) -> MuscleDescriptor:
        return self._muscles[name]

    def get_total_mass(self, state=None) -> float:
        return self.total_mass

    def get_muscle_state(self, name: str, state: Mapping[str, MuscleState]) -> MuscleState:
        return state[name]


def bind_probe(parameters: MuscleEnergeticsParameterSet, model, config: Optional[MetabolicProbeConfig] = None,
               name: str = 'metabolic_power', reporting: str = 'total', gain: float = 1.0) -> MetabolicPowerProbe:
    """Validate configuration, resolve every muscle mass and return a bound probe.

    Raises ConfigurationError for invalid settings and BindingError when a
    configured muscle does not exist in `model`. Either error aborts the
    whole binding; no probe is returned.
    """
    if config is None:
        config = MetabolicProbeConfig()
    config.validate()
    parameters.validate()

    if len(parameters) == 0:
        logger.warning('probe %s has no muscles; output is the basal rate only', name)

    for muscle_name, param in parameters.items():
        try:
            muscle = model.get_muscle(muscle_name)
        except KeyError as e:
            safe_log_exception('muscle lookup failed during binding', e, probe=name, muscle=muscle_name)
            raise BindingError(f"muscle '{muscle_name}' configured in probe '{name}' not found in model") from e
        try:
            mass = param.resolve_mass(muscle.max_isometric_force, muscle.optimal_fiber_length)
        except ConfigurationError as e:
            safe_log_exception('muscle mass resolution failed', e, probe=name, muscle=muscle_name)
            raise ConfigurationError(f"muscle '{muscle_name}': {e}") from e
        logger.debug('%s: %s mass = %.6g kg (%s)', name, muscle_name, mass,
                     'provided' if param.use_provided_mass else 'derived')

    probe = MetabolicPowerProbe(name, config, parameters, model, reporting=reporting, gain=gain)
    logger.info('bound metabolic probe %s to %d muscles', name, len(parameters))
    return probe
