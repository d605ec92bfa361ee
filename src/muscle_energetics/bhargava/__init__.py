"""Bhargava et al. (2004) phenomenological muscle metabolics model."""
from muscle_energetics.bhargava.binding import MuscleDescriptor, StaticMuscleModel, bind_probe
from muscle_energetics.bhargava.curves import PiecewiseLinearCurve
from muscle_energetics.bhargava.engine import (
    MetabolicProbeConfig,
    MuscleRateBreakdown,
    MuscleState,
    compute_basal_rate,
    compute_muscle_rate,
    compute_muscle_rates,
)
from muscle_energetics.bhargava.errors import BindingError, ComputationError, ConfigurationError, MetabolicsError
from muscle_energetics.bhargava.parameters import MuscleEnergeticsParameter, MuscleEnergeticsParameterSet
from muscle_energetics.bhargava.probe import MetabolicPowerProbe, ProbeOperator
