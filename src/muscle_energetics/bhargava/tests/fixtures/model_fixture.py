from muscle_energetics.bhargava.binding import MuscleDescriptor, StaticMuscleModel
from muscle_energetics.bhargava.engine import MuscleState


def make_leg_model(total_mass=70.0):
    """Three-muscle model with round-number Fmax and optimal fiber lengths."""
    muscles = [
        MuscleDescriptor('soleus', 1000.0, 0.1),
        MuscleDescriptor('gastroc', 1500.0, 0.06),
        MuscleDescriptor('tib_ant', 900.0, 0.08),
    ]
    return StaticMuscleModel(muscles, total_mass)


def make_state(excitation=0.5, fiber_velocity=-0.1, active_fiber_force=200.0,
               active_isometric_fiber_force=250.0, passive_fiber_force=20.0, normalized_fiber_length=1.0):
    return MuscleState(
        excitation=excitation,
        fiber_velocity=fiber_velocity,
        active_fiber_force=active_fiber_force,
        active_isometric_fiber_force=active_isometric_fiber_force,
        passive_fiber_force=passive_fiber_force,
        normalized_fiber_length=normalized_fiber_length,
    )


def make_step_states(names=('soleus', 'gastroc', 'tib_ant')):
    """Distinct per-muscle states covering both velocity branches."""
    velocities = (-0.1, 0.05, 0.0)
    excitations = (0.6, 0.3, 0.9)
    lengths = (1.0, 0.8, 1.2)
    return {
        name: make_state(excitation=excitations[i % 3], fiber_velocity=velocities[i % 3],
                         normalized_fiber_length=lengths[i % 3])
        for i, name in enumerate(names)
    }
