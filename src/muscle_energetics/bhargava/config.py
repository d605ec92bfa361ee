# -*- coding: utf-8 -*-

"""
bhargava/config.py

This module centralizes the default constants of the Bhargava et al. (2004)
muscle metabolics model. Parameter records, the probe configuration and the
rate formulas all read from here so a change of default lands in one place.

Contents:
---------
1. MUSCLE_DEFAULTS:
   - Per-muscle fiber composition, heat coefficients and the tissue properties
     used to derive muscle mass from Fmax and optimal fiber length.

2. PROBE_DEFAULTS:
   - Probe-level term toggles and the whole-body basal coefficients.

3. MAINTENANCE_CURVE_DEFAULT:
   - (x, y) points of the piecewise-linear normalized fiber length dependence
     of the maintenance heat rate.

4. SHORTENING_CONSTANTS:
   - Proportionality constants (alpha) for the shortening heat rate.

5. MINIMUM_HEAT_RATE:
   - Floor applied to the summed heat rate of each muscle (W/kg),
     Umberger (2003), page 104.

Usage:
------
    from muscle_energetics.bhargava.config import MUSCLE_DEFAULTS, PROBE_DEFAULTS

    density = MUSCLE_DEFAULTS['density']   # 1059.7 kg/m^3
"""

# ───────────────────────────────────────────────────────────────────────────────
# 1) PER-MUSCLE PARAMETERS (SI units)
# ───────────────────────────────────────────────────────────────────────────────
MUSCLE_DEFAULTS = {
    'fiber_type_ratio': 0.5,           # fraction of slow twitch fibers (0..1)

    # Bhargava et al. (2004) heat coefficients
    'activation_coeff_slow': 40.0,     # activation constant, slow twitch (W/kg)
    'activation_coeff_fast': 133.0,    # activation constant, fast twitch (W/kg)
    'maintenance_coeff_slow': 74.0,    # maintenance constant, slow twitch (W/kg)
    'maintenance_coeff_fast': 111.0,   # maintenance constant, fast twitch (W/kg)

    # mammalian muscle, only used when the mass is derived
    'specific_tension': 0.25e6,        # (Pa = N/m^2)
    'density': 1059.7,                 # (kg/m^3)

    'use_provided_mass': False,
    'provided_mass': None,             # (kg), required when use_provided_mass
}

# ───────────────────────────────────────────────────────────────────────────────
# 2) PROBE-LEVEL SWITCHES AND BASAL RATE
# ───────────────────────────────────────────────────────────────────────────────
# Bdot = basal_coefficient * body_mass ** basal_exponent   (W)
PROBE_DEFAULTS = {
    'activation_rate_on': True,
    'maintenance_rate_on': True,
    'shortening_rate_on': True,
    'basal_rate_on': True,
    'mechanical_work_rate_on': True,
    'enforce_minimum_heat_rate_per_muscle': True,
    'use_force_dependent_shortening_prop_constant': False,
    'basal_coefficient': 1.2,          # (W/kg^basal_exponent)
    'basal_exponent': 1.0,
}

# ───────────────────────────────────────────────────────────────────────────────
# 3) MAINTENANCE HEAT: NORMALIZED FIBER LENGTH DEPENDENCE
# ───────────────────────────────────────────────────────────────────────────────
# Unity at optimal fiber length, halved at the extremes.
MAINTENANCE_CURVE_DEFAULT = {
    'x': (0.0, 0.5, 1.0, 1.5, 10.0),   # normalized fiber length (l / l_opt)
    'y': (0.5, 0.5, 1.0, 0.5, 0.5),    # dimensionless multiplier
}

# ───────────────────────────────────────────────────────────────────────────────
# 4) SHORTENING HEAT PROPORTIONALITY CONSTANTS
# ───────────────────────────────────────────────────────────────────────────────
# Velocity sign convention: v >= 0 lengthening / isometric, v < 0 shortening.
SHORTENING_CONSTANTS = {
    # use_force_dependent_shortening_prop_constant = True
    'force_dependent_isometric': 0.16,     # multiplies F_CE_iso when v >= 0
    'force_dependent_active': 0.18,        # multiplies F_CE when v >= 0
    'force_dependent_shortening': 0.157,   # multiplies F_CE when v < 0
    # use_force_dependent_shortening_prop_constant = False
    'constant_total_force': 0.25,          # multiplies F_CE + F_PASSIVE when v >= 0
}

# ───────────────────────────────────────────────────────────────────────────────
# 5) MINIMUM HEAT RATE
# ───────────────────────────────────────────────────────────────────────────────
MINIMUM_HEAT_RATE = 1.0                # (W/kg)

REPORTING_MODES = ('total', 'decomposed')
PROBE_OPERATIONS = ('value', 'integrate', 'minimum', 'maximum', 'minabs', 'maxabs')
