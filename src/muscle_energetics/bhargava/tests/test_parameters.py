import math

import numpy as np
import pytest

from muscle_energetics.bhargava.errors import ConfigurationError
from muscle_energetics.bhargava.parameters import MuscleEnergeticsParameter, MuscleEnergeticsParameterSet


def test_parameter_defaults():
    p = MuscleEnergeticsParameter()
    assert p.fiber_type_ratio == 0.5
    assert p.activation_coeff_slow == 40.0
    assert p.activation_coeff_fast == 133.0
    assert p.maintenance_coeff_slow == 74.0
    assert p.maintenance_coeff_fast == 111.0
    assert p.specific_tension == 0.25e6
    assert p.density == 1059.7
    assert p.use_provided_mass is False
    assert p.provided_mass is None
    assert math.isnan(p.resolved_mass)
    assert not p.is_resolved


def test_resolved_mass_not_an_init_argument():
    with pytest.raises(TypeError):
        MuscleEnergeticsParameter(resolved_mass=1.0)


def test_derived_mass():
    p = MuscleEnergeticsParameter()
    mass = p.resolve_mass(1000.0, 0.1)
    assert mass == pytest.approx(0.42388)
    assert p.resolved_mass == pytest.approx((1000.0 / 0.25e6) * 1059.7 * 0.1)
    assert p.is_resolved


def test_resolve_mass_is_idempotent():
    p = MuscleEnergeticsParameter()
    first = p.resolve_mass(1000.0, 0.1)
    second = p.resolve_mass(1000.0, 0.1)
    assert first == second


def test_provided_mass_overrides_geometry():
    p = MuscleEnergeticsParameter.with_provided_mass(0.4, 0.5)
    assert p.resolve_mass(1000.0, 0.1) == 0.5
    assert p.resolve_mass(5000.0, 0.3) == 0.5
    assert p.fiber_type_ratio == 0.4


@pytest.mark.parametrize('provided', [None, 0.0, -1.0, float('nan'), float('inf')])
def test_provided_mass_missing_or_invalid(provided):
    p = MuscleEnergeticsParameter(use_provided_mass=True, provided_mass=provided)
    with pytest.raises(ConfigurationError, match='provided mass'):
        p.resolve_mass(1000.0, 0.1)
    with pytest.raises(ConfigurationError):
        p.validate()


@pytest.mark.parametrize('fmax,lopt', [(0.0, 0.1), (-10.0, 0.1), (1000.0, 0.0), (float('nan'), 0.1), (1000.0, float('inf'))])
def test_derived_mass_rejects_bad_geometry(fmax, lopt):
    p = MuscleEnergeticsParameter()
    with pytest.raises(ConfigurationError):
        p.resolve_mass(fmax, lopt)
    assert math.isnan(p.resolved_mass)


def test_derived_mass_rejects_non_positive_specific_tension():
    p = MuscleEnergeticsParameter(specific_tension=0.0)
    with pytest.raises(ConfigurationError, match='specific_tension'):
        p.resolve_mass(1000.0, 0.1)


@pytest.mark.parametrize('ratio', [-0.1, 1.1, float('nan')])
def test_validate_fiber_type_ratio(ratio):
    with pytest.raises(ConfigurationError, match='fiber_type_ratio'):
        MuscleEnergeticsParameter(fiber_type_ratio=ratio).validate()


def test_validate_accepts_ratio_bounds():
    MuscleEnergeticsParameter(fiber_type_ratio=0.0).validate()
    MuscleEnergeticsParameter(fiber_type_ratio=1.0).validate()


def test_validate_coefficients():
    p = MuscleEnergeticsParameter.with_coefficients(0.5, 40.0, -1.0, 74.0, 111.0)
    with pytest.raises(ConfigurationError, match='activation_coeff_fast'):
        p.validate()


def test_set_preserves_insertion_order():
    pset = MuscleEnergeticsParameterSet()
    pset.add('vasti')
    pset.add('soleus', MuscleEnergeticsParameter(fiber_type_ratio=0.8))
    pset.add('glut_max')
    assert pset.names() == ('vasti', 'soleus', 'glut_max')
    assert list(pset) == ['vasti', 'soleus', 'glut_max']
    assert pset['soleus'].fiber_type_ratio == 0.8
    assert 'vasti' in pset
    assert len(pset) == 3


def test_set_rejects_duplicates():
    pset = MuscleEnergeticsParameterSet({'soleus': MuscleEnergeticsParameter()})
    with pytest.raises(ConfigurationError, match='duplicate'):
        pset.add('soleus')


def test_set_validate_names_muscle():
    pset = MuscleEnergeticsParameterSet([('soleus', MuscleEnergeticsParameter(fiber_type_ratio=2.0))])
    with pytest.raises(ConfigurationError, match="soleus"):
        pset.validate()


def test_set_as_arrays():
    pset = MuscleEnergeticsParameterSet([('a', MuscleEnergeticsParameter.with_provided_mass(0.2, 1.5)),
                                         ('b', MuscleEnergeticsParameter())])
    pset['a'].resolve_mass(1.0, 1.0)
    cols = pset.as_arrays()
    assert cols['mass'][0] == 1.5
    assert np.isnan(cols['mass'][1])
    assert np.array_equal(cols['fiber_type_ratio'], [0.2, 0.5])
    assert np.array_equal(cols['maintenance_coeff_fast'], [111.0, 111.0])
