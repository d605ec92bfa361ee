import h5py
import numpy as np
import pytest

from muscle_energetics.bhargava.binding import bind_probe
from muscle_energetics.bhargava.parameters import MuscleEnergeticsParameterSet
from muscle_energetics.bhargava.tests.fixtures.model_fixture import make_leg_model, make_step_states
from muscle_energetics.io.log_writer import MetabolicsLogWriter


def test_log_writer_frame():
    lw = MetabolicsLogWriter(['a', 'b'])
    lw.append(0.0, [1.0, 2.0])
    lw.append(0.1, np.array([3.0, 4.0]))
    df = lw.to_frame()
    assert len(lw) == 2
    assert list(df.columns) == ['a', 'b']
    assert df.index.name == 'time'
    assert df.loc[0.1, 'b'] == 4.0


def test_log_writer_rejects_bad_rows():
    lw = MetabolicsLogWriter(['a'])
    with pytest.raises(ValueError):
        lw.append(0.0, [1.0, 2.0])
    lw.append(1.0, [1.0])
    with pytest.raises(ValueError):
        lw.append(0.5, [1.0])
    with pytest.raises(ValueError):
        MetabolicsLogWriter(['a', 'a'])


def test_log_writer_empty_frame():
    df = MetabolicsLogWriter(['total']).to_frame()
    assert df.shape == (0, 1)


def test_log_writer_hdf5_roundtrip_from_probe(tmp_path):
    pset = MuscleEnergeticsParameterSet()
    pset.add('soleus')
    pset.add('gastroc')
    probe = bind_probe(pset, make_leg_model(), name='metabolics', reporting='decomposed')
    states = make_step_states(('soleus', 'gastroc'))
    path = tmp_path / 'out' / 'metabolics.h5'
    lw = MetabolicsLogWriter(probe.output_labels(), out_path=str(path))
    for t in (0.0, 0.01, 0.02):
        lw.append(t, probe.evaluate(states))
    lw.close()
    with h5py.File(path, 'r') as hf:
        g = hf['metabolics']
        assert np.allclose(g['time'][:], [0.0, 0.01, 0.02])
        assert np.allclose(g['metabolics_BASAL'][:], 84.0)
        labels = [s.decode() if isinstance(s, bytes) else s for s in g.attrs['labels']]
        assert labels == probe.output_labels()


def test_log_writer_requires_path():
    lw = MetabolicsLogWriter(['a'])
    with pytest.raises(ValueError):
        lw.write_hdf5()
