import os

import h5py
import numpy as np
import pandas as pd


class MetabolicsLogWriter:
    """Per-timestep recorder for metabolic probe outputs.

    Usage:
        lw = MetabolicsLogWriter(probe.output_labels())
        lw.append(t, probe.evaluate(state))
        df = lw.to_frame()
        lw.write_hdf5('metabolics.h5')

    Rows are kept in memory in append order. `to_frame` returns a pandas
    DataFrame indexed by time with one column per output label;
    `write_hdf5` stores a `time` dataset plus one dataset per channel.
    """

    def __init__(self, labels, out_path=None):
        self.labels = [str(label) for label in labels]
        if not self.labels:
            raise ValueError('at least one output label is required')
        if len(set(self.labels)) != len(self.labels):
            raise ValueError(f'duplicate output labels: {self.labels}')
        self.out_path = out_path
        self._times = []
        self._rows = []

    def __len__(self):
        return len(self._rows)

    def append(self, t, values):
        """Record channel `values` at host time `t`."""
        row = np.asarray(values, dtype=float).ravel()
        if row.shape[0] != len(self.labels):
            raise ValueError(f'expected {len(self.labels)} values, got {row.shape[0]}')
        t = float(t)
        if self._times and t < self._times[-1]:
            raise ValueError(f'time went backwards: {t} < {self._times[-1]}')
        self._times.append(t)
        self._rows.append(row)

    def as_array(self):
        if not self._rows:
            return np.empty((0, len(self.labels)), dtype=float)
        return np.vstack(self._rows)

    def to_frame(self):
        df = pd.DataFrame(self.as_array(), columns=self.labels)
        df.index = pd.Index(self._times, name='time')
        return df

    def write_hdf5(self, path=None, group='metabolics'):
        """Write recorded rows to `path` (defaults to `out_path`)."""
        path = path or self.out_path
        if path is None:
            raise ValueError('no output path given')
        parent = os.path.dirname(os.path.abspath(path))
        os.makedirs(parent, exist_ok=True)
        data = self.as_array()
        with h5py.File(path, 'a') as hf:
            if group in hf:
                del hf[group]
            g = hf.create_group(group)
            g.create_dataset('time', data=np.asarray(self._times, dtype=float))
            for i, label in enumerate(self.labels):
                g.create_dataset(label, data=data[:, i])
            g.attrs['labels'] = np.array(self.labels, dtype=h5py.string_dtype())
        return path

    def close(self):
        if self.out_path is not None and self._rows:
            self.write_hdf5(self.out_path)
