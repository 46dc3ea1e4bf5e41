"""
In-memory writer for recorded iterations.

Sample rows are the sampler's sample params (lp__, accept_stat__, ...)
followed by the model parameters; diagnostic rows are the sampler's
diagnostic params. Both are kept as lists of float rows and exposed as
numpy arrays.
"""

import numpy as np


class MemoryWriter:
    """Collect sample and diagnostic rows in memory."""

    def __init__(self):
        self.sample_names = None
        self.diagnostic_names = None
        self._n_sampler_cols = 0
        self._sample_rows = []
        self._diagnostic_rows = []

    def write_sample_params(self, rng, state, sampler, model):
        # rng is part of the writer interface for models that draw generated
        # quantities; plain parameter output does not need it.
        del rng
        if self.sample_names is None:
            self._n_sampler_cols = len(sampler.sample_param_names())
            self.sample_names = list(sampler.sample_param_names()) + list(_param_names(model, state))
        row = list(sampler.sample_params(state))
        row.extend(float(v) for v in np.asarray(state.position).reshape(-1))
        self._sample_rows.append(row)

    def write_diagnostic_params(self, state, sampler):
        if self.diagnostic_names is None:
            self.diagnostic_names = list(sampler.diagnostic_param_names())
        self._diagnostic_rows.append([float(v) for v in sampler.diagnostic_params(state)])

    def samples(self):
        """Recorded sample rows, shape (n_recorded, n_columns)."""
        return np.asarray(self._sample_rows, dtype=np.float64)

    def diagnostics(self):
        """Recorded diagnostic rows, shape (n_recorded, n_columns)."""
        return np.asarray(self._diagnostic_rows, dtype=np.float64)

    def draws(self):
        """Model parameter columns only, shape (n_recorded, dim)."""
        samples = self.samples()
        if samples.size == 0:
            return samples
        return samples[:, self._n_sampler_cols:]

    def __len__(self):
        return len(self._sample_rows)


def _param_names(model, state):
    names = getattr(model, 'param_names', None)
    if names is not None:
        return names
    return [f"theta.{i + 1}" for i in range(np.asarray(state.position).size)]
