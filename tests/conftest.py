"""
Pytest configuration and shared fixtures for chainrun tests.
"""

# Import chainrun before jax so jax_config can enable float64
import chainrun  # noqa: F401

import pytest
import jax.numpy as jnp

from chainrun.mcmc.types import ChainState


@pytest.fixture
def rng_seed():
    """Default RNG seed for reproducible tests."""
    return 42


@pytest.fixture
def events():
    """Shared call log for the recording collaborators below."""
    return []


@pytest.fixture
def init_state():
    """Two-parameter chain state at the origin."""
    return ChainState(position=jnp.zeros(2), log_density=0.0)


class StepSampler:
    """
    Deterministic sampler: each transition adds 1 to every coordinate.

    Records every call in the shared events list.
    """

    def __init__(self, events, fail_at=None):
        self.events = events
        self.fail_at = fail_at
        self.calls = 0
        self.restored = None

    def transition(self, state):
        if self.fail_at is not None and self.calls == self.fail_at:
            raise RuntimeError(f"transition failed at call {self.calls}")
        self.calls += 1
        self.events.append(('transition', state.iteration))
        return state.advance(position=state.position + 1.0, log_density=-float(self.calls))

    def save_state(self):
        return {'calls': self.calls}

    def restore_state(self, blob):
        self.restored = blob
        self.calls = int(blob['calls'])

    def sample_param_names(self):
        return ['lp__']

    def sample_params(self, state):
        return [float(state.log_density)]

    def diagnostic_param_names(self):
        return ['calls__']

    def diagnostic_params(self, state):
        return [float(self.calls)]


class RecordingWriter:
    """Writer that logs calls and keeps the states it was given."""

    def __init__(self, events, fail_at=None):
        self.events = events
        self.fail_at = fail_at
        self.samples = []
        self.diagnostics = []

    def write_sample_params(self, rng, state, sampler, model):
        if self.fail_at is not None and len(self.samples) == self.fail_at:
            raise IOError("disk full")
        self.events.append(('write_sample', state.iteration))
        self.samples.append(state)

    def write_diagnostic_params(self, state, sampler):
        self.events.append(('write_diagnostic', state.iteration))
        self.diagnostics.append(state)


class RecordingStore:
    """Checkpoint store that only logs the calls made on it."""

    def __init__(self, events):
        self.events = events

    def load_sampler_specific(self, sampler):
        self.events.append(('load_sampler_specific',))

    def load_rng(self, rng):
        self.events.append(('load_rng',))

    def save_inits(self, model, rng, state):
        self.events.append(('save_inits', state.iteration))

    def save_sampler_specific(self, sampler):
        self.events.append(('save_sampler_specific',))

    def save_rng(self, rng):
        self.events.append(('save_rng',))


@pytest.fixture
def step_sampler(events):
    return StepSampler(events)


@pytest.fixture
def recording_writer(events):
    return RecordingWriter(events)


@pytest.fixture
def recording_store(events):
    return RecordingStore(events)
