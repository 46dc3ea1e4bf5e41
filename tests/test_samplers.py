"""
Sampler and Model Tests

Covers the random walk Metropolis sampler, its adaptation state, and the
example models that route their inputs through the validation layer.

Run with: pytest tests/test_samplers.py -v
"""

import math

import numpy as np
import jax.numpy as jnp
import pytest

from chainrun.checkpoint_io import InMemoryCheckpointStore
from chainrun.errors import DomainError
from chainrun.mcmc import sample_chain
from chainrun.models import NormalModel, BoundedUniformModel
from chainrun.rng import JaxKeySource
from chainrun.samplers import RandomWalkMetropolis
from chainrun.samplers.rand_walk import _accept_probability
from chainrun.writers import MemoryWriter


# ============================================================================
# MODELS
# ============================================================================

class TestNormalModel:

    def test_log_density_matches_formula(self):
        model = NormalModel(mu=1.0, sigma=2.0, dim=2)
        x = np.array([0.0, 3.0])
        z = (x - 1.0) / 2.0
        expected = -0.5 * np.sum(z ** 2) - 2 * (math.log(2.0) + 0.5 * math.log(2 * math.pi))
        assert model.log_density(jnp.asarray(x)) == pytest.approx(expected)

    @pytest.mark.parametrize('bad', [math.inf, -math.inf, math.nan])
    def test_invalid_position_returns_sentinel(self, bad):
        model = NormalModel(dim=2)
        assert math.isnan(model.log_density(jnp.array([0.0, bad])))

    def test_invalid_parameters_raise(self):
        with pytest.raises(DomainError, match='sigma'):
            NormalModel(sigma=0.0)
        with pytest.raises(DomainError, match='mu'):
            NormalModel(mu=math.nan)
        with pytest.raises(ValueError, match='dim'):
            NormalModel(dim=0)


class TestBoundedUniformModel:

    def test_inside_and_outside(self):
        model = BoundedUniformModel(low=-1.0, high=3.0, dim=2)
        assert model.log_density(np.array([0.0, 3.0])) == pytest.approx(-2 * math.log(4.0))
        assert math.isnan(model.log_density(np.array([0.0, 3.5])))

    def test_invalid_bounds(self):
        with pytest.raises(DomainError):
            BoundedUniformModel(low=-math.inf, high=1.0)
        with pytest.raises(ValueError):
            BoundedUniformModel(low=1.0, high=1.0)

    @pytest.mark.parametrize("dim", [0, -2])
    def test_invalid_dim(self, dim):
        with pytest.raises(ValueError, match="dim must be >= 1"):
            BoundedUniformModel(low=0.0, high=1.0, dim=dim)


# ============================================================================
# RANDOM WALK METROPOLIS
# ============================================================================

class TestAcceptProbability:

    def test_uphill_always_accepted(self):
        assert _accept_probability(-10.0, -1.0) == 1.0

    def test_downhill(self):
        assert _accept_probability(0.0, -1.0) == pytest.approx(math.exp(-1.0))

    def test_invalid_proposal_rejected(self):
        assert _accept_probability(0.0, math.nan) == 0.0
        assert _accept_probability(0.0, -math.inf) == 0.0

    def test_escape_from_invalid_point(self):
        assert _accept_probability(math.nan, -5.0) == 1.0


class TestRandomWalkMetropolis:

    def test_constructor_validation(self):
        rng = JaxKeySource(0)
        with pytest.raises(ValueError):
            RandomWalkMetropolis(lambda x: 0.0, rng, step_size=0.0)
        with pytest.raises(ValueError):
            RandomWalkMetropolis(lambda x: 0.0, rng, target_accept=1.0)

    def test_deterministic_given_seed(self, rng_seed):
        def run(seed):
            model = NormalModel(dim=3)
            rng = JaxKeySource(seed)
            sampler = RandomWalkMetropolis(model.log_density, rng)
            state = sampler.initial_state(jnp.zeros(3))
            for _ in range(10):
                state = sampler.transition(state)
            return np.asarray(state.position)

        np.testing.assert_array_equal(run(rng_seed), run(rng_seed))
        assert not np.array_equal(run(rng_seed), run(rng_seed + 1))

    def test_transition_returns_new_state(self, rng_seed):
        model = NormalModel(dim=2)
        sampler = RandomWalkMetropolis(model.log_density, JaxKeySource(rng_seed))
        state = sampler.initial_state(jnp.zeros(2))
        new_state = sampler.transition(state)
        assert new_state is not state
        assert state.iteration == 0
        assert new_state.iteration == 1
        np.testing.assert_array_equal(np.asarray(state.position), [0.0, 0.0])

    def test_stays_inside_support(self, rng_seed):
        model = BoundedUniformModel(low=0.0, high=1.0, dim=2)
        sampler = RandomWalkMetropolis(model.log_density, JaxKeySource(rng_seed), step_size=0.8)
        state = sampler.initial_state(model.initial_position())
        for _ in range(100):
            state = sampler.transition(state)
            position = np.asarray(state.position)
            assert np.all((position >= 0.0) & (position <= 1.0))
            assert math.isfinite(state.log_density)

    def test_adaptation_moves_step_size_then_freezes(self, rng_seed):
        model = NormalModel(dim=1)
        sampler = RandomWalkMetropolis(model.log_density, JaxKeySource(rng_seed), step_size=50.0)
        state = sampler.initial_state(jnp.zeros(1))
        for _ in range(200):
            state = sampler.transition(state)
        # A huge step is almost always rejected, so adaptation must shrink it
        assert sampler.step_size < 50.0
        assert sampler.adapt_count == 200

        sampler.end_adaptation()
        frozen = sampler.step_size
        assert frozen == pytest.approx(math.exp(sampler.log_step_bar))
        for _ in range(20):
            state = sampler.transition(state)
        assert sampler.step_size == frozen
        assert sampler.adapt_count == 200

    def test_state_round_trip(self, rng_seed):
        sampler = RandomWalkMetropolis(lambda x: 0.0, JaxKeySource(rng_seed), step_size=0.3)
        sampler.adapt_count = 7
        blob = sampler.save_state()
        other = RandomWalkMetropolis(lambda x: 0.0, JaxKeySource(0))
        other.restore_state(blob)
        assert other.save_state() == blob

    def test_recovers_normal_mean(self, rng_seed):
        model = NormalModel(mu=2.0, sigma=1.0, dim=1)
        rng = JaxKeySource(rng_seed)
        sampler = RandomWalkMetropolis(model.log_density, rng)
        writer = MemoryWriter()
        sample_chain({'num_warmup': 500, 'num_samples': 3000, 'refresh': 0}, sampler, model, rng,
                     writer, InMemoryCheckpointStore(), sampler.initial_state(jnp.zeros(1)))

        draws = writer.draws()
        assert draws.shape == (3000, 1)
        assert abs(draws.mean() - 2.0) < 0.3
        assert 0.7 < draws.std() < 1.3
        assert writer.sample_names == ['lp__', 'accept_stat__', 'stepsize__', 'theta.1']
        assert writer.diagnostic_names == ['accept_stat__', 'stepsize__', 'adapt_count__']


# ============================================================================
# sample_chain DRIVER
# ============================================================================

class TestSampleChain:

    def test_records_sampling_only_by_default(self, rng_seed):
        model = NormalModel(dim=2)
        rng = JaxKeySource(rng_seed)
        sampler = RandomWalkMetropolis(model.log_density, rng)
        writer = MemoryWriter()
        store = InMemoryCheckpointStore()
        final = sample_chain({'num_warmup': 20, 'num_samples': 10, 'thin': 3, 'refresh': 0},
                             sampler, model, rng, writer, store, sampler.initial_state(jnp.zeros(2)))
        assert len(writer) == 4
        assert final.iteration == 30
        assert store.has_checkpoint()
        np.testing.assert_array_equal(np.asarray(store.load_inits().position), np.asarray(final.position))

    def test_save_warmup(self, rng_seed):
        model = NormalModel(dim=1)
        rng = JaxKeySource(rng_seed)
        sampler = RandomWalkMetropolis(model.log_density, rng)
        writer = MemoryWriter()
        sample_chain({'num_warmup': 5, 'num_samples': 5, 'save_warmup': True, 'refresh': 0},
                     sampler, model, rng, writer, InMemoryCheckpointStore(),
                     sampler.initial_state(jnp.zeros(1)))
        assert len(writer) == 10
        assert writer.diagnostics().shape == (10, 3)

    def test_invalid_config_raises(self, rng_seed):
        model = NormalModel(dim=1)
        rng = JaxKeySource(rng_seed)
        sampler = RandomWalkMetropolis(model.log_density, rng)
        with pytest.raises(ValueError, match='thin must be >= 1'):
            sample_chain({'thin': 0}, sampler, model, rng, MemoryWriter(), InMemoryCheckpointStore(),
                         sampler.initial_state(jnp.zeros(1)))


# ============================================================================
# COLLABORATOR PROTOCOLS
# ============================================================================

class TestProtocols:

    def test_bundled_collaborators_satisfy_protocols(self, tmp_path):
        from chainrun.checkpoint_io import NpzCheckpointStore
        from chainrun.mcmc.types import Sampler, RandomSource, Writer, CheckpointStore, Resumable

        rng = JaxKeySource(0)
        sampler = RandomWalkMetropolis(lambda x: 0.0, rng)
        assert isinstance(sampler, Sampler)
        assert isinstance(sampler, Resumable)
        assert isinstance(rng, RandomSource)
        assert isinstance(MemoryWriter(), Writer)
        assert isinstance(InMemoryCheckpointStore(), CheckpointStore)
        assert isinstance(NpzCheckpointStore(tmp_path / 'c.npz'), CheckpointStore)
        assert not isinstance(object(), Sampler)
