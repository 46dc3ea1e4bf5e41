"""
chainrun - Resumable MCMC chain execution and input validation

Public API:
    Chain Execution:
        run_markov_chain - Run one warmup or sampling phase of a chain
        sample_chain - Run warmup then sampling from a config dict
        ChainState - Position and bookkeeping of one chain
        CancellationToken - Callback that stops a chain on request
        deadline_callback - Callback that stops a chain after a time budget

    Collaborators:
        JaxKeySource - Savable JAX PRNG key stream
        RandomWalkMetropolis - Adaptive random walk sampler
        MemoryWriter - Collects recorded iterations in memory
        InMemoryCheckpointStore / NpzCheckpointStore - Checkpoint stores

    Validation:
        check_value, check_bounded_value, check_positive, check_nonnegative,
        check_integer, check_probability - Precondition checks
        ErrorPolicy - THROW or SENTINEL failure handling
        ResultRef - Output slot receiving the NaN sentinel

Example:
    from chainrun import (JaxKeySource, RandomWalkMetropolis, NormalModel,
                          MemoryWriter, NpzCheckpointStore, sample_chain)

    model = NormalModel(mu=1.0, sigma=2.0, dim=3)
    rng = JaxKeySource(seed=7)
    sampler = RandomWalkMetropolis(model.log_density, rng)
    writer = MemoryWriter()
    store = NpzCheckpointStore('chain0.npz')

    final = sample_chain({'num_warmup': 500, 'num_samples': 1000}, sampler, model,
                         rng, writer, store, sampler.initial_state([0.0, 0.0, 0.0]))
"""
# CRITICAL: Import jax_config FIRST to set environment variables before JAX loads
from . import jax_config  # noqa: F401

from .errors import ChainrunError, DomainError, ChainCancelled, CheckpointError
from .config import clean_config
from .error_handling import validate_run_config, diagnose_draws, print_diagnostics
from .validation import (
    ErrorPolicy,
    ResultRef,
    SENTINEL_VALUE,
    default_policy,
    errno_policy,
    check_value,
    check_bounded_value,
    check_positive,
    check_nonnegative,
    check_integer,
    check_probability,
)
from .mcmc import (
    ChainState,
    run_markov_chain,
    sample_chain,
    print_progress,
    CancellationToken,
    deadline_callback,
)
from .rng import JaxKeySource
from .checkpoint_io import InMemoryCheckpointStore, NpzCheckpointStore
from .writers import MemoryWriter
from .samplers import RandomWalkMetropolis
from .models import NormalModel, BoundedUniformModel
