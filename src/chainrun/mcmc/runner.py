"""
MCMC Chain Runner - iterate, transition, record, checkpoint.

This module provides run_markov_chain(), which drives one sampler through one
phase (warmup or sampling) of a single chain, and sample_chain(), which runs
both phases back to back from a config dict.

Phase handling:
- Warmup calls start from the state the caller provides and never touch the
  checkpoint store.
- Sampling calls restore sampler adaptation and RNG state from the store
  before the first iteration, and persist inits, sampler state and RNG state
  after the last one.
"""

import contextlib
import time
from datetime import timedelta

import jax

from .cancellation import no_op_callback
from .progress import print_progress
from ..config import clean_config
from ..error_handling import validate_run_config, diagnose_draws, print_diagnostics

import logging
logger = logging.getLogger('chainrun')

__all__ = [
    'run_markov_chain',
    'sample_chain',
]


def _validate_run_arguments(num_iterations, start, finish, num_thin, refresh):
    errors = []
    if num_iterations < 0:
        errors.append(f"num_iterations must be >= 0, got {num_iterations}")
    if num_thin < 1:
        errors.append(f"num_thin must be >= 1, got {num_thin}")
    if refresh < 0:
        errors.append(f"refresh must be >= 0, got {refresh}")
    if start < 0 or finish < start + num_iterations:
        errors.append(
            f"iteration window [{start}, {finish}) cannot hold {num_iterations} iterations"
        )
    if errors:
        raise ValueError("Invalid run arguments:\n  " + "\n  ".join(errors))


def _checkpoint_transaction(checkpoint_store):
    """Use the store's transaction() if it has one, else a no-op context."""
    transaction = getattr(checkpoint_store, 'transaction', None)
    if transaction is None:
        return contextlib.nullcontext()
    return transaction()


def run_markov_chain(
    sampler,
    num_iterations,
    start,
    finish,
    num_thin,
    refresh,
    save,
    warmup,
    writer,
    checkpoint_store,
    init_state,
    model,
    rng,
    prefix='',
    suffix='\n',
    stream=None,
    callback=no_op_callback,
):
    """
    Run one phase of a Markov chain.

    Args:
        sampler: Object with transition(state) -> state
        num_iterations: Number of transitions to perform (>= 0)
        start: Absolute index of this call's first iteration (for progress)
        finish: Absolute end of the overall window (for progress)
        num_thin: Record every num_thin-th iteration, counting from 0 (>= 1)
        refresh: Progress refresh interval; 0 disables progress output
        save: Whether to record iterations through the writer
        warmup: True for the warmup phase, False for sampling
        writer: Writer receiving sample and diagnostic params
        checkpoint_store: Store used to resume and persist sampling runs
        init_state: ChainState to start from
        model: Model passed through to the writer and checkpoint store
        rng: RandomSource shared with the sampler
        prefix: Text prepended to progress lines
        suffix: Text appended to progress lines
        stream: Text stream for progress lines (None logs them)
        callback: Zero-argument hook run before each iteration; raise to stop

    Returns:
        The chain state after the last transition.

    Raises:
        ValueError: If the arguments violate the run preconditions.
        Anything raised by the callback, sampler, writer, progress stream or
        checkpoint store propagates unchanged; samples already written stay
        written.
    """
    _validate_run_arguments(num_iterations, start, finish, num_thin, refresh)

    phase = 'warmup' if warmup else 'sampling'

    if not warmup:
        checkpoint_store.load_sampler_specific(sampler)
        checkpoint_store.load_rng(rng)

    logger.debug(f"{prefix}Starting {phase}: {num_iterations} iterations from {start}")
    start_run_time = time.perf_counter()

    state = init_state
    for m in range(num_iterations):
        callback()

        print_progress(m, num_iterations, start, finish, refresh, warmup, prefix, suffix, stream)

        state = sampler.transition(state)

        if save and (m % num_thin) == 0:
            writer.write_sample_params(rng, state, sampler, model)
            writer.write_diagnostic_params(state, sampler)

    jax.block_until_ready(state)
    wall_time = time.perf_counter() - start_run_time
    logger.debug(f"{prefix}Finished {phase} in {timedelta(seconds=int(wall_time))} ({wall_time:.2f}s)")

    if not warmup:
        with _checkpoint_transaction(checkpoint_store):
            checkpoint_store.save_inits(model, rng, state)
            checkpoint_store.save_sampler_specific(sampler)
            checkpoint_store.save_rng(rng)

    return state


def sample_chain(
    config,
    sampler,
    model,
    rng,
    writer,
    checkpoint_store,
    init_state,
    stream=None,
    callback=no_op_callback,
):
    """
    Run warmup then sampling for one chain.

    Args:
        config: Dict with num_warmup, num_samples, thin, refresh, save_warmup,
            label_prefix, label_suffix (defaults filled by clean_config)
        sampler: Sampler; its end_adaptation() is called between phases if present
        model: Model
        rng: RandomSource
        writer: Writer
        checkpoint_store: CheckpointStore
        init_state: Initial ChainState
        stream: Progress stream (None logs progress)
        callback: Per-iteration cancellation hook

    Returns:
        Final ChainState after sampling.
    """
    config = clean_config(dict(config))
    validate_run_config(config)

    num_warmup = config['num_warmup']
    num_samples = config['num_samples']
    finish = num_warmup + num_samples

    logger.info(f"{config['label_prefix']}Running {num_warmup} warmup + {num_samples} sampling iterations")

    state = run_markov_chain(
        sampler, num_warmup, 0, finish, config['thin'], config['refresh'],
        config['save_warmup'], True, writer, checkpoint_store, init_state,
        model, rng, config['label_prefix'], config['label_suffix'], stream, callback,
    )

    end_adaptation = getattr(sampler, 'end_adaptation', None)
    if end_adaptation is not None:
        end_adaptation()

    state = run_markov_chain(
        sampler, num_samples, num_warmup, finish, config['thin'], config['refresh'],
        True, False, writer, checkpoint_store, state,
        model, rng, config['label_prefix'], config['label_suffix'], stream, callback,
    )

    draws = getattr(writer, 'draws', None)
    if draws is not None:
        logger.info(f"{config['label_prefix']}--- Post-Run Diagnostics ---")
        print_diagnostics(diagnose_draws(draws()), prefix=config['label_prefix'])

    return state
