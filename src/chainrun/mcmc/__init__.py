"""
MCMC Subpackage - chain execution.

This package contains the chain execution logic:
- runner: run_markov_chain (one phase) and sample_chain (warmup + sampling)
- progress: Progress line formatting and emission
- cancellation: Per-iteration callbacks that stop a chain
- types: ChainState and collaborator protocols
"""

# Import types first (needed by other modules)
from .types import (
    ChainState,
    Sampler,
    RandomSource,
    Writer,
    CheckpointStore,
    Resumable,
)

from .runner import run_markov_chain, sample_chain
from .progress import print_progress, format_progress, should_report
from .cancellation import CancellationToken, deadline_callback, no_op_callback

__all__ = [
    # Main entry points
    'run_markov_chain',
    'sample_chain',
    # Types
    'ChainState',
    'Sampler',
    'RandomSource',
    'Writer',
    'CheckpointStore',
    'Resumable',
    # Progress
    'print_progress',
    'format_progress',
    'should_report',
    # Cancellation
    'CancellationToken',
    'deadline_callback',
    'no_op_callback',
]
