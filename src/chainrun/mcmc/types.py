"""
MCMC Data Structures and Collaborator Interfaces.

This module contains the core data structures used by the chain runner:
- ChainState: Position and per-iteration bookkeeping of one chain
- Sampler, RandomSource, Writer, CheckpointStore: Collaborator protocols
- Resumable: save_state/restore_state capability shared by samplers and RNGs
"""

from dataclasses import dataclass, replace
from typing import Any, List, Protocol, runtime_checkable

import jax
import jax.numpy as jnp


@dataclass(frozen=True)
class ChainState:
    """
    Current state of one Markov chain.

    Transitions return a new ChainState instead of mutating this one, so a
    state handed to a Writer can never change underneath it.
    """
    position: jnp.ndarray   # (dim,) - current parameter values
    log_density: float      # log density at position
    accept_stat: float = 0.0  # acceptance probability of the last transition
    step_size: float = 0.0    # sampler step size used for the last transition
    iteration: int = 0        # transitions applied since the chain started

    @property
    def dimension(self):
        return int(self.position.shape[0])

    def advance(self, **changes):
        """Copy with the given fields replaced and iteration incremented."""
        return replace(self, iteration=self.iteration + 1, **changes)


def _chain_state_flatten(s):
    """Flatten ChainState for JAX pytree."""
    children = (s.position,)
    aux_data = (s.log_density, s.accept_stat, s.step_size, s.iteration)
    return children, aux_data


def _chain_state_unflatten(aux_data, children):
    """Unflatten ChainState from JAX pytree."""
    (position,) = children
    log_density, accept_stat, step_size, iteration = aux_data
    return ChainState(
        position=position,
        log_density=log_density,
        accept_stat=accept_stat,
        step_size=step_size,
        iteration=iteration,
    )


jax.tree_util.register_pytree_node(
    ChainState,
    _chain_state_flatten,
    _chain_state_unflatten
)


@runtime_checkable
class Resumable(Protocol):
    """Anything whose internal state round-trips through an opaque blob."""

    def save_state(self) -> Any: ...

    def restore_state(self, blob: Any) -> None: ...


@runtime_checkable
class RandomSource(Resumable, Protocol):
    def next_key(self) -> jnp.ndarray: ...


@runtime_checkable
class Sampler(Resumable, Protocol):
    def transition(self, state: ChainState) -> ChainState: ...

    def sample_param_names(self) -> List[str]: ...

    def sample_params(self, state: ChainState) -> List[float]: ...

    def diagnostic_param_names(self) -> List[str]: ...

    def diagnostic_params(self, state: ChainState) -> List[float]: ...


@runtime_checkable
class Writer(Protocol):
    def write_sample_params(self, rng: RandomSource, state: ChainState, sampler: Sampler, model: Any) -> None: ...

    def write_diagnostic_params(self, state: ChainState, sampler: Sampler) -> None: ...


@runtime_checkable
class CheckpointStore(Protocol):
    def load_sampler_specific(self, sampler: Sampler) -> None: ...

    def load_rng(self, rng: RandomSource) -> None: ...

    def save_inits(self, model: Any, rng: RandomSource, state: ChainState) -> None: ...

    def save_sampler_specific(self, sampler: Sampler) -> None: ...

    def save_rng(self, rng: RandomSource) -> None: ...
