"""
Random Walk Metropolis Sampler

Isotropic Gaussian random walk with a scalar step size:

    x' ~ N(x, step_size^2 * I)

accepted with probability min(1, exp(lp(x') - lp(x))). The proposal is
symmetric, so there is no Hastings correction.

Adaptation:
    While adapting, log(step_size) follows a Robbins-Monro update toward the
    target acceptance rate, and a running average of log(step_size) is kept.
    end_adaptation() freezes the step size at that average. The adaptation
    state is what save_state()/restore_state() round-trip, so a sampling run
    resumed from a checkpoint uses the same step size.

Proposals whose log density is NaN or infinite are rejected; density code
reports invalid inputs by returning the NaN sentinel.
"""

import math

import jax.numpy as jnp
import jax.random as random

from ..mcmc.types import ChainState

ADAPT_DECAY = 0.6  # Robbins-Monro gain exponent, gain = (n + 1)^-ADAPT_DECAY


class RandomWalkMetropolis:
    """
    Args:
        log_density_fn: fn(position) -> float log density (NaN/-inf rejected)
        rng: RandomSource providing next_key()
        step_size: Initial proposal standard deviation
        target_accept: Acceptance rate targeted during adaptation
    """

    def __init__(self, log_density_fn, rng, step_size=1.0, target_accept=0.234):
        if not step_size > 0.0:
            raise ValueError(f"step_size must be > 0, got {step_size}")
        if not 0.0 < target_accept < 1.0:
            raise ValueError(f"target_accept must be in (0, 1), got {target_accept}")
        self.log_density_fn = log_density_fn
        self.rng = rng
        self.step_size = float(step_size)
        self.target_accept = float(target_accept)
        self.log_step_bar = math.log(self.step_size)
        self.adapt_count = 0
        self.adapting = True

    # --- chain state ---

    def initial_state(self, position):
        position = jnp.asarray(position, dtype=jnp.float64)
        return ChainState(
            position=position,
            log_density=float(self.log_density_fn(position)),
            step_size=self.step_size,
        )

    def transition(self, state):
        key = self.rng.next_key()
        proposal_key, accept_key = random.split(key)

        noise = random.normal(proposal_key, shape=state.position.shape, dtype=state.position.dtype)
        proposal = state.position + self.step_size * noise
        proposal_lp = float(self.log_density_fn(proposal))

        accept_prob = _accept_probability(state.log_density, proposal_lp)
        u = float(random.uniform(accept_key))
        accepted = u < accept_prob

        step_used = self.step_size
        if self.adapting:
            self._adapt(accept_prob)

        if accepted:
            return state.advance(position=proposal, log_density=proposal_lp,
                                 accept_stat=accept_prob, step_size=step_used)
        return state.advance(accept_stat=accept_prob, step_size=step_used)

    # --- adaptation ---

    def _adapt(self, accept_prob):
        self.adapt_count += 1
        gain = self.adapt_count ** -ADAPT_DECAY
        log_step = math.log(self.step_size) + gain * (accept_prob - self.target_accept)
        self.step_size = math.exp(log_step)
        # Running mean of log step size over the adaptation window
        self.log_step_bar += (log_step - self.log_step_bar) / self.adapt_count

    def end_adaptation(self):
        """Stop adapting and fix the step size at its adapted average."""
        if self.adapting and self.adapt_count > 0:
            self.step_size = math.exp(self.log_step_bar)
        self.adapting = False

    # --- resumable state ---

    def save_state(self):
        return {
            'step_size': self.step_size,
            'log_step_bar': self.log_step_bar,
            'adapt_count': self.adapt_count,
            'adapting': self.adapting,
            'target_accept': self.target_accept,
        }

    def restore_state(self, blob):
        self.step_size = float(blob['step_size'])
        self.log_step_bar = float(blob['log_step_bar'])
        self.adapt_count = int(blob['adapt_count'])
        self.adapting = bool(blob['adapting'])
        self.target_accept = float(blob['target_accept'])

    # --- writer interface ---

    def sample_param_names(self):
        return ['lp__', 'accept_stat__', 'stepsize__']

    def sample_params(self, state):
        return [float(state.log_density), float(state.accept_stat), float(state.step_size)]

    def diagnostic_param_names(self):
        return ['accept_stat__', 'stepsize__', 'adapt_count__']

    def diagnostic_params(self, state):
        return [float(state.accept_stat), float(state.step_size), float(self.adapt_count)]


def _accept_probability(current_lp, proposal_lp):
    """min(1, exp(proposal_lp - current_lp)), 0 for non-finite proposals."""
    if not math.isfinite(proposal_lp):
        return 0.0
    if not math.isfinite(current_lp):
        # Any finite proposal beats a chain stuck at an invalid point
        return 1.0
    return math.exp(min(0.0, proposal_lp - current_lp))
