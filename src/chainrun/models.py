"""
Example models whose density code runs through the validation layer.

Constructor arguments are checked with the THROW policy: a model built with
a bad parameter is a caller error. Positions are checked with the SENTINEL
policy: a sampler proposing an invalid point gets NaN back, which it treats
as an unacceptable log density and rejects.
"""

import math

import jax.numpy as jnp
import numpy as np

from .validation import (
    ErrorPolicy,
    ResultRef,
    check_value,
    check_positive,
    check_bounded_value,
)

LOG_2PI = math.log(2.0 * math.pi)


class NormalModel:
    """
    Independent normal target: theta[i] ~ N(mu, sigma^2), i = 1..dim.

    Args:
        mu: Location (finite)
        sigma: Scale (finite, > 0)
        dim: Number of parameters
    """

    def __init__(self, mu=0.0, sigma=1.0, dim=1):
        check_value('NormalModel', mu, name='mu')
        check_positive('NormalModel', sigma, name='sigma')
        if dim < 1:
            raise ValueError(f"dim must be >= 1, got {dim}")
        self.mu = float(mu)
        self.sigma = float(sigma)
        self.dimension = int(dim)
        self.param_names = [f"theta.{i + 1}" for i in range(self.dimension)]

    def log_density(self, position):
        out = ResultRef()
        if not check_value('normal_log_density', position, out, ErrorPolicy.SENTINEL, name='theta'):
            return out.value
        z = (jnp.asarray(position) - self.mu) / self.sigma
        return float(-0.5 * jnp.sum(z ** 2) - self.dimension * (math.log(self.sigma) + 0.5 * LOG_2PI))

    def __call__(self, position):
        return self.log_density(position)


class BoundedUniformModel:
    """
    Uniform target on the box [low, high]^dim.

    Args:
        low: Finite lower bound
        high: Finite upper bound (> low)
        dim: Number of parameters
    """

    def __init__(self, low=0.0, high=1.0, dim=1):
        check_value('BoundedUniformModel', [low, high], name='bounds')
        if not high > low:
            raise ValueError(f"high must be > low, got [{low}, {high}]")
        if dim < 1:
            raise ValueError(f"dim must be >= 1, got {dim}")
        self.low = float(low)
        self.high = float(high)
        self.dimension = int(dim)
        self.param_names = [f"theta.{i + 1}" for i in range(self.dimension)]
        self._log_volume = self.dimension * math.log(self.high - self.low)

    def log_density(self, position):
        out = ResultRef()
        if not check_bounded_value('uniform_log_density', position, self.low, self.high,
                                   out, ErrorPolicy.SENTINEL, name='theta'):
            return out.value
        return -self._log_volume

    def __call__(self, position):
        return self.log_density(position)

    def initial_position(self):
        return np.full(self.dimension, 0.5 * (self.low + self.high))
