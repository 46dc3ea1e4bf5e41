"""
Random source for chains: a JAX PRNG key stream with savable state.

Every draw consumes a fresh subkey split off the current key, so the full
state of the stream is the current key itself. Saving that key and restoring
it later continues the exact same sequence of draws.
"""

import jax
import jax.numpy as jnp
import jax.random as random
import numpy as np

from .errors import CheckpointError


class JaxKeySource:
    """
    Stream of JAX PRNG keys.

    Args:
        seed: Integer seed for jax.random.PRNGKey
    """

    def __init__(self, seed=0):
        self.seed = int(seed)
        self._key = random.PRNGKey(self.seed)

    def next_key(self):
        """Return a fresh subkey and advance the stream."""
        self._key, subkey = random.split(self._key)
        return subkey

    def uniform(self, shape=()):
        return random.uniform(self.next_key(), shape=shape)

    def normal(self, shape=()):
        return random.normal(self.next_key(), shape=shape)

    def save_state(self):
        """Current key as a host uint32 array."""
        return np.asarray(jax.device_get(self._key), dtype=np.uint32).copy()

    def restore_state(self, blob):
        blob = np.asarray(blob, dtype=np.uint32)
        expected = np.shape(self._key)
        if blob.shape != expected:
            raise CheckpointError(
                f"RNG state has shape {blob.shape}, expected {expected}"
            )
        self._key = jnp.asarray(blob, dtype=jnp.uint32)

    def __repr__(self):
        return f"JaxKeySource(seed={self.seed})"
