"""
Checkpoint stores for resumable chains.

A checkpoint holds three sections, written after every sampling run:
- inits: the final chain position and log density, to rebuild the next run's
  initial state
- sampler: the sampler's adaptation state (save_state() dict)
- rng: the random source's state (save_state() blob)

InMemoryCheckpointStore keeps them in a dict; NpzCheckpointStore persists
them to a compressed .npz file, replacing the file atomically on each commit.
"""

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Optional

import jax.numpy as jnp
import numpy as np

from .errors import CheckpointError
from .mcmc.types import ChainState

import logging
logger = logging.getLogger('chainrun')

_SAMPLER_PREFIX = 'sampler__'


class InMemoryCheckpointStore:
    """
    Checkpoint store backed by a dict.

    Args:
        require: If True, loading from an empty store raises CheckpointError
            instead of leaving the sampler and RNG untouched.
    """

    def __init__(self, require=False):
        self.require = require
        self._sections: Dict[str, Any] = {}
        self._staged: Optional[Dict[str, Any]] = None

    # --- storage primitives (overridden by file-backed stores) ---

    def _read_sections(self) -> Dict[str, Any]:
        return self._sections

    def _write_sections(self, sections: Dict[str, Any]) -> None:
        self._sections = dict(sections)

    # --- transactions ---

    @contextlib.contextmanager
    def transaction(self):
        """
        Group several saves into one commit.

        Sections saved inside the block are written together when it exits
        normally and discarded if it raises.
        """
        if self._staged is not None:
            raise CheckpointError("Checkpoint transaction already in progress")
        self._staged = dict(self._read_sections())
        try:
            yield self
            staged = self._staged
        finally:
            self._staged = None
        self._write_sections(staged)

    def _put(self, updates: Dict[str, Any]) -> None:
        if self._staged is not None:
            self._staged.update(updates)
        else:
            sections = dict(self._read_sections())
            sections.update(updates)
            self._write_sections(sections)

    def _get(self, name):
        return self._read_sections().get(name)

    def has_checkpoint(self):
        return 'rng' in self._read_sections()

    def _missing(self, what):
        if self.require:
            raise CheckpointError(f"No {what} found in checkpoint store")
        logger.debug(f"No {what} in checkpoint store, continuing with current state")

    # --- loads ---

    def load_sampler_specific(self, sampler):
        sections = self._read_sections()
        state = {k[len(_SAMPLER_PREFIX):]: v for k, v in sections.items()
                 if k.startswith(_SAMPLER_PREFIX)}
        if not state:
            self._missing('sampler state')
            return
        sampler.restore_state(state)

    def load_rng(self, rng):
        blob = self._get('rng')
        if blob is None:
            self._missing('RNG state')
            return
        rng.restore_state(blob)

    def load_inits(self):
        """
        Chain state saved by the last sampling run.

        Returns:
            ChainState, or None if the store holds no inits.
        """
        sections = self._read_sections()
        if 'inits_position' not in sections:
            self._missing('initial values')
            return None
        return ChainState(
            position=jnp.asarray(sections['inits_position']),
            log_density=float(sections['inits_log_density']),
            step_size=float(sections.get('inits_step_size', 0.0)),
            iteration=int(sections.get('inits_iteration', 0)),
        )

    # --- saves ---

    def save_inits(self, model, rng, state):
        dimension = getattr(model, 'dimension', None)
        position = np.asarray(state.position, dtype=np.float64)
        if dimension is not None and position.shape != (dimension,):
            raise CheckpointError(
                f"Chain position has shape {position.shape}, model expects ({dimension},)"
            )
        self._put({
            'inits_position': position.copy(),
            'inits_log_density': float(state.log_density),
            'inits_step_size': float(state.step_size),
            'inits_iteration': int(state.iteration),
        })

    def save_sampler_specific(self, sampler):
        state = sampler.save_state()
        self._put({f"{_SAMPLER_PREFIX}{k}": v for k, v in state.items()})

    def save_rng(self, rng):
        self._put({'rng': np.asarray(rng.save_state()).copy()})


class NpzCheckpointStore(InMemoryCheckpointStore):
    """
    Checkpoint store persisted to a compressed .npz file.

    Each commit writes a temporary file next to the target and renames it
    over the target, so readers only ever see a complete checkpoint.

    Args:
        filepath: Path of the checkpoint file (.npz)
        require: If True, loading from a missing file raises CheckpointError
    """

    def __init__(self, filepath, require=False):
        super().__init__(require=require)
        self.filepath = Path(filepath)

    def _read_sections(self) -> Dict[str, Any]:
        if not self.filepath.exists():
            return {}
        with np.load(self.filepath, allow_pickle=False) as data:
            return {name: data[name].copy() for name in data.files}

    def _write_sections(self, sections: Dict[str, Any]) -> None:
        self.filepath.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self.filepath.stem}.", suffix='.npz', dir=self.filepath.parent
        )
        try:
            with os.fdopen(fd, 'wb') as f:
                np.savez_compressed(f, **{k: np.asarray(v) for k, v in sections.items()})
            os.replace(tmp_name, self.filepath)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
        logger.info(f"Checkpoint saved to {self.filepath}")

    def __repr__(self):
        return f"NpzCheckpointStore({str(self.filepath)!r})"
