"""
Samplers usable with the chain runner.

Each sampler provides transition(state) -> state plus save_state() /
restore_state() for checkpointing its adaptation.
"""

from .rand_walk import RandomWalkMetropolis

__all__ = ['RandomWalkMetropolis']
