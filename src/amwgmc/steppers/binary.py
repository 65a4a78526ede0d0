"""
Exact Gibbs Stepper for one binary slot

The full conditional of a 0/1 slot has only two states, so it is sampled
exactly: evaluate the log posterior at 0 and at 1 and draw from

    P(0) = exp(L0) / (exp(L0) + exp(L1))

Both log densities are shifted by their maximum before exponentiating.
No tuning is involved.
"""

import math
from typing import Any, Callable, Dict

import numpy as np

from .base import Stepper
from ..chain_state import ChainState, StateSlot
from ..param_specs import ParamSpec


def binary_zero_probability(zero_log_dens: float, one_log_dens: float) -> float:
    """Probability of state 0 given the log densities of states 0 and 1."""
    max_log_dens = max(zero_log_dens, one_log_dens)
    zero_dens = math.exp(zero_log_dens - max_log_dens)
    one_dens = math.exp(one_log_dens - max_log_dens)
    return zero_dens / (zero_dens + one_dens)


class BinaryStepper(Stepper):
    """Exact two-state update of a single binary slot."""

    def __init__(self, slot: StateSlot, log_post: Callable[[], Any], rng: np.random.Generator):
        super().__init__(slot.state, log_post, rng)
        self.slot = slot

    @classmethod
    def from_param(cls, name: str, spec: ParamSpec, state: ChainState,
                   log_post: Callable[[], Any], rng: np.random.Generator,
                   options: Dict[str, Any] = None) -> 'BinaryStepper':
        del spec, options  # Unused
        return cls(StateSlot(state, name), log_post, rng)

    def step(self) -> int:
        self.slot.set(0)
        zero_log_dens = float(self.log_post())
        self.slot.set(1)
        one_log_dens = float(self.log_post())

        if self.rng.random() < binary_zero_probability(zero_log_dens, one_log_dens):
            self.slot.set(0)
            return 0
        # else keep the slot at 1
        return 1
