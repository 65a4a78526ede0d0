"""
Stepper interface.

A Stepper is responsible for pushing one or more slots of the chain state
around according to the distribution defined by the log posterior.

Every stepper holds:
    state:    Reference to the shared ChainState it mutates in place
    log_post: A function *taking no arguments* that returns the log density
              of the current state, so its value changes when state changes
    rng:      The shared numpy Generator all random draws come from
"""

from typing import Any, Callable, Dict

import numpy as np

from ..chain_state import ChainState
from ..error_handling import StepperNotImplementedError


class Stepper:
    """Base class of all steppers. Only step() must be overridden."""

    def __init__(self, state: ChainState, log_post: Callable[[], Any], rng: np.random.Generator):
        self.state = state
        self.log_post = log_post
        self.rng = rng

    def step(self) -> Any:
        """Take one Markov transition, mutating state in place."""
        raise StepperNotImplementedError(
            f"{type(self).__name__} does not implement step()"
        )

    def start_adaptation(self) -> None:
        """Optional, non-adaptive steppers ignore this."""

    def stop_adaptation(self) -> None:
        """Optional, non-adaptive steppers ignore this."""

    def info(self) -> Dict[str, Any]:
        """Read-only information about the stepper's tuning state."""
        return {}
