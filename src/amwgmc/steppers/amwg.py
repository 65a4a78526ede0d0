"""
AMWG Stepper (Adaptive Metropolis-Within-Gibbs)

Owns one substepper per named parameter, chosen by dispatch.make_stepper,
and updates every parameter once per step() in a random order that is
redrawn on each call.
"""

from typing import Any, Callable, Dict, Mapping

import numpy as np

from .base import Stepper
from .dispatch import make_stepper
from ..array_utils import random_permutation
from ..chain_state import ChainState
from ..param_specs import ParamSpec
from ..settings import resolve_param_options


class AmwgStepper(Stepper):
    """
    Gibbs sweep over all parameters.

    Args:
        params: Completed parameters, name -> ParamSpec
        state: Shared ChainState
        log_post: Zero-argument log posterior
        rng: Shared random generator
        options: Global stepper options, with per-parameter overrides under
                 options['params'][name]
    """

    def __init__(self, params: Mapping[str, ParamSpec], state: ChainState,
                 log_post: Callable[[], Any], rng: np.random.Generator,
                 options: Dict[str, Any] = None):
        super().__init__(state, log_post, rng)
        self.param_names = list(params.keys())
        self.substeppers = [
            make_stepper(name, params[name], state, log_post, rng,
                         resolve_param_options(name, options))
            for name in self.param_names
        ]

    def step(self) -> ChainState:
        for i in random_permutation(len(self.substeppers), self.rng):
            self.substeppers[i].step()
        return self.state

    def start_adaptation(self) -> None:
        for substepper in self.substeppers:
            substepper.start_adaptation()

    def stop_adaptation(self) -> None:
        for substepper in self.substeppers:
            substepper.stop_adaptation()

    def info(self) -> Dict[str, Any]:
        return {name: substepper.info()
                for name, substepper in zip(self.param_names, self.substeppers)}
