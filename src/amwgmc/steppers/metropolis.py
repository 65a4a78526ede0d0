"""
Adaptive Random Walk Metropolis Stepper for one scalar slot

Implements the Metropolis step of the Adaptive Metropolis-Within-Gibbs
algorithm in "Examples of Adaptive MCMC" by Roberts and Rosenthal (2008).

Proposal: x' ~ N(x, exp(log_scale)^2)          (real)
          x' = round(N(x, exp(log_scale)^2))   (int)

Both proposals are symmetric, so the acceptance probability is
min(1, exp(log_post(x') - log_post(x))). Proposals outside [lower, upper]
are rejected without evaluating the posterior.

Batch adaptation: after every `batch_size` iterations the log scale moves by
delta = min(max_adaptation_step, 1/sqrt(batch_count)), up when the batch
acceptance rate exceeds `target_accept_rate` and down otherwise.
"""

import math
from typing import Any, Callable, Dict

import numpy as np

from .base import Stepper
from ..chain_state import ChainState, StateSlot
from ..array_utils import expand_option, is_nested
from ..param_specs import ParamSpec
from ..settings import (
    STEPPER_DEFAULTS,
    AdaptationSettings,
    AdaptationState,
    adaptation_step_size,
)

import logging
logger = logging.getLogger('amwgmc')


def normal_proposal(value: float, log_scale: float, rng: np.random.Generator) -> float:
    """Continuous Normal random walk proposal."""
    return value + rng.normal(0.0, math.exp(log_scale))


def discrete_normal_proposal(value: int, log_scale: float, rng: np.random.Generator) -> int:
    """Normal random walk proposal rounded to the nearest integer."""
    return int(round(value + rng.normal(0.0, math.exp(log_scale))))


def acceptance_probability(curr_log_dens: float, prop_log_dens: float) -> float:
    """
    Metropolis acceptance probability min(1, exp(prop - curr)).

    An undefined difference (e.g. both densities -inf) gives 0.
    """
    log_ratio = prop_log_dens - curr_log_dens
    if math.isnan(log_ratio):
        return 0.0
    if log_ratio >= 0:
        return 1.0
    return math.exp(log_ratio)


class ScalarMetropolisStepper(Stepper):
    """
    Adaptive random walk Metropolis on a single scalar slot.

    Args:
        slot: The state slot this stepper updates
        lower, upper: Bounds of the slot's value
        log_post: Zero-argument log posterior of the whole state
        rng: Shared random generator
        generate_proposal: fn(value, log_scale, rng) -> candidate; defaults
            to the class's proposal
        log_scale_init, batch_size, max_adaptation_step,
        target_accept_rate, is_adapting: See settings.STEPPER_DEFAULTS
    """

    generate_proposal = staticmethod(normal_proposal)

    def __init__(self, slot: StateSlot, lower: float, upper: float,
                 log_post: Callable[[], Any], rng: np.random.Generator,
                 generate_proposal: Callable = None,
                 log_scale_init: float = STEPPER_DEFAULTS['log_scale_init'],
                 batch_size: int = STEPPER_DEFAULTS['batch_size'],
                 max_adaptation_step: float = STEPPER_DEFAULTS['max_adaptation_step'],
                 target_accept_rate: float = STEPPER_DEFAULTS['target_accept_rate'],
                 is_adapting: bool = STEPPER_DEFAULTS['is_adapting']):
        super().__init__(slot.state, log_post, rng)
        self.slot = slot
        self.lower = lower
        self.upper = upper
        if generate_proposal is not None:
            self.generate_proposal = generate_proposal
        self.settings = AdaptationSettings(
            batch_size=int(batch_size),
            max_adaptation_step=float(max_adaptation_step),
            target_accept_rate=float(target_accept_rate),
        )
        self.adaptation = AdaptationState(log_scale=float(log_scale_init))
        self.is_adapting = bool(is_adapting)

    @classmethod
    def from_param(cls, name: str, spec: ParamSpec, state: ChainState,
                   log_post: Callable[[], Any], rng: np.random.Generator,
                   options: Dict[str, Any] = None) -> 'ScalarMetropolisStepper':
        """Build the stepper for a scalar parameter from resolved options."""
        options = options or {}
        scalar_options = {}
        for key, value in options.items():
            if key not in STEPPER_DEFAULTS:
                continue
            if is_nested(value):
                value = expand_option(key, value, spec.dim)[0]
            scalar_options[key] = value
        return cls(StateSlot(state, name), spec.lower, spec.upper, log_post, rng,
                   **scalar_options)

    def step(self) -> Any:
        param_state = self.slot.get()
        proposal = self.generate_proposal(param_state, self.adaptation.log_scale, self.rng)

        if self.lower <= proposal <= self.upper:
            curr_log_dens = float(self.log_post())
            self.slot.set(proposal)
            prop_log_dens = float(self.log_post())
            if self.rng.random() < acceptance_probability(curr_log_dens, prop_log_dens):
                # state already holds the proposal
                if self.is_adapting:
                    self.adaptation.acceptance_count += 1
            else:
                self.slot.set(param_state)
        # else: outside the support, density is zero, stay put

        if self.is_adapting:
            self._adapt()
        return self.slot.get()

    def _adapt(self) -> None:
        adaptation = self.adaptation
        adaptation.iterations_since_batch += 1
        if adaptation.iterations_since_batch < self.settings.batch_size:
            return

        adaptation.batch_count += 1
        delta = adaptation_step_size(adaptation.batch_count, self.settings.max_adaptation_step)
        accept_rate = adaptation.acceptance_count / self.settings.batch_size
        if accept_rate > self.settings.target_accept_rate:
            adaptation.log_scale += delta
        else:
            adaptation.log_scale -= delta
        logger.debug(
            f"{self.slot.label()}: batch {adaptation.batch_count} acceptance "
            f"{accept_rate:.2f}, log scale now {adaptation.log_scale:.4f}"
        )
        adaptation.acceptance_count = 0
        adaptation.iterations_since_batch = 0

    def start_adaptation(self) -> None:
        self.is_adapting = True

    def stop_adaptation(self) -> None:
        self.is_adapting = False

    def info(self) -> Dict[str, Any]:
        return {
            'log_scale': self.adaptation.log_scale,
            'proposal_sd': math.exp(self.adaptation.log_scale),
            'is_adapting': self.is_adapting,
            'acceptance_count': self.adaptation.acceptance_count,
            'iterations_since_batch': self.adaptation.iterations_since_batch,
            'batch_count': self.adaptation.batch_count,
        }


class RealMetropolisStepper(ScalarMetropolisStepper):
    """Continuous Normal proposals."""
    generate_proposal = staticmethod(normal_proposal)


class IntMetropolisStepper(ScalarMetropolisStepper):
    """Discretized Normal proposals."""
    generate_proposal = staticmethod(discrete_normal_proposal)
