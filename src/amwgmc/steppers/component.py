"""
Component-wise Stepper for multi-dimensional parameters

Wraps one scalar stepper around every slot of a (possibly nested)
multi-dimensional parameter. Each slot is treated as a one-dimensional
parameter with the parent's type and bounds but its own tuning counters.

The substeppers are stored as a nested list with the parameter's shape.
step() visits them depth first, drawing a fresh random order of the indices
at every level on every call, which avoids a fixed scan order across sweeps.

Stepper options may be given per slot as nested arrays of shape dim, or as
scalars shared by every slot.
"""

from typing import Any, Callable, Dict, Sequence, Tuple, Type

import numpy as np

from .base import Stepper
from .binary import BinaryStepper
from .metropolis import IntMetropolisStepper, RealMetropolisStepper
from ..array_utils import expand_option, nested_apply, nested_random_apply
from ..chain_state import ChainState, StateSlot
from ..param_specs import ParamSpec
from ..settings import STEPPER_DEFAULTS


class ComponentStepper(Stepper):
    """
    Base class for component-wise steppers; subclasses set `substepper_class`.

    Args:
        name: Name of the multi-dimensional parameter
        spec: Its completed ParamSpec
        state, log_post, rng: See Stepper
        options: Stepper options, scalars or nested arrays of shape spec.dim
    """

    substepper_class: Type[Stepper] = None
    adaptive = True

    def __init__(self, name: str, spec: ParamSpec, state: ChainState,
                 log_post: Callable[[], Any], rng: np.random.Generator,
                 options: Dict[str, Any] = None):
        super().__init__(state, log_post, rng)
        self.param_name = name
        self.lower = spec.lower
        self.upper = spec.upper
        self.dim = tuple(spec.dim)

        options = options or {}
        slot_options = {}
        if self.adaptive:
            slot_options = {
                key: expand_option(key, options[key], self.dim)
                for key in STEPPER_DEFAULTS if options.get(key) is not None
            }
        self.substeppers = self._create_substeppers((), self.dim, slot_options)

    @classmethod
    def from_param(cls, name: str, spec: ParamSpec, state: ChainState,
                   log_post: Callable[[], Any], rng: np.random.Generator,
                   options: Dict[str, Any] = None) -> 'ComponentStepper':
        return cls(name, spec, state, log_post, rng, options)

    def _create_substeppers(self, index: Tuple[int, ...], dim: Sequence[int],
                            slot_options: Dict[str, list]) -> list:
        substeppers = []
        for i in range(dim[0]):
            sub_options = {key: value[i] for key, value in slot_options.items()}
            if len(dim) == 1:
                slot = StateSlot(self.state, self.param_name, index + (i,))
                substeppers.append(self._make_substepper(slot, sub_options))
            else:
                substeppers.append(self._create_substeppers(index + (i,), dim[1:], sub_options))
        return substeppers

    def _make_substepper(self, slot: StateSlot, options: Dict[str, Any]) -> Stepper:
        return self.substepper_class(slot, self.lower, self.upper, self.log_post, self.rng,
                                     **options)

    def step(self) -> list:
        # Go through the substeppers in a random order and call step() on them.
        return nested_random_apply(self.substeppers, lambda substepper: substepper.step(), self.rng)

    def start_adaptation(self) -> None:
        nested_apply(self.substeppers, lambda substepper: substepper.start_adaptation())

    def stop_adaptation(self) -> None:
        nested_apply(self.substeppers, lambda substepper: substepper.stop_adaptation())

    def info(self) -> list:
        return nested_apply(self.substeppers, lambda substepper: substepper.info())


class RealComponentStepper(ComponentStepper):
    substepper_class = RealMetropolisStepper


class IntComponentStepper(ComponentStepper):
    substepper_class = IntMetropolisStepper


class BinaryComponentStepper(ComponentStepper):
    substepper_class = BinaryStepper
    adaptive = False

    def _make_substepper(self, slot: StateSlot, options: Dict[str, Any]) -> Stepper:
        return BinaryStepper(slot, self.log_post, self.rng)
