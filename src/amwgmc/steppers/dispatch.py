"""
Stepper Dispatch

Selects the stepper for a parameter from its type and whether it is scalar:

    type    | dim == [1]            | dim != [1]
    --------+-----------------------+----------------------
    real    | RealMetropolisStepper | RealComponentStepper
    int     | IntMetropolisStepper  | IntComponentStepper
    binary  | BinaryStepper         | BinaryComponentStepper
"""

from typing import Any, Callable, Dict

import numpy as np

from .base import Stepper
from .binary import BinaryStepper
from .component import BinaryComponentStepper, IntComponentStepper, RealComponentStepper
from .metropolis import IntMetropolisStepper, RealMetropolisStepper
from ..chain_state import ChainState
from ..error_handling import UnsupportedParameterTypeError
from ..param_specs import ParamSpec, ParamType


# (type, is_scalar) -> stepper class
STEPPER_DISPATCH_TABLE = {
    (ParamType.REAL, True): RealMetropolisStepper,
    (ParamType.REAL, False): RealComponentStepper,
    (ParamType.INT, True): IntMetropolisStepper,
    (ParamType.INT, False): IntComponentStepper,
    (ParamType.BINARY, True): BinaryStepper,
    (ParamType.BINARY, False): BinaryComponentStepper,
}


def select_stepper_class(name: str, spec: ParamSpec) -> type:
    """
    Look up the stepper class for a parameter.

    Raises:
        UnsupportedParameterTypeError: If the parameter's type has no stepper
    """
    try:
        param_type = ParamType(spec.type)
    except ValueError:
        raise UnsupportedParameterTypeError(
            f"No stepper can handle parameter '{name}' with type {spec.type!r}"
        ) from None
    is_scalar = tuple(spec.dim) == (1,)
    return STEPPER_DISPATCH_TABLE[(param_type, is_scalar)]


def make_stepper(name: str, spec: ParamSpec, state: ChainState,
                 log_post: Callable[[], Any], rng: np.random.Generator,
                 options: Dict[str, Any] = None) -> Stepper:
    """Build the stepper for one named parameter."""
    stepper_class = select_stepper_class(name, spec)
    return stepper_class.from_param(name, spec, state, log_post, rng, options)
