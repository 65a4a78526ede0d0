"""
Parameter Specification System

This module defines how model parameters are described and how partial
descriptions are completed into fully populated specifications.

A parameter description is a JSON-like dict with any subset of the fields

    type:  'real' | 'int' | 'binary'      (default 'real')
    dim:   list of positive ints          (default [1], i.e. a scalar)
    lower: lower bound                    (default -inf, 0 for binary)
    upper: upper bound                    (default +inf, 1 for binary)
    init:  number, zero-argument callable, or nested list of those

complete_params() turns a mapping name -> description into a mapping
name -> ParamSpec where every field is set and init has exactly shape dim:

    complete_params({'mu': {'type': 'real'}})
    -> {'mu': ParamSpec(type=REAL, dim=(1,), lower=-inf, upper=inf, init=[0.5])}
"""

import copy
import math
import numbers
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Mapping, Tuple, Union

import numpy as np

from .array_utils import array_dim, create_array, is_rectangular, leaves, nested_apply
from .error_handling import InvalidParameterError, UnsupportedParameterTypeError

import logging
logger = logging.getLogger('amwgmc')


PARAM_FIELDS = ('type', 'dim', 'lower', 'upper', 'init')


# ============================================================================
# PARAMETER TYPE ENUMERATION
# ============================================================================

class ParamType(str, Enum):
    """
    Enumeration of parameter value types.

    The string values are the ones used in parameter descriptions.
    """
    REAL = 'real'      # Continuous, random-walk Metropolis with Normal proposals
    INT = 'int'        # Integer, random-walk Metropolis with rounded Normal proposals
    BINARY = 'binary'  # 0/1, exact two-state Gibbs draw

    def __str__(self):
        return self.value


def parse_param_type(value: Any) -> ParamType:
    """
    Convert a type name to ParamType.

    Raises:
        UnsupportedParameterTypeError: If the type is not real, int or binary
    """
    try:
        return ParamType(value)
    except ValueError:
        raise UnsupportedParameterTypeError(
            f"Unsupported parameter type {value!r}, expected one of "
            f"{[t.value for t in ParamType]}"
        ) from None


# ============================================================================
# PARAMETER SPECIFICATION
# ============================================================================

@dataclass
class ParamSpec:
    """
    Complete specification of a single named parameter.

    Fields:
        type: ParamType of every slot
        dim: Shape as a tuple of positive ints, (1,) for a scalar
        lower: Lower bound shared by every slot (may be -inf)
        upper: Upper bound shared by every slot (may be +inf)
        init: Initial value as a nested list whose shape equals dim.
              A scalar parameter has init [value].
    """
    type: ParamType
    dim: Tuple[int, ...]
    lower: float
    upper: float
    init: list

    def __post_init__(self):
        """Validate the specification after initialization."""
        if not isinstance(self.type, ParamType):
            self.type = parse_param_type(self.type)
        self.dim = _parse_dim(self.dim)
        if not is_rectangular(self.init, self.dim):
            raise InvalidParameterError(
                f"init has dimension {array_dim(self.init)} but dim is {list(self.dim)}"
            )

    @property
    def is_scalar(self) -> bool:
        """True for one-dimensional parameters (dim == [1])."""
        return self.dim == (1,)

    def to_dict(self) -> Dict[str, Any]:
        """Plain, JSON-representable description of this parameter."""
        return {
            'type': self.type.value,
            'dim': list(self.dim),
            'lower': self.lower,
            'upper': self.upper,
            'init': copy.deepcopy(self.init),
        }


ParamDescription = Union[Mapping[str, Any], ParamSpec]


# ============================================================================
# INITIAL VALUE POLICIES
# ============================================================================

def param_init_fixed(type: Union[str, ParamType], lower: float, upper: float):
    """
    Returns a number that can be used to initialize a parameter.

    real:   midpoint of finite bounds, bound -/+ 0.5 when only one bound is
            finite, 0.5 when both are infinite
    int:    rounded midpoint, bound -/+ 1, or 1
    binary: 1

    Raises:
        InvalidParameterError: If lower > upper or the type is unknown
    """
    if lower > upper:
        raise InvalidParameterError(
            f"Could not initialize parameter of type {type} [{lower}, {upper}]: lower > upper"
        )
    if type == ParamType.REAL:
        if lower == -math.inf and upper == math.inf:
            return 0.5
        elif lower == -math.inf:
            return upper - 0.5
        elif upper == math.inf:
            return lower + 0.5
        return (lower + upper) / 2
    elif type == ParamType.INT:
        if lower == -math.inf and upper == math.inf:
            return 1
        elif lower == -math.inf:
            return int(upper) - 1
        elif upper == math.inf:
            return int(lower) + 1
        # Round half up
        return int(math.floor((lower + upper) / 2 + 0.5))
    elif type == ParamType.BINARY:
        return 1
    raise InvalidParameterError(
        f"Could not initialize parameter of type {type} [{lower}, {upper}]"
    )


def random_param_init(rng: np.random.Generator) -> Callable:
    """
    Build an initialization policy that draws starting values from `rng`.

    real:   Uniform(lower, upper) for finite bounds, otherwise Uniform on a
            unit-width interval next to the finite bound, or Uniform(-1, 1)
    int:    uniform integer in [ceil(lower), floor(upper)], otherwise 1 or 2
            steps inside the finite bound, or one of -1, 0, 1
    binary: 0 or 1 with equal probability

    The returned function has the same signature as param_init_fixed and can
    be passed as the `param_init_fun` sampler option.
    """
    def param_init_random(type, lower, upper):
        if lower > upper:
            raise InvalidParameterError(
                f"Could not initialize parameter of type {type} [{lower}, {upper}]: lower > upper"
            )
        lower_finite = lower != -math.inf
        upper_finite = upper != math.inf
        if type == ParamType.REAL:
            if lower_finite and upper_finite:
                return float(rng.uniform(lower, upper))
            elif upper_finite:
                return float(upper - rng.uniform(0.0, 1.0))
            elif lower_finite:
                return float(lower + rng.uniform(0.0, 1.0))
            return float(rng.uniform(-1.0, 1.0))
        elif type == ParamType.INT:
            if lower_finite and upper_finite:
                low, high = math.ceil(lower), math.floor(upper)
                if low > high:
                    raise InvalidParameterError(
                        f"No integer lies in [{lower}, {upper}]"
                    )
                return int(rng.integers(low, high, endpoint=True))
            elif upper_finite:
                return int(upper) - int(rng.integers(1, 2, endpoint=True))
            elif lower_finite:
                return int(lower) + int(rng.integers(1, 2, endpoint=True))
            return int(rng.integers(-1, 1, endpoint=True))
        elif type == ParamType.BINARY:
            return int(rng.integers(0, 1, endpoint=True))
        raise InvalidParameterError(
            f"Could not initialize parameter of type {type} [{lower}, {upper}]"
        )

    return param_init_random


# ============================================================================
# COMPLETION
# ============================================================================

def _parse_dim(dim: Any) -> Tuple[int, ...]:
    if isinstance(dim, numbers.Integral) and not isinstance(dim, bool):
        dim = [dim]
    try:
        dim = list(dim)
    except TypeError:
        raise InvalidParameterError(f"dim must be a list of positive integers, got {dim!r}") from None
    if len(dim) == 0:
        raise InvalidParameterError("dim must have at least one entry")
    for d in dim:
        if isinstance(d, bool) or not isinstance(d, numbers.Integral) or d < 1:
            raise InvalidParameterError(f"dim must be a list of positive integers, got {dim!r}")
    return tuple(int(d) for d in dim)


def _resolve_leaf(value: Any) -> Any:
    return value() if callable(value) else value


def _complete_init(name: str, raw: Dict[str, Any], param_type: ParamType, dim: Tuple[int, ...],
                   lower, upper, param_init: Callable) -> list:
    init = raw.get('init')

    if init is None:
        if lower > upper:
            raise InvalidParameterError(
                f"Parameter '{name}' has lower bound {lower} > upper bound {upper}"
            )
        return create_array(dim, lambda: param_init(param_type, lower, upper))

    if lower > upper:
        logger.warning(
            f"Parameter '{name}' has lower bound {lower} > upper bound {upper}; "
            f"every proposal will be rejected"
        )

    if isinstance(init, np.ndarray):
        init = init.tolist()
    if isinstance(init, (list, tuple)):
        init = nested_apply(_as_lists(init), _resolve_leaf)
        if not is_rectangular(init, dim):
            raise InvalidParameterError(
                f"Parameter '{name}' has init of dimension {array_dim(init)} "
                f"but dim is {list(dim)}"
            )
        return init

    # A number or a zero-argument callable, used for every slot
    return create_array(dim, init)


def _check_init_values(name: str, param_type: ParamType, init: list) -> None:
    if param_type == ParamType.REAL:
        return
    for value in leaves(init):
        if param_type == ParamType.BINARY:
            if value not in (0, 1):
                raise InvalidParameterError(
                    f"Parameter '{name}' is binary but has init value {value!r}, expected 0 or 1"
                )
        elif (isinstance(value, bool) or not isinstance(value, numbers.Real)
              or not math.isfinite(value) or value != math.floor(value)):
            raise InvalidParameterError(
                f"Parameter '{name}' is an int but has non-integral init value {value!r}"
            )


def _as_lists(a: Any) -> Any:
    if isinstance(a, (list, tuple)):
        return [_as_lists(sub) for sub in a]
    return a


def complete_param(name: str, description: ParamDescription,
                   param_init: Callable = param_init_fixed) -> ParamSpec:
    """
    Complete a single parameter description into a ParamSpec.

    Args:
        name: Parameter name (used in error messages)
        description: Partial description dict, or an existing ParamSpec
        param_init: Policy fn(type, lower, upper) -> number for missing inits

    Returns:
        A new ParamSpec; the description is not modified

    Raises:
        InvalidParameterError: For malformed descriptions
        UnsupportedParameterTypeError: For an unknown type
    """
    if isinstance(description, ParamSpec):
        description = description.to_dict()
    if not isinstance(description, Mapping):
        raise InvalidParameterError(
            f"Parameter '{name}' must be described by a dict, got {type(description).__name__}"
        )

    raw = copy.deepcopy(dict(description))
    unknown = [k for k in raw if k not in PARAM_FIELDS]
    if unknown:
        raise InvalidParameterError(
            f"Parameter '{name}' has unknown fields {unknown}; allowed: {list(PARAM_FIELDS)}"
        )

    param_type = parse_param_type(raw['type'] if raw.get('type') is not None else ParamType.REAL)
    dim = _parse_dim(raw['dim'] if raw.get('dim') is not None else [1])

    if param_type == ParamType.BINARY:
        lower, upper = 0, 1
    else:
        lower = raw['lower'] if raw.get('lower') is not None else -math.inf
        upper = raw['upper'] if raw.get('upper') is not None else math.inf

    init = _complete_init(name, raw, param_type, dim, lower, upper, param_init)
    _check_init_values(name, param_type, init)

    return ParamSpec(type=param_type, dim=dim, lower=lower, upper=upper, init=init)


def complete_params(params: Mapping[str, ParamDescription],
                    param_init: Callable = param_init_fixed) -> Dict[str, ParamSpec]:
    """
    Complete every parameter description in `params`.

    Missing fields are filled in (see module docstring) and missing initial
    values are produced by `param_init(type, lower, upper)`. Completing an
    already completed mapping returns an equal mapping.

    Args:
        params: Mapping of parameter name -> partial description
        param_init: Initialization policy, default param_init_fixed

    Returns:
        Dict of parameter name -> ParamSpec, in the input order
    """
    return {name: complete_param(name, description, param_init)
            for name, description in params.items()}


def params_to_dict(params: Mapping[str, ParamSpec]) -> Dict[str, Dict[str, Any]]:
    """JSON-representable form of completed parameters."""
    return {name: spec.to_dict() for name, spec in params.items()}
