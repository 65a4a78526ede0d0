"""
Chain State

The chain state holds the current value of every parameter. A single
ChainState is shared by reference between the Sampler and every stepper;
steppers mutate it in place and never keep private copies.

Scalar parameters (dim == [1]) are stored as plain Python numbers,
multi-dimensional parameters as numpy arrays (float64 for real, int64 for
int and binary) that are updated element by element.

The log posterior may write extra keys into the state while it is being
evaluated (derived quantities). These are tracked separately from the
declared parameters: they are never stepped, but they can be monitored.
"""

import copy
from collections.abc import MutableMapping
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Tuple

import numpy as np

from .param_specs import ParamSpec, ParamType


class ChainState(MutableMapping):
    """
    Mapping of name -> current value, split into declared parameters and
    derived quantities.

    Any key that is not a declared parameter is a derived quantity. Declared
    parameters cannot be deleted.
    """

    def __init__(self, values: Mapping[str, Any], param_names: Iterable[str]):
        self._param_names = tuple(param_names)
        self._param_set = frozenset(self._param_names)
        missing = [name for name in self._param_names if name not in values]
        if missing:
            raise KeyError(f"No initial value for parameters {missing}")
        self._values: Dict[str, Any] = dict(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._values[key] = value

    def __delitem__(self, key: str) -> None:
        if key in self._param_set:
            raise KeyError(f"Cannot delete declared parameter '{key}'")
        del self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ChainState({self._values!r})"

    @property
    def param_names(self) -> Tuple[str, ...]:
        """Names of the declared parameters, in declaration order."""
        return self._param_names

    @property
    def derived_names(self) -> Tuple[str, ...]:
        """Names of derived quantities written by the log posterior."""
        return tuple(k for k in self._values if k not in self._param_set)

    @property
    def has_derived(self) -> bool:
        return len(self._values) > len(self._param_names)

    def is_param(self, key: str) -> bool:
        return key in self._param_set

    def snapshot(self, keys: Optional[Iterable[str]] = None) -> Dict[str, Any]:
        """Copy of the current values (arrays are copied, not shared)."""
        keys = self._values.keys() if keys is None else keys
        return {k: copy_value(self._values[k]) for k in keys}


def copy_value(value: Any) -> Any:
    """Copy a state value so later in-place updates don't affect it."""
    if isinstance(value, np.ndarray):
        return value.copy()
    if isinstance(value, (list, dict)):
        return copy.deepcopy(value)
    return value


def _scalar(param_type: ParamType, value: Any) -> Any:
    if param_type == ParamType.REAL:
        return float(value)
    return int(value)


def initial_value(spec: ParamSpec) -> Any:
    """State value built from a completed parameter's init."""
    if spec.is_scalar:
        return _scalar(spec.type, spec.init[0])
    dtype = np.float64 if spec.type == ParamType.REAL else np.int64
    return np.array(spec.init, dtype=dtype)


def initial_state(params: Mapping[str, ParamSpec]) -> ChainState:
    """
    Build a ChainState from completed parameters.

    Args:
        params: Mapping of name -> ParamSpec (see complete_params)

    Returns:
        A new ChainState holding each parameter's initial value
    """
    values = {name: initial_value(spec) for name, spec in params.items()}
    return ChainState(values, params.keys())


class StateSlot:
    """
    One scalar slot of the chain state: either a whole scalar parameter
    (index None) or a single element of a multi-dimensional parameter.
    """

    __slots__ = ('state', 'name', 'index')

    def __init__(self, state: ChainState, name: str, index: Optional[Tuple[int, ...]] = None):
        self.state = state
        self.name = name
        self.index = index

    def get(self) -> Any:
        if self.index is None:
            return self.state[self.name]
        return self.state[self.name][self.index].item()

    def set(self, value: Any) -> None:
        if self.index is None:
            self.state[self.name] = value
        else:
            self.state[self.name][self.index] = value

    def label(self) -> str:
        if self.index is None:
            return self.name
        return f"{self.name}[{', '.join(str(i) for i in self.index)}]"

    def __repr__(self) -> str:
        return f"StateSlot({self.label()})"
