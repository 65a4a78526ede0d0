"""
Nested Array Utilities

Multi-dimensional parameters and the steppers that update them are stored as
nested Python lists (or numpy arrays for state values). These helpers build,
measure and traverse such nested structures:

- create_array: Build a nested list of a given shape
- is_nested: Whether a value is a nested list or array (ragged lists included)
- array_dim: Shape of a nested list or array
- leaves: Flat list of the leaves
- nested_apply: Apply a function to every leaf, preserving shape
- nested_random_apply: Same, but visiting indices in a fresh random order per level
- random_permutation: Random ordering of range(n)
- expand_option: Broadcast a scalar option to a given shape (or check its shape)
"""

from typing import Any, Callable, List, Sequence

import numpy as np


def is_nested(a: Any) -> bool:
    """True for lists, tuples and numpy arrays with at least one dimension."""
    if isinstance(a, np.ndarray):
        return a.ndim > 0
    return isinstance(a, (list, tuple))


def create_array(dim: Sequence[int], init: Any) -> list:
    """
    Create a nested list of shape `dim`.

    If `init` is callable it is called once per leaf, otherwise every leaf
    is set to `init`.

    Example:
        create_array([2, 3], 1) -> [[1, 1, 1], [1, 1, 1]]
    """
    if len(dim) == 0:
        raise ValueError("create_array can't create a dimensionless array")
    if len(dim) == 1:
        if callable(init):
            return [init() for _ in range(dim[0])]
        return [init for _ in range(dim[0])]
    return [create_array(dim[1:], init) for _ in range(dim[0])]


def array_dim(a: Any) -> List[int]:
    """
    Return the shape of a possibly nested list as a list.

    Assumes all lists at the same depth have the same length, e.g.
    array_dim(create_array([4, 2, 1], 0)) -> [4, 2, 1]
    Scalars have shape [].
    """
    if isinstance(a, np.ndarray):
        return list(a.shape)
    if not is_nested(a):
        return []
    if len(a) == 0:
        return [0]
    return [len(a)] + array_dim(a[0])


def is_rectangular(a: Any, dim: Sequence[int]) -> bool:
    """True if every branch of nested list `a` has exactly shape `dim`."""
    if len(dim) == 0:
        return not is_nested(a)
    if not is_nested(a) or len(a) != dim[0]:
        return False
    return all(is_rectangular(sub, dim[1:]) for sub in a)


def leaves(a: Any) -> list:
    """Flat list of the leaves of a nested list or array, depth first."""
    if not is_nested(a):
        return [a]
    return [leaf for sub in a for leaf in leaves(sub)]


def nested_apply(a: Any, fun: Callable) -> Any:
    """Apply `fun` to every leaf of nested list `a`, returning the same shape."""
    if isinstance(a, list):
        return [nested_apply(sub, fun) for sub in a]
    return fun(a)


def random_permutation(n: int, rng: np.random.Generator) -> np.ndarray:
    """Random ordering of range(n) (Fisher-Yates via numpy)."""
    return rng.permutation(n)


def nested_random_apply(a: Any, fun: Callable, rng: np.random.Generator) -> Any:
    """
    Like nested_apply, but every list level is visited in a freshly drawn
    random order. The result is indexed as the input, not in visit order.
    """
    if not isinstance(a, list):
        return fun(a)
    result = [None] * len(a)
    for i in random_permutation(len(a), rng):
        result[i] = nested_random_apply(a[i], fun, rng)
    return result


def expand_option(option_name: str, value: Any, dim: Sequence[int]) -> list:
    """
    Return `value` as a nested list of shape `dim`.

    A scalar is broadcast to every slot; an array must already have
    shape `dim`.

    Raises:
        ValueError: If an array value has the wrong shape
    """
    dim = list(dim)
    if not is_nested(value):
        return create_array(dim, value)
    if isinstance(value, np.ndarray):
        value = value.tolist()
    if not is_rectangular(value, dim):
        raise ValueError(
            f"The option {option_name} is of dimension {array_dim(value)} "
            f"but should be {dim}."
        )
    return value
