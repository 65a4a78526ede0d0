"""
Parameter Specification Tests

Tests completion of partial parameter descriptions:
- Default fields and initial values
- Idempotence and shape of completed inits
- Error reporting for malformed descriptions
- Initial value policies

Run with: pytest tests/test_param_specs.py -v
"""

import copy
import logging
import math

import numpy as np
import pytest

from amwgmc.array_utils import array_dim
from amwgmc.error_handling import InvalidParameterError, UnsupportedParameterTypeError
from amwgmc.param_specs import (
    ParamSpec,
    ParamType,
    complete_param,
    complete_params,
    param_init_fixed,
    params_to_dict,
    random_param_init,
)


# ============================================================================
# COMPLETION TESTS
# ============================================================================

class TestCompleteParams:
    """Test filling in missing fields of parameter descriptions."""

    def test_params1(self, params1, params1_completed):
        completed = complete_params(params1)
        assert params_to_dict(completed) == params1_completed

    def test_params2(self, params2):
        completed = complete_params(params2)

        theta = completed['theta']
        assert theta.type == ParamType.REAL
        assert theta.dim == (1,)
        assert theta.lower == -math.inf and theta.upper == math.inf
        assert theta.init == [0.5]

        state = completed['state']
        assert state.type == ParamType.BINARY
        assert (state.lower, state.upper) == (0, 1)
        assert state.init == [1]

        mat = completed['mat']
        assert mat.type == ParamType.INT
        assert mat.dim == (3, 3)
        assert mat.init == [[1, 1, 1], [1, 1, 1], [1, 1, 1]]

    def test_preserves_order(self, params2):
        assert list(complete_params(params2).keys()) == ['theta', 'state', 'mat']

    def test_idempotent(self, params1, params2):
        for params in (params1, params2):
            once = complete_params(params)
            assert complete_params(params_to_dict(once)) == once
            assert complete_params(once) == once

    def test_input_not_mutated(self, params2):
        original = copy.deepcopy(params2)
        complete_params(params2)
        assert params2 == original

    def test_init_shape_matches_dim(self):
        params = {
            'a': {'dim': [4]},
            'b': {'type': 'int', 'dim': [2, 3], 'lower': 0, 'upper': 10},
            'c': {'type': 'binary', 'dim': [2, 1, 2]},
        }
        for name, spec in complete_params(params).items():
            assert tuple(array_dim(spec.init)) == spec.dim, name

    def test_scalar_init_broadcast(self):
        spec = complete_param('x', {'dim': [2, 2], 'init': 3.0})
        assert spec.init == [[3.0, 3.0], [3.0, 3.0]]

    def test_callable_init(self):
        values = iter(range(10))
        spec = complete_param('x', {'dim': [3], 'init': lambda: next(values)})
        assert spec.init == [0, 1, 2]

    def test_callable_leaves_in_init(self):
        spec = complete_param('x', {'dim': [2], 'init': [lambda: 7.0, 2.0]})
        assert spec.init == [7.0, 2.0]

    def test_numpy_init(self):
        spec = complete_param('x', {'dim': [2, 2], 'init': np.ones((2, 2))})
        assert spec.init == [[1.0, 1.0], [1.0, 1.0]]

    def test_integer_dim(self):
        assert complete_param('x', {'dim': 3}).dim == (3,)

    def test_none_counts_as_missing(self):
        spec = complete_param('x', {'type': None, 'lower': None, 'upper': None, 'init': None})
        assert spec.type == ParamType.REAL
        assert spec.lower == -math.inf and spec.upper == math.inf
        assert spec.init == [0.5]

    def test_binary_bounds_forced(self):
        spec = complete_param('z', {'type': 'binary', 'lower': -5, 'upper': 5})
        assert (spec.lower, spec.upper) == (0, 1)

    def test_custom_init_policy(self):
        completed = complete_params({'x': {'dim': [2]}}, lambda type, lower, upper: 42.0)
        assert completed['x'].init == [42.0, 42.0]


# ============================================================================
# ERROR TESTS
# ============================================================================

class TestCompletionErrors:
    """Malformed descriptions are rejected."""

    def test_unsupported_type(self):
        with pytest.raises(UnsupportedParameterTypeError, match='complex'):
            complete_params({'x': {'type': 'complex'}})

    def test_unsupported_type_is_invalid_parameter(self):
        with pytest.raises(InvalidParameterError):
            complete_params({'x': {'type': 'string'}})

    def test_lower_above_upper_without_init(self):
        with pytest.raises(InvalidParameterError, match='lower bound'):
            complete_params({'x': {'lower': 5, 'upper': 1}})

    def test_lower_above_upper_with_init_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger='amwgmc'):
            spec = complete_param('x', {'lower': 5, 'upper': 1, 'init': 3})
        assert spec.init == [3]
        assert 'lower bound' in caplog.text

    def test_init_shape_mismatch(self):
        with pytest.raises(InvalidParameterError, match='dimension'):
            complete_params({'x': {'dim': [2], 'init': [1, 2, 3]}})

    def test_ragged_init(self):
        with pytest.raises(InvalidParameterError):
            complete_params({'x': {'dim': [2, 2], 'init': [[1, 2], [3]]}})

    @pytest.mark.parametrize('init', [2.7, math.inf, math.nan, True, '3'])
    def test_non_integral_int_init(self, init):
        with pytest.raises(InvalidParameterError, match="'k' is an int"):
            complete_params({'k': {'type': 'int', 'init': init}})

    def test_integral_float_int_init(self):
        spec = complete_param('k', {'type': 'int', 'dim': [2], 'init': [3.0, -1]})
        assert spec.init == [3, -1]

    @pytest.mark.parametrize('description', [
        {'type': 'binary', 'init': 5},
        {'type': 'binary', 'dim': [2], 'init': [0, 2]},
        {'type': 'binary', 'dim': [2, 2], 'init': [[0, 1], [1, 0.5]]},
    ])
    def test_binary_init_outside_0_1(self, description):
        with pytest.raises(InvalidParameterError, match='expected 0 or 1'):
            complete_params({'z': description})

    def test_unknown_field(self):
        with pytest.raises(InvalidParameterError, match='unknown fields'):
            complete_params({'x': {'typ': 'real'}})

    @pytest.mark.parametrize('dim', [[], [0], [2, -1], [1.5], 'abc'])
    def test_bad_dim(self, dim):
        with pytest.raises(InvalidParameterError):
            complete_params({'x': {'dim': dim}})

    def test_description_not_a_dict(self):
        with pytest.raises(InvalidParameterError):
            complete_params({'x': 'real'})

    def test_paramspec_checks_init(self):
        with pytest.raises(InvalidParameterError):
            ParamSpec(type='real', dim=[2], lower=-math.inf, upper=math.inf, init=[1.0])


# ============================================================================
# INITIAL VALUE POLICY TESTS
# ============================================================================

class TestParamInitFixed:
    """Deterministic initial values."""

    @pytest.mark.parametrize('lower, upper, expected', [
        (-math.inf, math.inf, 0.5),
        (-math.inf, 3, 2.5),
        (2, math.inf, 2.5),
        (0, 10, 5.0),
    ])
    def test_real(self, lower, upper, expected):
        assert param_init_fixed('real', lower, upper) == expected

    @pytest.mark.parametrize('lower, upper, expected', [
        (-math.inf, math.inf, 1),
        (-math.inf, 3, 2),
        (2, math.inf, 3),
        (0, 10, 5),
        (0, 5, 3),
        (-5, 0, -2),
    ])
    def test_int(self, lower, upper, expected):
        value = param_init_fixed('int', lower, upper)
        assert value == expected
        assert isinstance(value, int)

    def test_binary(self):
        assert param_init_fixed('binary', 0, 1) == 1

    def test_lower_above_upper(self):
        with pytest.raises(InvalidParameterError):
            param_init_fixed('real', 1, 0)

    def test_unknown_type(self):
        with pytest.raises(InvalidParameterError):
            param_init_fixed('complex', 0, 1)


class TestRandomParamInit:
    """Random initial values stay within bounds."""

    @pytest.mark.parametrize('type, lower, upper', [
        ('real', -math.inf, math.inf),
        ('real', 0, math.inf),
        ('real', -math.inf, 0),
        ('real', -2, 3),
        ('int', -math.inf, math.inf),
        ('int', 0, math.inf),
        ('int', -math.inf, 0),
        ('int', -2, 3),
        ('binary', 0, 1),
    ])
    def test_within_bounds(self, rng, type, lower, upper):
        init = random_param_init(rng)
        for _ in range(100):
            value = init(type, lower, upper)
            assert lower <= value <= upper
            if type != 'real':
                assert isinstance(value, int)

    def test_as_completion_policy(self, rng):
        completed = complete_params({'x': {'dim': [5], 'lower': 0, 'upper': 1}},
                                    random_param_init(rng))
        assert all(0 <= v <= 1 for v in completed['x'].init)

    def test_no_integer_in_bounds(self, rng):
        with pytest.raises(InvalidParameterError):
            random_param_init(rng)('int', 0.2, 0.8)
