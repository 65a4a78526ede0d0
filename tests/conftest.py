"""
Pytest configuration and shared fixtures for amwgmc tests.
"""

import math

import numpy as np
import pytest

from amwgmc.chain_state import ChainState


@pytest.fixture
def rng_seed():
    """Default RNG seed for reproducible tests."""
    return 42


@pytest.fixture
def rng(rng_seed):
    return np.random.default_rng(rng_seed)


@pytest.fixture
def params1():
    """Normal mean/SD model parameters."""
    return {
        'mu': {'type': 'real'},
        'sigma': {'type': 'real', 'lower': 0, 'init': 1},
    }


@pytest.fixture
def params1_completed():
    return {
        'mu': {'type': 'real', 'dim': [1], 'lower': -math.inf, 'upper': math.inf, 'init': [0.5]},
        'sigma': {'type': 'real', 'dim': [1], 'lower': 0, 'upper': math.inf, 'init': [1]},
    }


@pytest.fixture
def params2():
    """Mixed real, binary and int matrix parameters."""
    return {
        'theta': {},
        'state': {'type': 'binary', 'init': [1]},
        'mat': {'type': 'int', 'dim': [3, 3]},
    }


# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def scalar_state(name, value):
    """ChainState with a single declared parameter."""
    return ChainState({name: value}, [name])


def norm_log_pdf(x, mean, sd):
    """Plain Python Normal log density, cheap enough for long loops."""
    return -0.5 * math.log(2 * math.pi) - math.log(sd) - (x - mean) ** 2 / (2 * sd * sd)


class CountingLogPost:
    """Zero-argument log posterior wrapper that counts evaluations."""

    def __init__(self, fn):
        self.fn = fn
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return self.fn()
