"""
amwgmc - Adaptive Metropolis-Within-Gibbs MCMC

Public API:
    Sampling:
        Sampler - Sets up steppers for a model and runs burn-in and sampling
        AmwgSampler - Alias of Sampler

    Parameter Specifications:
        ParamSpec - Dataclass of a completed parameter (type, dim, bounds, init)
        ParamType - Enum of parameter types (REAL, INT, BINARY)
        complete_params - Fill in missing fields of parameter descriptions
        param_init_fixed - Deterministic initial value policy (default)
        random_param_init - Build a random initial value policy from a Generator

    Chain State:
        ChainState - Shared mapping of parameter values and derived quantities
        initial_state - Build a ChainState from completed parameters

    Steppers:
        AmwgStepper, RealMetropolisStepper, IntMetropolisStepper, BinaryStepper,
        RealComponentStepper, IntComponentStepper, BinaryComponentStepper

    Diagnostics:
        print_adaptation_summary - Log adapted proposal scales

    Log densities:
        distributions - norm, beta, gamma, pois, binom, ... on the log scale

Example:
    import jax.numpy as jnp
    from amwgmc import Sampler
    from amwgmc import distributions as ld

    def log_post(state, data):
        return float(ld.norm(state['mu'], 0, 100) + jnp.sum(ld.norm(data, state['mu'], 1)))

    sampler = Sampler({'mu': {'type': 'real'}}, log_post, y, {'rng_seed': 1})
    sampler.burn(1000)
    samples = sampler.sample(5000)
"""
# CRITICAL: Import jax_config FIRST to set environment variables before JAX loads
from . import jax_config  # noqa: F401

from .param_specs import (
    ParamSpec,
    ParamType,
    complete_param,
    complete_params,
    param_init_fixed,
    random_param_init,
)
from .chain_state import ChainState, initial_state
from .error_handling import (
    InvalidParameterError,
    UnsupportedParameterTypeError,
    StepperNotImplementedError,
)
from .steppers import (
    Stepper,
    AmwgStepper,
    RealMetropolisStepper,
    IntMetropolisStepper,
    BinaryStepper,
    RealComponentStepper,
    IntComponentStepper,
    BinaryComponentStepper,
)
from .sampler import Sampler, AmwgSampler
from .diagnostics import print_adaptation_summary
from . import distributions
