"""
AMWG Sampler - top level driver.

While you could fit a model using the steppers directly, the Sampler sets up
the steppers, completes the parameter definitions, and manages sampling:

    sampler = Sampler(params, log_post, data, {'rng_seed': 1})
    sampler.burn(1000)
    samples = sampler.sample(5000)   # name -> numpy array

The user's log_post(state, data) is bound into a zero-argument function of
the shared state. It may write derived quantities into the state; when it
does, the posterior is evaluated once more after every step so that those
quantities match the accepted parameter values.
"""

import math
import time
from datetime import timedelta
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import numpy as np

from .chain_state import ChainState, copy_value, initial_state
from .config import clean_sampler_options, gen_rng
from .error_handling import validate_sampler_options, validate_thin
from .param_specs import ParamDescription, ParamSpec, complete_params
from .steppers import AmwgStepper, Stepper

import logging
logger = logging.getLogger('amwgmc')


class Sampler:
    """
    Adaptive Metropolis-Within-Gibbs sampler.

    Args:
        params: name -> parameter description (see param_specs)
        log_post: fn(state, data) -> log posterior density (may be -inf)
        data: Passed through unchanged to log_post
        options: Dict with keys
            param_init_fun: Init policy fn(type, lower, upper), default param_init_fixed
            thin: Keep every thin-th iteration in sample(), default 1
            monitor: Names recorded by sample(), default None (everything)
            rng_seed: int, numpy Generator, or None
            log_scale_init, batch_size, max_adaptation_step,
            target_accept_rate, is_adapting: Global stepper options
            params: name -> dict of per-parameter stepper options

    Raises:
        InvalidParameterError: For malformed parameter descriptions
        UnsupportedParameterTypeError: For unknown parameter types
        ValueError: For invalid options
    """

    def __init__(self, params: Mapping[str, ParamDescription],
                 log_post: Callable[[ChainState, Any], Any],
                 data: Any = None, options: Optional[Dict[str, Any]] = None):
        options = clean_sampler_options(options)
        validate_sampler_options(options, params.keys())
        self.options = options
        self.data = data
        self.param_init_fun = options['param_init_fun']

        # Completing the params and initializing the state.
        self.params: Dict[str, ParamSpec] = complete_params(params, self.param_init_fun)
        self.param_names = list(self.params.keys())
        self.rng = gen_rng(options['rng_seed'])
        self.state = initial_state(self.params)

        state = self.state

        def posterior():
            return log_post(state, data)
        self.log_post = posterior

        # Lets the posterior add derived quantities before the first sample
        initial_log_post = float(self.log_post())
        if not math.isfinite(initial_log_post):
            logger.warning(
                f"Initial log posterior is {initial_log_post}; the initial values "
                f"may lie outside the posterior's support"
            )

        self.thin(options['thin'])
        self.monitor(options['monitor'])
        self.stepper = self.create_stepper_ensemble(self.params, self.state, self.log_post, options)

    def create_stepper_ensemble(self, params: Mapping[str, ParamSpec], state: ChainState,
                                log_post: Callable[[], Any], options: Dict[str, Any]) -> Stepper:
        """Creates the stepper that takes one step in the whole parameter space."""
        return AmwgStepper(params, state, log_post, self.rng, options)

    def step(self) -> ChainState:
        """One sweep over all parameters; returns the (shared) state."""
        self.stepper.step()
        if self.state.has_derived:
            # Derived quantities may be left over from a rejected proposal
            self.log_post()
        return self.state

    def burn(self, n_iterations: int) -> None:
        """Take n_iterations steps without recording anything."""
        _check_iterations(n_iterations)
        logger.info(f"Burning in {n_iterations} iterations...")
        start = time.perf_counter()
        for _ in range(n_iterations):
            self.step()
        logger.info(f"Burn-in done in {timedelta(seconds=time.perf_counter() - start)}")

    def sample(self, n_iterations: int) -> Dict[str, np.ndarray]:
        """
        Take n_iterations steps, recording monitored values.

        Iteration i (0-based) records the state it starts from when
        i % thin == 0, so each result has ceil(n_iterations / thin) entries.

        Returns:
            Dict of name -> array of shape (n_kept,) for scalars or
            (n_kept, *dim) for multi-dimensional values. Empty if nothing is
            monitored.

        Raises:
            KeyError: If a monitored name is not in the state
        """
        _check_iterations(n_iterations)
        monitored = self._monitored_names()
        if len(monitored) == 0:
            self.burn(n_iterations)
            return {}

        missing = [name for name in monitored if name not in self.state]
        if missing:
            raise KeyError(
                f"Cannot monitor {missing}: not in the state. Available: {list(self.state.keys())}"
            )

        # One list per monitored name
        curr_sample: Dict[str, List[Any]] = {name: [] for name in monitored}

        logger.info(f"Sampling {n_iterations} iterations (thin={self.thinning_interval})...")
        start = time.perf_counter()
        for i in range(n_iterations):
            if i % self.thinning_interval == 0:
                for name in monitored:
                    curr_sample[name].append(copy_value(self.state[name]))
            self.step()
        logger.info(f"Sampling done in {timedelta(seconds=time.perf_counter() - start)}")

        return {name: np.asarray(values) for name, values in curr_sample.items()}

    def monitor(self, params_to_monitor: Optional[Iterable[str]]) -> None:
        """Sets what to record in sample(); None records every state key."""
        if params_to_monitor is None:
            self.monitored_params = None
        elif isinstance(params_to_monitor, str):
            raise ValueError("monitor takes a list of names or None, not a string")
        else:
            self.monitored_params = list(params_to_monitor)

    def thin(self, thinning_interval: int) -> None:
        """Sets the interval between recorded iterations in sample()."""
        validate_thin(thinning_interval)
        self.thinning_interval = int(thinning_interval)

    def _monitored_names(self) -> List[str]:
        if self.monitored_params is None:
            return list(self.state.param_names) + list(self.state.derived_names)
        return list(self.monitored_params)

    def start_adaptation(self) -> None:
        logger.info("Starting proposal adaptation")
        self.stepper.start_adaptation()

    def stop_adaptation(self) -> None:
        logger.info("Stopping proposal adaptation")
        self.stepper.stop_adaptation()

    def info(self) -> Dict[str, Any]:
        """Returns a snapshot of the sampler's state and tuning."""
        return {
            'state': self.state.snapshot(),
            'thin': self.thinning_interval,
            'monitor': self._monitored_names(),
            'derived': list(self.state.derived_names),
            'steppers': self.stepper.info(),
        }


# Kept under the name the sampler has in the literature
AmwgSampler = Sampler


def _check_iterations(n_iterations: int) -> None:
    if isinstance(n_iterations, bool) or not isinstance(n_iterations, (int, np.integer)) \
            or n_iterations < 0:
        raise ValueError(f"Number of iterations must be a non-negative integer, got {n_iterations!r}")
