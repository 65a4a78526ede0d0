"""
Sampler Configuration.

This module handles setting up sampler options:
- clean_sampler_options: Fill in defaults for missing options
- gen_rng: Build the numpy random generator shared by all steppers

All option keys use lowercase with underscores (e.g., 'rng_seed', 'batch_size').
"""

import copy
from typing import Any, Dict, Optional, Union

import numpy as np

from .param_specs import param_init_fixed


def clean_sampler_options(options: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Returns a copy of the options with sampler-level defaults set.

    Stepper options (batch_size, target_accept_rate, ...) are left unset here;
    they are resolved per parameter by settings.resolve_param_options so that
    per-parameter overrides can take precedence over them.
    """
    options = dict(options or {})
    if 'params' in options and options['params'] is not None:
        options['params'] = copy.deepcopy(options['params'])

    # None counts as unset, as everywhere else in the options
    for key, default in (('param_init_fun', param_init_fixed), ('thin', 1)):
        if options.get(key) is None:
            options[key] = default
    options.setdefault('monitor', None)
    options.setdefault('rng_seed', None)
    return options


def gen_rng(rng_seed: Union[None, int, np.random.Generator]) -> np.random.Generator:
    """
    Generate the sampler's random generator.

    Args:
        rng_seed: An int seed, an existing Generator (used as is), or None
                  for fresh OS entropy

    Returns:
        numpy Generator
    """
    if isinstance(rng_seed, np.random.Generator):
        return rng_seed
    return np.random.default_rng(rng_seed)
