"""
Error Handling and Validation Utilities for the AMWG Sampler

This module defines the exception types raised while assembling a sampler
and the validation of sampler options.
"""

import numbers
from typing import Any, Dict, Iterable

from .array_utils import array_dim, is_nested, is_rectangular, leaves

import logging
logger = logging.getLogger('amwgmc')


class InvalidParameterError(ValueError):
    """A parameter descriptor is malformed (bad bounds, shape or fields)."""


class UnsupportedParameterTypeError(InvalidParameterError):
    """A parameter's type is not one of real, int or binary."""


class StepperNotImplementedError(NotImplementedError):
    """A capability was invoked on the abstract Stepper instead of a concrete one."""


STEPPER_OPTION_KEYS = (
    'log_scale_init',
    'batch_size',
    'max_adaptation_step',
    'target_accept_rate',
    'is_adapting',
)

SAMPLER_OPTION_KEYS = (
    'param_init_fun',
    'thin',
    'monitor',
    'rng_seed',
    'params',
) + STEPPER_OPTION_KEYS


def _option_leaves(options: Dict[str, Any], key: str, where: str, errors: list) -> list:
    """Every value of a scalar or nested per-slot option; [] when unset or ragged."""
    value = options.get(key)
    if value is None:
        return []
    if is_nested(value) and not is_rectangular(value, array_dim(value)):
        errors.append(f"{where}{key} must be a scalar or a rectangular nested array, got {value}")
        return []
    return leaves(value)


def _check_stepper_options(options: Dict[str, Any], where: str, errors: list) -> None:
    """Range checks shared by global and per-parameter stepper options."""
    if any(v < 1 for v in _option_leaves(options, 'batch_size', where, errors)):
        errors.append(f"{where}batch_size must be >= 1, got {options['batch_size']}")

    if not all(0 < v < 1 for v in _option_leaves(options, 'target_accept_rate', where, errors)):
        errors.append(f"{where}target_accept_rate must be in (0, 1), got {options['target_accept_rate']}")

    if any(v < 0 for v in _option_leaves(options, 'max_adaptation_step', where, errors)):
        errors.append(f"{where}max_adaptation_step must be >= 0, got {options['max_adaptation_step']}")

    _option_leaves(options, 'log_scale_init', where, errors)
    _option_leaves(options, 'is_adapting', where, errors)


def validate_thin(thin: Any) -> None:
    """
    Validates a thinning interval.

    Raises:
        ValueError: If thin is not a positive integer
    """
    if isinstance(thin, bool) or not isinstance(thin, numbers.Integral) or thin < 1:
        raise ValueError(f"thin must be a positive integer, got {thin!r}")


def validate_sampler_options(options: Dict[str, Any], param_names: Iterable[str]) -> None:
    """
    Validates that sampler options are sensible.

    Unknown option keys are reported as warnings only.

    Args:
        options: Options dictionary (already passed through clean_sampler_options)
        param_names: Names of the declared parameters

    Raises:
        ValueError: If any option is invalid
    """
    errors = []
    param_names = set(param_names)

    for key in options:
        if key not in SAMPLER_OPTION_KEYS:
            logger.warning(f"Ignoring unknown sampler option '{key}'")

    thin = options.get('thin', 1)
    try:
        validate_thin(thin)
    except ValueError as e:
        errors.append(str(e))

    monitor = options.get('monitor')
    if monitor is not None and isinstance(monitor, str):
        errors.append("monitor must be a list of names or None, not a string")

    _check_stepper_options(options, "", errors)

    for name, param_options in (options.get('params') or {}).items():
        if name not in param_names:
            errors.append(f"Options given for unknown parameter '{name}'")
            continue
        param_options = param_options or {}
        for key in param_options:
            if key not in STEPPER_OPTION_KEYS:
                logger.warning(f"Ignoring unknown option '{key}' for parameter '{name}'")
        _check_stepper_options(param_options, f"params['{name}'].", errors)

    if errors:
        raise ValueError("Invalid sampler options:\n  " + "\n  ".join(errors))
