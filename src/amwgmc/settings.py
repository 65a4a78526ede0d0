"""
Stepper settings configuration.

This module defines the adaptive Metropolis stepper options, their defaults,
and how global and per-parameter options are merged.

Options are resolved per parameter in this order:
    1. options['params'][name][key]   (per-parameter override)
    2. options[key]                   (global option)
    3. STEPPER_DEFAULTS[key]          (hard default)

An option counts as given when its key is present and its value is not
None, so 0 and False are honoured as explicit choices.

To add a new setting:
1. Add it to STEPPER_DEFAULTS
2. Read it in ScalarMetropolisStepper.__init__
3. Pass it in sampler options: {'new_setting': value} or per parameter
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional


# Default values for each stepper option
STEPPER_DEFAULTS = {
    'log_scale_init': 0.0,         # log of the Normal proposal SD
    'batch_size': 50,              # iterations between adaptations
    'max_adaptation_step': 0.01,   # cap on the log-scale change per batch
    'target_accept_rate': 0.44,    # optimal rate for one-dimensional random walks
    'is_adapting': True,
}


def get_option(option_name: str, options: Optional[Mapping[str, Any]], default_value: Any) -> Any:
    """
    Return options[option_name] if it is present and not None, else the default.

    Example:
        batch_size = get_option('batch_size', my_options, 50)
    """
    if not options:
        return default_value
    value = options.get(option_name)
    return default_value if value is None else value


def resolve_param_options(param_name: str, options: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Merge per-parameter, global and default stepper options for one parameter.

    Args:
        param_name: Name of the parameter
        options: Sampler/stepper options, optionally with a 'params' mapping

    Returns:
        Dict with every key of STEPPER_DEFAULTS
    """
    options = options or {}
    param_options = (options.get('params') or {}).get(param_name) or {}
    return {
        key: get_option(key, param_options, get_option(key, options, default))
        for key, default in STEPPER_DEFAULTS.items()
    }


@dataclass(frozen=True)
class AdaptationSettings:
    """
    Fixed tuning constants of one adaptive scalar stepper.

    Fields:
        batch_size: Number of iterations per adaptation batch
        max_adaptation_step: Upper bound on the per-batch log-scale change
        target_accept_rate: Acceptance rate the log scale is steered towards
    """
    batch_size: int = STEPPER_DEFAULTS['batch_size']
    max_adaptation_step: float = STEPPER_DEFAULTS['max_adaptation_step']
    target_accept_rate: float = STEPPER_DEFAULTS['target_accept_rate']

    def __post_init__(self):
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
        if not 0 < self.target_accept_rate < 1:
            raise ValueError(f"target_accept_rate must be in (0, 1), got {self.target_accept_rate}")
        if self.max_adaptation_step < 0:
            raise ValueError(f"max_adaptation_step must be >= 0, got {self.max_adaptation_step}")


@dataclass
class AdaptationState:
    """
    Mutable tuning counters owned by exactly one adaptive scalar stepper.
    """
    log_scale: float = STEPPER_DEFAULTS['log_scale_init']
    acceptance_count: int = 0
    iterations_since_batch: int = 0
    batch_count: int = 0


def adaptation_step_size(batch_count: int, max_adaptation_step: float) -> float:
    """
    Log-scale change applied after batch number `batch_count` (1-based).

    min(max_adaptation_step, 1/sqrt(batch_count)) is non-increasing in
    batch_count, so the adaptation diminishes over time.
    """
    return min(max_adaptation_step, 1.0 / math.sqrt(batch_count))
