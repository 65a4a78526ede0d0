"""
Steppers for the AMWG sampler.

Each stepper mutates part of the shared chain state by one Markov
transition:

- base: Stepper interface (step, start_adaptation, stop_adaptation, info)
- metropolis: Adaptive random walk Metropolis on one real or int slot
- binary: Exact two-state Gibbs update of one binary slot
- component: Scalar steppers over every slot of a multi-dimensional parameter
- amwg: Random-order sweep over all named parameters
- dispatch: Stepper selection by (type, dim)
"""

from .base import Stepper
from .metropolis import (
    ScalarMetropolisStepper,
    RealMetropolisStepper,
    IntMetropolisStepper,
    normal_proposal,
    discrete_normal_proposal,
    acceptance_probability,
)
from .binary import BinaryStepper, binary_zero_probability
from .component import (
    ComponentStepper,
    RealComponentStepper,
    IntComponentStepper,
    BinaryComponentStepper,
)
from .dispatch import STEPPER_DISPATCH_TABLE, make_stepper, select_stepper_class
from .amwg import AmwgStepper

__all__ = [
    'Stepper',
    'ScalarMetropolisStepper',
    'RealMetropolisStepper',
    'IntMetropolisStepper',
    'normal_proposal',
    'discrete_normal_proposal',
    'acceptance_probability',
    'BinaryStepper',
    'binary_zero_probability',
    'ComponentStepper',
    'RealComponentStepper',
    'IntComponentStepper',
    'BinaryComponentStepper',
    'STEPPER_DISPATCH_TABLE',
    'make_stepper',
    'select_stepper_class',
    'AmwgStepper',
]
