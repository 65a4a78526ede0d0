"""
Adaptation Diagnostics.

Summaries of the proposal tuning reported by Sampler.info()['steppers']:
- flatten_stepper_info: One (label, info) pair per adaptive scalar slot
- print_adaptation_summary: Log proposal scales per parameter and flag
  slots whose scale drifted to extreme values
"""

from typing import Any, Dict, List, Tuple

import numpy as np

import logging
logger = logging.getLogger('amwgmc')


# Proposal SDs outside this range usually mean the posterior is badly
# scaled or improper in that direction
EXTREME_LOG_SCALE = 10.0


def _flatten(label: str, info: Any, out: List[Tuple[str, Dict[str, Any]]], index=()) -> None:
    if isinstance(info, list):
        for i, sub in enumerate(info):
            _flatten(label, sub, out, index + (i,))
    elif isinstance(info, dict) and 'log_scale' in info:
        if index:
            label = f"{label}[{', '.join(str(i) for i in index)}]"
        out.append((label, info))


def flatten_stepper_info(stepper_info: Dict[str, Any]) -> List[Tuple[str, Dict[str, Any]]]:
    """
    Flatten nested stepper info into (slot label, info) pairs.

    Slots without tuning state (binary) are skipped.

    Example:
        flatten_stepper_info({'mu': {...}, 'beta': [{...}, {...}]})
        -> [('mu', {...}), ('beta[0]', {...}), ('beta[1]', {...})]
    """
    out: List[Tuple[str, Dict[str, Any]]] = []
    for name, info in stepper_info.items():
        _flatten(name, info, out)
    return out


def print_adaptation_summary(stepper_info: Dict[str, Any]) -> None:
    """
    Log summary statistics of the adapted proposal scales.

    Args:
        stepper_info: Sampler.info()['steppers'] or AmwgStepper.info()
    """
    slots = flatten_stepper_info(stepper_info)
    if not slots:
        return

    logger.info(f"\n--- Proposal Adaptation ({len(slots)} slots) ---")
    by_param: Dict[str, List[Dict[str, Any]]] = {}
    for label, info in slots:
        by_param.setdefault(label.split('[')[0], []).append(info)

    for name, infos in by_param.items():
        sds = np.array([info['proposal_sd'] for info in infos])
        batches = max(info['batch_count'] for info in infos)
        adapting = any(info['is_adapting'] for info in infos)
        if len(sds) == 1:
            logger.info(f"  {name}: proposal SD {sds[0]:.4g} after {batches} batches"
                        f"{'' if adapting else ' (adaptation off)'}")
        else:
            logger.info(f"  {name}: proposal SD median {np.median(sds):.4g} "
                        f"[{np.min(sds):.4g}, {np.max(sds):.4g}] over {len(sds)} slots, "
                        f"up to {batches} batches{'' if adapting else ' (adaptation off)'}")

    extreme = [label for label, info in slots if abs(info['log_scale']) > EXTREME_LOG_SCALE]
    if extreme:
        logger.warning(f"  WARNING: {len(extreme)} slot(s) have |log scale| > {EXTREME_LOG_SCALE}")
        if len(extreme) <= 10:
            logger.warning(f"    Extreme slots: {', '.join(extreme)}")
