"""Helpers to shape modulations and synthetic fields. All of them broadcast over arrays."""

import numpy as np


def limit_value(value, lower: float, upper: float):
    return np.clip(value, lower, upper)


def transition(start, end, ratio):
    """Linear transition from `start` (ratio 0) to `end` (ratio 1)."""
    return start + (end - start) * ratio


def ramp(value, begin: float, span: float):
    """Ratio that goes from 0 to 1 while `value` runs over [begin, begin + span]."""
    return limit_value((value - begin) / span, 0.0, 1.0)
