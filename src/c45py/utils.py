# -*- coding: utf-8 -*-
"""Numeric comparison helpers shared by the split machinery.

All comparisons use a fixed absolute tolerance so that weighted sums that
differ only by rounding noise compare as equal.
"""

from __future__ import annotations
import numpy as np

SMALL = 1e-6


def eq(a: float, b: float) -> bool:
    return (a == b) or ((a - b < SMALL) and (b - a < SMALL))

def gr(a: float, b: float) -> bool:
    return a - b > SMALL

def gr_or_eq(a: float, b: float) -> bool:
    return (b - a < SMALL) or (a >= b)

def sm(a: float, b: float) -> bool:
    return b - a > SMALL

def sm_or_eq(a: float, b: float) -> bool:
    return (a - b < SMALL) or (a <= b)

def is_missing_scalar(v) -> bool:
    return (v is None) or (isinstance(v, (float, np.floating)) and np.isnan(v))
