# -*- coding: utf-8 -*-
"""
c45py.criteria
==============

Entropy-based split criteria in the C4.5 formulation.

Entropies are kept in the unnormalised ``sum(x * log2(x))`` form and only
divided by the weight total at the end.  Rows whose value for the split
attribute is unknown are not part of the bags; they reduce the information
gain in proportion to their share of the node weight.
"""

from __future__ import annotations
import numpy as np

from .utils import SMALL, eq, gr


def log_func(num) -> float:
    """``num * log2(num)``, or 0 for values below the tolerance."""
    if num < SMALL:
        return 0.0
    return float(num * np.log2(num))

def _sum_log_func(arr: np.ndarray) -> float:
    arr = arr[arr >= SMALL]
    return float(np.sum(arr * np.log2(arr)))

def old_ent(bags) -> float:
    """Entropy of the class distribution before the split (unnormalised)."""
    return log_func(bags.total()) - _sum_log_func(bags.per_class_array())

def new_ent(bags) -> float:
    """Entropy of the class distribution after the split (unnormalised)."""
    return _sum_log_func(bags.per_bag_array()) - _sum_log_func(bags.matrix().ravel())

def split_ent(bags, total_no_inst: float) -> float:
    """Split information, with the unknown-value rows as an extra subset."""
    if not gr(bags.total(), 0):
        return 0.0
    no_unknown = total_no_inst - bags.total()
    return (log_func(total_no_inst) - _sum_log_func(bags.per_bag_array())
            - log_func(no_unknown))

def info_gain(bags, total_no_inst: float, old_entropy: float | None = None) -> float:
    """
    Information gain of the partition held by ``bags``.

    Parameters
    ----------
    bags : Distribution
        Class weights per subset, rows with unknown values excluded.
    total_no_inst : float
        Weight of every row at the node, unknown values included.
    old_entropy : float or None, default=None
        Precomputed :func:`old_ent`; numeric threshold scans pass the entropy
        of the known rows once instead of recomputing it per candidate.

    Returns
    -------
    float
        Gain per unit of known weight, scaled down by the unknown rate.
    """
    if old_entropy is None:
        old_entropy = old_ent(bags)
    numerator = old_entropy - new_ent(bags)
    if eq(numerator, 0):
        return 0.0
    unknown_rate = (total_no_inst - bags.total()) / total_no_inst
    numerator = numerator * (1 - unknown_rate)
    return numerator / bags.total()

def gain_ratio(bags, total_no_inst: float, numerator: float) -> float:
    """``numerator`` divided by the split information; 0 for trivial splits."""
    denumerator = split_ent(bags, total_no_inst)
    if eq(denumerator, 0):
        return 0.0
    denumerator = denumerator / total_no_inst
    return numerator / denumerator
