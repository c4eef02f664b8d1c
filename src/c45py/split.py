# -*- coding: utf-8 -*-
"""
c45py.split
===========

Split models produced by split selection.

:class:`NoSplit` says "make this node a leaf" and only carries the node's
class distribution.  :class:`C45Split` evaluates one attribute as a split
axis: one branch per declared value for nominal attributes, a binary
``<= threshold`` test for numeric attributes.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import numpy as np

from . import criteria
from .distribution import Distribution
from .utils import eq, gr, gr_or_eq, sm, sm_or_eq


class ClassifierSplitModel(ABC):
    """Common interface of split decisions.

    ``num_subsets`` is the number of branches the model creates; 0 means the
    model could not be built, 1 means no split.
    """

    def __init__(self):
        self._distribution: Distribution | None = None
        self._num_subsets: int = 0

    def distribution(self) -> Distribution:
        return self._distribution

    @property
    def num_subsets(self) -> int:
        return self._num_subsets

    @property
    def is_split(self) -> bool:
        """True if the model partitions the node into two or more branches."""
        return self._num_subsets > 1

    def check_model(self) -> bool:
        return self._num_subsets > 0

    @abstractmethod
    def which_subsets(self, data) -> np.ndarray:
        """Branch index of every row of ``data``, -1 where it is unknown."""

    def which_subset(self, row) -> int:
        """Branch index of one coded row, -1 where it is unknown."""
        row = np.asarray(row, dtype=float).reshape(1, -1)
        return int(self._route(row)[0])

    @abstractmethod
    def _route(self, values: np.ndarray) -> np.ndarray:
        ...

    def weights(self, row=None):
        """Fraction of an unroutable row sent down each branch.

        Returns ``None`` when ``row`` is given and can be routed.
        """
        if row is not None and self.which_subset(row) > -1:
            return None
        per_bag = self._distribution.per_bag_array()
        total = per_bag.sum()
        if eq(total, 0):
            return np.full(len(per_bag), 1.0 / len(per_bag))
        return per_bag / total

    def split(self, data) -> list:
        """
        Partition ``data`` into one dataset per branch.

        Rows with an unknown value go to every branch with their weight
        multiplied by the branch fraction from :meth:`weights`; branches
        that would receive zero weight do not get them.
        """
        subsets = self.which_subsets(data)
        missing = np.nonzero(subsets < 0)[0]
        fractions = self.weights() if len(missing) else None
        parts = []
        for i in range(self._num_subsets):
            known = np.nonzero(subsets == i)[0]
            if fractions is not None and gr(fractions[i], 0):
                rows = np.concatenate([known, missing])
                w = np.concatenate([data.weights[known], data.weights[missing] * fractions[i]])
            else:
                rows, w = known, data.weights[known]
            parts.append(data.subset(rows, weights=w))
        return parts


class NoSplit(ClassifierSplitModel):
    """Leaf decision: the node is not split.

    Parameters
    ----------
    distribution : Distribution
        Class distribution of the node.
    """

    def __init__(self, distribution: Distribution):
        super().__init__()
        self._distribution = distribution
        self._num_subsets = 1

    def which_subsets(self, data) -> np.ndarray:
        return np.zeros(data.num_instances, dtype=int)

    def _route(self, values):
        return np.zeros(values.shape[0], dtype=int)

    def __repr__(self):
        return f"NoSplit({self._distribution!r})"


class C45Split(ClassifierSplitModel):
    """
    Candidate split on a single attribute.

    Parameters
    ----------
    att_index : int
        Attribute to split on.
    min_no_obj : int
        Minimum weight at least two branches must carry for the split to be
        valid.
    sum_of_weights : float
        Weight of all rows at the node, unknown values included.
    use_mdl_correction : bool, default=True
        Subtract ``log2(number of candidate thresholds) / sum_of_weights``
        from the information gain of numeric splits.
    """

    def __init__(self, att_index: int, min_no_obj: int, sum_of_weights: float,
                 use_mdl_correction: bool = True):
        super().__init__()
        self.att_index = int(att_index)
        self.min_no_obj = min_no_obj
        self.sum_of_weights = float(sum_of_weights)
        self.use_mdl_correction = bool(use_mdl_correction)
        self.split_point = np.finfo(float).max
        self._info_gain = 0.0
        self._gain_ratio = 0.0
        self._complexity_index = 0
        self._index = 0
        self._numeric: bool | None = None

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------
    def build_classifier(self, data):
        """Evaluate the attribute on ``data`` and fill in the split statistics."""
        self._num_subsets = 0
        self.split_point = np.finfo(float).max
        self._info_gain = 0.0
        self._gain_ratio = 0.0

        att = data.attribute(self.att_index)
        self._numeric = att.is_numeric()
        if att.is_nominal():
            self._complexity_index = att.num_values()
            self._index = self._complexity_index
            self._handle_enumerated_attribute(data)
        else:
            self._complexity_index = 2
            self._index = 0
            self._handle_numeric_attribute(data.sorted_by(self.att_index))
        return self

    def _handle_enumerated_attribute(self, data):
        self._distribution = Distribution(max(self._complexity_index, 1), data.num_classes)
        col = data.column(self.att_index)
        known = ~np.isnan(col)
        self._distribution.add_rows(col[known], data.class_values()[known], data.weights[known])

        if self._distribution.check(self.min_no_obj):
            self._num_subsets = self._complexity_index
            self._info_gain = criteria.info_gain(self._distribution, self.sum_of_weights)
            self._gain_ratio = criteria.gain_ratio(self._distribution, self.sum_of_weights,
                                                   self._info_gain)

    def _handle_numeric_attribute(self, data):
        # rows are sorted with the unknown values at the end
        col = data.column(self.att_index)
        first_miss = int(np.count_nonzero(~np.isnan(col)))
        self._distribution = Distribution(2, data.num_classes)
        self._distribution.add_range(1, data, 0, first_miss)

        # minimum weight per branch
        min_split = 0.1 * self._distribution.total() / data.num_classes
        if sm_or_eq(min_split, self.min_no_obj):
            min_split = self.min_no_obj
        elif gr(min_split, 25):
            min_split = 25
        if sm(first_miss, 2 * min_split):
            return

        default_ent = criteria.old_ent(self._distribution)
        v = col[:first_miss]
        # a threshold can sit between rows next-1 and next
        boundaries = np.nonzero(v[:-1] + 1e-5 < v[1:])[0] + 1
        split_index = -1
        last = 0
        for nxt in boundaries:
            self._distribution.shift_range(1, 0, data, last, nxt)
            if (gr_or_eq(self._distribution.per_bag(0), min_split)
                    and gr_or_eq(self._distribution.per_bag(1), min_split)):
                current = criteria.info_gain(self._distribution, self.sum_of_weights, default_ent)
                if gr(current, self._info_gain):
                    self._info_gain = current
                    split_index = nxt - 1
                self._index += 1
            last = nxt

        if self._index == 0:
            return
        if self.use_mdl_correction:
            self._info_gain = self._info_gain - np.log2(self._index) / self.sum_of_weights
        if sm_or_eq(self._info_gain, 0):
            return

        self._num_subsets = 2
        self.split_point = (v[split_index + 1] + v[split_index]) / 2
        # the midpoint of two adjacent floats can round up to the upper one
        if self.split_point == v[split_index + 1]:
            self.split_point = v[split_index]
        self.split_point = float(self.split_point)

        self._distribution = Distribution(2, data.num_classes)
        self._distribution.add_range(0, data, 0, split_index + 1)
        self._distribution.add_range(1, data, split_index + 1, first_miss)
        self._gain_ratio = criteria.gain_ratio(self._distribution, self.sum_of_weights,
                                               self._info_gain)

    def set_split_point(self, all_data):
        """
        Move a numeric threshold onto a value present in ``all_data``.

        The threshold becomes the largest known value of the attribute in
        ``all_data`` that does not exceed the current threshold, so that
        thresholds chosen on different row subsets refer to observed values.
        Nominal or invalid splits are left unchanged.
        """
        if not (all_data.attribute(self.att_index).is_numeric() and self._num_subsets > 1):
            return
        col = all_data.column(self.att_index)
        col = col[~np.isnan(col)]
        below = col[(col - self.split_point < 1e-6) | (col <= self.split_point)]
        if below.size:
            self.split_point = float(below.max())

    # ------------------------------------------------------------------
    # Statistics
    # ------------------------------------------------------------------
    def info_gain(self) -> float:
        return self._info_gain

    def gain_ratio(self) -> float:
        return self._gain_ratio

    @property
    def is_valid(self) -> bool:
        return self.check_model()

    @property
    def is_numeric(self) -> bool:
        return bool(self._numeric)

    def which_subsets(self, data) -> np.ndarray:
        return self._route(data.values)

    def _route(self, values):
        col = values[:, self.att_index]
        out = np.full(len(col), -1, dtype=int)
        known = ~np.isnan(col)
        if self._numeric:
            v = col[known]
            out[known] = np.where((v - self.split_point < 1e-6) | (v <= self.split_point), 0, 1)
        else:
            out[known] = col[known].astype(int)
        return out

    def __repr__(self):
        where = f", split_point={self.split_point:.6g}" if self._numeric and self._num_subsets else ""
        return (f"C45Split(att_index={self.att_index}, subsets={self._num_subsets}, "
                f"info_gain={self._info_gain:.6g}, gain_ratio={self._gain_ratio:.6g}{where})")
