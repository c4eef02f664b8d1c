# -*- coding: utf-8 -*-
"""
c45py.distribution
==================

Weighted class counts, partitioned into bags.

A :class:`Distribution` is a ``(num_bags, num_classes)`` table of weights.
The node distribution used for stopping checks has a single bag; candidate
splits hold one bag per branch.  Per-bag and per-class totals are derived
from the table, so ``total()`` always equals the sum of all cells.
"""

from __future__ import annotations
import numpy as np

from .utils import eq, gr, gr_or_eq


class Distribution:
    """Class weights per bag.

    Parameters
    ----------
    num_bags : int
        Number of subsets (branches).
    num_classes : int
        Number of class values.
    """

    def __init__(self, num_bags: int, num_classes: int):
        if num_bags < 1 or num_classes < 1:
            raise ValueError("a distribution needs at least one bag and one class")
        self._table = np.zeros((int(num_bags), int(num_classes)), dtype=float)

    @classmethod
    def from_dataset(cls, data) -> "Distribution":
        """Single-bag distribution of every row in ``data``."""
        dist = cls(1, data.num_classes)
        np.add.at(dist._table[0], data.class_values(), data.weights)
        return dist

    # ------------------------------------------------------------------
    # Totals
    # ------------------------------------------------------------------
    def matrix(self) -> np.ndarray:
        return self._table

    def per_bag_array(self) -> np.ndarray:
        return self._table.sum(axis=1)

    def per_class_array(self) -> np.ndarray:
        return self._table.sum(axis=0)

    def total(self) -> float:
        return float(self._table.sum())

    def per_class(self, class_index: int) -> float:
        return float(self._table[:, class_index].sum())

    def per_bag(self, bag_index: int) -> float:
        return float(self._table[bag_index].sum())

    def per_class_per_bag(self, bag_index: int, class_index: int) -> float:
        return float(self._table[bag_index, class_index])

    def num_bags(self) -> int:
        return self._table.shape[0]

    def num_classes(self) -> int:
        return self._table.shape[1]

    def max_class(self, bag_index: int | None = None) -> int:
        """Class with the greatest weight (in one bag, or overall).

        Ties go to the lowest class index.
        """
        counts = self.per_class_array() if bag_index is None else self._table[bag_index]
        return int(np.argmax(counts))

    def prob(self, class_index: int, bag_index: int | None = None) -> float:
        """Relative frequency of a class, falling back to the whole table
        when the requested bag is empty."""
        if bag_index is not None:
            bag_total = self.per_bag(bag_index)
            if gr(bag_total, 0):
                return self.per_class_per_bag(bag_index, class_index) / bag_total
        total = self.total()
        if eq(total, 0):
            return 0.0
        return self.per_class(class_index) / total

    def check(self, min_no_obj: float) -> bool:
        """True if at least two bags carry ``min_no_obj`` weight or more."""
        counter = sum(1 for w in self.per_bag_array() if gr_or_eq(w, min_no_obj))
        return counter > 1

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------
    def add(self, bag_index: int, class_index: int, weight: float):
        self._table[bag_index, class_index] += weight

    def add_rows(self, bag_indices, class_indices, weights):
        """Vectorised :meth:`add`; repeated ``(bag, class)`` pairs accumulate."""
        np.add.at(self._table, (np.asarray(bag_indices, dtype=int),
                                np.asarray(class_indices, dtype=int)), weights)

    def add_range(self, bag_index: int, data, start: int, end: int):
        """Add rows ``start:end`` of ``data`` to one bag."""
        np.add.at(self._table[bag_index], data.class_values()[start:end],
                  data.weights[start:end])

    def shift_range(self, from_bag: int, to_bag: int, data, start: int, end: int):
        """Move rows ``start:end`` of ``data`` from one bag to another."""
        classes = data.class_values()[start:end]
        weights = data.weights[start:end]
        np.subtract.at(self._table[from_bag], classes, weights)
        np.add.at(self._table[to_bag], classes, weights)

    def add_inst_with_unknown(self, data, att_index: int):
        """
        Add the rows of ``data`` whose value for ``att_index`` is unknown.

        Each row's weight is spread over the bags in proportion to the bag
        totals before the call, or uniformly when the table is empty, so the
        whole weight of the row is accounted for.
        """
        total = self.total()
        per_bag = self.per_bag_array()
        if eq(total, 0):
            probs = np.full(self.num_bags(), 1.0 / self.num_bags())
        else:
            probs = per_bag / total
        missing = data.is_missing(att_index)
        if not missing.any():
            return
        class_weight = np.zeros(self.num_classes(), dtype=float)
        np.add.at(class_weight, data.class_values()[missing], data.weights[missing])
        self._table += np.outer(probs, class_weight)

    def __repr__(self):
        return f"Distribution(bags={self.num_bags()}, classes={self.num_classes()}, total={self.total():.4g})"
