# -*- coding: utf-8 -*-
"""
c45py.selection
===============

Split selection for C4.5-style tree growth.

A selection strategy looks at the rows reaching a node and returns either a
:class:`~c45py.split.NoSplit` (make a leaf) or the split model to apply.
:class:`C45ModelSelection` implements Quinlan's C4.5 rule:

1. Stop when the node is pure or carries less than ``2 * min_no_obj`` weight.
2. Evaluate a :class:`~c45py.split.C45Split` for every non-class attribute.
3. Average the information gain of the valid candidates, leaving out nominal
   attributes with many values (relative to the full training set).
4. Among the candidates whose gain reaches that average, pick the highest
   gain ratio; the lowest attribute index wins ties.

When the full training set is supplied the selector runs in *global* mode:
the many-values filter is active and numeric thresholds are moved onto values
observed in the full training set.  Without it (for example when selecting
on a held-out set) both are skipped.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
import logging

from .distribution import Distribution
from .split import C45Split, ClassifierSplitModel, NoSplit
from .utils import eq, gr, sm

logger = logging.getLogger(__name__)

# Slack on the average-gain bar, as in Quinlan's C4.5.
AVERAGE_GAIN_SLACK = 1e-3
# Nominal attributes with at least this many values per full-data row are
# "many-valued".
MANY_VALUES_FRACTION = 0.3


class SplitEvaluationError(RuntimeError):
    """Raised when a candidate split fails while evaluating an attribute."""

    def __init__(self, att_index: int, att_name: str):
        super().__init__(f"evaluating a split on attribute {att_index} ({att_name!r}) failed")
        self.att_index = att_index
        self.att_name = att_name


class ModelSelection(ABC):
    """Strategy choosing the split model for a node."""

    @abstractmethod
    def select(self, data, test=None) -> ClassifierSplitModel:
        """Return a :class:`NoSplit` or the split model to apply to ``data``."""

    def cleanup(self):
        """Release references to training data."""


class C45ModelSelection(ModelSelection):
    """
    C4.5 split selection.

    Parameters
    ----------
    min_no_obj : int
        Minimum weight that at least two branches of a split must carry.
    all_data : Dataset or None, default=None
        Full training set.  Enables the many-values filter and the
        re-thresholding of numeric splits on observed values.
    use_mdl_correction : bool, default=True
        Passed to every :class:`C45Split`.
    make_split_point_actual_value : bool, default=True
        In global mode, move numeric thresholds onto values present in
        ``all_data``.

    Raises
    ------
    ValueError
        If ``min_no_obj`` is negative or not an integer.
    """

    def __init__(self, min_no_obj: int, all_data=None, *,
                 use_mdl_correction: bool = True,
                 make_split_point_actual_value: bool = True):
        if isinstance(min_no_obj, bool) or int(min_no_obj) != min_no_obj:
            raise ValueError("min_no_obj must be an integer")
        if min_no_obj < 0:
            raise ValueError("min_no_obj must be non-negative")
        self.min_no_obj = int(min_no_obj)
        self.all_data = all_data
        self.use_mdl_correction = bool(use_mdl_correction)
        self.make_split_point_actual_value = bool(make_split_point_actual_value)

    @property
    def uses_global_statistics(self) -> bool:
        return self.all_data is not None

    def cleanup(self):
        self.all_data = None

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def select(self, data, test=None) -> ClassifierSplitModel:
        """
        Select the C4.5 split for ``data``.

        Parameters
        ----------
        data : Dataset
            Rows reaching the node.
        test : Dataset or None, default=None
            Ignored.  Other selection strategies may use a held-out set;
            C4.5 selects on the training rows only.

        Returns
        -------
        ClassifierSplitModel
            A :class:`NoSplit` wrapping the node distribution, or the winning
            :class:`C45Split` with the unknown-value rows merged into its
            distribution.

        Raises
        ------
        ValueError
            If ``data`` has no attribute besides the class, or ``all_data``
            does not have the same attributes as ``data``.
        SplitEvaluationError
            If evaluating a candidate raises.
        """
        self._check_input(data)

        check_distribution = Distribution.from_dataset(data)
        no_split = NoSplit(check_distribution)
        total = check_distribution.total()
        if (sm(total, 2 * self.min_no_obj)
                or eq(total, check_distribution.per_class(check_distribution.max_class()))):
            logger.debug("no split: node weight %.4g is pure or below 2 * %d",
                         total, self.min_no_obj)
            return no_split

        allow_many_values = self._all_nominal_with_many_values(data)

        sum_of_weights = data.sum_of_weights()
        candidates: dict[int, C45Split] = {}
        average_info_gain = 0.0
        valid_models = 0
        for att in data.enumerate_attributes():
            candidate = C45Split(att.index, self.min_no_obj, sum_of_weights,
                                 use_mdl_correction=self.use_mdl_correction)
            try:
                candidate.build_classifier(data)
            except Exception as exc:
                raise SplitEvaluationError(att.index, att.name) from exc
            candidates[att.index] = candidate
            logger.debug("candidate %s: valid=%s info_gain=%.6g gain_ratio=%.6g",
                         att.name, candidate.is_valid, candidate.info_gain(),
                         candidate.gain_ratio())

            if candidate.check_model() and self._counts_towards_average(att, allow_many_values):
                average_info_gain += candidate.info_gain()
                valid_models += 1

        if valid_models == 0:
            logger.debug("no split: no useful candidate")
            return no_split
        average_info_gain = average_info_gain / valid_models
        logger.debug("average info gain %.6g over %d candidates", average_info_gain, valid_models)

        best_model = None
        min_result = 0.0
        for candidate in candidates.values():
            if not candidate.check_model():
                continue
            if (candidate.info_gain() >= average_info_gain - AVERAGE_GAIN_SLACK
                    and gr(candidate.gain_ratio(), min_result)):
                best_model = candidate
                min_result = candidate.gain_ratio()

        if eq(min_result, 0):
            logger.debug("no split: best gain ratio is zero")
            return no_split

        # account for every row, known or not
        best_model.distribution().add_inst_with_unknown(data, best_model.att_index)

        if self.uses_global_statistics and self.make_split_point_actual_value:
            best_model.set_split_point(self.all_data)
        logger.debug("selected %r", best_model)
        return best_model

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _check_input(self, data):
        if next(data.enumerate_attributes(), None) is None:
            raise ValueError("data has no attributes to split on besides the class")
        if self.all_data is not None:
            if (self.all_data.num_attributes != data.num_attributes
                    or self.all_data.class_index != data.class_index):
                raise ValueError("all_data and data must share the same attributes")

    def _many_values_limit(self) -> float:
        return MANY_VALUES_FRACTION * self.all_data.num_instances

    def _all_nominal_with_many_values(self, data) -> bool:
        if not self.uses_global_statistics:
            return True
        limit = self._many_values_limit()
        for att in data.enumerate_attributes():
            if att.is_numeric() or sm(att.num_values(), limit):
                return False
        return True

    def _counts_towards_average(self, att, allow_many_values: bool) -> bool:
        if not self.uses_global_statistics:
            return True
        return (att.is_numeric() or allow_many_values
                or sm(att.num_values(), self._many_values_limit()))
