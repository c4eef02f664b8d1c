# -*- coding: utf-8 -*-
"""
c45py.tree
==========

An unpruned C4.5 decision tree grown with :class:`~c45py.selection.C45ModelSelection`.

The estimator follows scikit-learn conventions (``fit``/``predict``/
``predict_proba``/``score``).  Each node asks the selector for a split model;
a :class:`~c45py.split.NoSplit` makes a leaf, anything else partitions the
rows and recurses.  Rows with a missing value for the split attribute go down
every branch with fractional weights, both during training and prediction.

The module also contains a private ``TreeNode`` class which holds the data
structure for each node in the tree (internal or leaf).
"""

from __future__ import annotations
import logging
import numpy as np
from sklearn.base import BaseEstimator, ClassifierMixin

from .dataset import Dataset
from .distribution import Distribution
from .selection import C45ModelSelection
from .split import NoSplit

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Node
# -----------------------------------------------------------------------------
class TreeNode:
    """Internal representation of a single node in a decision tree.

    Attributes
    ----------
    model : ClassifierSplitModel
        Split model chosen for the node; a ``NoSplit`` for leaves.
    children : list[TreeNode]
        One child per branch of ``model``; empty for leaves.
    is_empty : bool
        True for a leaf that received no training weight.  Such leaves answer
        with the parent's class distribution.
    depth : int
        Distance from the root.
    """

    def __init__(self, model, depth: int = 0, is_empty: bool = False):
        self.model = model
        self.children: list[TreeNode] = []
        self.is_empty = is_empty
        self.depth = depth

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def num_leaves(self) -> int:
        if self.is_leaf:
            return 1
        return sum(c.num_leaves() for c in self.children)

    def num_nodes(self) -> int:
        return 1 + sum(c.num_nodes() for c in self.children)

# -----------------------------------------------------------------------------
# Classifier
# -----------------------------------------------------------------------------
class C45Classifier(BaseEstimator, ClassifierMixin):
    """
    Unpruned C4.5 decision tree classifier.

    Parameters
    ----------
    min_no_obj : int, default=2
        Minimum weight that at least two branches of a split must carry.
    use_mdl_correction : bool, default=True
        Penalise numeric splits by the number of candidate thresholds.
    make_split_point_actual_value : bool, default=True
        Move numeric thresholds onto values observed in the training data.
    max_depth : int or None, default=None
        Maximum depth of the tree.  If ``None`` the depth is unbounded.
    feature_names : list[str] or None, default=None
        Names of the input features.
    categorical_features : list[int|str] or None, default=None
        Indices or names of categorical input features.  If names are used
        ``feature_names`` must be provided.  All other features are treated as
        numeric.

    Attributes
    ----------
    classes_ : ndarray
        Class labels seen during ``fit``.
    tree_ : TreeNode
        Root of the fitted tree.
    dataset_ : Dataset
        Training data in coded form; used to code prediction inputs.
    """

    def __init__(
        self,
        *,
        min_no_obj: int = 2,
        use_mdl_correction: bool = True,
        make_split_point_actual_value: bool = True,
        max_depth: int | None = None,
        feature_names: list[str] | None = None,
        categorical_features: list[int | str] | None = None,
    ):
        self.min_no_obj = min_no_obj
        self.use_mdl_correction = use_mdl_correction
        self.make_split_point_actual_value = make_split_point_actual_value
        self.max_depth = max_depth
        self.feature_names = feature_names
        self.categorical_features = categorical_features

    def fit(self, X, y, sample_weight=None):
        y = np.asarray(y)
        if sample_weight is not None and len(sample_weight) != len(y):
            raise ValueError("sample_weight must have the same length as y")
        self.classes_ = np.unique(y)
        data = Dataset.from_arrays(
            X, y,
            feature_names=self.feature_names,
            categorical_features=self.categorical_features,
            sample_weight=sample_weight,
            classes=self.classes_,
        )
        self.dataset_ = data
        self.n_features_in_ = data.num_attributes - 1

        selector = C45ModelSelection(
            int(self.min_no_obj), data,
            use_mdl_correction=self.use_mdl_correction,
            make_split_point_actual_value=self.make_split_point_actual_value,
        )
        self.tree_ = self._build_tree(data, selector, depth=0)
        selector.cleanup()
        logger.debug("grew tree with %d nodes, %d leaves",
                     self.tree_.num_nodes(), self.tree_.num_leaves())
        return self

    def predict(self, X):
        """
        Predict class labels for the provided samples.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Input samples.  Missing values may be represented by ``None`` or
            ``numpy.nan``.

        Returns
        -------
        ndarray of shape (n_samples,)
            Predicted class labels.
        """
        proba = self.predict_proba(X)
        return self.classes_[np.argmax(proba, axis=1)]

    def predict_proba(self, X):
        """
        Predict class probabilities for the provided samples.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Input samples.  Missing values may be represented by ``None`` or
            ``numpy.nan``.

        Returns
        -------
        ndarray of shape (n_samples, n_classes)
            Predicted class probabilities.

        Raises
        ------
        ValueError
            If the estimator has not been fitted.
        """
        if getattr(self, "tree_", None) is None:
            raise ValueError("Estimator not fitted. Call fit(...) first.")
        coded = self.dataset_.encode(X)
        return np.array([self._predict_proba_instance(row, self.tree_) for row in coded])

    @property
    def depth_(self) -> int:
        def _depth(node):
            return node.depth if node.is_leaf else max(_depth(c) for c in node.children)
        return _depth(self.tree_)

    # ------------------------------------------------------------------
    # Tree construction
    # ------------------------------------------------------------------
    def _build_tree(self, data: Dataset, selector, depth: int = 0,
                    is_empty: bool = False) -> TreeNode:
        """Recursively grow the subtree for ``data``."""
        model = selector.select(data)
        if self.max_depth is not None and depth >= int(self.max_depth) and model.is_split:
            model = NoSplit(Distribution.from_dataset(data))
        node = TreeNode(model, depth=depth, is_empty=is_empty)
        if not model.is_split:
            return node
        for part in model.split(data):
            empty = part.num_instances == 0 or part.sum_of_weights() <= 0
            node.children.append(self._build_tree(part, selector, depth + 1, empty))
        return node

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------
    def _predict_proba_instance(self, row, node: TreeNode, parent: TreeNode | None = None,
                                branch: int = 0) -> np.ndarray:
        k = len(self.classes_)
        if node.is_leaf:
            if node.is_empty and parent is not None:
                dist = parent.model.distribution()
                return np.array([dist.prob(c, branch) for c in range(k)])
            dist = node.model.distribution()
            if dist.total() <= 0:
                return np.full(k, 1.0 / k)
            return np.array([dist.prob(c) for c in range(k)])

        bag = node.model.which_subset(row)
        if bag > -1:
            return self._predict_proba_instance(row, node.children[bag], node, bag)
        # Missing value: weighted average over the branches
        fractions = node.model.weights(row)
        acc = np.zeros(k, dtype=float)
        for i, child in enumerate(node.children):
            if fractions[i] > 0:
                acc += fractions[i] * self._predict_proba_instance(row, child, node, i)
        return acc
