# -*- coding: utf-8 -*-
"""
c45py.dataset
=============

Weighted row sets consumed by the split machinery.

A :class:`Dataset` stores every attribute (the class attribute included) as a
column of a float matrix.  Numeric attributes hold their raw values; nominal
attributes hold the index of the value in :attr:`Attribute.values`.  Missing
values are ``NaN``.  Rows carry a non-negative weight.

:meth:`Dataset.from_arrays` converts the kind of input accepted by
scikit-learn estimators (an object array with ``None``/``NaN`` for missing
values plus a label vector) into this representation.
"""

from __future__ import annotations
import numpy as np

from .utils import is_missing_scalar


class Attribute:
    """Descriptor for a single column of a :class:`Dataset`.

    Parameters
    ----------
    name : str
        Column name used in split labels.
    index : int
        Position of the column in the dataset.
    values : sequence of str or None, default=None
        Declared values of a nominal attribute.  ``None`` marks a numeric
        attribute.
    """

    __slots__ = ("_name", "_index", "_values")

    def __init__(self, name: str, index: int, values=None):
        self._name = str(name)
        self._index = int(index)
        self._values = None if values is None else tuple(str(v) for v in values)

    @property
    def name(self) -> str:
        return self._name

    @property
    def index(self) -> int:
        return self._index

    @property
    def values(self) -> tuple[str, ...] | None:
        return self._values

    def is_numeric(self) -> bool:
        return self._values is None

    def is_nominal(self) -> bool:
        return self._values is not None

    def num_values(self) -> int:
        """Number of declared values (0 for numeric attributes)."""
        return 0 if self._values is None else len(self._values)

    def value(self, i: int) -> str:
        return self._values[int(i)]

    def __repr__(self):
        kind = "numeric" if self.is_numeric() else f"nominal[{self.num_values()}]"
        return f"Attribute({self._name!r}, index={self._index}, {kind})"


class Dataset:
    """Read-only weighted rows with a designated class attribute.

    Parameters
    ----------
    attributes : list[Attribute]
        Column descriptors; ``attributes[i].index`` must equal ``i``.
    values : array-like of shape (n_rows, n_attributes)
        Coded values, ``NaN`` for missing entries.
    weights : array-like of shape (n_rows,) or None, default=None
        Row weights; defaults to 1 for every row.
    class_index : int, default=-1
        Index of the class attribute.  Negative values count from the end.

    Raises
    ------
    ValueError
        If there are no attributes, the class index is out of range, the
        class attribute is not nominal or has missing labels, a nominal code
        is not an integer in ``[0, num_values)``, the shapes are
        inconsistent, or a weight is negative or not finite.
    """

    def __init__(self, attributes, values, weights=None, class_index: int = -1):
        attributes = list(attributes)
        if not attributes:
            raise ValueError("a dataset needs at least one attribute")
        n_att = len(attributes)
        for i, att in enumerate(attributes):
            if att.index != i:
                raise ValueError(f"attribute {att.name!r} has index {att.index}, expected {i}")
        class_index = int(class_index)
        if class_index < 0:
            class_index += n_att
        if not 0 <= class_index < n_att:
            raise ValueError(f"class index out of range for {n_att} attributes")
        if not attributes[class_index].is_nominal():
            raise ValueError("the class attribute must be nominal")
        if attributes[class_index].num_values() == 0:
            raise ValueError("the class attribute declares no values")

        values = np.array(values, dtype=float)
        if values.ndim == 1 and values.size == 0:
            values = values.reshape(0, n_att)
        if values.ndim != 2 or values.shape[1] != n_att:
            raise ValueError(f"values must have shape (n_rows, {n_att}), got {values.shape}")
        if np.isnan(values[:, class_index]).any():
            raise ValueError("rows with a missing class label are not allowed")
        for att in attributes:
            if att.is_numeric():
                continue
            col = values[:, att.index]
            col = col[~np.isnan(col)]
            bad = (col != np.floor(col)) | (col < 0) | (col >= att.num_values())
            if bad.any():
                raise ValueError(f"attribute {att.name!r} has codes outside "
                                 f"0..{att.num_values() - 1}: {col[bad][0]!r}")

        if weights is None:
            weights = np.ones(values.shape[0], dtype=float)
        else:
            weights = np.array(weights, dtype=float)
            if weights.shape != (values.shape[0],):
                raise ValueError("weights must have one entry per row")
            if not np.isfinite(weights).all():
                raise ValueError("row weights must be finite")
            if (weights < 0).any():
                raise ValueError("row weights must be non-negative")

        self._attributes = attributes
        self._values = values
        self._weights = weights
        self._class_index = class_index
        self._values.setflags(write=False)
        self._weights.setflags(write=False)

    # ------------------------------------------------------------------
    # Construction from raw arrays
    # ------------------------------------------------------------------
    @classmethod
    def from_arrays(cls, X, y, *, feature_names=None, categorical_features=None,
                    sample_weight=None, class_name: str = "class", classes=None):
        """
        Build a dataset from a feature matrix and a label vector.

        The class becomes the last attribute.  Columns listed in
        ``categorical_features`` (by index, or by name when ``feature_names``
        is given) become nominal attributes whose values are the sorted
        distinct non-missing entries, compared as strings.  All other columns
        are numeric.  ``None`` and ``NaN`` mark missing values.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
        y : array-like of shape (n_samples,)
        feature_names : list[str] or None, default=None
        categorical_features : list[int | str] or None, default=None
        sample_weight : array-like of shape (n_samples,) or None, default=None
        class_name : str, default="class"
        classes : array-like or None, default=None
            Class labels in coding order; defaults to ``np.unique(y)``.

        Returns
        -------
        Dataset
        """
        X = np.asarray(X, dtype=object)
        y = np.asarray(y)
        if X.ndim != 2:
            raise ValueError("X must be a 2-D array")
        if len(y) != X.shape[0]:
            raise ValueError("X and y must have the same number of rows")
        n_features = X.shape[1]
        if feature_names is None:
            feature_names = [f"f{i}" for i in range(n_features)]
        elif len(feature_names) != n_features:
            raise ValueError("feature_names length must match X.shape[1]")
        feature_names = list(feature_names)

        cats = set()
        if categorical_features is not None:
            cf = list(categorical_features)
            name_to_idx = {n: i for i, n in enumerate(feature_names)}
            for c in cf:
                if isinstance(c, str):
                    if c not in name_to_idx:
                        raise ValueError(f"unknown categorical feature {c!r}")
                    cats.add(name_to_idx[c])
                else:
                    cats.add(int(c))
            if any(not 0 <= i < n_features for i in cats):
                raise ValueError("categorical feature index out of range")

        attributes = []
        columns = []
        for j in range(n_features):
            col = X[:, j]
            miss = np.array([is_missing_scalar(v) for v in col], dtype=bool)
            if j in cats:
                labels = sorted(set(str(v) for v in col[~miss]))
                lookup = {v: k for k, v in enumerate(labels)}
                coded = np.full(len(col), np.nan)
                coded[~miss] = [lookup[str(v)] for v in col[~miss]]
                attributes.append(Attribute(feature_names[j], j, labels))
            else:
                coded = np.full(len(col), np.nan)
                try:
                    coded[~miss] = col[~miss].astype(float)
                except (TypeError, ValueError):
                    raise ValueError(
                        f"feature {feature_names[j]!r} is not numeric; "
                        "list it in categorical_features") from None
                attributes.append(Attribute(feature_names[j], j, None))
            columns.append(coded)

        classes = np.unique(y) if classes is None else np.asarray(classes)
        class_lookup = {c: k for k, c in enumerate(classes.tolist())}
        try:
            y_coded = np.array([class_lookup[c] for c in y.tolist()], dtype=float)
        except KeyError as exc:
            raise ValueError(f"unknown class label {exc.args[0]!r}") from None
        attributes.append(Attribute(class_name, n_features, [str(c) for c in classes]))
        columns.append(y_coded)

        values = np.column_stack(columns) if len(y) else np.empty((0, n_features + 1))
        return cls(attributes, values, weights=sample_weight, class_index=n_features)

    def encode(self, X) -> np.ndarray:
        """Code raw feature rows the way this dataset codes its columns.

        Returns an array of shape ``(n_samples, num_attributes)`` whose class
        column is ``NaN``.  Categories not declared by an attribute become
        missing values.
        """
        X = np.asarray(X, dtype=object)
        if X.ndim == 1:
            X = X.reshape(1, -1)
        features = [a for a in self._attributes if a.index != self._class_index]
        if X.shape[1] != len(features):
            raise ValueError(f"expected {len(features)} features, got {X.shape[1]}")
        out = np.full((X.shape[0], self.num_attributes), np.nan)
        for j, att in enumerate(features):
            for r, v in enumerate(X[:, j]):
                if is_missing_scalar(v):
                    continue
                if att.is_numeric():
                    out[r, att.index] = float(v)
                elif str(v) in att.values:
                    out[r, att.index] = att.values.index(str(v))
        return out

    # ------------------------------------------------------------------
    # Shape and metadata
    # ------------------------------------------------------------------
    @property
    def num_instances(self) -> int:
        return self._values.shape[0]

    @property
    def num_attributes(self) -> int:
        return len(self._attributes)

    @property
    def class_index(self) -> int:
        return self._class_index

    @property
    def num_classes(self) -> int:
        return self._attributes[self._class_index].num_values()

    def class_attribute(self) -> Attribute:
        return self._attributes[self._class_index]

    def attribute(self, i: int) -> Attribute:
        return self._attributes[i]

    @property
    def attributes(self) -> list[Attribute]:
        return list(self._attributes)

    def enumerate_attributes(self):
        """Iterate over all attributes except the class attribute."""
        for att in self._attributes:
            if att.index != self._class_index:
                yield att

    # ------------------------------------------------------------------
    # Row access
    # ------------------------------------------------------------------
    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def weights(self) -> np.ndarray:
        return self._weights

    def column(self, i: int) -> np.ndarray:
        return self._values[:, i]

    def class_values(self) -> np.ndarray:
        return self._values[:, self._class_index].astype(int)

    def is_missing(self, i: int) -> np.ndarray:
        return np.isnan(self._values[:, i])

    def sum_of_weights(self) -> float:
        return float(self._weights.sum())

    def subset(self, rows, weights=None) -> "Dataset":
        """New dataset holding ``rows`` (indices or boolean mask).

        ``weights`` replaces the selected rows' weights when given.
        """
        rows = np.asarray(rows)
        if rows.dtype == bool:
            rows = np.nonzero(rows)[0]
        w = self._weights[rows] if weights is None else weights
        return Dataset(self._attributes, self._values[rows], weights=w,
                       class_index=self._class_index)

    def sorted_by(self, i: int) -> "Dataset":
        """Rows ordered by attribute ``i``, missing values last.

        The sort is stable, so rows with equal values keep their order.
        """
        col = self._values[:, i]
        order = np.argsort(np.where(np.isnan(col), np.inf, col), kind="mergesort")
        known = order[~np.isnan(col[order])]
        missing = order[np.isnan(col[order])]
        return self.subset(np.concatenate([known, missing]).astype(int))

    def __len__(self):
        return self.num_instances

    def __repr__(self):
        return (f"Dataset(n_rows={self.num_instances}, n_attributes={self.num_attributes}, "
                f"class_index={self._class_index})")
