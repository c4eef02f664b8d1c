import numpy as np
import pytest
from c45py import C45Classifier

def test_sample_weights():
    # Heavier rows on the left make the two sides balanced enough to split
    X = np.array([[1.0], [2.0], [3.0], [4.0], [5.0], [6.0]])
    y = np.array([0, 0, 0, 1, 1, 1])
    w = np.array([2, 2, 2, 1, 1, 1])

    clf = C45Classifier(min_no_obj=2)
    clf.fit(X, y, sample_weight=w)

    root = clf.tree_.model
    assert root.distribution().total() == pytest.approx(9.0)
    assert clf.predict([[1.0]])[0] == 0
    assert clf.predict([[6.0]])[0] == 1

def test_missing_values_propagation():
    # Feature 0 is the split.
    # Value < 5 -> Class 0
    # Value > 5 -> Class 1
    # Missing -> Distributed
    X = np.array([
        [2.0], [3.0], [4.0], # Class 0
        [6.0], [7.0], [8.0], # Class 1
        [np.nan]             # Missing
    ])
    y = np.array([0, 0, 0, 1, 1, 1, 0])

    clf = C45Classifier(min_no_obj=1)
    clf.fit(X, y)

    # Predict on knowns
    assert clf.predict([[2.0]])[0] == 0
    assert clf.predict([[8.0]])[0] == 1

    # Predict on missing: 3 vs 3 known rows, so roughly even
    probs = clf.predict_proba([[np.nan]])[0]
    assert np.allclose(probs, [0.5, 0.5], atol=0.2)

def test_unseen_category_is_treated_as_missing():
    X = np.array([['a'], ['a'], ['a'], ['b'], ['b'], ['b']], dtype=object)
    y = np.array([0, 0, 0, 1, 1, 1])
    clf = C45Classifier(min_no_obj=1, categorical_features=[0]).fit(X, y)
    probs = clf.predict_proba([['c']])[0]
    assert np.allclose(probs, [0.5, 0.5])
