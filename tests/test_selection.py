import numpy as np
import pytest
from c45py import (Attribute, C45ModelSelection, C45Split, Dataset, NoSplit,
                   SplitEvaluationError)


def _separable_dataset():
    """10 rows, one numeric feature; classes 6/4 split between 5 and 6."""
    X = np.arange(10, dtype=float).reshape(-1, 1)
    y = np.array(['A'] * 6 + ['B'] * 4)
    return Dataset.from_arrays(X, y, feature_names=['x'])


def _id_column_dataset():
    """A row-id column next to a useful and a weak nominal attribute."""
    ids = [str(i) for i in range(10)]
    good = ['a'] * 7 + ['b'] * 3
    weak = ['p', 'p', 'p', 'q', 'q', 'p', 'p', 'q', 'q', 'q']
    X = np.array(list(zip(ids, good, weak)), dtype=object)
    y = np.array(['yes'] * 5 + ['no'] * 5)
    return Dataset.from_arrays(X, y, feature_names=['id', 'good', 'weak'],
                               categorical_features=['id', 'good', 'weak'])


def test_pure_node_is_not_split():
    X = np.array([[1.0, 'a'], [2.0, 'b'], [3.0, 'a'], [4.0, 'b'], [5.0, 'a']], dtype=object)
    y = np.array(['yes'] * 5)
    data = Dataset.from_arrays(X, y, categorical_features=[1])
    result = C45ModelSelection(2).select(data)
    assert isinstance(result, NoSplit)
    assert not result.is_split


def test_three_pure_rows_keep_their_weight():
    X = np.array([[1.0], [2.0], [3.0]])
    data = Dataset.from_arrays(X, ['yes', 'yes', 'yes'])
    result = C45ModelSelection(2).select(data)
    assert isinstance(result, NoSplit)
    assert result.distribution().total() == pytest.approx(3.0)


def test_small_node_is_not_split_even_if_impure():
    X = np.array([[1.0], [2.0], [8.0], [9.0]])
    y = np.array([0, 0, 1, 1])
    data = Dataset.from_arrays(X, y, sample_weight=[0.9, 0.9, 0.9, 0.9])
    # total weight 3.6 < 2 * 2
    result = C45ModelSelection(2).select(data)
    assert isinstance(result, NoSplit)
    assert result.distribution().total() == pytest.approx(3.6)


def test_numeric_end_to_end_split_point():
    data = _separable_dataset()
    result = C45ModelSelection(2).select(data)
    assert isinstance(result, C45Split)
    assert result.att_index == 0
    assert result.split_point == pytest.approx(5.5)
    assert result.gain_ratio() > 0


def test_numeric_split_point_snaps_to_full_data():
    data = _separable_dataset()
    result = C45ModelSelection(2, data).select(data)
    # largest observed value not above the 5.5 midpoint
    assert result.split_point == pytest.approx(5.0)


def test_numeric_split_point_recomputed_against_full_dataset():
    full = _separable_dataset()
    # local rows 0,1,2 | 7,8,9 put the midpoint at 4.5
    local = full.subset([0, 1, 2, 7, 8, 9])
    y = local.class_values()
    assert list(y) == [0, 0, 0, 1, 1, 1]

    local_only = C45ModelSelection(2).select(local)
    assert local_only.split_point == pytest.approx(4.5)

    with_full = C45ModelSelection(2, full).select(local)
    assert with_full.att_index == 0
    assert with_full.split_point == pytest.approx(4.0)


def test_split_point_left_alone_when_disabled():
    data = _separable_dataset()
    sel = C45ModelSelection(2, data, make_split_point_actual_value=False)
    assert sel.select(data).split_point == pytest.approx(5.5)


def test_selection_is_deterministic():
    data = _id_column_dataset()
    sel = C45ModelSelection(1, data)
    first = sel.select(data)
    second = sel.select(data)
    assert first.att_index == second.att_index
    assert first.info_gain() == second.info_gain()
    assert first.gain_ratio() == second.gain_ratio()
    assert np.array_equal(first.distribution().matrix(), second.distribution().matrix())


def test_equal_gain_ratio_keeps_lowest_attribute():
    col = ['a'] * 6 + ['b'] * 4
    noise = ['p', 'q'] * 5
    X = np.array(list(zip(noise, col, col)), dtype=object)
    y = np.array(['yes'] * 6 + ['no'] * 4)
    data = Dataset.from_arrays(X, y, categorical_features=[0, 1, 2])
    result = C45ModelSelection(2, data).select(data)
    assert result.att_index == 1


def test_many_valued_attribute_not_selected_with_full_data():
    data = _id_column_dataset()
    result = C45ModelSelection(1, data).select(data)
    # the id column is left out of the average gain, so 'good' clears the bar
    assert result.att_index == 1


def test_many_valued_attribute_wins_without_full_data():
    data = _id_column_dataset()
    result = C45ModelSelection(1).select(data)
    # the id column's gain drags the average above 'good'
    assert result.att_index == 0


def test_many_valued_attribute_left_out_next_to_numeric():
    ids = [str(i) for i in range(10)]
    x = [float(v) for v in (3, 1, 4, 0, 2, 9, 6, 8, 5, 7)]
    X = np.array(list(zip(ids, x)), dtype=object)
    # x < 5 is exactly the 'yes' rows
    y = np.array(['yes'] * 5 + ['no'] * 5)
    data = Dataset.from_arrays(X, y, feature_names=['id', 'x'], categorical_features=['id'])

    result = C45ModelSelection(1, data).select(data)
    assert result.att_index == 1
    assert result.split_point == pytest.approx(4.0)
    # gain ratio of the id column is 1 / log2(10)
    assert result.gain_ratio() > 1 / np.log2(10)

    # without full data the id column counts towards the average and wins
    assert C45ModelSelection(1).select(data).att_index == 0


def test_only_many_valued_nominals_are_allowed():
    ids = np.array([[str(i)] for i in range(10)], dtype=object)
    y = np.array(['yes'] * 5 + ['no'] * 5)
    data = Dataset.from_arrays(ids, y, categorical_features=[0])
    result = C45ModelSelection(1, data).select(data)
    assert isinstance(result, C45Split)
    assert result.att_index == 0


def test_no_valid_candidate_means_no_split():
    X = np.array([[1.0], [1.0], [1.0], [1.0], [1.0], [1.0]])
    y = np.array([0, 1, 0, 1, 0, 1])
    data = Dataset.from_arrays(X, y)
    assert isinstance(C45ModelSelection(2).select(data), NoSplit)


def test_unknown_values_are_merged_into_winner():
    X = np.array([[0.0], [1.0], [2.0], [3.0], [np.nan],
                  [6.0], [7.0], [8.0], [9.0], [np.nan]])
    y = np.array([0, 0, 0, 0, 0, 1, 1, 1, 1, 1])
    data = Dataset.from_arrays(X, y, sample_weight=[1, 1, 1, 1, 2, 1, 1, 1, 1, 0.5])
    result = C45ModelSelection(2).select(data)
    assert isinstance(result, C45Split)
    assert result.distribution().total() == pytest.approx(data.sum_of_weights())
    # unknown rows are spread evenly over the two equal branches
    assert result.distribution().per_class_per_bag(0, 0) == pytest.approx(5.0)
    assert result.distribution().per_class_per_bag(1, 0) == pytest.approx(1.0)


def test_two_argument_form_ignores_test_rows():
    data = _separable_dataset()
    test = data.subset([0, 9])
    sel = C45ModelSelection(2)
    a = sel.select(data)
    b = sel.select(data, test)
    assert a.att_index == b.att_index
    assert a.split_point == b.split_point
    assert a.gain_ratio() == b.gain_ratio()


def test_class_only_dataset_fails_fast():
    data = Dataset([Attribute('class', 0, ['a', 'b'])], [[0], [1], [0], [1]], class_index=0)
    with pytest.raises(ValueError):
        C45ModelSelection(1).select(data)


def test_mismatched_full_data_fails_fast():
    data = _separable_dataset()
    other = _id_column_dataset()
    with pytest.raises(ValueError):
        C45ModelSelection(2, other).select(data)


def test_negative_min_no_obj_rejected():
    with pytest.raises(ValueError):
        C45ModelSelection(-1)


def test_evaluation_failure_propagates(monkeypatch):
    def boom(self, data):
        raise ZeroDivisionError("bad arithmetic")

    monkeypatch.setattr(C45Split, "build_classifier", boom)
    with pytest.raises(SplitEvaluationError) as info:
        C45ModelSelection(2).select(_separable_dataset())
    assert info.value.att_index == 0
    assert isinstance(info.value.__cause__, ZeroDivisionError)


def test_cleanup_switches_to_local_mode():
    data = _separable_dataset()
    sel = C45ModelSelection(2, data)
    assert sel.uses_global_statistics
    sel.cleanup()
    assert not sel.uses_global_statistics
    assert sel.select(data).split_point == pytest.approx(5.5)
