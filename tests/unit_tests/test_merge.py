import numpy as np
import pytest

from cityscore.exceptions import (
    ColumnMismatchError,
    ConfigError,
    TooFewScoreSetsError,
    WeightCountError,
    WeightSumError,
)
from cityscore.scoreset import ScoreSet, merge, validate_weights


def single_row(axis: str, values: list[float], columns=("A", "B", "C")) -> ScoreSet:
    return ScoreSet(columns, [axis], [1.0], np.array([values]))


def test_merge_explicit_weights():
    # given
    first = single_row("/a", [-1.0, 0.0, 1.0])
    second = single_row("/b", [1.0, 0.0, -1.0])

    # when
    merged = merge([first, second], [0.7, 0.3])

    # then
    assert merged.rows == ("/a", "/b")
    assert merged.columns == ("A", "B", "C")
    assert np.allclose(merged.row_weights, [0.7, 0.3])
    assert sum(merged.row_weights) == pytest.approx(1.0)
    assert np.array_equal(merged.matrix, [[-1.0, 0.0, 1.0], [1.0, 0.0, -1.0]])


def test_merge_equal_split():
    # given
    sets = [single_row(f"/{i}", [0.0, 1.0, -1.0]) for i in range(4)]

    # when
    merged = merge(sets)

    # then
    assert np.allclose(merged.row_weights, [0.25] * 4)


def test_merge_of_merges_keeps_proportions():
    # given
    inner = merge(
        [single_row("/x/a", [1, 2, 3]), single_row("/x/b", [3, 2, 1])], [0.25, 0.75]
    )
    other = single_row("/y", [0, 0, 1])

    # when
    outer = merge([inner, other], [0.4, 0.6])

    # then
    assert outer.rows == ("/x/a", "/x/b", "/y")
    assert np.allclose(outer.row_weights, [0.1, 0.3, 0.6])
    assert sum(outer.row_weights) == pytest.approx(1.0)


def test_merge_equal_split_does_not_normalize_inputs():
    # given
    inner = merge([single_row("/a", [1, 2, 3]), single_row("/b", [3, 2, 1])], None)
    other = single_row("/c", [0, 1, 0])

    # when
    merged = merge([inner, other])

    # then
    assert np.allclose(merged.row_weights, [0.25, 0.25, 0.5])


def test_merge_does_not_mutate_inputs():
    # given
    first = single_row("/a", [-1.0, 0.0, 1.0])
    second = single_row("/b", [1.0, 0.0, -1.0])

    # when
    merge([first, second], [0.5, 0.5])

    # then
    assert first.rows == ("/a",)
    assert first.row_weights == (1.0,)
    assert second.shape == (1, 3)


def test_merge_weight_sum_fails():
    first = single_row("/a", [-1.0, 0.0, 1.0])
    second = single_row("/b", [1.0, 0.0, -1.0])

    with pytest.raises(WeightSumError):
        merge([first, second], [0.5, 0.4])


def test_merge_weight_sum_tolerance():
    # given
    first = single_row("/a", [-1.0, 0.0, 1.0])
    second = single_row("/b", [1.0, 0.0, -1.0])
    third = single_row("/c", [0.0, 1.0, -1.0])
    weights = [0.1, 0.2, 0.7 - 1e-12]

    # then
    with pytest.raises(WeightSumError):
        merge([first, second, third], weights)
    merged = merge([first, second, third], weights, tolerance=1e-9)
    assert merged.shape == (3, 3)


def test_merge_column_order_mismatch():
    first = single_row("/a", [-1.0, 0.0, 1.0], columns=("A", "B", "C"))
    second = single_row("/b", [1.0, 0.0, -1.0], columns=("C", "B", "A"))

    with pytest.raises(ColumnMismatchError):
        merge([first, second])


def test_merge_column_set_mismatch():
    first = single_row("/a", [-1.0, 0.0, 1.0], columns=("A", "B", "C"))
    second = single_row("/b", [1.0, -1.0], columns=("A", "B"))

    with pytest.raises(ColumnMismatchError):
        merge([first, second], [0.5, 0.5])


def test_merge_single_set_fails():
    with pytest.raises(TooFewScoreSetsError):
        merge([single_row("/a", [1, 2, 3])])


def test_merge_weight_count_fails():
    first = single_row("/a", [-1.0, 0.0, 1.0])
    second = single_row("/b", [1.0, 0.0, -1.0])

    with pytest.raises(WeightCountError):
        merge([first, second], [1.0])


@pytest.mark.parametrize(
    "weights,n_sets",
    [
        ([0.5, 0.4], 2),
        ([0.5, 0.5], 3),
        (None, 1),
        ([float("nan"), 1.0], 2),
    ],
)
def test_validate_weights_configuration_errors(weights, n_sets):
    with pytest.raises(ConfigError):
        validate_weights(weights, n_sets)


def test_validate_weights_accepts_valid():
    validate_weights(None, 2)
    validate_weights([0.7, 0.3], 2)
    validate_weights([0.25, 0.25, 0.25, 0.25], 4)
