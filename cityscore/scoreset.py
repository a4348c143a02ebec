"""Normalized score tables and their weighted, hierarchical merge.

A `ScoreSet` is a table of z-scores: rows are scoring axes, columns are alternatives.
Leaf sets are built from raw values with `ScoreSet.from_alternatives`, composite sets are built with `merge`.
Merging only concatenates rows and rescales row weights, the z-scores themselves are never recomputed.
"""

import logging
from collections.abc import Callable, Sequence
from enum import Enum
from typing import Any

import numpy as np
import pandas as pd

from cityscore.constants.keys import ZeroVariancePolicy
from cityscore.exceptions import (
    ColumnMismatchError,
    NonFiniteValueError,
    ShapeMismatchError,
    TooFewScoreSetsError,
    UnknownGoalError,
    WeightCountError,
    WeightSumError,
    ZeroVarianceError,
)

logger = logging.getLogger()


class Goal(Enum):
    """Direction of goodness of an axis."""

    BIGGER = "bigger"
    SMALLER = "smaller"

    @classmethod
    def from_str(cls, value: "str | Goal") -> "Goal":
        if isinstance(value, Goal):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise UnknownGoalError(str(value)) from None


class ScoreSet:
    """Immutable table of normalized scores with one weight per row."""

    def __init__(
        self,
        columns: Sequence[str],
        rows: Sequence[str],
        row_weights: Sequence[float],
        matrix: np.ndarray,
    ) -> None:
        """Create a score set from already normalized scores.

        Parameters
        ----------

        columns : Sequence[str]
            Names of the alternatives, the position is the column index.

        rows : Sequence[str]
            Axis labels, one per row.

        row_weights : Sequence[float]
            Weight of each row.

        matrix : np.ndarray
            Array of shape (len(rows), len(columns)) holding the z-scores.
            The array is copied and made read-only.

        """
        matrix = np.array(matrix, dtype=np.float64)
        if matrix.ndim != 2:
            raise ShapeMismatchError(f"matrix must be 2-dimensional, got {matrix.ndim}")

        if len(rows) != len(row_weights) or len(rows) != matrix.shape[0]:
            raise ShapeMismatchError(
                f"rows={len(rows)}, row_weights={len(row_weights)}, matrix rows={matrix.shape[0]}"
            )
        if len(columns) != matrix.shape[1]:
            raise ShapeMismatchError(
                f"columns={len(columns)}, matrix columns={matrix.shape[1]}"
            )

        matrix.flags.writeable = False

        self._columns = tuple(columns)
        self._rows = tuple(rows)
        self._row_weights = tuple(float(w) for w in row_weights)
        self._matrix = matrix

    @classmethod
    def from_alternatives(
        cls,
        axis: str,
        alternatives: Sequence[Any],
        goal: Goal | str,
        extractor: Callable[[Any], float],
        zero_variance: str = ZeroVariancePolicy.ZEROS,
    ) -> "ScoreSet":
        """Build a single-row score set by z-score normalizing the raw values of one axis.

        Parameters
        ----------

        axis : str
            Label of the axis, e.g. '/Education/Math'.

        alternatives : Sequence[Any]
            Alternatives to score. Each needs a `name` attribute, names should be unique.

        goal : Goal | str
            Whether bigger or smaller raw values are better. For `Goal.SMALLER` the z-scores are negated.

        extractor : Callable[[Any], float]
            Returns the raw value of the axis for one alternative.

        zero_variance : str, default 'zeros'
            Policy if all raw values are identical.
            'zeros' scores every alternative with z=0, 'reject' raises a `ZeroVarianceError`.

        Returns
        -------

        ScoreSet
            Score set with one row of weight 1.0.

        """
        goal = Goal.from_str(goal)
        if zero_variance not in ZeroVariancePolicy.get_values():
            raise ValueError(
                f"Unknown zero variance policy '{zero_variance}', use one of {ZeroVariancePolicy.get_values()}"
            )

        columns = [alternative.name for alternative in alternatives]
        raw = np.array(
            [float(extractor(alternative)) for alternative in alternatives],
            dtype=np.float64,
        )

        non_finite = ~np.isfinite(raw)
        if np.any(non_finite):
            raise NonFiniteValueError(
                axis, [name for name, bad in zip(columns, non_finite) if bad]
            )

        mu = raw.mean()
        sigma = raw.std(ddof=0)

        if sigma == 0:
            if zero_variance == ZeroVariancePolicy.REJECT:
                raise ZeroVarianceError(axis)
            logger.warning(
                f"Axis '{axis}' has no variance (all values {mu}), scoring all alternatives with 0."
            )
            z = np.zeros_like(raw)
        else:
            z = (raw - mu) / sigma

        if goal is Goal.SMALLER:
            z = -z

        logger.debug(f"{axis}: mean={mu:.4g}, std={sigma:.4g}, goal={goal.value}")

        return cls(columns, [axis], [1.0], z.reshape(1, -1))

    @property
    def columns(self) -> tuple[str, ...]:
        return self._columns

    @property
    def rows(self) -> tuple[str, ...]:
        return self._rows

    @property
    def row_weights(self) -> tuple[float, ...]:
        return self._row_weights

    @property
    def matrix(self) -> np.ndarray:
        return self._matrix

    @property
    def shape(self) -> tuple[int, int]:
        return self._matrix.shape

    def to_frame(self) -> pd.DataFrame:
        """Return the scores as dataframe with axes as index and alternatives as columns."""
        return pd.DataFrame(
            self._matrix, index=list(self._rows), columns=list(self._columns)
        )

    def __repr__(self) -> str:
        return f"ScoreSet(rows={list(self._rows)}, columns={list(self._columns)})"


def validate_weights(
    weights: Sequence[float] | None,
    n_sets: int,
    tolerance: float = 0.0,
    label: str = "",
) -> None:
    """Check the merge contract before any data is touched.

    Parameters
    ----------

    weights : Sequence[float] | None
        Weight per score set or None for an equal split.

    n_sets : int
        Number of score sets to merge.

    tolerance : float, default 0.0
        Accepted absolute deviation of the weight sum from 1.0. With 0.0 the sum has to be exactly 1.0.

    label : str, default ''
        Name of the merge, only used in error messages.

    Raises
    ------

    TooFewScoreSetsError, WeightCountError, WeightSumError

    """
    if n_sets < 2:
        raise TooFewScoreSetsError(n_sets, label)

    if weights is None:
        return

    if len(weights) != n_sets:
        raise WeightCountError(len(weights), n_sets, label)

    # summed left to right, the order matters for the exact check
    total = 0.0
    for weight in weights:
        total += weight

    if not np.isfinite(total) or abs(total - 1.0) > tolerance:
        raise WeightSumError(list(weights), total, label)


def merge(
    sets: Sequence[ScoreSet],
    weights: Sequence[float] | None = None,
    tolerance: float = 0.0,
    label: str = "",
) -> ScoreSet:
    """Merge score sets into one composite score set.

    The rows of all sets are concatenated in input order.
    Row weights of set `i` are multiplied by `weights[i]`, or divided by `len(sets)` if no weights are given.
    This makes the internal weight distribution of a set a sub-allocation of its share in the merged set.

    Parameters
    ----------

    sets : Sequence[ScoreSet]
        Two or more score sets with identical columns in identical order.

    weights : Sequence[float] | None, default None
        One weight per set, summing to 1.0. None splits equally.

    tolerance : float, default 0.0
        See `validate_weights`.

    label : str, default ''
        Name of the merge, only used in log and error messages.

    Returns
    -------

    ScoreSet
        New score set, the inputs are not modified.

    """
    validate_weights(weights, len(sets), tolerance=tolerance, label=label)

    columns = sets[0].columns
    for score_set in sets[1:]:
        if score_set.columns != columns:
            raise ColumnMismatchError(columns, score_set.columns)

    rows = []
    row_weights = []
    for i, score_set in enumerate(sets):
        rows.extend(score_set.rows)
        if weights is None:
            row_weights.extend(w / len(sets) for w in score_set.row_weights)
        else:
            row_weights.extend(w * weights[i] for w in score_set.row_weights)

    matrix = np.vstack([score_set.matrix for score_set in sets])

    logger.debug(
        f"Merged {len(sets)} score sets into '{label or 'merge'}' with {len(rows)} rows"
    )

    return ScoreSet(columns, rows, row_weights, matrix)
