"""Percentile mapping, rankings and the human readable score report."""

import logging
import typing
from collections.abc import Sequence

import numpy as np
import pandas as pd
from scipy.stats import norm

from cityscore.exceptions import ZeroWeightError
from cityscore.scoreset import ScoreSet

logger = logging.getLogger()

FINAL_LABEL = "Final"


class RankedAlternative(typing.NamedTuple):
    name: str
    score: float


class AxisRanking(typing.NamedTuple):
    axis: str
    weight: float
    ranking: list[RankedAlternative]


def percentile(z: np.ndarray | float) -> np.ndarray | float:
    """Map z-scores to percentiles of the standard normal distribution, `100 * Phi(z)`."""
    return 100.0 * norm.cdf(z)


def rank(columns: Sequence[str], scores: Sequence[float]) -> list[RankedAlternative]:
    """Sort alternatives by descending score.

    Ties keep the order of `columns`, so identical inputs always give identical rankings.
    """
    scores = np.asarray(scores, dtype=np.float64)
    order = np.argsort(-scores, kind="stable")
    return [RankedAlternative(columns[i], float(scores[i])) for i in order]


def axis_rankings(score_set: ScoreSet) -> list[AxisRanking]:
    """Rank the alternatives on every row of the score set independently."""
    percentiles = percentile(score_set.matrix)
    return [
        AxisRanking(axis, weight, rank(score_set.columns, percentiles[i]))
        for i, (axis, weight) in enumerate(
            zip(score_set.rows, score_set.row_weights)
        )
    ]


def composite_scores(score_set: ScoreSet) -> np.ndarray:
    """Row weighted mean of the z-scores of every alternative.

    The row weights are used as they are, they do not have to sum to 1.0.

    Parameters
    ----------

    score_set : ScoreSet
        Score set to aggregate.

    Returns
    -------

    np.ndarray
        Array of shape (n_columns,) holding the weighted mean z-score per alternative.

    """
    weights = np.asarray(score_set.row_weights, dtype=np.float64)
    total = weights.sum()
    if total == 0:
        raise ZeroWeightError()

    return weights @ score_set.matrix / total


def composite_ranking(score_set: ScoreSet) -> list[RankedAlternative]:
    """Rank the alternatives by the percentile of their weighted mean z-score."""
    return rank(score_set.columns, percentile(composite_scores(score_set)))


class ScoreReport:
    """Ranked report of a single score set.

    Holds the normalized matrix, one ranking per axis and the composite ranking.
    """

    def __init__(
        self,
        label: str,
        frame: pd.DataFrame,
        weights: Sequence[float],
        axes: list[AxisRanking],
        composite: list[RankedAlternative],
    ) -> None:
        self.label = label
        self.frame = frame
        self.weights = list(weights)
        self.axes = axes
        self.composite = composite

    @classmethod
    def from_score_set(
        cls, score_set: ScoreSet, label: str = FINAL_LABEL
    ) -> "ScoreReport":
        return cls(
            label,
            score_set.to_frame(),
            score_set.row_weights,
            axis_rankings(score_set),
            composite_ranking(score_set),
        )

    @property
    def rows(self) -> list[str]:
        return list(self.frame.index)

    def lines(self, decimals: int = 1, name_width: int = 20) -> list[str]:
        """Render the report as list of text lines.

        Parameters
        ----------

        decimals : int, default 1
            Number of decimals for weights and percentiles.

        name_width : int, default 20
            Width of the alternative name column.

        Returns
        -------

        list[str]
            Row labels, the matrix, one block per axis and the composite block.

        """
        lines = [f"{self.label}: {self.rows}", "data:"]
        with pd.option_context("display.width", 200, "display.max_columns", None):
            matrix = self.frame.to_string(float_format=lambda x: f"{x:.4f}")
        lines += [f"    {line}" for line in matrix.splitlines()]

        for axis_ranking in self.axes:
            weight = f"{100.0 * axis_ranking.weight:.{decimals}f}%"
            lines.append(f"{weight:<6} {axis_ranking.axis}")
            lines += self._ranking_lines(axis_ranking.ranking, decimals, name_width)

        lines.append(self.label)
        lines += self._ranking_lines(self.composite, decimals, name_width)
        return lines

    @staticmethod
    def _ranking_lines(
        ranking: list[RankedAlternative], decimals: int, name_width: int
    ) -> list[str]:
        width = decimals + 4
        return [
            f"    {entry.name:<{name_width}}{entry.score:>{width}.{decimals}f}%"
            for entry in ranking
        ]

    def log(self, decimals: int = 1, name_width: int = 20) -> None:
        """Write the report to the logger."""
        for line in self.lines(decimals=decimals, name_width=name_width):
            logger.info(line)

    def to_dict(self) -> dict:
        """Return a json serializable representation of the report."""
        return {
            "label": self.label,
            "rows": self.rows,
            "columns": list(self.frame.columns),
            "matrix": self.frame.values.tolist(),
            "row_weights": self.weights,
            "axes": [
                {
                    "axis": axis_ranking.axis,
                    "weight": axis_ranking.weight,
                    "ranking": [entry._asdict() for entry in axis_ranking.ranking],
                }
                for axis_ranking in self.axes
            ],
            "composite": [entry._asdict() for entry in self.composite],
        }
