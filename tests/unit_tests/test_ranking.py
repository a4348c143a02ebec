import json

import numpy as np
import pytest

from cityscore.exceptions import ZeroWeightError
from cityscore.extractors import FieldExtractor
from cityscore.ranking import (
    RankedAlternative,
    ScoreReport,
    axis_rankings,
    composite_ranking,
    composite_scores,
    percentile,
    rank,
)
from cityscore.scoreset import Goal, ScoreSet, merge


def test_percentile_of_zero_is_fifty():
    assert percentile(0.0) == 50.0


def test_percentile_is_monotonic():
    # given
    z = np.linspace(-3, 3, 25)

    # when
    p = percentile(z)

    # then
    assert np.all(np.diff(p) > 0)
    assert np.all((p > 0) & (p < 100))


def test_abc_scenario(abc_alternatives):
    # given
    score_set = ScoreSet.from_alternatives(
        "/x", abc_alternatives, Goal.BIGGER, FieldExtractor("x")
    )

    # when
    ranking = axis_rankings(score_set)[0].ranking

    # then
    assert [entry.name for entry in ranking] == ["C", "B", "A"]
    assert [round(entry.score, 1) for entry in ranking] == [89.0, 50.0, 11.0]


def test_rank_ties_keep_input_order():
    # when
    ranking = rank(["A", "B", "C", "D"], [50.0, 70.0, 50.0, 70.0])

    # then
    assert ranking == [
        RankedAlternative("B", 70.0),
        RankedAlternative("D", 70.0),
        RankedAlternative("A", 50.0),
        RankedAlternative("C", 50.0),
    ]


def test_rank_is_deterministic():
    columns = ["A", "B", "C", "D", "E"]
    scores = [1.0, 1.0, 1.0, 2.0, 0.5]

    assert rank(columns, scores) == rank(columns, scores)


def test_composite_scores_weighted_mean():
    # given
    score_set = ScoreSet(
        ["A", "B"],
        ["/a", "/b"],
        [0.75, 0.25],
        np.array([[1.0, -1.0], [-1.0, 3.0]]),
    )

    # when
    scores = composite_scores(score_set)

    # then
    assert np.allclose(scores, [0.5, 0.0])


def test_composite_scores_unnormalized_weights():
    # given
    score_set = ScoreSet(
        ["A", "B"],
        ["/a", "/b"],
        [3.0, 1.0],
        np.array([[1.0, -1.0], [-1.0, 3.0]]),
    )

    # then
    assert np.allclose(composite_scores(score_set), [0.5, 0.0])


def test_composite_scores_zero_weights():
    score_set = ScoreSet(["A", "B"], ["/a"], [0.0], np.array([[1.0, -1.0]]))

    with pytest.raises(ZeroWeightError):
        composite_scores(score_set)


def test_composite_ranking():
    # given
    first = ScoreSet(["A", "B", "C"], ["/a"], [1.0], np.array([[-1.0, 0.0, 1.0]]))
    second = ScoreSet(["A", "B", "C"], ["/b"], [1.0], np.array([[1.0, 0.0, -1.0]]))
    merged = merge([first, second], [0.7, 0.3])

    # when
    ranking = composite_ranking(merged)

    # then
    assert [entry.name for entry in ranking] == ["C", "B", "A"]
    assert ranking[1].score == pytest.approx(50.0)
    assert ranking[0].score == pytest.approx(100 - ranking[2].score)


def test_report_lines():
    # given
    first = ScoreSet(["A", "B", "C"], ["/a"], [1.0], np.array([[-1.0, 0.0, 1.0]]))
    second = ScoreSet(["A", "B", "C"], ["/b"], [1.0], np.array([[1.0, 0.0, -1.0]]))
    report = ScoreReport.from_score_set(merge([first, second], [0.7, 0.3]))

    # when
    lines = report.lines()

    # then
    assert lines[0] == "Final: ['/a', '/b']"
    assert lines[1] == "data:"
    assert "70.0%  /a" in lines
    assert "30.0%  /b" in lines
    assert lines[-4] == "Final"
    assert lines[-3].split() == ["C", "65.5%"]
    assert lines[-1].split() == ["A", "34.5%"]


def test_report_contains_matrix():
    # given
    score_set = ScoreSet(["A", "B"], ["/a"], [1.0], np.array([[-1.0, 1.0]]))

    # when
    text = "\n".join(ScoreReport.from_score_set(score_set, label="/Test").lines())

    # then
    assert "-1.0000" in text
    assert "1.0000" in text
    assert text.startswith("/Test")


def test_report_to_dict_is_json_serializable():
    # given
    score_set = ScoreSet(["A", "B"], ["/a"], [1.0], np.array([[-1.0, 1.0]]))

    # when
    payload = ScoreReport.from_score_set(score_set).to_dict()

    # then
    json.dumps(payload)
    assert payload["composite"][0]["name"] == "B"
    assert payload["axes"][0]["ranking"][1]["name"] == "A"
