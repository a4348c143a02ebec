"""Declarative weight tree describing how axes are combined into one ranking.

A tree node is either an `AxisNode` (one normalized axis) or a `CompositeNode` merging its children with optional weights.
Trees are read from and written to plain dictionaries (yaml), and evaluated recursively into a single `ScoreSet`.

Example
-------

.. code-block:: yaml

    label: /
    weights: [0.7, 0.3]
    children:
      - {axis: /Education/Math, goal: bigger, field: education.math}
      - axis: /Financial
        goal: smaller
        extractor: {name: annual_cost, params: {apr: 3.2}}

"""

import logging
import typing
from collections import Counter
from collections.abc import Callable, Sequence
from typing import Any

import yaml

from cityscore.constants.keys import TreeKeys, ZeroVariancePolicy
from cityscore.exceptions import DuplicateAxisError, MalformedTreeError
from cityscore.extractors import Extractor, build_extractor
from cityscore.scoreset import Goal, ScoreSet, merge, validate_weights

logger = logging.getLogger()


class AxisNode:
    """Leaf of the weight tree, scores one axis."""

    def __init__(
        self,
        axis: str,
        goal: Goal | str,
        extractor: str | dict | Callable[[Any], float],
    ) -> None:
        self.axis = axis
        self.goal = Goal.from_str(goal)
        self.extractor = extractor

    @property
    def label(self) -> str:
        return self.axis

    def leaves(self) -> list["AxisNode"]:
        return [self]

    def get_extractor(self, context: dict | None = None) -> Extractor:
        if callable(self.extractor):
            return self.extractor
        return build_extractor(self.extractor, context)

    def to_dict(self) -> dict:
        if callable(self.extractor):
            raise TypeError(f"Axis '{self.axis}' uses a callable extractor and can not be serialized")

        data = {TreeKeys.AXIS: self.axis, TreeKeys.GOAL: self.goal.value}
        extractor = self.extractor
        if (
            isinstance(extractor, dict)
            and extractor.get(TreeKeys.NAME) == TreeKeys.FIELD
            and set((extractor.get(TreeKeys.PARAMS) or {}).keys()) == {"path"}
        ):
            data[TreeKeys.FIELD] = extractor[TreeKeys.PARAMS]["path"]
        else:
            data[TreeKeys.EXTRACTOR] = extractor
        return data

    def __repr__(self) -> str:
        return f"AxisNode('{self.axis}', {self.goal.value})"


class CompositeNode:
    """Inner node of the weight tree, merges its children."""

    def __init__(
        self,
        label: str,
        children: Sequence["AxisNode | CompositeNode"],
        weights: Sequence[float] | None = None,
    ) -> None:
        self.label = label
        self.children = list(children)
        self.weights = list(weights) if weights is not None else None

    def leaves(self) -> list[AxisNode]:
        """Return all axes in merge order, i.e. the row order of the evaluated score set."""
        return [leaf for child in self.children for leaf in child.leaves()]

    def to_dict(self) -> dict:
        data = {TreeKeys.LABEL: self.label}
        if self.weights is not None:
            data[TreeKeys.WEIGHTS] = list(self.weights)
        data[TreeKeys.CHILDREN] = [child.to_dict() for child in self.children]
        return data

    def __repr__(self) -> str:
        return f"CompositeNode('{self.label}', children={len(self.children)})"


Node = AxisNode | CompositeNode


def parse_tree(data: dict, tolerance: float = 0.0) -> Node:
    """Create a weight tree from its dictionary representation.

    All merge weights are validated here, so configuration errors surface before any data is scored.

    Parameters
    ----------

    data : dict
        Root node. Composite nodes have 'children' and optional 'label' and 'weights',
        leaves have 'axis', 'goal' and either 'field' or 'extractor'.

    tolerance : float, default 0.0
        Accepted deviation of the weight sums from 1.0, see `cityscore.scoreset.validate_weights`.

    Returns
    -------

    Node
        Root of the tree.

    """
    root = _parse_node(data, tolerance, path="", index=0)

    counts = Counter(leaf.axis for leaf in root.leaves())
    for axis, n in counts.items():
        if n > 1:
            raise DuplicateAxisError(axis)

    return root


def _parse_node(data: Any, tolerance: float, path: str, index: int) -> Node:
    if not isinstance(data, dict):
        raise MalformedTreeError(f"Node below '{path or '/'}' must be a mapping, got '{data}'")

    if TreeKeys.CHILDREN in data:
        # unlabeled nested composites are named after their position below the parent
        default_label = f"{path.rstrip('/')}/{index}" if path else "/"
        label = data.get(TreeKeys.LABEL, default_label)
        children = data[TreeKeys.CHILDREN] or []
        weights = data.get(TreeKeys.WEIGHTS)
        if weights is not None:
            try:
                weights = [float(w) for w in weights]
            except (TypeError, ValueError) as e:
                raise MalformedTreeError(
                    f"Weights of '{label}' must be a list of numbers, got {weights!r}"
                ) from e

        validate_weights(weights, len(children), tolerance=tolerance, label=label)

        return CompositeNode(
            label,
            [
                _parse_node(child, tolerance, label, i)
                for i, child in enumerate(children)
            ],
            weights,
        )

    if TreeKeys.AXIS not in data:
        raise MalformedTreeError(
            f"Node below '{path or '/'}' needs either '{TreeKeys.CHILDREN}' or '{TreeKeys.AXIS}': {data}"
        )

    axis = data[TreeKeys.AXIS]
    if TreeKeys.FIELD in data and TreeKeys.EXTRACTOR in data:
        raise MalformedTreeError(
            f"Axis '{axis}' defines both '{TreeKeys.FIELD}' and '{TreeKeys.EXTRACTOR}'"
        )
    if TreeKeys.FIELD in data:
        extractor = {
            TreeKeys.NAME: TreeKeys.FIELD,
            TreeKeys.PARAMS: {"path": data[TreeKeys.FIELD]},
        }
    elif TreeKeys.EXTRACTOR in data:
        extractor = data[TreeKeys.EXTRACTOR]
    else:
        raise MalformedTreeError(
            f"Axis '{axis}' needs either '{TreeKeys.FIELD}' or '{TreeKeys.EXTRACTOR}'"
        )

    if TreeKeys.GOAL not in data:
        raise MalformedTreeError(f"Axis '{axis}' needs a '{TreeKeys.GOAL}'")

    return AxisNode(axis, data[TreeKeys.GOAL], extractor)


def load_tree(path: str, tolerance: float = 0.0) -> Node:
    with open(path) as f:
        data = yaml.safe_load(f)
    logger.info(f"Loaded weight tree from {path}")
    return parse_tree(data, tolerance=tolerance)


def effective_weights(node: Node, share: float = 1.0) -> dict[str, float]:
    """Weight of every axis in the final score set.

    The weight of an axis is the product of the weights along its path, where
    children of a node without weights get an equal share.
    The result equals the row weights of `evaluate(node, ...).score_set`.
    """
    if isinstance(node, AxisNode):
        return {node.axis: share}

    if node.weights is None:
        weights = [1.0 / len(node.children)] * len(node.children)
    else:
        weights = node.weights

    result = {}
    for child, weight in zip(node.children, weights):
        result.update(effective_weights(child, share * weight))
    return result


class Evaluation(typing.NamedTuple):
    score_set: ScoreSet
    # (label, score set) of every composite node, children before parents
    levels: list[tuple[str, ScoreSet]]


def evaluate(
    node: Node,
    alternatives: Sequence[Any],
    context: dict | None = None,
    zero_variance: str = ZeroVariancePolicy.ZEROS,
    tolerance: float = 0.0,
) -> Evaluation:
    """Score all alternatives by walking the tree bottom-up.

    Parameters
    ----------

    node : Node
        Root of the weight tree.

    alternatives : Sequence[Any]
        Alternatives to score, each with a unique `name`.

    context : dict, optional
        Run level values passed to extractors which need them.

    zero_variance : str, default 'zeros'
        Policy for axes without variance, see `ScoreSet.from_alternatives`.

    tolerance : float, default 0.0
        Accepted deviation of the merge weight sums from 1.0.

    Returns
    -------

    Evaluation
        Final score set and the intermediate score set of each composite node.

    """
    levels = []
    score_set = _evaluate(
        node, alternatives, context, zero_variance, tolerance, levels
    )
    return Evaluation(score_set, levels)


def _evaluate(
    node: Node,
    alternatives: Sequence[Any],
    context: dict | None,
    zero_variance: str,
    tolerance: float,
    levels: list,
) -> ScoreSet:
    if isinstance(node, AxisNode):
        return ScoreSet.from_alternatives(
            node.axis,
            alternatives,
            node.goal,
            node.get_extractor(context),
            zero_variance=zero_variance,
        )

    children = [
        _evaluate(child, alternatives, context, zero_variance, tolerance, levels)
        for child in node.children
    ]
    score_set = merge(children, node.weights, tolerance=tolerance, label=node.label)
    levels.append((node.label, score_set))
    return score_set
