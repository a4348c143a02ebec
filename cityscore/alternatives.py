"""Alternatives to rank and loading of the scoring input."""

import logging
import typing
from collections import Counter

import yaml

from cityscore.constants.keys import InputKeys
from cityscore.exceptions import MissingAttributeError, NoAlternativesError

logger = logging.getLogger()


class Alternative:
    """A named record with arbitrary, possibly nested, attributes."""

    def __init__(self, name: str, attributes: dict | None = None) -> None:
        self.name = name
        self.attributes = attributes if attributes is not None else {}

    def get(self, path: str):
        """Look up an attribute by its dotted path, e.g. 'climate.sunny_days'."""
        value = self.attributes
        for key in path.split("."):
            if not isinstance(value, dict) or key not in value:
                raise MissingAttributeError(self.name, path)
            value = value[key]
        return value

    def __repr__(self) -> str:
        return f"Alternative('{self.name}')"


class ScoringInput(typing.NamedTuple):
    alternatives: list[Alternative]
    # everything except the alternatives, e.g. household figures
    context: dict


def parse_alternatives(data: dict) -> ScoringInput:
    """Split a scoring input dictionary into alternatives and context."""
    records = data.get(InputKeys.ALTERNATIVES) or []
    if not records:
        raise NoAlternativesError(f"key '{InputKeys.ALTERNATIVES}' is missing or empty")

    alternatives = []
    for i, record in enumerate(records):
        if not isinstance(record, dict) or InputKeys.NAME not in record:
            raise MissingAttributeError(f"#{i}", InputKeys.NAME)
        attributes = {k: v for k, v in record.items() if k != InputKeys.NAME}
        alternatives.append(Alternative(str(record[InputKeys.NAME]), attributes))

    duplicates = [
        name for name, n in Counter(a.name for a in alternatives).items() if n > 1
    ]
    if duplicates:
        logger.warning(
            f"Alternative names are not unique: {duplicates}. Rankings will be ambiguous."
        )

    context = {k: v for k, v in data.items() if k != InputKeys.ALTERNATIVES}
    return ScoringInput(alternatives, context)


def load_alternatives(path: str) -> ScoringInput:
    """Read alternatives and context from a yaml (or json) file."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    scoring_input = parse_alternatives(data)
    logger.info(f"Loaded {len(scoring_input.alternatives)} alternatives from {path}")
    return scoring_input
