"""Extractors map an alternative to the raw value of one axis.

The scoring engine only needs a callable `alternative -> float`.
Weight trees reference extractors by name, the factories registered here turn such a reference into a callable.
"""

import inspect
import math
from collections.abc import Callable
from typing import Any

from cityscore.constants.keys import InputKeys, TreeKeys
from cityscore.exceptions import (
    MalformedTreeError,
    NonNumericValueError,
    UnknownExtractorError,
)

Extractor = Callable[[Any], float]

_REGISTRY: dict[str, Callable[..., Extractor]] = {}


def register_extractor(name: str):
    """Register an extractor factory under `name`.

    The factory is called with the `params` of the weight tree leaf.
    If it accepts a `context` argument, the run level context (e.g. household figures) is passed as well.
    """

    def decorator(factory: Callable[..., Extractor]) -> Callable[..., Extractor]:
        if name in _REGISTRY:
            raise ValueError(f"Extractor '{name}' is already registered")
        _REGISTRY[name] = factory
        return factory

    return decorator


def available_extractors() -> list[str]:
    return sorted(_REGISTRY)


def build_extractor(definition: str | dict, context: dict | None = None) -> Extractor:
    """Create an extractor from its weight tree definition.

    Parameters
    ----------

    definition : str | dict
        Either the name of a registered extractor without parameters or a dict with keys 'name' and optional 'params'.

    context : dict, optional
        Run level values passed to factories accepting a `context` argument.

    Returns
    -------

    Extractor
        Callable returning the raw value for an alternative.

    """
    if isinstance(definition, str):
        name, params = definition, {}
    elif isinstance(definition, dict) and TreeKeys.NAME in definition:
        name, params = definition[TreeKeys.NAME], definition.get(TreeKeys.PARAMS) or {}
    else:
        raise MalformedTreeError(f"Can not build extractor from '{definition}'")

    if name not in _REGISTRY:
        raise UnknownExtractorError(name, available_extractors())

    factory = _REGISTRY[name]
    if "context" in inspect.signature(factory).parameters:
        params = {**params, "context": context or {}}

    try:
        return factory(**params)
    except TypeError as e:
        raise MalformedTreeError(f"Invalid parameters for extractor '{name}': {e}") from e


class FieldExtractor:
    """Read a numeric attribute of an alternative by its dotted path, e.g. 'education.math'."""

    def __init__(self, path: str) -> None:
        self.path = path

    def __call__(self, alternative) -> float:
        value = alternative.get(self.path)
        if value is None:
            return math.nan
        try:
            return float(value)
        except (TypeError, ValueError) as e:
            raise NonNumericValueError(alternative.name, self.path, value) from e

    def __repr__(self) -> str:
        return f"FieldExtractor('{self.path}')"


@register_extractor("field")
def field(path: str) -> Extractor:
    return FieldExtractor(path)


@register_extractor("offset_rank")
def offset_rank(field: str, offset: float) -> Extractor:
    """Turn a rank (1 is best) into a bigger-is-better value, `offset - rank`."""
    value = FieldExtractor(field)
    return lambda alternative: offset - value(alternative)


@register_extractor("closeness")
def closeness(field: str, target: float) -> Extractor:
    """Closeness of a fraction to a target fraction, `1 - |target - value|`."""
    value = FieldExtractor(field)
    return lambda alternative: 1.0 - abs(target - value(alternative))


@register_extractor("deviation")
def deviation(fields: list[str], target: float) -> Extractor:
    """Absolute deviation of the sum of `fields` from `target`."""
    values = [FieldExtractor(f) for f in fields]
    return lambda alternative: abs(target - sum(v(alternative) for v in values))


@register_extractor("weighted_sum")
def weighted_sum(coefficients: dict[str, float]) -> Extractor:
    """Linear combination of several attributes."""
    terms = [(FieldExtractor(path), c) for path, c in coefficients.items()]
    return lambda alternative: sum(c * v(alternative) for v, c in terms)


def monthly_payment(principal: float, apr: float = 3.2, years: float = 30) -> float:
    """Monthly payment of a fully amortizing loan.

    Parameters
    ----------

    principal : float
        Loan amount.

    apr : float, default 3.2
        Annual interest rate in percent.

    years : float, default 30
        Duration of the loan, paid monthly.

    """
    n = math.ceil(years * 12)
    r = apr / 12 / 100
    if r == 0:
        return principal / n
    growth = math.pow(1 + r, n)
    return principal * (r * growth) / (growth - 1)


@register_extractor("annual_cost")
def annual_cost(context: dict, apr: float = 3.2, years: float = 30) -> Extractor:
    """Yearly cost of living in a city for the household described in `context`.

    Sum of mortgage payments on the market value minus home equity, income tax,
    expenses including sales tax and property tax on the assessed value.
    """
    try:
        income = float(context[InputKeys.ANNUAL_INCOME])
        expenses = float(context[InputKeys.ANNUAL_EXPENSES])
        equity = float(context[InputKeys.HOME_EQUITY])
    except KeyError as e:
        raise MalformedTreeError(
            f"Extractor 'annual_cost' requires {e} in the scoring input"
        ) from e

    market = FieldExtractor("real_estate.market")
    assessed = FieldExtractor("real_estate.assessed")
    income_tax = FieldExtractor("taxes.income")
    sales_tax = FieldExtractor("taxes.sales")
    property_tax = FieldExtractor("taxes.property")

    def extract(alternative) -> float:
        loan = market(alternative) - equity
        return (
            12.0 * monthly_payment(loan, apr=apr, years=years)
            + income * income_tax(alternative)
            + expenses * (1.0 + sales_tax(alternative))
            + assessed(alternative) * property_tax(alternative)
        )

    return extract
