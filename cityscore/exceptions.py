"""Module containing custom exceptions."""


class CustomError(Exception):
    """Custom cityscore error class."""

    _error_code = ""
    _msg = ""
    _detail_msg = ""
    _user_msg = ""

    @property
    def error_code(self):
        return self._error_code

    @property
    def msg(self):
        return self._msg

    @property
    def detail_msg(self):
        return self._detail_msg

    def __init__(self, msg: str = ""):
        self._user_msg = msg

        super().__init__(self._msg)

    def __str__(self):
        return (
            f"{self._error_code}: {self._msg}\n'{self._user_msg}'\n{self._detail_msg}"
        )


class BusinessError(CustomError):
    """Custom error class for 'business' errors.

    A 'business' error is an error that is caused during processing the input (data, configuration, ...) and not by a
    malfunction in cityscore.
    """


class UserError(CustomError):
    """Custom error class for 'user' errors.

    A 'user' error is an error that is caused by the incompatible user input (data, configuration, ...) and not by a
    malfunction in cityscore.
    """


class NoInputError(UserError):
    """Raise when no scoring input file is given."""

    _error_code = "NO_INPUT"

    _msg = "No scoring input available."

    _detail_msg = """Provide the alternatives to rank either via the '--input' command line parameter
    or via the 'input_path' key in the config."""


class NoAlternativesError(UserError):
    """Raise when the scoring input does not contain any alternatives."""

    _error_code = "NO_ALTERNATIVES"

    _msg = "No alternatives found in the scoring input, can't continue."


class MissingAttributeError(UserError):
    """Raise when an alternative does not have the attribute requested by an extractor."""

    _error_code = "MISSING_ATTRIBUTE"

    _msg = "Alternative is missing a required attribute."

    def __init__(self, name: str, path: str):
        self._user_msg = f"alternative='{name}', attribute='{path}'"
        self._detail_msg = f"Check the spelling of '{path}' in the weight tree and the input file."


class NonNumericValueError(UserError):
    """Raise when an attribute of an alternative can not be read as a number."""

    _error_code = "NON_NUMERIC_VALUE"

    _msg = "Attribute of an alternative is not a number."

    def __init__(self, name: str, path: str, value):
        self._user_msg = f"alternative='{name}', attribute='{path}', value={value!r}"
        self._detail_msg = "Use plain numbers in the input file, e.g. 0.12 instead of '12%'."


class ShapeMismatchError(BusinessError):
    """Raise when the labels and weights of a score set do not match its matrix."""

    _error_code = "SHAPE_MISMATCH"

    _msg = "Score set labels, weights and matrix have inconsistent dimensions."

    def __init__(self, detail_msg: str = ""):
        self._detail_msg = detail_msg


class NonFiniteValueError(BusinessError):
    """Raise when an extractor returns NaN or infinite values."""

    _error_code = "NON_FINITE_VALUE"

    _msg = "Extractor returned a non-finite value, missing data can not be scored."

    def __init__(self, axis: str, names: list[str]):
        self._user_msg = f"axis='{axis}'"
        self._detail_msg = f"Affected alternatives: {', '.join(names)}"


class ZeroVarianceError(BusinessError):
    """Raise when all alternatives have the same raw value and the axis is configured to be rejected."""

    _error_code = "ZERO_VARIANCE"

    _msg = "All alternatives have identical values, the axis does not discriminate."

    def __init__(self, axis: str):
        self._user_msg = f"axis='{axis}'"
        self._detail_msg = """Remove the axis from the weight tree or set 'scoring.zero_variance' to 'zeros'
    to score every alternative with z=0 on this axis."""


class ZeroWeightError(BusinessError):
    """Raise when a composite score is requested for a score set without any weight."""

    _error_code = "ZERO_WEIGHT"

    _msg = "Row weights sum to zero, no weighted composite can be computed."


class ConfigError(BusinessError):
    """Raise when something is wrong with the provided configuration."""

    _error_code = "CONFIG_ERROR"

    _msg = "Malformed or invalid configuration."
    _key = ""
    _config_name = ""
    _detail_msg = ""

    def __init__(
        self,
        key: str = "",
        value: str = "",
        config_name: str = "",
        detail_msg: str = "",
    ):
        self._key = key
        self._value = value
        self._config_name = config_name
        self._detail_msg = detail_msg


class KeyAddedConfigError(ConfigError):
    """Raise when a key should be added to a config."""

    def __init__(self, key: str, value: str, config_name: str):
        super().__init__(key, value, config_name)
        self._detail_msg = (
            f"Defining new keys is not allowed when updating a config: "
            f"key='{self._key}', value='{self._value}', config_name='{self._config_name}'"
        )


class TypeMismatchConfigError(ConfigError):
    """Raise when the type of a value does not match the default type."""

    def __init__(self, key: str, value: str, config_name: str, extra_msg: str):
        super().__init__(key, value, config_name)
        self._detail_msg = (
            f"Types of values must match default config: "
            f"key='{self._key}', value='{self._value}', config_name='{self._config_name}', types='{extra_msg}'"
        )


class TooFewScoreSetsError(ConfigError):
    """Raise when less than two score sets are passed to a merge."""

    _error_code = "TOO_FEW_SCORE_SETS"

    _msg = "Merge must have 2 or more score sets."

    def __init__(self, n_sets: int, label: str = ""):
        super().__init__(label, str(n_sets))
        self._detail_msg = f"Got {n_sets} score set(s) for '{label or 'merge'}'."


class WeightCountError(ConfigError):
    """Raise when the number of merge weights does not match the number of score sets."""

    _error_code = "WEIGHT_COUNT"

    _msg = "Merge sets/weights length must match."

    def __init__(self, n_weights: int, n_sets: int, label: str = ""):
        super().__init__(label, str(n_weights))
        self._detail_msg = f"Got {n_weights} weight(s) for {n_sets} score set(s) in '{label or 'merge'}'."


class WeightSumError(ConfigError):
    """Raise when merge weights do not sum to 1.0."""

    _error_code = "WEIGHT_SUM"

    _msg = "Merge weights must sum to 1.0."

    def __init__(self, weights: list[float], total: float, label: str = ""):
        super().__init__(label, str(weights))
        self._detail_msg = f"Weights {weights} in '{label or 'merge'}' sum to {total!r}."


class ColumnMismatchError(ConfigError):
    """Raise when score sets with different alternatives (or a different order) are merged."""

    _error_code = "COLUMN_MISMATCH"

    _msg = "Merged score sets must have identical alternatives in identical order."

    def __init__(self, expected: tuple[str, ...], actual: tuple[str, ...]):
        super().__init__()
        self._detail_msg = f"expected={list(expected)}, got={list(actual)}"


class DuplicateAxisError(ConfigError):
    """Raise when the same axis label is used twice in one weight tree."""

    _error_code = "DUPLICATE_AXIS"

    _msg = "Axis labels must be unique within a weight tree."

    def __init__(self, axis: str):
        super().__init__(axis)
        self._detail_msg = f"axis='{axis}'"


class UnknownGoalError(ConfigError):
    """Raise when an axis goal is neither 'bigger' nor 'smaller'."""

    _error_code = "UNKNOWN_GOAL"

    _msg = "Unknown scoring goal, use 'bigger' or 'smaller'."

    def __init__(self, value: str):
        super().__init__("goal", value)
        self._detail_msg = f"goal='{value}'"


class UnknownExtractorError(ConfigError):
    """Raise when a weight tree references an extractor that is not registered."""

    _error_code = "UNKNOWN_EXTRACTOR"

    _msg = "Unknown extractor."

    def __init__(self, name: str, available: list[str]):
        super().__init__("extractor", name)
        self._detail_msg = f"extractor='{name}', available: {', '.join(available)}"


class MalformedTreeError(ConfigError):
    """Raise when a weight tree node can not be parsed."""

    _error_code = "MALFORMED_TREE"

    _msg = "Malformed weight tree."

    def __init__(self, detail_msg: str):
        super().__init__(detail_msg=detail_msg)
