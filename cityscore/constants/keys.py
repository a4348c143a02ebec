class ConstantsClass(type):
    """A metaclass for classes that should only contain string constants."""

    def __setattr__(self, name, value):
        raise TypeError("Constants class cannot be modified")

    def get_values(cls):
        """Get all user-defined string values of the class."""
        return [
            value
            for key, value in cls.__dict__.items()
            if not key.startswith("__") and isinstance(value, str)
        ]


class ConfigKeys(metaclass=ConstantsClass):
    """String constants for accessing the config."""

    INPUT_PATH = "input_path"
    TREE_PATH = "tree_path"
    OUTPUT_DIRECTORY = "output_directory"

    GENERAL = "general"
    LOG_LEVEL = "log_level"
    REPORT_ALL_LEVELS = "report_all_levels"

    SCORING = "scoring"
    ZERO_VARIANCE = "zero_variance"
    WEIGHT_TOLERANCE = "weight_tolerance"

    REPORT = "report"
    DECIMALS = "decimals"
    NAME_WIDTH = "name_width"


class InputKeys(metaclass=ConstantsClass):
    """String constants for reading the scoring input file."""

    ALTERNATIVES = "candidate_cities"
    NAME = "name"

    ANNUAL_EXPENSES = "annual_expenses"
    ANNUAL_INCOME = "annual_income"
    HOME_EQUITY = "home_equity"


class TreeKeys(metaclass=ConstantsClass):
    """String constants for reading and writing weight trees."""

    LABEL = "label"
    CHILDREN = "children"
    WEIGHTS = "weights"

    AXIS = "axis"
    GOAL = "goal"
    FIELD = "field"
    EXTRACTOR = "extractor"
    NAME = "name"
    PARAMS = "params"


class ZeroVariancePolicy(metaclass=ConstantsClass):
    """Allowed values for `scoring.zero_variance`."""

    ZEROS = "zeros"
    REJECT = "reject"
