"""Layered configuration of a scoring run.

The bundled default config is updated with one or more other configs (config file, `--config-dict`, CLI parameters).
Later configs take precedence, lists are always overwritten completely and new keys are rejected.
Every change to the default is tracked so the effective config can be logged as a tree.
"""

import json
import logging
from collections import UserDict, defaultdict
from copy import deepcopy
from pathlib import Path

import yaml

from cityscore.exceptions import KeyAddedConfigError, TypeMismatchConfigError

logger = logging.getLogger()

CONSTANTS_FOLDER_PATH = Path(__file__).parent / "constants"

DEFAULT = "default"
USER_DEFINED = "user defined"
USER_DEFINED_CLI_PARAM = "user defined (cli)"


class Config(UserDict):
    """Dict-like config which reads from and writes to yaml and json files."""

    def __init__(self, data: dict = None, name: str = DEFAULT) -> None:
        # UserDict.__init__ would call our update()
        self.data = {**data} if data is not None else {}
        self.name = name

    @classmethod
    def default(cls) -> "Config":
        config = cls()
        config.from_yaml(CONSTANTS_FOLDER_PATH / "default.yaml")
        return config

    def from_yaml(self, path: str | Path) -> None:
        with open(path) as f:
            self.data = yaml.safe_load(f) or {}

    def from_json(self, path: str | Path) -> None:
        with open(path) as f:
            self.data = json.load(f)

    def from_dict(self, data: dict) -> None:
        self.data = deepcopy(data)

    def to_yaml(self, path: str | Path) -> None:
        with open(path, "w") as f:
            yaml.dump(self.data, f, sort_keys=False)

    def to_json(self, path: str | Path) -> None:
        with open(path, "w") as f:
            json.dump(self.data, f)

    def to_dict(self) -> dict:
        return deepcopy(self.data)

    def __setitem__(self, key, item):
        raise NotImplementedError("Use update() to update the config.")

    def __delitem__(self, key):
        raise NotImplementedError("Use update() to update the config.")

    def copy(self):
        raise NotImplementedError("Use deepcopy() to copy the config.")

    def update(self, configs: list["Config"], do_print: bool = False) -> None:
        """Update the config with other config objects, the last one wins.

        Parameters
        ----------
        configs : list of configs
            Configs to apply in order.

        do_print : bool, optional
            Whether to log the resulting config as tree. Default is False.
        """
        default_config = deepcopy(self.data)

        def _recursive_defaultdict():
            return defaultdict(_recursive_defaultdict)

        tracking_dict = defaultdict(_recursive_defaultdict)

        current_config = deepcopy(self.data)
        for config in configs:
            logger.info(f"Updating config with '{config.name}'")
            _update(current_config, config.data, tracking_dict, config.name)

        self.data = current_config

        if do_print:
            _pretty_print(
                current_config,
                default_config=default_config,
                tracking_dict=tracking_dict,
            )


def _update(
    target_config: dict,
    update_config: dict,
    tracking_dict: dict,
    config_name: str,
    parent_keys: str = "",
) -> None:
    """Recursively update `target_config` in-place with the values of `update_config`.

    Raises
    ------
    - KeyAddedConfigError: a key is not found in the target_config
    - TypeMismatchConfigError: the type of the update value does not match the type of the target value
    """
    for key, update_value in update_config.items():
        full_key = f"{parent_keys}.{key}" if parent_keys else key

        if key not in target_config:
            raise KeyAddedConfigError(full_key, update_value, config_name)

        target_value = target_config[key]

        # --config-dict passes booleans as strings
        if isinstance(update_value, str) and update_value.lower() in ("true", "false"):
            update_value = update_value.lower() == "true"

        if (
            target_value is not None
            and type(target_value) != type(update_value)
            and not (
                isinstance(target_value, int | float)
                and isinstance(update_value, int | float)
                and not isinstance(update_value, bool)
            )
        ):
            raise TypeMismatchConfigError(
                full_key,
                update_value,
                config_name,
                f"{type(update_value)} != {type(target_value)}",
            )

        if isinstance(target_value, dict):
            _update(
                target_value,
                update_value,
                tracking_dict[key],
                config_name,
                parent_keys=full_key,
            )
        else:
            target_config[key] = update_value
            tracking_dict[key] = config_name


def _pretty_print(
    config: dict,
    *,
    default_config: dict | None,
    tracking_dict: dict | str,
    prefix: str = "",
) -> None:
    """Log a configuration dictionary as tree, changed values show their origin and default."""
    items = list(config.items())
    for i, (key, value) in enumerate(items):
        is_last_item = i == len(items) - 1
        current_prefix = "└──" if is_last_item else "├──"
        next_prefix = prefix + ("    " if is_last_item else "│   ")

        default_value = (
            default_config.get(key) if isinstance(default_config, dict) else None
        )
        tracking_value = (
            tracking_dict if isinstance(tracking_dict, str) else tracking_dict[key]
        )

        if isinstance(value, dict):
            logger.info(f"{prefix}{current_prefix}{key}")
            _pretty_print(
                value,
                default_config=default_value,
                tracking_dict=tracking_value,
                prefix=next_prefix,
            )
        else:
            logger.info(
                f"{prefix}{current_prefix}{key}: {_expand(value, default_value, tracking_value)}"
            )


def _expand(actual_value, default_value, tracking_value) -> str:
    """String representation of a value, with origin and default if it was changed."""
    if default_value != actual_value:
        return f"{actual_value} [{tracking_value}, default: {default_value}]"
    return str(actual_value)
