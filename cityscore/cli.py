#!python
"""CLI for cityscore.

The CLI only resolves parameters, all scoring logic lives in `ScoringPlan` so runs behave the same from the CLI or a notebook.
"""

import argparse
import json
import logging
import os

import yaml

from cityscore import __version__
from cityscore.constants.keys import ConfigKeys

logger = logging.getLogger()

EXIT_CODE_USER_ERROR = 1
EXIT_CODE_WRONG_CLI_PARAM = 126
EXIT_CODE_UNKNOWN_ERROR = 127

epilog = "Parameters passed via CLI will overwrite parameters from config file."

parser = argparse.ArgumentParser(
    description="Rank candidate cities with cityscore", epilog=epilog
)
parser.add_argument(
    "--version",
    "-v",
    action="store_true",
    help="Print version and exit",
)
parser.add_argument(
    "--input",
    "-i",
    type=str,
    help="Path to yaml file with the candidate cities and household figures.",
    nargs="?",
    default=None,
)
parser.add_argument(
    "--tree",
    "-t",
    type=str,
    help="Path to weight tree yaml file. Defaults to the bundled tree.",
    nargs="?",
    default=None,
)
parser.add_argument(
    "--output",
    "--output-directory",
    "-o",
    type=str,
    help="Directory to write log.txt to.",
    nargs="?",
    default=None,
)
parser.add_argument(
    "--config",
    "-c",
    type=str,
    help="Path to config yaml file which will be used to update the default config.",
    nargs="?",
    default=None,
)
parser.add_argument(
    "--config-dict",
    type=str,
    help="Python dictionary which will be used to update the default config. Keys and string values need to be surrounded by "
    'escaped double quotes, e.g. "{\\"key1\\": \\"value1\\"}".',
    nargs="?",
    default="{}",
)
parser.add_argument(
    "--all-levels",
    action="store_true",
    help="Report every composite level of the weight tree, not only the final ranking.",
)


def _recursive_update(full_dict: dict, update_dict: dict) -> None:
    """Recursively update `full_dict` in-place with `update_dict`."""
    for key, value in update_dict.items():
        if key in full_dict and isinstance(value, dict):
            _recursive_update(full_dict[key], value)
        else:
            full_dict[key] = value


def _get_config_from_args(
    args: argparse.Namespace,
) -> tuple[dict, str | None, str | None]:
    """Parse config file from `args.config` if given and update with optional JSON string `args.config_dict`."""

    config = {}
    if args.config is not None:
        with open(args.config) as f:
            config = yaml.safe_load(f) or {}

    if args.config_dict:
        try:
            _recursive_update(config, json.loads(args.config_dict))
        except Exception as e:
            print(f"Could not parse config update: {e}")

    return config, args.config, args.config_dict


def _get_from_args_or_config(
    args: argparse.Namespace, config: dict, *, args_key: str, config_key: str
) -> str | None:
    """Get a value from command line arguments (key: `args_key`) or config file (key: `config_key`), the former taking precedence."""
    value_from_args = args.__dict__.get(args_key)
    return value_from_args if value_from_args is not None else config.get(config_key)


def _get_cli_params_config(args: argparse.Namespace) -> dict:
    """Config-like dictionary of the parameters given directly on the command line."""
    return {
        **({ConfigKeys.INPUT_PATH: args.input} if args.input is not None else {}),
        **({ConfigKeys.TREE_PATH: args.tree} if args.tree is not None else {}),
        **(
            {ConfigKeys.GENERAL: {ConfigKeys.REPORT_ALL_LEVELS: True}}
            if args.all_levels
            else {}
        ),
    }


def run(*args, **kwargs):
    args, unknown = parser.parse_known_args()

    if unknown:
        print(f"Unknown arguments: {unknown}")
        parser.print_help()
        return EXIT_CODE_WRONG_CLI_PARAM

    if args.version:
        print(f"{__version__}")
        return

    # load modules only here to speed up -v and -h commands
    from cityscore.exceptions import CustomError
    from cityscore.scoring_plan import ScoringPlan

    user_config, config_file_path, extra_config_dict = _get_config_from_args(args)

    output_directory = _get_from_args_or_config(
        args, user_config, args_key="output", config_key=ConfigKeys.OUTPUT_DIRECTORY
    )

    try:
        plan = ScoringPlan(output_directory, user_config, _get_cli_params_config(args))

        if config_file_path:
            logger.info(f"User provided config file: {config_file_path}.")
        if extra_config_dict and extra_config_dict != "{}":
            logger.info(f"User provided config dict: {extra_config_dict}.")
        logger.info(f"cwd: {os.getcwd()}.")

        plan.run()

    except Exception as e:
        if isinstance(e, CustomError):
            exit_code = EXIT_CODE_USER_ERROR
        else:
            import traceback

            logger.info(traceback.format_exc())
            exit_code = EXIT_CODE_UNKNOWN_ERROR

        logger.error(e)
        return exit_code


if __name__ == "__main__":
    raise SystemExit(run())
