"""Scoring plan: one complete scoring run from input file to ranked report."""

import logging

from cityscore.alternatives import ScoringInput, load_alternatives
from cityscore.config import (
    CONSTANTS_FOLDER_PATH,
    USER_DEFINED,
    USER_DEFINED_CLI_PARAM,
    Config,
)
from cityscore.constants.keys import ConfigKeys
from cityscore.exceptions import NoInputError
from cityscore.ranking import FINAL_LABEL, RankedAlternative, ScoreReport
from cityscore.reporting import reporting
from cityscore.reporting.logging import logger, print_environment, print_logo
from cityscore.tree import Evaluation, Node, evaluate, load_tree

DEFAULT_TREE_PATH = CONSTANTS_FOLDER_PATH / "tree.yaml"


class ScoringPlan:
    """Ranks the alternatives of one input file according to a weight tree."""

    def __init__(
        self,
        output_directory: str | None = None,
        config: dict | None = None,
        cli_params_config: dict | None = None,
    ) -> None:
        """Initialize the scoring plan.

        Parameters
        ----------
        output_directory:
            Folder for the log file, None logs to the console only.
        config:
            Configuration provided by user (loaded from file and/or dictionary)
        cli_params_config:
            config-like dictionary of parameters directly provided by CLI
        """
        reporting.init_logging(output_directory)
        print_logo()
        print_environment()

        self._config = self._init_config(config, cli_params_config)

        log_level = self._config[ConfigKeys.GENERAL][ConfigKeys.LOG_LEVEL]
        if logging.getLevelName(log_level.upper()) != logging.INFO:
            reporting.init_logging(output_directory, log_level, overwrite=False)

        self._reports: list[ScoreReport] = []

    @staticmethod
    def _init_config(
        user_config: dict | None, cli_params_config: dict | None
    ) -> Config:
        """Initialize the config with default values and update with user defined values."""
        config = Config.default()

        config_updates = []
        if user_config:
            logger.info("loading additional config provided via CLI")
            config_updates.append(Config(user_config, name=USER_DEFINED))
        if cli_params_config:
            logger.info("loading additional config provided via CLI parameters")
            config_updates.append(
                Config(cli_params_config, name=USER_DEFINED_CLI_PARAM)
            )

        config.update(config_updates, do_print=True)
        return config

    @property
    def config(self) -> Config:
        return self._config

    @property
    def reports(self) -> list[ScoreReport]:
        """Reports of the last run, the final report is the last element."""
        return self._reports

    def _load_input(self) -> ScoringInput:
        if (input_path := self._config[ConfigKeys.INPUT_PATH]) is None:
            raise NoInputError()
        return load_alternatives(input_path)

    def _load_tree(self) -> Node:
        tree_path = self._config[ConfigKeys.TREE_PATH] or DEFAULT_TREE_PATH
        return load_tree(
            tree_path,
            tolerance=self._config[ConfigKeys.SCORING][ConfigKeys.WEIGHT_TOLERANCE],
        )

    def run(self) -> list[RankedAlternative]:
        """Score all alternatives and log the reports.

        The weight tree is read and validated before the input, so configuration errors surface first.

        Returns
        -------
        list[RankedAlternative]
            Final composite ranking, best alternative first.
        """
        tree = self._load_tree()
        scoring_input = self._load_input()

        scoring_config = self._config[ConfigKeys.SCORING]
        logger.progress(
            f"Scoring {len(scoring_input.alternatives)} alternatives on {len(tree.leaves())} axes"
        )
        evaluation = evaluate(
            tree,
            scoring_input.alternatives,
            context=scoring_input.context,
            zero_variance=scoring_config[ConfigKeys.ZERO_VARIANCE],
            tolerance=scoring_config[ConfigKeys.WEIGHT_TOLERANCE],
        )

        self._reports = self._build_reports(evaluation)
        self._log_reports()

        return self._reports[-1].composite

    def _build_reports(self, evaluation: Evaluation) -> list[ScoreReport]:
        reports = []
        if self._config[ConfigKeys.GENERAL][ConfigKeys.REPORT_ALL_LEVELS]:
            # the root is the last level and reported as final below
            reports += [
                ScoreReport.from_score_set(score_set, label=label)
                for label, score_set in evaluation.levels[:-1]
            ]
        reports.append(ScoreReport.from_score_set(evaluation.score_set, FINAL_LABEL))
        return reports

    def _log_reports(self) -> None:
        report_config = self._config[ConfigKeys.REPORT]
        for report in self._reports:
            logger.progress(f"Report '{report.label}'")
            report.log(
                decimals=report_config[ConfigKeys.DECIMALS],
                name_width=report_config[ConfigKeys.NAME_WIDTH],
            )

        winner = self._reports[-1].composite[0]
        logger.progress(f"Best alternative: {winner.name} ({winner.score:.1f}%)")
