import logging
import os
import time
from datetime import timedelta

# Add a new logging level to the default logger, level 21 is just above INFO (20)
# This has to happen at load time to make the .progress() method available even if no logger is instantiated
PROGRESS_LEVELV_NUM = 21
logging.PROGRESS = PROGRESS_LEVELV_NUM
logging.addLevelName(PROGRESS_LEVELV_NUM, "PROGRESS")

LOG_FILE_NAME = "log.txt"


def progress(self, message, *args, **kws):
    if self.isEnabledFor(PROGRESS_LEVELV_NUM):
        # Yes, logger takes its '*args' as 'args'.
        self._log(PROGRESS_LEVELV_NUM, message, args, **kws)


logging.Logger.progress = progress


class DefaultFormatter(logging.Formatter):
    template = "%(levelname)s: %(message)s"

    colors = {
        logging.PROGRESS: "\x1b[32;20m",
        logging.WARNING: "\x1b[33;20m",
        logging.ERROR: "\x1b[31;20m",
        logging.CRITICAL: "\x1b[31;1m",
    }
    reset = "\x1b[0m"

    def __init__(self, use_ansi: bool = True):
        """Formatter prefixing the elapsed time and optionally coloring by level.

        Parameters
        ----------

        use_ansi : bool, default True
            Whether to use ANSI escape codes to color the output.

        """
        super().__init__(self.template)
        self.start_time = time.time()
        self.use_ansi = use_ansi

    def format(self, record: logging.LogRecord) -> str:
        elapsed = timedelta(seconds=record.created - self.start_time)
        message = super().format(record)

        if self.use_ansi and (color := self.colors.get(record.levelno)):
            message = f"{color}{message}{self.reset}"

        return f"{elapsed} {message}"


def init_logging(
    log_folder: str | None = None,
    log_level: int | str = logging.INFO,
    overwrite: bool = True,
) -> None:
    """Initialize the default logger with a console and an optional file handler.

    Parameters
    ----------

    log_folder : str, default None
        Folder to write `log.txt` to. If None, only the console is used.

    log_level : int | str, default logging.INFO
        Log level, e.g. logging.DEBUG or 'DEBUG'.

    overwrite : bool, default True
        Whether to overwrite the log file if it already exists.
    """
    if isinstance(log_level, str):
        log_level = logging.getLevelName(log_level.upper())

    logger = logging.getLogger()
    logger.handlers = []
    logger.setLevel(log_level)

    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(DefaultFormatter(use_ansi=True))
    logger.addHandler(ch)

    if log_folder is not None:
        os.makedirs(log_folder, exist_ok=True)
        log_name = os.path.join(log_folder, LOG_FILE_NAME)
        if os.path.exists(log_name) and overwrite:
            os.remove(log_name)
        fh = logging.FileHandler(log_name, encoding="utf-8")
        fh.setLevel(log_level)
        fh.setFormatter(DefaultFormatter(use_ansi=False))
        logger.addHandler(fh)
