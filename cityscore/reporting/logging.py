import logging
import platform
import socket
from datetime import datetime
from typing import TYPE_CHECKING, Any

import numpy
import pandas
import scipy
import yaml

import cityscore

# The progress method is added in reporting.py at module load time
if TYPE_CHECKING:

    class _ExtendedLogger(logging.Logger):
        def progress(self, message: str, *args: Any, **kws: Any) -> None: ...

    logger: _ExtendedLogger = logging.getLogger()  # type: ignore[assignment]
else:
    logger = logging.getLogger()


def print_logo() -> None:
    """Print the cityscore logo and version."""
    logger.progress("       _ _                               ")
    logger.progress("   ___(_) |_ _   _ ___  ___ ___  _ __ ___ ")
    logger.progress(r"  / __| | __| | | / __|/ __/ _ \| '__/ _ \ ")
    logger.progress(r" | (__| | |_| |_| \__ \ (_| (_) | | |  __/")
    logger.progress(r"  \___|_|\__|\__, |___/\___\___/|_|  \___|")
    logger.progress("             |___/                        ")
    logger.progress("")
    logger.progress(f"version: {cityscore.__version__}")


def print_environment() -> None:
    """Log information about the python environment."""

    logger.info(f"hostname: {socket.gethostname()}")
    logger.info(
        f"python: {platform.python_version()} ({platform.python_implementation()})"
    )

    now = datetime.today().strftime("%Y-%m-%d %H:%M:%S")
    logger.info(f"date: {now}")

    logger.info("================== Environment ====================")
    logger.info(f"{'numpy':<15} : {numpy.__version__}")
    logger.info(f"{'scipy':<15} : {scipy.__version__}")
    logger.info(f"{'pandas':<15} : {pandas.__version__}")
    logger.info(f"{'pyyaml':<15} : {yaml.__version__}")
    logger.info("===================================================")
