"""
Logging configuration for Universal Relay
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(levelname)-8s %(name)s %(filename)s:%(lineno)d %(message)s"


def setup_logging(level: int | str = logging.INFO) -> None:
    """
    Route log records to stdout with timestamp, file and line number

    Args:
        level: Logging level, as a number or a name such as "DEBUG"
    """
    if isinstance(level, str):
        name = level.upper()
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"Unknown log level: {name}")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(console_handler)

    # web3 request tracing stays off below INFO
    logging.getLogger("web3").setLevel(max(level, logging.INFO))
