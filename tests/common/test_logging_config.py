"""
Tests for logging setup
"""

import logging
import sys

import pytest

from universal_relay.logging_config import LOG_FORMAT, setup_logging


@pytest.fixture
def root_logger():
    root = logging.getLogger()
    yield root
    root.handlers.clear()
    root.setLevel(logging.WARNING)
    logging.getLogger("web3").setLevel(logging.NOTSET)


def test_setup_logging_installs_single_stdout_handler(root_logger):
    setup_logging(logging.DEBUG)
    setup_logging(logging.DEBUG)

    assert root_logger.level == logging.DEBUG
    assert len(root_logger.handlers) == 1
    handler = root_logger.handlers[0]
    assert handler.stream is sys.stdout
    assert handler.formatter._fmt == LOG_FORMAT
    assert logging.getLogger("web3").level == logging.INFO


def test_setup_logging_accepts_level_names(root_logger):
    setup_logging("warning")
    assert root_logger.level == logging.WARNING
    assert logging.getLogger("web3").level == logging.WARNING


def test_setup_logging_rejects_unknown_level(root_logger):
    with pytest.raises(ValueError):
        setup_logging("chatty")
