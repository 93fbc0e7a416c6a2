"""
Tests for the package logger: nothing is configured on import, the entry
points attach a single handler.
"""
import logging
import subprocess
import sys

import pytest

from recordhttp.utils.logging import ROOT_LOGGER, get_logger, setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger(ROOT_LOGGER)
    handlers, level = list(logger.handlers), logger.level
    logger.handlers = []
    try:
        yield logger
    finally:
        logger.handlers = handlers
        logger.setLevel(level)


def test_import_configures_nothing():
    code = (
        "import logging, recordhttp, recordhttp.celery_worker\n"
        "assert logging.getLogger().handlers == [], logging.getLogger().handlers\n"
        "assert logging.getLogger('recordhttp').handlers == []\n"
    )
    result = subprocess.run([sys.executable, "-c", code], capture_output=True, text=True)
    assert result.returncode == 0, result.stderr


def test_setup_logging_attaches_one_handler(package_logger):
    root_handlers = list(logging.getLogger().handlers)
    setup_logging("debug")
    setup_logging("WARNING")
    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.WARNING
    assert logging.getLogger().handlers == root_handlers


def test_get_logger_names():
    assert get_logger().name == "recordhttp"
    assert get_logger("invoker").name == "recordhttp.invoker"
