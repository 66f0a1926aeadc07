import logging

import physquant.logger as logmod
from physquant.logger import disable_file_logging, enable_file_logging, logger


def test_library_logger_defaults():
    assert logger.name == "physquant"
    assert logger.level == logging.WARNING
    assert logmod.console_handler in logger.handlers


def test_file_logger(tmp_path):
    logfile = tmp_path / "physquant_debug.log"
    enable_file_logging(str(logfile))
    try:
        assert logmod.file_handler in logger.handlers
        logger.warning("hello file")
    finally:
        disable_file_logging()
    assert logmod.file_handler is None
    assert "hello file" in logfile.read_text()


def test_enable_twice_replaces_handler(tmp_path):
    enable_file_logging(str(tmp_path / "first.log"))
    first = logmod.file_handler
    enable_file_logging(str(tmp_path / "second.log"))
    try:
        assert first not in logger.handlers
        assert logmod.file_handler is not first
    finally:
        disable_file_logging()


def test_disable_without_handler_is_noop():
    disable_file_logging()
    disable_file_logging()
    assert logmod.file_handler is None
