import logging

import pytest

from tiercache.infrastructure.monitoring.logger_setup import (
    BRIEF_FORMAT,
    VERBOSE_FORMAT,
    resolve_level,
    setup_logging,
)


@pytest.mark.parametrize("name, verbose, expected", [
    ("INFO", False, logging.INFO),
    (" debug ", False, logging.DEBUG),
    ("ERROR", True, logging.DEBUG),
    (None, False, logging.WARNING),
    ("", False, logging.WARNING),
    ("LOUD", False, logging.WARNING),
])
def test_resolve_level(name, verbose, expected):
    assert resolve_level(name, verbose) == expected


def test_setup_leaves_root_logger_alone():
    root_logger = logging.getLogger()
    handlers_before = root_logger.handlers[:]

    package_logger = setup_logging("INFO")

    assert root_logger.handlers == handlers_before
    assert package_logger.name == "tiercache"
    assert package_logger.level == logging.INFO
    assert package_logger.propagate is False


def test_setup_replaces_previous_handlers():
    setup_logging("INFO")
    package_logger = setup_logging("INFO", verbose=True)

    assert len(package_logger.handlers) == 1
    assert package_logger.handlers[0].formatter._fmt == VERBOSE_FORMAT


def test_brief_format_without_verbose():
    package_logger = setup_logging("WARNING")
    assert package_logger.handlers[0].formatter._fmt == BRIEF_FORMAT


def test_log_file_receives_package_records(tmp_path):
    log_file = tmp_path / "tiercache.log"
    setup_logging("INFO", log_file=str(log_file))

    logging.getLogger("tiercache.core.command_handler").info("stored a value")
    for handler in logging.getLogger("tiercache").handlers:
        handler.flush()

    assert "stored a value" in log_file.read_text(encoding="utf-8")


def test_unwritable_log_file_keeps_stderr_handler(tmp_path):
    package_logger = setup_logging("INFO", log_file=str(tmp_path / "missing" / "tiercache.log"))

    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0], logging.StreamHandler)
