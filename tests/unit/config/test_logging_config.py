import logging

import pytest

from fileshare.config.logging_config import LOG_FORMAT, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize(
    "name,level",
    [
        ("debug", logging.DEBUG),
        ("info", logging.INFO),
        ("WARNING", logging.WARNING),
        ("verbose", logging.INFO),
    ],
)
def test_levels(name, level):
    setup_logging(name)

    root = logging.getLogger()
    assert root.level == level
    assert len(root.handlers) == 1
    assert root.handlers[0].formatter._fmt == LOG_FORMAT


def test_none_silences_output():
    setup_logging("none")

    root = logging.getLogger()
    assert root.level > logging.CRITICAL
    assert isinstance(root.handlers[0], logging.NullHandler)
