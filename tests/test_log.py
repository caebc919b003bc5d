import io
import logging

import pytest

from rivulet.core.log import configure_logging, get_logger, temp_level


def test_package_logger_has_null_handler() -> None:
    logger = get_logger()

    assert logger.name == "rivulet"
    assert any(isinstance(h, logging.NullHandler) for h in logger.handlers)


def test_configure_logging_sets_level_and_writes_to_stream() -> None:
    stream = io.StringIO()
    logger = configure_logging(level="DEBUG", stream=stream, logger_name="rivulet.test.stream")

    logger.debug("hello %s", "stream")

    assert logger.level == logging.DEBUG
    assert "hello stream" in stream.getvalue()


def test_configure_logging_does_not_stack_handlers() -> None:
    name = "rivulet.test.handlers"
    configure_logging(level="INFO", stream=io.StringIO(), logger_name=name)
    configure_logging(level="INFO", stream=io.StringIO(), logger_name=name)

    handlers = [h for h in get_logger(name).handlers if isinstance(h, logging.StreamHandler)]
    assert len(handlers) == 1


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ValueError):
        configure_logging(level="LOUD", logger_name="rivulet.test.bad")


def test_temp_level_changes_and_restores() -> None:
    logger = logging.getLogger("rivulet.test.temp")
    logger.setLevel(logging.WARNING)

    with temp_level(logging.DEBUG, name=logger.name):
        assert logger.level == logging.DEBUG

    assert logger.level == logging.WARNING


def test_configure_logging_again_updates_format_and_stream() -> None:
    name = "rivulet.test.reformat"
    first = io.StringIO()
    second = io.StringIO()
    configure_logging(level="INFO", stream=first, fmt="one %(message)s", logger_name=name)
    logger = configure_logging(level="INFO", stream=second, fmt="two %(message)s", logger_name=name)

    logger.info("hello")

    assert first.getvalue() == ""
    assert second.getvalue().strip() == "two hello"
