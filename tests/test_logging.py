"""Tests for logging utilities."""

import logging
from io import StringIO

from gradfit.logging import (
    configure_logging,
    get_logger,
    set_log_level,
)


def test_get_logger_returns_logger():
    """Test that get_logger returns a namespaced logger instance."""
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "gradfit.test_module"


def test_get_logger_keeps_package_names():
    """Test that module names already under the package are not prefixed twice."""
    assert get_logger("gradfit.linear_model.fit").name == "gradfit.linear_model.fit"
    assert get_logger().name == "gradfit"


def test_get_logger_caching():
    """Test that get_logger caches loggers and never stacks handlers."""
    logger1 = get_logger("test_module")
    handlers = list(logger1.handlers)
    logger2 = get_logger("test_module")
    assert logger1 is logger2
    assert logger2.handlers == handlers
    # pytest may attach its own capture handlers, so count only ours
    own = [h for h in logger1.handlers if type(h) is logging.StreamHandler]
    assert len(own) == 1


def test_get_logger_different_modules():
    """Test that different modules get different loggers."""
    logger1 = get_logger("module1")
    logger2 = get_logger("module2")
    assert logger1 is not logger2
    assert logger1.name != logger2.name


def test_set_log_level_string():
    """Test that set_log_level accepts string levels."""
    logger = get_logger("test_module")
    try:
        set_log_level("DEBUG")
        assert logger.level == logging.DEBUG
        set_log_level("ERROR")
        assert logger.level == logging.ERROR
    finally:
        set_log_level(logging.WARNING)


def test_set_log_level_applies_to_new_loggers():
    """Test that loggers created after set_log_level inherit the level."""
    try:
        set_log_level(logging.INFO)
        assert get_logger("created_later").level == logging.INFO
    finally:
        set_log_level(logging.WARNING)


def test_configure_logging():
    """Test that configure_logging redirects output with the default format."""
    stream = StringIO()
    logger = get_logger("test_module")
    try:
        configure_logging(level=logging.DEBUG, stream=stream)
        logger.debug("Debug message")
        assert "[DEBUG] gradfit.test_module: Debug message" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING)


def test_configure_logging_custom_format():
    stream = StringIO()
    logger = get_logger("test_module")
    try:
        configure_logging(level=logging.INFO, format_string="%(levelname)s|%(message)s", stream=stream)
        logger.info("epoch 3")
        assert stream.getvalue().strip() == "INFO|epoch 3"
    finally:
        configure_logging(level=logging.WARNING)


def test_fit_logs_summary(linear_problem):
    """Test that a fit reports its outcome at INFO level."""
    from gradfit.linear_model import FitOptions, sgd_fit
    from gradfit.optimizers import create_adam

    stream = StringIO()
    X, Y, _ = linear_problem
    get_logger("gradfit.linear_model.fit")
    try:
        configure_logging(level=logging.INFO, stream=stream)
        sgd_fit(X, Y, FitOptions(solver=create_adam(), epochs=2, random_state=0))
    finally:
        configure_logging(level=logging.WARNING)
    output = stream.getvalue()
    assert "gradfit.linear_model.fit" in output
    assert "finished after 2 epochs" in output


def test_logger_does_not_propagate():
    """Test that loggers don't propagate to root logger."""
    logger = get_logger("test_module")
    assert logger.propagate is False
