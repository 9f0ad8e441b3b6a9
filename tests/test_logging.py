"""Tests for logging and the exception hierarchy."""

import logging

import pytest

import flockers
from flockers import Flock
from flockers.errors import ConfigurationError, DimensionError, FlockersError
from flockers.flock_logging import (
    create_module_logger,
    get_rootlogger,
    log_to_stderr,
)


def test_module_logger_name():
    """Test module loggers are children of the root logger."""
    logger = create_module_logger()
    assert logger.name == f"FLOCKERS.{__name__}"
    assert create_module_logger("abc").name == "FLOCKERS.abc"
    assert get_rootlogger().name == "FLOCKERS"


def test_flock_logs_population(caplog):
    """Test building a flock is logged at info level."""
    caplog.set_level(logging.INFO, logger="FLOCKERS")
    Flock(width=10, height=10, population_size=3, rng=0)
    assert "created flock of 3 boids" in caplog.text


def test_method_logger(caplog):
    """Test method calls are logged at debug level."""
    caplog.set_level(logging.DEBUG, logger="FLOCKERS")
    Flock(width=10, height=10, population_size=1, rng=0)
    assert "calling Flock.__init__" in caplog.text


def test_log_to_stderr(capsys):
    """Test attaching a stderr handler."""
    handler = log_to_stderr(logging.INFO, pass_up=False)
    try:
        create_module_logger("stderr_test").info("hello flock")
        assert "hello flock" in capsys.readouterr().err
    finally:
        root = get_rootlogger()
        root.removeHandler(handler)
        root.propagate = True
        root.setLevel(logging.NOTSET)


def test_errors_carry_version():
    """Test the error message carries the package version."""
    error = ConfigurationError("max_speed", "must be positive")
    assert isinstance(error, FlockersError)
    assert str(error).startswith(f"[Flockers {flockers.__version__}]")
    assert error.original_message == "Invalid configuration for 'max_speed': must be positive"

    generic = ConfigurationError("something is off")
    assert generic.param_name is None
    assert generic.original_message == "something is off"


def test_dimension_error():
    """Test DimensionError keeps the bad sizes."""
    with pytest.raises(DimensionError) as excinfo:
        Flock(width=-5, height=10)
    assert excinfo.value.width == -5
    assert excinfo.value.height == 10
