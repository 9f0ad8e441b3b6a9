"""This provides logging functionality for Flockers.

It is built on the standard library logging module and adds a few helpers.
There is a single root logger named "FLOCKERS"; every module gets a child of it
through ``create_module_logger``. Nothing is emitted unless a handler is
attached, for example with ``log_to_stderr``.

Example::

    from flockers.flock_logging import log_to_stderr

    log_to_stderr(logging.DEBUG)

"""

import inspect
import logging
from functools import wraps
from logging import DEBUG, INFO

__all__ = [
    "DEBUG",
    "INFO",
    "create_module_logger",
    "get_rootlogger",
    "log_to_stderr",
    "method_logger",
]

LOGGER_NAME = "FLOCKERS"
DEFAULT_FORMAT = "[%(name)s %(levelname)s] %(message)s"
DEBUG_FORMAT = (
    "[%(name)s %(levelname)s %(filename)s:%(lineno)d %(funcName)s] %(message)s"
)

logging.getLogger(LOGGER_NAME).addHandler(logging.NullHandler())


def create_module_logger(name: str | None = None) -> logging.Logger:
    """Create a module logger below the Flockers root logger.

    Args:
        name: name of the logger, if None the name of the calling module is used

    """
    if name is None:
        frame = inspect.currentframe().f_back
        name = frame.f_globals.get("__name__", "__main__")

    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def get_rootlogger() -> logging.Logger:
    """Return the Flockers root logger."""
    return logging.getLogger(LOGGER_NAME)


def method_logger(name: str):
    """Decorator for adding logging to a method.

    Args:
        name: The name of the module the method is defined in

    """
    logger = create_module_logger(name)

    def real_decorator(meth):
        @wraps(meth)
        def wrapper(self, *args, **kwargs):
            if logger.isEnabledFor(DEBUG):
                logger.debug(
                    f"calling {type(self).__name__}.{meth.__name__} with {args} and {kwargs}"
                )
            return meth(self, *args, **kwargs)

        return wrapper

    return real_decorator


def log_to_stderr(level: int = INFO, pass_up: bool = True) -> logging.Handler:
    """Attach a stream handler writing to stderr to the Flockers root logger.

    Args:
        level: the logging level
        pass_up: whether records are also propagated to the python root logger

    Returns:
        the handler that was attached

    """
    logger = get_rootlogger()
    logger.setLevel(level)
    logger.propagate = pass_up

    handler = logging.StreamHandler()
    handler.setLevel(level)
    fmt = DEBUG_FORMAT if level <= DEBUG else DEFAULT_FORMAT
    handler.setFormatter(logging.Formatter(fmt))
    logger.addHandler(handler)
    return handler
