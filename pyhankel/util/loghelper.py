r"""
Logging helper utilities
========================

Logging helpers shared by the :mod:`pyhankel` transforms.

Loggers are named hierarchically under the package (``pyhankel.QDSHT``,
``pyhankel.QDHT``) and write timestamped, human-readable records so that
construction of large transform matrices can be followed from a console.

Overview
--------

- :func:`_parse_loglevel` — Convert user-specified log level to a numeric constant.
- :func:`get_level_name` — Return string name for a numeric logging level.
- :func:`setup_logger` — Configure and return a new logger.
- :func:`set_log_level` — Adjust the level of an existing logger.
- :func:`get_transform_logger` — Create a standardized logger for transform classes.

Example
-------

.. code-block:: python

    from pyhankel.util.loghelper import get_transform_logger

    class QDSHT:
        def __init__(self):
            self.logger = get_transform_logger(self.__class__, "INFO")
            self.logger.info("Built transform matrix")

    # Output:
    # 2025-11-02 10:30:45 - pyhankel.QDSHT - INFO - Built transform matrix
"""

import logging
from typing import Union


def _parse_loglevel(loglevel: Union[str, int]) -> int:
    """Map a level name (case-insensitive) or number to the numeric ``logging`` level."""
    if isinstance(loglevel, str):
        numeric_level = getattr(logging, loglevel.upper(), None)
        if not isinstance(numeric_level, int):
            raise ValueError(f"Invalid log level: {loglevel}")
        return numeric_level
    return loglevel


def get_level_name(level: int) -> str:
    """Return the canonical name of a numeric logging level (``'Level 15'`` if unnamed)."""
    level_names = {
        logging.DEBUG: "DEBUG",
        logging.INFO: "INFO",
        logging.WARNING: "WARNING",
        logging.ERROR: "ERROR",
        logging.CRITICAL: "CRITICAL",
    }
    return level_names.get(level, f"Level {level}")


def setup_logger(name: str, loglevel: Union[str, int] = "WARNING") -> logging.Logger:
    r"""
    Create and configure a logger with standardized formatting.

    The logger uses timestamped output of the form::

        YYYY-MM-DD HH:MM:SS - logger_name - LEVEL - message

    Calling this twice with the same name reuses the existing logger and
    does not attach a second handler.

    Parameters
    ----------
    name : str
        Name for the logger (e.g. ``"pyhankel.QDSHT"`` or ``__name__``).
    loglevel : str or int, optional
        Logging level as a string or integer. Default is ``"WARNING"``.

    Returns
    -------
    logging.Logger
        Configured logger instance.
    """
    logger = logging.getLogger(name)
    numeric_level = _parse_loglevel(loglevel)
    logger.setLevel(numeric_level)

    # Only add a handler if none exist (avoids duplicate output)
    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger


def set_log_level(logger: logging.Logger, loglevel: Union[str, int]) -> None:
    """
    Set or update the logging level of an existing logger.

    Raises
    ------
    ValueError
        If the provided string does not correspond to a valid logging level.
    """
    numeric_level = _parse_loglevel(loglevel)
    logger.setLevel(numeric_level)


def get_transform_logger(transform_class: type, loglevel: Union[str, int] = "WARNING") -> logging.Logger:
    r"""
    Return a standardized logger for a transform class.

    The logger name follows the pattern ``pyhankel.<ClassName>``, so that
    e.g. every :class:`~pyhankel.transforms.QDHT` instance shares the
    ``pyhankel.QDHT`` logger.

    Parameters
    ----------
    transform_class : type
        Class object whose ``__name__`` is used in the logger name.
    loglevel : str or int, optional
        Logging level. Default is ``"WARNING"``.

    Returns
    -------
    logging.Logger
        Configured logger instance named ``"pyhankel.<ClassName>"``.

    Examples
    --------
    >>> class QDSHT:
    ...     pass
    >>> logger = get_transform_logger(QDSHT, "INFO")
    >>> logger.name
    'pyhankel.QDSHT'
    """
    logger_name = f"pyhankel.{transform_class.__name__}"
    return setup_logger(logger_name, loglevel)
