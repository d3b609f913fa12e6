"""
Logging setup for the storefront core.

Every module logs through a child of the ``storefront`` logger, e.g.
``storefront.data.catalog_loader``. The level comes from ``LOG_LEVEL``.
"""
import logging
import os
import sys

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("storefront")
logger.setLevel(LOG_LEVEL)

if not logger.handlers:
    _handler = logging.StreamHandler(sys.stdout)
    _handler.setLevel(LOG_LEVEL)
    _handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    logger.addHandler(_handler)

# Keep storefront records out of the root logger (no duplicates under pytest)
logger.propagate = False


def get_logger(name: str = None) -> logging.Logger:
    """
    Return the package logger, or a ``storefront.<name>`` child when a name is given.

    Both area names and module ``__name__`` values are accepted, so
    ``get_logger("query.engine")`` and ``get_logger("storefront.query.engine")``
    return the same logger.

    Args:
        name: Dotted area name, e.g. ``"data.catalog_loader"``, or ``__name__``

    Returns:
        Logger instance
    """
    if not name or name == logger.name:
        return logger
    prefix = logger.name + "."
    if name.startswith(prefix):
        name = name[len(prefix):]
    return logging.getLogger(prefix + name)
