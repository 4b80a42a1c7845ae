"""Logging setup for applications using the PrizmDoc client."""

import logging

from prizmdoc.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

package_logger = logging.getLogger("prizmdoc")


def configure_logging(level: str | None = None) -> None:
    """Attach a stream handler to the ``prizmdoc`` logger.

    Calling this more than once only adjusts the level.

    Args:
        level: The logging level name. Defaults to the configured
            PRIZMDOC_LOG_LEVEL setting.
    """
    if level is None:
        level = get_settings().log_level.value

    numeric_level = getattr(logging, level.upper(), logging.INFO)
    package_logger.setLevel(numeric_level)

    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)

    for handler in package_logger.handlers:
        handler.setLevel(numeric_level)

    # Prevent duplicate output through the root logger
    package_logger.propagate = False
