import logging
import sys

ROOT_LOGGER_NAME = "resx_quick_add"
LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def get_logger(name):
    """Get a logger nested under the application logger.

    Args:
        name (str): Short component name, e.g. "resx_file_store"

    Returns:
        logging.Logger: The component logger
    """
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level="INFO", stream=None):
    """Attach a single stream handler to the application logger.

    Calling this more than once only updates the level.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    return root
