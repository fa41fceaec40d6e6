"""Logging helpers for the treeforge library and command line."""
import logging

_LOGGER_NAME = "treeforge"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger under the treeforge hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def configure_logging(*, verbose: bool = False) -> logging.Logger:
    """Attach a console handler to the treeforge logger. Only the CLI calls this."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Reset handlers so repeated main() calls do not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("[treeforge] %(levelname)s %(message)s"))
    logger.addHandler(handler)
    return logger
