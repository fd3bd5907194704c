import logging
from typing import Any

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Library logger, silent until the application attaches a handler
logger = logging.getLogger("gitmanhours")
logger.addHandler(logging.NullHandler())


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger instance for the specified name.

    Args:
        name: The name of the logger to get. If None, returns the main gitmanhours logger.
              If specified, returns a child logger of the main gitmanhours logger.

    Returns:
        logging.Logger: The requested logger instance.
    """
    if name is None:
        return logger
    return logger.getChild(name)


def set_log_level(level: int | str) -> None:
    """Set the logging level for the gitmanhours library.

    Args:
        level: The logging level to set, either a name (e.g. 'INFO') or a number.
    """
    logger.setLevel(level)


def verbosity_to_level(verbosity: int) -> int:
    """Maps a count of ``-v`` flags to a logging level (0: WARNING, 1: INFO, 2+: DEBUG)."""
    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def _attach(handler: logging.Handler, level: int | str, format_string: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(format_string))
    logger.addHandler(handler)
    return handler


def add_stream_handler(
    level: int | str = logging.INFO,
    format_string: str = DEFAULT_FORMAT,
    **handler_kwargs: Any,
) -> logging.Handler | None:
    """Add a stream handler to the gitmanhours logger.

    Args:
        level: The logging level for the handler. Defaults to INFO.
        format_string: The format string for log messages.
        **handler_kwargs: Additional keyword arguments to pass to StreamHandler.

    Returns:
        The new handler, or None if a stream handler was already attached.
    """
    # FileHandler subclasses StreamHandler, so exclude it when looking for duplicates
    if any(
        isinstance(h, logging.StreamHandler) and not isinstance(h, logging.FileHandler) for h in logger.handlers
    ):
        logger.warning("StreamHandler already exists for gitmanhours logger.")
        return None
    return _attach(logging.StreamHandler(**handler_kwargs), level, format_string)


def add_file_handler(
    filename: str,
    level: int | str = logging.INFO,
    format_string: str = DEFAULT_FORMAT,
    **handler_kwargs: Any,
) -> logging.Handler | None:
    """Add a file handler to the gitmanhours logger.

    Args:
        filename: The name of the file to log to.
        level: The logging level for the handler. Defaults to INFO.
        format_string: The format string for log messages.
        **handler_kwargs: Additional keyword arguments to pass to FileHandler.

    Returns:
        The new handler, or None if the file already has a handler.
    """
    handler = logging.FileHandler(filename, **handler_kwargs)
    if any(isinstance(h, logging.FileHandler) and h.baseFilename == handler.baseFilename for h in logger.handlers):
        handler.close()
        logger.warning(f"FileHandler for {filename} already exists for gitmanhours logger.")
        return None
    return _attach(handler, level, format_string)


def remove_all_handlers() -> None:
    """Remove all handlers from the gitmanhours logger (except the default NullHandler)."""
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


__all__ = [
    "logger",
    "get_logger",
    "set_log_level",
    "verbosity_to_level",
    "add_stream_handler",
    "add_file_handler",
    "remove_all_handlers",
]
