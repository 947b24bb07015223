"""Logging configuration for turntree."""

import logging

from rich.logging import RichHandler


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(f"turntree.{name}")


def setup_logging(level: str = "WARNING", log_file: str = None):
    """Configure logging for turntree.

    Calling this again replaces the handlers installed by the previous call.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file to write logs to
    """
    logger = logging.getLogger("turntree")
    logger.setLevel(getattr(logging, level.upper()))

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Rich console handler
    console_handler = RichHandler(
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        show_time=False,
        show_path=False,
    )
    console_handler.setLevel(getattr(logging, level.upper()))
    logger.addHandler(console_handler)

    # Optional file handler
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        logger.addHandler(file_handler)

    # Don't propagate to root logger
    logger.propagate = False


# Initialize Rich logging when this module is imported
setup_logging()
