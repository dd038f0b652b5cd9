"""
Logging utility for easyfit.
"""

import logging
import os
from datetime import datetime

LOGGER_NAME = 'EasyFit'

# Global logger instance
_logger = None


def setup_logger(log_dir=None, log_level=logging.INFO):
    """
    Set up the package logger, writing to the console and optionally to a file.

    Parameters
    ----------
    log_dir : str, optional
        Directory to store log files. If None, no log file is written.
    log_level : int
        Logging level (logging.DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns
    -------
    logger : logging.Logger
        Configured logger instance
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    log_file = None
    if log_dir is not None:
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)
        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        log_file = os.path.join(log_dir, f'easyfit_{timestamp}.log')

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(log_level)
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

    # Console handler (only warnings and errors)
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_formatter = logging.Formatter('%(levelname)s: %(message)s')
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if log_file is not None:
        logger.info(f"Log file: {log_file}")

    global _logger
    _logger = logger
    return logger


def get_logger():
    """Get or create the global logger instance."""
    global _logger
    if _logger is None:
        _logger = setup_logger()
    return _logger


def log_error(message, exception=None):
    """
    Log an error message with optional exception details.

    Parameters
    ----------
    message : str
        Error message
    exception : Exception, optional
        Exception object to log
    """
    logger = get_logger()
    if exception:
        logger.error(f"{message}: {str(exception)}", exc_info=exception)
    else:
        logger.error(message)


def log_warning(message, exception=None):
    """Log a warning message, with traceback if an exception is given."""
    if exception:
        get_logger().warning(f"{message}: {str(exception)}", exc_info=exception)
    else:
        get_logger().warning(message)


def log_info(message):
    """Log an info message."""
    get_logger().info(message)


def log_debug(message):
    """Log a debug message."""
    get_logger().debug(message)
