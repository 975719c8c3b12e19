import os
import logging
from logging.handlers import RotatingFileHandler


__version__ = '1.0.0'


def configure_logging(settings) -> logging.Logger:
    """
    Configure process logging and return the application logger.

    Args:
        settings: Config class (or instance) from svnbackup.config

    Returns:
        The 'svnbackup' logger, to be passed explicitly to the runner
    """
    # Set log level based on environment
    log_level = logging.DEBUG if getattr(settings, 'DEBUG', False) else logging.INFO

    logger = logging.getLogger('svnbackup')
    logger.setLevel(log_level)

    # Already configured earlier in this process
    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(log_level)
        return logger

    # Create logs directory if it doesn't exist
    log_dir = settings.LOG_DIR
    os.makedirs(log_dir, exist_ok=True)

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s in %(module)s: %(message)s'
    )
    console_handler.setFormatter(console_formatter)

    # File handler
    file_handler = RotatingFileHandler(
        os.path.join(log_dir, 'svnbackup.log'),
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT
    )
    file_handler.setLevel(log_level)
    file_formatter = logging.Formatter(
        '[%(asctime)s] %(levelname)s [%(threadName)s %(name)s.%(funcName)s:%(lineno)d] %(message)s'
    )
    file_handler.setFormatter(file_formatter)

    # Configure application logger
    logger.addHandler(console_handler)
    logger.addHandler(file_handler)

    logger.info(f"Logging configured (level: {logging.getLevelName(log_level)})")

    return logger
