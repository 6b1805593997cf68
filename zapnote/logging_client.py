"""
Logging client configuration.

Module code logs through ``logging.getLogger(__name__)``; this module wires
handlers onto the package logger once at application startup.
"""
import logging
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import Optional

from zapnote.log_config import LogSettings, get_log_file_path

LOG_FORMAT = '%(asctime)s - [%(service)s] - %(levelname)s - %(name)s - %(message)s'


class ServiceFilter(logging.Filter):
    """Filter that adds service attribute to log records."""

    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def filter(self, record):
        if not hasattr(record, 'service'):
            record.service = self.service_name
        return True


class DailyRotatingFileHandler(RotatingFileHandler):
    """
    File handler that writes into date-based directories.

    Checks on each log write if the date has changed, and if so,
    switches to a new file under the new date directory. Size-based
    rotation within a day is inherited from RotatingFileHandler.
    """

    def __init__(self, base_dir: str, log_type: str, level: int, formatter, settings: LogSettings):
        self.base_dir = base_dir
        self.log_type = log_type
        self.current_date = datetime.now().date()

        initial_path = get_log_file_path(base_dir, log_type)
        initial_path.parent.mkdir(parents=True, exist_ok=True)

        super().__init__(
            str(initial_path),
            maxBytes=settings.LOG_MAX_BYTES,
            backupCount=settings.LOG_BACKUP_COUNT,
            delay=True,
        )

        self.setLevel(level)
        self.setFormatter(formatter)

    def emit(self, record):
        try:
            today = datetime.now().date()
            if today != self.current_date:
                self._rotate_to_new_date(today)
            super().emit(record)
        except Exception:
            self.handleError(record)

    def _rotate_to_new_date(self, new_date):
        if self.stream:
            self.stream.close()
            self.stream = None

        self.current_date = new_date
        new_path = get_log_file_path(
            self.base_dir,
            self.log_type,
            datetime.combine(new_date, datetime.min.time()),
        )
        new_path.parent.mkdir(parents=True, exist_ok=True)
        self.baseFilename = str(new_path)


def setup_logger(service_name: str = 'zapnote', settings: Optional[LogSettings] = None) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        service_name: Name stamped on every record as ``service``
        settings: Logging settings (read from environment when omitted)

    Returns:
        Configured logger
    """
    settings = settings or LogSettings()

    logger = logging.getLogger('zapnote')
    logger.setLevel(settings.APP_LOG_LEVEL.upper())

    # Remove existing handlers so repeated startup does not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
    service_filter = ServiceFilter(service_name)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(service_filter)
    logger.addHandler(console_handler)

    if settings.LOG_TO_FILE:
        for log_type, level in (('app', logging.INFO), ('error', logging.ERROR)):
            file_handler = DailyRotatingFileHandler(
                base_dir=settings.LOG_BASE_DIR,
                log_type=log_type,
                level=level,
                formatter=formatter,
                settings=settings,
            )
            file_handler.addFilter(service_filter)
            logger.addHandler(file_handler)

    for name in settings.noisy_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
