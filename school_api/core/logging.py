import logging
from logging.handlers import RotatingFileHandler
import os
import json
from datetime import datetime, timezone
from typing import Optional
import traceback

from school_api.core.config import settings

class CustomJsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging"""
    def __init__(self, **kwargs):
        super().__init__()
        self.kwargs = kwargs

    def format(self, record):
        json_record = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
            "message": record.getMessage(),
        }

        if record.exc_info:
            json_record['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': traceback.format_exception(*record.exc_info)
            }

        if hasattr(record, 'duration'):
            json_record['duration_ms'] = record.duration

        for field in self.kwargs.get('extra_fields', []):
            if hasattr(record, field):
                json_record[field] = getattr(record, field)

        return json.dumps(json_record, default=str)

class LoggerFactory:
    """Factory class for creating and configuring loggers"""

    @staticmethod
    def create_logger(name: str, log_dir: Optional[str] = None, level: str = "INFO"):
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level, logging.INFO))

        # Remove existing handlers if any
        if logger.handlers:
            logger.handlers.clear()

        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        ))
        logger.addHandler(console)

        # File logging is opt-in through LOG_DIR
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            json_formatter = CustomJsonFormatter(extra_fields=['request_id', 'user_id', 'school_id'])

            app_handler = RotatingFileHandler(
                os.path.join(log_dir, 'app.log'),
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=5
            )
            error_handler = RotatingFileHandler(
                os.path.join(log_dir, 'error.log'),
                maxBytes=10 * 1024 * 1024,
                backupCount=5
            )
            error_handler.setLevel(logging.ERROR)

            for handler in (app_handler, error_handler):
                handler.setFormatter(json_formatter)
                logger.addHandler(handler)

        return logger

# Package-level logger; module loggers under "school_api.*" propagate to it
logger = LoggerFactory.create_logger("school_api", settings.LOG_DIR, settings.LOG_LEVEL)
