"""
Logging configuration for the attendance analytics engine.
Provides structured logging with different handlers and formatters.
"""

import os
import logging
import logging.config
from typing import Dict, Any, Optional
from pythonjsonlogger import jsonlogger
from datetime import datetime, timezone

from attendance_analytics.config.settings import Settings, settings as default_settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with additional fields"""

    def __init__(self, *args, environment: Optional[str] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.environment = environment or default_settings.ENVIRONMENT

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        """Add custom fields to the log record"""
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        log_record['environment'] = self.environment

        # Analytics context attached through `extra=`
        for field in ('analytics_type', 'preset', 'record_count'):
            if hasattr(record, field):
                log_record[field] = getattr(record, field)

        if record.exc_info:
            log_record['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }


def _rotating_file_handler(config: Settings, filename: str, formatter: str) -> Dict[str, Any]:
    return {
        'level': config.LOG_LEVEL,
        'class': 'logging.handlers.RotatingFileHandler',
        'filename': os.path.join(config.LOG_DIR, filename),
        'maxBytes': 10 * 1024 * 1024,
        'backupCount': 10,
        'formatter': formatter,
        'encoding': 'utf8',
    }


def build_logging_config(config: Optional[Settings] = None) -> Dict[str, Any]:
    """Build the dictConfig mapping for the given settings"""
    config = config or default_settings

    handlers: Dict[str, Any] = {
        'console': {
            'level': 'DEBUG' if config.DEBUG else config.LOG_LEVEL,
            'class': 'logging.StreamHandler',
            'formatter': 'colored' if config.is_development() else 'standard'
        }
    }
    if config.LOG_TO_FILE:
        handlers['file'] = _rotating_file_handler(config, 'analytics.log', 'standard')
        handlers['json_file'] = _rotating_file_handler(config, 'analytics.json.log', 'json')

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': {
            'standard': {
                'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
            },
            'json': {
                '()': CustomJsonFormatter,
                'format': '%(timestamp)s %(level)s %(logger)s %(message)s',
                'environment': config.ENVIRONMENT,
            },
            'colored': {
                '()': 'colorlog.ColoredFormatter',
                'format': '%(log_color)s%(asctime)s [%(levelname)s] %(name)s: %(message)s',
                'log_colors': {
                    'DEBUG': 'cyan',
                    'INFO': 'green',
                    'WARNING': 'yellow',
                    'ERROR': 'red',
                    'CRITICAL': 'red,bg_white',
                }
            }
        },
        'handlers': handlers,
        'loggers': {
            'attendance_analytics': {
                'handlers': list(handlers),
                'level': config.LOG_LEVEL,
                'propagate': False
            }
        }
    }


def setup_logging(config: Optional[Settings] = None) -> logging.Logger:
    """Configure package logging"""
    config = config or default_settings
    if config.LOG_TO_FILE:
        os.makedirs(config.LOG_DIR, exist_ok=True)
    logging.config.dictConfig(build_logging_config(config))
    logger = logging.getLogger("attendance_analytics")
    logger.info(f"Logging initialized with level: {config.LOG_LEVEL}")
    return logger
