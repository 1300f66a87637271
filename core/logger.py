"""
Service logger setup

Configures a named service logger from LoggingConfig: console handler,
optional file handler, optional one-JSON-object-per-line output.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from core.config import LoggingConfig, get_settings

_handlers_installed = False


class StructuredFormatter(logging.Formatter):
    """Render records as single-line JSON"""

    def __init__(self, service_name: str, environment: str):
        super().__init__()
        self.service_name = service_name
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "service": self.service_name,
            "environment": self.environment,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def setup_service_logger(
    service_name: str,
    level: Optional[str] = None,
    config: Optional[LoggingConfig] = None,
) -> logging.Logger:
    """
    Configure and return the logger for a service.

    Handlers are attached to the root logger once so module loggers
    (``logging.getLogger(__name__)``) share the same output.

    Args:
        service_name: Logger name, usually the service package name
        level: Overrides LoggingConfig.log_level when given
        config: Optional LoggingConfig; defaults to global settings
    """
    global _handlers_installed
    config = config or get_settings().logging
    log_level = getattr(logging, (level or config.log_level).upper(), logging.INFO)

    if config.enable_structured:
        formatter: logging.Formatter = StructuredFormatter(service_name, config.environment)
    else:
        formatter = logging.Formatter(config.log_format)

    root = logging.getLogger()
    if not _handlers_installed:
        if config.enable_console:
            console = logging.StreamHandler(sys.stdout)
            console.setFormatter(formatter)
            root.addHandler(console)
        if config.log_file:
            file_handler = logging.FileHandler(config.log_file)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        _handlers_installed = True
    root.setLevel(log_level)

    service_logger = logging.getLogger(service_name)
    service_logger.setLevel(log_level)
    return service_logger
