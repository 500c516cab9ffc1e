import logging
import logging.handlers
import re
from pathlib import Path
from typing import List

import orjson
import structlog
from structlog.types import FilteringBoundLogger

from reqdump.common.vars import get_request_context
from reqdump.config.models import LoggingConfig

DEFAULT_MAX_BYTES = 10 * 1024 * 1024
SIZE_MULTIPLIERS = {'B': 1, 'KB': 1024, 'MB': 1024**2, 'GB': 1024**3, 'TB': 1024**4}


def _orjson_serializer(*args, **kwargs) -> str:
    return orjson.dumps(*args, **kwargs).decode('utf-8')


def parse_file_size(value: str) -> int:
    """Parse a human readable size such as ``"10MB"`` into bytes."""
    size_match = re.fullmatch(r'\s*(\d+)\s*([KMGT]?B?)\s*', value.upper())
    if not size_match:
        return DEFAULT_MAX_BYTES
    size_num = int(size_match.group(1))
    size_unit = size_match.group(2)
    if size_unit and not size_unit.endswith('B'):
        size_unit += 'B'
    return size_num * SIZE_MULTIPLIERS.get(size_unit, SIZE_MULTIPLIERS['MB'])


def _create_log_handlers(log_config: LoggingConfig) -> List[logging.Handler]:
    """Create logging handlers based on configuration."""
    handlers: List[logging.Handler] = []

    if log_config.console_enabled:
        formatter = structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, structlog.processors.format_exc_info, structlog.dev.ConsoleRenderer()]
        )
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        handlers.append(console_handler)

    if log_config.file_enabled:
        log_dir = Path(log_config.log_file_dir)
        if log_dir.exists() and not log_dir.is_dir():
            raise ValueError(f'Log directory {log_dir} is not a directory')
        log_dir.mkdir(exist_ok=True, parents=True)

        formatter = structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(serializer=_orjson_serializer),
            ]
        )
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / 'reqdump.log', maxBytes=parse_file_size(log_config.max_file_size), backupCount=log_config.backup_count
        )
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

    return handlers


def _request_context_processor(logger, method_name, event_dict):
    """Add correlation ID, path and method of the current request to log events."""
    for key, value in get_request_context().to_dict().items():
        event_dict.setdefault(key, value)

    return event_dict


def get_logger(name: str) -> FilteringBoundLogger:
    """Get a configured structlog logger."""
    return structlog.get_logger(name)


def configure_structlog(log_config: LoggingConfig) -> None:
    """Configure structlog with console and rotating file output on top of the standard library logging."""
    level = getattr(logging, log_config.level.upper())

    logging.basicConfig(
        level=level,
        handlers=_create_log_handlers(log_config),
        format='%(message)s',  # structlog will handle formatting
        force=True,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        structlog.processors.TimeStamper(fmt='ISO', utc=True),
        _request_context_processor,
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
