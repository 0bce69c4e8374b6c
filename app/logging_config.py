import logging
import sys
from typing import Optional

import structlog

from app.config import settings

# Client libraries that log every credential lookup and HTTP call at INFO.
NOISY_LOGGERS = ("botocore", "aiobotocore", "boto3", "urllib3")


def _add_service_name(logger, method_name, event_dict):
    event_dict.setdefault("service", settings.service_name)
    return event_dict


def _pre_chain() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _add_service_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]


def configure_logging(
    log_level: Optional[str] = None, json_logs: Optional[bool] = None
) -> None:
    """Route structlog and stdlib records through one stdout handler.

    Defaults come from settings: JSON lines outside ``development`` (what
    CloudWatch expects from Lambda), coloured console output locally.
    """
    level_name = (log_level or settings.log_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    if json_logs is None:
        json_logs = settings.environment != "development"

    pre_chain = _pre_chain()
    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if json_logs:
        final = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        final = [structlog.dev.ConsoleRenderer()]

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *final],
            foreign_pre_chain=pre_chain,
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
