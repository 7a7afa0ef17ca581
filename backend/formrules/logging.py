"""Structured Logging for formrules

structlog routed through the stdlib root handler, so host applications and
formrules render records the same way:
- Colored console output in development
- JSON output when LOG_JSON is set
- Values under sensitive keys are redacted, since validation context can
  carry submitted form data
"""
import logging
import sys
import threading
from collections.abc import Mapping
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from formrules.config import get_settings

_SENSITIVE_KEYS = frozenset({"password", "passwordhash", "token", "secret", "authorization", "cookie"})
_MAX_REDACT_DEPTH = 5

_domain_loggers: dict[str, structlog.stdlib.BoundLogger] = {}
_domain_loggers_lock = threading.Lock()


def _redact(obj: Any, depth: int) -> Any:
    if depth > _MAX_REDACT_DEPTH:
        return obj
    if isinstance(obj, Mapping):
        return {
            key: "[REDACTED]" if isinstance(key, str) and key.lower() in _SENSITIVE_KEYS else _redact(value, depth + 1)
            for key, value in obj.items()
        }
    if isinstance(obj, (list, tuple)):
        return [_redact(item, depth + 1) for item in obj]
    return obj


def _censor_sensitive_keys(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    return _redact(event_dict, 0)


def _tag_service(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", "formrules")
    return event_dict


_SHARED_PROCESSORS: tuple[Processor, ...] = (
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    _tag_service,
    _censor_sensitive_keys,
)


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """Install the structlog pipeline and a single root handler on stdout.

    Args:
        level: Log level name. Defaults to ``Settings.LOG_LEVEL``.
        json_logs: Render JSON instead of console output. Defaults to ``Settings.LOG_JSON``.
    """
    settings = get_settings()
    level = settings.LOG_LEVEL if level is None else level
    json_logs = settings.LOG_JSON if json_logs is None else json_logs

    if json_logs:
        renderer: Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True, exception_formatter=structlog.dev.plain_traceback)

    structlog.configure(
        processors=[
            *_SHARED_PROCESSORS,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=list(_SHARED_PROCESSORS),
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def domain_logger(domain: str) -> structlog.stdlib.BoundLogger:
    """Logger named ``formrules.<domain>``, one per domain."""
    with _domain_loggers_lock:
        if domain not in _domain_loggers:
            _domain_loggers[domain] = structlog.get_logger(f"formrules.{domain}")
        return _domain_loggers[domain]


def validation_logger() -> structlog.stdlib.BoundLogger:
    """Logger for validation runs."""
    return domain_logger("validation")


def rules_logger() -> structlog.stdlib.BoundLogger:
    """Logger for rule and predicate events."""
    return domain_logger("rules")
