"""
Auxia - Logging
JSON lines in production, readable text elsewhere. Every record carries the
request id and the authenticated principal (id and role) when there is one.
"""

import logging
import sys
import json
import traceback
import uuid
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict
from contextvars import ContextVar

from auxia.core.config import settings


request_id_var: ContextVar[str] = ContextVar('request_id', default='')
principal_id_var: ContextVar[str] = ContextVar('principal_id', default='')
role_var: ContextVar[str] = ContextVar('role', default='')


def get_request_id() -> str:
    return request_id_var.get() or ''


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_principal_id() -> str:
    return principal_id_var.get() or ''


def set_principal_id(principal_id: str) -> None:
    principal_id_var.set(principal_id)


def get_role() -> str:
    return role_var.get() or ''


def set_role(role: str) -> None:
    role_var.set(role)


def generate_request_id() -> str:
    """Short id for correlating the log lines of one request"""
    return uuid.uuid4().hex[:8]


# LogRecord attributes and our own context fields; anything else on a
# record came from `extra=` and is emitted as-is
_STANDARD_KEYS = frozenset(vars(logging.LogRecord('', 0, '', 0, '', (), None))) | {
    'message', 'asctime', 'request_id', 'principal_id', 'role',
}


class JSONFormatter(logging.Formatter):
    """One JSON object per line"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if get_request_id():
            entry["request_id"] = get_request_id()
        if get_principal_id():
            entry["principal_id"] = get_principal_id()
            entry["role"] = get_role()

        if record.exc_info and record.exc_info[0]:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_KEYS and not key.startswith('_'):
                entry[key] = value

        return json.dumps(entry, default=str)


class ContextualFormatter(logging.Formatter):
    """Text formatter that can reference %(request_id)s, %(principal_id)s and %(role)s"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or '-'
        record.principal_id = get_principal_id() or '-'
        record.role = get_role() or '-'
        return super().format(record)


class AuxiaLogger(logging.Logger):
    """Logger with one helper per kind of event Auxia records"""

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, slow: bool = False, **kwargs) -> None:
        """Access log line; 4xx at warning, 5xx at error"""
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400 or slow:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.log(
            level,
            f"{method} {path} - {status_code} ({duration_ms:.2f}ms)" + (" SLOW" if slow else ""),
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": round(duration_ms, 2),
                "slow": slow,
                **kwargs
            }
        )

    def log_auth_event(self, event: str, success: bool, login: str = None,
                       reason: str = None, **kwargs) -> None:
        """Signup and login outcomes; failures at warning"""
        self.log(
            logging.INFO if success else logging.WARNING,
            f"Auth {event}: {'success' if success else 'failed'}"
            + (f" - {login}" if login else "")
            + (f" - {reason}" if reason else ""),
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "login": login,
                "failure_reason": reason,
                **kwargs
            }
        )

    def log_domain_event(self, entity: str, action: str, entity_id: str = None,
                         **kwargs) -> None:
        """A committed mutation: course created, seat taken, marks uploaded..."""
        self.info(
            f"{entity} {action}" + (f" ({entity_id})" if entity_id else ""),
            extra={
                "event_type": "domain",
                "entity": entity,
                "action": action,
                "entity_id": entity_id,
                **kwargs
            }
        )

    def log_rule_violation(self, rule: str, message: str, **kwargs) -> None:
        """A mutation rejected and rolled back"""
        self.warning(
            f"Rejected by {rule}: {message}",
            extra={
                "event_type": "rule_violation",
                "rule": rule,
                **kwargs
            }
        )


def _file_handler(formatter: logging.Formatter, backups: int) -> RotatingFileHandler:
    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=backups)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> AuxiaLogger:
    """
    Production: JSON lines on stdout (and the rotating file when LOG_FILE
    is set). Elsewhere: short lines on stdout, detailed lines in the file.
    """
    logging.setLoggerClass(AuxiaLogger)

    logger = logging.getLogger("auxia")
    logger.__class__ = AuxiaLogger
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    logger.handlers.clear()

    if settings.is_production:
        console_formatter = file_formatter = JSONFormatter()
        backups = 10
    else:
        console_formatter = ContextualFormatter("%(levelname)-8s | %(message)s")
        file_formatter = ContextualFormatter(
            "%(asctime)s | %(levelname)-8s | "
            "[%(request_id)s] [%(role)s:%(principal_id)s] | "
            "%(funcName)s:%(lineno)d | %(message)s"
        )
        backups = 5

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)

    if settings.LOG_FILE:
        logger.addHandler(_file_handler(file_formatter, backups))

    for noisy in ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info(
        "Logging initialized",
        extra={
            "environment": settings.ENVIRONMENT,
            "log_level": settings.LOG_LEVEL,
            "json_logging": settings.is_production
        }
    )

    return logger


logger: AuxiaLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'get_request_id',
    'set_request_id',
    'get_principal_id',
    'set_principal_id',
    'get_role',
    'set_role',
    'generate_request_id',
    'AuxiaLogger',
]
