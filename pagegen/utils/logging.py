"""
Logging setup for the agent.

Provider keys end up in settings, request payloads and exception messages;
every handler installed here passes records through ``RedactingFilter``
first, and configuration is only ever logged through ``redact_dict``.
"""

import re
import json
import logging
from typing import Any, Dict, Iterable, List, Optional
from datetime import datetime, timezone

from pagegen.utils.config import SECRET_PATTERNS, Settings

logger = logging.getLogger(__name__)

REDACTED = "[REDACTED]"

NOISY_LOGGERS = ("httpx", "httpcore", "openai", "aiohttp", "asyncio")

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class RedactingFilter(logging.Filter):
    """
    Masks secrets in log messages and their arguments.

    Besides generic token shapes and ``key=value`` pairs whose key looks
    secret, any literal value passed in ``known_secrets`` (e.g. the
    configured provider key) is masked wherever it appears.
    """

    VALUE_PATTERNS = [
        re.compile(r'Bearer\s+[A-Za-z0-9\-_\.]+', re.IGNORECASE),
        re.compile(r'\bsk-[A-Za-z0-9\-_]{8,}'),  # OpenAI keys
        re.compile(r'eyJ[A-Za-z0-9\-_]+\.eyJ[A-Za-z0-9\-_]+'),  # JWTs
    ]

    KEY_VALUE_PATTERN = re.compile(
        rf'({"|".join(SECRET_PATTERNS)})\s*[=:]\s*["\']?([^"\'\s,}}]+)["\']?',
        re.IGNORECASE
    )

    def __init__(self, known_secrets: Optional[Iterable[Optional[str]]] = None):
        super().__init__()
        self.known_secrets: List[str] = [secret for secret in (known_secrets or []) if secret]

    def filter(self, record: logging.LogRecord) -> bool:
        record.msg = self.redact(str(record.msg))
        if record.args:
            record.args = tuple(
                self.redact(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True

    def redact(self, text: str) -> str:
        for secret in self.known_secrets:
            text = text.replace(secret, REDACTED)
        for pattern in self.VALUE_PATTERNS:
            text = pattern.sub(REDACTED, text)
        return self.KEY_VALUE_PATTERN.sub(rf'\1={REDACTED}', text)


class JSONFormatter(logging.Formatter):
    """One JSON object per record; extra record attributes become fields."""

    STANDARD_ATTRS = set(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}

    def __init__(self, redactor: Optional[RedactingFilter] = None):
        super().__init__()
        self.redactor = redactor or RedactingFilter()

    def format(self, record: logging.LogRecord) -> str:
        self.redactor.filter(record)

        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data.update({
            key: value for key, value in record.__dict__.items()
            if key not in self.STANDARD_ATTRS
        })
        return json.dumps(log_data, default=str)


def setup_logging(settings: Settings) -> None:
    """Install a single redacting stream handler on the root logger."""
    redactor = RedactingFilter(known_secrets=[settings.OPENAI_API_KEY])

    handler = logging.StreamHandler()
    if settings.LOG_FORMAT.lower() == "json":
        handler.setFormatter(JSONFormatter(redactor))
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    handler.addFilter(redactor)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)


def redact_dict(data: Dict[str, Any], keys_to_redact: Optional[List[str]] = None) -> Dict[str, Any]:
    """Copy of ``data`` with values under secret-looking keys masked, recursively."""
    if keys_to_redact is None:
        keys_to_redact = SECRET_PATTERNS

    def redact_value(value: Any) -> Any:
        if isinstance(value, dict):
            return redact_dict(value, keys_to_redact)
        if isinstance(value, list):
            return [redact_value(item) for item in value]
        return value

    return {
        key: REDACTED if any(re.search(pattern, key, re.IGNORECASE) for pattern in keys_to_redact)
        else redact_value(value)
        for key, value in data.items()
    }


def log_configuration(settings: Settings) -> Dict[str, Any]:
    """Log the effective settings with secrets masked and return what was logged."""
    safe = redact_dict(settings.model_dump())
    logger.info(f"Effective configuration: {json.dumps(safe, default=str, sort_keys=True)}")
    return safe
