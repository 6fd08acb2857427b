"""
Logger configuration for the remote policy loggers.

Library modules only call ``logging.getLogger('remote_policy.<area>')``; the app (or a
host embedding the callout) calls ``configure_logging()`` once to attach handlers.

Environment:
    LOG_FORMAT: 'plain' (default) or 'json'
    LOG_LEVEL: logging level name, INFO by default
"""

import json
import logging
import os
import re
import sys

LOGGER_NAMES = (
    'remote_policy.callout',
    'remote_policy.transport',
    'remote_policy.remote',
)

PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'time': self.formatTime(record, '%Y-%m-%dT%H:%M:%S'),
            'name': record.name,
            'level': record.levelname,
            'message': record.getMessage(),
        }
        if record.exc_info:
            payload['exc_info'] = self.formatException(record.exc_info)
        try:
            return json.dumps(payload, ensure_ascii=False)
        except (TypeError, ValueError):
            return f'{payload}'


class RedactFilter(logging.Filter):
    """Masks credentials that may reach log lines through URLs, headers or errors.

    Redacts:
    - Authorization headers (Bearer, Basic)
    - Access/identity tokens and JWTs
    - Passwords and secrets
    """

    PATTERNS = [
        re.compile(r'(?i)(authorization\s*[:=]\s*)([^;\r\n]+)'),
        re.compile(r'(?i)(bearer\s+)([a-zA-Z0-9_\-\.=]+)'),
        re.compile(r'(?i)((?:access|id)[_-]?token\s*["\']?\s*[:=]\s*["\']?)([^"\';\r\n\s&]+)'),
        re.compile(r'(?i)(password\s*["\']?\s*[:=]\s*["\']?)([^"\';\r\n\s&]+)'),
        re.compile(r'(?i)(secret\s*["\']?\s*[:=]\s*["\']?)([^"\';\r\n\s&]+)'),
        re.compile(r'\b(eyJ[a-zA-Z0-9_\-]+\.eyJ[a-zA-Z0-9_\-]+\.[a-zA-Z0-9_\-]+)\b'),
    ]

    def redact(self, text: str) -> str:
        for pat in self.PATTERNS:
            if pat.groups >= 2:
                text = pat.sub(lambda m: m.group(1) + '[REDACTED]', text)
            else:
                text = pat.sub('[REDACTED]', text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        msg = str(record.getMessage())
        red = self.redact(msg)
        if red != msg:
            record.msg = red
            record.args = None
        return True


def _level() -> int:
    return getattr(logging, os.getenv('LOG_LEVEL', 'INFO').upper(), logging.INFO)


def configure_logger(logger_name: str, stream=None) -> logging.Logger:
    logger = logging.getLogger(logger_name)
    logger.setLevel(_level())
    logger.propagate = False

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    fmt_is_json = os.getenv('LOG_FORMAT', 'plain').lower() == 'json'
    console = logging.StreamHandler(stream=stream or sys.stdout)
    console.setFormatter(JSONFormatter() if fmt_is_json else logging.Formatter(PLAIN_FORMAT))
    console.addFilter(RedactFilter())
    logger.addHandler(console)
    return logger


def configure_logging(stream=None) -> None:
    for name in LOGGER_NAMES:
        configure_logger(name, stream=stream)
