"""
Logging setup for the storefront engine.

One call to setup_logging() at startup (run.py) wires the root logger to a
midnight-rotated file under logs/ and to the console. Customer contact data
and API credentials pass through every log line of the checkout flow, so both
handlers mask them unless LOG_MASK_SECRETS is off.
"""

import logging
import logging.handlers
import re
from pathlib import Path

import config

SQL_LOGGERS = ['aiosqlite', 'sqlalchemy', 'sqlalchemy.engine', 'sqlalchemy.pool', 'sqlalchemy.orm']

LOG_FORMAT = '%(asctime)s | %(name)-30s | %(levelname)-8s | %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
LOG_FILE_NAME = "storefront.log"


class SecretMaskingFilter(logging.Filter):
    """
    Rewrites log records so that no credential or customer contact detail
    reaches a handler: bearer/auth tokens, e-mails, Russian phone numbers and
    key=value delivery addresses.
    """

    RULES = (
        (re.compile(r'(token["\']?\s*[:=]\s*["\']?)([A-Za-z0-9_\-:.]{16,})(["\']?)', re.IGNORECASE),
         r'\1[REDACTED_TOKEN]\3'),
        (re.compile(r'(Bearer\s+)([A-Za-z0-9_\-\.]+)', re.IGNORECASE), r'\1[REDACTED_BEARER_TOKEN]'),
        (re.compile(r'\b[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\b'), '[REDACTED_EMAIL]'),
        # +7XXXXXXXXXX, 8 (XXX) XXX-XX-XX, +7 XXX XXX XX XX
        (re.compile(r'(?<!\d)(\+7|8)[\s\-]?\(?\d{3}\)?[\s\-]?\d{3}[\s\-]?\d{2}[\s\-]?\d{2}(?!\d)'), '[REDACTED_PHONE]'),
        (re.compile(r'(address["\']?\s*[:=]\s*["\']?)([^"\',]{5,})(["\']?)', re.IGNORECASE),
         r'\1[REDACTED_ADDRESS]\3'),
    )

    @classmethod
    def mask(cls, text: str) -> str:
        for pattern, replacement in cls.RULES:
            text = pattern.sub(replacement, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            record.msg = self.mask(str(record.msg))
        if isinstance(record.args, tuple):
            record.args = tuple(self.mask(arg) if isinstance(arg, str) else arg for arg in record.args)
        # Records are rewritten, never dropped
        return True


def silence_sql_loggers():
    for logger_name in SQL_LOGGERS:
        sql_logger = logging.getLogger(logger_name)
        sql_logger.setLevel(logging.CRITICAL)
        sql_logger.propagate = False
        sql_logger.handlers = [logging.NullHandler()]


def _configure_handler(handler: logging.Handler, level: int, mask_secrets: bool) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.setLevel(level)
    if mask_secrets:
        handler.addFilter(SecretMaskingFilter())
    return handler


def setup_logging(log_dir: Path | None = None):
    """
    Replace the root logger's handlers with the storefront file and console handlers.

    Level, retention and masking come from config.LOG_LEVEL,
    config.LOG_RETENTION_DAYS and config.LOG_MASK_SECRETS.
    """
    log_dir = log_dir or Path("logs")
    log_dir.mkdir(parents=True, exist_ok=True)
    level = logging.getLevelName(config.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handlers = [
        logging.handlers.TimedRotatingFileHandler(
            filename=log_dir / LOG_FILE_NAME,
            when="midnight",
            backupCount=config.LOG_RETENTION_DAYS,
            encoding="utf-8",
        ),
        logging.StreamHandler(),
    ]

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(_configure_handler(handler, level, config.LOG_MASK_SECRETS))

    silence_sql_loggers()

    logging.getLogger(__name__).info(
        f"Logging to {log_dir / LOG_FILE_NAME}: level={logging.getLevelName(level)}, "
        f"retention={config.LOG_RETENTION_DAYS}d, masking={'on' if config.LOG_MASK_SECRETS else 'off'}"
    )
