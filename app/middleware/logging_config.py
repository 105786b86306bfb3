"""
Logging configuration for the application.
"""
import logging
import re
import sys

from ..config.settings import settings

# OAuth values that must never reach a log line in clear
SENSITIVE_FIELDS = (
    "access_token", "refresh_token", "code_verifier", "code",
    "state", "secret_key", "appsecret_proof",
)

_SENSITIVE_PATTERN = re.compile(
    r"\b(" + "|".join(SENSITIVE_FIELDS) + r")=([^&\s\"']+)"
)


class RedactingFilter(logging.Filter):
    """Masks Zalo OAuth parameters in `key=value` form, e.g. in request URLs."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        redacted = _SENSITIVE_PATTERN.sub(r"\1=***", message)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging() -> None:
    """Configure application logging."""

    # Create formatter
    formatter = logging.Formatter(
        fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Add console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(RedactingFilter())
    root_logger.addHandler(console_handler)

    # httpx logs full request URLs; the filter above masks their OAuth values
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    # Set application logger
    app_logger = logging.getLogger("app")
    app_logger.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance."""
    return logging.getLogger(f"app.{name}")


class LoggerMixin:
    """Mixin to add logging capability to classes."""

    @property
    def logger(self) -> logging.Logger:
        """Get logger for this class."""
        return get_logger(self.__class__.__name__)
