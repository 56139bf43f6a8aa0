"""
Structured JSON logging for the transaction client.

Provides JSON-formatted logging to stdout with request ID correlation
and automatic sanitization of cookies, keys and transaction ids.
"""

import os
import sys
import json
import logging
import re
from typing import Any, Optional, TextIO
from contextvars import ContextVar
from datetime import datetime, timezone

# Context variable for request ID
request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

SENSITIVE_KEYS = ["cookie", "password", "api_key", "apikey", "token", "auth", "transaction", "verification"]

# Attributes every LogRecord carries; anything else arrived through ``extra=``
RESERVED_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""
    
    # Patterns for sensitive data to sanitize
    SENSITIVE_PATTERNS = [
        (re.compile(r'(cookie|Cookie)["\s:=]+([^"\s,}]+)', re.IGNORECASE), r'\1=***REDACTED***'),
        (re.compile(r'(authorization|auth)["\s:=]+([^"\s,}]+)', re.IGNORECASE), r'\1=***REDACTED***'),
        (re.compile(r'(bearer|token)["\s:=]+([^"\s,}]+)', re.IGNORECASE), r'\1=***REDACTED***'),
        (re.compile(r'(x-client-transaction-id|transaction[_-]?id)["\s:=]+([^"\s,}]+)', re.IGNORECASE), r'\1=***REDACTED***'),
        (re.compile(r'(site-verification|site_verification)["\s:=]+([^"\s,}]+)', re.IGNORECASE), r'\1=***REDACTED***'),
    ]
    
    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON."""
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": self._sanitize(record.getMessage()),
        }
        
        request_id = request_id_ctx.get()
        if request_id:
            log_data["request_id"] = request_id
        
        extra = {
            key: value for key, value in record.__dict__.items()
            if key not in RESERVED_RECORD_ATTRS
        }
        if extra:
            log_data.update(sanitize_log_data(extra))
        
        if record.exc_info:
            log_data["exception"] = self._sanitize(self.formatException(record.exc_info))
        
        # Add source location for errors and above
        if record.levelno >= logging.ERROR:
            log_data["source"] = {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            }
        
        return json.dumps(log_data, default=str)
    
    def _sanitize(self, text: str) -> str:
        """Remove sensitive data from log text."""
        for pattern, replacement in self.SENSITIVE_PATTERNS:
            text = pattern.sub(replacement, text)
        return text


def sanitize_log_data(data: Any) -> Any:
    """
    Sanitize sensitive data from log payloads.
    
    Args:
        data: Data to sanitize (dict, str, or other)
    
    Returns:
        Sanitized copy of the data
    """
    if isinstance(data, dict):
        sanitized = {}
        for key, value in data.items():
            key_lower = str(key).lower()
            
            if any(sensitive in key_lower for sensitive in SENSITIVE_KEYS):
                sanitized[key] = "***REDACTED***"
            else:
                sanitized[key] = sanitize_log_data(value)
        
        return sanitized
    
    elif isinstance(data, (list, tuple)):
        return [sanitize_log_data(item) for item in data]
    
    elif isinstance(data, str):
        result = data
        for pattern, replacement in JSONFormatter.SENSITIVE_PATTERNS:
            result = pattern.sub(replacement, result)
        return result
    
    else:
        return data


def setup_logging(
    log_level: Optional[str] = None,
    force_json: bool = True,
    stream: Optional[TextIO] = None
) -> None:
    """
    Configure application logging.
    
    Args:
        log_level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
                   Defaults to LOG_LEVEL env var or INFO
        force_json: Force JSON formatting even for non-production
        stream: Output stream, stdout by default
    """
    level_str = log_level or os.getenv("LOG_LEVEL", "INFO")
    level = getattr(logging, level_str.upper(), logging.INFO)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    
    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(level)
    
    if force_json:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
    
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)
    
    # Suppress noisy third-party loggers
    logging.getLogger("curl_cffi").setLevel(logging.WARNING)
    
    root_logger.info(f"Logging configured with level={level_str}")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.
    
    Args:
        name: Logger name (typically __name__)
    
    Returns:
        Logger instance
    """
    return logging.getLogger(name)
