"""Structured logging configuration for luckydex."""

from __future__ import annotations

import json
import logging
import sys

from flask import Flask, has_request_context, request


class StructuredFormatter(logging.Formatter):
    """Structured JSON formatter for better log parsing."""

    _RESERVED = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {"message", "asctime"}

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if has_request_context():
            log_data.update({
                'method': request.method,
                'path': request.path,
                'remote_addr': request.remote_addr,
            })

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        # Fields passed via ``extra=``
        for key, value in record.__dict__.items():
            if key in self._RESERVED or key in log_data or key.startswith('_'):
                continue
            if isinstance(value, (str, int, float, bool, list, dict)):
                log_data[key] = value

        return json.dumps(log_data, ensure_ascii=False, default=str)


def configure_logging(app: Flask, level: str | None = None) -> None:
    """Send JSON log lines to stdout at ``level`` (default from the app config)."""
    level_name = (level or app.config.get("LUCKYDEX_LOG_LEVEL") or "INFO").upper()
    log_level = getattr(logging, level_name, logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(StructuredFormatter())
    root_logger.addHandler(console_handler)

    # Quiet chatty HTTP client logs unless debugging.
    logging.getLogger('urllib3').setLevel(max(log_level, logging.WARNING))

    app.logger.info('Logging configuration completed', extra={
        'log_level': logging.getLevelName(log_level),
    })


__all__ = ["StructuredFormatter", "configure_logging"]
