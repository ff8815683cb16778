"""Logging configuration"""

import json
import logging
import sys
from typing import Any, Dict

from flask import Flask, g, has_request_context, request


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with request context when available."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if has_request_context():
            log_data["method"] = request.method
            log_data["path"] = request.path
            user_id = getattr(g, "current_user_id", None)
            if user_id:
                log_data["user_id"] = user_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def configure_logging(app: Flask) -> None:
    """Attach a single stdout handler to the root logger."""
    log_level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    if app.config.get("LOG_FORMAT") == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for existing in list(root_logger.handlers):
        if getattr(existing, "_entyre_handler", False):
            root_logger.removeHandler(existing)
    handler._entyre_handler = True
    root_logger.addHandler(handler)

    app.logger.setLevel(log_level)

    # Reduce noise from third-party libraries
    for noisy in ("botocore", "boto3", "urllib3", "werkzeug"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    @app.after_request
    def log_request(response):
        app.logger.info(
            "%s %s -> %s (ip=%s)",
            request.method,
            request.path,
            response.status_code,
            request.remote_addr,
        )
        return response
