"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from ledger_bot.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # SQL echo stays off unless explicitly enabled
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def log_command(
    chat_id: str,
    command: str,
    outcome: str,
    duration_ms: float,
) -> None:
    """Log structured command outcome"""
    logging.getLogger("ledger_bot.commands").info(
        "Command processed",
        extra={
            "chat_id": chat_id,
            "step": "command_complete",
            "command": command or "<empty>",
            "outcome": outcome,
            "duration_ms": duration_ms,
        },
    )
