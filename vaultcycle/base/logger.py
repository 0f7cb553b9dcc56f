"""
Structured logging for Vaultcycle.

Provides a pre-configured logger that emits JSON-structured log records
with lifecycle context (scenario, operation, vault) for easy filtering
in log aggregation tools.
"""

from __future__ import annotations

import copy
import json
import logging
import uuid
from typing import Any

_CONTEXT_FIELDS = ("request_id", "scenario", "operation", "vault", "status_code")


class StructuredFormatter(logging.Formatter):
    """Emit log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        # Attach any extras injected via VaultcycleLogger.log_operation
        for key in _CONTEXT_FIELDS:
            val = getattr(record, key, None)
            if val is not None:
                log_entry[key] = val
        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = str(record.exc_info[1])
        return json.dumps(log_entry, default=str)


class VaultcycleLogger:
    """Convenience wrapper around :mod:`logging` for vault lifecycle operations."""

    def __init__(self, name: str = "vaultcycle") -> None:
        self.logger = logging.getLogger(name)
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)
        self.context: dict[str, Any] = {}

    def bind(self, **context: Any) -> VaultcycleLogger:
        """Return a logger that stamps *context* on every record.

        Used by the scenario runner so each line carries the scenario and
        vault it belongs to. Explicit keyword arguments to the log methods
        still win over bound values.
        """
        bound = copy.copy(self)
        bound.context = {**self.context, **context}
        return bound

    def log_operation(
        self,
        level: int,
        message: str,
        *,
        scenario: str | None = None,
        operation: str | None = None,
        vault: str | None = None,
        status_code: int | None = None,
        request_id: str | None = None,
        exc_info: bool = False,
    ) -> None:
        """Emit a structured log record with lifecycle context.

        Args:
            level: Logging level (e.g. logging.INFO).
            message: Human-readable message.
            scenario: Scenario name (e.g. 'new_vault').
            operation: Operation name (e.g. 'purge_deleted_vault').
            vault: Vault name or resource ID.
            status_code: Provider status code, for failures.
            request_id: Optional correlation ID; auto-generated if omitted.
            exc_info: Whether to include exception info.
        """
        explicit = {
            "scenario": scenario,
            "operation": operation,
            "vault": vault,
            "status_code": status_code,
            "request_id": request_id,
        }
        extra = {key: self.context.get(key) if val is None else val for key, val in explicit.items()}
        if extra["request_id"] is None:
            extra["request_id"] = uuid.uuid4().hex[:12]
        self.logger.log(level, message, extra=extra, exc_info=exc_info)

    def info(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.ERROR, message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        self.log_operation(logging.DEBUG, message, **kwargs)


# Module-level singleton
vc_logger = VaultcycleLogger()
