"""
Audit Logger

DESIGN DECISION: Every mutation of the transaction store is logged, and so
is every recovery from bad persisted data. This provides:
1. Traceability of what happened to the user's data
2. Debugging capability when the dashboard shows unexpected numbers
3. A visible record of failures that are otherwise swallowed (write errors)

The audit logger:
- Is synchronous, like the rest of the engine
- Never raises into the caller (a logging failure must not break a mutation)
"""

import logging
import sys
from typing import Optional

import structlog

from budget_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity


def configure_logging(level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configure structlog on top of the standard logging module.

    JSON output is meant for files and log shippers; the console renderer
    is easier to read while developing.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )
    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class AuditLogger:
    """
    Central audit logging service.

    Events go to the structured local log. `events` keeps the most recent
    ones in memory so callers (and tests) can inspect what happened.
    """

    def __init__(self, keep_last: int = 200, logger: Optional[object] = None):
        self._logger = logger or structlog.get_logger("budget_tracker.audit")
        self._keep_last = keep_last
        self.events: list[AuditEvent] = []

    def log(self, event: AuditEvent) -> None:
        """Log an audit event. Never raises."""
        self.events.append(event)
        if len(self.events) > self._keep_last:
            del self.events[: len(self.events) - self._keep_last]

        log_dict = event.to_log_dict()
        try:
            if event.severity == AuditSeverity.ERROR:
                self._logger.error("audit_event", **log_dict)
            elif event.severity == AuditSeverity.WARNING:
                self._logger.warning("audit_event", **log_dict)
            elif event.severity == AuditSeverity.DEBUG:
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # A broken log handler must not fail the mutation being audited
            logging.getLogger(__name__).exception("audit logging failed")

    def log_transaction_added(
        self,
        transaction_id: str,
        transaction_type: str,
        amount: float,
        category: Optional[str],
    ) -> None:
        self.log(AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            transaction_type=transaction_type,
            amount=amount,
            category=category,
        ))

    def log_transaction_deleted(self, transaction_id: str, remaining: int) -> None:
        self.log(AuditEventBuilder.transaction_deleted(transaction_id, remaining))

    def log_validation_failed(self, issues: list[dict]) -> None:
        self.log(AuditEventBuilder.validation_failed(issues))

    def log_store_loaded(self, key: str, count: int) -> None:
        self.log(AuditEventBuilder.store_loaded(key, count))

    def log_corrupt_data_discarded(self, key: str, reason: str) -> None:
        self.log(AuditEventBuilder.corrupt_data_discarded(key, reason))

    def log_storage_read_failed(self, key: str, error_message: str) -> None:
        self.log(AuditEventBuilder.storage_read_failed(key, error_message))

    def log_persist_skipped(self, key: str) -> None:
        self.log(AuditEventBuilder.persist_skipped(key))

    def log_persist_failed(self, key: str, error_message: str, count: int) -> None:
        self.log(AuditEventBuilder.persist_failed(key, error_message, count))

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
        ))
