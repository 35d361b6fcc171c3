"""
Audit Logger

DESIGN DECISION: Every action that touches the books leaves a trace:
ledger computations, FEC exports (and their failures), expense
cancellations. An accountant or a tax auditor can then answer "which file
was sent, built from what, and when".

The audit logger:
- Writes a structured JSON line locally for every event
- Persists the event to audit storage when one is configured
- Never lets a storage failure abort the export it is auditing
- Groups the events of one export run under a correlation ID
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from solo_ledger.log import configure_logging
from solo_ledger.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from solo_ledger.services.storage import AuditStorageInterface

__all__ = ["AuditLogger", "configure_logging", "create_correlation_id"]

# Local log method per audit severity
LOG_METHODS = {
    AuditSeverity.DEBUG: "debug",
    AuditSeverity.INFO: "info",
    AuditSeverity.WARNING: "warning",
    AuditSeverity.ERROR: "error",
    AuditSeverity.CRITICAL: "critical",
}


class AuditLogger:
    """
    Writes audit events to the local log and, optionally, to audit storage.

    Usage:
        audit = AuditLogger(InMemoryAuditStorage())
        await audit.log_fec_generated("123456789FEC20250201.txt", 42, "year")
    """

    def __init__(self, storage: Optional[AuditStorageInterface] = None):
        # storage=None means local-only logging
        self._storage = storage
        self._logger = structlog.get_logger("solo_ledger.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Record an event.

        Returns False only when a configured storage failed to persist it.
        """
        log_method = getattr(self._logger, LOG_METHODS[event.severity])
        log_method("audit_event", **event.to_log_dict())

        if self._storage is None:
            return True

        try:
            return await self._storage.append_event(event)
        except Exception as e:
            self._logger.error(
                "audit_storage_failed",
                error=str(e),
                event_id=str(event.event_id),
            )
            return False

    async def log_ledger_generated(
        self,
        entry_count: int,
        document_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.ledger_generated(
            entry_count=entry_count,
            document_count=document_count,
            correlation_id=correlation_id,
        ))

    async def log_fec_generated(
        self,
        filename: str,
        entry_count: int,
        period: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Record a FEC file written to disk."""
        await self.log(AuditEventBuilder.fec_generated(
            filename=filename,
            entry_count=entry_count,
            period=period,
            correlation_id=correlation_id,
        ))

    async def log_fec_export_failed(
        self,
        error_message: str,
        stage: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Record a failed export; `stage` is 'fetch' or 'write'."""
        await self.log(AuditEventBuilder.fec_export_failed(
            error_message=error_message,
            stage=stage,
            correlation_id=correlation_id,
        ))

    async def log_expense_cancelled(
        self,
        expense_id: str,
        reversal_id: str,
        amount: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.expense_cancelled(
            expense_id=expense_id,
            reversal_id=reversal_id,
            amount=amount,
            correlation_id=correlation_id,
        ))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        await self.log(AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        ))

    async def log_external_service_error(
        self,
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Record a failure of the record provider or another backend."""
        await self.log(AuditEventBuilder.external_service_error(
            service=service,
            error_message=error_message,
            correlation_id=correlation_id,
        ))


def create_correlation_id() -> UUID:
    """New ID shared by all events of one export or cancellation."""
    return uuid4()
