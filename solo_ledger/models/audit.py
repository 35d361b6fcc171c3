"""
Audit Models for Solo Ledger

Every significant action on the books is logged for audit purposes:
FEC exports, expense cancellations, failures talking to storage.

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

import json
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Ledger
    LEDGER_GENERATED = "ledger_generated"
    EXPENSE_CANCELLED = "expense_cancelled"

    # FEC export
    FEC_GENERATED = "fec_generated"
    FEC_EXPORT_FAILED = "fec_export_failed"

    # System events
    SYSTEM_ERROR = "system_error"
    EXTERNAL_SERVICE_ERROR = "external_service_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # Context - what resource is this about?
    resource_type: Optional[str] = Field(
        default=None,
        description="Type of resource (e.g., 'accounting', 'expense')"
    )
    resource_id: Optional[str] = Field(
        default=None,
        description="ID of the resource (a file name, an expense id...)"
    )

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one export run)"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    # Error information (if applicable)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "resource_type": self.resource_type,
            "resource_id": self.resource_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }

    def to_sheets_row(self) -> list:
        """
        Convert to a row suitable for Google Sheets storage.

        Returns columns in order:
        [event_id, timestamp, event_type, severity, resource_type, resource_id,
         correlation_id, description, details_json, error_message]
        """
        return [
            str(self.event_id),
            self.timestamp.isoformat(),
            self.event_type.value,
            self.severity.value,
            self.resource_type or "",
            self.resource_id or "",
            str(self.correlation_id) if self.correlation_id else "",
            self.description,
            json.dumps(self.details, default=str) if self.details else "",
            self.error_message or "",
        ]


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.fec_generated(filename, entry_count, correlation_id)
    """

    @staticmethod
    def ledger_generated(
        entry_count: int,
        document_count: int,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_GENERATED,
            severity=AuditSeverity.DEBUG,
            resource_type="accounting",
            correlation_id=correlation_id,
            description=f"Ledger generated: {entry_count} lines from {document_count} documents",
            details={
                "entry_count": entry_count,
                "document_count": document_count,
            },
        )

    @staticmethod
    def fec_generated(
        filename: str,
        entry_count: int,
        period: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FEC_GENERATED,
            resource_type="accounting",
            resource_id=filename,
            correlation_id=correlation_id,
            description=f"FEC file generated: {filename} ({period})",
            details={
                "entry_count": entry_count,
                "period": period,
            },
        )

    @staticmethod
    def fec_export_failed(
        error_message: str,
        stage: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FEC_EXPORT_FAILED,
            severity=AuditSeverity.ERROR,
            resource_type="accounting",
            correlation_id=correlation_id,
            description=f"FEC export failed during {stage}",
            error_message=error_message,
            details={
                "stage": stage,
            },
        )

    @staticmethod
    def expense_cancelled(
        expense_id: str,
        reversal_id: str,
        amount: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_CANCELLED,
            severity=AuditSeverity.WARNING,
            resource_type="expense",
            resource_id=expense_id,
            correlation_id=correlation_id,
            description=f"Expense {expense_id} cancelled by reversal {reversal_id}",
            details={
                "reversal_id": reversal_id,
                "amount": amount,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )

    @staticmethod
    def external_service_error(
        service: str,
        error_message: str,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXTERNAL_SERVICE_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"External service error: {service}",
            error_message=error_message,
            details={
                "service": service,
            },
            correlation_id=correlation_id,
        )
