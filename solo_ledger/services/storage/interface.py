"""
Abstract Storage Interfaces

DESIGN DECISION: The ledger core never talks to a database. Invoices,
expenses and reference data are SUPPLIED by a record provider, and audit
events are handed to an audit store. Both are abstract so that:
1. The system of record (Google Sheets today) can be swapped
2. Tests and scripts use in-memory implementations
3. The generator and serializer stay pure

The record provider is read-only: the ledger is recomputed from it and never
written back.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from solo_ledger.models.audit import AuditEvent
from solo_ledger.models.documents import (
    Client,
    Expense,
    Invoice,
    Supplier,
    UserFiscalProfile,
)


class RecordProviderInterface(ABC):
    """
    Abstract supplier of validated domain records.

    Any backing store must implement these methods. Records returned are
    already-validated pydantic models.
    """

    @abstractmethod
    async def get_invoices(self) -> list[Invoice]:
        """All sales documents (every type and status)."""
        pass

    @abstractmethod
    async def get_expenses(self) -> list[Expense]:
        """All expenses, cancelled ones and reversal records included."""
        pass

    @abstractmethod
    async def get_clients(self) -> list[Client]:
        pass

    @abstractmethod
    async def get_suppliers(self) -> list[Supplier]:
        pass

    @abstractmethod
    async def get_profile(self) -> UserFiscalProfile:
        """
        The user's fiscal profile.

        Raises:
            NotFoundError: If no profile has been configured
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Args:
            event: The audit event to log

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID (e.g., one export run).

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class ConnectionError(StorageError):
    """Could not connect to storage backend."""
    pass
