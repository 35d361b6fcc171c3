"""
In-Memory Storage

Dict/list-backed implementations of the storage interfaces, for tests,
scripts and one-off exports from records already in memory.
"""

from typing import Iterable, Optional
from uuid import UUID

from solo_ledger.models.audit import AuditEvent
from solo_ledger.models.documents import (
    Client,
    Expense,
    Invoice,
    Supplier,
    UserFiscalProfile,
)
from solo_ledger.services.storage.interface import (
    AuditStorageInterface,
    NotFoundError,
    RecordProviderInterface,
)


class InMemoryRecordProvider(RecordProviderInterface):
    """Serves fixed record collections. Returns copies of its lists."""

    def __init__(
        self,
        profile: Optional[UserFiscalProfile] = None,
        invoices: Iterable[Invoice] = (),
        expenses: Iterable[Expense] = (),
        clients: Iterable[Client] = (),
        suppliers: Iterable[Supplier] = (),
    ):
        self._profile = profile
        self._invoices = list(invoices)
        self._expenses = list(expenses)
        self._clients = list(clients)
        self._suppliers = list(suppliers)

    async def get_invoices(self) -> list[Invoice]:
        return list(self._invoices)

    async def get_expenses(self) -> list[Expense]:
        return list(self._expenses)

    async def get_clients(self) -> list[Client]:
        return list(self._clients)

    async def get_suppliers(self) -> list[Supplier]:
        return list(self._suppliers)

    async def get_profile(self) -> UserFiscalProfile:
        if self._profile is None:
            raise NotFoundError("No fiscal profile configured")
        return self._profile


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only in-memory audit log."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    @property
    def events(self) -> list[AuditEvent]:
        return list(self._events)

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._events if e.correlation_id == correlation_id]
        return sorted(events, key=lambda e: e.timestamp)

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = sorted(self._events, key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
