"""Services package."""

from solo_ledger.services.storage import (
    AuditStorageInterface,
    ConnectionError,
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsRecordProvider,
    InMemoryAuditStorage,
    InMemoryRecordProvider,
    NotFoundError,
    RecordProviderInterface,
    StorageError,
)

__all__ = [
    # Storage services
    "AuditStorageInterface",
    "ConnectionError",
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsRecordProvider",
    "InMemoryAuditStorage",
    "InMemoryRecordProvider",
    "NotFoundError",
    "RecordProviderInterface",
    "StorageError",
]
