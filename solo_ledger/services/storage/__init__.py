"""
Storage Services Package

Provides abstract interfaces and concrete implementations for record
retrieval and audit persistence. Google Sheets is the production backend;
in-memory implementations serve tests and scripts.
"""

from solo_ledger.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    NotFoundError,
    RecordProviderInterface,
    StorageError,
)
from solo_ledger.services.storage.memory import (
    InMemoryAuditStorage,
    InMemoryRecordProvider,
)
from solo_ledger.services.storage.google_sheets import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsRecordProvider,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "RecordProviderInterface",
    # Exceptions
    "ConnectionError",
    "NotFoundError",
    "StorageError",
    # In-memory implementation
    "InMemoryAuditStorage",
    "InMemoryRecordProvider",
    # Google Sheets implementation
    "GoogleSheetsAuditStorage",
    "GoogleSheetsClient",
    "GoogleSheetsRecordProvider",
]
