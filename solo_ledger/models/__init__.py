"""
Data Models Package

This package contains all Pydantic models used in Solo Ledger.
All records flowing into the ledger generator must conform to these schemas.
"""

from solo_ledger.models.documents import (
    ActivityType,
    Client,
    DocumentType,
    Expense,
    ExpenseStatus,
    Invoice,
    InvoiceStatus,
    Supplier,
    UserFiscalProfile,
)
from solo_ledger.models.money import Money
from solo_ledger.models.ledger import (
    AccountingEntry,
    EntrySide,
    JournalCode,
)
from solo_ledger.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Document models
    "ActivityType",
    "Client",
    "DocumentType",
    "Expense",
    "ExpenseStatus",
    "Invoice",
    "InvoiceStatus",
    "Supplier",
    "UserFiscalProfile",
    # Ledger models
    "Money",
    "AccountingEntry",
    "EntrySide",
    "JournalCode",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
