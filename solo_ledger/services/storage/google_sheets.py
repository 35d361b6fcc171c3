"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is the system of record because:
1. A solo entrepreneur can view and fix their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- Not suitable for high-volume data (fine for one person's books)
- Limited query capabilities (we filter in Python)

Each record type lives in its own worksheet with a header row. Rows are
read with their headers as keys and validated through the pydantic models,
so a malformed row fails loudly instead of silently vanishing from the books.
"""

import json
from datetime import datetime
from typing import Any, Optional, TypeVar
from uuid import UUID

import gspread
import structlog
from google.oauth2.service_account import Credentials
from pydantic import BaseModel, ValidationError
from tenacity import retry, stop_after_attempt, wait_exponential

from solo_ledger.config import GoogleSheetsSettings, get_settings
from solo_ledger.models.audit import AuditEvent, AuditEventType, AuditSeverity
from solo_ledger.models.documents import (
    Client,
    Expense,
    Invoice,
    Supplier,
    UserFiscalProfile,
)
from solo_ledger.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    NotFoundError,
    RecordProviderInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)

Record = TypeVar("Record", bound=BaseModel)


# Column mappings, used as headers when a sheet is created
INVOICE_COLUMNS = [
    "id",
    "type",
    "number",
    "client_id",
    "date",
    "due_date",
    "updated_at",
    "subtotal",
    "tax_amount",
    "total",
    "status",
    "linked_document_id",
]

EXPENSE_COLUMNS = [
    "id",
    "date",
    "description",
    "amount",
    "vat_amount",
    "category",
    "supplier_id",
    "status",
    "reversal_of",
    "created_at",
]

CLIENT_COLUMNS = ["id", "name", "email", "address", "country", "siret", "tva_number"]

SUPPLIER_COLUMNS = ["id", "name", "email", "siret", "vat_number", "country"]

PROFILE_COLUMNS = ["company_name", "siret", "is_vat_exempt", "activity_type", "currency"]

AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "resource_type",
    "resource_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @property
    def settings(self) -> GoogleSheetsSettings:
        return self._settings

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_sheet(self, name: str, columns: list[str], rows: int = 1000) -> gspread.Worksheet:
        """Get a worksheet, creating it with its header row if missing."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(name)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=name,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet


def _clean_row(row: dict[str, Any]) -> dict[str, Any]:
    """Drop empty cells so model defaults apply."""
    return {key: value for key, value in row.items() if value not in ("", None)}


class GoogleSheetsRecordProvider(RecordProviderInterface):
    """
    Google Sheets implementation of the record provider.

    Read-only: one worksheet per record type, one record per row.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _read(
        self,
        sheet_name: str,
        columns: list[str],
        model: type[Record],
    ) -> list[Record]:
        try:
            sheet = self._client.get_sheet(sheet_name, columns)
            # keep cells as text: SIRETs and ids must not become ints
            rows = sheet.get_all_records(numericise_ignore=["all"])
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read sheet {sheet_name}: {e}")

        records = []
        for index, row in enumerate(rows, start=2):  # row 1 is the header
            cleaned = _clean_row(row)
            if not cleaned:
                continue
            try:
                records.append(model.model_validate(cleaned))
            except ValidationError as e:
                raise StorageError(
                    f"Invalid {model.__name__} in sheet {sheet_name}, row {index}: {e}"
                )
        return records

    async def get_invoices(self) -> list[Invoice]:
        return self._read(
            self._client.settings.invoices_sheet_name, INVOICE_COLUMNS, Invoice
        )

    async def get_expenses(self) -> list[Expense]:
        return self._read(
            self._client.settings.expenses_sheet_name, EXPENSE_COLUMNS, Expense
        )

    async def get_clients(self) -> list[Client]:
        return self._read(
            self._client.settings.clients_sheet_name, CLIENT_COLUMNS, Client
        )

    async def get_suppliers(self) -> list[Supplier]:
        return self._read(
            self._client.settings.suppliers_sheet_name, SUPPLIER_COLUMNS, Supplier
        )

    async def get_profile(self) -> UserFiscalProfile:
        profiles = self._read(
            self._client.settings.profile_sheet_name, PROFILE_COLUMNS, UserFiscalProfile
        )
        if not profiles:
            raise NotFoundError("No fiscal profile found in the Profile sheet")
        return profiles[0]


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _get_sheet(self) -> gspread.Worksheet:
        return self._client.get_sheet(
            self._client.settings.audit_sheet_name,
            AUDIT_COLUMNS,
            rows=5000,  # More rows for audit log
        )

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return AuditEvent(
            event_id=UUID(safe_get(0)),
            timestamp=datetime.fromisoformat(safe_get(1)),
            event_type=AuditEventType(safe_get(2)),
            severity=AuditSeverity(safe_get(3)),
            resource_type=safe_get(4) or None,
            resource_id=safe_get(5) or None,
            correlation_id=UUID(safe_get(6)) if safe_get(6) else None,
            description=safe_get(7),
            details=json.loads(safe_get(8)) if safe_get(8) else {},
            error_message=safe_get(9) or None,
        )

    def _read_events(self) -> list[AuditEvent]:
        """All parseable events; unreadable rows are logged and skipped."""
        sheet = self._get_sheet()
        events = []
        for row in sheet.get_all_values()[1:]:
            if not row or not row[0]:
                continue
            try:
                events.append(self._row_to_event(row))
            except (ValueError, KeyError) as e:
                logger.warning("audit_row_unreadable", event_id=row[0], error=str(e))
        return events

    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event."""
        try:
            sheet = self._get_sheet()
            sheet.append_row(event.to_sheets_row(), value_input_option="RAW")
            return True
        except Exception as e:
            # Don't raise - audit logging should not break the main flow
            logger.warning(
                "audit_sheet_write_failed",
                event_id=str(event.event_id),
                error=str(e),
            )
            return False

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get events by correlation ID."""
        try:
            events = [
                e for e in self._read_events() if e.correlation_id == correlation_id
            ]
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        events.sort(key=lambda e: e.timestamp)
        return events

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get recent events."""
        try:
            events = self._read_events()
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        # Sort newest first
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
