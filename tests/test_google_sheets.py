"""
Tests for the Google Sheets storage, with the gspread layer mocked out.
"""

from datetime import date, datetime
from unittest.mock import MagicMock

import pytest

from solo_ledger.config import GoogleSheetsSettings
from solo_ledger.models.audit import AuditEventBuilder, AuditEventType
from solo_ledger.models.documents import DocumentType
from solo_ledger.models.money import Money
from solo_ledger.services.storage import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsRecordProvider,
    NotFoundError,
    StorageError,
)


@pytest.fixture
def sheets_settings(tmp_path) -> GoogleSheetsSettings:
    credentials = tmp_path / "credentials.json"
    credentials.write_text("{}")
    return GoogleSheetsSettings(
        credentials_path=str(credentials),
        spreadsheet_id="sheet-123",
    )


@pytest.fixture
def sheets(sheets_settings):
    """A client whose worksheets are MagicMocks keyed by sheet name."""
    client = GoogleSheetsClient(sheets_settings)
    worksheets: dict[str, MagicMock] = {}

    def get_sheet(name, columns, rows=1000):
        return worksheets.setdefault(name, MagicMock())

    client.get_sheet = get_sheet
    return client, worksheets


class TestGoogleSheetsRecordProvider:
    """Tests for reading records from worksheets."""

    @pytest.mark.asyncio
    async def test_reads_invoices(self, sheets):
        client, worksheets = sheets
        provider = GoogleSheetsRecordProvider(client)
        worksheets["Invoices"] = MagicMock()
        worksheets["Invoices"].get_all_records.return_value = [
            {
                "id": "inv-001",
                "type": "invoice",
                "number": "FAC-2025-001",
                "client_id": "cli-1",
                "date": "2025-02-01",
                "due_date": "",
                "updated_at": "",
                "subtotal": 1000,
                "tax_amount": 200,
                "total": 1200,
                "status": "sent",
                "linked_document_id": "",
            },
            {key: "" for key in ("id", "type", "number")},  # blank row
        ]

        invoices = await provider.get_invoices()

        assert len(invoices) == 1
        assert invoices[0].type == DocumentType.INVOICE
        assert invoices[0].date == date(2025, 2, 1)
        assert invoices[0].total == Money("1200")
        assert invoices[0].due_date is None

    @pytest.mark.asyncio
    async def test_invalid_row_raises_storage_error(self, sheets):
        client, worksheets = sheets
        provider = GoogleSheetsRecordProvider(client)
        worksheets["Expenses"] = MagicMock()
        worksheets["Expenses"].get_all_records.return_value = [
            {"id": "exp-1", "date": "not a date", "amount": 10},
        ]

        with pytest.raises(StorageError, match="row 2"):
            await provider.get_expenses()

    @pytest.mark.asyncio
    async def test_api_failure_raises_storage_error(self, sheets):
        client, worksheets = sheets
        provider = GoogleSheetsRecordProvider(client)
        worksheets["Clients"] = MagicMock()
        worksheets["Clients"].get_all_records.side_effect = RuntimeError("quota")

        with pytest.raises(StorageError, match="quota"):
            await provider.get_clients()

    @pytest.mark.asyncio
    async def test_profile(self, sheets):
        client, worksheets = sheets
        provider = GoogleSheetsRecordProvider(client)
        worksheets["Profile"] = MagicMock()
        worksheets["Profile"].get_all_records.return_value = [
            {"company_name": "Atelier", "siret": "12345678900012", "is_vat_exempt": "FALSE"},
        ]

        profile = await provider.get_profile()
        assert profile.is_vat_exempt is False
        assert profile.siret == "12345678900012"

    @pytest.mark.asyncio
    async def test_missing_profile(self, sheets):
        client, worksheets = sheets
        provider = GoogleSheetsRecordProvider(client)
        worksheets["Profile"] = MagicMock()
        worksheets["Profile"].get_all_records.return_value = []

        with pytest.raises(NotFoundError):
            await provider.get_profile()


class TestGoogleSheetsAuditStorage:
    """Tests for audit persistence in a worksheet."""

    @pytest.mark.asyncio
    async def test_append_event(self, sheets):
        client, worksheets = sheets
        storage = GoogleSheetsAuditStorage(client)
        event = AuditEventBuilder.fec_generated("f.txt", 3, "all")

        assert await storage.append_event(event) is True
        row = worksheets["AuditLog"].append_row.call_args.args[0]
        assert row == event.to_sheets_row()

    @pytest.mark.asyncio
    async def test_append_failure_returns_false(self, sheets):
        client, worksheets = sheets
        storage = GoogleSheetsAuditStorage(client)
        worksheets["AuditLog"] = MagicMock()
        worksheets["AuditLog"].append_row.side_effect = RuntimeError("offline")

        event = AuditEventBuilder.fec_generated("f.txt", 3, "all")
        assert await storage.append_event(event) is False

    @pytest.mark.asyncio
    async def test_reads_back_events(self, sheets):
        client, worksheets = sheets
        storage = GoogleSheetsAuditStorage(client)
        first = AuditEventBuilder.ledger_generated(3, 1).model_copy(
            update={"timestamp": datetime(2025, 2, 1, 10, 0)}
        )
        second = AuditEventBuilder.fec_generated(
            "f.txt", 3, "all", correlation_id=first.event_id
        ).model_copy(update={"timestamp": datetime(2025, 2, 1, 10, 5)})
        worksheets["AuditLog"] = MagicMock()
        worksheets["AuditLog"].get_all_values.return_value = [
            ["event_id", "timestamp"],  # header
            first.to_sheets_row(),
            ["garbage", "not-a-timestamp"],
            second.to_sheets_row(),
        ]

        recent = await storage.get_recent_events()
        assert [e.event_id for e in recent] == [second.event_id, first.event_id]

        related = await storage.get_events_by_correlation_id(first.event_id)
        assert len(related) == 1
        assert related[0].event_type == AuditEventType.FEC_GENERATED
        assert related[0].details == {"entry_count": 3, "period": "all"}
