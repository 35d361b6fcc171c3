"""
Integration tests for the export and cancellation flows.

Everything runs against in-memory storage; no Google Sheets access.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from solo_ledger.accounting.reports import Period
from solo_ledger.accounting.reversal import AlreadyCancelledError
from solo_ledger.audit import AuditLogger
from solo_ledger.config import LedgerSettings, get_settings, validate_all_settings
from solo_ledger.fec import FEC_COLUMNS
from solo_ledger.models.audit import AuditEventType
from solo_ledger.models.documents import ExpenseStatus, InvoiceStatus
from solo_ledger.orchestrator import (
    ExpenseCancellationFlow,
    ExportError,
    FecExportFlow,
    create_export_flow,
)
from solo_ledger.services.storage import (
    InMemoryAuditStorage,
    InMemoryRecordProvider,
    NotFoundError,
    StorageError,
)


class BrokenRecordProvider(InMemoryRecordProvider):
    """Provider whose backing store is unreachable."""

    async def get_invoices(self):
        raise StorageError("spreadsheet unreachable")


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage) -> AuditLogger:
    return AuditLogger(audit_storage)


@pytest.fixture
def settings(tmp_path) -> LedgerSettings:
    return LedgerSettings(export_dir=tmp_path / "exports", default_period=Period.ALL)


@pytest.fixture
def provider(vat_profile, invoice, expense, client, supplier) -> InMemoryRecordProvider:
    paid = invoice.model_copy(update={
        "id": "inv-002",
        "number": "FAC-2025-002",
        "date": date(2025, 4, 2),
        "status": InvoiceStatus.PAID,
    })
    return InMemoryRecordProvider(
        profile=vat_profile,
        invoices=[invoice, paid],
        expenses=[expense],
        clients=[client],
        suppliers=[supplier],
    )


def event_types(storage: InMemoryAuditStorage) -> list[AuditEventType]:
    return [event.event_type for event in storage.events]


class TestFecExportFlow:
    """Tests for building and writing the FEC file."""

    @pytest.mark.asyncio
    async def test_build(self, provider, settings):
        flow = FecExportFlow(provider, settings=settings)
        fec = await flow.build(export_date=date(2025, 6, 30))

        assert fec.filename == "123456789FEC20250630.txt"
        assert fec.entry_count == 13
        assert fec.document_count == 3
        assert fec.period == Period.ALL
        assert fec.content.split("\r\n")[0] == "\t".join(FEC_COLUMNS)
        assert len(fec.content.split("\r\n")) == 14
        assert fec.data == fec.content.encode("utf-8")

    @pytest.mark.asyncio
    async def test_build_filters_by_period(self, provider, settings):
        flow = FecExportFlow(provider, settings=settings)
        fec = await flow.build(
            period=Period.QUARTER,
            reference_date=date(2025, 2, 10),
        )

        # Q1 2025: the February invoice and expense, not the April invoice
        assert fec.entry_count == 8
        assert fec.document_count == 2
        assert "FAC-2025-002" not in fec.content

    @pytest.mark.asyncio
    async def test_export_writes_file(self, provider, settings, audit_logger, audit_storage):
        flow = FecExportFlow(provider, audit_logger=audit_logger, settings=settings)
        path = await flow.export(export_date=date(2025, 6, 30))

        assert path == settings.export_dir / "123456789FEC20250630.txt"
        data = path.read_bytes()
        assert data.startswith(b"JournalCode\tJournalLib\t")
        assert b"\r\n" in data
        assert "Opérations".encode("utf-8") not in data  # no OD lines
        assert "Règlement".encode("utf-8") in data

        assert event_types(audit_storage) == [
            AuditEventType.LEDGER_GENERATED,
            AuditEventType.FEC_GENERATED,
        ]
        generated = audit_storage.events[-1]
        assert generated.resource_id == path.name
        assert generated.details == {"entry_count": 13, "period": "all"}
        assert generated.correlation_id == audit_storage.events[0].correlation_id

    @pytest.mark.asyncio
    async def test_export_to_explicit_directory(self, provider, settings, tmp_path):
        flow = FecExportFlow(provider, settings=settings)
        path = await flow.export(output_dir=tmp_path / "elsewhere")
        assert path.parent == tmp_path / "elsewhere"
        assert path.exists()

    @pytest.mark.asyncio
    async def test_export_write_failure(self, provider, settings, audit_logger, audit_storage, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")
        flow = FecExportFlow(provider, audit_logger=audit_logger, settings=settings)

        with pytest.raises(ExportError):
            await flow.export(output_dir=blocker)

        assert event_types(audit_storage)[-1] == AuditEventType.FEC_EXPORT_FAILED
        assert audit_storage.events[-1].details == {"stage": "write"}

    @pytest.mark.asyncio
    async def test_storage_failure_is_audited_and_raised(self, vat_profile, settings, audit_logger, audit_storage):
        flow = FecExportFlow(
            BrokenRecordProvider(profile=vat_profile),
            audit_logger=audit_logger,
            settings=settings,
        )

        with pytest.raises(StorageError, match="unreachable"):
            await flow.export()

        assert event_types(audit_storage) == [
            AuditEventType.EXTERNAL_SERVICE_ERROR,
            AuditEventType.FEC_EXPORT_FAILED,
        ]
        assert audit_storage.events[-1].details == {"stage": "fetch"}
        assert not settings.export_dir.exists()

    @pytest.mark.asyncio
    async def test_missing_profile(self, settings):
        flow = FecExportFlow(InMemoryRecordProvider(), settings=settings)
        with pytest.raises(NotFoundError):
            await flow.build()

    @pytest.mark.asyncio
    async def test_unbalanced_documents_are_reported(
        self, exempt_profile, invoice, settings, audit_logger, audit_storage
    ):
        """An exempt invoice still carrying tax is exported, with an audit error."""
        provider = InMemoryRecordProvider(profile=exempt_profile, invoices=[invoice])
        flow = FecExportFlow(provider, audit_logger=audit_logger, settings=settings)

        fec = await flow.build()

        assert fec.entry_count == 2
        error = audit_storage.events[0]
        assert error.event_type == AuditEventType.SYSTEM_ERROR
        assert error.details == {"document_ids": ["inv-001"]}

    @pytest.mark.asyncio
    async def test_empty_books(self, vat_profile, settings):
        flow = FecExportFlow(InMemoryRecordProvider(profile=vat_profile), settings=settings)
        fec = await flow.build()
        assert fec.entry_count == 0
        assert fec.content == "\t".join(FEC_COLUMNS)


class TestExpenseCancellationFlow:
    """Tests for the audited cancellation flow."""

    @pytest.mark.asyncio
    async def test_cancel(self, expense, audit_logger, audit_storage):
        flow = ExpenseCancellationFlow(audit_logger)
        cancelled, reversal = await flow.cancel(expense, on_date=date(2025, 3, 1))

        assert cancelled.status == ExpenseStatus.CANCELLED
        assert reversal.reversal_of == expense.id

        event = audit_storage.events[0]
        assert event.event_type == AuditEventType.EXPENSE_CANCELLED
        assert event.resource_id == expense.id
        assert event.details == {"reversal_id": reversal.id, "amount": "120.00"}

    @pytest.mark.asyncio
    async def test_cancel_twice(self, expense):
        flow = ExpenseCancellationFlow()
        cancelled, _ = await flow.cancel(expense)
        with pytest.raises(AlreadyCancelledError):
            await flow.cancel(cancelled)


class TestCreateExportFlow:
    """Tests for the Google Sheets wiring factory."""

    @pytest.fixture
    def sheets_env(self, monkeypatch, tmp_path):
        credentials = tmp_path / "credentials.json"
        credentials.write_text("{}")
        monkeypatch.setenv("GOOGLE_SHEETS_CREDENTIALS_PATH", str(credentials))
        monkeypatch.setenv("GOOGLE_SHEETS_SPREADSHEET_ID", "sheet-123")
        monkeypatch.setenv("LEDGER_EXPORT_DIR", str(tmp_path / "fec"))
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()

    def test_wires_flow_from_settings(self, sheets_env, tmp_path):
        """No network call happens until an export runs."""
        flow = create_export_flow(use_audit_storage=False)
        assert isinstance(flow, FecExportFlow)
        assert validate_all_settings() == {"google_sheets": True, "ledger": True}

    def test_missing_sheets_settings(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_SHEETS_CREDENTIALS_PATH", raising=False)
        monkeypatch.delenv("GOOGLE_SHEETS_SPREADSHEET_ID", raising=False)
        get_settings.cache_clear()

        results = validate_all_settings()
        assert results["google_sheets"] is False
        assert results["ledger"] is True
        with pytest.raises(ValidationError):
            create_export_flow()
        get_settings.cache_clear()
