"""
Main Orchestrator for Solo Ledger

This module ties together the components and defines the end-to-end flows:
1. FEC export (records → ledger → FEC text → file, audited)
2. Expense cancellation (original → cancelled + reversal, audited)

DESIGN DECISION: The orchestrator is the ONLY place with side effects.
The generator and the serializer stay pure; fetching records, writing the
file and recording the audit trail all happen here. There is no partial
state to recover after a failure: the ledger can always be recomputed from
the same records.
"""

import asyncio
from datetime import date
from pathlib import Path
from typing import Optional
from uuid import UUID

import structlog
from pydantic import BaseModel, Field

from solo_ledger.accounting import (
    DEFAULT_CHART,
    ChartOfAccounts,
    LedgerGenerator,
    Period,
    cancel_expense,
    filter_by_period,
    unbalanced_documents,
)
from solo_ledger.audit import AuditLogger, configure_logging, create_correlation_id
from solo_ledger.config import LedgerSettings, get_settings
from solo_ledger.fec import encode_fec, fec_filename, serialize_fec
from solo_ledger.models.documents import Expense
from solo_ledger.services.storage import (
    GoogleSheetsAuditStorage,
    GoogleSheetsClient,
    GoogleSheetsRecordProvider,
    RecordProviderInterface,
    StorageError,
)


logger = structlog.get_logger(__name__)


class ExportError(Exception):
    """The FEC file could not be written."""
    pass


class FecExport(BaseModel):
    """A generated FEC file, ready to be saved or downloaded."""

    filename: str
    content: str
    entry_count: int = Field(ge=0)
    document_count: int = Field(ge=0)
    period: Period
    generated_on: date

    @property
    def data(self) -> bytes:
        return encode_fec(self.content)


class FecExportFlow:
    """
    Orchestrates the FEC export.

    Flow:
    1. Fetch → invoices, expenses, clients, suppliers, profile (concurrently)
    2. Filter → keep documents dated inside the requested period
    3. Generate → balanced ledger lines
    4. Serialize → FEC text
    5. Write → {SIREN}FEC{YYYYMMDD}.txt in the export directory
    6. Audit → fec_generated (or fec_export_failed)
    """

    def __init__(
        self,
        provider: RecordProviderInterface,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
        chart: ChartOfAccounts = DEFAULT_CHART,
    ):
        self._provider = provider
        self._audit_logger = audit_logger
        self._settings = settings or get_settings().ledger
        self._chart = chart

    async def build(
        self,
        period: Optional[Period] = None,
        reference_date: Optional[date] = None,
        export_date: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> FecExport:
        """
        Build the FEC content without writing anything.

        Args:
            period: Period to export (defaults to the configured one)
            reference_date: Date the period is relative to (defaults to today)
            export_date: Date stamped in the file name (defaults to today)

        Raises:
            StorageError: If the records could not be fetched
        """
        correlation_id = correlation_id or create_correlation_id()
        period = period or self._settings.default_period
        today = date.today()
        reference_date = reference_date or today
        export_date = export_date or today

        try:
            invoices, expenses, clients, suppliers, profile = await asyncio.gather(
                self._provider.get_invoices(),
                self._provider.get_expenses(),
                self._provider.get_clients(),
                self._provider.get_suppliers(),
                self._provider.get_profile(),
            )
        except StorageError as e:
            if self._audit_logger:
                await self._audit_logger.log_external_service_error(
                    service="record_provider",
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
                await self._audit_logger.log_fec_export_failed(
                    error_message=str(e),
                    stage="fetch",
                    correlation_id=correlation_id,
                )
            raise

        invoices = filter_by_period(invoices, period, reference_date)
        expenses = filter_by_period(expenses, period, reference_date)

        generator = LedgerGenerator(
            profile=profile,
            clients=clients,
            suppliers=suppliers,
            chart=self._chart,
        )
        entries = generator.generate(invoices, expenses)
        document_count = len({entry.source_document_id for entry in entries})

        unbalanced = unbalanced_documents(entries)
        if unbalanced and self._audit_logger:
            # exported as-is; the books are fixed at the source documents
            await self._audit_logger.log_error(
                error_type="unbalanced_documents",
                error_message=f"{len(unbalanced)} documents do not balance",
                details={"document_ids": unbalanced},
                correlation_id=correlation_id,
            )

        if self._audit_logger:
            await self._audit_logger.log_ledger_generated(
                entry_count=len(entries),
                document_count=document_count,
                correlation_id=correlation_id,
            )

        return FecExport(
            filename=fec_filename(profile.siret, export_date),
            content=serialize_fec(entries),
            entry_count=len(entries),
            document_count=document_count,
            period=period,
            generated_on=export_date,
        )

    async def export(
        self,
        output_dir: Optional[Path] = None,
        period: Optional[Period] = None,
        reference_date: Optional[date] = None,
        export_date: Optional[date] = None,
    ) -> Path:
        """
        Build the FEC and write it to disk.

        Returns:
            Path of the written file

        Raises:
            StorageError: If the records could not be fetched
            ExportError: If the file could not be written
        """
        correlation_id = create_correlation_id()
        fec = await self.build(
            period=period,
            reference_date=reference_date,
            export_date=export_date,
            correlation_id=correlation_id,
        )

        output_dir = Path(output_dir or self._settings.export_dir)
        path = output_dir / fec.filename
        try:
            if self._settings.create_export_dir:
                output_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(fec.data)
        except OSError as e:
            if self._audit_logger:
                await self._audit_logger.log_fec_export_failed(
                    error_message=str(e),
                    stage="write",
                    correlation_id=correlation_id,
                )
            raise ExportError(f"Could not write {path}: {e}") from e

        logger.info("fec_written", path=str(path), entry_count=fec.entry_count)

        if self._audit_logger:
            await self._audit_logger.log_fec_generated(
                filename=fec.filename,
                entry_count=fec.entry_count,
                period=fec.period.value,
                correlation_id=correlation_id,
            )

        return path


class ExpenseCancellationFlow:
    """
    Orchestrates an expense cancellation.

    Produces the cancelled original and its reversal record; persisting both
    is up to the caller's system of record.
    """

    def __init__(self, audit_logger: Optional[AuditLogger] = None):
        self._audit_logger = audit_logger

    async def cancel(
        self,
        original: Expense,
        on_date: Optional[date] = None,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[Expense, Expense]:
        """
        Cancel an expense.

        Raises:
            AlreadyCancelledError: If the expense is already cancelled
        """
        cancelled, reversal = cancel_expense(original, on_date or date.today())

        if self._audit_logger:
            await self._audit_logger.log_expense_cancelled(
                expense_id=original.id,
                reversal_id=reversal.id,
                amount=original.amount.to_fixed(),
                correlation_id=correlation_id,
            )

        return cancelled, reversal


def create_export_flow(
    use_audit_storage: bool = True,
) -> FecExportFlow:
    """
    Factory function wiring the export flow to Google Sheets.

    Args:
        use_audit_storage: Whether to persist audit events to the sheet.
                    Set to False to keep audit logging local.

    Raises:
        pydantic.ValidationError: If GOOGLE_SHEETS_* settings are missing
    """
    settings = get_settings()
    configure_logging(debug_mode=settings.ledger.debug_mode)

    sheets_client = GoogleSheetsClient(settings.google_sheets)
    provider = GoogleSheetsRecordProvider(sheets_client)

    if use_audit_storage:
        audit_logger = AuditLogger(GoogleSheetsAuditStorage(sheets_client))
    else:
        audit_logger = AuditLogger()  # Local-only logging

    return FecExportFlow(
        provider=provider,
        audit_logger=audit_logger,
        settings=settings.ledger,
    )
