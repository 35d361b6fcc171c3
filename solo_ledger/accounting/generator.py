"""
Ledger Generator

Turns business documents into double-entry postings (French PCG):

SALES JOURNAL (VT), per invoice / credit note:
    411 Clients          <-> 706/707 Revenue + 44571 VAT collected
    and, once paid, a BANK JOURNAL (BQ) pair 512 Bank <-> 411 Clients

PURCHASES JOURNAL (AC), per expense:
    6xx Charge + 44566 VAT deductible <-> 401 Suppliers
    and, unless cancelled, a BANK JOURNAL (BQ) pair 401 Suppliers <-> 512 Bank

DESIGN DECISION: The generator is a PURE function of its inputs.
- No I/O, no shared state, inputs are never mutated
- No validation: records arrive as validated pydantic models
- Missing clients/suppliers degrade to sentinel names, never raise

A credit note is an invoice with every side swapped. A cancelled expense is
the same expense with every side swapped and no disbursement. Both rules are
expressed as a single "side" decision per document, so the lines themselves
are always built the same way.
"""

from typing import Iterable, Mapping, Optional

import structlog

from solo_ledger.accounting.chart import DEFAULT_CHART, AccountRef, ChartOfAccounts
from solo_ledger.models.documents import (
    Client,
    DocumentType,
    Expense,
    Invoice,
    InvoiceStatus,
    Supplier,
    UserFiscalProfile,
)
from solo_ledger.models.ledger import AccountingEntry, EntrySide, JournalCode
from solo_ledger.models.money import Money


logger = structlog.get_logger(__name__)


# Side of the 411 client line per document type. None = not an accounting
# document. Every DocumentType must appear here.
CLIENT_SIDE_BY_DOCUMENT_TYPE: Mapping[DocumentType, Optional[EntrySide]] = {
    DocumentType.INVOICE: EntrySide.DEBIT,
    DocumentType.CREDIT_NOTE: EntrySide.CREDIT,
    DocumentType.QUOTE: None,
    DocumentType.ORDER: None,
}

DOCUMENT_WORDS: Mapping[DocumentType, str] = {
    DocumentType.INVOICE: "Facture",
    DocumentType.CREDIT_NOTE: "Avoir",
}

EXPENSE_REFERENCE_LENGTH = 8
AUX_ACCOUNT_LENGTH = 8


def lettering_for(number: str) -> str:
    """Reconciliation tag: trailing '-' segment of a document number."""
    return number.split("-")[-1]


def aux_account_number(party_id: Optional[str]) -> Optional[str]:
    """Auxiliary account number derived from a client/supplier id."""
    if not party_id:
        return None
    return party_id[:AUX_ACCOUNT_LENGTH].upper()


class LedgerGenerator:
    """
    Generates AccountingEntry lines from invoices and expenses.

    The reference collections (clients, suppliers) and the chart of accounts
    are bound at construction; `generate` can then be called on any batch of
    documents.
    """

    def __init__(
        self,
        profile: UserFiscalProfile,
        clients: Iterable[Client] = (),
        suppliers: Iterable[Supplier] = (),
        chart: ChartOfAccounts = DEFAULT_CHART,
    ):
        self._profile = profile
        self._chart = chart
        self._clients = {client.id: client for client in clients}
        self._suppliers = {supplier.id: supplier for supplier in suppliers}

    def generate(
        self,
        invoices: Iterable[Invoice],
        expenses: Iterable[Expense],
    ) -> list[AccountingEntry]:
        """
        Generate the full ledger.

        Returns entries sorted by date. The sort is stable, so lines of the
        same document keep their emission order.
        """
        entries: list[AccountingEntry] = []
        for invoice in invoices:
            entries.extend(self.entries_for_invoice(invoice))
        for expense in expenses:
            entries.extend(self.entries_for_expense(expense))

        return sorted(entries, key=lambda entry: entry.date)

    # ------------------------------------------------------------------
    # Sales
    # ------------------------------------------------------------------

    def entries_for_invoice(self, invoice: Invoice) -> list[AccountingEntry]:
        """Postings for one sales document (empty for quotes and orders)."""
        client_side = CLIENT_SIDE_BY_DOCUMENT_TYPE[invoice.type]
        if client_side is None:
            return []

        chart = self._chart
        client = self._clients.get(invoice.client_id)
        client_name = client.name if client else chart.unknown_client_name
        aux_number = aux_account_number(client.id) if client else None
        revenue_side = client_side.opposite
        narrative = f"{DOCUMENT_WORDS[invoice.type]} {invoice.number} - {client_name}"

        sales_line = dict(
            source_document_id=invoice.id,
            date=invoice.date,
            journal=JournalCode.SALES,
            journal_label=chart.journal_label(JournalCode.SALES),
            reference=invoice.number,
        )

        entries = [
            self._post(
                id=f"{invoice.id}-411",
                side=client_side,
                amount=invoice.total,
                account=chart.clients,
                aux_account_number=aux_number,
                aux_account_label=client_name,
                label=narrative,
                **sales_line,
            ),
            self._post(
                id=f"{invoice.id}-70x",
                side=revenue_side,
                amount=invoice.revenue_base,
                account=chart.revenue_account_for(self._profile.activity_type),
                label=narrative,
                **sales_line,
            ),
        ]

        if not self._profile.is_vat_exempt and invoice.tax_amount.is_positive():
            entries.append(self._post(
                id=f"{invoice.id}-4457",
                side=revenue_side,
                amount=invoice.tax_amount,
                account=chart.vat_collected,
                label=f"TVA sur {invoice.number}",
                **sales_line,
            ))

        if invoice.status == InvoiceStatus.PAID:
            entries.extend(self._settlement_entries(
                invoice, client_side, client_name, aux_number,
            ))

        return entries

    def _settlement_entries(
        self,
        invoice: Invoice,
        client_side: EntrySide,
        client_name: str,
        aux_number: Optional[str],
    ) -> list[AccountingEntry]:
        """Bank receipt (or refund, for a credit note) clearing the 411 line."""
        chart = self._chart
        bank_line = dict(
            source_document_id=invoice.id,
            date=invoice.payment_date,
            journal=JournalCode.BANK,
            journal_label=chart.journal_label(JournalCode.BANK),
            reference=invoice.number,
            lettering=lettering_for(invoice.number),
        )
        return [
            self._post(
                id=f"{invoice.id}-512-pay",
                side=client_side,
                amount=invoice.total,
                account=chart.bank,
                label=f"Règlement Client {client_name} - {invoice.number}",
                **bank_line,
            ),
            self._post(
                id=f"{invoice.id}-411-pay",
                side=client_side.opposite,
                amount=invoice.total,
                account=chart.clients,
                aux_account_number=aux_number,
                aux_account_label=client_name,
                label=f"Paiement reçu - Lettrage {invoice.number}",
                **bank_line,
            ),
        ]

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------

    def entries_for_expense(self, expense: Expense) -> list[AccountingEntry]:
        """Postings for one expense (charge, VAT, supplier, payment)."""
        chart = self._chart
        reference = expense.id[:EXPENSE_REFERENCE_LENGTH]
        charge_side = EntrySide.CREDIT if expense.is_cancelled else EntrySide.DEBIT
        supplier = self._suppliers.get(expense.supplier_id) if expense.supplier_id else None
        supplier_name = supplier.name if supplier else chart.unknown_supplier_name
        aux_number = aux_account_number(supplier.id) if supplier else None

        if not chart.is_mapped_category(expense.category):
            logger.debug(
                "unmapped_expense_category",
                expense_id=expense.id,
                category=expense.category,
                account=chart.default_charge.number,
            )

        purchase_line = dict(
            source_document_id=expense.id,
            date=expense.date,
            journal=JournalCode.PURCHASES,
            journal_label=chart.journal_label(JournalCode.PURCHASES),
            reference=reference,
        )
        prefix = "[ANNULÉ] " if expense.is_cancelled else ""

        entries = [
            self._post(
                id=f"{expense.id}-6x",
                side=charge_side,
                amount=expense.amount_excluding_tax,
                account=chart.charge_account_for(expense.category),
                label=f"{prefix}{expense.description}",
                **purchase_line,
            ),
        ]

        # nonzero rather than positive: reversal records carry negative VAT
        if not expense.vat_amount.is_zero():
            entries.append(self._post(
                id=f"{expense.id}-4456",
                side=charge_side,
                amount=expense.vat_amount,
                account=chart.vat_deductible,
                label=f"TVA sur {expense.description}",
                **purchase_line,
            ))

        entries.append(self._post(
            id=f"{expense.id}-401",
            side=charge_side.opposite,
            amount=expense.amount,
            account=chart.suppliers,
            aux_account_number=aux_number,
            aux_account_label=supplier_name,
            label=f"Fct / Note : {expense.description}",
            **purchase_line,
        ))

        if not expense.is_cancelled:
            bank_line = dict(
                source_document_id=expense.id,
                date=expense.date,
                journal=JournalCode.BANK,
                journal_label=chart.journal_label(JournalCode.BANK),
                reference=reference,
            )
            entries.append(self._post(
                id=f"{expense.id}-512-out",
                side=EntrySide.CREDIT,
                amount=expense.amount,
                account=chart.bank,
                label=f"Paiement Fournisseur : {expense.description}",
                **bank_line,
            ))
            entries.append(self._post(
                id=f"{expense.id}-401-clear",
                side=EntrySide.DEBIT,
                amount=expense.amount,
                account=chart.suppliers,
                aux_account_number=aux_number,
                aux_account_label=supplier_name,
                label=f"Règlement de la dépense {reference}",
                **bank_line,
            ))

        return entries

    # ------------------------------------------------------------------
    # Posting
    # ------------------------------------------------------------------

    @staticmethod
    def _post(
        side: EntrySide,
        amount: Money,
        account: AccountRef,
        **fields,
    ) -> AccountingEntry:
        """
        Build one posting line.

        A negative amount is booked as its absolute value on the opposite
        side, so debit and credit always stay non-negative.
        """
        if amount.is_negative():
            side, amount = side.opposite, -amount
        return AccountingEntry(
            account_number=account.number,
            account_label=account.label,
            debit=amount if side is EntrySide.DEBIT else Money.zero(),
            credit=amount if side is EntrySide.CREDIT else Money.zero(),
            **fields,
        )


def generate_journal_entries(
    invoices: Iterable[Invoice],
    expenses: Iterable[Expense],
    profile: UserFiscalProfile,
    clients: Iterable[Client] = (),
    suppliers: Iterable[Supplier] = (),
    chart: ChartOfAccounts = DEFAULT_CHART,
) -> list[AccountingEntry]:
    """
    Generate the ledger for a batch of documents.

    Convenience wrapper around LedgerGenerator.
    """
    generator = LedgerGenerator(
        profile=profile,
        clients=clients,
        suppliers=suppliers,
        chart=chart,
    )
    return generator.generate(invoices, expenses)
