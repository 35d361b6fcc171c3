"""
Ledger Reports

Read-only views over a generated ledger:
- period filtering of the source documents (month / quarter / year / all)
- debit/credit totals and the balance check
- trial balance per account
- entry search, grouping by source document
- the period summary: revenue, expenses, net result, VAT position

These never mutate entries and never persist anything: like the ledger
itself, every report is recomputed from the documents on demand.
"""

from collections import OrderedDict
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Sequence, TypeVar, Union

from pydantic import BaseModel, ConfigDict

from solo_ledger.models.documents import DocumentType, Expense, Invoice, InvoiceStatus
from solo_ledger.models.ledger import AccountingEntry
from solo_ledger.models.money import Money


class Period(str, Enum):
    """Reporting period, relative to a reference date."""
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"
    ALL = "all"


Document = TypeVar("Document", bound=Union[Invoice, Expense])


def in_period(day: date, period: Period, reference_date: date) -> bool:
    """Is `day` inside the period containing `reference_date`?"""
    if period == Period.ALL:
        return True
    if day.year != reference_date.year:
        return False
    if period == Period.YEAR:
        return True
    if period == Period.QUARTER:
        return (day.month - 1) // 3 == (reference_date.month - 1) // 3
    return day.month == reference_date.month


def filter_by_period(
    documents: Iterable[Document],
    period: Period,
    reference_date: Optional[date] = None,
) -> list[Document]:
    """Keep the invoices/expenses whose own date falls in the period."""
    reference_date = reference_date or date.today()
    return [doc for doc in documents if in_period(doc.date, period, reference_date)]


# =============================================================================
# TOTALS
# =============================================================================

def totals(entries: Iterable[AccountingEntry]) -> tuple[Money, Money]:
    """Return (total debit, total credit)."""
    debit = Money.zero()
    credit = Money.zero()
    for entry in entries:
        debit += entry.debit
        credit += entry.credit
    return debit, credit


def is_balanced(entries: Iterable[AccountingEntry]) -> bool:
    debit, credit = totals(entries)
    return debit == credit


def group_by_document(
    entries: Iterable[AccountingEntry],
) -> "OrderedDict[str, list[AccountingEntry]]":
    """Entries per source document, in first-seen order."""
    grouped: OrderedDict[str, list[AccountingEntry]] = OrderedDict()
    for entry in entries:
        grouped.setdefault(entry.source_document_id, []).append(entry)
    return grouped


def unbalanced_documents(entries: Iterable[AccountingEntry]) -> list[str]:
    """IDs of the source documents whose lines do not balance."""
    return [
        document_id
        for document_id, lines in group_by_document(entries).items()
        if not is_balanced(lines)
    ]


# =============================================================================
# TRIAL BALANCE
# =============================================================================

class AccountBalance(BaseModel):
    """One row of the trial balance."""
    model_config = ConfigDict(frozen=True)

    account_number: str
    account_label: str
    debit: Money
    credit: Money

    @property
    def balance(self) -> Money:
        """Debit minus credit (positive = debit balance)."""
        return self.debit - self.credit


def account_balances(entries: Iterable[AccountingEntry]) -> list[AccountBalance]:
    """
    Trial balance: totals per account, ordered by account number.

    The label kept for an account is the first one seen.
    """
    labels: dict[str, str] = {}
    debits: dict[str, Money] = {}
    credits: dict[str, Money] = {}

    for entry in entries:
        number = entry.account_number
        labels.setdefault(number, entry.account_label)
        debits[number] = debits.get(number, Money.zero()) + entry.debit
        credits[number] = credits.get(number, Money.zero()) + entry.credit

    return [
        AccountBalance(
            account_number=number,
            account_label=labels[number],
            debit=debits[number],
            credit=credits[number],
        )
        for number in sorted(labels)
    ]


def search_entries(
    entries: Sequence[AccountingEntry],
    query: str,
) -> list[AccountingEntry]:
    """
    Filter entries by account number, narrative label or account label.

    Matching is case-insensitive; an empty query returns every entry.
    """
    needle = query.strip().lower()
    if not needle:
        return list(entries)
    return [
        entry for entry in entries
        if needle in entry.account_number
        or needle in entry.label.lower()
        or needle in entry.account_label.lower()
    ]


# =============================================================================
# PERIOD SUMMARY
# =============================================================================

VAT_PAYABLE_LABEL = "TVA à payer"
VAT_CREDIT_LABEL = "Crédit de TVA"

# Expenses recorded without a category
UNCATEGORIZED = "Autre"


class PeriodSummary(BaseModel):
    """
    Headline figures for a set of (already period-filtered) documents.

    Revenue is cash-based: only PAID invoices count, paid credit notes
    count negatively. Amounts include VAT, like the documents they come from.
    """
    model_config = ConfigDict(frozen=True)

    revenue: Money
    expenses: Money
    vat_collected: Money
    vat_deductible: Money

    @property
    def net(self) -> Money:
        """Revenue minus expenses."""
        return self.revenue - self.expenses

    @property
    def vat_balance(self) -> Money:
        """VAT collected minus VAT deductible (positive = due to the state)."""
        return self.vat_collected - self.vat_deductible

    @property
    def vat_balance_label(self) -> str:
        return VAT_PAYABLE_LABEL if not self.vat_balance.is_negative() else VAT_CREDIT_LABEL


def summarize(
    invoices: Iterable[Invoice],
    expenses: Iterable[Expense],
) -> PeriodSummary:
    """
    Compute the period summary.

    Quotes and orders are ignored. Every expense counts, cancelled ones
    included: the reversal record carries the negated amounts, so a
    cancelled expense nets to zero.
    """
    revenue = Money.zero()
    vat_collected = Money.zero()
    for invoice in invoices:
        if invoice.status != InvoiceStatus.PAID:
            continue
        if invoice.type == DocumentType.INVOICE:
            revenue += invoice.total
            vat_collected += invoice.tax_amount
        elif invoice.type == DocumentType.CREDIT_NOTE:
            revenue -= invoice.total
            vat_collected -= invoice.tax_amount

    expenses = list(expenses)
    return PeriodSummary(
        revenue=revenue,
        expenses=Money.sum(expense.amount for expense in expenses),
        vat_collected=vat_collected,
        vat_deductible=Money.sum(expense.vat_amount for expense in expenses),
    )


def expenses_by_category(expenses: Iterable[Expense]) -> "OrderedDict[str, Money]":
    """Expense amounts per category, in first-seen order; blank categories go to 'Autre'."""
    breakdown: OrderedDict[str, Money] = OrderedDict()
    for expense in expenses:
        category = expense.category or UNCATEGORIZED
        breakdown[category] = breakdown.get(category, Money.zero()) + expense.amount
    return breakdown
