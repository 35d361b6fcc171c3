"""Ledger generation package."""

from solo_ledger.accounting.chart import DEFAULT_CHART, AccountRef, ChartOfAccounts
from solo_ledger.accounting.generator import LedgerGenerator, generate_journal_entries
from solo_ledger.accounting.reports import (
    AccountBalance,
    Period,
    PeriodSummary,
    account_balances,
    expenses_by_category,
    filter_by_period,
    group_by_document,
    is_balanced,
    search_entries,
    summarize,
    totals,
    unbalanced_documents,
)
from solo_ledger.accounting.reversal import AlreadyCancelledError, cancel_expense

__all__ = [
    # Chart of accounts
    "DEFAULT_CHART",
    "AccountRef",
    "ChartOfAccounts",
    # Generator
    "LedgerGenerator",
    "generate_journal_entries",
    # Reports
    "AccountBalance",
    "Period",
    "PeriodSummary",
    "account_balances",
    "expenses_by_category",
    "filter_by_period",
    "group_by_document",
    "is_balanced",
    "search_entries",
    "summarize",
    "totals",
    "unbalanced_documents",
    # Cancellation
    "AlreadyCancelledError",
    "cancel_expense",
]
