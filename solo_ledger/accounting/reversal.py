"""
Expense Cancellation

DESIGN DECISION: Books are immutable. Cancelling an expense never deletes
it: the original is flagged CANCELLED and a reversal record (contre-passation)
is added, carrying the negated amounts and pointing back at the original.
"""

from datetime import date, datetime, timezone
from typing import Optional
from uuid import uuid4

from solo_ledger.models.documents import Expense, ExpenseStatus


class AlreadyCancelledError(ValueError):
    """The expense was already cancelled."""
    pass


def cancel_expense(
    original: Expense,
    on_date: date,
    reversal_id: Optional[str] = None,
) -> tuple[Expense, Expense]:
    """
    Cancel an expense.

    Args:
        original: The expense to cancel (left untouched)
        on_date: Booking date of the reversal
        reversal_id: ID for the reversal record (generated if omitted)

    Returns:
        (cancelled copy of the original, new reversal record)

    Raises:
        AlreadyCancelledError: If the expense is already cancelled
    """
    if original.is_cancelled:
        raise AlreadyCancelledError(f"Expense {original.id} is already cancelled")

    cancelled = original.model_copy(update={"status": ExpenseStatus.CANCELLED})
    reversal = Expense(
        id=reversal_id or f"rev-{uuid4()}",
        date=on_date,
        description=f"[ANNULATION] {original.description}",
        amount=-original.amount,
        vat_amount=-original.vat_amount,
        category=original.category,
        supplier_id=original.supplier_id,
        status=ExpenseStatus.VALIDATED,
        reversal_of=original.id,
        created_at=datetime.now(timezone.utc),
    )
    return cancelled, reversal
