"""
Ledger Models

An AccountingEntry is one posting line of the double-entry ledger.

DESIGN DECISION: Entries are DERIVED, never stored. They are recomputed from
the current invoices and expenses on every request, so the models are frozen:
nothing downstream may patch a posting after the generator emitted it.
"""

from datetime import date
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from solo_ledger.models.money import Money


class JournalCode(str, Enum):
    """
    Journal codes of the French PCG used in the FEC.
    """
    SALES = "VT"
    PURCHASES = "AC"
    BANK = "BQ"
    MISCELLANEOUS = "OD"


class EntrySide(str, Enum):
    """Which column of the ledger a posting hits."""
    DEBIT = "debit"
    CREDIT = "credit"

    @property
    def opposite(self) -> "EntrySide":
        return EntrySide.CREDIT if self is EntrySide.DEBIT else EntrySide.DEBIT


class AccountingEntry(BaseModel):
    """
    A single posting line.

    CRITICAL: debit and credit are both non-negative and at most one of them
    is nonzero. Within one source document the debits equal the credits.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Unique line id, e.g. '<doc id>-411'")
    source_document_id: str = Field(
        ...,
        description="Invoice or expense this line was generated from",
    )
    date: date
    journal: JournalCode
    journal_label: str
    account_number: str = Field(..., min_length=1, max_length=20)
    account_label: str
    aux_account_number: Optional[str] = Field(
        default=None,
        description="Third-party auxiliary account (CompteAuxNum)",
    )
    aux_account_label: Optional[str] = None
    debit: Money = Field(default_factory=Money.zero)
    credit: Money = Field(default_factory=Money.zero)
    label: str = Field(..., description="Narrative label (EcritureLib)")
    reference: str = Field(..., description="Supporting document ref (PieceRef)")
    lettering: Optional[str] = Field(
        default=None,
        description="Reconciliation tag (EcritureLet)",
    )

    @model_validator(mode='after')
    def validate_sides(self) -> 'AccountingEntry':
        """Enforce the one-sided, non-negative posting rule."""
        if self.debit.is_negative() or self.credit.is_negative():
            raise ValueError("Debit and credit must be non-negative")
        if not self.debit.is_zero() and not self.credit.is_zero():
            raise ValueError("A posting cannot have both a debit and a credit")
        return self

    @property
    def side(self) -> EntrySide:
        return EntrySide.CREDIT if self.credit.is_positive() else EntrySide.DEBIT

    @property
    def amount(self) -> Money:
        return self.credit if self.credit.is_positive() else self.debit

    def swapped(self) -> "AccountingEntry":
        """Same line with debit and credit exchanged."""
        return self.model_copy(update={"debit": self.credit, "credit": self.debit})
