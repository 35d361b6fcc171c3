"""
Business Document Models for Solo Ledger

These models define the strict schemas for the records supplied by the
domain record provider (invoices, expenses, clients, suppliers and the
user's fiscal profile). They are designed to:
1. Enforce type safety at the boundary
2. Provide clear validation error messages
3. Carry amounts as Money, never floats

DESIGN DECISION: Input-shape errors are caught HERE, when records are built.
The ledger generator downstream trusts these models and has no error path
of its own.
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
)

from solo_ledger.models.money import Money


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class DocumentType(str, Enum):
    """
    Sales document types.

    Only INVOICE and CREDIT_NOTE are accounting documents. Quotes and orders
    are commercial documents and never reach the ledger.
    """
    INVOICE = "invoice"
    QUOTE = "quote"
    ORDER = "order"
    CREDIT_NOTE = "credit_note"


class InvoiceStatus(str, Enum):
    """Lifecycle status of a sales document."""
    DRAFT = "draft"
    SENT = "sent"
    PAID = "paid"
    CANCELLED = "cancelled"
    ACCEPTED = "accepted"   # quotes
    REJECTED = "rejected"   # quotes


class ExpenseStatus(str, Enum):
    """
    Expense status.

    CRITICAL: An expense is never deleted. Cancelling it flips the status
    and adds an explicit reversal record.
    """
    VALIDATED = "validated"
    CANCELLED = "cancelled"


class ActivityType(str, Enum):
    """Business activity, drives the revenue account."""
    SALES = "sales"          # goods
    SERVICES = "services"
    MIXED = "mixed"


# =============================================================================
# REFERENCE ENTITIES
# =============================================================================

class Client(BaseModel):
    """
    A customer.

    Only `id` and `name` matter to the ledger (display name and auxiliary
    account); the rest is carried for completeness.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = None
    address: Optional[str] = None
    country: str = "FR"
    siret: Optional[str] = None
    tva_number: Optional[str] = None


class Supplier(BaseModel):
    """A supplier of goods or services."""
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = None
    siret: Optional[str] = None
    vat_number: Optional[str] = None
    country: str = "FR"


class UserFiscalProfile(BaseModel):
    """
    Fiscal settings of the entrepreneur.

    Defaults match a fresh micro-entreprise: VAT exempt (franchise en base),
    services activity, euros.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    company_name: str = Field(default="", max_length=200)
    siret: Optional[str] = Field(
        default=None,
        description="SIRET number; its first 9 digits (SIREN) name the FEC file",
    )
    is_vat_exempt: bool = Field(
        default=True,
        description="Franchise en base de TVA: no VAT postings at all",
    )
    activity_type: ActivityType = ActivityType.SERVICES
    currency: str = Field(default="EUR", min_length=3, max_length=3)


# =============================================================================
# ACCOUNTING DOCUMENTS
# =============================================================================

class Invoice(BaseModel):
    """
    A sales document (invoice, credit note, quote or order).

    Amounts are in major units. `subtotal` is optional: when missing, the
    total is used as the revenue base.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    type: DocumentType = Field(
        default=DocumentType.INVOICE,
        description="Document type",
    )
    number: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Human-readable number, e.g. FAC-2025-001",
    )
    client_id: str = Field(..., description="Reference to a Client")
    # issue date; no default so the name keeps pointing at the type below
    date: date
    due_date: Optional[date] = None
    updated_at: Optional[Union[datetime, date]] = Field(
        default=None,
        description="Last update; used as payment date once paid",
    )
    subtotal: Optional[Money] = None
    tax_amount: Money = Field(default_factory=Money.zero)
    total: Money
    status: InvoiceStatus = InvoiceStatus.DRAFT
    linked_document_id: Optional[str] = Field(
        default=None,
        description="Invoice a credit note refers to",
    )

    @property
    def revenue_base(self) -> Money:
        """Amount excluding tax (falls back to total)."""
        return self.subtotal if self.subtotal is not None else self.total

    @property
    def payment_date(self) -> date:
        """Date the payment is booked at: last update, else issue date."""
        if isinstance(self.updated_at, datetime):
            return self.updated_at.date()
        if self.updated_at is not None:
            return self.updated_at
        return self.date


class Expense(BaseModel):
    """
    A purchase expense.

    `amount` is VAT-inclusive. A reversal record (see `reversal_of`) carries
    negated amounts.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    date: date
    description: str = Field(default="", max_length=500)
    amount: Money = Field(..., description="Amount including VAT")
    vat_amount: Money = Field(default_factory=Money.zero)
    category: str = Field(default="", description="Free-text category")
    supplier_id: Optional[str] = None
    status: ExpenseStatus = ExpenseStatus.VALIDATED
    reversal_of: Optional[str] = Field(
        default=None,
        description="ID of the expense this record reverses",
    )
    created_at: Optional[datetime] = None

    @model_validator(mode='after')
    def validate_reversal(self) -> 'Expense':
        """An expense cannot reverse itself."""
        if self.reversal_of is not None and self.reversal_of == self.id:
            raise ValueError("An expense cannot be its own reversal")
        return self

    @property
    def is_cancelled(self) -> bool:
        return self.status == ExpenseStatus.CANCELLED

    @property
    def amount_excluding_tax(self) -> Money:
        return self.amount - self.vat_amount
