"""Shared fixtures: a small set of business records reused across test modules."""

from datetime import date

import pytest

from solo_ledger.models.documents import (
    ActivityType,
    Client,
    DocumentType,
    Expense,
    Invoice,
    InvoiceStatus,
    Supplier,
    UserFiscalProfile,
)


@pytest.fixture
def vat_profile() -> UserFiscalProfile:
    """A VAT-registered services business."""
    return UserFiscalProfile(
        company_name="Atelier Dupont",
        siret="123 456 789 00012",
        is_vat_exempt=False,
        activity_type=ActivityType.SERVICES,
    )


@pytest.fixture
def exempt_profile() -> UserFiscalProfile:
    """Default micro-entreprise profile (franchise en base de TVA)."""
    return UserFiscalProfile(company_name="Atelier Dupont", siret="12345678900012")


@pytest.fixture
def client() -> Client:
    return Client(id="cli-abc123456", name="ACME")


@pytest.fixture
def supplier() -> Supplier:
    return Supplier(id="sup-cloud01", name="Cloud Co")


@pytest.fixture
def invoice(client) -> Invoice:
    """Draft invoice: 1000 HT + 200 VAT."""
    return Invoice(
        id="inv-001",
        type=DocumentType.INVOICE,
        number="FAC-2025-001",
        client_id=client.id,
        date=date(2025, 2, 1),
        subtotal="1000",
        tax_amount="200",
        total="1200",
        status=InvoiceStatus.DRAFT,
    )


@pytest.fixture
def expense(supplier) -> Expense:
    """Validated SaaS expense: 120 TTC including 20 VAT."""
    return Expense(
        id="exp-12345678-saas",
        date=date(2025, 2, 3),
        description="Abonnement SaaS",
        amount="120",
        vat_amount="20",
        category="Services",
        supplier_id=supplier.id,
    )
