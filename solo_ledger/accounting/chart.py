"""
Chart of Accounts

DESIGN DECISION: Account numbers, the expense category table and journal
labels are CONFIGURATION, not code. The generator receives a ChartOfAccounts
and never branches on a category name itself, so a new category (or another
jurisdiction's chart) is a data change.

DEFAULT_CHART is the French Plan Comptable Général subset a micro-entreprise
needs.
"""

from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from solo_ledger.models.documents import ActivityType
from solo_ledger.models.ledger import JournalCode


class AccountRef(BaseModel):
    """An account number with its label."""
    model_config = ConfigDict(frozen=True)

    number: str = Field(..., min_length=1, max_length=20)
    label: str


class ChartOfAccounts(BaseModel):
    """
    Immutable account-mapping configuration injected into the generator.
    """
    model_config = ConfigDict(frozen=True)

    clients: AccountRef
    suppliers: AccountRef
    bank: AccountRef
    goods_revenue: AccountRef
    services_revenue: AccountRef
    vat_collected: AccountRef
    vat_deductible: AccountRef
    default_charge: AccountRef

    charge_accounts: Mapping[str, AccountRef] = Field(
        default_factory=dict,
        description="Expense category -> charge account",
    )
    journal_labels: Mapping[JournalCode, str] = Field(default_factory=dict)

    unknown_client_name: str = "Client Divers"
    unknown_supplier_name: str = "Fournisseur Divers"

    @field_validator('charge_accounts', 'journal_labels')
    @classmethod
    def freeze_mapping(cls, v: Mapping) -> Mapping:
        """Expose tables read-only so a shared chart cannot be mutated."""
        return MappingProxyType(dict(v))

    def charge_account_for(self, category: str) -> AccountRef:
        """Charge account for an expense category; unmapped -> default."""
        return self.charge_accounts.get(category, self.default_charge)

    def is_mapped_category(self, category: str) -> bool:
        return category in self.charge_accounts

    def revenue_account_for(self, activity_type: ActivityType) -> AccountRef:
        """Goods sales book to 707, services and mixed activity to 706."""
        if activity_type == ActivityType.SALES:
            return self.goods_revenue
        return self.services_revenue

    def journal_label(self, code: JournalCode) -> str:
        return self.journal_labels.get(code, code.value)

    def with_categories(self, categories: Mapping[str, AccountRef]) -> "ChartOfAccounts":
        """Return a copy with extra (or overridden) category mappings."""
        merged = {**self.charge_accounts, **categories}
        return self.model_copy(update={"charge_accounts": MappingProxyType(merged)})


DEFAULT_CHART = ChartOfAccounts(
    clients=AccountRef(number="411000", label="Clients"),
    suppliers=AccountRef(number="401000", label="Fournisseurs"),
    bank=AccountRef(number="512000", label="Banque"),
    goods_revenue=AccountRef(number="707000", label="Ventes de marchandises"),
    services_revenue=AccountRef(number="706000", label="Prestations de services"),
    vat_collected=AccountRef(number="445710", label="TVA Collectée (20%)"),
    vat_deductible=AccountRef(number="445660", label="TVA Déductible sur ABS"),
    default_charge=AccountRef(number="606000", label="Achats divers"),
    charge_accounts={
        "Services": AccountRef(number="651000", label="Redevances Logiciels / SaaS"),
        "Restaurant": AccountRef(number="625700", label="Réceptions / Frais de repas"),
        "Deplacements": AccountRef(number="625100", label="Voyages et déplacements"),
        "Loyer": AccountRef(number="613000", label="Locations"),
    },
    journal_labels={
        JournalCode.SALES: "Journal des Ventes",
        JournalCode.PURCHASES: "Journal des Achats",
        JournalCode.BANK: "Journal de Banque",
        JournalCode.MISCELLANEOUS: "Opérations Diverses",
    },
)
