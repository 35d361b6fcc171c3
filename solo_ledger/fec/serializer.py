"""
FEC Serializer

Renders ledger lines as a Fichier des Écritures Comptables (article A.47 A-1
of the Livre des Procédures Fiscales).

FORMAT (bit-exact):
- Tab-separated, CRLF line terminator, UTF-8
- 18 fixed header columns, in order
- Dates as YYYYMMDD
- Amounts with exactly two decimals and a COMMA separator

DESIGN DECISION: Serialization is TOTAL. Any list of entries, including an
empty one, produces a file. No balance check happens here: correctness of
the postings belongs to the generator.
"""

from datetime import date
from typing import Iterable, Optional

from solo_ledger.models.ledger import AccountingEntry
from solo_ledger.models.money import Money


FEC_COLUMNS = (
    "JournalCode",
    "JournalLib",
    "EcritureNum",
    "EcritureDate",
    "CompteNum",
    "CompteLib",
    "CompteAuxNum",
    "CompteAuxLib",
    "PieceRef",
    "PieceDate",
    "EcritureLib",
    "Debit",
    "Credit",
    "EcritureLet",
    "DateLet",
    "ValidDate",
    "MontantDevise",
    "IdenDevise",
)

FIELD_SEPARATOR = "\t"
LINE_TERMINATOR = "\r\n"
DECIMAL_SEPARATOR = ","
CURRENCY_CODE = "EUR"
UNKNOWN_SIREN = "000000000"


def format_date(day: date) -> str:
    """YYYYMMDD."""
    return day.strftime("%Y%m%d")


def format_amount(amount: Money) -> str:
    """Two decimals, comma separator: Money('1234.5') -> '1234,50'."""
    return amount.to_fixed(2, decimal_separator=DECIMAL_SEPARATOR)


def clean_text(value: Optional[str]) -> str:
    """Empty for None; tabs and line breaks would break the row layout."""
    if not value:
        return ""
    return value.replace("\t", " ").replace("\r", " ").replace("\n", " ")


def entry_to_row(entry: AccountingEntry, entry_number: int) -> list[str]:
    """Render one entry as the 18 FEC fields."""
    entry_date = format_date(entry.date)
    return [
        entry.journal.value,
        clean_text(entry.journal_label),
        str(entry_number),
        entry_date,
        entry.account_number,
        clean_text(entry.account_label),
        clean_text(entry.aux_account_number),
        clean_text(entry.aux_account_label),
        clean_text(entry.reference),
        entry_date,                          # PieceDate
        clean_text(entry.label),
        format_amount(entry.debit),
        format_amount(entry.credit),
        clean_text(entry.lettering),
        entry_date if entry.lettering else "",  # DateLet
        entry_date,                          # ValidDate
        "",                                  # MontantDevise
        CURRENCY_CODE,
    ]


def serialize_fec(entries: Iterable[AccountingEntry]) -> str:
    """
    Serialize a ledger to FEC text.

    EcritureNum groups contiguous lines of the same source document: the
    counter moves on each time the source document changes from one line to
    the next.

    Returns:
        Header line plus one line per entry, joined with CRLF (no trailing
        terminator).
    """
    rows = [FIELD_SEPARATOR.join(FEC_COLUMNS)]

    current_document: Optional[str] = None
    entry_number = 0
    for entry in entries:
        if entry.source_document_id != current_document:
            current_document = entry.source_document_id
            entry_number += 1
        rows.append(FIELD_SEPARATOR.join(entry_to_row(entry, entry_number)))

    return LINE_TERMINATOR.join(rows)


def encode_fec(content: str) -> bytes:
    """FEC files are UTF-8."""
    return content.encode("utf-8")


def fec_filename(siret: Optional[str], on_date: date) -> str:
    """
    Statutory file name: {SIREN}FEC{YYYYMMDD}.txt

    SIREN is the first 9 characters of the SIRET with whitespace removed,
    '000000000' when no SIRET is known.
    """
    compact = "".join(siret.split()) if siret else ""
    siren = compact[:9] if compact else UNKNOWN_SIREN
    return f"{siren}FEC{format_date(on_date)}.txt"
