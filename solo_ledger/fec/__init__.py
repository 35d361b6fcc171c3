"""FEC (Fichier des Écritures Comptables) export package."""

from solo_ledger.fec.serializer import (
    FEC_COLUMNS,
    encode_fec,
    fec_filename,
    format_amount,
    format_date,
    serialize_fec,
)

__all__ = [
    "FEC_COLUMNS",
    "encode_fec",
    "fec_filename",
    "format_amount",
    "format_date",
    "serialize_fec",
]
