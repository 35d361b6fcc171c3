"""
Solo Ledger - Source Package

Double-entry bookkeeping and FEC export for solo entrepreneurs
(French micro-entreprise).

DESIGN PRINCIPLES:
1. The ledger is derived, never stored: recomputed from documents on demand
2. Debit always equals credit, per source document
3. Money is Decimal, never float
4. Books are immutable: cancellation is a reversal, not a deletion
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Solo Ledger Team"

from solo_ledger.log import configure_logging

# JSON lines on stderr at INFO until configure_logging(debug_mode=...) is called again
configure_logging()
