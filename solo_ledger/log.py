"""
Logging setup

structlog is routed through stdlib logging and rendered as JSON lines.
This module imports nothing from the package so it can run first, from
solo_ledger/__init__.py, before any module-level logger is used.
"""

import logging
import sys

import structlog


def configure_logging(debug_mode: bool = False) -> None:
    """
    Configure structlog and the 'solo_ledger' stdlib logger.

    Runs once on package import with INFO level; call again with
    debug_mode=True to see DEBUG events (ledger computations, unmapped
    expense categories).
    """
    # no-op when the host application already configured logging
    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger("solo_ledger").setLevel(
        logging.DEBUG if debug_mode else logging.INFO
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
