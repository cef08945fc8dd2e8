"""Storage layer for the link ledger."""

import logging
from typing import Optional
from urllib.parse import urlparse

from .base import LinkLedgerBase
from .models import Link
from .postgres import PostgresLinkLedger
from .sqlite import SQLiteLinkLedger


def create_ledger(
    database_url: str,
    pool_max_size: int = 10,
    timeout_seconds: int = 30,
    logger: Optional[logging.Logger] = None,
) -> LinkLedgerBase:
    """Build a ledger for the backend named by the URL scheme.

    Args:
        database_url: postgresql://..., postgres://... or sqlite:///path
        pool_max_size: Connection pool size (PostgreSQL only)
        timeout_seconds: Command timeout or busy timeout in seconds
        logger: Optional logger instance

    Returns:
        Ledger instance
    """
    scheme = urlparse(database_url).scheme.lower()

    if scheme in ("postgres", "postgresql"):
        return PostgresLinkLedger(
            db_config=database_url,
            pool_max_size=pool_max_size,
            connection_timeout_seconds=timeout_seconds,
            logger=logger,
        )
    if scheme == "sqlite":
        return SQLiteLinkLedger(
            db_config=database_url,
            busy_timeout_seconds=timeout_seconds,
            logger=logger,
        )

    raise ValueError(f"Unsupported database URL scheme: '{scheme}'. Choose 'postgresql' or 'sqlite'.")


__all__ = ["LinkLedgerBase", "PostgresLinkLedger", "SQLiteLinkLedger", "Link", "create_ledger"]
