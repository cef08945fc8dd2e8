"""Core code allocation and click accounting for the link ledger."""

from .allocator import CodeAllocator
from .service import LinkService
from .errors import (
    LinkLedgerError,
    InvalidFormat,
    DuplicateCode,
    Collision,
    NotFound,
    ExhaustedAttempts,
    StorageUnavailable,
)

__all__ = [
    "CodeAllocator",
    "LinkService",
    "LinkLedgerError",
    "InvalidFormat",
    "DuplicateCode",
    "Collision",
    "NotFound",
    "ExhaustedAttempts",
    "StorageUnavailable",
]
