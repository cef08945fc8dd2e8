"""Error types for the link ledger."""


class LinkLedgerError(Exception):
    """Base class for link ledger errors."""


class InvalidFormat(LinkLedgerError, ValueError):
    """Malformed URL or short code supplied by the caller."""


class DuplicateCode(LinkLedgerError):
    """The storage layer rejected an insert because the code already exists."""

    def __init__(self, code: str):
        super().__init__(f"Code '{code}' already exists")
        self.code = code


class Collision(DuplicateCode):
    """A preferred code was already in use when it was requested."""


class NotFound(LinkLedgerError):
    """No live link for the code."""

    def __init__(self, code: str):
        super().__init__(f"Code '{code}' not found")
        self.code = code


class ExhaustedAttempts(LinkLedgerError):
    """The allocator could not find a free code within its attempt bound."""

    def __init__(self, attempts: int):
        super().__init__(f"Could not generate a unique code after {attempts} attempts")
        self.attempts = attempts


class StorageUnavailable(LinkLedgerError):
    """The storage backend failed or timed out."""
