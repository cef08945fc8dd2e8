"""Abstract base class for link ledger storage backends."""

from abc import ABC, abstractmethod
from typing import Optional, List, Dict, Any

from .models import Link


class LinkLedgerBase(ABC):
    """Abstract base class for link ledger operations.

    Implementations must enforce code uniqueness with a storage-level
    constraint and record clicks with a single atomic statement.
    """

    backend_name = "unknown"

    def __init__(self, db_config: str):
        """Initialize storage backend.

        Args:
            db_config: Database connection string
        """
        self.db_config = db_config

    @abstractmethod
    async def ensure_schema(self) -> None:
        """Create the links table and its indexes if they don't exist."""
        pass

    @abstractmethod
    async def create(self, code: str, url: str) -> Link:
        """Insert a new link.

        Args:
            code: The short code to use
            url: The target URL

        Returns:
            The stored link

        Raises:
            DuplicateCode: If the code already exists
            StorageUnavailable: On backend failure
        """
        pass

    @abstractmethod
    async def get(self, code: str) -> Optional[Link]:
        """Get a link by code.

        Args:
            code: The short code to lookup

        Returns:
            The link if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_links(self, limit: Optional[int] = None) -> List[Link]:
        """List links, newest creation first.

        Args:
            limit: Maximum number of links to return (all if None)

        Returns:
            List of links
        """
        pass

    @abstractmethod
    async def delete(self, code: str) -> bool:
        """Delete a link.

        Args:
            code: The short code to delete

        Returns:
            True if a row was removed, False if the code did not exist
        """
        pass

    @abstractmethod
    async def record_click_and_resolve(self, code: str) -> Optional[str]:
        """Count a click and return the target URL in one atomic step.

        Args:
            code: The short code being redirected

        Returns:
            The target URL, or None if the code does not exist
        """
        pass

    @abstractmethod
    async def code_exists(self, code: str) -> bool:
        """Check if a code is currently in use.

        Args:
            code: The short code to check

        Returns:
            True if exists, False otherwise
        """
        pass

    @abstractmethod
    async def get_statistics(self) -> Dict[str, Any]:
        """Get ledger statistics.

        Returns:
            Dictionary with total_links, total_clicks and database
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if storage is reachable.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release storage connections."""
        pass
