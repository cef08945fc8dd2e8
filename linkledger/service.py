"""Business logic service for the link ledger."""

import logging
from typing import Optional, Dict, Any, List

from .allocator import CodeAllocator
from .database.base import LinkLedgerBase
from .database.models import Link
from .errors import DuplicateCode, ExhaustedAttempts, InvalidFormat, NotFound
from .common.validators import is_valid_url, is_valid_code


class LinkService:
    """Service layer composing the code allocator and the ledger."""

    def __init__(
        self,
        ledger: LinkLedgerBase,
        allocator: Optional[CodeAllocator] = None,
        logger: Optional[logging.Logger] = None,
        max_create_attempts: int = CodeAllocator.DEFAULT_MAX_ATTEMPTS,
    ):
        """Initialize link service.

        Args:
            ledger: Storage backend
            allocator: Optional code allocator (built on the ledger if omitted)
            logger: Optional logger
            max_create_attempts: Inserts to try when a generated code loses a race
        """
        self.ledger = ledger
        self.logger = logger or logging.getLogger(__name__)
        self.allocator = allocator or CodeAllocator(ledger, logger=self.logger)
        self.max_create_attempts = max_create_attempts

    async def create_link(self, url: str, code: Optional[str] = None) -> Link:
        """Create a new short link.

        Args:
            url: The target URL
            code: Optional caller-chosen code (empty means generate one)

        Returns:
            The stored link

        Raises:
            InvalidFormat: If url or code is malformed
            Collision: If the chosen code is already in use
            DuplicateCode: If the chosen code was taken between check and insert
            ExhaustedAttempts: If no free random code was found
        """
        is_valid, error = is_valid_url(url)
        if not is_valid:
            raise InvalidFormat(f"Invalid URL: {error}")

        if code:
            is_valid, error = is_valid_code(code, CodeAllocator.MIN_LENGTH, CodeAllocator.MAX_LENGTH)
            if not is_valid:
                raise InvalidFormat(f"Invalid code: {error}")

            code = await self.allocator.allocate_unique(code)
            link = await self.ledger.create(code, url)
        else:
            link = await self._create_with_generated_code(url)

        self.logger.info(f"Created short link: {link.code} -> {url}")
        return link

    async def _create_with_generated_code(self, url: str) -> Link:
        """Allocate and insert, retrying when another writer wins the code first."""
        for attempt in range(1, self.max_create_attempts + 1):
            code = await self.allocator.allocate_unique()
            try:
                return await self.ledger.create(code, url)
            except DuplicateCode:
                self.logger.debug(f"Lost race for generated code {code} (attempt {attempt})")

        raise ExhaustedAttempts(self.max_create_attempts)

    async def get_link(self, code: str) -> Link:
        """Get a link.

        Raises:
            NotFound: If the code does not exist
        """
        link = await self.ledger.get(code)
        if link is None:
            raise NotFound(code)
        return link

    async def list_links(self, limit: Optional[int] = None) -> List[Link]:
        """List links, newest first."""
        return await self.ledger.list_links(limit)

    async def delete_link(self, code: str) -> bool:
        """Delete a link.

        Returns:
            True if deleted, False if it did not exist
        """
        return await self.ledger.delete(code)

    async def resolve(self, code: str) -> str:
        """Record a click and return the target URL.

        Raises:
            NotFound: If the code does not exist
        """
        url = await self.ledger.record_click_and_resolve(code)
        if url is None:
            raise NotFound(code)
        self.logger.debug(f"Resolved {code} -> {url}")
        return url

    async def get_statistics(self) -> Dict[str, Any]:
        return await self.ledger.get_statistics()

    async def health_check(self) -> Dict[str, bool]:
        """Perform health check.

        Returns:
            Dictionary with health status
        """
        db_healthy = await self.ledger.health_check()
        return {
            "database": db_healthy,
            "overall": db_healthy,
        }

    async def close(self) -> None:
        """Close storage connections."""
        await self.ledger.close()
