"""Short code generation and allocation."""

import logging
import random
import re
import string
from typing import Optional, TYPE_CHECKING

from .errors import Collision, ExhaustedAttempts, InvalidFormat

if TYPE_CHECKING:
    from .database.base import LinkLedgerBase


class CodeAllocator:
    """Generate, validate and allocate short codes."""

    # Base62 characters (alphanumeric, case-sensitive)
    ALPHABET = string.ascii_uppercase + string.ascii_lowercase + string.digits
    MIN_LENGTH = 6
    MAX_LENGTH = 8
    CODE_PATTERN = re.compile(r"^[A-Za-z0-9]{6,8}$")

    # 62^6 is roughly 5.7e10 codes, so ten straight collisions only happen
    # when the space is close to full.
    DEFAULT_MAX_ATTEMPTS = 10

    def __init__(
        self,
        ledger: "LinkLedgerBase",
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize code allocator.

        Args:
            ledger: Ledger used to probe whether a code is taken
            max_attempts: Number of random codes to try before giving up
            rng: Random source (defaults to an OS-backed SystemRandom)
            logger: Optional logger
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

        self.ledger = ledger
        self.max_attempts = max_attempts
        self.rng = rng or random.SystemRandom()
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def validate(cls, code: str) -> bool:
        """Check that a code is 6-8 alphanumeric characters.

        Args:
            code: Code to validate

        Returns:
            True if valid format
        """
        if not isinstance(code, str):
            return False
        return cls.CODE_PATTERN.fullmatch(code) is not None

    def generate(self) -> str:
        """Generate a random code of random length between 6 and 8.

        The result is not checked against the ledger.

        Returns:
            Random short code
        """
        length = self.rng.randint(self.MIN_LENGTH, self.MAX_LENGTH)
        return ''.join(self.rng.choice(self.ALPHABET) for _ in range(length))

    async def allocate_unique(self, preferred: Optional[str] = None) -> str:
        """Produce a valid code that is not currently in use.

        The existence probe is advisory; the ledger's uniqueness constraint
        is what finally decides on insert.

        Args:
            preferred: Code requested by the caller, if any

        Returns:
            An available short code

        Raises:
            InvalidFormat: If preferred is malformed
            Collision: If preferred is already taken
            ExhaustedAttempts: If every generated code collided
        """
        if preferred is not None:
            if not self.validate(preferred):
                raise InvalidFormat(
                    f"Invalid code '{preferred}': must be {self.MIN_LENGTH}-{self.MAX_LENGTH} "
                    "letters or digits"
                )
            if await self.ledger.code_exists(preferred):
                self.logger.warning(f"Preferred code already in use: {preferred}")
                raise Collision(preferred)
            return preferred

        for attempt in range(1, self.max_attempts + 1):
            code = self.generate()
            if not await self.ledger.code_exists(code):
                if attempt > 1:
                    self.logger.debug(f"Generated code after {attempt} attempts: {code}")
                return code

        self.logger.error(f"Failed to generate a unique code after {self.max_attempts} attempts")
        raise ExhaustedAttempts(self.max_attempts)
