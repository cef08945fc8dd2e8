"""Tests for code generation and allocation."""

import random
import re

import pytest

from linkledger.allocator import CodeAllocator
from linkledger.errors import Collision, DuplicateCode, ExhaustedAttempts, InvalidFormat


CODE_RE = re.compile(r"^[A-Za-z0-9]{6,8}$")


class FakeLedger:
    """Only answers code_exists, from a fixed set of taken codes."""

    def __init__(self, taken=(), always_taken=False):
        self.taken = set(taken)
        self.always_taken = always_taken
        self.probes = []

    async def code_exists(self, code):
        self.probes.append(code)
        return self.always_taken or code in self.taken


class TestValidate:
    """Test code format validation."""

    @pytest.mark.parametrize("code", ["abc123", "ABCdef1", "Zz09Zz09", "000000"])
    def test_accepts_six_to_eight_alphanumerics(self, code):
        assert CodeAllocator.validate(code)

    @pytest.mark.parametrize(
        "code",
        ["abc12", "abcdef123", "abc-123", "abc_123", "abc 123", "abcé12", "", None],
    )
    def test_rejects_everything_else(self, code):
        assert not CodeAllocator.validate(code)


class TestGenerate:
    """Test random code generation."""

    def test_generated_codes_are_valid(self):
        allocator = CodeAllocator(FakeLedger(), rng=random.Random(1234))

        for _ in range(500):
            assert CODE_RE.match(allocator.generate())

    def test_generated_lengths_cover_range(self):
        allocator = CodeAllocator(FakeLedger(), rng=random.Random(42))

        lengths = {len(allocator.generate()) for _ in range(300)}
        assert lengths == {6, 7, 8}

    def test_generated_characters_cover_alphabet_classes(self):
        allocator = CodeAllocator(FakeLedger(), rng=random.Random(7))

        chars = set("".join(allocator.generate() for _ in range(300)))
        assert chars & set("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
        assert chars & set("abcdefghijklmnopqrstuvwxyz")
        assert chars & set("0123456789")
        assert chars <= set(CodeAllocator.ALPHABET)

    def test_alphabet_has_62_characters(self):
        assert len(set(CodeAllocator.ALPHABET)) == 62

    def test_rejects_non_positive_attempt_bound(self):
        with pytest.raises(ValueError):
            CodeAllocator(FakeLedger(), max_attempts=0)


@pytest.mark.asyncio
class TestAllocateUnique:
    """Test allocation against the ledger."""

    async def test_preferred_code_returned_when_free(self):
        allocator = CodeAllocator(FakeLedger())

        assert await allocator.allocate_unique("mylink1") == "mylink1"

    async def test_preferred_code_invalid(self):
        ledger = FakeLedger()
        allocator = CodeAllocator(ledger)

        with pytest.raises(InvalidFormat):
            await allocator.allocate_unique("bad-code")
        assert ledger.probes == []

    async def test_preferred_code_taken(self):
        allocator = CodeAllocator(FakeLedger(taken={"mylink1"}))

        with pytest.raises(Collision) as exc_info:
            await allocator.allocate_unique("mylink1")
        assert isinstance(exc_info.value, DuplicateCode)
        assert exc_info.value.code == "mylink1"

    async def test_generated_code_skips_taken(self):
        # Same seed twice: the first draw of the second rng matches the first allocator's
        first = CodeAllocator(FakeLedger(), rng=random.Random(99)).generate()
        ledger = FakeLedger(taken={first})
        allocator = CodeAllocator(ledger, rng=random.Random(99))

        code = await allocator.allocate_unique()

        assert code != first
        assert CODE_RE.match(code)
        assert len(ledger.probes) == 2

    async def test_exhausted_after_bound(self):
        ledger = FakeLedger(always_taken=True)
        allocator = CodeAllocator(ledger, max_attempts=10)

        with pytest.raises(ExhaustedAttempts) as exc_info:
            await allocator.allocate_unique()

        assert exc_info.value.attempts == 10
        assert len(ledger.probes) == 10

    async def test_against_real_ledger(self, ledger, allocator):
        await ledger.create("taken01", "https://example.com")

        with pytest.raises(Collision):
            await allocator.allocate_unique("taken01")

        code = await allocator.allocate_unique()
        assert code != "taken01"
        assert not await ledger.code_exists(code)
