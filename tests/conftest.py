"""Pytest configuration and fixtures."""

import pytest
from typing import AsyncGenerator

from httpx import ASGITransport, AsyncClient

from config import Config
from linkledger.allocator import CodeAllocator
from linkledger.database.sqlite import SQLiteLinkLedger
from linkledger.service import LinkService
from linkledger.common.logging_config import setup_logging
from web_app import create_app


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
async def ledger(tmp_path, logger) -> AsyncGenerator[SQLiteLinkLedger, None]:
    """Create a SQLite ledger in a throwaway file."""
    db = SQLiteLinkLedger(
        db_config=f"sqlite:///{tmp_path}/links.sqlite3",
        logger=logger,
    )
    await db.ensure_schema()

    yield db

    await db.close()


@pytest.fixture
def allocator(ledger, logger):
    """Create code allocator backed by the test ledger."""
    return CodeAllocator(ledger, logger=logger)


@pytest.fixture
async def service(ledger, allocator, logger) -> LinkService:
    """Create service instance."""
    return LinkService(
        ledger=ledger,
        allocator=allocator,
        logger=logger,
    )


@pytest.fixture
def config():
    return Config(
        database_url="sqlite:///./unused.sqlite3",
        base_url="http://testserver",
        app_version="test",
    )


@pytest.fixture
def app(ledger, service, config, logger):
    """Create test FastAPI app wired to the test ledger."""
    return create_app(
        ledger_instance=ledger,
        service_instance=service,
        config=config,
        logger=logger,
    )


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac


@pytest.fixture
def sample_urls():
    """Sample URLs for testing."""
    return [
        "https://example.com/test",
        "https://github.com/user/repo",
        "https://stackoverflow.com/questions/123456",
    ]
