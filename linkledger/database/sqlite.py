"""SQLite implementation of the link ledger."""

import asyncio
import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from urllib.parse import urlparse

from ..errors import DuplicateCode, StorageUnavailable
from .base import LinkLedgerBase
from .models import Link


SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS links (
	id INTEGER PRIMARY KEY AUTOINCREMENT,
	code TEXT NOT NULL UNIQUE,
	url TEXT NOT NULL,
	created_at TEXT NOT NULL,
	last_clicked_at TEXT,
	click_count INTEGER NOT NULL DEFAULT 0 CHECK (click_count >= 0)
);

CREATE INDEX IF NOT EXISTS links_created_at_idx ON links (created_at DESC, id DESC);
"""

LINK_COLUMNS = "code, url, created_at, last_clicked_at, click_count"


def _now() -> str:
    # Fixed-width ISO strings keep created_at ordering lexicographic
    return datetime.now(timezone.utc).isoformat(timespec="microseconds")


def sqlite_path_from_url(db_config: str) -> str:
    """Extract the filesystem path from a sqlite:/// URL or return a bare path."""
    if db_config.startswith("sqlite:"):
        parsed = urlparse(db_config)
        path = parsed.path
        # sqlite:///relative/file.db -> relative/file.db, sqlite:////abs/file.db -> /abs/file.db
        if path.startswith("//"):
            path = path[1:]
        elif path.startswith("/"):
            path = path[1:]
        return path
    return db_config


class SQLiteLinkLedger(LinkLedgerBase):
    """SQLite implementation of link ledger operations.

    Every call runs in a worker thread with its own connection. Writes use
    BEGIN IMMEDIATE so concurrent writers queue on the database lock.
    """

    backend_name = "sqlite"

    def __init__(
        self,
        db_config: str,
        busy_timeout_seconds: float = 30,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize SQLite ledger.

        Args:
            db_config: sqlite:///path/to/file.db URL or a plain file path
            busy_timeout_seconds: How long a write waits for the database lock
            logger: Optional logger instance
        """
        super().__init__(db_config)

        self.logger = logger or logging.getLogger(__name__)
        self.busy_timeout_seconds = busy_timeout_seconds
        self.path = sqlite_path_from_url(db_config)

        if not self.path or self.path == ":memory:" or "mode=memory" in self.path:
            raise ValueError("SQLite ledger needs a file path; in-memory databases are not shared between connections")

        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

    @contextmanager
    def _connect(self):
        try:
            conn = sqlite3.connect(
                self.path,
                timeout=self.busy_timeout_seconds,
                isolation_level=None,
            )
        except sqlite3.Error as e:
            self.logger.error(f"Database error: {e}")
            raise StorageUnavailable(str(e)) from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as e:
            self.logger.error(f"Database error: {e}")
            raise StorageUnavailable(str(e)) from e
        finally:
            conn.close()

    @contextmanager
    def _transaction(self):
        """Open a write transaction that commits on success and rolls back on error."""
        with self._connect() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")

    def _ensure_schema_sync(self) -> None:
        with self._connect() as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.executescript(SCHEMA_SQL)

    def _create_sync(self, code: str, url: str) -> Link:
        try:
            with self._transaction() as conn:
                # fetchall steps the statement to completion before COMMIT
                rows = conn.execute(
                    f"""
                    INSERT INTO links (code, url, created_at, last_clicked_at, click_count)
                    VALUES (?, ?, ?, NULL, 0)
                    RETURNING {LINK_COLUMNS}
                    """,
                    (code, url, _now()),
                ).fetchall()
        except sqlite3.IntegrityError as e:
            raise DuplicateCode(code) from e
        return Link.from_row(rows[0])

    def _get_sync(self, code: str) -> Optional[Link]:
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {LINK_COLUMNS} FROM links WHERE code = ?",
                (code,),
            ).fetchone()
        return Link.from_row(row) if row else None

    def _list_sync(self, limit: Optional[int]) -> List[Link]:
        # LIMIT -1 means no limit in SQLite
        with self._connect() as conn:
            rows = conn.execute(
                f"""
                SELECT {LINK_COLUMNS}
                FROM links
                ORDER BY created_at DESC, id DESC
                LIMIT ?
                """,
                (-1 if limit is None else limit,),
            ).fetchall()
        return [Link.from_row(row) for row in rows]

    def _delete_sync(self, code: str) -> bool:
        with self._transaction() as conn:
            cur = conn.execute("DELETE FROM links WHERE code = ?", (code,))
            return cur.rowcount > 0

    def _record_click_sync(self, code: str) -> Optional[str]:
        with self._transaction() as conn:
            rows = conn.execute(
                """
                UPDATE links
                SET click_count = click_count + 1, last_clicked_at = ?
                WHERE code = ?
                RETURNING url
                """,
                (_now(), code),
            ).fetchall()
        return rows[0]["url"] if rows else None

    def _code_exists_sync(self, code: str) -> bool:
        with self._connect() as conn:
            row = conn.execute("SELECT 1 FROM links WHERE code = ?", (code,)).fetchone()
        return row is not None

    def _ping_sync(self) -> None:
        with self._connect() as conn:
            conn.execute("SELECT 1 FROM links LIMIT 1").fetchall()

    def _statistics_sync(self) -> Dict[str, Any]:
        with self._connect() as conn:
            row = conn.execute(
                "SELECT COUNT(*) AS total_links, COALESCE(SUM(click_count), 0) AS total_clicks FROM links"
            ).fetchone()
        return {
            "total_links": row["total_links"],
            "total_clicks": row["total_clicks"],
            "database": self.backend_name,
        }

    async def ensure_schema(self) -> None:
        self.logger.info(f"Creating links table in {self.path} if not exists...")
        await asyncio.to_thread(self._ensure_schema_sync)

    async def create(self, code: str, url: str) -> Link:
        try:
            link = await asyncio.to_thread(self._create_sync, code, url)
        except DuplicateCode:
            self.logger.warning(f"Code already exists: {code}")
            raise
        self.logger.info(f"Created link: {code} -> {url}")
        return link

    async def get(self, code: str) -> Optional[Link]:
        return await asyncio.to_thread(self._get_sync, code)

    async def list_links(self, limit: Optional[int] = None) -> List[Link]:
        return await asyncio.to_thread(self._list_sync, limit)

    async def delete(self, code: str) -> bool:
        deleted = await asyncio.to_thread(self._delete_sync, code)
        if deleted:
            self.logger.info(f"Deleted link: {code}")
        else:
            self.logger.warning(f"Link not found for deletion: {code}")
        return deleted

    async def record_click_and_resolve(self, code: str) -> Optional[str]:
        url = await asyncio.to_thread(self._record_click_sync, code)
        if url is None:
            self.logger.warning(f"Code not found: {code}")
        return url

    async def code_exists(self, code: str) -> bool:
        return await asyncio.to_thread(self._code_exists_sync, code)

    async def get_statistics(self) -> Dict[str, Any]:
        return await asyncio.to_thread(self._statistics_sync)

    async def health_check(self) -> bool:
        try:
            await asyncio.to_thread(self._ping_sync)
            return True
        except StorageUnavailable as e:
            self.logger.error(f"Health check failed: {e}")
            return False

    async def close(self) -> None:
        """Nothing to release; connections are closed after every call."""
        pass
