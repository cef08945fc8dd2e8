"""Data models for the link ledger."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional


def _as_utc(value: Any) -> Optional[datetime]:
    """Normalize a stored timestamp to an aware UTC datetime."""
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


@dataclass
class Link:
    """Represents a short link row."""

    code: str
    url: str
    created_at: datetime
    last_clicked_at: Optional[datetime] = None
    click_count: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "code": self.code,
            "url": self.url,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "last_clicked_at": self.last_clicked_at.isoformat() if self.last_clicked_at else None,
            "click_count": self.click_count,
        }

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Link":
        """Create from a database row (asyncpg Record or sqlite3.Row)."""
        return cls(
            code=row["code"],
            url=row["url"],
            created_at=_as_utc(row["created_at"]),
            last_clicked_at=_as_utc(row["last_clicked_at"]),
            click_count=row["click_count"],
        )
