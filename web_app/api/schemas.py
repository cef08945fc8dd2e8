"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Optional
from datetime import datetime


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CreateLinkRequest(CamelModel):
    """Request to create a short link."""

    url: str = Field(..., description="The URL to shorten", min_length=1)
    code: Optional[str] = Field(None, description="Optional custom code (6-8 letters or digits)")

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "url": "https://example.com/very/long/path/to/resource",
                },
                {
                    "url": "https://github.com/user/repo",
                    "code": "myrepo1"
                }
            ]
        },
    )


class LinkResponse(CamelModel):
    """A stored link."""

    code: str = Field(..., description="The short code")
    url: str = Field(..., description="The target URL")
    created_at: datetime = Field(..., description="Creation timestamp")
    last_clicked_at: Optional[datetime] = Field(None, description="Most recent redirect")
    click_count: int = Field(..., description="Number of redirects served")
    short_url: str = Field(..., description="The complete short URL")


class HealthResponse(CamelModel):
    """Health check response."""

    status: str = Field(..., description="Overall status")
    database: str = Field(..., description="Database status")
    timestamp: datetime = Field(..., description="Check timestamp")


class LivenessResponse(BaseModel):
    """Process liveness response."""

    ok: bool
    version: str


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    detail: Optional[str] = Field(None, description="Detailed error information")


class StatisticsResponse(CamelModel):
    """Statistics response."""

    total_links: int
    total_clicks: int
    database: str
