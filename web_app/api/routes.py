"""API routes implementation."""

from typing import List, Optional

from fastapi import APIRouter, Query, Request, HTTPException, Response, status
from datetime import datetime, timezone

from .schemas import (
    CreateLinkRequest,
    LinkResponse,
    HealthResponse,
    ErrorResponse,
    StatisticsResponse,
)
from linkledger.database.models import Link
from linkledger.errors import DuplicateCode, ExhaustedAttempts, InvalidFormat, NotFound
from linkledger.common.short_url import build_base_url, build_short_url, forwarded_path_prefix

router = APIRouter()


def _short_url(request: Request, code: str) -> str:
    """Build the public short URL for a code as seen by this request."""
    config = request.app.state.config

    base_url = build_base_url(
        headers=request.headers,
        fallback_base_url=config.base_url,
        request_scheme=request.url.scheme,
        request_host=request.headers.get("host"),
    )
    path_prefix = forwarded_path_prefix(request.headers) or config.path_prefix

    return build_short_url(code=code, base_url=base_url, path_prefix=path_prefix)


def _to_response(request: Request, link: Link) -> LinkResponse:
    return LinkResponse(
        code=link.code,
        url=link.url,
        created_at=link.created_at,
        last_clicked_at=link.last_clicked_at,
        click_count=link.click_count,
        short_url=_short_url(request, link.code),
    )


@router.post(
    "/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid url or code"},
        409: {"model": ErrorResponse, "description": "Code already exists"},
        503: {"model": ErrorResponse, "description": "No free code or storage unavailable"},
    },
    summary="Create short link",
    description="Create a short link. Optionally provide a custom 6-8 character code.",
)
async def create_link(request: Request, body: CreateLinkRequest):
    """Create a short link."""
    service = request.app.state.service

    try:
        link = await service.create_link(url=body.url, code=body.code)
    except InvalidFormat as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except DuplicateCode as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ExhaustedAttempts as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))

    return _to_response(request, link)


@router.get(
    "/links",
    response_model=List[LinkResponse],
    summary="List links",
    description="List links, newest first.",
)
async def list_links(request: Request, limit: Optional[int] = Query(None, ge=1, le=10000)):
    """List links."""
    service = request.app.state.service

    links = await service.list_links(limit)

    return [_to_response(request, link) for link in links]


@router.get(
    "/links/{code}",
    response_model=LinkResponse,
    responses={
        404: {"model": ErrorResponse, "description": "Code not found"},
    },
    summary="Get link",
    description="Get a link including its click count.",
)
async def get_link(request: Request, code: str):
    """Get a single link."""
    service = request.app.state.service

    try:
        link = await service.get_link(code)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    return _to_response(request, link)


@router.delete(
    "/links/{code}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={
        404: {"model": ErrorResponse, "description": "Code not found"},
    },
    summary="Delete link",
)
async def delete_link(request: Request, code: str):
    """Delete a link. The code becomes free for reuse immediately."""
    service = request.app.state.service

    if not await service.delete_link(code):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Code '{code}' not found",
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/stats",
    response_model=StatisticsResponse,
    summary="Get statistics",
    description="Get ledger-wide totals.",
)
async def get_statistics(request: Request):
    """Get ledger statistics."""
    service = request.app.state.service

    stats = await service.get_statistics()

    return StatisticsResponse(**stats)


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Check if the service can reach its database.",
)
async def health_check(request: Request):
    """Health check endpoint for monitoring."""
    service = request.app.state.service

    health = await service.health_check()

    return HealthResponse(
        status="healthy" if health["overall"] else "unhealthy",
        database="healthy" if health["database"] else "unhealthy",
        timestamp=datetime.now(timezone.utc),
    )
