"""Top-level routes: liveness probe and short-link redirects."""

from fastapi import APIRouter, Request, HTTPException, status
from fastapi.responses import RedirectResponse

from linkledger.allocator import CodeAllocator
from linkledger.errors import NotFound
from ..api.schemas import LivenessResponse

router = APIRouter()


@router.get("/healthz", response_model=LivenessResponse, include_in_schema=False)
async def liveness(request: Request):
    """Process-alive probe for load balancers. Does not touch the database."""
    config = request.app.state.config
    return LivenessResponse(ok=True, version=config.app_version)


@router.get("/{code}", include_in_schema=False)
async def redirect_to_url(request: Request, code: str):
    """Count the click and redirect to the original URL."""
    service = request.app.state.service

    try:
        # Anything that can't be a code is a miss without a database round trip
        if not CodeAllocator.validate(code):
            raise NotFound(code)
        url = await service.resolve(code)
    except NotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

    # 302 so browsers come back through us and every visit is counted
    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)
